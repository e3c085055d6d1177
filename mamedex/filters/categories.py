"""Category-based removal of non-arcade machines."""

import logging
from typing import Collection, Optional

from ..catalog.models import Machine
from ..catalog.store import MachineStore
from .machine_filters import MachineFilter
from .removal import remove_matching

logger = logging.getLogger(__name__)

# catver.ini categories that are not arcade games
NON_GAME_CATEGORIES = frozenset({
    "Board Game",
    "Calculator",
    "Card Games",
    "Casino",
    "Computer",
    "Computer Graphic Workstation",
    "Digital Camera",
    "Digital Simulator",
    "Electromechanical",
    "Game",
    "Game Console",
    "Game Console/Computer",
    "Handheld",
    "Medical Equipment",
    "Misc.",
    "MultiGame",
    "Multiplay",
    "Music",
    "Player",
    "Printer",
    "Radio",
    "Rhythm",
    "Simulation",
    "Slot Machine",
    "System",
    "Tablet",
    "Tabletop",
    "Telephone",
    "Touchscreen",
    "TTL * Ball & Paddle",
    "TTL * Driving",
    "TTL * Maze",
    "TTL * Quiz",
    "TTL * Shooter",
    "TTL * Sports",
    "TV Bundle",
    "Utilities",
    "Watch",
})


def has_excluded_category(
    machine: Machine, denylist: Collection[str] = NON_GAME_CATEGORIES
) -> bool:
    """Uncategorized machines and denylisted categories are excluded."""
    return machine.category is None or machine.category in denylist


def remove_non_game_categories(
    store: MachineStore, denylist: Optional[Collection[str]] = None
) -> int:
    """Remove uncategorized machines and machines in a non-game category.

    Args:
        store: Machine store to filter
        denylist: Categories to remove (default: NON_GAME_CATEGORIES)

    Returns:
        Number of machines removed

    Raises:
        NoDataLoadedError: If the store is empty
    """
    categories = NON_GAME_CATEGORIES if denylist is None else frozenset(denylist)
    removed = remove_matching(store, lambda m: has_excluded_category(m, categories))
    logger.info(f"Removed {removed} machines by non game categories")
    return removed


def remove_non_games(store: MachineStore) -> int:
    """Remove every non-game in one pass: all machine filters plus categories."""
    removed = remove_matching(
        store,
        lambda m: MachineFilter.ALL.applies(m) or has_excluded_category(m),
    )
    logger.info(f"Removed {removed} non game machines")
    return removed
