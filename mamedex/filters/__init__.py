"""Filters that remove machines from the store.

Every removal pass returns the number of machines removed; callers must
rebuild the derived indices afterwards.
"""

from .machine_filters import (
    FILTER_PREDICATES,
    MachineFilter,
    has_invalid_manufacturer,
    has_invalid_players,
    is_clone,
    is_modified,
    is_modified_description,
    remove_machines_by_filter,
)
from .categories import (
    NON_GAME_CATEGORIES,
    has_excluded_category,
    remove_non_game_categories,
    remove_non_games,
)
from .removal import remove_matching

__all__ = [
    "FILTER_PREDICATES",
    "MachineFilter",
    "has_invalid_manufacturer",
    "has_invalid_players",
    "is_clone",
    "is_modified",
    "is_modified_description",
    "remove_machines_by_filter",
    "NON_GAME_CATEGORIES",
    "has_excluded_category",
    "remove_non_game_categories",
    "remove_non_games",
    "remove_matching",
]

# Names accepted by the config file and the --filter option
FILTER_NAMES = tuple(f.value for f in MachineFilter) + ("non_game_categories", "non_games")
__all__.append("FILTER_NAMES")
