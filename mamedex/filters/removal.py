"""Two-phase removal pass shared by every filter."""

import logging
from typing import Callable

from ..catalog.models import Machine
from ..catalog.store import MachineStore

logger = logging.getLogger(__name__)


def remove_matching(store: MachineStore, predicate: Callable[[Machine], bool]) -> int:
    """Remove every machine matching a predicate.

    The whole store is scanned first and only then are the matches
    removed. Removal never cascades to clones or parents.

    Args:
        store: Machine store to filter
        predicate: Returns True for machines to remove

    Returns:
        Number of machines removed

    Raises:
        NoDataLoadedError: If the store is empty
    """
    store.require_data()

    with store.exclusive():
        to_remove = [machine.name for machine in store if predicate(machine)]
        for name in to_remove:
            store.remove(name)

    logger.debug(f"Removed {len(to_remove)} machines, {len(store)} remaining")
    return len(to_remove)
