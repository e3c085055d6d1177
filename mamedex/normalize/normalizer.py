"""Apply the normalization transforms to every machine in a store."""

import logging

from ..catalog.store import MachineStore
from .manufacturers import clean_manufacturer
from .names import clean_name, normalize_year
from .players import normalize_players

logger = logging.getLogger(__name__)


def normalize_machines(store: MachineStore) -> int:
    """Populate ``Machine.derived`` from the raw source fields.

    Writes the display name, cleaned manufacturer, readable players string
    and normalized year. Raw fields are never modified, so this can run
    again after more side-files are read.

    Args:
        store: Machine store to normalize

    Returns:
        Number of machines normalized

    Raises:
        NoDataLoadedError: If the store is empty
    """
    store.require_data()

    count = 0
    with store.exclusive():
        for machine in store:
            derived = machine.derived
            derived.name = clean_name(machine.description) if machine.description else ""
            if machine.manufacturer is not None:
                derived.manufacturer = clean_manufacturer(machine.manufacturer)
            derived.players = normalize_players(machine.players)
            if machine.year is not None:
                derived.year = normalize_year(machine.year)
            count += 1

    logger.info(f"Normalized {count} machines")
    return count
