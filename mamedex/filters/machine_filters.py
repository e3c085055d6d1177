"""Filters removing devices, BIOS sets, mechanical, modified and clone machines."""

import logging
from enum import Enum
from typing import Callable, Dict

from ..catalog.models import Machine
from ..catalog.store import MachineStore
from .removal import remove_matching

logger = logging.getLogger(__name__)

MODIFIED_KEYWORDS = ("bootleg", "PlayChoice-10", "Nintendo Super System", "prototype")
INVALID_MANUFACTURERS = ("unknown", "bootleg")
INVALID_PLAYERS = ("BIOS", "Device", "Non-arcade")


def _contains_any(value: str, keywords) -> bool:
    lowered = value.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def is_device(machine: Machine) -> bool:
    return bool(machine.is_device)


def is_bios(machine: Machine) -> bool:
    return bool(machine.is_bios)


def is_mechanical(machine: Machine) -> bool:
    return bool(machine.is_mechanical)


def is_modified_description(machine: Machine) -> bool:
    """Bootlegs, prototypes and PlayChoice-10 / Nintendo Super System sets."""
    return _contains_any(machine.description or "", MODIFIED_KEYWORDS)


def has_invalid_manufacturer(machine: Machine) -> bool:
    """Check the cleaned manufacturer for unknown or bootleg makers."""
    manufacturer = machine.derived.manufacturer
    return manufacturer is not None and _contains_any(manufacturer, INVALID_MANUFACTURERS)


def has_invalid_players(machine: Machine) -> bool:
    """Check the raw nplayers value for BIOS, device and non-arcade markers."""
    return machine.players is not None and _contains_any(machine.players, INVALID_PLAYERS)


def is_modified(machine: Machine) -> bool:
    return (
        is_modified_description(machine)
        or has_invalid_manufacturer(machine)
        or has_invalid_players(machine)
    )


def is_clone(machine: Machine) -> bool:
    return machine.is_clone()


class MachineFilter(Enum):
    """Machine filters; ALL matches anything another variant matches."""
    DEVICE = "device"
    BIOS = "bios"
    MECHANICAL = "mechanical"
    MODIFIED = "modified"
    CLONES = "clones"
    ALL = "all"

    def applies(self, machine: Machine) -> bool:
        """Check whether this filter selects the machine for removal."""
        if self is MachineFilter.ALL:
            return any(
                predicate(machine) for predicate in FILTER_PREDICATES.values()
            )
        return FILTER_PREDICATES[self](machine)


FILTER_PREDICATES: Dict[MachineFilter, Callable[[Machine], bool]] = {
    MachineFilter.DEVICE: is_device,
    MachineFilter.BIOS: is_bios,
    MachineFilter.MECHANICAL: is_mechanical,
    MachineFilter.MODIFIED: is_modified,
    MachineFilter.CLONES: is_clone,
}


def remove_machines_by_filter(store: MachineStore, machine_filter: MachineFilter) -> int:
    """Remove machines matching a filter.

    Args:
        store: Machine store to filter
        machine_filter: Filter to apply

    Returns:
        Number of machines removed

    Raises:
        NoDataLoadedError: If the store is empty
    """
    removed = remove_matching(store, machine_filter.applies)
    logger.info(f"Removed {removed} machines with filter {machine_filter.value}")
    return removed
