"""Machine catalog: data model, entity store and derived indices."""

from .models import (
    BiosSet,
    DerivedData,
    DeviceRef,
    Disk,
    HistorySection,
    Machine,
    Resource,
    Rom,
    Sample,
    Software,
)
from .store import MachineStore
from .indices import DerivedIndices, Index

__all__ = [
    "BiosSet",
    "DerivedData",
    "DeviceRef",
    "Disk",
    "HistorySection",
    "Machine",
    "Resource",
    "Rom",
    "Sample",
    "Software",
    "MachineStore",
    "DerivedIndices",
    "Index",
]
