"""Machine catalog data model.

A ``Machine`` is created once by the MAME XML reader and then enriched in
place by the side-file readers and the normalization pass. Normalization
outputs live in ``Machine.derived`` so the raw source fields are never
overwritten and normalization can be re-run.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Rom:
    """Represents a ROM file requirement."""
    name: str
    size: int = 0
    merge: Optional[str] = None
    status: Optional[str] = None
    crc: Optional[str] = None
    sha1: Optional[str] = None


@dataclass
class BiosSet:
    """Represents a selectable BIOS set."""
    name: str
    description: str = ""


@dataclass
class DeviceRef:
    name: str


@dataclass
class Software:
    name: str


@dataclass
class Sample:
    name: str


@dataclass
class Disk:
    """Represents a CHD disk requirement."""
    name: str
    sha1: Optional[str] = None
    merge: Optional[str] = None
    status: Optional[str] = None
    region: Optional[str] = None


@dataclass
class HistorySection:
    """A named block of history.xml text with a fixed display order (1-10)."""
    name: str
    text: str
    order: int = 1


@dataclass
class Resource:
    """A media resource (snap, flyer, marquee...) from the resources dat."""
    type: str
    name: str
    size: int = 0
    crc: str = ""
    sha1: str = ""


@dataclass
class DerivedData:
    """Normalization outputs, kept apart from the raw source fields."""
    name: Optional[str] = None
    manufacturer: Optional[str] = None
    players: Optional[str] = None
    is_parent: Optional[bool] = None
    year: Optional[str] = None


@dataclass
class Machine:
    """Represents a MAME machine and everything merged onto it."""
    name: str  # shortname, join key for every source
    source_file: Optional[str] = None
    rom_of: Optional[str] = None
    clone_of: Optional[str] = None
    is_bios: Optional[bool] = None
    is_device: Optional[bool] = None
    runnable: Optional[bool] = None
    is_mechanical: Optional[bool] = None
    sample_of: Optional[str] = None
    description: Optional[str] = None
    year: Optional[str] = None
    manufacturer: Optional[str] = None
    driver_status: Optional[str] = None
    players: Optional[str] = None
    series: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    is_mature: Optional[bool] = None
    languages: List[str] = field(default_factory=list)
    bios_sets: List[BiosSet] = field(default_factory=list)
    roms: List[Rom] = field(default_factory=list)
    device_refs: List[DeviceRef] = field(default_factory=list)
    software_list: List[Software] = field(default_factory=list)
    samples: List[Sample] = field(default_factory=list)
    disks: List[Disk] = field(default_factory=list)
    history_sections: List[HistorySection] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    derived: DerivedData = field(default_factory=DerivedData)

    def is_clone(self) -> bool:
        """Check if this machine borrows ROMs from, or is a variant of, another."""
        return self.clone_of is not None or self.rom_of is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return the nested document form used by the JSON exporter."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Machine":
        """Rebuild a Machine from ``to_dict`` output.

        Args:
            data: Dictionary as produced by ``Machine.to_dict``

        Returns:
            Equivalent Machine instance
        """
        values = dict(data)
        values["bios_sets"] = [BiosSet(**item) for item in data.get("bios_sets", [])]
        values["roms"] = [Rom(**item) for item in data.get("roms", [])]
        values["device_refs"] = [DeviceRef(**item) for item in data.get("device_refs", [])]
        values["software_list"] = [Software(**item) for item in data.get("software_list", [])]
        values["samples"] = [Sample(**item) for item in data.get("samples", [])]
        values["disks"] = [Disk(**item) for item in data.get("disks", [])]
        values["history_sections"] = [
            HistorySection(**item) for item in data.get("history_sections", [])
        ]
        values["resources"] = [Resource(**item) for item in data.get("resources", [])]
        values["languages"] = list(data.get("languages", []))
        values["derived"] = DerivedData(**(data.get("derived") or {}))
        return cls(**values)
