"""Reader for the MAME XML catalog (mame.dat / listxml output).

This is the only reader that creates machines. The file is streamed with
``lxml.etree.iterparse`` one ``<machine>`` element at a time, so the full
catalog (250MB+) never has to be held as a tree.
"""

import logging
from typing import Optional

from lxml import etree

from ..catalog.models import BiosSet, DeviceRef, Disk, Machine, Rom, Sample, Software
from ..catalog.store import MachineStore
from ..errors import SourceFileError
from ..normalize.names import normalize_year
from .base import ReadResult, SourceReader

logger = logging.getLogger(__name__)


def _flag(value: Optional[str]) -> Optional[bool]:
    """Convert a yes/no attribute into a bool, keeping absence as None."""
    if value is None:
        return None
    return value == "yes"


def _size(value: Optional[str]) -> int:
    """Parse a size attribute; malformed values become 0."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class MameXMLReader(SourceReader):
    """Reads machine definitions and creates them in the store."""

    source_name = "mame"

    def read(self, store: MachineStore) -> ReadResult:
        """Parse the MAME XML file and create one Machine per element.

        Args:
            store: Machine store to populate

        Returns:
            ReadResult with the number of machines created

        Raises:
            SourceFileError: If the file is missing, unreadable or malformed
        """
        self._check_path()
        result = ReadResult(self.source_name)

        with store.exclusive(), self._reading():
            try:
                for _, machine_elem in etree.iterparse(
                    str(self.path), events=("end",), tag="machine", huge_tree=True
                ):
                    result.processed += 1
                    name = machine_elem.get("name")
                    if not name:
                        result.skipped += 1
                    else:
                        store.add(self._parse_machine(machine_elem))
                        result.applied += 1

                    # Free the element and already-processed siblings
                    machine_elem.clear()
                    while machine_elem.getprevious() is not None:
                        del machine_elem.getparent()[0]
            except etree.XMLSyntaxError as e:
                raise SourceFileError(self.source_name, self.path, f"malformed XML: {e}") from e

        clones = sum(1 for m in store if m.clone_of)
        logger.info(f"  - {len(store)} machines in catalog, {clones} clones")
        return self._log_result(result)

    def _parse_machine(self, machine_elem) -> Machine:
        """Parse a single machine element.

        Args:
            machine_elem: XML element for machine

        Returns:
            Machine object
        """
        machine = Machine(
            name=machine_elem.get("name"),
            source_file=machine_elem.get("sourcefile"),
            rom_of=machine_elem.get("romof"),
            clone_of=machine_elem.get("cloneof"),
            is_bios=_flag(machine_elem.get("isbios")),
            is_device=_flag(machine_elem.get("isdevice")),
            runnable=_flag(machine_elem.get("runnable")),
            is_mechanical=_flag(machine_elem.get("ismechanical")),
            sample_of=machine_elem.get("sampleof"),
            description=machine_elem.findtext("description"),
            year=machine_elem.findtext("year"),
            manufacturer=machine_elem.findtext("manufacturer"),
        )

        for child in machine_elem:
            tag = child.tag
            if tag == "biosset":
                machine.bios_sets.append(BiosSet(
                    name=child.get("name", ""),
                    description=child.get("description", ""),
                ))
            elif tag == "rom":
                machine.roms.append(Rom(
                    name=child.get("name", ""),
                    size=_size(child.get("size")),
                    merge=child.get("merge"),
                    status=child.get("status"),
                    crc=child.get("crc"),
                    sha1=child.get("sha1"),
                ))
            elif tag == "device_ref":
                machine.device_refs.append(DeviceRef(name=child.get("name", "")))
            elif tag == "softwarelist":
                machine.software_list.append(Software(name=child.get("name", "")))
            elif tag == "sample":
                machine.samples.append(Sample(name=child.get("name", "")))
            elif tag == "disk":
                machine.disks.append(Disk(
                    name=child.get("name", ""),
                    sha1=child.get("sha1"),
                    merge=child.get("merge"),
                    status=child.get("status"),
                    region=child.get("region"),
                ))
            elif tag == "driver":
                machine.driver_status = child.get("status", "")

        # Parent status is fixed here, before any clone filtering can run
        machine.derived.is_parent = not (
            machine.clone_of is not None or machine.sample_of is not None
        )
        if machine.year is not None:
            machine.derived.year = normalize_year(machine.year)

        return machine
