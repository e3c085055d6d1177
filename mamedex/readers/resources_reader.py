"""Reader for the progettosnaps resources dat (pS_AllProject_*.dat).

Resources are grouped by ``<machine name="<section>">`` where section is a
media type such as ``snap``, ``flyers`` or ``cabinets``. Each ``<rom>``
names a file as ``<type>\\<machine>.<ext>``::

    <machine name="cabinets">
        <description>Cabinets</description>
        <rom name="cabinets\\pacman.png" size="123456" crc="..." sha1="..."/>
    </machine>

Only entries whose path type matches the section are kept, which keeps
software-list resources from bleeding onto arcade machines.
"""

import logging
from typing import Optional, Tuple

from lxml import etree

from ..catalog.models import Resource
from ..catalog.store import MachineStore
from ..errors import SourceFileError
from .base import ReadResult, SourceReader

logger = logging.getLogger(__name__)


def split_resource_name(name: str) -> Optional[Tuple[str, str]]:
    """Split ``type\\file.ext`` into (type, machine shortname).

    Returns:
        Tuple (resource type, machine name) or None if the name has no path
    """
    parts = name.split("\\")
    if len(parts) < 2:
        return None
    return parts[0], parts[1].split(".")[0]


def _size(value: Optional[str]) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class ResourcesReader(SourceReader):
    """Attaches media resources to known machines."""

    source_name = "resources"

    def read(self, store: MachineStore) -> ReadResult:
        """Parse the resources dat and append resources to machines.

        Args:
            store: Machine store to update

        Returns:
            ReadResult with one processed record per <rom>

        Raises:
            SourceFileError: If the file is missing, unreadable or malformed
        """
        self._check_path()
        result = ReadResult(self.source_name)

        with store.exclusive(), self._reading():
            try:
                for _, section_elem in etree.iterparse(
                    str(self.path), events=("end",), tag="machine", huge_tree=True
                ):
                    section = section_elem.get("name")
                    for rom_elem in section_elem.iter("rom"):
                        result.processed += 1
                        if self._apply_rom(section, rom_elem, store):
                            result.applied += 1
                        else:
                            result.skipped += 1

                    section_elem.clear()
                    while section_elem.getprevious() is not None:
                        del section_elem.getparent()[0]
            except etree.XMLSyntaxError as e:
                raise SourceFileError(self.source_name, self.path, f"malformed XML: {e}") from e

        return self._log_result(result)

    def _apply_rom(self, section: Optional[str], rom_elem, store: MachineStore) -> bool:
        name = rom_elem.get("name", "")
        split = split_resource_name(name)
        if section is None or split is None:
            return False

        resource_type, machine_name = split
        if resource_type != section:
            return False

        machine = store.get(machine_name)
        if machine is None:
            return False

        machine.resources.append(Resource(
            type=section,
            name=name,
            size=_size(rom_elem.get("size")),
            crc=rom_elem.get("crc", ""),
            sha1=rom_elem.get("sha1", ""),
        ))
        return True
