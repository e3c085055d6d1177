"""Reader for history.xml (arcade-history.com).

Each ``<entry>`` lists the systems it applies to and one free-text block::

    <entry>
        <systems>
            <system name="pacman" />
            <system name="puckman" />
        </systems>
        <text>
    - DESCRIPTION -
    ...
    - TRIVIA -
    ...
        </text>
    </entry>

The text is split into sections on the ten known ``- HEADING -`` lines;
any other line stays in the body of the current section. Every listed
system present in the store receives its own copy of the section list.
"""

import logging
from dataclasses import replace
from typing import Dict, List

from lxml import etree

from ..catalog.models import HistorySection
from ..catalog.store import MachineStore
from ..errors import SourceFileError
from .base import ReadResult, SourceReader

logger = logging.getLogger(__name__)

# Known headings and their display order
SECTION_ORDER: Dict[str, int] = {
    "- DESCRIPTION -": 1,
    "- TECHNICAL -": 2,
    "- TRIVIA -": 3,
    "- UPDATES -": 4,
    "- SCORING -": 5,
    "- TIPS AND TRICKS -": 6,
    "- SERIES -": 7,
    "- STAFF -": 8,
    "- PORTS -": 9,
    "- CONTRIBUTE -": 10,
}

DEFAULT_SECTION = "description"


def section_name(heading: str) -> str:
    """Turn ``- TIPS AND TRICKS -`` into ``tips and tricks``."""
    return heading.replace("-", "").strip().lower()


def section_order(heading: str) -> int:
    """Display order of a heading; unknown headings sort with the description."""
    return SECTION_ORDER.get(heading, 1)


def parse_history_text(text: str) -> List[HistorySection]:
    """Split an entry's free text into ordered sections.

    Text preceding the first heading belongs to the description section.
    Sections whose text is blank are dropped.

    Args:
        text: Content of the <text> element

    Returns:
        Sections in the order they appear in the text
    """
    sections: List[HistorySection] = []
    current_name = DEFAULT_SECTION
    current_order = 1
    buffer: List[str] = []

    def flush():
        body = "\n".join(buffer).strip()
        if body:
            sections.append(HistorySection(name=current_name, text=body, order=current_order))

    for line in text.splitlines():
        stripped = line.strip()
        if stripped in SECTION_ORDER:
            flush()
            buffer = []
            current_name = section_name(stripped)
            current_order = section_order(stripped)
        else:
            buffer.append(line.rstrip())

    flush()
    return sections


class HistoryReader(SourceReader):
    """Broadcasts history sections to every machine an entry names."""

    source_name = "history"

    def read(self, store: MachineStore) -> ReadResult:
        """Parse history.xml and attach sections to known machines.

        Args:
            store: Machine store to update

        Returns:
            ReadResult where processed counts entries, applied counts
            machines updated and skipped counts unknown system names

        Raises:
            SourceFileError: If the file is missing, unreadable or malformed
        """
        self._check_path()
        result = ReadResult(self.source_name)

        with store.exclusive(), self._reading():
            try:
                for _, entry_elem in etree.iterparse(
                    str(self.path), events=("end",), tag="entry", huge_tree=True
                ):
                    result.processed += 1
                    self._apply_entry(entry_elem, store, result)

                    entry_elem.clear()
                    while entry_elem.getprevious() is not None:
                        del entry_elem.getparent()[0]
            except etree.XMLSyntaxError as e:
                raise SourceFileError(self.source_name, self.path, f"malformed XML: {e}") from e

        return self._log_result(result)

    def _apply_entry(self, entry_elem, store: MachineStore, result: ReadResult) -> None:
        text_elem = entry_elem.find("text")
        if text_elem is None:
            result.skipped += 1
            return

        sections = parse_history_text("".join(text_elem.itertext()))
        if not sections:
            result.skipped += 1
            return

        for system_elem in entry_elem.iter("system"):
            shortname = system_elem.get("name")
            machine = store.get(shortname) if shortname else None
            if machine is None:
                result.skipped += 1
                continue
            machine.history_sections = [replace(section) for section in sections]
            result.applied += 1
