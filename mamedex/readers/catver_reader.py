"""Reader for catver.ini.

Each data line has the form::

    <rom name>=<Category> / <Subcategory>[ * Mature *]

``[FOLDER_SETTINGS]`` / ``[ROOT_FOLDER]`` headers and ``;`` comments are
ignored. Category and subcategory are separated by `` / `` and the
subcategory may carry the `` * Mature *`` marker.
"""

import logging
from typing import Optional, Tuple

from ..catalog.store import MachineStore
from .base import ReadResult, SourceReader

logger = logging.getLogger(__name__)

MATURE_MARKER = " * Mature *"
CATEGORY_SEPARATOR = " / "


def parse_catver_line(line: str) -> Optional[Tuple[str, str, str, bool]]:
    """Parse one catver.ini line.

    Args:
        line: Raw line from the file

    Returns:
        Tuple (rom name, category, subcategory, is_mature), or None for
        headers, comments and lines that do not carry two category parts
    """
    line = line.strip()
    if not line or line[0] in "[;":
        return None

    rom_name, sep, value = line.partition("=")
    if not sep:
        return None

    parts = value.strip().split(CATEGORY_SEPARATOR)
    if len(parts) < 2:
        return None

    category = parts[0]
    subcategory = parts[1]
    is_mature = subcategory.endswith(MATURE_MARKER)
    if is_mature:
        subcategory = subcategory[: -len(MATURE_MARKER)].strip()

    return rom_name.strip(), category, subcategory, is_mature


class CatverReader(SourceReader):
    """Joins category, subcategory and maturity flags onto known machines."""

    source_name = "catver"

    def read(self, store: MachineStore) -> ReadResult:
        """Apply catver.ini to the store.

        Args:
            store: Machine store to update

        Returns:
            ReadResult with applied/skipped counts

        Raises:
            SourceFileError: If the file does not exist or cannot be read
        """
        self._check_path()
        result = ReadResult(self.source_name)

        with (
            store.exclusive(),
            self._reading(),
            open(self.path, "r", encoding="utf-8", errors="ignore") as f,
        ):
            for line in f:
                if "=" not in line:
                    continue
                result.processed += 1

                parsed = parse_catver_line(line)
                if parsed is None:
                    result.skipped += 1
                    continue

                rom_name, category, subcategory, is_mature = parsed
                machine = store.get(rom_name)
                if machine is None:
                    result.skipped += 1
                    continue

                machine.category = category
                machine.subcategory = subcategory
                machine.is_mature = is_mature
                result.applied += 1

        return self._log_result(result)
