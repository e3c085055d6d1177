"""Readers for MAME folder INI files (series.ini, languages.ini).

These INI files use a folder-based structure: a ``[Label]`` header followed
by one ROM shortname per line.
"""

import logging
from typing import Iterator, Optional, Tuple

from ..catalog.models import Machine
from ..catalog.store import MachineStore
from .base import ReadResult, SourceReader

logger = logging.getLogger(__name__)

# Headers that describe the folder itself rather than a label
SPECIAL_SECTIONS = {"FOLDER_SETTINGS", "ROOT_FOLDER"}


class FolderINIReader(SourceReader):
    """Base reader for folder INI files.

    Subclasses decide how a label is attached to a machine.
    """

    source_name = "folder ini"

    def iter_entries(self) -> Iterator[Tuple[str, str]]:
        """Yield (label, shortname) pairs in file order."""
        current_label: Optional[str] = None

        with open(self.path, "r", encoding="utf-8", errors="ignore") as f:
            for line in f:
                line = line.strip()

                # Skip empty lines and comments
                if not line or line.startswith(";"):
                    continue

                # Check for label header [Label]
                if line.startswith("[") and line.endswith("]"):
                    label = line[1:-1]
                    current_label = None if label in SPECIAL_SECTIONS else label
                    continue

                if current_label is None:
                    continue

                # Skip folder settings such as RootFolderIcon=...
                if "=" in line:
                    continue

                yield current_label, line

    def read(self, store: MachineStore) -> ReadResult:
        """Attach labels from the INI file to the machines they list.

        Args:
            store: Machine store to update

        Returns:
            ReadResult with applied/skipped counts

        Raises:
            SourceFileError: If the file does not exist or cannot be read
        """
        self._check_path()
        result = ReadResult(self.source_name)

        with store.exclusive(), self._reading():
            for label, shortname in self.iter_entries():
                result.processed += 1
                machine = store.get(shortname)
                if machine is None:
                    result.skipped += 1
                    continue
                self.attach(machine, label)
                result.applied += 1

        return self._log_result(result)

    def attach(self, machine: Machine, label: str) -> None:
        raise NotImplementedError


class SeriesReader(FolderINIReader):
    """Reader for series.ini; a machine belongs to a single series."""

    source_name = "series"

    def attach(self, machine: Machine, label: str) -> None:
        machine.series = label


class LanguagesReader(FolderINIReader):
    """Reader for languages.ini; languages accumulate in file order."""

    source_name = "languages"

    def attach(self, machine: Machine, label: str) -> None:
        machine.languages.append(label)
