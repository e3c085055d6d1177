"""Shared pieces for the source readers."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

from ..errors import SourceFileError

logger = logging.getLogger(__name__)


@dataclass
class ReadResult:
    """Outcome of one reader pass.

    ``applied`` counts joins that changed a machine, ``skipped`` counts
    records that were malformed or referenced an unknown machine.
    """
    source: str
    processed: int = 0
    applied: int = 0
    skipped: int = 0

    def __str__(self) -> str:
        return (
            f"{self.source}: {self.processed} records, "
            f"{self.applied} applied, {self.skipped} skipped"
        )


class SourceReader:
    """Base class for readers that join a source file into the machine store."""

    source_name = "source"

    def __init__(self, path: Union[str, Path]):
        """Initialize reader with path to its source file.

        Args:
            path: Path to the source file
        """
        self.path = Path(path)

    def _check_path(self) -> None:
        """Raise SourceFileError if the source file is missing.

        Raises:
            SourceFileError: If the file does not exist or is not a file
        """
        if not self.path.exists():
            raise SourceFileError(self.source_name, self.path, "file not found")
        if not self.path.is_file():
            raise SourceFileError(self.source_name, self.path, "not a file")

        try:
            file_size_mb = self.path.stat().st_size / (1024 * 1024)
        except OSError as e:
            raise SourceFileError(self.source_name, self.path, f"cannot read file: {e}") from e
        logger.info(f"Reading {self.source_name}: {self.path.name} ({file_size_mb:.1f} MB)")

    @contextmanager
    def _reading(self) -> Iterator[None]:
        """Turn I/O failures while reading the file into SourceFileError."""
        try:
            yield
        except OSError as e:
            raise SourceFileError(self.source_name, self.path, f"cannot read file: {e}") from e

    def _log_result(self, result: ReadResult) -> ReadResult:
        logger.info(f"  - {result}")
        return result
