"""Exception types shared across the mamedex pipeline."""

from pathlib import Path
from typing import Optional, Union


NO_DATA_MESSAGE = "No machines data loaded, please read the data first."


class MamedexError(Exception):
    """Base class for mamedex errors."""
    pass


class SourceFileError(MamedexError):
    """A source file is missing, unreadable or structurally invalid.

    Only the reader for that source aborts; other readers are unaffected.
    """

    def __init__(self, source: str, path: Union[str, Path], reason: str):
        self.source = source
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{source}: {reason} ({self.path})")


class NoDataLoadedError(MamedexError):
    """Filter, normalization, export or stats requested on an empty catalog."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or NO_DATA_MESSAGE)


class MissingDerivedDataError(MamedexError):
    """Export requested before normalization populated the derived fields."""
    pass


class ExportError(MamedexError):
    """Output file or directory could not be written."""
    pass
