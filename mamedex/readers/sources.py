"""Registry of the data sources mamedex knows how to read.

Downloading and unpacking the archives is done elsewhere; this module only
knows what the extracted files are called and which reader handles them.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Type

from .base import SourceReader
from .catver_reader import CatverReader
from .history_reader import HistoryReader
from .ini_reader import LanguagesReader, SeriesReader
from .mame_xml_reader import MameXMLReader
from .nplayers_reader import NPlayersReader
from .resources_reader import ResourcesReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataSource:
    """A source file type: where it comes from and how to read it."""
    name: str
    homepage: str
    file_pattern: re.Pattern
    reader_cls: Type[SourceReader]

    def create_reader(self, path: Path) -> SourceReader:
        return self.reader_cls(path)


# Read order matters: mame creates the machines every other source joins onto
DATA_SOURCES: List[DataSource] = [
    DataSource(
        name="mame",
        homepage="https://www.progettosnaps.net/dats/MAME",
        file_pattern=re.compile(r"MAME\s+[0-9]*\.[0-9]+\.dat$"),
        reader_cls=MameXMLReader,
    ),
    DataSource(
        name="languages",
        homepage="https://www.progettosnaps.net/languages",
        file_pattern=re.compile(r"^languages\.ini$"),
        reader_cls=LanguagesReader,
    ),
    DataSource(
        name="nplayers",
        homepage="http://nplayers.arcadebelgium.be",
        file_pattern=re.compile(r"^nplayers\.ini$"),
        reader_cls=NPlayersReader,
    ),
    DataSource(
        name="catver",
        homepage="https://www.progettosnaps.net/catver",
        file_pattern=re.compile(r"^catver\.ini$"),
        reader_cls=CatverReader,
    ),
    DataSource(
        name="series",
        homepage="https://www.progettosnaps.net/series",
        file_pattern=re.compile(r"^series\.ini$"),
        reader_cls=SeriesReader,
    ),
    DataSource(
        name="history",
        homepage="https://www.arcade-history.com/index.php?page=download",
        file_pattern=re.compile(r"^history\.xml$"),
        reader_cls=HistoryReader,
    ),
    DataSource(
        name="resources",
        homepage="https://www.progettosnaps.net/dats",
        file_pattern=re.compile(r"^pS_AllProject_\d{8}_\d+_\([a-zA-Z]+\)\.dat$"),
        reader_cls=ResourcesReader,
    ),
]

SOURCES_BY_NAME: Dict[str, DataSource] = {source.name: source for source in DATA_SOURCES}


def get_source(name: str) -> DataSource:
    """Look up a data source by name.

    Raises:
        KeyError: If the name is not a known source
    """
    try:
        return SOURCES_BY_NAME[name]
    except KeyError:
        raise KeyError(
            f"Unknown data source '{name}'. Known sources: {', '.join(SOURCES_BY_NAME)}"
        ) from None


def find_source_file(directory: Path, source: DataSource) -> Optional[Path]:
    """Find the file for a data source under an extracted data directory.

    When several files match (e.g. two MAME releases), the file whose
    name sorts last wins, which is the newest release.

    Args:
        directory: Directory to search recursively
        source: Data source to look for

    Returns:
        Path to the matching file, or None if nothing matches
    """
    if not directory.is_dir():
        return None

    matches = sorted(
        (
            path for path in directory.rglob("*")
            if path.is_file() and source.file_pattern.search(path.name)
        ),
        key=lambda path: (path.name, str(path)),
    )
    if not matches:
        logger.debug(f"No {source.name} file found under {directory}")
        return None

    if len(matches) > 1:
        logger.debug(f"Multiple {source.name} files found, using {matches[-1].name}")
    return matches[-1]


def discover_sources(directory: Path) -> Dict[str, Path]:
    """Map every data source found under a directory to its file path."""
    found: Dict[str, Path] = {}
    for source in DATA_SOURCES:
        path = find_source_file(directory, source)
        if path is not None:
            found[source.name] = path
    return found
