"""Source readers.

``MameXMLReader`` creates machines; every other reader joins its data onto
machines that already exist and silently skips unknown names.
"""

from .base import ReadResult, SourceReader
from .mame_xml_reader import MameXMLReader
from .catver_reader import CatverReader
from .ini_reader import FolderINIReader, LanguagesReader, SeriesReader
from .nplayers_reader import NPlayersReader
from .history_reader import HistoryReader, parse_history_text
from .resources_reader import ResourcesReader
from .sources import DATA_SOURCES, DataSource, discover_sources, find_source_file, get_source

__all__ = [
    "ReadResult",
    "SourceReader",
    "MameXMLReader",
    "CatverReader",
    "FolderINIReader",
    "LanguagesReader",
    "SeriesReader",
    "NPlayersReader",
    "HistoryReader",
    "parse_history_text",
    "ResourcesReader",
    "DATA_SOURCES",
    "DataSource",
    "discover_sources",
    "find_source_file",
    "get_source",
]
