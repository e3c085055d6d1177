"""Exporters writing the normalized catalog to CSV, JSON and SQLite."""

from .csv_writer import export_to_csv
from .json_writer import export_to_json
from .sqlite_writer import DEFAULT_BATCH_SIZE, export_to_sqlite

EXPORT_FORMATS = ("csv", "json", "sqlite")

__all__ = [
    "export_to_csv",
    "export_to_json",
    "export_to_sqlite",
    "DEFAULT_BATCH_SIZE",
    "EXPORT_FORMATS",
]
