"""Catalog pipeline: import, filter, normalize, export.

``CatalogPipeline`` owns the machine store and its derived indices and is
passed explicitly to whatever drives it (the CLI, tests). Every pass that
changes the set or classification of machines rebuilds the indices.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from .catalog.indices import DerivedIndices
from .catalog.store import MachineStore
from .errors import SourceFileError
from .export import DEFAULT_BATCH_SIZE, export_to_csv, export_to_json, export_to_sqlite
from .filters import MachineFilter, remove_machines_by_filter, remove_non_game_categories, remove_non_games
from .normalize import normalize_machines
from .readers.base import ReadResult
from .readers.sources import DATA_SOURCES
from .stats import CatalogStats, collect_stats

logger = logging.getLogger(__name__)

SQLITE_FILENAME = "machines.db"


@dataclass
class ImportReport:
    """Outcome of one import run."""
    results: List[ReadResult] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)
    machines: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures

    def result_for(self, source: str) -> Optional[ReadResult]:
        for result in self.results:
            if result.source == source:
                return result
        return None


class CatalogPipeline:
    """Runs the catalog passes against one store."""

    def __init__(self, store: Optional[MachineStore] = None):
        """Initialize pipeline.

        Args:
            store: Existing store to work on (default: a new empty store)
        """
        self.store = store if store is not None else MachineStore()
        self.indices = DerivedIndices()

    def rebuild_indices(self) -> None:
        self.indices.rebuild_all(self.store)

    def import_sources(self, paths: Dict[str, Path]) -> ImportReport:
        """Read every available source file into the store.

        Sources are read in registry order, mame first. If the mame catalog
        fails to read, the remaining sources are skipped since they only
        join onto existing machines. A failing side-file is recorded and
        the others still run. Normalization and an index rebuild follow
        when the store holds any machines.

        Args:
            paths: Source name -> file path

        Returns:
            ImportReport with per-source results and failures
        """
        start_time = time.time()
        report = ImportReport()

        logger.info("=" * 60)
        logger.info("Reading source files")
        logger.info("=" * 60)

        for source in DATA_SOURCES:
            path = paths.get(source.name)
            if path is None:
                logger.warning(f"No {source.name} file found, skipping")
                report.missing.append(source.name)
                if source.name == "mame" and self.store.is_empty():
                    logger.error("Cannot read side files without the MAME catalog")
                    break
                continue

            try:
                report.results.append(source.create_reader(path).read(self.store))
            except SourceFileError as e:
                logger.error(f"Failed to read {source.name}: {e}")
                report.failures[source.name] = str(e)
                if source.name == "mame":
                    logger.error("Skipping remaining sources")
                    break

        report.machines = len(self.store)
        if not self.store.is_empty():
            normalize_machines(self.store)
            self.rebuild_indices()

        elapsed = time.time() - start_time
        logger.info(f"Import complete in {elapsed:.1f}s: {report.machines} machines")
        return report

    def apply_filter(self, name: Union[str, MachineFilter]) -> int:
        """Apply one named filter and rebuild the indices.

        Args:
            name: A ``MachineFilter`` value, ``non_game_categories`` or
                ``non_games``

        Returns:
            Number of machines removed

        Raises:
            ValueError: If the filter name is unknown
            NoDataLoadedError: If the store is empty
        """
        removal = self._resolve_filter(name)
        removed = removal(self.store)
        self.rebuild_indices()
        return removed

    def _resolve_filter(self, name: Union[str, MachineFilter]) -> Callable[[MachineStore], int]:
        if isinstance(name, MachineFilter):
            machine_filter = name
        elif name == "non_game_categories":
            return remove_non_game_categories
        elif name == "non_games":
            return remove_non_games
        else:
            try:
                machine_filter = MachineFilter(name)
            except ValueError:
                raise ValueError(f"Unknown filter '{name}'") from None
        return lambda store: remove_machines_by_filter(store, machine_filter)

    def normalize(self) -> int:
        """Re-run normalization and rebuild the indices."""
        count = normalize_machines(self.store)
        self.rebuild_indices()
        return count

    def export(
        self,
        fmt: str,
        directory: Union[str, Path],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> Path:
        """Export the catalog in one format below an export directory.

        CSV and JSON files go to ``<directory>/<fmt>/``, the database to
        ``<directory>/sqlite/machines.db``.

        Args:
            fmt: One of ``csv``, ``json``, ``sqlite``
            directory: Export root directory
            batch_size: Machines per transaction for SQLite

        Returns:
            Path of the written directory or database file

        Raises:
            ValueError: If the format is unknown
            NoDataLoadedError: If the store is empty
            MissingDerivedDataError: If normalization has not run
            ExportError: If output cannot be written
        """
        target = Path(directory) / fmt
        start_time = time.time()

        if fmt == "csv":
            result = export_to_csv(self.store, self.indices, target)
        elif fmt == "json":
            result = export_to_json(self.store, self.indices, target)
        elif fmt == "sqlite":
            result = export_to_sqlite(
                self.store, self.indices, target / SQLITE_FILENAME, batch_size=batch_size
            )
        else:
            raise ValueError(f"Unknown export format '{fmt}'")

        logger.info(f"{fmt} export written in {time.time() - start_time:.1f}s")
        return result

    def stats(self) -> CatalogStats:
        return collect_stats(self.store, self.indices)
