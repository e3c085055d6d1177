"""JSON exporter: machines.json plus one flat file per derived index."""

import json
import logging
from pathlib import Path
from typing import Any, Union

from ..catalog.indices import DerivedIndices
from ..catalog.store import MachineStore
from ..errors import ExportError
from .common import FLAT_INDICES, prepare_directory, require_derived, subcategory_rows

logger = logging.getLogger(__name__)


def _dump(data: Any, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def export_to_json(
    store: MachineStore, indices: DerivedIndices, directory: Union[str, Path]
) -> Path:
    """Write the catalog as JSON documents.

    ``machines.json`` is a pretty-printed array of nested machine
    documents sorted by name. Index files are arrays of
    ``{"name", "machines"}`` objects, ``subcategories.json`` holds
    ``{"category", "subcategory", "machines"}`` objects.

    Args:
        store: Normalized machine store
        indices: Indices rebuilt from the same store
        directory: Output directory (created if missing)

    Returns:
        Output directory

    Raises:
        NoDataLoadedError: If the store is empty
        MissingDerivedDataError: If normalization has not run
        ExportError: If a file cannot be written
    """
    with store.exclusive():
        require_derived(store)
        output_dir = prepare_directory(directory)
        documents = [machine.to_dict() for machine in store.sorted_machines()]
        logger.info(f"Exporting {len(documents)} machines to JSON in {output_dir}")

        try:
            _dump(documents, output_dir / "machines.json")

            for index in FLAT_INDICES:
                _dump(
                    [{"name": name, "machines": count} for name, count in indices.counts(index)],
                    output_dir / f"{index.value}.json",
                )

            _dump(
                [
                    {"category": category, "subcategory": subcategory, "machines": count}
                    for category, subcategory, count in subcategory_rows(indices)
                ],
                output_dir / "subcategories.json",
            )
        except (OSError, TypeError) as e:
            raise ExportError(f"JSON export to {output_dir} failed: {e}") from e

    logger.info(f"JSON export complete: {output_dir}")
    return output_dir
