"""Helpers shared by the exporters."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..catalog.indices import DerivedIndices, Index, split_subcategory_key
from ..catalog.store import MachineStore
from ..errors import ExportError, MissingDerivedDataError

logger = logging.getLogger(__name__)

# Flat name -> count indices, in export order
FLAT_INDICES = (
    Index.MANUFACTURERS,
    Index.SERIES,
    Index.LANGUAGES,
    Index.PLAYERS,
    Index.CATEGORIES,
)


def prepare_directory(directory: Union[str, Path]) -> Path:
    """Create the export directory if needed.

    Raises:
        ExportError: If the directory cannot be created
    """
    path = Path(directory)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Cannot create export directory {path}: {e}") from e
    return path


def require_derived(store: MachineStore) -> None:
    """Check that normalization ran before anything is written.

    Raises:
        NoDataLoadedError: If the store is empty
        MissingDerivedDataError: If any machine lacks derived players
    """
    store.require_data()
    missing = [machine.name for machine in store if machine.derived.players is None]
    if missing:
        raise MissingDerivedDataError(
            f"{len(missing)} machines are not normalized (first: {missing[0]}), "
            "run normalization before exporting"
        )


def bool_text(value: Optional[bool]) -> str:
    """Render an optional flag as ``true``/``false``, absent as empty."""
    if value is None:
        return ""
    return "true" if value else "false"


def subcategory_rows(indices: DerivedIndices) -> List[Tuple[str, str, int]]:
    """Return (category, subcategory, count) rows sorted by composite key."""
    return [
        (*split_subcategory_key(key), count)
        for key, count in indices.counts(Index.SUBCATEGORIES)
    ]
