"""Frequency indices derived from the machine store.

Each index maps a classification value to the number of machines carrying
it. Indices are never patched incrementally: any pass that adds, removes or
reclassifies machines is followed by ``rebuild_all``.
"""

import logging
from collections import Counter
from enum import Enum
from typing import Dict, List, Tuple

from .store import MachineStore

logger = logging.getLogger(__name__)


class Index(str, Enum):
    """Names of the derived indices (also used as export file stems)."""
    SERIES = "series"
    MANUFACTURERS = "manufacturers"
    PLAYERS = "players"
    LANGUAGES = "languages"
    CATEGORIES = "categories"
    SUBCATEGORIES = "subcategories"


SUBCATEGORY_SEPARATOR = " - "


def subcategory_key(category: str, subcategory: str) -> str:
    """Build the composite ``"<category> - <subcategory>"`` index key."""
    return f"{category}{SUBCATEGORY_SEPARATOR}{subcategory}"


def split_subcategory_key(key: str) -> Tuple[str, str]:
    """Split a composite subcategory key back into (category, subcategory)."""
    category, _, subcategory = key.partition(SUBCATEGORY_SEPARATOR)
    return category, subcategory


def split_joined(value: str) -> List[str]:
    """Split a comma-joined column (players, languages) into its tokens."""
    return [token.strip() for token in value.split(",") if token.strip()]


class DerivedIndices:
    """Holds the six name -> count indices for one machine store."""

    def __init__(self):
        self._indices: Dict[Index, Counter] = {index: Counter() for index in Index}

    def clear(self) -> None:
        for counter in self._indices.values():
            counter.clear()

    def rebuild_all(self, store: MachineStore) -> None:
        """Clear every index and recompute it with one full scan of the store.

        Args:
            store: Machine store to scan
        """
        self.clear()
        series = self._indices[Index.SERIES]
        manufacturers = self._indices[Index.MANUFACTURERS]
        players = self._indices[Index.PLAYERS]
        languages = self._indices[Index.LANGUAGES]
        categories = self._indices[Index.CATEGORIES]
        subcategories = self._indices[Index.SUBCATEGORIES]

        with store.exclusive():
            for machine in store:
                if machine.series:
                    series[machine.series] += 1
                if machine.derived.manufacturer:
                    manufacturers[machine.derived.manufacturer] += 1
                if machine.derived.players:
                    for token in split_joined(machine.derived.players):
                        players[token] += 1
                for language in machine.languages:
                    languages[language] += 1
                if machine.category:
                    categories[machine.category] += 1
                    if machine.subcategory:
                        subcategories[subcategory_key(machine.category, machine.subcategory)] += 1

        logger.debug(
            "Rebuilt indices: "
            + ", ".join(f"{index.value}={len(counter)}" for index, counter in self._indices.items())
        )

    def get(self, index: Index) -> Dict[str, int]:
        """Return a copy of one index."""
        return dict(self._indices[Index(index)])

    def names(self, index: Index) -> List[str]:
        """Return the index keys sorted alphabetically."""
        return sorted(self._indices[Index(index)])

    def counts(self, index: Index) -> List[Tuple[str, int]]:
        """Return (name, count) pairs sorted by name."""
        counter = self._indices[Index(index)]
        return [(name, counter[name]) for name in sorted(counter)]

    def top(self, index: Index, k: int) -> List[Tuple[str, int]]:
        """Return the k highest-count entries.

        Ties are broken by ascending name so results are reproducible.

        Args:
            index: Index to rank
            k: Maximum number of entries to return

        Returns:
            List of (name, count) pairs, counts non-increasing
        """
        if k <= 0:
            return []
        counter = self._indices[Index(index)]
        ranked = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:k]

    def size(self, index: Index) -> int:
        return len(self._indices[Index(index)])
