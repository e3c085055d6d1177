"""Catalog statistics and top-N tables rendered with rich."""

import logging
from dataclasses import dataclass
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .catalog.indices import DerivedIndices, Index
from .catalog.store import MachineStore

logger = logging.getLogger(__name__)

# Column heading for each index in top-N tables
INDEX_LABELS = {
    Index.CATEGORIES: "Category",
    Index.SUBCATEGORIES: "Category - Subcategory",
    Index.MANUFACTURERS: "Manufacturer",
    Index.SERIES: "Series",
    Index.LANGUAGES: "Language",
    Index.PLAYERS: "Player",
}


@dataclass
class CatalogStats:
    """Summary counts for a loaded catalog."""
    machines: int
    originals: int
    clones: int
    manufacturers: int
    categories: int
    subcategories: int
    series: int
    languages: int
    players: int
    with_history: int
    with_resources: int


def collect_stats(store: MachineStore, indices: DerivedIndices) -> CatalogStats:
    """Count machines, clones and index sizes.

    Clones here are machines with ``clone_of`` set; ``rom_of`` alone does
    not count.

    Raises:
        NoDataLoadedError: If the store is empty
    """
    store.require_data()

    with store.exclusive():
        machines = list(store)
        clones = sum(1 for m in machines if m.clone_of is not None)
        return CatalogStats(
            machines=len(machines),
            originals=len(machines) - clones,
            clones=clones,
            manufacturers=indices.size(Index.MANUFACTURERS),
            categories=indices.size(Index.CATEGORIES),
            subcategories=indices.size(Index.SUBCATEGORIES),
            series=indices.size(Index.SERIES),
            languages=indices.size(Index.LANGUAGES),
            players=indices.size(Index.PLAYERS),
            with_history=sum(1 for m in machines if m.history_sections),
            with_resources=sum(1 for m in machines if m.resources),
        )


def render_stats(stats: CatalogStats, console: Optional[Console] = None) -> None:
    """Print the general statistics table."""
    console = console or Console()

    table = Table(title="MAME information statistics", box=box.SIMPLE_HEAVY)
    table.add_column("Information", style="bold")
    table.add_column("Amount", justify="right")

    for label, value in (
        ("Machines", stats.machines),
        ("Originals", stats.originals),
        ("Clones", stats.clones),
        ("Manufacturers", stats.manufacturers),
        ("Categories", stats.categories),
        ("Subcategories", stats.subcategories),
        ("Series", stats.series),
        ("Languages", stats.languages),
        ("Players information", stats.players),
        ("Machines with history", stats.with_history),
        ("Machines with resources", stats.with_resources),
    ):
        table.add_row(label, f"{value:,}")

    console.print(table)


def render_top(
    indices: DerivedIndices, index: Index, k: int = 10, console: Optional[Console] = None
) -> None:
    """Print the k most common entries of one index."""
    console = console or Console()
    index = Index(index)

    table = Table(title=f"Top {k} {index.value}", box=box.SIMPLE_HEAVY)
    table.add_column("#", justify="right", style="dim")
    table.add_column(INDEX_LABELS[index], style="bold")
    table.add_column("Machines", justify="right")

    for rank, (name, count) in enumerate(indices.top(index, k), start=1):
        table.add_row(str(rank), name, f"{count:,}")

    console.print(table)
