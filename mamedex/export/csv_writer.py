"""CSV exporter: one file per table, machines sorted by name."""

import csv
import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Callable, Dict, List, Tuple, Union

from ..catalog.indices import DerivedIndices
from ..catalog.models import Machine
from ..catalog.store import MachineStore
from ..errors import ExportError
from .common import FLAT_INDICES, bool_text, prepare_directory, require_derived, subcategory_rows

logger = logging.getLogger(__name__)

MACHINE_HEADER = [
    "name",
    "source_file",
    "rom_of",
    "clone_of",
    "is_bios",
    "is_device",
    "runnable",
    "is_mechanical",
    "sample_of",
    "description",
    "year",
    "manufacturer",
    "driver_status",
    "languages",
    "players",
    "series",
    "category",
    "subcategory",
    "is_mature",
    "extended_name",
    "extended_manufacturer",
    "extended_players",
    "extended_is_parent",
    "extended_year",
]


def _text(value) -> str:
    return "" if value is None else str(value)


def machine_row(machine: Machine) -> List[str]:
    """Flatten a machine into a machines.csv row."""
    derived = machine.derived
    return [
        machine.name,
        _text(machine.source_file),
        _text(machine.rom_of),
        _text(machine.clone_of),
        bool_text(machine.is_bios),
        bool_text(machine.is_device),
        bool_text(machine.runnable),
        bool_text(machine.is_mechanical),
        _text(machine.sample_of),
        _text(machine.description),
        _text(machine.year),
        _text(machine.manufacturer),
        _text(machine.driver_status),
        ", ".join(machine.languages),
        _text(machine.players),
        _text(machine.series),
        _text(machine.category),
        _text(machine.subcategory),
        bool_text(machine.is_mature),
        _text(derived.name),
        _text(derived.manufacturer),
        _text(derived.players),
        bool_text(derived.is_parent),
        _text(derived.year),
    ]


# file stem -> (header, rows for one machine)
CHILD_TABLES: Dict[str, Tuple[List[str], Callable[[Machine], List[List[str]]]]] = {
    "roms": (
        ["machine_name", "name", "size", "merge", "status", "crc", "sha1"],
        lambda m: [
            [m.name, r.name, str(r.size), _text(r.merge), _text(r.status), _text(r.crc), _text(r.sha1)]
            for r in m.roms
        ],
    ),
    "bios_sets": (
        ["machine_name", "name", "description"],
        lambda m: [[m.name, b.name, b.description] for b in m.bios_sets],
    ),
    "device_refs": (
        ["machine_name", "name"],
        lambda m: [[m.name, d.name] for d in m.device_refs],
    ),
    "disks": (
        ["machine_name", "name", "sha1", "merge", "status", "region"],
        lambda m: [
            [m.name, d.name, _text(d.sha1), _text(d.merge), _text(d.status), _text(d.region)]
            for d in m.disks
        ],
    ),
    "softwares": (
        ["machine_name", "name"],
        lambda m: [[m.name, s.name] for s in m.software_list],
    ),
    "samples": (
        ["machine_name", "name"],
        lambda m: [[m.name, s.name] for s in m.samples],
    ),
    "history_sections": (
        ["machine_name", "name", "text", "order"],
        lambda m: [[m.name, h.name, h.text, str(h.order)] for h in m.history_sections],
    ),
    "resources": (
        ["machine_name", "type", "name", "size", "crc", "sha1"],
        lambda m: [[m.name, r.type, r.name, str(r.size), r.crc, r.sha1] for r in m.resources],
    ),
}


def _open_writer(stack: ExitStack, path: Path):
    f = stack.enter_context(open(path, "w", encoding="utf-8", newline=""))
    return csv.writer(f)


def export_to_csv(
    store: MachineStore, indices: DerivedIndices, directory: Union[str, Path]
) -> Path:
    """Write the catalog as CSV files.

    Writes machines.csv, one file per child table and one file per
    derived index. Child rows follow their machine's sort position and
    keep insertion order.

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
        machines = store.sorted_machines()
        logger.info(f"Exporting {len(machines)} machines to CSV in {output_dir}")

        try:
            with ExitStack() as stack:
                machines_writer = _open_writer(stack, output_dir / "machines.csv")
                machines_writer.writerow(MACHINE_HEADER)

                child_writers = {}
                for stem, (header, _) in CHILD_TABLES.items():
                    writer = _open_writer(stack, output_dir / f"{stem}.csv")
                    writer.writerow(header)
                    child_writers[stem] = writer

                for machine in machines:
                    machines_writer.writerow(machine_row(machine))
                    for stem, (_, rows) in CHILD_TABLES.items():
                        child_writers[stem].writerows(rows(machine))

            _write_indices(indices, output_dir)
        except OSError as e:
            raise ExportError(f"CSV export to {output_dir} failed: {e}") from e

    logger.info(f"CSV export complete: {output_dir}")
    return output_dir


def _write_indices(indices: DerivedIndices, output_dir: Path) -> None:
    for index in FLAT_INDICES:
        with open(output_dir / f"{index.value}.csv", "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["name", "machines"])
            writer.writerows(indices.counts(index))

    with open(output_dir / "subcategories.csv", "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["category", "subcategory", "machines"])
        writer.writerows(subcategory_rows(indices))
