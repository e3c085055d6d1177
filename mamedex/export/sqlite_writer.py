"""SQLite exporter building a normalized relational schema.

Dimension tables are filled from the derived index key sets, machines and
their child rows are written in batches, then foreign keys and junction
tables are resolved with follow-up statements.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from ..catalog.indices import DerivedIndices, Index, split_joined, split_subcategory_key
from ..catalog.models import Machine
from ..catalog.store import MachineStore
from ..errors import ExportError
from .common import require_derived

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5000

SCHEMA = """
CREATE TABLE series (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE subcategories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    category_id INTEGER,
    UNIQUE(name, category_id),
    FOREIGN KEY (category_id) REFERENCES categories(id)
);

CREATE TABLE manufacturers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE languages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE players (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE machines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    source_file TEXT,
    rom_of TEXT,
    clone_of TEXT,
    is_bios INTEGER,
    is_device INTEGER,
    runnable INTEGER,
    is_mechanical INTEGER,
    sample_of TEXT,
    description TEXT,
    year TEXT,
    manufacturer TEXT,
    driver_status TEXT,
    players TEXT,
    series TEXT,
    category TEXT,
    subcategory TEXT,
    is_mature INTEGER,
    languages TEXT,
    category_id INTEGER,
    subcategory_id INTEGER,
    series_id INTEGER,
    manufacturer_id INTEGER,
    FOREIGN KEY (category_id) REFERENCES categories(id),
    FOREIGN KEY (subcategory_id) REFERENCES subcategories(id),
    FOREIGN KEY (series_id) REFERENCES series(id),
    FOREIGN KEY (manufacturer_id) REFERENCES manufacturers(id)
);

CREATE TABLE machine_languages (
    machine_id INTEGER,
    language_id INTEGER,
    PRIMARY KEY (machine_id, language_id),
    FOREIGN KEY (machine_id) REFERENCES machines(id),
    FOREIGN KEY (language_id) REFERENCES languages(id)
);

CREATE TABLE machine_players (
    machine_id INTEGER,
    player_id INTEGER,
    PRIMARY KEY (machine_id, player_id),
    FOREIGN KEY (machine_id) REFERENCES machines(id),
    FOREIGN KEY (player_id) REFERENCES players(id)
);

CREATE TABLE extended_data (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    name TEXT,
    manufacturer TEXT,
    players TEXT,
    is_parent INTEGER,
    year TEXT,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE bios_sets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    name TEXT,
    description TEXT,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE roms (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    name TEXT,
    size INTEGER,
    merge TEXT,
    status TEXT,
    crc TEXT,
    sha1 TEXT,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE device_refs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    name TEXT,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE softwares (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    name TEXT,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE samples (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    name TEXT,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE disks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    name TEXT,
    sha1 TEXT,
    merge TEXT,
    status TEXT,
    region TEXT,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE history_sections (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    name TEXT,
    text TEXT,
    "order" INTEGER,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);

CREATE TABLE resources (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    machine_name TEXT,
    type TEXT,
    name TEXT,
    size INTEGER,
    crc TEXT,
    sha1 TEXT,
    machine_id INTEGER,
    FOREIGN KEY (machine_id) REFERENCES machines(id)
);
"""

# Tables carrying machine_name that get machine_id patched after insert
CHILD_TABLES = (
    "extended_data",
    "bios_sets",
    "roms",
    "device_refs",
    "softwares",
    "samples",
    "disks",
    "history_sections",
    "resources",
)

INSERT_MACHINE = """
    INSERT INTO machines (
        name, source_file, rom_of, clone_of, is_bios, is_device, runnable,
        is_mechanical, sample_of, description, year, manufacturer,
        driver_status, players, series, category, subcategory, is_mature,
        languages
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def export_to_sqlite(
    store: MachineStore,
    indices: DerivedIndices,
    db_path: Union[str, Path],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Path:
    """Write the catalog to a fresh SQLite database.

    Any existing file at ``db_path`` is deleted first. Machines are
    committed ``batch_size`` at a time and a machine's rows always land in
    the same transaction.

    Args:
        store: Normalized machine store
        indices: Indices rebuilt from the same store
        db_path: Database file to create
        batch_size: Machines per transaction

    Returns:
        Path to the database file

    Raises:
        ValueError: If batch_size is not positive
        NoDataLoadedError: If the store is empty
        MissingDerivedDataError: If normalization has not run
        ExportError: If the database cannot be written
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    db_path = Path(db_path)

    with store.exclusive():
        require_derived(store)
        machines = store.sorted_machines()

        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            if db_path.exists():
                logger.debug(f"Removing previous database {db_path}")
                db_path.unlink()
        except OSError as e:
            raise ExportError(f"Cannot prepare database file {db_path}: {e}") from e

        logger.info(f"Exporting {len(machines)} machines to SQLite: {db_path}")

        conn = None
        try:
            conn = sqlite3.connect(db_path)
            conn.execute("PRAGMA foreign_keys = ON")
            conn.executescript(SCHEMA)

            _insert_dimensions(conn, indices)
            _insert_machines(conn, machines, batch_size)
            _resolve_foreign_keys(conn)
            _insert_junctions(conn)
        except (sqlite3.Error, OSError) as e:
            raise ExportError(f"SQLite export to {db_path} failed: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    logger.info(f"SQLite export complete: {db_path}")
    return db_path


def _insert_names(conn: sqlite3.Connection, table: str, names: Iterable[str]) -> None:
    conn.executemany(
        f"INSERT OR IGNORE INTO {table} (name) VALUES (?)",
        [(name,) for name in names],
    )


def _insert_dimensions(conn: sqlite3.Connection, indices: DerivedIndices) -> None:
    """Fill dimension tables from the index key sets."""
    _insert_names(conn, "categories", indices.names(Index.CATEGORIES))
    _insert_names(conn, "series", indices.names(Index.SERIES))
    _insert_names(conn, "manufacturers", indices.names(Index.MANUFACTURERS))
    _insert_names(conn, "languages", indices.names(Index.LANGUAGES))
    _insert_names(conn, "players", indices.names(Index.PLAYERS))

    conn.executemany(
        """
        INSERT OR IGNORE INTO subcategories (name, category_id)
        SELECT ?, id FROM categories WHERE name = ?
        """,
        [
            (subcategory, category)
            for category, subcategory in (
                split_subcategory_key(key) for key in indices.names(Index.SUBCATEGORIES)
            )
        ],
    )
    conn.commit()


def _machine_values(machine: Machine) -> Tuple:
    return (
        machine.name,
        machine.source_file,
        machine.rom_of,
        machine.clone_of,
        machine.is_bios,
        machine.is_device,
        machine.runnable,
        machine.is_mechanical,
        machine.sample_of,
        machine.description,
        machine.year,
        machine.manufacturer,
        machine.driver_status,
        machine.players,
        machine.series,
        machine.category,
        machine.subcategory,
        machine.is_mature,
        ", ".join(machine.languages),
    )


def _insert_machine(conn: sqlite3.Connection, machine: Machine) -> None:
    """Insert one machine and all of its child rows."""
    name = machine.name
    derived = machine.derived

    conn.execute(INSERT_MACHINE, _machine_values(machine))
    conn.execute(
        "INSERT INTO extended_data (machine_name, name, manufacturer, players, is_parent, year) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        (name, derived.name, derived.manufacturer, derived.players, derived.is_parent, derived.year),
    )
    conn.executemany(
        "INSERT INTO bios_sets (machine_name, name, description) VALUES (?, ?, ?)",
        [(name, b.name, b.description) for b in machine.bios_sets],
    )
    conn.executemany(
        "INSERT INTO roms (machine_name, name, size, merge, status, crc, sha1) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)",
        [(name, r.name, r.size, r.merge, r.status, r.crc, r.sha1) for r in machine.roms],
    )
    conn.executemany(
        "INSERT INTO device_refs (machine_name, name) VALUES (?, ?)",
        [(name, d.name) for d in machine.device_refs],
    )
    conn.executemany(
        "INSERT INTO softwares (machine_name, name) VALUES (?, ?)",
        [(name, s.name) for s in machine.software_list],
    )
    conn.executemany(
        "INSERT INTO samples (machine_name, name) VALUES (?, ?)",
        [(name, s.name) for s in machine.samples],
    )
    conn.executemany(
        "INSERT INTO disks (machine_name, name, sha1, merge, status, region) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        [(name, d.name, d.sha1, d.merge, d.status, d.region) for d in machine.disks],
    )
    conn.executemany(
        'INSERT INTO history_sections (machine_name, name, text, "order") VALUES (?, ?, ?, ?)',
        [(name, h.name, h.text, h.order) for h in machine.history_sections],
    )
    conn.executemany(
        "INSERT INTO resources (machine_name, type, name, size, crc, sha1) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        [(name, r.type, r.name, r.size, r.crc, r.sha1) for r in machine.resources],
    )


def _insert_machines(conn: sqlite3.Connection, machines: List[Machine], batch_size: int) -> None:
    """Insert machines, committing once per batch."""
    for start in range(0, len(machines), batch_size):
        batch = machines[start:start + batch_size]
        for machine in batch:
            _insert_machine(conn, machine)
        conn.commit()
        logger.debug(f"Committed machines {start + 1}-{start + len(batch)} of {len(machines)}")


def _resolve_foreign_keys(conn: sqlite3.Connection) -> None:
    """Patch dimension ids on machines and machine ids on child tables."""
    conn.execute(
        "UPDATE machines SET category_id = "
        "(SELECT id FROM categories WHERE categories.name = machines.category)"
    )
    conn.execute(
        "UPDATE machines SET subcategory_id = ("
        "SELECT id FROM subcategories "
        "WHERE subcategories.name = machines.subcategory "
        "AND subcategories.category_id = machines.category_id)"
    )
    conn.execute(
        "UPDATE machines SET series_id = "
        "(SELECT id FROM series WHERE series.name = machines.series)"
    )
    conn.execute(
        "UPDATE machines SET manufacturer_id = ("
        "SELECT manufacturers.id FROM manufacturers "
        "JOIN extended_data ON extended_data.manufacturer = manufacturers.name "
        "WHERE extended_data.machine_name = machines.name)"
    )
    for table in CHILD_TABLES:
        conn.execute(
            f"UPDATE {table} SET machine_id = "
            f"(SELECT id FROM machines WHERE machines.name = {table}.machine_name)"
        )
    conn.commit()


def _insert_junctions(conn: sqlite3.Connection) -> None:
    """Build machine_languages and machine_players from the joined columns."""
    language_rows = [
        (machine_id, language)
        for machine_id, languages in conn.execute(
            "SELECT id, languages FROM machines WHERE languages != ''"
        )
        for language in split_joined(languages)
    ]
    conn.executemany(
        "INSERT OR IGNORE INTO machine_languages (machine_id, language_id) "
        "SELECT ?, id FROM languages WHERE name = ?",
        language_rows,
    )

    player_rows = [
        (machine_id, player)
        for machine_id, players in conn.execute(
            "SELECT machine_id, players FROM extended_data WHERE players IS NOT NULL"
        )
        for player in split_joined(players)
    ]
    conn.executemany(
        "INSERT OR IGNORE INTO machine_players (machine_id, player_id) "
        "SELECT ?, id FROM players WHERE name = ?",
        player_rows,
    )
    conn.commit()
    logger.debug(
        f"Linked {len(language_rows)} machine languages and {len(player_rows)} machine players"
    )
