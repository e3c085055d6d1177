import sqlite3

import pytest

from mamedex.catalog.indices import Index
from mamedex.catalog.store import MachineStore
from mamedex.errors import MissingDerivedDataError, NoDataLoadedError
from mamedex.export.sqlite_writer import CHILD_TABLES, export_to_sqlite

TABLES = {
    "machines", "roms", "bios_sets", "device_refs", "softwares", "samples", "disks",
    "history_sections", "resources", "categories", "subcategories", "series",
    "manufacturers", "languages", "players", "machine_languages", "machine_players",
    "extended_data",
}


@pytest.fixture
def db(loaded_pipeline, tmp_path):
    db_path = export_to_sqlite(loaded_pipeline.store, loaded_pipeline.indices, tmp_path / "machines.db")
    conn = sqlite3.connect(db_path)
    yield conn
    conn.close()


def _scalar(conn, sql, *params):
    return conn.execute(sql, params).fetchone()[0]


@pytest.mark.integration
def test_schema_tables(db):
    names = {row[0] for row in db.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}

    assert TABLES <= names


@pytest.mark.integration
def test_machine_rows(db):
    assert _scalar(db, "SELECT COUNT(*) FROM machines") == 8
    row = db.execute(
        "SELECT clone_of, is_bios, is_mature, languages FROM machines WHERE name = 'pacman'"
    ).fetchone()
    assert row == ("puckman", None, 0, "English, Japanese")
    assert _scalar(db, "SELECT is_bios FROM machines WHERE name = 'neogeo'") == 1


@pytest.mark.integration
def test_dimensions_match_indices(db, loaded_pipeline):
    indices = loaded_pipeline.indices
    for table, index in (
        ("categories", Index.CATEGORIES),
        ("series", Index.SERIES),
        ("manufacturers", Index.MANUFACTURERS),
        ("languages", Index.LANGUAGES),
        ("players", Index.PLAYERS),
    ):
        names = [row[0] for row in db.execute(f"SELECT name FROM {table} ORDER BY name")]
        assert names == indices.names(index)

    pairs = db.execute(
        "SELECT c.name, s.name FROM subcategories s JOIN categories c ON c.id = s.category_id "
        "ORDER BY c.name, s.name"
    ).fetchall()
    assert [f"{c} - {s}" for c, s in pairs] == indices.names(Index.SUBCATEGORIES)


@pytest.mark.integration
def test_machine_foreign_keys_resolved(db):
    row = db.execute(
        """
        SELECT c.name, s.name, se.name, mf.name
        FROM machines m
        JOIN categories c ON c.id = m.category_id
        JOIN subcategories s ON s.id = m.subcategory_id
        JOIN series se ON se.id = m.series_id
        JOIN manufacturers mf ON mf.id = m.manufacturer_id
        WHERE m.name = 'pacman'
        """
    ).fetchone()

    assert row == ("Maze", "Collect", "Pac-Man", "Namco")
    assert _scalar(db, "SELECT series_id FROM machines WHERE name = 'z80'") is None


@pytest.mark.integration
@pytest.mark.parametrize("table", CHILD_TABLES)
def test_child_rows_carry_resolved_machine_id(db, table):
    unresolved = _scalar(
        db,
        f"SELECT COUNT(*) FROM {table} t LEFT JOIN machines m ON m.id = t.machine_id "
        f"WHERE m.name IS NULL OR m.name != t.machine_name",
    )

    assert unresolved == 0


@pytest.mark.integration
def test_child_row_counts(db):
    assert _scalar(db, "SELECT COUNT(*) FROM roms") == 7
    assert _scalar(db, "SELECT COUNT(*) FROM extended_data") == 8
    assert _scalar(db, "SELECT COUNT(*) FROM bios_sets WHERE machine_name = 'neogeo'") == 2
    assert db.execute(
        'SELECT name, "order" FROM history_sections WHERE machine_name = \'dkong\' ORDER BY id'
    ).fetchall() == [("description", 1), ("scoring", 5)]


@pytest.mark.integration
def test_junction_tables(db):
    languages = db.execute(
        """
        SELECT l.name FROM machine_languages ml
        JOIN machines m ON m.id = ml.machine_id
        JOIN languages l ON l.id = ml.language_id
        WHERE m.name = 'pacman' ORDER BY l.name
        """
    ).fetchall()
    assert languages == [("English",), ("Japanese",)]

    players = db.execute(
        """
        SELECT p.name FROM machine_players mp
        JOIN machines m ON m.id = mp.machine_id
        JOIN players p ON p.id = mp.player_id
        WHERE m.name = 'galaxianb' ORDER BY p.name
        """
    ).fetchall()
    assert players == [("Alternate two-player mode",), ("Simultaneous two-player mode",)]
    assert _scalar(db, "SELECT COUNT(*) FROM machine_players") == 9


@pytest.mark.integration
def test_small_batches_give_same_content(loaded_pipeline, tmp_path):
    db_path = export_to_sqlite(
        loaded_pipeline.store, loaded_pipeline.indices, tmp_path / "small.db", batch_size=3
    )

    conn = sqlite3.connect(db_path)
    try:
        assert _scalar(conn, "SELECT COUNT(*) FROM machines") == 8
        assert _scalar(conn, "SELECT COUNT(*) FROM roms WHERE machine_id IS NULL") == 0
    finally:
        conn.close()


@pytest.mark.integration
def test_existing_file_is_replaced(loaded_pipeline, tmp_path):
    db_path = tmp_path / "machines.db"
    db_path.write_text("stale")

    export_to_sqlite(loaded_pipeline.store, loaded_pipeline.indices, db_path)

    conn = sqlite3.connect(db_path)
    try:
        assert _scalar(conn, "SELECT COUNT(*) FROM machines") == 8
    finally:
        conn.close()


@pytest.mark.unit
def test_requires_normalization_and_writes_nothing(mame_store, indices_for, tmp_path):
    db_path = tmp_path / "machines.db"

    with pytest.raises(MissingDerivedDataError):
        export_to_sqlite(mame_store, indices_for(mame_store), db_path)

    assert not db_path.exists()


@pytest.mark.unit
def test_rejects_empty_store_and_bad_batch_size(indices_for, tmp_path, loaded_pipeline):
    empty = MachineStore()
    with pytest.raises(NoDataLoadedError):
        export_to_sqlite(empty, indices_for(empty), tmp_path / "empty.db")

    with pytest.raises(ValueError):
        export_to_sqlite(loaded_pipeline.store, loaded_pipeline.indices, tmp_path / "x.db", batch_size=0)
