import pytest

from mamedex.catalog.store import MachineStore
from mamedex.errors import SourceFileError
from mamedex.readers.mame_xml_reader import MameXMLReader


@pytest.mark.unit
def test_read_creates_every_machine(source_paths):
    store = MachineStore()

    result = MameXMLReader(source_paths["mame"]).read(store)

    assert result.processed == 8
    assert result.applied == 8
    assert result.skipped == 0
    assert store.names() == [
        "dkong", "galaxianb", "mspacman", "neogeo", "pachinko", "pacman", "puckman", "z80",
    ]


@pytest.mark.unit
def test_machine_attributes_and_flags(mame_store):
    pacman = mame_store.get("pacman")
    assert pacman.source_file == "pacman/pacman.cpp"
    assert pacman.clone_of == "puckman"
    assert pacman.rom_of == "puckman"
    assert pacman.description == "Pac-Man (Midway)"
    assert pacman.year == "1980"
    assert pacman.manufacturer == "Namco (Midway license)"
    assert pacman.driver_status == "good"
    assert pacman.is_bios is None

    assert mame_store.get("neogeo").is_bios is True
    z80 = mame_store.get("z80")
    assert z80.is_device is True
    assert z80.runnable is False
    assert z80.year is None
    assert mame_store.get("pachinko").is_mechanical is True


@pytest.mark.unit
def test_child_elements_are_parsed_in_order(mame_store):
    pacman = mame_store.get("pacman")
    assert [r.name for r in pacman.roms] == ["pacman.6e", "pm1_prg1.6e"]
    assert pacman.roms[1].merge == "pm1_prg1.6e"
    assert pacman.roms[1].status == "baddump"
    assert pacman.roms[0].sha1 == "e87e059c5be45753f7e9f33dff851f16d6751181"
    assert [d.name for d in pacman.device_refs] == ["z80"]

    dkong = mame_store.get("dkong")
    assert [s.name for s in dkong.samples] == ["death", "walk"]
    assert [s.name for s in dkong.software_list] == ["dkong_flop"]
    assert dkong.disks[0].region == "ide"
    assert dkong.disks[0].status == "nodump"

    neogeo = mame_store.get("neogeo")
    assert [(b.name, b.description) for b in neogeo.bios_sets] == [
        ("euro", "Europe MVS (Ver. 2)"),
        ("japan", "Japan MVS (J3)"),
    ]


@pytest.mark.unit
def test_malformed_rom_size_becomes_zero(mame_store):
    assert mame_store.get("neogeo").roms[0].size == 0


@pytest.mark.unit
def test_is_parent_matches_clone_and_sample_references(mame_store):
    for machine in mame_store:
        expected = not (machine.clone_of is not None or machine.sample_of is not None)
        assert machine.derived.is_parent == expected

    assert mame_store.get("galaxianb").derived.is_parent is False
    assert mame_store.get("puckman").derived.is_parent is True


@pytest.mark.unit
def test_partial_year_is_normalized(mame_store):
    assert mame_store.get("pachinko").year == "198?"
    assert mame_store.get("pachinko").derived.year == "Unknown"
    assert mame_store.get("dkong").derived.year == "1981"


@pytest.mark.unit
def test_unescaped_manufacturer_entity(mame_store):
    assert mame_store.get("pachinko").manufacturer == "<unknown>"


@pytest.mark.unit
def test_duplicate_machine_keeps_last_definition(tmp_path):
    path = tmp_path / "MAME 0.1.dat"
    path.write_text(
        '<datafile>'
        '<machine name="dup"><description>First</description></machine>'
        '<machine name="dup"><description>Second</description></machine>'
        '<machine><description>Nameless</description></machine>'
        '</datafile>'
    )
    store = MachineStore()

    result = MameXMLReader(path).read(store)

    assert len(store) == 1
    assert store.get("dup").description == "Second"
    assert result.skipped == 1


@pytest.mark.unit
def test_missing_file_raises_source_error(tmp_path):
    with pytest.raises(SourceFileError) as exc_info:
        MameXMLReader(tmp_path / "missing.dat").read(MachineStore())

    assert exc_info.value.source == "mame"
    assert exc_info.value.reason == "file not found"


@pytest.mark.unit
def test_malformed_xml_raises_source_error(tmp_path):
    path = tmp_path / "MAME 0.1.dat"
    path.write_text('<datafile><machine name="a"><description>A</description>')

    with pytest.raises(SourceFileError):
        MameXMLReader(path).read(MachineStore())
