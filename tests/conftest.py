"""
Shared pytest fixtures and utilities for the mamedex test suite.

Source fixtures are tiny but realistic excerpts of the real files, written
to ``tmp_path`` under the names the source registry looks for.
"""

from pathlib import Path
from typing import Any, Callable, Dict

import pytest
import yaml

from mamedex.catalog.indices import DerivedIndices
from mamedex.catalog.models import Machine
from mamedex.catalog.store import MachineStore


MAME_XML = """<?xml version="1.0"?>
<!DOCTYPE datafile>
<datafile build="0.262">
  <machine name="puckman" sourcefile="pacman/pacman.cpp">
    <description>Puck Man (Japan set 1)</description>
    <year>1980</year>
    <manufacturer>Namco</manufacturer>
    <rom name="pm1_prg1.6e" size="2048" crc="f36e88ab" sha1="813cecf44bf5464b1aed64b36f5047e4c79ba176" region="maincpu"/>
    <rom name="pm1_prg2.6k" size="2048" crc="618bd9b3" sha1="b9ca52b63a49ddece768378d331deebbe34fe177" region="maincpu"/>
    <device_ref name="z80"/>
    <driver status="good" emulation="good"/>
  </machine>
  <machine name="pacman" sourcefile="pacman/pacman.cpp" cloneof="puckman" romof="puckman">
    <description>Pac-Man (Midway)</description>
    <year>1980</year>
    <manufacturer>Namco (Midway license)</manufacturer>
    <rom name="pacman.6e" size="4096" crc="c1e6ab10" sha1="e87e059c5be45753f7e9f33dff851f16d6751181"/>
    <rom name="pm1_prg1.6e" merge="pm1_prg1.6e" size="2048" crc="f36e88ab" status="baddump"/>
    <device_ref name="z80"/>
    <driver status="good"/>
  </machine>
  <machine name="mspacman" sourcefile="pacman/pacman.cpp">
    <description>Ms. Pac-Man</description>
    <year>1981</year>
    <manufacturer>Midway / General Computer Corporation</manufacturer>
    <rom name="pacman.6e" size="4096" crc="c1e6ab10"/>
    <driver status="good"/>
  </machine>
  <machine name="dkong" sourcefile="nintendo/dkong.cpp">
    <description>Donkey Kong (US set 1)</description>
    <year>1981</year>
    <manufacturer>Nintendo of America</manufacturer>
    <rom name="c_5et_g.bin" size="4096" crc="ba70b88b"/>
    <device_ref name="z80"/>
    <sample name="death"/>
    <sample name="walk"/>
    <softwarelist tag="flop" name="dkong_flop" status="original"/>
    <disk name="dkong_chd" sha1="0123456789abcdef0123456789abcdef01234567" region="ide" merge="dkong_chd" status="nodump"/>
    <driver status="good"/>
  </machine>
  <machine name="neogeo" sourcefile="neogeo/neogeo.cpp" isbios="yes">
    <description>Neo-Geo MV-6F</description>
    <year>1990</year>
    <manufacturer>SNK</manufacturer>
    <biosset name="euro" description="Europe MVS (Ver. 2)" default="yes"/>
    <biosset name="japan" description="Japan MVS (J3)"/>
    <rom name="sp-s2.sp1" size="abc" crc="9036d879"/>
    <driver status="good"/>
  </machine>
  <machine name="z80" sourcefile="cpu/z80/z80.cpp" isdevice="yes" runnable="no">
    <description>Zilog Z80</description>
    <manufacturer>Zilog</manufacturer>
  </machine>
  <machine name="pachinko" sourcefile="misc/pachinko.cpp" ismechanical="yes">
    <description>Pachinko Machine</description>
    <year>198?</year>
    <manufacturer>&lt;unknown&gt;</manufacturer>
    <driver status="preliminary"/>
  </machine>
  <machine name="galaxianb" sourcefile="galaxian/galaxian.cpp" sampleof="galaxian">
    <description>Galaxian (bootleg)</description>
    <year>1979</year>
    <manufacturer>bootleg</manufacturer>
    <driver status="imperfect"/>
  </machine>
</datafile>
"""

CATVER_INI = """;; CatVer 0.262
[FOLDER_SETTINGS]
RootFolderIcon mame
SubFolderIcon folder

[Category]
puckman=Maze / Collect
pacman=Maze / Collect
mspacman=Maze / Collect
dkong=Platform / Climb
neogeo=System / BIOS
z80=System / Device
pachinko=Slot Machine / Pachinko * Mature *
galaxianb=Shooter / Gallery
ghostmachine=Maze / Collect
brokenline=Maze

[VerAdded]
pacman=0.1
"""

SERIES_INI = """;; Series 0.262
[FOLDER_SETTINGS]
RootFolderIcon=mame
SubFolderIcon=folder

[ROOT_FOLDER]

[Pac-Man]
pacman
mspacman
puckman
ghostmachine

[Donkey Kong]
dkong
"""

LANGUAGES_INI = """;; Languages 0.262
[FOLDER_SETTINGS]
RootFolderIcon=mame

[ROOT_FOLDER]

[English]
pacman
mspacman
dkong

[Japanese]
puckman
pacman
"""

NPLAYERS_INI = """;; NPlayers 0.262
[NPlayers]
puckman=2P alt
pacman=2P alt
mspacman=2P alt
dkong=2P alt
neogeo=BIOS
z80=Device
pachinko=???
galaxianb=2P alt / 2P sim
ghostmachine=1P
"""

HISTORY_XML = """<?xml version="1.0" encoding="UTF-8"?>
<history version="2.62" date="2024-01-31">
  <entry>
    <systems>
      <system name="pacman" />
      <system name="puckman" />
      <system name="ghostmachine" />
    </systems>
    <text>- DESCRIPTION -

Pac-Man is a maze game.

- TRIVIA -

Originally called Puck Man.

- CONTRIBUTE -

Edit this entry.
</text>
  </entry>
  <entry>
    <systems>
      <system name="dkong" />
    </systems>
    <text>- DESCRIPTION -

Jumpman saves Pauline.

- SCORING -

Hammer: 300 points.
</text>
  </entry>
  <entry>
    <software>
      <item list="nes" name="smb" />
    </software>
    <text>- DESCRIPTION -

A console game.
</text>
  </entry>
</history>
"""

RESOURCES_DAT = r"""<?xml version="1.0"?>
<datafile>
  <header>
    <name>pS_AllProject</name>
  </header>
  <machine name="snap">
    <description>Snapshots</description>
    <rom name="snap\pacman.png" size="1234" crc="aa11" sha1="bb22"/>
    <rom name="cabinets\dkong.png" size="99" crc="cc33" sha1="dd44"/>
  </machine>
  <machine name="cabinets">
    <description>Cabinets</description>
    <rom name="cabinets\dkong.png" size="5678" crc="ee55" sha1="ff66"/>
    <rom name="cabinets\ghostmachine.png" size="1" crc="0" sha1="0"/>
    <rom name="nopath.png" size="1" crc="0" sha1="0"/>
  </machine>
</datafile>
"""

# Registry file name for each fixture
SOURCE_FILES = {
    "mame": ("MAME 0.262.dat", MAME_XML),
    "catver": ("catver.ini", CATVER_INI),
    "series": ("series.ini", SERIES_INI),
    "languages": ("languages.ini", LANGUAGES_INI),
    "nplayers": ("nplayers.ini", NPLAYERS_INI),
    "history": ("history.xml", HISTORY_XML),
    "resources": ("pS_AllProject_20240131_262_(mame).dat", RESOURCES_DAT),
}


def write_source(directory: Path, source: str) -> Path:
    """Write one source fixture into a directory and return its path."""
    filename, content = SOURCE_FILES[source]
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """
    Data directory holding every source fixture.
    """
    data_dir = tmp_path / "data"
    for source in SOURCE_FILES:
        write_source(data_dir, source)
    return data_dir


@pytest.fixture
def source_paths(source_dir: Path) -> Dict[str, Path]:
    """
    Source name -> fixture path.
    """
    return {name: source_dir / filename for name, (filename, _) in SOURCE_FILES.items()}


@pytest.fixture
def mame_store(source_paths: Dict[str, Path]) -> MachineStore:
    """
    Store populated by the MAME reader only.
    """
    from mamedex.readers.mame_xml_reader import MameXMLReader

    store = MachineStore()
    MameXMLReader(source_paths["mame"]).read(store)
    return store


@pytest.fixture
def loaded_pipeline(source_paths: Dict[str, Path]):
    """
    Pipeline with every source read, normalized and indexed.
    """
    from mamedex.pipeline import CatalogPipeline

    pipeline = CatalogPipeline()
    pipeline.import_sources(source_paths)
    return pipeline


@pytest.fixture
def make_store() -> Callable[..., MachineStore]:
    """
    Build a store from machine keyword dicts.

    Usage:
        store = make_store({"name": "pacman", "clone_of": "puckman"})
    """

    def _builder(*machines: Dict[str, Any]) -> MachineStore:
        store = MachineStore()
        for fields in machines:
            store.add(Machine(**fields))
        return store

    return _builder


@pytest.fixture
def indices_for() -> Callable[[MachineStore], DerivedIndices]:
    """
    Rebuild fresh indices for a store.
    """

    def _builder(store: MachineStore) -> DerivedIndices:
        indices = DerivedIndices()
        indices.rebuild_all(store)
        return indices

    return _builder


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """
    Create a mamedex.yaml in a temp directory.

    Usage:
        path = make_config({"filters": ["clones"]})
    """

    def _builder(overrides: Dict[str, Any] | None = None) -> Path:
        base = {
            "paths": {
                "data_dir": str(tmp_path / "data"),
                "export_dir": str(tmp_path / "export"),
            },
            "logging": {"console": False},
        }
        if overrides:
            base = merge_dicts(base, overrides)

        cfg_path = tmp_path / "mamedex.yaml"
        cfg_path.write_text(yaml.safe_dump(base))
        return cfg_path

    return _builder


def merge_dicts(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dictionaries without mutating inputs.
    """
    result = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
