import pytest

from mamedex.catalog.models import Machine
from mamedex.catalog.store import MachineStore
from mamedex.errors import NO_DATA_MESSAGE, NoDataLoadedError


@pytest.mark.unit
def test_create_overwrites_previous_machine():
    store = MachineStore()
    first = store.create("pacman")
    first.description = "old"

    second = store.create("pacman")

    assert len(store) == 1
    assert store.get("pacman") is second
    assert second.description is None


@pytest.mark.unit
def test_names_and_sorted_machines_are_alphabetical():
    store = MachineStore()
    for name in ("zaxxon", "dkong", "pacman"):
        store.add(Machine(name=name))

    assert store.names() == ["dkong", "pacman", "zaxxon"]
    assert [m.name for m in store.sorted_machines()] == ["dkong", "pacman", "zaxxon"]


@pytest.mark.unit
def test_remove_reports_whether_machine_existed():
    store = MachineStore()
    store.add(Machine(name="pacman"))

    assert store.remove("pacman") is True
    assert store.remove("pacman") is False
    assert "pacman" not in store


@pytest.mark.unit
def test_iteration_tolerates_removal():
    store = MachineStore()
    for name in ("a", "b", "c"):
        store.add(Machine(name=name))

    for machine in store:
        store.remove(machine.name)

    assert store.is_empty()


@pytest.mark.unit
def test_require_data_raises_on_empty_store():
    with pytest.raises(NoDataLoadedError) as exc_info:
        MachineStore().require_data()

    assert str(exc_info.value) == NO_DATA_MESSAGE


@pytest.mark.unit
def test_exclusive_is_reentrant():
    store = MachineStore()

    with store.exclusive():
        with store.exclusive():
            store.create("pacman")

    assert "pacman" in store


@pytest.mark.unit
def test_clear_empties_store():
    store = MachineStore()
    store.create("pacman")
    store.create("dkong")

    store.clear()

    assert len(store) == 0
    with pytest.raises(NoDataLoadedError):
        store.require_data()
