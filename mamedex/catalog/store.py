"""Entity store holding every Machine keyed by shortname."""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from ..errors import NoDataLoadedError
from .models import Machine

logger = logging.getLogger(__name__)


class MachineStore:
    """Single shared machine collection for the lifetime of a pipeline.

    Passes (readers, filters, normalization, exporters) run one at a time
    and hold ``exclusive()`` for their whole duration. The lock is
    re-entrant so a pass may call helpers that take it again.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._machines: Dict[str, Machine] = {}
        self._lock = threading.RLock()

    @contextmanager
    def exclusive(self) -> Iterator["MachineStore"]:
        """Hold exclusive access to the store for a whole pass."""
        with self._lock:
            yield self

    def create(self, name: str) -> Machine:
        """Create a machine, replacing any previous machine with the same name.

        Args:
            name: Machine shortname

        Returns:
            The newly created Machine
        """
        machine = Machine(name=name)
        with self._lock:
            if name in self._machines:
                logger.debug(f"Duplicate machine '{name}' replaced by later definition")
            self._machines[name] = machine
        return machine

    def add(self, machine: Machine) -> Machine:
        """Insert a fully built machine (overwrite-last-wins)."""
        with self._lock:
            self._machines[machine.name] = machine
        return machine

    def get(self, name: str) -> Optional[Machine]:
        """Get machine by shortname, or None if unknown."""
        return self._machines.get(name)

    def remove(self, name: str) -> bool:
        """Remove a machine.

        Returns:
            True if the machine existed
        """
        with self._lock:
            return self._machines.pop(name, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._machines.clear()

    def names(self) -> List[str]:
        """Return all shortnames sorted alphabetically."""
        return sorted(self._machines)

    def sorted_machines(self) -> List[Machine]:
        """Return machines sorted by name, the order every exporter writes in."""
        return [self._machines[name] for name in self.names()]

    def is_empty(self) -> bool:
        return not self._machines

    def require_data(self) -> None:
        """Raise NoDataLoadedError if nothing has been read yet."""
        if not self._machines:
            raise NoDataLoadedError()

    def __contains__(self, name: object) -> bool:
        return name in self._machines

    def __len__(self) -> int:
        return len(self._machines)

    def __iter__(self) -> Iterator[Machine]:
        # Snapshot so removal passes can iterate and mutate safely
        return iter(list(self._machines.values()))
