"""Reader for nplayers.ini.

The file holds a single ``[NPlayers]`` section of ``<rom name>=<value>``
lines, where value is e.g. ``1P``, ``2P sim``, ``4P alt / 2P sim`` or
``???``. Values are stored verbatim; translating them is a normalization
concern (see ``mamedex.normalize.players``).
"""

import logging

from ..catalog.store import MachineStore
from .base import ReadResult, SourceReader

logger = logging.getLogger(__name__)


class NPlayersReader(SourceReader):
    """Joins the raw player-count string onto known machines."""

    source_name = "nplayers"

    def read(self, store: MachineStore) -> ReadResult:
        """Apply nplayers.ini to the store.

        Args:
            store: Machine store to update

        Returns:
            ReadResult with applied/skipped counts

        Raises:
            SourceFileError: If the file does not exist or cannot be read
        """
        self._check_path()
        result = ReadResult(self.source_name)

        with (
            store.exclusive(),
            self._reading(),
            open(self.path, "r", encoding="utf-8", errors="ignore") as f,
        ):
            for line in f:
                line = line.strip()
                if not line or line[0] in "[;":
                    continue

                rom_name, sep, value = line.partition("=")
                if not sep:
                    continue
                result.processed += 1

                machine = store.get(rom_name.strip())
                if machine is None:
                    result.skipped += 1
                    continue

                machine.players = value.strip()
                result.applied += 1

        return self._log_result(result)
