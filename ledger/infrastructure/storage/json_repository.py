"""
Portfolio repositories.

``JsonFileRepository`` stores the snapshot as a backup document on disk;
``InMemoryRepository`` keeps it in memory for tests and the API.
"""

import os
import tempfile
from pathlib import Path
from threading import RLock

from loguru import logger

from ledger.core.exceptions.ledger import DataError
from ledger.core.interfaces.repository import IPortfolioRepository
from ledger.core.models.snapshot import PortfolioSnapshot

from .backup_codec import dumps_backup, import_backup


class JsonFileRepository(IPortfolioRepository):
    """Snapshot persisted as a backup JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = RLock()

    def load(self) -> PortfolioSnapshot:
        """Load the snapshot; a missing file is an empty portfolio.

        Raises:
            ImportFormatError: If the file is not a valid backup document
            DataError: If the file cannot be read
        """
        with self._lock:
            if not self.path.exists():
                logger.info(f"No portfolio file at {self.path}, starting empty")
                return PortfolioSnapshot()
            try:
                text = self.path.read_text(encoding="utf-8")
            except OSError as e:
                raise DataError(f"Cannot read portfolio file {self.path}: {e}") from e
        logger.debug(f"Loading portfolio from {self.path}")
        return import_backup(text)

    def save(self, snapshot: PortfolioSnapshot) -> None:
        """Write the snapshot, replacing the file atomically.

        Raises:
            DataError: If the file cannot be written
        """
        payload = dumps_backup(snapshot)
        with self._lock:
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self.path)
            except OSError as e:
                if tmp_name is not None:
                    self._discard(tmp_name)
                raise DataError(f"Cannot write portfolio file {self.path}: {e}") from e
        logger.debug(f"Saved portfolio to {self.path}")

    @staticmethod
    def _discard(tmp_name: str) -> None:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Cannot remove temporary file {tmp_name}: {e}")


class InMemoryRepository(IPortfolioRepository):
    """Repository holding a single snapshot in memory."""

    def __init__(self, snapshot: PortfolioSnapshot | None = None) -> None:
        self._snapshot = snapshot or PortfolioSnapshot()
        self.save_count = 0

    def load(self) -> PortfolioSnapshot:
        return self._snapshot

    def save(self, snapshot: PortfolioSnapshot) -> None:
        self._snapshot = snapshot
        self.save_count += 1
