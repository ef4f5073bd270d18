"""
JSON File Ledger Storage

Persists the ledger as a JSON array of transactions - the same shape
the dashboard exports for backup. Writes go through a temporary file and
an atomic rename, retried on transient OS errors.
"""

import os
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import ValidationError
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from hotel_ledger.config import get_settings
from hotel_ledger.models.transaction import Transaction, dump_ledger, load_ledger
from hotel_ledger.services.storage.interface import (
    CorruptLedgerError,
    LedgerStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    Ledger storage backed by a single JSON file.

    A missing file means "nothing saved yet" and loads as an empty ledger.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        wait: Optional[wait_base] = None,
        attempts: int = 3,
    ):
        """
        Initialize file storage.

        Args:
            path: Ledger file location. Defaults to the configured
                  LEDGER_STORAGE_FILE_PATH.
            wait: tenacity wait strategy between write attempts.
            attempts: Total write attempts before giving up.
        """
        self._path = Path(path or get_settings().storage.file_path)
        self._wait = wait or wait_exponential(multiplier=1, min=2, max=10)
        self._attempts = attempts

    @property
    def path(self) -> Path:
        return self._path

    def has_data(self) -> bool:
        return self._path.exists()

    def load(self) -> list[Transaction]:
        """Read the ledger file."""
        if not self._path.exists():
            return []

        try:
            payload = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptLedgerError(
                f"Ledger file {self._path} is not valid UTF-8: {e.reason}"
            ) from e
        except OSError as e:
            raise StorageError(f"Could not read ledger file {self._path}: {e}") from e

        try:
            return load_ledger(payload)
        except ValidationError as e:
            raise CorruptLedgerError(
                f"Ledger file {self._path} is not a valid ledger: {e.error_count()} errors"
            ) from e

    def save(self, transactions: list[Transaction]) -> bool:
        """Write the ledger file, retrying transient OS errors."""
        payload = dump_ledger(transactions, indent=2)
        retrying = Retrying(
            stop=stop_after_attempt(self._attempts),
            wait=self._wait,
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        try:
            retrying(self._write, payload)
        except (OSError, RetryError) as e:
            logger.error("ledger_save_failed", path=str(self._path), error=str(e))
            return False

        logger.debug("ledger_saved", path=str(self._path), count=len(transactions))
        return True

    def _write(self, payload: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self._path)
