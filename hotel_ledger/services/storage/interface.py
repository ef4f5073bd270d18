"""
Abstract Storage Interfaces

The ledger engine never owns storage. It reads a snapshot and hands back
new transactions; persisting them is the storage collaborator's job.

This allows us to:
1. Use in-memory storage for tests
2. Persist to a JSON file for single-user deployments
3. Swap in a real database later

The interface is intentionally small: load a snapshot, save a snapshot.
"""

from abc import ABC, abstractmethod

from hotel_ledger.models.audit import AuditEvent
from hotel_ledger.models.transaction import Transaction


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Implementations store the whole ledger as one ordered snapshot.
    Callers are expected to serialize concurrent writes.
    """

    @abstractmethod
    def load(self) -> list[Transaction]:
        """
        Load the stored ledger.

        Returns:
            The stored transactions in ledger order; an empty list when
            nothing has been stored yet

        Raises:
            CorruptLedgerError: if stored data exists but cannot be parsed
            StorageError: if the backend cannot be read
        """

    @abstractmethod
    def save(self, transactions: list[Transaction]) -> bool:
        """
        Replace the stored ledger with a new snapshot.

        Returns:
            True if saved successfully, False otherwise
        """

    def has_data(self) -> bool:
        """Whether a ledger has ever been saved (even an empty one)."""
        return True


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class CorruptLedgerError(StorageError):
    """Stored ledger data exists but is not a valid ledger."""
    pass
