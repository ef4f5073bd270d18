"""
In-memory storage backends.

Used by tests and by hosts that keep the ledger in their own state.
Snapshots are copied on the way in and out so callers cannot mutate
stored state behind the backend's back.
"""

from typing import Optional

from hotel_ledger.models.audit import AuditEvent
from hotel_ledger.models.transaction import Transaction
from hotel_ledger.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Holds the ledger snapshot in process memory."""

    def __init__(self, initial: Optional[list[Transaction]] = None):
        self._transactions: Optional[list[Transaction]] = (
            list(initial) if initial is not None else None
        )
        self.save_count = 0

    def load(self) -> list[Transaction]:
        return list(self._transactions or [])

    def save(self, transactions: list[Transaction]) -> bool:
        self._transactions = list(transactions)
        self.save_count += 1
        return True

    def has_data(self) -> bool:
        return self._transactions is not None


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit trail kept in memory."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)
