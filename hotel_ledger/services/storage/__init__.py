"""
Storage Services Package

Provides abstract interfaces and concrete implementations for ledger and
audit storage. JSON-file and in-memory backends are included.
"""

from hotel_ledger.services.storage.interface import (
    AuditStorageInterface,
    CorruptLedgerError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from hotel_ledger.services.storage.json_file import JsonFileLedgerStorage
from hotel_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "CorruptLedgerError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
]
