"""
Data Models Package

This package contains all Pydantic models used by the ledger engine.
All data flowing through the system must conform to these schemas.
"""

from hotel_ledger.models.transaction import (
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    MAPPING_FIELDS,
    SOURCE_IMPORT,
    SOURCE_MANUAL,
    CategoryTotal,
    ColumnMapping,
    ImportPreview,
    ImportResult,
    LedgerAnalytics,
    ManualEntry,
    ParsedCsv,
    Transaction,
    TransactionType,
    TrendPoint,
    ValidationIssue,
    ValidationResult,
    dump_ledger,
    load_ledger,
    new_transaction_id,
    to_iso_instant,
    utc_calendar_day,
)
from hotel_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_CATEGORY",
    "DEFAULT_DESCRIPTION",
    "MAPPING_FIELDS",
    "SOURCE_IMPORT",
    "SOURCE_MANUAL",
    "CategoryTotal",
    "ColumnMapping",
    "ImportPreview",
    "ImportResult",
    "LedgerAnalytics",
    "ManualEntry",
    "ParsedCsv",
    "Transaction",
    "TransactionType",
    "TrendPoint",
    "ValidationIssue",
    "ValidationResult",
    "dump_ledger",
    "load_ledger",
    "new_transaction_id",
    "to_iso_instant",
    "utc_calendar_day",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
