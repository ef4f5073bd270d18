"""
Audit Logger

Every ledger change and import is logged, giving:
1. Complete traceability of what entered or left the ledger
2. Debugging capability for odd CSV exports
3. A history the owner can review

The audit logger:
- Always logs locally through structlog
- Persists to an audit store when one is configured
- Never lets an audit storage failure break the ledger flow
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from hotel_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from hotel_ledger.services.storage import AuditStorageInterface, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store (for persistence), if provided
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("hotel_ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except (StorageError, OSError) as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_csv_previewed(
        self,
        headers: list[str],
        mapping: dict[str, Optional[str]],
        total_rows: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.csv_previewed(
            headers=headers,
            mapping=mapping,
            total_rows=total_rows,
            correlation_id=correlation_id,
        ))

    def log_import_completed(
        self,
        total_rows: int,
        imported_count: int,
        mapping: dict[str, Optional[str]],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log import completion with imported/skipped counts."""
        self.log(AuditEventBuilder.import_completed(
            total_rows=total_rows,
            imported_count=imported_count,
            mapping=mapping,
            correlation_id=correlation_id,
        ))

    def log_transaction_added(
        self,
        transaction_id: str,
        description: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            description=description,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_manual_entry_rejected(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.manual_entry_rejected(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_transaction_deleted(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    def log_ledger_loaded(self, transaction_count: int, seeded: bool) -> None:
        self.log(AuditEventBuilder.ledger_loaded(
            transaction_count=transaction_count,
            seeded=seeded,
        ))

    def log_ledger_saved(
        self,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.ledger_saved(
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    def log_save_failed(
        self,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.save_failed(
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    def log_ledger_exported(self, filename: str, transaction_count: int) -> None:
        self.log(AuditEventBuilder.ledger_exported(
            filename=filename,
            transaction_count=transaction_count,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., previewing a CSV file)
    and pass it through the rest of that action.
    """
    return uuid4()
