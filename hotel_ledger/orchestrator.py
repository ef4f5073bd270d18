"""
Main Orchestrator for Hotel Ledger

This module ties the components together and defines the end-to-end flows:
1. CSV Import (text → preview → mapping review → transactions)
2. Ledger maintenance (load, add manual entry, delete, export)
3. Analytics (ledger snapshot → dashboard view)

The core engine (parser, mapper, normalizer, aggregator) never touches
storage. Only LedgerService talks to the injected storage collaborator.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from hotel_ledger.analytics import LedgerAggregator
from hotel_ledger.audit import AuditLogger, create_correlation_id
from hotel_ledger.config import get_settings
from hotel_ledger.formatting import format_currency
from hotel_ledger.ingest import ColumnMapper, CsvParser, TransactionNormalizer
from hotel_ledger.models.transaction import (
    ColumnMapping,
    ImportPreview,
    ImportResult,
    LedgerAnalytics,
    ManualEntry,
    Transaction,
    TransactionType,
    ValidationResult,
    dump_ledger,
)
from hotel_ledger.services.storage import (
    CorruptLedgerError,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    NotFoundError,
)
from hotel_ledger.validation import ManualEntryValidator


SAMPLE_TRANSACTIONS = [
    Transaction(id="1", date="2023-10-25", description="Room 101 Booking",
                amount=4500, type=TransactionType.INCOME, category="Room Revenue"),
    Transaction(id="2", date="2023-10-25", description="Vegetable Supply",
                amount=1200, type=TransactionType.EXPENSE, category="F&B Cost"),
    Transaction(id="3", date="2023-10-26", description="Banquet Advance",
                amount=15000, type=TransactionType.INCOME, category="Banquet"),
    Transaction(id="4", date="2023-10-26", description="Electricity Bill",
                amount=8500, type=TransactionType.EXPENSE, category="Utilities"),
]


class TransactionRejectedError(ValueError):
    """A manual entry failed validation and was not added."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(f"Transaction rejected: {messages}")


class CsvImportFlow:
    """
    Orchestrates the CSV import flow.

    Flow:
    1. Preview → Parse text, infer mapping, show first rows
    2. Review → User may override the mapping (outside this class)
    3. Import → Normalize every row, drop rejects, report counts

    The flow never writes to storage; LedgerService appends the result.
    """

    def __init__(
        self,
        parser: Optional[CsvParser] = None,
        mapper: Optional[ColumnMapper] = None,
        normalizer: Optional[TransactionNormalizer] = None,
        audit_logger: Optional[AuditLogger] = None,
        preview_rows: Optional[int] = None,
    ):
        settings = get_settings().ledger
        self._parser = parser or CsvParser(delimiter=settings.csv_delimiter)
        self._mapper = mapper or ColumnMapper()
        self._normalizer = normalizer or TransactionNormalizer()
        self._audit_logger = audit_logger
        self._preview_rows = preview_rows or settings.preview_rows

    def preview(
        self,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> ImportPreview:
        """
        Parse the text and propose a column mapping.

        Text without a header line gives an empty preview, not an error.
        """
        parsed = self._parser.parse(text)
        mapping = self._mapper.infer(parsed.headers)

        preview = ImportPreview(
            headers=parsed.headers,
            mapping=mapping,
            sample=self._parser.preview(parsed, limit=self._preview_rows),
            total_rows=len(parsed.rows),
        )

        if self._audit_logger and not parsed.is_empty:
            self._audit_logger.log_csv_previewed(
                headers=parsed.headers,
                mapping=mapping.as_dict(),
                total_rows=preview.total_rows,
                correlation_id=correlation_id,
            )

        return preview

    def run(
        self,
        text: str,
        mapping: Optional[ColumnMapping] = None,
        now: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ImportResult:
        """
        Import every row of the text.

        Args:
            text: Raw CSV text
            mapping: The (possibly user-edited) mapping. Inferred from the
                     headers when omitted.
            now: Moment substituted for missing or malformed dates

        Returns:
            ImportResult with accepted transactions in original row order
        """
        parsed = self._parser.parse(text)
        if parsed.is_empty:
            return ImportResult()

        mapping = mapping or self._mapper.infer(parsed.headers)
        transactions = self._normalizer.normalize_all(
            parsed.records(),
            mapping,
            now=now or datetime.now(timezone.utc),
        )
        result = ImportResult(transactions=transactions, total_rows=len(parsed.rows))

        if self._audit_logger:
            self._audit_logger.log_import_completed(
                total_rows=result.total_rows,
                imported_count=result.imported_count,
                mapping=mapping.as_dict(),
                correlation_id=correlation_id,
            )

        return result


class LedgerService:
    """
    Owns the ledger snapshot on behalf of the host application.

    All changes are written straight back to the storage collaborator.
    Single-writer: callers must serialize concurrent calls.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        import_flow: Optional[CsvImportFlow] = None,
        validator: Optional[ManualEntryValidator] = None,
        aggregator: Optional[LedgerAggregator] = None,
        audit_logger: Optional[AuditLogger] = None,
        seed_sample_data: Optional[bool] = None,
    ):
        settings = get_settings()
        self._storage = storage
        self._audit_logger = audit_logger
        self._import_flow = import_flow or CsvImportFlow(audit_logger=audit_logger)
        self._validator = validator or ManualEntryValidator()
        self._aggregator = aggregator or LedgerAggregator()
        self._export_filename = settings.storage.export_filename
        self._seed_sample_data = (
            settings.ledger.seed_sample_data if seed_sample_data is None else seed_sample_data
        )
        self._transactions: Optional[list[Transaction]] = None

    @property
    def import_flow(self) -> CsvImportFlow:
        return self._import_flow

    @property
    def transactions(self) -> list[Transaction]:
        """Current ledger snapshot (a copy)."""
        return list(self._ledger())

    def load(self) -> list[Transaction]:
        """
        (Re)load the ledger from storage.

        A ledger that was never saved is seeded with sample transactions
        when seeding is enabled. A corrupt stored ledger is logged and
        treated as empty.
        """
        seeded = False
        try:
            transactions = self._storage.load()
        except CorruptLedgerError as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type="corrupt_ledger",
                    error_message=str(e),
                )
            transactions = []
        else:
            if not transactions and not self._storage.has_data() and self._seed_sample_data:
                transactions = list(SAMPLE_TRANSACTIONS)
                seeded = True

        self._transactions = transactions

        if self._audit_logger:
            self._audit_logger.log_ledger_loaded(
                transaction_count=len(transactions),
                seeded=seeded,
            )

        return list(transactions)

    def import_csv(
        self,
        text: str,
        mapping: Optional[ColumnMapping] = None,
        now: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ImportResult:
        """Run an import and append the accepted transactions to the ledger."""
        correlation_id = correlation_id or create_correlation_id()
        ledger = self._ledger()
        result = self._import_flow.run(
            text,
            mapping=mapping,
            now=now,
            correlation_id=correlation_id,
        )
        if result.transactions:
            self._commit(ledger + result.transactions, correlation_id)
        return result

    def add_manual(
        self,
        entry: ManualEntry,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Validate a manual entry and put it at the top of the ledger.

        Raises:
            TransactionRejectedError: if the entry has error-level issues
        """
        correlation_id = correlation_id or create_correlation_id()
        result = self._validator.validate(entry)

        if not result.is_valid or result.transaction is None:
            if self._audit_logger:
                self._audit_logger.log_manual_entry_rejected(
                    issues=[issue.model_dump() for issue in result.issues],
                    correlation_id=correlation_id,
                )
            raise TransactionRejectedError(result)

        transaction = result.transaction
        if self._audit_logger:
            self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                description=transaction.description,
                amount=format_currency(transaction.amount),
                correlation_id=correlation_id,
            )

        self._commit([transaction] + self._ledger(), correlation_id)
        return transaction

    def delete(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Remove a transaction by id.

        Raises:
            NotFoundError: if no transaction has that id
        """
        ledger = self._ledger()
        remaining = [t for t in ledger if t.id != transaction_id]
        if len(remaining) == len(ledger):
            raise NotFoundError(f"No transaction with id {transaction_id!r}")

        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )
        self._commit(remaining, correlation_id)

    def export_json(self) -> tuple[str, str]:
        """
        Export the ledger for download.

        Returns:
            (suggested_filename, json_payload)
        """
        ledger = self._ledger()
        payload = dump_ledger(ledger)
        if self._audit_logger:
            self._audit_logger.log_ledger_exported(
                filename=self._export_filename,
                transaction_count=len(ledger),
            )
        return self._export_filename, payload

    def analytics(self, now: Optional[datetime] = None) -> LedgerAnalytics:
        """Dashboard analytics over the current ledger."""
        return self._aggregator.summarize(self._ledger(), now=now)

    def _ledger(self) -> list[Transaction]:
        if self._transactions is None:
            self.load()
        return list(self._transactions)

    def _commit(
        self,
        transactions: list[Transaction],
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        self._transactions = list(transactions)
        saved = self._storage.save(self._transactions)

        if self._audit_logger:
            if saved:
                self._audit_logger.log_ledger_saved(
                    transaction_count=len(transactions),
                    correlation_id=correlation_id,
                )
            else:
                self._audit_logger.log_save_failed(
                    transaction_count=len(transactions),
                    correlation_id=correlation_id,
                )
        return saved


def create_app_components(
    use_storage: bool = True,
) -> tuple[LedgerService, CsvImportFlow]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the configured JSON file.
                    Set to False for in-memory only (tests, demos).

    Returns:
        (ledger_service, import_flow)
    """
    audit_logger = AuditLogger()  # Local-only logging

    if use_storage:
        storage: LedgerStorageInterface = JsonFileLedgerStorage()
    else:
        storage = InMemoryLedgerStorage()

    import_flow = CsvImportFlow(audit_logger=audit_logger)
    ledger_service = LedgerService(
        storage=storage,
        import_flow=import_flow,
        audit_logger=audit_logger,
    )

    return ledger_service, import_flow
