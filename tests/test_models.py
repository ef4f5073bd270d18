"""
Tests for Hotel Ledger models

Test strategy:
1. Unit tests for individual components (models, parser, mapper, normalizer)
2. Flow tests with in-memory storage (no files unless the test is about files)
3. Fixed reference moments wherever "now" matters
"""

import json
import math

import pytest
from pydantic import ValidationError

from hotel_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from hotel_ledger.models.transaction import (
    CategoryTotal,
    ColumnMapping,
    ImportResult,
    LedgerAnalytics,
    ManualEntry,
    ParsedCsv,
    Transaction,
    TransactionType,
    TrendPoint,
    dump_ledger,
    load_ledger,
    to_iso_instant,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction creation with defaults."""
        txn = Transaction(
            date="2023-10-25T00:00:00.000Z",
            description="Room 101 Booking",
            amount=4500,
            type=TransactionType.INCOME,
        )
        assert txn.id
        assert txn.category == "Uncategorized"
        assert txn.source is None
        assert txn.is_income is True

    def test_ids_are_unique(self):
        """Test that generated ids are never reused."""
        ids = {
            Transaction(date="2023-10-25", description="x", amount=1, type="expense").id
            for _ in range(100)
        }
        assert len(ids) == 100

    def test_transaction_is_frozen(self):
        """Test that a transaction cannot be modified once created."""
        txn = Transaction(date="2023-10-25", description="x", amount=1, type="expense")
        with pytest.raises(ValidationError):
            txn.amount = 5

    def test_rejects_negative_amount(self):
        """Test that the sign never lives in the amount."""
        with pytest.raises(ValidationError):
            Transaction(date="2023-10-25", description="x", amount=-10, type="expense")

    def test_rejects_nan_amount(self):
        """Test that non-finite amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(date="2023-10-25", description="x", amount=math.nan, type="expense")

    def test_rejects_unknown_type(self):
        """Test that type is limited to income/expense."""
        with pytest.raises(ValidationError):
            Transaction(date="2023-10-25", description="x", amount=1, type="transfer")


class TestLedgerCodec:
    """Tests for the persisted JSON array shape."""

    PAYLOAD = json.dumps([
        {"id": "1", "date": "2023-10-25", "description": "Room 101 Booking",
         "amount": 4500, "type": "income", "category": "Room Revenue"},
        {"id": "abc123", "date": "2023-10-27T00:00:00.000Z", "description": "Linen",
         "amount": 250.75, "type": "expense", "category": "Housekeeping",
         "source": "import"},
    ])

    def test_load_ledger(self):
        """Test loading a stored ledger."""
        ledger = load_ledger(self.PAYLOAD)
        assert [t.id for t in ledger] == ["1", "abc123"]
        assert ledger[0].type == TransactionType.INCOME
        assert ledger[0].source is None
        assert ledger[1].amount == 250.75

    def test_round_trip_is_lossless(self):
        """Test that dump(load(x)) gives back the same documents."""
        dumped = dump_ledger(load_ledger(self.PAYLOAD))
        assert json.loads(dumped) == json.loads(self.PAYLOAD)

    def test_round_trip_of_transactions(self):
        """Test that load(dump(ledger)) gives back identical transactions."""
        ledger = load_ledger(self.PAYLOAD)
        assert load_ledger(dump_ledger(ledger)) == ledger

    def test_empty_ledger(self):
        """Test the empty array."""
        assert dump_ledger([]) == "[]"
        assert load_ledger("[]") == []

    def test_invalid_payload_raises(self):
        """Test that junk is not silently accepted."""
        with pytest.raises(ValidationError):
            load_ledger("{not json")


class TestIsoInstant:
    """Tests for ISO instant rendering."""

    def test_naive_is_utc(self):
        from datetime import datetime
        assert to_iso_instant(datetime(2023, 10, 25)) == "2023-10-25T00:00:00.000Z"

    def test_aware_is_converted(self):
        from datetime import datetime, timedelta, timezone
        ist = timezone(timedelta(hours=5, minutes=30))
        moment = datetime(2023, 10, 25, 23, 30, 15, 123456, tzinfo=ist)
        assert to_iso_instant(moment) == "2023-10-25T18:00:15.123Z"

    def test_early_years_are_zero_padded(self):
        from datetime import datetime
        assert to_iso_instant(datetime(999, 1, 1)) == "0999-01-01T00:00:00.000Z"


class TestColumnMapping:
    """Tests for ColumnMapping."""

    def test_defaults_are_absent(self):
        mapping = ColumnMapping()
        assert mapping.as_dict() == {
            "date": None, "description": None, "amount": None,
            "type": None, "category": None,
        }

    def test_with_overrides(self):
        """Test user edits to a mapping."""
        mapping = ColumnMapping(date="Date", amount="Amount")
        edited = mapping.with_overrides(amount="Debit", category="Dept")
        assert edited.amount == "Debit"
        assert edited.category == "Dept"
        assert edited.date == "Date"
        assert mapping.amount == "Amount"

    def test_empty_override_clears_field(self):
        mapping = ColumnMapping(type="CR/DR")
        assert mapping.with_overrides(type="").type is None

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="Unknown mapping field"):
            ColumnMapping().with_overrides(vendor="Vendor")


class TestParsedCsv:
    """Tests for ParsedCsv records."""

    def test_ragged_rows_map_to_none(self):
        parsed = ParsedCsv(headers=["a", "b", "c"], rows=[["1", "2"], ["1", "2", "3", "4"]])
        assert list(parsed.records()) == [
            {"a": "1", "b": "2", "c": None},
            {"a": "1", "b": "2", "c": "3"},
        ]

    def test_repeated_header_later_column_wins(self):
        parsed = ParsedCsv(headers=["x", "x"], rows=[["first", "second"]])
        assert list(parsed.records()) == [{"x": "second"}]


class TestManualEntry:
    """Tests for the raw manual entry form model."""

    def test_default_date_is_utc_today(self):
        from datetime import datetime, timezone
        before = datetime.now(timezone.utc).date().isoformat()
        entry = ManualEntry()
        after = datetime.now(timezone.utc).date().isoformat()
        assert entry.date in (before, after)
        assert entry.type == TransactionType.EXPENSE


class TestResultModels:
    """Tests for import and analytics result models."""

    def test_import_result_counts(self):
        txn = Transaction(date="2023-10-25", description="x", amount=1, type="expense")
        result = ImportResult(transactions=[txn, txn], total_rows=5)
        assert result.imported_count == 2
        assert result.skipped_count == 3

    def test_analytics_dump_uses_camel_case(self):
        """Test that chart collaborators get camelCase keys."""
        analytics = LedgerAnalytics(
            total_income=10,
            total_expense=4,
            profit=6,
            income_categories=[CategoryTotal(name="Rooms", value=10)],
            trend=[TrendPoint(date="2023-10-25", label="Wed", income=10, expense=4)],
        )
        dumped = analytics.model_dump(by_alias=True)
        assert dumped["totalIncome"] == 10
        assert dumped["totalExpense"] == 4
        assert dumped["incomeCategories"] == [{"name": "Rooms", "value": 10}]
        assert dumped["expenseCategories"] == []
        assert dumped["trend"][0]["label"] == "Wed"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            description="Ledger loaded",
        )
        assert event.event_type == AuditEventType.LEDGER_LOADED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_added(
            transaction_id="abc",
            description="Laundry",
            amount="₹350",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "abc"
        assert log_dict["details"]["amount"] == "₹350"

    def test_import_completed_with_skips_is_warning(self):
        """Test that skipped rows raise the severity of an import event."""
        clean = AuditEventBuilder.import_completed(5, 5, mapping={})
        lossy = AuditEventBuilder.import_completed(10, 8, mapping={})
        assert clean.severity == AuditSeverity.INFO
        assert lossy.severity == AuditSeverity.WARNING
        assert lossy.details["skipped_count"] == 2
        assert lossy.description == "Successfully imported 8 records"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
