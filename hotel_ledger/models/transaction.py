"""
Core Data Models for Hotel Ledger

These models define the schemas for everything that flows through the
ledger engine:
1. Transactions (the only thing ever persisted)
2. Column mappings and parsed CSV data (import session state)
3. Analytics views (what the dashboard renders)

DESIGN DECISION: A Transaction is frozen once created. Direction lives in
`type`, never in the sign of `amount`.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterator, Optional, Union
from uuid import uuid4

from pydantic import (
    AliasGenerator,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS AND CONSTANTS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a ledger movement."""
    INCOME = "income"
    EXPENSE = "expense"


SOURCE_IMPORT = "import"
SOURCE_MANUAL = "manual"

DEFAULT_DESCRIPTION = "Imported Transaction"
DEFAULT_CATEGORY = "Uncategorized"

MAPPING_FIELDS = ("date", "description", "amount", "type", "category")


def new_transaction_id() -> str:
    """Generate a fresh opaque transaction identifier."""
    return str(uuid4())


def to_iso_instant(moment: datetime) -> str:
    """
    Render a moment as an ISO-8601 UTC instant with millisecond precision.

    Naive datetimes are read as UTC.

    >>> to_iso_instant(datetime(2023, 10, 25))
    '2023-10-25T00:00:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def utc_calendar_day(moment: datetime) -> date:
    """Calendar day of a moment in UTC (naive values are read as UTC)."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


# =============================================================================
# TRANSACTION
# =============================================================================

class Transaction(BaseModel):
    """
    One dated financial movement in the ledger.

    Created by the import pipeline or by manual entry, destroyed only by
    explicit deletion in the ledger store.
    """
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str = Field(
        default_factory=new_transaction_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    date: str = Field(
        ...,
        min_length=1,
        description="ISO-8601 date or instant; only the calendar day is meaningful"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Free-text label"
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Magnitude of the movement; direction is carried by type"
    )
    type: TransactionType
    category: str = Field(
        default=DEFAULT_CATEGORY,
        description="Free-text category label"
    )
    source: Optional[str] = Field(
        default=None,
        description="Provenance tag, e.g. 'import' or 'manual'"
    )

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    def to_log_dict(self) -> dict:
        """Flat dictionary for structured logging."""
        return {
            "transaction_id": self.id,
            "date": self.date,
            "amount": self.amount,
            "type": self.type.value,
            "category": self.category,
            "source": self.source,
        }


_LEDGER_ADAPTER = TypeAdapter(list[Transaction])


def dump_ledger(transactions: list[Transaction], indent: Optional[int] = None) -> str:
    """
    Serialize a ledger to the persisted JSON array shape.

    Fields that were never set (a legacy record without `source`) stay
    absent, so loading and dumping again gives back the same document.
    """
    return _LEDGER_ADAPTER.dump_json(
        transactions, exclude_none=True, indent=indent
    ).decode("utf-8")


def load_ledger(payload: Union[str, bytes]) -> list[Transaction]:
    """
    Parse the persisted JSON array shape back into Transactions.

    Raises:
        pydantic.ValidationError: if the payload is not a valid ledger
    """
    return _LEDGER_ADAPTER.validate_json(payload)


# =============================================================================
# IMPORT SESSION MODELS
# =============================================================================

class ColumnMapping(BaseModel):
    """
    Which CSV column feeds each semantic transaction field.

    Built once per import session by the ColumnMapper and possibly edited
    by the user before the import runs. Absent fields are None.
    """
    model_config = ConfigDict(frozen=True)

    date: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None

    def with_overrides(self, **assignments: Optional[str]) -> "ColumnMapping":
        """
        Return a copy with some fields reassigned.

        An empty string or None clears the field.

        Raises:
            ValueError: for a field name outside the five semantic fields
        """
        unknown = sorted(set(assignments) - set(MAPPING_FIELDS))
        if unknown:
            raise ValueError(f"Unknown mapping field(s): {', '.join(unknown)}")
        cleaned = {field: (column or None) for field, column in assignments.items()}
        return self.model_copy(update=cleaned)

    def as_dict(self) -> dict[str, Optional[str]]:
        return {field: getattr(self, field) for field in MAPPING_FIELDS}


class ParsedCsv(BaseModel):
    """Header row plus data rows split from raw CSV text."""

    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.headers

    def records(self) -> Iterator[dict[str, Optional[str]]]:
        """
        Yield each row keyed by header.

        Missing trailing fields map to None. Extra fields beyond the header
        count are ignored. When a header repeats, the later column wins.
        """
        for values in self.rows:
            record: dict[str, Optional[str]] = {}
            for index, header in enumerate(self.headers):
                record[header] = values[index] if index < len(values) else None
            yield record


class ImportPreview(BaseModel):
    """What the user sees before confirming an import."""

    headers: list[str] = Field(default_factory=list)
    mapping: ColumnMapping = Field(default_factory=ColumnMapping)
    sample: list[dict[str, Optional[str]]] = Field(default_factory=list)
    total_rows: int = Field(default=0, ge=0)


class ImportResult(BaseModel):
    """Outcome of running an import over a whole CSV document."""

    transactions: list[Transaction] = Field(default_factory=list)
    total_rows: int = Field(default=0, ge=0)

    @property
    def imported_count(self) -> int:
        return len(self.transactions)

    @property
    def skipped_count(self) -> int:
        return self.total_rows - self.imported_count


# =============================================================================
# MANUAL ENTRY
# =============================================================================

class ManualEntry(BaseModel):
    """
    Raw values from the manual "add transaction" form.

    Values are kept as the user typed them; ManualEntryValidator decides
    whether they make a valid Transaction.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).date().isoformat()
    )
    description: str = ""
    amount: Union[str, float] = ""
    type: TransactionType = TransactionType.EXPENSE
    category: Optional[str] = None


# =============================================================================
# ANALYTICS MODELS
# =============================================================================

class _AnalyticsModel(BaseModel):
    """Analytics views dump with camelCase keys for chart collaborators."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


class CategoryTotal(_AnalyticsModel):
    """One slice of a category breakdown."""

    name: str
    value: float


class TrendPoint(_AnalyticsModel):
    """Income and expense sums for one calendar day."""

    date: str = Field(..., description="Calendar day, YYYY-MM-DD")
    label: str = Field(..., description="Short weekday label, e.g. 'Mon'")
    income: float = 0.0
    expense: float = 0.0


class LedgerAnalytics(_AnalyticsModel):
    """Summary view of a ledger snapshot."""

    total_income: float = 0.0
    total_expense: float = 0.0
    profit: float = 0.0
    income_categories: list[CategoryTotal] = Field(default_factory=list)
    expense_categories: list[CategoryTotal] = Field(default_factory=list)
    trend: list[TrendPoint] = Field(default_factory=list)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of validating a manual entry.

    `transaction` is set only when there are no error-level issues.
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    transaction: Optional[Transaction] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
