"""
Transaction Normalizer

Turns one mapped CSV record into a canonical Transaction, or rejects it.

Row-level handling:
- Unparseable amount -> row dropped (not an error)
- Missing column mapping -> defaults applied
- Malformed date -> current moment
Nothing row-level ever raises out of this module.
"""

import math
import re
from datetime import datetime, time, timezone
from typing import Callable, Iterable, Mapping, Optional

import structlog
from dateutil import parser as date_parser

from hotel_ledger.models.transaction import (
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    SOURCE_IMPORT,
    ColumnMapping,
    Transaction,
    TransactionType,
    new_transaction_id,
    to_iso_instant,
    utc_calendar_day,
)


logger = structlog.get_logger(__name__)

# Leading numeric prefix, trailing junk ignored ("12.5 INR" -> 12.5)
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

INCOME_TYPE_CUES = ("income", "cr", "credit", "sale")
INCOME_CATEGORY_CUES = ("room", "f&b", "sale", "revenue")


def parse_amount(value: Optional[str]) -> float:
    """
    Parse the leading number of a cell as a magnitude.

    Returns 0.0 when the cell is absent or has no leading number.

    >>> parse_amount("-1200.50")
    1200.5
    >>> parse_amount("abc")
    0.0
    """
    if not value:
        return 0.0
    match = _LEADING_FLOAT.match(value)
    if match is None:
        return 0.0
    return abs(float(match.group(1)))


def parse_date(value: Optional[str], now: datetime) -> str:
    """
    Parse a date cell into an ISO-8601 UTC instant.

    Naive dates are read as UTC so the calendar day never shifts.
    Parts missing from a partial date ("Oct 25") come from `now`'s UTC day.
    Absent or unparseable cells fall back to `now`.
    """
    if value:
        default = datetime.combine(utc_calendar_day(now), time.min)
        try:
            return to_iso_instant(date_parser.parse(value, default=default))
        except (ValueError, OverflowError):
            logger.debug("date_unparseable", value=value)
    return to_iso_instant(now)


def classify(
    record: Mapping[str, Optional[str]],
    mapping: ColumnMapping,
) -> TransactionType:
    """
    Decide income vs expense for a record.

    With a type column, the type cell decides. Without one, revenue-like
    categories (rooms, F&B, sales) count as income.
    """
    if mapping.type:
        cell = (record.get(mapping.type) or "").lower()
        cues = INCOME_TYPE_CUES
    else:
        cell = (record.get(mapping.category) or "").lower() if mapping.category else ""
        cues = INCOME_CATEGORY_CUES

    if any(cue in cell for cue in cues):
        return TransactionType.INCOME
    return TransactionType.EXPENSE


class TransactionNormalizer:
    """
    Converts mapped records into Transactions.

    The only state is the id factory; everything else is a pure function
    of the record, the mapping and `now`.
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = new_transaction_id,
        source: str = SOURCE_IMPORT,
    ):
        self._id_factory = id_factory
        self._source = source

    def normalize(
        self,
        record: Mapping[str, Optional[str]],
        mapping: ColumnMapping,
        now: Optional[datetime] = None,
    ) -> Optional[Transaction]:
        """
        Normalize one record.

        Returns None when the row is rejected (amount not a finite
        number greater than zero).
        """
        now = now or datetime.now(timezone.utc)

        amount = parse_amount(self._cell(record, mapping.amount))
        if not math.isfinite(amount) or amount <= 0:
            logger.debug("row_skipped", reason="invalid_amount", amount_column=mapping.amount)
            return None

        return Transaction(
            id=self._id_factory(),
            date=parse_date(self._cell(record, mapping.date), now),
            description=self._cell(record, mapping.description) or DEFAULT_DESCRIPTION,
            amount=amount,
            type=classify(record, mapping),
            category=self._cell(record, mapping.category) or DEFAULT_CATEGORY,
            source=self._source,
        )

    def normalize_all(
        self,
        records: Iterable[Mapping[str, Optional[str]]],
        mapping: ColumnMapping,
        now: Optional[datetime] = None,
    ) -> list[Transaction]:
        """Normalize a batch, keeping accepted rows in their original order."""
        now = now or datetime.now(timezone.utc)
        accepted = []
        for record in records:
            transaction = self.normalize(record, mapping, now=now)
            if transaction is not None:
                accepted.append(transaction)
        return accepted

    @staticmethod
    def _cell(
        record: Mapping[str, Optional[str]],
        column: Optional[str],
    ) -> Optional[str]:
        if not column:
            return None
        return record.get(column)
