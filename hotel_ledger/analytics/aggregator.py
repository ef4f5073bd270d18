"""
Ledger Aggregation Engine

Turns a ledger snapshot into the dashboard's analytics view:
- income / expense totals and profit
- per-category breakdowns for each direction
- a 7-day daily trend ending at a reference moment

Aggregation is a pure projection of (snapshot, now). It assumes every
transaction already has a valid non-negative amount and a known type;
that invariant is upheld by the normalizer and the manual-entry validator.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from hotel_ledger.models.transaction import (
    CategoryTotal,
    LedgerAnalytics,
    Transaction,
    TransactionType,
    TrendPoint,
    utc_calendar_day,
)


TREND_WINDOW_DAYS = 7


class LedgerAggregator:
    """
    Computes analytics over a ledger snapshot.

    GUARANTEES:
    - Never mutates the snapshot
    - Same snapshot and `now` always give identical results
    - The trend always has exactly TREND_WINDOW_DAYS points
    """

    def total(
        self,
        transactions: Sequence[Transaction],
        transaction_type: TransactionType,
    ) -> float:
        """Sum of amounts for one direction."""
        return sum(
            (t.amount for t in transactions if t.type == transaction_type),
            0.0,
        )

    def category_breakdown(
        self,
        transactions: Sequence[Transaction],
        transaction_type: TransactionType,
    ) -> dict[str, float]:
        """
        Group one direction by category and sum the amounts.

        Keys appear in first-seen order; the order carries no meaning.
        """
        groups: dict[str, float] = {}
        for t in transactions:
            if t.type != transaction_type:
                continue
            groups[t.category] = groups.get(t.category, 0.0) + t.amount
        return groups

    def trend(
        self,
        transactions: Sequence[Transaction],
        now: datetime,
    ) -> list[TrendPoint]:
        """
        Daily income / expense sums for the 7 calendar days ending at `now`.

        Oldest day first. A transaction belongs to a day when its date
        string starts with that day's YYYY-MM-DD, so date-only and full
        instant strings both match. Empty days are kept with zero sums.
        """
        today = utc_calendar_day(now)
        points = []
        for offset in range(TREND_WINDOW_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            prefix = day.isoformat()
            day_txns = [t for t in transactions if t.date.startswith(prefix)]
            points.append(TrendPoint(
                date=prefix,
                label=day.strftime("%a"),
                income=self.total(day_txns, TransactionType.INCOME),
                expense=self.total(day_txns, TransactionType.EXPENSE),
            ))
        return points

    def summarize(
        self,
        transactions: Sequence[Transaction],
        now: Optional[datetime] = None,
    ) -> LedgerAnalytics:
        """
        Build the full analytics view.

        `now` defaults to the current moment; pass it explicitly for
        reproducible results.
        """
        now = now or datetime.now(timezone.utc)

        total_income = self.total(transactions, TransactionType.INCOME)
        total_expense = self.total(transactions, TransactionType.EXPENSE)

        return LedgerAnalytics(
            total_income=total_income,
            total_expense=total_expense,
            profit=total_income - total_expense,
            income_categories=self._as_category_totals(
                self.category_breakdown(transactions, TransactionType.INCOME)
            ),
            expense_categories=self._as_category_totals(
                self.category_breakdown(transactions, TransactionType.EXPENSE)
            ),
            trend=self.trend(transactions, now),
        )

    @staticmethod
    def _as_category_totals(groups: dict[str, float]) -> list[CategoryTotal]:
        return [CategoryTotal(name=name, value=value) for name, value in groups.items()]
