"""
Tests for LedgerAggregator.
"""

from datetime import datetime, timedelta, timezone

import pytest

from hotel_ledger.analytics import TREND_WINDOW_DAYS, LedgerAggregator
from hotel_ledger.models.transaction import Transaction, TransactionType


NOW = datetime(2023, 10, 26, 15, 0, tzinfo=timezone.utc)

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def _txn(id, date, amount, type, category):
    return Transaction(
        id=id, date=date, description=f"txn {id}", amount=amount,
        type=type, category=category,
    )


@pytest.fixture
def ledger():
    return [
        _txn("1", "2023-10-25", 4500, INCOME, "Room Revenue"),
        _txn("2", "2023-10-25", 1200, EXPENSE, "F&B Cost"),
        _txn("3", "2023-10-26", 15000, INCOME, "Banquet"),
        _txn("4", "2023-10-26", 8500, EXPENSE, "Utilities"),
        _txn("5", "2023-10-20T10:00:00.000Z", 2000, INCOME, "Room Revenue"),
        _txn("6", "2023-10-01T00:00:00.000Z", 300, EXPENSE, "Utilities"),
    ]


@pytest.fixture
def aggregator():
    return LedgerAggregator()


class TestTotals:
    """Tests for totals and profit."""

    def test_totals(self, aggregator, ledger):
        analytics = aggregator.summarize(ledger, now=NOW)
        assert analytics.total_income == 21500
        assert analytics.total_expense == 10000
        assert analytics.profit == 11500

    def test_profit_may_be_negative(self, aggregator):
        ledger = [
            _txn("1", "2023-10-25", 100, INCOME, "Rooms"),
            _txn("2", "2023-10-25", 400, EXPENSE, "Repairs"),
        ]
        assert aggregator.summarize(ledger, now=NOW).profit == -300

    def test_conservation(self, aggregator, ledger):
        """Test that breakdowns add up to the totals."""
        analytics = aggregator.summarize(ledger, now=NOW)
        assert analytics.total_income - analytics.total_expense == analytics.profit
        assert sum(c.value for c in analytics.income_categories) == pytest.approx(
            analytics.total_income
        )
        assert sum(c.value for c in analytics.expense_categories) == pytest.approx(
            analytics.total_expense
        )


class TestCategoryBreakdown:
    """Tests for per-category grouping."""

    def test_income_breakdown(self, aggregator, ledger):
        assert aggregator.category_breakdown(ledger, INCOME) == {
            "Room Revenue": 6500,
            "Banquet": 15000,
        }

    def test_expense_breakdown(self, aggregator, ledger):
        assert aggregator.category_breakdown(ledger, EXPENSE) == {
            "F&B Cost": 1200,
            "Utilities": 8800,
        }

    def test_summary_pairs(self, aggregator, ledger):
        analytics = aggregator.summarize(ledger, now=NOW)
        pairs = {(c.name, c.value) for c in analytics.expense_categories}
        assert pairs == {("F&B Cost", 1200), ("Utilities", 8800)}

    def test_empty(self, aggregator):
        assert aggregator.category_breakdown([], INCOME) == {}


class TestTrend:
    """Tests for the 7-day trend series."""

    def test_window_is_oldest_first(self, aggregator, ledger):
        trend = aggregator.trend(ledger, NOW)
        assert [p.date for p in trend] == [
            "2023-10-20", "2023-10-21", "2023-10-22", "2023-10-23",
            "2023-10-24", "2023-10-25", "2023-10-26",
        ]
        assert trend[0].label == "Fri"
        assert trend[-1].label == "Thu"

    def test_daily_sums(self, aggregator, ledger):
        """Test prefix matching for both date-only and instant strings."""
        trend = aggregator.trend(ledger, NOW)
        assert (trend[0].income, trend[0].expense) == (2000, 0)
        assert (trend[5].income, trend[5].expense) == (4500, 1200)
        assert (trend[6].income, trend[6].expense) == (15000, 8500)
        for point in trend[1:5]:
            assert (point.income, point.expense) == (0, 0)

    def test_transactions_outside_window_ignored(self, aggregator, ledger):
        trend = aggregator.trend(ledger, NOW)
        assert sum(p.expense for p in trend) == 9700

    @pytest.mark.parametrize("size", [0, 1, 50])
    def test_always_seven_points(self, aggregator, size):
        ledger = [
            _txn(str(i), (NOW - timedelta(days=i)).date().isoformat(), 10, INCOME, "Rooms")
            for i in range(size)
        ]
        trend = aggregator.trend(ledger, NOW)
        assert len(trend) == TREND_WINDOW_DAYS == 7

    def test_empty_ledger_gives_zero_buckets(self, aggregator):
        analytics = aggregator.summarize([], now=NOW)
        assert len(analytics.trend) == 7
        assert all(p.income == 0 and p.expense == 0 for p in analytics.trend)
        assert analytics.total_income == 0
        assert analytics.income_categories == []

    def test_naive_now_is_utc(self, aggregator, ledger):
        naive = NOW.replace(tzinfo=None)
        assert aggregator.trend(ledger, naive) == aggregator.trend(ledger, NOW)

    def test_aware_now_uses_utc_day(self, aggregator):
        """Test that 02:00 IST on the 27th is still the 26th in UTC."""
        ist = timezone(timedelta(hours=5, minutes=30))
        now = datetime(2023, 10, 27, 2, 0, tzinfo=ist)
        assert aggregator.trend([], now)[-1].date == "2023-10-26"


class TestIdempotence:
    """Tests that aggregation is a pure projection."""

    def test_same_input_same_output(self, aggregator, ledger):
        first = aggregator.summarize(ledger, now=NOW)
        second = aggregator.summarize(ledger, now=NOW)
        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_does_not_mutate_snapshot(self, aggregator, ledger):
        before = list(ledger)
        aggregator.summarize(ledger, now=NOW)
        assert ledger == before


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
