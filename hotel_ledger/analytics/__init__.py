"""Ledger analytics package."""

from hotel_ledger.analytics.aggregator import TREND_WINDOW_DAYS, LedgerAggregator

__all__ = ["TREND_WINDOW_DAYS", "LedgerAggregator"]
