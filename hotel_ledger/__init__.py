"""
Hotel Ledger - Source Package

Ledger ingestion and aggregation engine for a small hotel's books:
CSV import with heuristic column mapping, income/expense classification,
and dashboard analytics (totals, category breakdowns, 7-day trend).

DESIGN PRINCIPLES:
1. Row-level problems never break an import
2. Amounts are magnitudes, direction lives in the type
3. Storage is an injected collaborator
4. Every ledger change is auditable
"""

__version__ = "1.0.0"
__author__ = "Hotel Ledger Team"
