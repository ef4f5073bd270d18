"""CSV ingestion pipeline: parse, map columns, normalize rows."""

from hotel_ledger.ingest.column_mapper import COLUMN_CUES, ColumnMapper
from hotel_ledger.ingest.csv_parser import CsvParser
from hotel_ledger.ingest.normalizer import (
    TransactionNormalizer,
    classify,
    parse_amount,
    parse_date,
)

__all__ = [
    "COLUMN_CUES",
    "ColumnMapper",
    "CsvParser",
    "TransactionNormalizer",
    "classify",
    "parse_amount",
    "parse_date",
]
