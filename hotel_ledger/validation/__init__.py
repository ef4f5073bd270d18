"""Manual entry validation package."""

from hotel_ledger.validation.validator import ManualEntryValidator

__all__ = ["ManualEntryValidator"]
