"""
Manual Entry Validation

Manually entered transactions must uphold the same invariants as imported
ones before they reach the ledger: a positive finite amount and a known
direction. Unlike the import pipeline, manual entry is NOT silently
corrected - problems are reported back to the user.

STAGE 1 - SCHEMA VALIDATION:
- Description present
- Amount present, numeric, finite and greater than zero
- Date parseable

STAGE 2 - SEMANTIC VALIDATION (warnings only):
- Date too far in the future
- Suspiciously large amount
"""

import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

from dateutil import parser as date_parser

from hotel_ledger.config import LedgerSettings, get_settings
from hotel_ledger.formatting import format_currency, format_date
from hotel_ledger.models.transaction import (
    SOURCE_MANUAL,
    ManualEntry,
    Transaction,
    ValidationIssue,
    ValidationResult,
    new_transaction_id,
    to_iso_instant,
)


class ManualEntryValidator:
    """
    Validates manual-entry form values and builds the Transaction.

    Stage 2 only runs when stage 1 passes.
    """

    def __init__(
        self,
        settings: Optional[LedgerSettings] = None,
        id_factory: Callable[[], str] = new_transaction_id,
    ):
        self._settings = settings or get_settings().ledger
        self._id_factory = id_factory

    def _parse_amount(self, raw) -> Optional[float]:
        if isinstance(raw, (int, float)):
            return float(raw)
        try:
            return float(str(raw).strip())
        except ValueError:
            return None

    def _parse_date(self, raw: str, today: date) -> Optional[datetime]:
        # Missing parts of a partial date come from today, not the clock
        try:
            return date_parser.parse(raw, default=datetime.combine(today, time.min))
        except (ValueError, OverflowError):
            return None

    def _validate_schema(
        self,
        entry: ManualEntry,
        today: date,
    ) -> tuple[list[ValidationIssue], Optional[float], Optional[datetime]]:
        """
        Stage 1: required fields and formats.

        Returns: (issues, parsed_amount, parsed_date)
        """
        issues = []

        if not entry.description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
            ))

        amount = None
        if entry.amount == "" or entry.amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        else:
            amount = self._parse_amount(entry.amount)
            if amount is None or not math.isfinite(amount):
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_format",
                    message=f"Amount ({entry.amount}) is not a number",
                    severity="error",
                    suggested_fix="Enter digits only, e.g. 4500 or 1200.50",
                ))
                amount = None
            elif amount <= 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                    severity="error",
                    suggested_fix="Use the type (income/expense) to set the direction",
                ))

        parsed_date = self._parse_date(entry.date, today) if entry.date else None
        if parsed_date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date ({entry.date or 'empty'}) could not be understood",
                severity="error",
                suggested_fix="Use the YYYY-MM-DD format",
            ))

        return issues, amount, parsed_date

    def _validate_semantic(
        self,
        amount: float,
        parsed_date: datetime,
        today: date,
    ) -> list[ValidationIssue]:
        """Stage 2: plausibility checks that only warn."""
        issues = []

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        entry_day = parsed_date.date()
        if entry_day > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({format_date(entry_day.isoformat())}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        if amount > self._settings.max_transaction_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({format_currency(amount)}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        return issues

    def validate(
        self,
        entry: ManualEntry,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run the full validation pipeline.

        Returns:
            ValidationResult whose `transaction` is set when there are no
            error-level issues
        """
        today = today or datetime.now(timezone.utc).date()

        issues, amount, parsed_date = self._validate_schema(entry, today)
        if any(issue.severity == "error" for issue in issues):
            return ValidationResult(is_valid=False, issues=issues)

        issues.extend(self._validate_semantic(amount, parsed_date, today))

        transaction = Transaction(
            id=self._id_factory(),
            date=to_iso_instant(parsed_date),
            description=entry.description,
            amount=amount,
            type=entry.type,
            category=entry.category or self._settings.default_manual_category,
            source=SOURCE_MANUAL,
        )
        return ValidationResult(is_valid=True, issues=issues, transaction=transaction)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short text summary of a validation result for the entry form."""
        if result.is_valid and not result.warnings:
            return "Transaction looks good."

        lines = []
        if result.has_errors:
            lines.append("Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
