"""Display helpers for amounts and dates (INR, Indian digit grouping)."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from dateutil import parser as date_parser


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: float, symbol: str = "₹") -> str:
    """
    Format an amount as whole rupees with Indian digit grouping.

    >>> format_currency(1234567.5)
    '₹12,34,568'
    >>> format_currency(-4500)
    '-₹4,500'
    """
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{_group_indian(str(abs(rounded)))}"


def format_date(value: Optional[str]) -> str:
    """
    Short human date for a stored date string, e.g. 'Oct 25, 2023'.

    Returns an empty string for empty or unparseable input.
    """
    if not value:
        return ""
    try:
        parsed: datetime = date_parser.isoparse(value)
    except ValueError:
        return ""
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"
