"""
Column Mapper

Guesses which CSV column feeds each semantic transaction field by looking
for substring cues in the lowercased header names.

Every header is tested against every field's cues. A header can populate
several fields, and for each field the LAST matching header wins.

"dept" is not a substring of "department", so the category cues list
"department" as well.
"""

from typing import Optional, Sequence

from hotel_ledger.models.transaction import MAPPING_FIELDS, ColumnMapping


COLUMN_CUES: dict[str, tuple[str, ...]] = {
    "date": ("date", "time"),
    "description": ("desc", "particular"),
    "amount": ("amount", "total", "price"),
    "type": ("type", "cr/dr"),
    "category": ("cat", "dept", "department"),
}


class ColumnMapper:
    """Infers and adjusts ColumnMappings for an import session."""

    def __init__(self, cues: Optional[dict[str, tuple[str, ...]]] = None):
        self._cues = cues or COLUMN_CUES

    def infer(self, headers: Sequence[str]) -> ColumnMapping:
        """
        Build the initial mapping for a header row.

        Fields with no matching header are left as None.
        """
        assignments: dict[str, Optional[str]] = {field: None for field in MAPPING_FIELDS}

        for header in headers:
            lower = header.lower()
            for field in MAPPING_FIELDS:
                if any(cue in lower for cue in self._cues.get(field, ())):
                    assignments[field] = header

        return ColumnMapping(**assignments)

    def override(
        self,
        mapping: ColumnMapping,
        **assignments: Optional[str],
    ) -> ColumnMapping:
        """
        Apply user edits to an inferred mapping.

        Raises:
            ValueError: for a field name outside the five semantic fields
        """
        return mapping.with_overrides(**assignments)
