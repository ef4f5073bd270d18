"""
CSV Parser

Splits loosely-structured CSV exports into a header row and data rows.

Quoted fields containing the delimiter and embedded newlines are NOT
supported: every line is split on the raw delimiter. Ragged rows are
accepted as-is and never raise.
"""

from typing import Optional

from hotel_ledger.models.transaction import ParsedCsv


class CsvParser:
    """
    Tolerant line-based CSV splitter.

    Empty or blank input yields an empty ParsedCsv, never an error.
    """

    def __init__(self, delimiter: str = ","):
        self._delimiter = delimiter

    def parse(self, text: Optional[str]) -> ParsedCsv:
        """
        Split raw text into headers and rows.

        Lines are trimmed and blank lines dropped before the first remaining
        line is taken as the header row. Each cell is trimmed.
        """
        lines = [line.strip() for line in (text or "").split("\n")]
        lines = [line for line in lines if line]

        if not lines:
            return ParsedCsv()

        headers = self._split(lines[0])
        rows = [self._split(line) for line in lines[1:]]
        return ParsedCsv(headers=headers, rows=rows)

    def preview(
        self,
        parsed: ParsedCsv,
        limit: int = 5,
    ) -> list[dict[str, Optional[str]]]:
        """First `limit` records of a parsed document, keyed by header."""
        sample = []
        for record in parsed.records():
            if len(sample) >= limit:
                break
            sample.append(record)
        return sample

    def _split(self, line: str) -> list[str]:
        return [cell.strip() for cell in line.split(self._delimiter)]
