from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

"""Grid model for the budget sheet importer.

A Grid is the decoded spreadsheet handed to the extraction pipeline: a
rectangular table of text cells. It is built once and only read afterwards.
"""

__all__ = [
    "Grid",
]


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class Grid:
    """Rectangular, read-only table of text cells."""
    rows: tuple[tuple[str, ...], ...]
    row_count: int
    col_count: int

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[Any]]) -> Grid:
        """Build a Grid, padding ragged rows with empty cells."""
        materialized = [[_cell_text(v) for v in row] for row in rows]
        col_count = max((len(r) for r in materialized), default=0)
        padded = tuple(
            tuple(r) + ("",) * (col_count - len(r)) for r in materialized
        )
        return cls(rows=padded, row_count=len(padded), col_count=col_count)

    def cell(self, row_index: int, col_index: int | None) -> str:
        """Return the cell text, or "" for an absent column or out-of-range read."""
        if col_index is None or col_index < 0:
            return ""
        if not 0 <= row_index < self.row_count or col_index >= self.col_count:
            return ""
        return self.rows[row_index][col_index]
