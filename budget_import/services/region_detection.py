from __future__ import annotations

import logging

from ..excel.cells import is_blank, parse_currency
from ..models.columns import BudgetColumns, TableRegion
from ..models.grid import Grid
from ..models.warning import ImportWarning, WarningCode
from .vocabulary import STOP_MARKERS

"""Data region detection.

Scans downward from the row after the header to find where the real data
table ends. Two independent triggers, first one wins:
- a stop phrase anywhere in the row's joined text (table ends at that row)
- three consecutive empty rows (table ends where the empty run began)
"""

__all__ = [
    "EMPTY_RUN_LIMIT",
    "detect_table_region",
    "is_empty_row",
]

logger = logging.getLogger(__name__)

EMPTY_RUN_LIMIT = 3


def _amount_is_zero(grid: Grid, row_index: int, col: int | None) -> bool:
    if col is None:
        return True
    amount = parse_currency(grid.cell(row_index, col))
    return amount is None or amount == 0


def is_empty_row(grid: Grid, row_index: int, columns: BudgetColumns) -> bool:
    """Blank item cell and no labor/material/sub amount."""
    return (
        is_blank(grid.cell(row_index, columns.item_col))
        and _amount_is_zero(grid, row_index, columns.labor_col)
        and _amount_is_zero(grid, row_index, columns.material_col)
        and _amount_is_zero(grid, row_index, columns.sub_col)
    )


def detect_table_region(grid: Grid, header_row_index: int, columns: BudgetColumns) -> TableRegion:
    """Return the [start, end) row bounds of the data table below the header.

    The end row is always between header_row_index + 1 and grid.row_count.
    stop_reason is None when the table runs to the end of the grid.
    """
    start_row = header_row_index + 1
    consecutive_empty = 0

    for i in range(start_row, grid.row_count):
        row_text = " ".join(grid.rows[i]).lower()
        for marker in STOP_MARKERS:
            if marker in row_text:
                reason = f'Stop marker found: "{marker}"'
                logger.debug("region stop row=%d marker=%s", i, marker)
                return TableRegion(
                    start_row=start_row,
                    end_row=i,
                    stop_reason=reason,
                    warnings=[ImportWarning(code=WarningCode.STOP_MARKER_FOUND, message=reason, row_index=i)],
                )

        if is_empty_row(grid, i, columns):
            consecutive_empty += 1
            if consecutive_empty >= EMPTY_RUN_LIMIT:
                # back out the empty run: the table ended where it began
                end_row = i - (EMPTY_RUN_LIMIT - 1)
                reason = f"Stopped after {EMPTY_RUN_LIMIT} consecutive empty rows"
                logger.debug("region stop row=%d end=%d (empty run)", i, end_row)
                return TableRegion(
                    start_row=start_row,
                    end_row=end_row,
                    stop_reason=reason,
                    warnings=[ImportWarning(code=WarningCode.STOP_BY_STRUCTURE, message=reason, row_index=i)],
                )
        else:
            consecutive_empty = 0

    return TableRegion(start_row=start_row, end_row=max(start_row, grid.row_count), stop_reason=None)
