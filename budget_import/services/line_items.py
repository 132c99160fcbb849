from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..excel.cells import is_blank, is_negative_amount, parse_currency, parse_percent, round_cents
from ..models.columns import BudgetColumns
from ..models.grid import Grid
from ..models.line_item import CostComponent, ExtractedLineItem, RawCells
from ..models.warning import ImportWarning, WarningCode
from .vocabulary import INTERNAL_VENDOR, SUMMARY_INDICATORS

"""Line item extraction with compound row splitting.

Walks the bounded data region row by row. A row carrying more than one
non-zero cost component (labor, material, sub) is a compound row and becomes
one line item per component, each with its own cost and price. The amounts
are never summed into one item and never copied across components.

Row handling, in order:
1. blank item cell: skipped silently (spacer row)
2. item text containing a summary indicator: SKIPPED_SUMMARY_ROW
3. labor/material/sub parsed as currency, markup as percent
4. no cost above COMPONENT_THRESHOLD: SKIPPED_EMPTY_ROW
5. markup blank, unparseable or negative: MARKUP_MISSING, items keep price=None
6. one item per component above COMPONENT_THRESHOLD
"""

__all__ = [
    "COMPONENT_THRESHOLD",
    "LineItemExtraction",
    "component_name",
    "extract_line_items",
    "resolve_vendor",
]

logger = logging.getLogger(__name__)

# absorbs rounding noise such as "$0.004"
COMPONENT_THRESHOLD = 0.005
MATERIALS_SUFFIX = " - Materials"


@dataclass(frozen=True)
class LineItemExtraction:
    items: list[ExtractedLineItem] = field(default_factory=list)
    warnings: list[ImportWarning] = field(default_factory=list)
    compound_rows_split: int = 0


def component_name(item_name: str, component: CostComponent, was_split: bool) -> str:
    """Display name for one component of a row.

    Only the material component of a split row is suffixed; a material-only
    row keeps the bare item name.
    """
    if component is CostComponent.MATERIAL and was_split:
        return f"{item_name}{MATERIALS_SUFFIX}"
    return item_name


def resolve_vendor(subcontractor_cell: str | None, component: CostComponent) -> str | None:
    """Vendor/payee for one component.

    sub: the subcontractor cell text as written (None when blank).
    labor/material: the internal company when the cell is blank or names it,
    otherwise the named external vendor (upper-cased).
    """
    text = (subcontractor_cell or "").strip()
    if component is CostComponent.SUB:
        return text or None
    upper = text.upper()
    if upper in ("", INTERNAL_VENDOR):
        return INTERNAL_VENDOR
    return upper


def _is_summary_row(item_name: str) -> bool:
    lowered = item_name.lower()
    return any(indicator in lowered for indicator in SUMMARY_INDICATORS)


def _raw_text(grid: Grid, row_index: int, col: int | None) -> str | None:
    text = grid.cell(row_index, col).strip()
    return text or None


def _read_cost(
    grid: Grid,
    row_index: int,
    col: int | None,
    label: str,
    item_name: str,
    warnings: list[ImportWarning],
) -> float:
    """Parse one cost cell as a non-negative amount, recording anomalies."""
    if col is None:
        return 0.0
    text = grid.cell(row_index, col)
    if is_blank(text):
        return 0.0
    amount = parse_currency(text)
    if amount is None:
        warnings.append(
            ImportWarning(
                code=WarningCode.UNPARSEABLE_CURRENCY,
                message=f'Unparseable {label} amount "{text.strip()}" for "{item_name}"; treated as 0',
                row_index=row_index,
                details={"column": col, "value": text},
            )
        )
        return 0.0
    if is_negative_amount(text):
        warnings.append(
            ImportWarning(
                code=WarningCode.NEGATIVE_VALUE,
                message=f'Negative {label} amount "{text.strip()}" for "{item_name}"; using {amount:.2f}',
                row_index=row_index,
                details={"column": col, "value": text},
            )
        )
    return amount


def _read_markup(
    grid: Grid,
    row_index: int,
    col: int | None,
    item_name: str,
    warnings: list[ImportWarning],
) -> float | None:
    text = grid.cell(row_index, col)
    markup = parse_percent(text)
    if markup is None and not is_blank(text):
        warnings.append(
            ImportWarning(
                code=WarningCode.UNPARSEABLE_PERCENT,
                message=f'Unparseable markup "{text.strip()}" for "{item_name}"',
                row_index=row_index,
                details={"column": col, "value": text},
            )
        )
    return markup


def extract_line_items(
    grid: Grid, columns: BudgetColumns, start_row: int, end_row: int
) -> LineItemExtraction:
    """Extract line items from rows [start_row, end_row).

    Args:
        grid: Decoded sheet
        columns: Column mapping (item column required)
        start_row: First data row (inclusive)
        end_row: End of the data region (exclusive)

    Returns:
        LineItemExtraction with items in row order (labor, material, sub
        within a row), accumulated warnings and the number of split rows.
    """
    items: list[ExtractedLineItem] = []
    warnings: list[ImportWarning] = []
    compound_rows_split = 0

    for i in range(max(start_row, 0), min(end_row, grid.row_count)):
        item_name = grid.cell(i, columns.item_col).strip()
        if not item_name:
            continue

        if _is_summary_row(item_name):
            warnings.append(
                ImportWarning(
                    code=WarningCode.SKIPPED_SUMMARY_ROW,
                    message=f'Skipped summary row: "{item_name}"',
                    row_index=i,
                )
            )
            continue

        row_warnings: list[ImportWarning] = []
        labor_cost = _read_cost(grid, i, columns.labor_col, "labor", item_name, row_warnings)
        material_cost = _read_cost(grid, i, columns.material_col, "material", item_name, row_warnings)
        sub_cost = _read_cost(grid, i, columns.sub_col, "sub", item_name, row_warnings)
        markup_pct = _read_markup(grid, i, columns.markup_col, item_name, row_warnings)
        warnings.extend(row_warnings)

        if max(labor_cost, material_cost, sub_cost) <= COMPONENT_THRESHOLD:
            warnings.append(
                ImportWarning(
                    code=WarningCode.SKIPPED_EMPTY_ROW,
                    message=f'Skipped row with no costs: "{item_name}"',
                    row_index=i,
                )
            )
            continue

        if markup_pct is None:
            warnings.append(
                ImportWarning(
                    code=WarningCode.MARKUP_MISSING,
                    message=f'Markup missing for "{item_name}"',
                    row_index=i,
                )
            )

        components = [
            (component, cost)
            for component, cost in (
                (CostComponent.LABOR, labor_cost),
                (CostComponent.MATERIAL, material_cost),
                (CostComponent.SUB, sub_cost),
            )
            if cost > COMPONENT_THRESHOLD
        ]
        was_split = len(components) > 1
        if was_split:
            compound_rows_split += 1
            logger.debug(
                "row=%d %r split into %s", i, item_name, [c.value for c, _ in components]
            )

        subcontractor_cell = grid.cell(i, columns.subcontractor_col)
        raw = RawCells(
            subcontractor_cell=_raw_text(grid, i, columns.subcontractor_col),
            labor_cell=_raw_text(grid, i, columns.labor_col),
            material_cell=_raw_text(grid, i, columns.material_col),
            sub_cell=_raw_text(grid, i, columns.sub_col),
            markup_cell=_raw_text(grid, i, columns.markup_col),
            total_with_markup_cell=_raw_text(grid, i, columns.total_with_markup_col),
        )

        for component, amount in components:
            cost = round_cents(amount)
            price = round_cents(cost * (1 + markup_pct)) if markup_pct is not None else None
            items.append(
                ExtractedLineItem(
                    source_row_index=i,
                    source_item_name_raw=item_name,
                    name=component_name(item_name, component, was_split),
                    component=component,
                    vendor_name=resolve_vendor(subcontractor_cell, component),
                    cost=cost,
                    markup_pct=markup_pct,
                    price=price,
                    was_split=was_split,
                    split_from_name=item_name if was_split else None,
                    raw=raw,
                )
            )

    return LineItemExtraction(items=items, warnings=warnings, compound_rows_split=compound_rows_split)
