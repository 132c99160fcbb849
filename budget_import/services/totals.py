from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..excel.cells import round_cents
from ..models.line_item import ExtractedLineItem
from ..models.warning import ImportWarning, WarningCode

"""Totals reconciliation.

Recomputes total cost and price from the extracted items and flags a price
total that falls materially below the cost total. Advisory only.
"""

__all__ = [
    "PRICE_TO_COST_FLOOR",
    "compute_totals",
    "validate_totals",
]

PRICE_TO_COST_FLOOR = 0.9


def compute_totals(items: Iterable[ExtractedLineItem]) -> tuple[float, float]:
    """Return (total_cost, total_price); unpriced items add nothing to price."""
    total_cost = 0.0
    total_price = 0.0
    for item in items:
        total_cost += item.cost
        total_price += item.price or 0.0
    return round_cents(total_cost), round_cents(total_price)


def validate_totals(items: Sequence[ExtractedLineItem]) -> list[ImportWarning]:
    total_cost, total_price = compute_totals(items)
    if 0 < total_price < total_cost * PRICE_TO_COST_FLOOR:
        return [
            ImportWarning(
                code=WarningCode.TOTAL_MISMATCH,
                message=(
                    f"Total price (${total_price:,.2f}) is less than total cost "
                    f"(${total_cost:,.2f})"
                ),
                details={"computed_total_cost": total_cost, "computed_total_price": total_price},
            )
        ]
    return []
