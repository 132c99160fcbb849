from __future__ import annotations

from collections.abc import Iterable

from ..excel.cells import round_cents
from ..models.estimate_line import EstimateLine
from ..models.line_item import EnrichedLineItem

"""Conversion of imported items into estimate lines.

Hourly internal labor is expressed as (hours, HR, billing rate); everything
else is one lump sum (1, LS, cost). Extended cost and price are recomputed
from quantity x rate.
"""

__all__ = [
    "convert_to_estimate_lines",
    "to_estimate_line",
]


def to_estimate_line(item: EnrichedLineItem) -> EstimateLine:
    source = item.item
    price = source.price if source.price is not None else source.cost
    if item.is_hourly_labor:
        quantity = float(item.labor_hours)
        unit = "HR"
        cost_per_unit = item.billing_rate_per_hour or source.cost / quantity
    else:
        quantity = 1.0
        unit = "LS"
        cost_per_unit = source.cost
    price_per_unit = price / quantity

    total_cost = round_cents(quantity * cost_per_unit)
    total = round_cents(quantity * price_per_unit)
    hourly = item.is_hourly_labor
    return EstimateLine(
        description=item.normalized_name or source.name,
        category=item.category.value,
        quantity=quantity,
        unit=unit,
        cost_per_unit=cost_per_unit,
        price_per_unit=price_per_unit,
        markup_percent=round(source.markup_pct * 100, 4) if source.markup_pct is not None else 0.0,
        total_cost=total_cost,
        total=total,
        total_markup=round_cents(total - total_cost),
        labor_hours=item.labor_hours if hourly else None,
        billing_rate_per_hour=item.billing_rate_per_hour if hourly else None,
        actual_cost_rate_per_hour=item.actual_cost_rate_per_hour if hourly else None,
        labor_cushion_amount=item.labor_cushion_amount if hourly else None,
        notes=f"Split from: {source.split_from_name}" if source.was_split else None,
    )


def convert_to_estimate_lines(items: Iterable[EnrichedLineItem]) -> list[EstimateLine]:
    return [to_estimate_line(item) for item in items]
