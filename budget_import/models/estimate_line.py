from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""EstimateLine model: an imported item expressed in estimate units.

Hourly labor is (hours, HR, billing rate); everything else one lump sum (LS).
"""

__all__ = [
    "EstimateLine",
]


@dataclass(frozen=True)
class EstimateLine:
    description: str
    category: str
    quantity: float
    unit: str  # HR or LS
    cost_per_unit: float
    price_per_unit: float
    markup_percent: float  # percent form (25.0 == 25%)
    total_cost: float
    total: float
    total_markup: float
    labor_hours: float | None = None
    billing_rate_per_hour: float | None = None
    actual_cost_rate_per_hour: float | None = None
    labor_cushion_amount: float | None = None
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "cost_per_unit": self.cost_per_unit,
            "price_per_unit": self.price_per_unit,
            "markup_percent": self.markup_percent,
            "total_cost": self.total_cost,
            "total": self.total,
            "total_markup": self.total_markup,
            "labor_hours": self.labor_hours,
            "billing_rate_per_hour": self.billing_rate_per_hour,
            "actual_cost_rate_per_hour": self.actual_cost_rate_per_hour,
            "labor_cushion_amount": self.labor_cushion_amount,
            "notes": self.notes,
        }
