from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

"""Line item models for the budget sheet importer.

ExtractedLineItem is the deterministic unit of output: one non-zero cost
component of one spreadsheet row. EnrichedLineItem pairs it with the category
(and optional labor-rate figures) attached by later stages. Neither is
mutated after creation.
"""

__all__ = [
    "CostComponent",
    "EnrichedLineItem",
    "ExtractedLineItem",
    "ItemCategory",
    "RawCells",
]


class CostComponent(Enum):
    LABOR = "labor"
    MATERIAL = "material"
    SUB = "sub"


class ItemCategory(Enum):
    MANAGEMENT = "management"
    LABOR_INTERNAL = "labor_internal"
    MATERIALS = "materials"
    SUBCONTRACTORS = "subcontractors"


@dataclass(frozen=True)
class RawCells:
    """Trimmed source text of the row's value cells (None when blank/unmapped)."""
    subcontractor_cell: str | None = None
    labor_cell: str | None = None
    material_cell: str | None = None
    sub_cell: str | None = None
    markup_cell: str | None = None
    total_with_markup_cell: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)


@dataclass(frozen=True)
class ExtractedLineItem:
    """One priced cost component extracted from a budget sheet row.

    Invariants:
        - cost >= 0
        - price is None exactly when markup_pct is None
        - was_split implies split_from_name == source_item_name_raw
    """
    source_row_index: int  # 0-based grid row
    source_item_name_raw: str
    name: str  # display name, "<item> - Materials" for split material components
    component: CostComponent
    vendor_name: str | None
    cost: float
    markup_pct: float | None  # fraction (0.25 == 25%)
    price: float | None
    was_split: bool = False
    split_from_name: str | None = None
    raw: RawCells | None = None

    @property
    def display_row(self) -> int:
        return self.source_row_index + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_row_index": self.source_row_index,
            "source_item_name_raw": self.source_item_name_raw,
            "name": self.name,
            "component": self.component.value,
            "vendor_name": self.vendor_name,
            "cost": self.cost,
            "markup_pct": self.markup_pct,
            "price": self.price,
            "was_split": self.was_split,
            "split_from_name": self.split_from_name,
            "raw": self.raw.to_dict() if self.raw is not None else None,
        }


@dataclass(frozen=True)
class EnrichedLineItem:
    """Extracted item plus category assignment and optional labor-rate figures."""
    item: ExtractedLineItem
    category: ItemCategory
    normalized_name: str
    category_confidence: float = 1.0
    labor_hours: float | None = None
    billing_rate_per_hour: float | None = None
    actual_cost_rate_per_hour: float | None = None
    labor_cushion_amount: float | None = None

    @property
    def is_hourly_labor(self) -> bool:
        return (
            self.item.component is CostComponent.LABOR
            and self.labor_hours is not None
            and self.labor_hours > 0
        )

    def to_dict(self) -> dict[str, Any]:
        data = self.item.to_dict()
        data.update(
            {
                "category": self.category.value,
                "normalized_name": self.normalized_name,
                "category_confidence": self.category_confidence,
                "labor_hours": self.labor_hours,
                "billing_rate_per_hour": self.billing_rate_per_hour,
                "actual_cost_rate_per_hour": self.actual_cost_rate_per_hour,
                "labor_cushion_amount": self.labor_cushion_amount,
            }
        )
        return data
