from __future__ import annotations

import re
from collections.abc import Iterable

from ..models.line_item import CostComponent, EnrichedLineItem, ExtractedLineItem, ItemCategory
from .vocabulary import INTERNAL_VENDOR, MANAGEMENT_KEYWORDS

"""Deterministic cost category assignment.

Rules, first match wins:
(a) internal vendor and markup exactly 0 -> management
(b) name mentions supervision / management / project manager / PM -> management
(c) by component: labor -> labor_internal, material -> materials,
    sub (and anything else) -> subcontractors

(a) must run before (c): zero-markup internal labor is management, not labor.
"""

__all__ = [
    "assign_category",
    "categorize_items",
    "is_internal_vendor",
]

# "pm" only as a whole word, so "equipment" stays out
_PM_WORD = re.compile(r"\bpm\b")

_COMPONENT_CATEGORIES = {
    CostComponent.LABOR: ItemCategory.LABOR_INTERNAL,
    CostComponent.MATERIAL: ItemCategory.MATERIALS,
    CostComponent.SUB: ItemCategory.SUBCONTRACTORS,
}


def is_internal_vendor(vendor_name: str | None) -> bool:
    vendor = (vendor_name or "").strip().upper()
    return vendor in ("", INTERNAL_VENDOR)


def assign_category(item: ExtractedLineItem) -> ItemCategory:
    if is_internal_vendor(item.vendor_name) and item.markup_pct == 0:
        return ItemCategory.MANAGEMENT
    name = item.name.lower()
    if any(keyword in name for keyword in MANAGEMENT_KEYWORDS) or _PM_WORD.search(name):
        return ItemCategory.MANAGEMENT
    return _COMPONENT_CATEGORIES.get(item.component, ItemCategory.SUBCONTRACTORS)


def categorize_items(items: Iterable[ExtractedLineItem]) -> list[EnrichedLineItem]:
    """Pair each item with its deterministic category (confidence 1.0)."""
    return [
        EnrichedLineItem(
            item=item,
            category=assign_category(item),
            normalized_name=item.name,
            category_confidence=1.0,
        )
        for item in items
    ]
