from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ..excel.cells import round_cents
from ..models.config_models import DEFAULT_ENRICHMENT_TIMEOUT, LaborRates
from ..models.extraction_result import ImportResult, ImportSummary
from ..models.grid import Grid
from ..models.line_item import CostComponent, EnrichedLineItem, ItemCategory
from .enrichment import Enricher, enrich_with_fallback
from .extraction import extract_budget_sheet
from .header_detection import DEFAULT_MAX_ROWS_TO_SCAN

"""Full import of one budget sheet grid.

extract_budget_sheet() -> categorization (optionally enriched) -> labor rates.
Internal labor items get hours (cost / billing rate) and the labor cushion
(hours x (billing - actual)).
"""

__all__ = [
    "ImportOptions",
    "apply_labor_rates",
    "build_import_summary",
    "import_budget_sheet",
]


@dataclass(frozen=True)
class ImportOptions:
    labor_rates: LaborRates = field(default_factory=LaborRates)
    enricher: Enricher | None = None
    enrichment_timeout: float = DEFAULT_ENRICHMENT_TIMEOUT
    max_header_scan_rows: int = DEFAULT_MAX_ROWS_TO_SCAN


def apply_labor_rates(item: EnrichedLineItem, rates: LaborRates) -> EnrichedLineItem:
    if item.category is not ItemCategory.LABOR_INTERNAL or item.item.component is not CostComponent.LABOR:
        return item
    if rates.billing_rate <= 0:
        return item
    hours = item.item.cost / rates.billing_rate
    return replace(
        item,
        labor_hours=hours,
        billing_rate_per_hour=rates.billing_rate,
        actual_cost_rate_per_hour=rates.actual_rate,
        labor_cushion_amount=round_cents(hours * (rates.billing_rate - rates.actual_rate)),
    )


def import_budget_sheet(grid: Grid, options: ImportOptions | None = None) -> ImportResult:
    options = options or ImportOptions()
    extraction = extract_budget_sheet(grid, options.max_header_scan_rows)
    if not extraction.success:
        return ImportResult(
            success=False,
            items=[],
            warnings=list(extraction.warnings),
            metadata=extraction.metadata,
        )

    outcome = enrich_with_fallback(
        extraction.items, options.enricher, options.labor_rates, options.enrichment_timeout
    )
    items = [apply_labor_rates(item, options.labor_rates) for item in outcome.items]
    return ImportResult(
        success=True,
        items=items,
        warnings=[*extraction.warnings, *outcome.warnings],
        metadata=replace(extraction.metadata, enrichment_used=outcome.enrichment_used),
    )


def build_import_summary(items: Sequence[EnrichedLineItem]) -> ImportSummary:
    counts = Counter(item.category for item in items)
    return ImportSummary(
        total_line_items=len(items),
        total_cost=round_cents(sum(i.item.cost for i in items)),
        total_price=round_cents(sum(i.item.price or 0.0 for i in items)),
        category_counts={c.value: counts.get(c, 0) for c in ItemCategory},
        total_labor_hours=round(sum(i.labor_hours or 0.0 for i in items), 2),
        estimated_labor_cushion=round_cents(sum(i.labor_cushion_amount or 0.0 for i in items)),
    )
