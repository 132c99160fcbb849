from __future__ import annotations

import pytest

from budget_import.models.config_models import LaborRates
from budget_import.models.grid import Grid
from budget_import.models.line_item import CostComponent, ItemCategory
from budget_import.models.warning import WarningCode
from budget_import.services.enrichment import EnrichmentError
from budget_import.services.estimate_lines import convert_to_estimate_lines, to_estimate_line
from budget_import.services.importer import ImportOptions, build_import_summary, import_budget_sheet


class FailingEnricher:
    def enrich(self, items, rates):
        raise EnrichmentError("boom")


def _by_name(result):
    return {(e.item.name, e.item.component): e for e in result.items}


def test_import_categorizes_and_applies_labor_rates(budget_grid):
    result = import_budget_sheet(budget_grid)
    assert result.success is True
    items = _by_name(result)

    demo = items[("Demo", CostComponent.LABOR)]
    assert demo.category is ItemCategory.LABOR_INTERNAL
    assert demo.labor_hours == 200.0
    assert demo.billing_rate_per_hour == 75.0
    assert demo.actual_cost_rate_per_hour == 35.0
    assert demo.labor_cushion_amount == 8000.0

    supervision = items[("Supervision", CostComponent.LABOR)]
    assert supervision.category is ItemCategory.MANAGEMENT
    assert supervision.labor_hours is None

    assert items[("Demo - Materials", CostComponent.MATERIAL)].category is ItemCategory.MATERIALS
    assert items[("Ceilings", CostComponent.SUB)].category is ItemCategory.SUBCONTRACTORS
    assert result.metadata.enrichment_used is False


def test_custom_labor_rates(budget_grid):
    options = ImportOptions(labor_rates=LaborRates(billing_rate=100.0, actual_rate=40.0))
    demo = _by_name(import_budget_sheet(budget_grid, options))[("Demo", CostComponent.LABOR)]
    assert demo.labor_hours == 150.0
    assert demo.labor_cushion_amount == 9000.0


def test_failed_extraction_is_passed_through():
    result = import_budget_sheet(Grid.from_rows([["nothing", "here"]]))
    assert result.success is False
    assert result.items == []
    assert result.warnings[0].code is WarningCode.HEADER_NOT_FOUND


def test_enrichment_failure_adds_warning_after_extraction_warnings(budget_grid):
    result = import_budget_sheet(budget_grid, ImportOptions(enricher=FailingEnricher(), enrichment_timeout=1.0))
    assert result.success is True
    assert [w.code for w in result.warnings] == [WarningCode.STOP_MARKER_FOUND, WarningCode.ENRICHMENT_FAILED]
    assert len(result.items) == 6


def test_build_import_summary(budget_grid):
    summary = build_import_summary(import_budget_sheet(budget_grid).items)
    assert summary.total_line_items == 6
    assert summary.total_cost == 128063.0
    assert summary.total_price == 148805.5
    assert summary.category_counts == {
        "management": 1,
        "labor_internal": 1,
        "materials": 2,
        "subcontractors": 2,
    }
    assert summary.total_labor_hours == 200.0
    assert summary.estimated_labor_cushion == 8000.0


def test_estimate_lines(budget_grid):
    result = import_budget_sheet(budget_grid)
    lines = convert_to_estimate_lines(result.items)
    assert len(lines) == len(result.items)

    by_desc = {line.description: line for line in lines}
    demo = by_desc["Demo"]
    assert (demo.quantity, demo.unit, demo.cost_per_unit) == (200.0, "HR", 75.0)
    assert demo.total_cost == 15000.0
    assert demo.total == 18750.0
    assert demo.total_markup == 3750.0
    assert demo.markup_percent == 25.0
    assert demo.labor_cushion_amount == 8000.0
    assert demo.notes == "Split from: Demo"

    ceilings = by_desc["Ceilings"]
    assert (ceilings.quantity, ceilings.unit, ceilings.cost_per_unit) == (1.0, "LS", 24970.0)
    assert ceilings.total == 31212.5
    assert ceilings.labor_hours is None
    assert ceilings.notes is None

    supervision = by_desc["Supervision"]
    assert supervision.unit == "LS"
    assert supervision.total_markup == 0.0


def test_unpriced_item_estimate_uses_cost():
    grid = Grid.from_rows([
        ["Item", "Subcontractor", "Labor", "Material", "Sub", "Markup"],
        ["Paint", "Acme", "", "", "$9,800", ""],
    ])
    (item,) = import_budget_sheet(grid).items
    line = to_estimate_line(item)
    assert line.total == 9800.0
    assert line.total_markup == 0.0
    assert line.markup_percent == 0.0


@pytest.mark.parametrize("billing_rate", [75.0, 60.0])
def test_hours_times_rate_reproduces_cost(budget_grid, billing_rate):
    options = ImportOptions(labor_rates=LaborRates(billing_rate=billing_rate, actual_rate=35.0))
    for line in convert_to_estimate_lines(import_budget_sheet(budget_grid, options).items):
        if line.unit == "HR":
            assert line.total_cost == pytest.approx(15000.0)
