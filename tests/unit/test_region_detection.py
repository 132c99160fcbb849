from __future__ import annotations

from budget_import.models.columns import BudgetColumns
from budget_import.models.grid import Grid
from budget_import.models.warning import WarningCode
from budget_import.services.region_detection import detect_table_region, is_empty_row

SUB_ONLY = BudgetColumns(item_col=0, sub_col=1)


def test_stops_at_total_cost_marker():
    grid = Grid.from_rows([
        ["Item", "Sub", "Total"],
        ["Demo", "$15,000", "$15,000"],
        ["Framing", "$27,000", "$27,000"],
        ["", "", "Total Cost"],
        ["Summary", "data", "here"],
    ])
    region = detect_table_region(grid, 0, BudgetColumns(item_col=0, sub_col=1, total_col=2))
    assert region.start_row == 1
    assert region.end_row == 3
    assert "total cost" in region.stop_reason
    assert len(region.warnings) == 1
    assert region.warnings[0].code is WarningCode.STOP_MARKER_FOUND
    assert region.warnings[0].row_index == 3


def test_stops_at_expenses_marker():
    grid = Grid.from_rows([
        ["Item", "Sub"],
        ["Paint", "$9,800"],
        ["Expenses", ""],
    ])
    region = detect_table_region(grid, 0, SUB_ONLY)
    assert region.end_row == 2
    assert "expenses" in region.stop_reason


def test_stops_after_three_consecutive_empty_rows():
    grid = Grid.from_rows([
        ["Item", "Sub"],
        ["HVAC", "$68,000"],
        ["", ""],
        ["", ""],
        ["", ""],
        ["Footer", "text"],
    ])
    region = detect_table_region(grid, 0, SUB_ONLY)
    assert region.end_row == 2
    assert "consecutive empty" in region.stop_reason
    assert region.warnings[0].code is WarningCode.STOP_BY_STRUCTURE


def test_two_empty_rows_do_not_stop():
    grid = Grid.from_rows([
        ["Item", "Sub"],
        ["HVAC", "$68,000"],
        ["", ""],
        ["", "$0.00"],
        ["Paint", "$9,800"],
    ])
    region = detect_table_region(grid, 0, SUB_ONLY)
    assert region.end_row == 5
    assert region.stop_reason is None
    assert region.warnings == []


def test_header_on_last_row_gives_empty_region():
    grid = Grid.from_rows([["Item", "Sub"]])
    region = detect_table_region(grid, 0, SUB_ONLY)
    assert region.start_row == region.end_row == 1


def test_stop_marker_wins_over_earlier_empty_run():
    grid = Grid.from_rows([
        ["Item", "Sub"],
        ["HVAC", "$68,000"],
        ["", ""],
        ["Contingency", "$5,000"],
    ])
    region = detect_table_region(grid, 0, SUB_ONLY)
    assert region.end_row == 3
    assert "contingency" in region.stop_reason


def test_is_empty_row():
    grid = Grid.from_rows([
        ["", "$0.00"],
        ["", "-"],
        ["", "$5"],
        ["x", ""],
    ])
    assert is_empty_row(grid, 0, SUB_ONLY)
    assert is_empty_row(grid, 1, SUB_ONLY)
    assert not is_empty_row(grid, 2, SUB_ONLY)
    assert not is_empty_row(grid, 3, SUB_ONLY)
