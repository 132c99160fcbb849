from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from budget_import.cli import main as cli_main

"""End-to-end run over real workbooks: title rows above the header, a totals
row, a stop marker and an expense-tracking block below the table."""


def _make_excel_file(path: Path, rows: list[list[object]]) -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Budget", header=False, index=False)
    return path


@pytest.fixture
def workbook_setup(temp_workdir: Path, write_config: Path) -> dict[str, Any]:
    cfg = write_config.read_text(encoding="utf-8") + "output_directory: ./output\n"
    write_config.write_text(cfg, encoding="utf-8")
    data_dir = temp_workdir / "data"

    _make_excel_file(
        data_dir / "kitchen_remodel.xlsx",
        [
            ["Kitchen Remodel", None, None, None, None, None],
            ["Prepared by RCG", None, None, None, None, None],
            ["Rev 2", None, None, None, None, None],
            ["Item", "Subcontractor", "Labor", "Material", "Sub", "Markup"],
            ["Demo", "RCG", "$2,000.00", "$500.00", "$0.00", "20%"],
            ["Cabinets", "Home Depot", "", "$8,000.00", "", "15%"],
            ["Electrical", "Bright Electric", "", "$300.00", "$4,200.00", "20%"],
            ["Project Management", "RCG", "$3,000.00", "", "", "0%"],
            ["Subtotal", "", "$5,000.00", "$8,800.00", "$4,200.00", ""],
            ["Expense Tracking", None, None, None, None, None],
            ["Lumber run", "", "$120.00", "", "", ""],
        ],
    )
    _make_excel_file(
        data_dir / "bath.xlsx",
        [
            ["Description", "Vendor", "Labour", "Materials", "Subs", "Mark Up"],
            ["Tile", "Acme Tile", "", "", "$3,000", "25"],
            ["Fixtures", "", "", "$1,200", "", "0.1"],
        ],
    )
    return {"expected_items": 6 + 2, "expected_split_rows": 2}


def test_run_over_workbooks(temp_workdir: Path, workbook_setup: dict[str, Any], capsys) -> None:
    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0, out
    assert (
        f"SUMMARY files=2/2 success=2 failed=0 items={workbook_setup['expected_items']} "
        f"split_rows={workbook_setup['expected_split_rows']}"
    ) in out

    kitchen = json.loads((temp_workdir / "output" / "kitchen_remodel.json").read_text(encoding="utf-8"))
    assert kitchen["metadata"]["header_row_index"] == 3
    assert kitchen["metadata"]["stop_row_index"] == 9
    assert kitchen["metadata"]["stop_reason"] == 'Stop marker found: "expense tracking"'
    names = [i["name"] for i in kitchen["items"]]
    assert names == [
        "Demo",
        "Demo - Materials",
        "Cabinets",
        "Electrical - Materials",
        "Electrical",
        "Project Management",
    ]

    bath = json.loads((temp_workdir / "output" / "bath.json").read_text(encoding="utf-8"))
    assert [(i["name"], i["markup_pct"]) for i in bath["items"]] == [("Tile", 0.25), ("Fixtures", 0.1)]
    assert bath["metadata"]["mapping_confidence"] == 1.0
