# Shared pytest fixtures
from __future__ import annotations
import csv
import logging
import tempfile
from pathlib import Path

import pytest

from budget_import.logging.init import LOGGER_NAME, reset_logging
from budget_import.models.columns import BudgetColumns
from budget_import.models.grid import Grid

STANDARD_HEADER = ["Item", "Subcontractor", "Labor", "Material", "Sub", "Markup"]

# Simplified real-world budget sheet: header, spacer, priced rows, totals row, stop marker
BUDGET_ROWS = [
    ["Item", "Subcontractor", "Labor ", "Material", "Sub", "Total", "Markup", "Total with Mark Up"],
    ["", "", "", "", "$0.00", "30.00%", "$0.00", "$0.00"],
    ["Ceilings", "Cincinnati Interiors", "", "$0.00", "$24,970.00", "$24,970.00", "25.00%", "$31,212.50"],
    ["Demo", "RCG", "$15,000.00", "$6,000.00", "$0.00", "$21,000.00", "25.00%", "$26,250.00"],
    ["Framing", "Ron Mullekin", "", "$10,000.00", "$27,000.00", "$37,000.00", "25.00%", "$46,250.00"],
    ["Supervision", "RCG", "$45,093.00", "$0.00", "$0.00", "$45,093.00", "0.00%", "$45,093.00"],
    ["", "", "", "", "", "", "", ""],
    ["", "", "$60,093.00", "$16,000.00", "$51,970.00", "$128,063.00", "", "$148,805.50"],
    ["", "", "", "", "", "", "Total Cost", ""],
]


@pytest.fixture(autouse=True)
def _clean_logging():
    # handlers hold the sys.stdout of the test that created them
    reset_logging()
    logging.getLogger(LOGGER_NAME).handlers.clear()
    yield
    reset_logging()
    logging.getLogger(LOGGER_NAME).handlers.clear()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # restored on teardown even when .env loading sets it
        monkeypatch.setenv("ENRICHMENT_API_KEY", "")
        monkeypatch.delenv("ENRICHMENT_API_KEY")
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
max_header_scan_rows: 60
labor_rates:
  billing_rate: 75
  actual_rate: 35
enrichment:
  enabled: false
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def budget_rows() -> list[list[str]]:
    return [list(r) for r in BUDGET_ROWS]


@pytest.fixture()
def budget_grid(budget_rows: list[list[str]]) -> Grid:
    return Grid.from_rows(budget_rows)


@pytest.fixture()
def standard_columns() -> BudgetColumns:
    """Columns for grids laid out as STANDARD_HEADER."""
    return BudgetColumns(
        item_col=0,
        subcontractor_col=1,
        labor_col=2,
        material_col=3,
        sub_col=4,
        markup_col=5,
    )


def _write_csv(path: Path, rows: list[list[str]]) -> Path:
    with path.open("w", newline="", encoding="utf-8") as f:
        csv.writer(f).writerows(rows)
    return path


@pytest.fixture()
def budget_csv_files(temp_workdir: Path) -> list[Path]:
    """One good budget sheet and one sheet without any header row."""
    data_dir = temp_workdir / "data"
    good = _write_csv(data_dir / "uc_neuro.csv", BUDGET_ROWS)
    bad = _write_csv(data_dir / "notes.csv", [["Just", "some", "random", "text"], ["with", "no", "budget", "columns"]])
    return [good, bad]
