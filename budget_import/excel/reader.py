from __future__ import annotations

import csv
import zipfile
from pathlib import Path

import pandas as pd

from ..models.grid import Grid

"""Budget sheet reader: .csv / .xlsx / .xls -> Grid.

Everything is read as text with no header row and no NA conversion, so the
extraction pipeline sees the cells as the estimator typed them ("$0.00",
"25.00%", ""). Only the first sheet of a workbook is used unless a sheet name
is given.

CSV goes through the csv module: budget exports are ragged (title rows with
one cell, wide data rows) and Grid.from_rows pads them.
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "GridReadError",
    "frame_to_grid",
    "read_grid",
]

SUPPORTED_SUFFIXES = (".csv", ".xlsx", ".xls")


class GridReadError(Exception):
    """Raised when a file cannot be decoded into a Grid."""


def frame_to_grid(df: pd.DataFrame) -> Grid:
    """Convert a raw (header=None) DataFrame into a Grid of stripped text."""
    clean = df.fillna("")
    rows = [[str(v).strip() for v in row] for row in clean.itertuples(index=False, name=None)]
    return Grid.from_rows(rows)


def _read_csv(path: Path) -> Grid:
    with path.open(newline="", encoding="utf-8-sig") as f:
        rows = [[cell.strip() for cell in row] for row in csv.reader(f)]
    return Grid.from_rows(rows)


def read_grid(path: Path, sheet: str | None = None) -> Grid:
    """Read a budget sheet file into a Grid.

    Parameters
    ----------
    path: .csv, .xlsx or .xls file
    sheet: sheet name for workbooks (None = first sheet)
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise GridReadError(f"unsupported file type '{suffix}' (use .csv, .xlsx or .xls)")
    try:
        if suffix == ".csv":
            return _read_csv(path)
        df = pd.read_excel(
            path,
            sheet_name=sheet if sheet is not None else 0,
            header=None,
            dtype=str,
            keep_default_na=False,
        )
    except (OSError, UnicodeDecodeError, csv.Error, ValueError, zipfile.BadZipFile) as e:
        raise GridReadError(f"failed to read {path.name}: {e}") from e
    except ImportError as e:
        # pandas has no engine for this format (xlrd for .xls)
        raise GridReadError(f"failed to read {path.name}: {e}") from e
    return frame_to_grid(df)
