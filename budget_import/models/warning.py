from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

"""ImportWarning model for the budget sheet importer.

Warnings are non-fatal diagnostics. They never interrupt the pipeline; each
stage returns the warnings it produced and the extraction entry point
accumulates them into the final result in stage order.

row_index is the 0-based grid row. None means the warning concerns the sheet
as a whole (header not found, missing columns, totals).
"""

__all__ = [
    "ImportWarning",
    "WarningCode",
]


class WarningCode(Enum):
    """Fixed warning codes (UPPER_SNAKE)."""
    HEADER_NOT_FOUND = "HEADER_NOT_FOUND"
    COLUMN_MISSING = "COLUMN_MISSING"
    COLUMN_AMBIGUOUS = "COLUMN_AMBIGUOUS"
    STOP_MARKER_FOUND = "STOP_MARKER_FOUND"
    STOP_BY_STRUCTURE = "STOP_BY_STRUCTURE"
    SKIPPED_SUMMARY_ROW = "SKIPPED_SUMMARY_ROW"
    SKIPPED_EMPTY_ROW = "SKIPPED_EMPTY_ROW"
    MARKUP_MISSING = "MARKUP_MISSING"
    TOTAL_MISMATCH = "TOTAL_MISMATCH"
    UNPARSEABLE_CURRENCY = "UNPARSEABLE_CURRENCY"
    UNPARSEABLE_PERCENT = "UNPARSEABLE_PERCENT"
    LOW_CONFIDENCE_MAPPING = "LOW_CONFIDENCE_MAPPING"
    NEGATIVE_VALUE = "NEGATIVE_VALUE"
    ENRICHMENT_FAILED = "ENRICHMENT_FAILED"


@dataclass(frozen=True)
class ImportWarning:
    """Non-fatal diagnostic produced by a pipeline stage.

    Attributes:
        code: Fixed warning classification
        message: Human readable description
        row_index: 0-based grid row, or None for sheet-level warnings
        details: Optional structured payload (e.g. computed totals)
    """
    code: WarningCode
    message: str
    row_index: int | None = None
    details: dict[str, Any] | None = None

    @property
    def display_row(self) -> int | None:
        """1-based row number as shown by spreadsheet applications."""
        return None if self.row_index is None else self.row_index + 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "row_index": self.row_index,
            "details": self.details,
        }

    def to_json_line(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
