from __future__ import annotations

from dataclasses import dataclass, field

from .warning import ImportWarning

"""Header, column mapping and table region models.

These carry the intermediate results of the first three pipeline stages:
header row detection, column-to-field mapping and data region detection.
"""

__all__ = [
    "BudgetColumns",
    "ColumnMappingResult",
    "HeaderRowCandidate",
    "TableRegion",
]


@dataclass(frozen=True)
class HeaderRowCandidate:
    """Scored hypothesis that a grid row is the header row."""
    row_index: int
    score: float
    matched_headers: list[str] = field(default_factory=list)  # canonical concepts, "(fuzzy)" suffix for typo hits


@dataclass(frozen=True)
class BudgetColumns:
    """Canonical field -> column index. None means the column is absent."""
    item_col: int | None = None  # required for extraction
    subcontractor_col: int | None = None
    labor_col: int | None = None
    material_col: int | None = None
    sub_col: int | None = None
    total_col: int | None = None
    markup_col: int | None = None
    total_with_markup_col: int | None = None

    @property
    def has_cost_column(self) -> bool:
        return (
            self.labor_col is not None
            or self.material_col is not None
            or self.sub_col is not None
        )

    def to_dict(self) -> dict[str, int | None]:
        return {
            "item": self.item_col,
            "subcontractor": self.subcontractor_col,
            "labor": self.labor_col,
            "material": self.material_col,
            "sub": self.sub_col,
            "total": self.total_col,
            "markup": self.markup_col,
            "totalWithMarkup": self.total_with_markup_col,
        }


@dataclass(frozen=True)
class ColumnMappingResult:
    columns: BudgetColumns
    header_row_index: int
    confidence: float  # 0..1
    unmapped_headers: list[str] = field(default_factory=list)
    warnings: list[ImportWarning] = field(default_factory=list)


@dataclass(frozen=True)
class TableRegion:
    """Bounds of the real data table: start inclusive, end exclusive."""
    start_row: int
    end_row: int
    stop_reason: str | None = None
    warnings: list[ImportWarning] = field(default_factory=list)
