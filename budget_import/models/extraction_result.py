from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .line_item import EnrichedLineItem, ExtractedLineItem
from .warning import ImportWarning

"""Extraction and import result models.

ExtractionResult is the output contract of the deterministic pipeline.
ImportResult is the same shape after categorization (and optional
enrichment), with enriched items.
"""

__all__ = [
    "ExtractionMetadata",
    "ExtractionResult",
    "ImportResult",
    "ImportSummary",
]


@dataclass(frozen=True)
class ExtractionMetadata:
    header_row_index: int  # -1 when no header row was found
    stop_row_index: int | None
    stop_reason: str | None
    rows_scanned: int
    rows_extracted: int
    compound_rows_split: int
    mapping_confidence: float
    total_cost: float = 0.0
    total_price: float = 0.0
    enrichment_used: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "header_row_index": self.header_row_index,
            "stop_row_index": self.stop_row_index,
            "stop_reason": self.stop_reason,
            "rows_scanned": self.rows_scanned,
            "rows_extracted": self.rows_extracted,
            "compound_rows_split": self.compound_rows_split,
            "mapping_confidence": self.mapping_confidence,
            "computed_totals": {
                "total_cost": self.total_cost,
                "total_price": self.total_price,
            },
            "enrichment_used": self.enrichment_used,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Output of extract_budget_sheet().

    success is False only when no header row was found or no item column
    could be mapped. Partial extraction with warnings is still a success.
    """
    success: bool
    items: list[ExtractedLineItem]
    warnings: list[ImportWarning]
    metadata: ExtractionMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "items": [i.to_dict() for i in self.items],
            "warnings": [w.to_dict() for w in self.warnings],
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class ImportResult:
    success: bool
    items: list[EnrichedLineItem]
    warnings: list[ImportWarning]
    metadata: ExtractionMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "items": [i.to_dict() for i in self.items],
            "warnings": [w.to_dict() for w in self.warnings],
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class ImportSummary:
    """Per-import tallies for display after categorization."""
    total_line_items: int = 0
    total_cost: float = 0.0
    total_price: float = 0.0
    category_counts: dict[str, int] = field(default_factory=dict)
    total_labor_hours: float = 0.0
    estimated_labor_cushion: float = 0.0
