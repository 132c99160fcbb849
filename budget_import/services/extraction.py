from __future__ import annotations

import logging

from ..models.extraction_result import ExtractionMetadata, ExtractionResult
from ..models.grid import Grid
from ..models.warning import ImportWarning, WarningCode
from .column_mapping import map_columns
from .header_detection import DEFAULT_MAX_ROWS_TO_SCAN, find_header_row
from .line_items import extract_line_items
from .region_detection import detect_table_region
from .totals import compute_totals, validate_totals

"""Deterministic budget sheet extraction.

Chains the pipeline stages strictly forward:
header detection -> column mapping -> region detection -> line item
extraction -> totals validation.

Structural failures (no header row, no item column) return success=False with
the explanatory warning(s) and no items. Everything else is a warning on a
successful result.
"""

__all__ = [
    "LOW_CONFIDENCE_THRESHOLD",
    "extract_budget_sheet",
]

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_THRESHOLD = 0.5


def _failed(
    warnings: list[ImportWarning], header_row_index: int, stop_reason: str, confidence: float
) -> ExtractionResult:
    return ExtractionResult(
        success=False,
        items=[],
        warnings=warnings,
        metadata=ExtractionMetadata(
            header_row_index=header_row_index,
            stop_row_index=None,
            stop_reason=stop_reason,
            rows_scanned=0,
            rows_extracted=0,
            compound_rows_split=0,
            mapping_confidence=confidence,
        ),
    )


def extract_budget_sheet(grid: Grid, max_rows_to_scan: int = DEFAULT_MAX_ROWS_TO_SCAN) -> ExtractionResult:
    """Extract priced line items from a decoded budget sheet.

    Args:
        grid: Decoded sheet (never mutated)
        max_rows_to_scan: Header search depth

    Returns:
        ExtractionResult; identical input always gives an identical result.
    """
    header = find_header_row(grid, max_rows_to_scan)
    if header is None:
        logger.debug("no header row within first %d rows", max_rows_to_scan)
        return _failed(
            [ImportWarning(code=WarningCode.HEADER_NOT_FOUND, message="Could not detect header row")],
            header_row_index=-1,
            stop_reason="Header not found",
            confidence=0.0,
        )

    warnings: list[ImportWarning] = []
    mapping = map_columns(grid, header.row_index)
    warnings.extend(mapping.warnings)

    if mapping.columns.item_col is None:
        return _failed(
            warnings,
            header_row_index=header.row_index,
            stop_reason="Required columns missing",
            confidence=mapping.confidence,
        )

    if mapping.confidence < LOW_CONFIDENCE_THRESHOLD:
        warnings.append(
            ImportWarning(
                code=WarningCode.LOW_CONFIDENCE_MAPPING,
                message=f"Column mapping confidence is low ({mapping.confidence:.2f})",
                row_index=header.row_index,
                details={"confidence": mapping.confidence, "unmapped_headers": list(mapping.unmapped_headers)},
            )
        )

    region = detect_table_region(grid, header.row_index, mapping.columns)
    warnings.extend(region.warnings)

    extraction = extract_line_items(grid, mapping.columns, region.start_row, region.end_row)
    warnings.extend(extraction.warnings)
    warnings.extend(validate_totals(extraction.items))

    total_cost, total_price = compute_totals(extraction.items)
    logger.debug(
        "extracted header=%d region=[%d,%d) items=%d split=%d",
        header.row_index,
        region.start_row,
        region.end_row,
        len(extraction.items),
        extraction.compound_rows_split,
    )
    return ExtractionResult(
        success=True,
        items=extraction.items,
        warnings=warnings,
        metadata=ExtractionMetadata(
            header_row_index=header.row_index,
            stop_row_index=region.end_row,
            stop_reason=region.stop_reason,
            rows_scanned=region.end_row - region.start_row,
            rows_extracted=len(extraction.items),
            compound_rows_split=extraction.compound_rows_split,
            mapping_confidence=mapping.confidence,
            total_cost=total_cost,
            total_price=total_price,
        ),
    )
