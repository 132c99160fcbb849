from __future__ import annotations

import logging
from dataclasses import dataclass

from ..excel.cells import levenshtein, normalize_header
from ..models.columns import BudgetColumns, ColumnMappingResult
from ..models.grid import Grid
from ..models.warning import ImportWarning, WarningCode
from .vocabulary import CONCEPT_FIELDS, HEADER_SYNONYMS

"""Column mapping: header cells -> canonical BudgetColumns fields.

Per header cell the candidates are, in decreasing strength:
- exact normalized synonym match (1.0, stops the search)
- substring containment either way (length ratio x 0.9)
- edit distance <= 2 against synonyms of length >= 5 ((1 - d/len) x 0.8)

The best candidate is accepted at MIN_MATCH_CONFIDENCE or above. A field keeps
the first column that claims it.
"""

__all__ = [
    "MIN_MATCH_CONFIDENCE",
    "map_columns",
    "match_header",
]

logger = logging.getLogger(__name__)

MIN_MATCH_CONFIDENCE = 0.6
CONTAINS_CAP = 0.9
FUZZY_CAP = 0.8
FUZZY_MIN_SYNONYM_LENGTH = 5
FUZZY_MAX_DISTANCE = 2

PENALTY_NO_ITEM = 0.4
PENALTY_NO_COST = 0.4
PENALTY_NO_MARKUP = 0.1
PENALTY_UNMAPPED = 0.1
UNMAPPED_LIMIT = 3


@dataclass(frozen=True)
class HeaderMatch:
    concept: str
    confidence: float


def match_header(cell: str) -> HeaderMatch | None:
    """Return the best concept match for one header cell (any confidence)."""
    normalized = normalize_header(cell)
    if not normalized:
        return None
    best: HeaderMatch | None = None
    for concept, synonyms in HEADER_SYNONYMS.items():
        for synonym in synonyms:
            if normalized == synonym:
                return HeaderMatch(concept, 1.0)
            candidates: list[float] = []
            if synonym in normalized or normalized in synonym:
                ratio = min(len(normalized), len(synonym)) / max(len(normalized), len(synonym))
                candidates.append(ratio * CONTAINS_CAP)
            if len(synonym) >= FUZZY_MIN_SYNONYM_LENGTH:
                dist = levenshtein(normalized, synonym)
                if dist <= FUZZY_MAX_DISTANCE:
                    candidates.append((1 - dist / len(synonym)) * FUZZY_CAP)
            for conf in candidates:
                if best is None or conf > best.confidence:
                    best = HeaderMatch(concept, conf)
    return best


def map_columns(grid: Grid, header_row_index: int) -> ColumnMappingResult:
    """Assign each header column to a canonical field.

    Args:
        grid: Decoded sheet
        header_row_index: Row chosen by find_header_row()

    Returns:
        ColumnMappingResult with columns, confidence in [0, 1], unmapped header
        texts and structural warnings (COLUMN_MISSING / COLUMN_AMBIGUOUS).
    """
    header_row = grid.rows[header_row_index] if 0 <= header_row_index < grid.row_count else ()
    assigned: dict[str, int] = {}
    unmapped: list[str] = []
    warnings: list[ImportWarning] = []

    for col_idx, cell in enumerate(header_row):
        if not normalize_header(cell):
            continue
        match = match_header(cell)
        if match is None or match.confidence < MIN_MATCH_CONFIDENCE:
            unmapped.append(cell)
            continue
        field_name = CONCEPT_FIELDS.get(match.concept)
        if field_name is None:
            # recognised vocabulary (e.g. profit) with no column field
            continue
        if field_name in assigned:
            warnings.append(
                ImportWarning(
                    code=WarningCode.COLUMN_AMBIGUOUS,
                    message=(
                        f'Header "{cell.strip()}" also matches {match.concept}; '
                        f"keeping column {assigned[field_name]}"
                    ),
                    row_index=header_row_index,
                    details={"column": col_idx, "kept_column": assigned[field_name], "field": match.concept},
                )
            )
            unmapped.append(cell)
            continue
        assigned[field_name] = col_idx
        logger.debug("column %d %r -> %s (%.2f)", col_idx, cell, field_name, match.confidence)

    columns = BudgetColumns(**assigned)

    if columns.item_col is None:
        warnings.append(ImportWarning(code=WarningCode.COLUMN_MISSING, message="Item column not found"))
    if not columns.has_cost_column:
        warnings.append(
            ImportWarning(
                code=WarningCode.COLUMN_MISSING,
                message="No cost columns (Labor/Material/Sub) found",
            )
        )

    confidence = 1.0
    if columns.item_col is None:
        confidence -= PENALTY_NO_ITEM
    if not columns.has_cost_column:
        confidence -= PENALTY_NO_COST
    if columns.markup_col is None:
        confidence -= PENALTY_NO_MARKUP
    if len(unmapped) > UNMAPPED_LIMIT:
        confidence -= PENALTY_UNMAPPED

    return ColumnMappingResult(
        columns=columns,
        header_row_index=header_row_index,
        confidence=round(max(0.0, confidence), 4),
        unmapped_headers=unmapped,
        warnings=warnings,
    )
