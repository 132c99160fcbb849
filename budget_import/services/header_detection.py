from __future__ import annotations

import logging

from ..excel.cells import levenshtein, normalize_header, parse_currency
from ..models.columns import HeaderRowCandidate
from ..models.grid import Grid
from .vocabulary import HEADER_SYNONYMS, HEADER_WEIGHTS

"""Header row detection.

Scores each of the leading grid rows as a header candidate by matching its
cells against the known column vocabulary and returns the best one.
"""

__all__ = [
    "DEFAULT_MAX_ROWS_TO_SCAN",
    "MIN_HEADER_SCORE",
    "find_header_row",
    "score_header_row",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS_TO_SCAN = 60
MIN_HEADER_SCORE = 8.0
FUZZY_MIN_SYNONYM_LENGTH = 5
FUZZY_MAX_DISTANCE = 2
DATA_ROW_CURRENCY_LIMIT = 3
DATA_ROW_PENALTY = 3.0


def _match_concept(normalized: str, synonyms: tuple[str, ...]) -> str | None:
    """Return "exact", "fuzzy" or None; any exact hit beats a typo hit."""
    if any(normalized == synonym or synonym in normalized for synonym in synonyms):
        return "exact"
    for synonym in synonyms:
        if (
            len(synonym) >= FUZZY_MIN_SYNONYM_LENGTH
            and levenshtein(normalized, synonym) <= FUZZY_MAX_DISTANCE
        ):
            return "fuzzy"
    return None


def score_header_row(row: tuple[str, ...]) -> tuple[float, list[str]]:
    """Score one row as a header candidate.

    Returns:
        tuple: (score, matched concept names)
    """
    score = 0.0
    matched: list[str] = []
    for cell in row:
        normalized = normalize_header(cell)
        if not normalized:
            continue
        for concept, synonyms in HEADER_SYNONYMS.items():
            hit = _match_concept(normalized, synonyms)
            if hit is None:
                continue
            weight = HEADER_WEIGHTS.get(concept, 1.0)
            if hit == "exact":
                score += weight
                matched.append(concept)
            else:
                score += weight / 2
                matched.append(f"{concept}(fuzzy)")

    # Rows full of amounts are data rows, not headers
    amounts = [parse_currency(c) for c in row]
    if sum(1 for a in amounts if a is not None and a > 0) > DATA_ROW_CURRENCY_LIMIT:
        score -= DATA_ROW_PENALTY
    return score, matched


def find_header_row(
    grid: Grid, max_rows_to_scan: int = DEFAULT_MAX_ROWS_TO_SCAN
) -> HeaderRowCandidate | None:
    """Return the best scoring header row candidate, or None.

    None means no row reached MIN_HEADER_SCORE: extraction is impossible for
    this grid and should not be retried.
    """
    best: HeaderRowCandidate | None = None
    for i in range(min(grid.row_count, max_rows_to_scan)):
        score, matched = score_header_row(grid.rows[i])
        if score < MIN_HEADER_SCORE:
            continue
        logger.debug("header candidate row=%d score=%.1f matched=%s", i, score, matched)
        # strict > keeps the first of equally scored rows
        if best is None or score > best.score:
            best = HeaderRowCandidate(row_index=i, score=score, matched_headers=matched)
    return best
