from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal

"""Cell text helpers shared by the extraction stages.

- normalize_header: lowercase, trim, ':'/'-'/'_' to spaces, collapse whitespace
- parse_currency: "$24,970.00" / "(1,200)" / "-" -> non-negative float
- parse_percent: "25.00%" -> 0.25, "0.3" -> 0.3
- levenshtein: plain dynamic-programming edit distance
- round_cents: half-up rounding to 2 decimals
"""

__all__ = [
    "is_blank",
    "is_negative_amount",
    "levenshtein",
    "normalize_header",
    "parse_currency",
    "parse_percent",
    "round_cents",
]

_SEPARATORS = re.compile(r"[:\-_]")
_WHITESPACE = re.compile(r"\s+")
_CURRENCY_NOISE = re.compile(r"[$,\s()]")
_CENT = Decimal("0.01")


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def normalize_header(value: str | None) -> str:
    if not value:
        return ""
    text = _SEPARATORS.sub(" ", value.lower().strip())
    return _WHITESPACE.sub(" ", text).strip()


def _to_finite_float(text: str) -> float | None:
    try:
        num = float(text)
    except ValueError:
        return None
    # float() accepts "nan" / "inf"; those are never amounts
    if not math.isfinite(num):
        return None
    return num


def parse_currency(value: str | None) -> float | None:
    """Parse a currency cell into a non-negative amount.

    Returns None for blank or unparseable text, 0.0 for a lone dash (the
    accounting zero). Parenthesized and minus-signed values are returned as
    their magnitude; use is_negative_amount() to detect them.
    """
    if is_blank(value):
        return None
    cleaned = _CURRENCY_NOISE.sub("", value.strip())
    if cleaned in ("", "-"):
        return 0.0
    num = _to_finite_float(cleaned)
    if num is None:
        return None
    return abs(num)


def is_negative_amount(value: str | None) -> bool:
    """True when the cell holds a non-zero accounting negative: "(500)", "-$500"."""
    if is_blank(value):
        return False
    text = value.strip()
    amount = parse_currency(text)
    if not amount:
        return False
    if text.startswith("(") and text.endswith(")"):
        return True
    return _CURRENCY_NOISE.sub("", text).startswith("-")


def parse_percent(value: str | None) -> float | None:
    """Parse a markup cell as a fraction.

    Values above 1 are taken as percent form and divided by 100; values at or
    below 1 are already fractional. Blank, unparseable or negative text gives
    None.
    """
    if is_blank(value):
        return None
    cleaned = _WHITESPACE.sub("", value.strip().replace("%", ""))
    if not cleaned:
        return None
    num = _to_finite_float(cleaned)
    if num is None or num < 0:
        return None
    return num / 100 if num > 1 else num


def round_cents(value: float) -> float:
    return float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def levenshtein(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]
