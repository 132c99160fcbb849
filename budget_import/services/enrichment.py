from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from ..models.config_models import LaborRates
from ..models.line_item import EnrichedLineItem, ExtractedLineItem, ItemCategory
from ..models.warning import ImportWarning, WarningCode
from .categories import categorize_items

"""Optional category/name enrichment with deterministic fallback.

An Enricher is a single narrow operation: given the extracted items and the
labor rates, return one suggestion per item, aligned by index. The
deterministic categories are always computed first; the enricher runs under a
timeout in a worker thread and any failure (exception, timeout, malformed or
misaligned response) leaves the deterministic result in place.
"""

__all__ = [
    "EnrichmentError",
    "EnrichmentOutcome",
    "EnrichmentSuggestion",
    "Enricher",
    "HttpEnricher",
    "enrich_with_fallback",
]

logger = logging.getLogger(__name__)


class EnrichmentError(Exception):
    """Raised by an enricher when it cannot produce suggestions."""


@dataclass(frozen=True)
class EnrichmentSuggestion:
    category: ItemCategory | None = None
    normalized_name: str | None = None
    confidence: float | None = None


class Enricher(Protocol):
    def enrich(
        self, items: Sequence[ExtractedLineItem], rates: LaborRates
    ) -> list[EnrichmentSuggestion]: ...


@dataclass(frozen=True)
class EnrichmentOutcome:
    items: list[EnrichedLineItem]
    warnings: list[ImportWarning] = field(default_factory=list)
    enrichment_used: bool = False


def _parse_category(value: Any) -> ItemCategory | None:
    try:
        return ItemCategory(value)
    except ValueError:
        return None


def _parse_suggestion(raw: Any) -> EnrichmentSuggestion:
    if not isinstance(raw, dict):
        return EnrichmentSuggestion()
    name = raw.get("normalizedName")
    confidence = raw.get("confidence")
    return EnrichmentSuggestion(
        category=_parse_category(raw.get("category")),
        normalized_name=(name.strip() or None) if isinstance(name, str) else None,
        confidence=float(confidence) if isinstance(confidence, (int, float)) else None,
    )


@dataclass
class HttpEnricher:
    """Enricher backed by an HTTP endpoint.

    POSTs {"items": [...], "laborBillingRate": .., "laborActualRate": ..} and
    expects {"items": [{"category", "normalizedName", "confidence"}, ...]}.
    """
    url: str
    api_key: str | None = None
    timeout: float = 30.0
    transport: httpx.BaseTransport | None = None  # injectable for tests

    def _build_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def enrich(
        self, items: Sequence[ExtractedLineItem], rates: LaborRates
    ) -> list[EnrichmentSuggestion]:
        payload = {
            "items": [
                {
                    "name": item.name,
                    "component": item.component.value,
                    "vendorName": item.vendor_name,
                    "cost": item.cost,
                    "markupPct": item.markup_pct,
                }
                for item in items
            ],
            "laborBillingRate": rates.billing_rate,
            "laborActualRate": rates.actual_rate,
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(self.url, json=payload, headers=self._build_headers())
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise EnrichmentError(f"enrichment endpoint returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise EnrichmentError(f"enrichment request failed: {e}") from e
        except ValueError as e:
            raise EnrichmentError(f"enrichment response is not JSON: {e}") from e

        raw_items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(raw_items, list):
            raise EnrichmentError("enrichment response has no items list")
        return [_parse_suggestion(r) for r in raw_items]


def _merge(base: EnrichedLineItem, suggestion: EnrichmentSuggestion) -> EnrichedLineItem:
    return EnrichedLineItem(
        item=base.item,
        category=suggestion.category or base.category,
        normalized_name=suggestion.normalized_name or base.normalized_name,
        category_confidence=suggestion.confidence if suggestion.confidence is not None else 1.0,
    )


def enrich_with_fallback(
    items: Sequence[ExtractedLineItem],
    enricher: Enricher | None,
    rates: LaborRates,
    timeout_seconds: float,
) -> EnrichmentOutcome:
    """Categorize items, letting the enricher override category and name.

    The enricher call is bounded by timeout_seconds. On any failure the
    deterministic categories are returned unchanged with an
    ENRICHMENT_FAILED warning.
    """
    deterministic = categorize_items(items)
    if enricher is None or not items:
        return EnrichmentOutcome(items=deterministic)

    executor = ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(enricher.enrich, list(items), rates)
        suggestions = future.result(timeout=timeout_seconds)
        if len(suggestions) != len(items):
            raise EnrichmentError(
                f"enrichment returned {len(suggestions)} suggestions for {len(items)} items"
            )
    except FutureTimeoutError:
        logger.warning("enrichment timed out after %.1fs; using deterministic categories", timeout_seconds)
        return EnrichmentOutcome(
            items=deterministic,
            warnings=[
                ImportWarning(
                    code=WarningCode.ENRICHMENT_FAILED,
                    message=f"Enrichment timed out after {timeout_seconds:g}s",
                )
            ],
        )
    except Exception as e:  # any enricher failure falls back
        logger.warning("enrichment failed; using deterministic categories: %s", e)
        return EnrichmentOutcome(
            items=deterministic,
            warnings=[ImportWarning(code=WarningCode.ENRICHMENT_FAILED, message=f"Enrichment failed: {e}")],
        )
    finally:
        # never wait on a hung enricher
        executor.shutdown(wait=False, cancel_futures=True)

    merged = [_merge(base, s) for base, s in zip(deterministic, suggestions, strict=True)]
    return EnrichmentOutcome(items=merged, enrichment_used=True)
