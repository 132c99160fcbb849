from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the budget sheet importer.

Produced by budget_import.config.loader from the YAML config file. Defaults
here match the defaults applied by the loader.
"""

DEFAULT_MAX_HEADER_SCAN_ROWS = 60
DEFAULT_BILLING_RATE = 75.0
DEFAULT_ACTUAL_RATE = 35.0
DEFAULT_ENRICHMENT_TIMEOUT = 30.0


@dataclass(frozen=True)
class LaborRates:
    """Hourly rates applied to internal labor items.

    billing_rate converts labor cost to hours; the gap to actual_rate is the
    labor cushion.
    """
    billing_rate: float = DEFAULT_BILLING_RATE
    actual_rate: float = DEFAULT_ACTUAL_RATE


@dataclass(frozen=True)
class EnrichmentConfig:
    enabled: bool = False
    url: str | None = None
    timeout_seconds: float = DEFAULT_ENRICHMENT_TIMEOUT
    api_key: str | None = None  # from ENRICHMENT_API_KEY, never from YAML


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for a batch import run."""
    source_directory: str  # scanned non-recursively for budget sheets
    output_directory: str | None = None  # per-file JSON results when set
    max_header_scan_rows: int = DEFAULT_MAX_HEADER_SCAN_ROWS
    labor_rates: LaborRates = field(default_factory=LaborRates)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)
