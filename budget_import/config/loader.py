from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_ACTUAL_RATE,
    DEFAULT_BILLING_RATE,
    DEFAULT_ENRICHMENT_TIMEOUT,
    DEFAULT_MAX_HEADER_SCAN_ROWS,
    EnrichmentConfig,
    ImportConfig,
    LaborRates,
)

"""Config loader.

Responsibilities:
- Load the YAML config (default config/import.yml)
- Validate it against config_schema.json
- Apply defaults (header scan depth, labor rates, enrichment off)
- Take the enrichment API key from the environment (ENRICHMENT_API_KEY)
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/import.yml")
API_KEY_ENV = "ENRICHMENT_API_KEY"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            fails validation (missing required keys, wrong types, extra keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    rates_raw = data.get("labor_rates") or {}
    enrich_raw = data.get("enrichment") or {}
    enrichment = EnrichmentConfig(
        enabled=bool(enrich_raw.get("enabled", False)),
        url=enrich_raw.get("url"),
        timeout_seconds=float(enrich_raw.get("timeout_seconds", DEFAULT_ENRICHMENT_TIMEOUT)),
        api_key=os.getenv(API_KEY_ENV) or None,
    )
    if enrichment.enabled and not enrichment.url:
        raise ConfigError("config validation failed: enrichment.url is required when enrichment is enabled")

    return ImportConfig(
        source_directory=data["source_directory"],
        output_directory=data.get("output_directory"),
        max_header_scan_rows=int(data.get("max_header_scan_rows", DEFAULT_MAX_HEADER_SCAN_ROWS)),
        labor_rates=LaborRates(
            billing_rate=float(rates_raw.get("billing_rate", DEFAULT_BILLING_RATE)),
            actual_rate=float(rates_raw.get("actual_rate", DEFAULT_ACTUAL_RATE)),
        ),
        enrichment=enrichment,
    )
