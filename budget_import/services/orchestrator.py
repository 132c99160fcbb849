from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import SUPPORTED_SUFFIXES, GridReadError, read_grid
from ..logging.init import file_context, log_sheet_warning
from ..logging.warning_log import WarningLogBuffer
from ..models.config_models import ImportConfig
from ..models.processing_result import FileStat, ProcessingResult
from .enrichment import Enricher, HttpEnricher
from .estimate_lines import convert_to_estimate_lines
from .importer import ImportOptions, build_import_summary, import_budget_sheet
from .progress import ProgressTracker

"""Batch import orchestration.

Scans the configured directory for budget sheets, imports each file
independently, writes optional per-file JSON results, flushes the warning log
once and returns the aggregated ProcessingResult.

A file fails when it cannot be read or when extraction finds no usable table.
One failed file never stops the run.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that prevents the run (e.g. unreadable source directory)."""


def scan_budget_files(directory: Path) -> list[Path]:
    """List budget sheet files in directory (non-recursive, sorted by name).

    Raises:
        ProcessingError: If the directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        files = [
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES and not p.name.startswith("~$")
        ]
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e
    return sorted(files, key=lambda p: p.name)


def build_enricher(config: ImportConfig) -> Enricher | None:
    enrichment = config.enrichment
    if not enrichment.enabled or not enrichment.url:
        return None
    return HttpEnricher(url=enrichment.url, api_key=enrichment.api_key, timeout=enrichment.timeout_seconds)


def _write_output(output_dir: Path, file_path: Path, payload: dict) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    out = output_dir / f"{file_path.stem}.json"
    out.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return out


def _process_single_file(
    file_path: Path,
    options: ImportOptions,
    warning_log: WarningLogBuffer,
    output_dir: Path | None,
) -> FileStat:
    start = datetime.now(UTC)
    try:
        grid = read_grid(file_path)
    except GridReadError as e:
        logger.error("read failed: %s", e, extra=file_context(file_path.name))
        return FileStat(
            file_name=file_path.name,
            status="failed",
            line_items=0,
            compound_rows_split=0,
            warnings=0,
            elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
            error=str(e),
        )

    result = import_budget_sheet(grid, options)
    warning_log.extend(file_path.name, result.warnings)
    meta = result.metadata

    if not result.success:
        reason = "; ".join(w.message for w in result.warnings) or meta.stop_reason or "no usable table"
        logger.error("no usable table: %s", reason, extra=file_context(file_path.name))
    else:
        summary = build_import_summary(result.items)
        logger.info(
            "header_row=%d items=%d split_rows=%d confidence=%.2f total_cost=%.2f total_price=%.2f",
            meta.header_row_index,
            meta.rows_extracted,
            meta.compound_rows_split,
            meta.mapping_confidence,
            summary.total_cost,
            summary.total_price,
            extra=file_context(file_path.name),
        )
        for w in result.warnings:
            log_sheet_warning(logger, file_path.name, w)

    if output_dir is not None:
        payload = result.to_dict()
        if result.success:
            payload["summary"] = asdict(build_import_summary(result.items))
            payload["estimate_lines"] = [line.to_dict() for line in convert_to_estimate_lines(result.items)]
        try:
            out = _write_output(output_dir, file_path, payload)
        except OSError as e:
            logger.error("output write failed: %s", e, extra=file_context(file_path.name))
            return FileStat(
                file_name=file_path.name,
                status="failed",
                line_items=len(result.items),
                compound_rows_split=meta.compound_rows_split,
                warnings=len(result.warnings),
                elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
                error=f"output write failed: {e}",
            )
        logger.debug("wrote %s", out, extra=file_context(file_path.name))

    return FileStat(
        file_name=file_path.name,
        status="success" if result.success else "failed",
        line_items=len(result.items),
        compound_rows_split=meta.compound_rows_split,
        warnings=len(result.warnings),
        elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
        error=None if result.success else (meta.stop_reason or "extraction failed"),
    )


def process_all(config: ImportConfig, enricher: Enricher | None = None) -> ProcessingResult:
    """Import every budget sheet in config.source_directory.

    Args:
        config: Loaded import configuration
        enricher: Optional enricher; defaults to the one configured (if any)

    Returns:
        ProcessingResult with aggregated counts and per-file stats

    Raises:
        ProcessingError: If the source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    file_paths = scan_budget_files(Path(config.source_directory))

    options = ImportOptions(
        labor_rates=config.labor_rates,
        enricher=enricher if enricher is not None else build_enricher(config),
        enrichment_timeout=config.enrichment.timeout_seconds,
        max_header_scan_rows=config.max_header_scan_rows,
    )
    output_dir = Path(config.output_directory) if config.output_directory else None
    warning_log = WarningLogBuffer()

    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat = _process_single_file(file_path, options, warning_log, output_dir)
            file_stats.append(stat)
            progress.finish_file(stat)

    try:
        log_path = warning_log.flush()
        if log_path is not None:
            logger.info("warnings written to %s", log_path)
    except OSError as e:
        # a warning log failure does not fail the run
        logger.warning("could not write warning log: %s", e)

    end_time = datetime.now(UTC)
    succeeded = [s for s in file_stats if s.status == "success"]
    return ProcessingResult(
        success_files=len(succeeded),
        failed_files=len(file_stats) - len(succeeded),
        total_line_items=sum(s.line_items for s in succeeded),
        total_split_rows=sum(s.compound_rows_split for s in succeeded),
        total_warnings=sum(s.warnings for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
