from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from budget_import.config.loader import load_config
from budget_import.models.config_models import EnrichmentConfig, ImportConfig
from budget_import.models.processing_result import ProcessingResult
from budget_import.services.enrichment import EnrichmentSuggestion, HttpEnricher
from budget_import.services.orchestrator import (
    ProcessingError,
    build_enricher,
    process_all,
    scan_budget_files,
)


def test_scan_budget_files(temp_workdir: Path) -> None:
    data_dir = temp_workdir / "data"
    (data_dir / "b_budget.xlsx").write_bytes(b"test")
    (data_dir / "a_budget.csv").write_text("Item\n")
    (data_dir / "legacy.xls").write_bytes(b"test")
    (data_dir / "readme.txt").write_text("ignore this")
    (data_dir / "~$b_budget.xlsx").write_bytes(b"lock file")
    (data_dir / "nested").mkdir()

    files = scan_budget_files(data_dir)
    assert [f.name for f in files] == ["a_budget.csv", "b_budget.xlsx", "legacy.xls"]


def test_scan_budget_files_directory_not_found() -> None:
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_budget_files(Path("/non/existent/path"))


def test_scan_budget_files_not_a_directory(temp_workdir: Path) -> None:
    f = temp_workdir / "file.csv"
    f.write_text("x")
    with pytest.raises(ProcessingError, match="not a directory"):
        scan_budget_files(f)


def test_process_all_empty_directory(temp_workdir: Path, write_config: Path) -> None:
    result = process_all(load_config(write_config))
    assert isinstance(result, ProcessingResult)
    assert result.success_files == 0
    assert result.failed_files == 0
    assert result.total_line_items == 0
    assert result.file_stats == []
    assert result.elapsed_seconds >= 0
    assert list((temp_workdir / "logs").iterdir()) == []


def test_process_all_partial_failure(temp_workdir: Path, write_config: Path, budget_csv_files) -> None:
    result = process_all(load_config(write_config))

    assert result.success_files == 1
    assert result.failed_files == 1
    assert result.total_line_items == 6
    assert result.total_split_rows == 2
    # STOP_MARKER_FOUND for the budget, HEADER_NOT_FOUND for the notes
    assert result.total_warnings == 2

    stats = {s.file_name: s for s in result.file_stats}
    assert stats["uc_neuro.csv"].status == "success"
    assert stats["uc_neuro.csv"].line_items == 6
    assert stats["notes.csv"].status == "failed"
    assert stats["notes.csv"].error == "Header not found"

    logs = list((temp_workdir / "logs").glob("warnings-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert {(r["file"], r["code"]) for r in records} == {
        ("uc_neuro.csv", "STOP_MARKER_FOUND"),
        ("notes.csv", "HEADER_NOT_FOUND"),
    }


def test_process_all_unreadable_file_fails_alone(temp_workdir: Path, write_config: Path, budget_csv_files) -> None:
    (temp_workdir / "data" / "broken.xlsx").write_bytes(b"not a workbook")
    result = process_all(load_config(write_config))
    stats = {s.file_name: s for s in result.file_stats}
    assert stats["broken.xlsx"].status == "failed"
    assert "broken.xlsx" in stats["broken.xlsx"].error
    assert stats["uc_neuro.csv"].status == "success"


def test_process_all_legacy_xls_without_engine_fails_alone(
    temp_workdir: Path, write_config: Path, budget_csv_files
) -> None:
    # OLE2 compound document signature; pandas needs xlrd to decode it
    (temp_workdir / "data" / "legacy.xls").write_bytes(bytes.fromhex("D0CF11E0A1B11AE1") + b"\x00" * 504)
    with patch(
        "budget_import.excel.reader.pd.read_excel",
        side_effect=ImportError("Missing optional dependency 'xlrd'"),
    ):
        result = process_all(load_config(write_config))
    stats = {s.file_name: s for s in result.file_stats}
    assert stats["legacy.xls"].status == "failed"
    assert "xlrd" in stats["legacy.xls"].error
    assert stats["uc_neuro.csv"].status == "success"
    assert result.success_files == 1
    assert result.failed_files == 2


def test_process_all_unwritable_output_fails_files(temp_workdir: Path, budget_csv_files) -> None:
    (temp_workdir / "out").write_text("a file, not a directory")
    result = process_all(ImportConfig(source_directory="./data", output_directory="./out"))
    assert result.success_files == 0
    assert result.failed_files == 2
    stats = {s.file_name: s for s in result.file_stats}
    assert stats["uc_neuro.csv"].error.startswith("output write failed")
    assert stats["uc_neuro.csv"].line_items == 6
    assert result.total_line_items == 0


def test_process_all_writes_json_output(temp_workdir: Path, budget_csv_files) -> None:
    config = ImportConfig(source_directory="./data", output_directory="./out")
    process_all(config)

    payload = json.loads((temp_workdir / "out" / "uc_neuro.json").read_text(encoding="utf-8"))
    assert payload["success"] is True
    assert len(payload["items"]) == 6
    assert payload["metadata"]["computed_totals"] == {"total_cost": 128063.0, "total_price": 148805.5}
    assert payload["summary"]["category_counts"]["materials"] == 2
    assert len(payload["estimate_lines"]) == 6

    failed = json.loads((temp_workdir / "out" / "notes.json").read_text(encoding="utf-8"))
    assert failed["success"] is False
    assert "estimate_lines" not in failed


def test_process_all_uses_given_enricher(temp_workdir: Path, budget_csv_files) -> None:
    calls = []

    class RecordingEnricher:
        def enrich(self, items, rates):
            calls.append(len(items))
            return [EnrichmentSuggestion() for _ in items]

    result = process_all(ImportConfig(source_directory="./data"), enricher=RecordingEnricher())
    assert calls == [6]
    assert result.success_files == 1


def test_build_enricher() -> None:
    assert build_enricher(ImportConfig(source_directory=".")) is None
    enricher = build_enricher(
        ImportConfig(
            source_directory=".",
            enrichment=EnrichmentConfig(enabled=True, url="https://enrich.test", timeout_seconds=5.0, api_key="k"),
        )
    )
    assert isinstance(enricher, HttpEnricher)
    assert enricher.url == "https://enrich.test"
    assert enricher.api_key == "k"
    assert enricher.timeout == 5.0


def test_warning_log_failure_does_not_fail_run(temp_workdir: Path, write_config: Path, budget_csv_files) -> None:
    with patch(
        "budget_import.services.orchestrator.WarningLogBuffer.flush", side_effect=OSError("disk full")
    ):
        result = process_all(load_config(write_config))
    assert result.success_files == 1
