from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for a batch run over a directory of budget sheets.

FileStat records one file; ProcessingResult aggregates the whole run and feeds
the SUMMARY output line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file import statistics."""
    file_name: str
    status: str  # success/failed
    line_items: int  # extracted line items
    compound_rows_split: int
    warnings: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one run, used for the SUMMARY line."""
    success_files: int
    failed_files: int
    total_line_items: int
    total_split_rows: int
    total_warnings: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
