from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..models.warning import ImportWarning

"""Import warning log: buffering and JSON Lines output.

One file per run, logs/warnings-YYYYMMDD-HHMMSS.log (UTC), created on the
first flush. Records carry the source file so a reviewer can locate each
offending cell. Fixed key set.
"""

__all__ = [
    "WarningLogBuffer",
    "WarningRecord",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


@dataclass(frozen=True)
class WarningRecord:
    """One import warning tied to its source file.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Budget sheet file name
        row: 1-based spreadsheet row, -1 for sheet-level warnings
        code: Warning code (UPPER_SNAKE)
        message: Human readable description
    """
    timestamp: str
    file: str
    row: int
    code: str
    message: str

    @staticmethod
    def create(file: str, warning: ImportWarning) -> WarningRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return WarningRecord(
            timestamp=ts,
            file=file,
            row=warning.display_row if warning.display_row is not None else -1,
            code=warning.code.value,
            message=warning.message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)


class WarningLogBuffer:
    """In-memory buffer of warning records. flush() appends JSON Lines."""

    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self._records: list[WarningRecord] = []
        self._logs_dir = logs_dir
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"warnings-{stamp}.log"
        return self._file_path

    def append(self, record: WarningRecord) -> None:
        self._records.append(record)

    def extend(self, file: str, warnings: list[ImportWarning]) -> None:
        for w in warnings:
            self._records.append(WarningRecord.create(file, w))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
