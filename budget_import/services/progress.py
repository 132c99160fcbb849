from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

from ..models.processing_result import FileStat

"""Run progress for batch imports (tqdm, TTY only).

One bar over the budget sheets of a run. The bar label names the sheet being
imported and the postfix keeps running totals of extracted items, split rows
and failed files. Outside a TTY (CI, redirected output) nothing is drawn and
only the totals are kept.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    def __init__(self, total_files: int, *, description: str = "Importing budget sheets") -> None:
        self.total_files = total_files
        self.description = description
        self.files_done = 0
        self.items = 0
        self.split_rows = 0
        self.failed = 0
        self.pbar: Any = None
        if is_tty_enabled():
            self.pbar = tqdm(total=total_files, desc=description, unit="sheet", ncols=80, ascii=True)

    @property
    def enabled(self) -> bool:
        return self.pbar is not None

    def start_file(self, file_path: Path) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, stat: FileStat) -> None:
        """Fold one file's outcome into the running totals and advance the bar."""
        self.files_done += 1
        if stat.status == "success":
            self.items += stat.line_items
            self.split_rows += stat.compound_rows_split
        else:
            self.failed += 1
        if self.pbar is not None:
            self.pbar.set_postfix(items=self.items, split=self.split_rows, failed=self.failed)
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
