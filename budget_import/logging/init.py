from __future__ import annotations

import logging
import sys
from types import MappingProxyType

from ..models.warning import ImportWarning

"""Labeled stdout logging for import runs.

Lines look like

    INFO file=kitchen.xlsx header_row=3 items=8 ...
    DEBUG file=kitchen.xlsx row=9 STOP_MARKER_FOUND Stopped at "expense tracking"
    SUMMARY files=2/2 success=2 failed=0 ...

The file and row prefixes come from the ``budget_file`` / ``sheet_row``
record attributes (pass them through ``extra=``), so the pipeline modules log
plain messages and the formatter places them. Module loggers under
``budget_import.`` propagate into the one handler installed here.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "file_context",
    "get_logger",
    "log_sheet_warning",
    "log_summary",
    "reset_logging",
    "set_debug",
    "setup_logging",
]

LOGGER_NAME = "budget_import"

# between INFO=20 and WARNING=30
SUMMARY_LEVEL = 25

LEVEL_LABELS = MappingProxyType({
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
    SUMMARY_LEVEL: "SUMMARY",
})

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formats records as "<LABEL> [file=<name>] [row=<n>] <message>"."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [LEVEL_LABELS.get(record.levelno, record.levelname)]
        budget_file = getattr(record, "budget_file", None)
        if budget_file:
            parts.append(f"file={budget_file}")
        sheet_row = getattr(record, "sheet_row", None)
        if sheet_row is not None:
            parts.append(f"row={sheet_row}")
        parts.append(record.getMessage())
        return " ".join(parts)


def file_context(file_name: str, row: int | None = None) -> dict[str, object]:
    """``extra=`` mapping that tags a record with its budget file (and row)."""
    extra: dict[str, object] = {"budget_file": file_name}
    if row is not None:
        extra["sheet_row"] = row
    return extra


def setup_logging(debug: bool = False) -> logging.Logger:
    """Install the stdout handler on the application logger (idempotent).

    A later call with debug=True still switches an existing logger to DEBUG.
    """
    global _logger

    if _logger is None:
        logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
        logger = logging.getLogger(LOGGER_NAME)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)
        logger.propagate = False
        _logger = logger
        set_debug(False)

    if debug:
        set_debug(True)
    return _logger


def set_debug(enabled: bool) -> None:
    logger = get_logger()
    level = logging.DEBUG if enabled else logging.INFO
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def log_sheet_warning(
    logger: logging.Logger, file_name: str, warning: ImportWarning, level: int = logging.DEBUG
) -> None:
    """Echo one import warning to the console, tagged with file and 1-based row."""
    logger.log(
        level,
        "%s %s",
        warning.code.value,
        warning.message,
        extra=file_context(file_name, warning.display_row),
    )


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() starts fresh (tests)."""
    global _logger
    _logger = None
