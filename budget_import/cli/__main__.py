from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from budget_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from budget_import.excel.reader import GridReadError, read_grid
from budget_import.logging.init import log_summary, set_debug, setup_logging
from budget_import.services.column_mapping import map_columns
from budget_import.services.header_detection import find_header_row
from budget_import.services.orchestrator import ProcessingError, process_all, scan_budget_files
from budget_import.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (override) then the YAML config
- Import every budget sheet in source_directory
- Print one SUMMARY line

Exit codes: 0 all files imported, 2 at least one file failed, 1 fatal
(config or directory error).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; values win over the existing environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Budget sheet -> estimate line items importer")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to the YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print the detected header row and column mapping per file, then exit",
    )
    return p.parse_args(argv)


def _inspect_data(directory: Path, max_rows: int) -> int:
    try:
        files = scan_budget_files(directory)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no budget sheet files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            grid = read_grid(f)
        except GridReadError as e:
            print(f"  read_error: {e}")
            continue
        header = find_header_row(grid, max_rows)
        if header is None:
            print(f"  header: not found (rows={grid.row_count} cols={grid.col_count})")
            continue
        mapping = map_columns(grid, header.row_index)
        print(f"  header_row={header.row_index} score={header.score:g} matched={header.matched_headers}")
        print(f"  columns={mapping.columns.to_dict()} confidence={mapping.confidence:.2f}")
        if mapping.unmapped_headers:
            print(f"  unmapped={mapping.unmapped_headers}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not pick up pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    if args.inspect_data:
        return _inspect_data(directory, cfg.max_header_scan_rows)

    logger.info(f"Importing budget sheets from: {directory}")
    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
