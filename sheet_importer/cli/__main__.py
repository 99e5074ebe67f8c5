from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from sheet_importer.config.loader import ConfigError, apply_env_overrides, load_config_or_default
from sheet_importer.logging.init import get_logger, log_summary, set_debug, setup_logging
from sheet_importer.models.import_state import ImportResult, ImportStatus, OutputMode
from sheet_importer.services.acquirer import FileAcquirer, LocalFileAcquirer, PromptFileAcquirer
from sheet_importer.services.orchestrator import Importer
from sheet_importer.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- load .env (override=True) then the YAML config, then environment overrides
- acquire the file from the positional argument, or prompt for a path
- run one import and print a preview of the rows / asset records
- print the SUMMARY line

Exit codes: 0 success (or cancelled), 1 fatal setup error, 2 import failed.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_IMPORT_FAILED = 2


class ConsoleSink:
    """Presentation sink printing a numbered preview to stdout.

    Numbering is over the retained rows (blank rows already dropped).
    """

    def __init__(self, preview_rows: int) -> None:
        self.preview_rows = preview_rows
        self.failures: list[str] = []

    def on_success(self, result: ImportResult) -> None:
        print(f"FILE: {result.file_name}")
        if result.mode is OutputMode.ASSETS:
            lines = [f"{r.key}  {r.label}" for r in result.records]
        else:
            lines = [" | ".join(row.values) for row in result.rows]
        if not lines:
            print("  (no data rows)")
        for number, line in enumerate(lines[: self.preview_rows], start=1):
            print(f"  {number}: {line}")
        hidden = len(lines) - self.preview_rows
        if hidden > 0:
            print(f"  ... {hidden} more")
        summary_line = render_summary_line(result)
        # log_summary adds the "SUMMARY " label itself
        log_summary(summary_line.removeprefix("SUMMARY "))

    def on_failure(self, message: str) -> None:
        # The importer already logged the message at ERROR
        self.failures.append(message)


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; its values win over the existing environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="sheet-import",
        description="Import the first sheet of a spreadsheet / CSV file",
    )
    p.add_argument("path", nargs="?", type=Path, help="File to import (prompted for when omitted)")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default: config/import.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = apply_env_overrides(load_config_or_default(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")
    logger.debug(f"output_mode={cfg.output_mode.value} read_timeout={cfg.read_timeout_seconds}")

    acquirer: FileAcquirer
    if args.path is not None:
        acquirer = LocalFileAcquirer(args.path)
    else:
        acquirer = PromptFileAcquirer()

    importer = Importer(cfg, sink=ConsoleSink(cfg.preview_rows))
    state = asyncio.run(importer.run_import(acquirer))

    if state.status is ImportStatus.FAILED:
        return EXIT_IMPORT_FAILED
    if state.status is ImportStatus.IDLE:
        get_logger().info("nothing imported")
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
