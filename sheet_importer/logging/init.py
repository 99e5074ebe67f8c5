from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for the importer.

Each line is ``<LABEL> <message>`` where LABEL is one of
DEBUG, INFO, WARN, ERROR or SUMMARY. SUMMARY (level 25) carries the single
result line of a successful import, rendered by services/summary.py.

Modules log through ``logging.getLogger(__name__)``; those loggers sit below
``sheet_importer`` and reach the console through its one handler.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "set_debug",
    "get_logger",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "sheet_importer"

# sits between INFO (20) and WARNING (30)
SUMMARY_LEVEL = 25

_package_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Render records as ``LABEL message``; tracebacks follow on later lines."""

    LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        SUMMARY_LEVEL: "SUMMARY",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LABELS.get(record.levelno, record.levelname)
        line = f"{label} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach a labeled console handler to the ``sheet_importer`` logger.

    Runs once per process; later calls hand back the logger configured by the
    first one. ``stream`` defaults to the current ``sys.stdout``.
    """
    global _package_logger
    if _package_logger is not None:
        return _package_logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    for stale in list(logger.handlers):
        logger.removeHandler(stale)

    console = logging.StreamHandler(stream or sys.stdout)
    console.setFormatter(LabeledFormatter())
    console.setLevel(level)
    logger.addHandler(console)
    logger.setLevel(level)
    # the root logger would print every line a second time
    logger.propagate = False

    _package_logger = logger
    return logger


def set_debug(logger: logging.Logger) -> None:
    """Lower ``logger`` and all of its handlers to DEBUG."""
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)


def get_logger() -> logging.Logger:
    return _package_logger or setup_logging()


def log_summary(message: str) -> None:
    """Emit ``message`` at SUMMARY level (the label is added by the formatter)."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup_logging() starts over (tests)."""
    global _package_logger
    _package_logger = None
