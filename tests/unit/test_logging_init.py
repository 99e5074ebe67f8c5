from __future__ import annotations

import logging
import sys
from io import StringIO

from sheet_importer.logging.init import (
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    set_debug,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == "sheet_importer"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(second.handlers) == 1


def test_get_logger_returns_configured_logger():
    logger = setup_logging()
    assert get_logger() is logger


def test_logging_labeled_prefixes():
    captured_output = StringIO()
    logger = logging.getLogger("test_sheet_importer_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    handler = logging.StreamHandler(captured_output)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(SUMMARY_LEVEL, "Test summary message")

    lines = captured_output.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_module_loggers_share_package_handler(capsys):
    setup_logging()
    logging.getLogger("sheet_importer.services.orchestrator").info("from child")
    log_summary("file=x.csv mode=rows rows=1 cols=1")
    out = capsys.readouterr().out
    assert "INFO from child" in out
    assert "SUMMARY file=x.csv mode=rows rows=1 cols=1" in out


def test_set_debug(capsys):
    logger = setup_logging()
    logger.debug("hidden")
    set_debug(logger)
    logger.debug("shown")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "DEBUG shown" in out


def test_setup_logging_writes_to_given_stream():
    stream = StringIO()
    setup_logging(stream=stream)
    log_summary("file=a.csv mode=rows rows=0 cols=0")
    assert stream.getvalue() == "SUMMARY file=a.csv mode=rows rows=0 cols=0\n"


def test_formatter_appends_traceback():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord(
            "sheet_importer", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )
    text = LabeledFormatter().format(record)
    assert text.startswith("ERROR failed\nTraceback")
    assert "ValueError: boom" in text
