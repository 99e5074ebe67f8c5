from __future__ import annotations

import json

import jsonschema
import pytest

from sheet_importer.config.loader import SCHEMA_PATH
from sheet_importer.logging.error_log import ErrorRecord

"""Error log JSON schema contract test."""

ERROR_LOG_SCHEMA_PATH = SCHEMA_PATH.with_name("error_log_schema.json")


def _schema() -> dict:
    return json.loads(ERROR_LOG_SCHEMA_PATH.read_text(encoding="utf-8"))


def test_error_log_schema_valid_example():
    record = {
        "timestamp": "2026-03-02T10:12:33Z",
        "file": "pumps.xlsx",
        "error_type": "DECODE_ERROR",
        "message": "corrupt or unsupported xlsx workbook: File is not a zip file",
    }
    jsonschema.validate(record, _schema())


def test_created_record_conforms():
    record = ErrorRecord.create("", "ACQUISITION_FAILED", "no file selected")
    jsonschema.validate(json.loads(record.to_json_line()), _schema())


def test_error_log_schema_rejects_extra_key():
    record = {
        "timestamp": "2026-03-02T10:12:33Z",
        "file": "pumps.xlsx",
        "error_type": "DECODE_ERROR",
        "message": "broken",
        "sheet": "Sheet1",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, _schema())


@pytest.mark.parametrize("error_type", ["decode_error", "Decode", "1_BAD"])
def test_error_log_schema_rejects_non_upper_snake_type(error_type: str):
    record = {
        "timestamp": "2026-03-02T10:12:33Z",
        "file": "pumps.xlsx",
        "error_type": error_type,
        "message": "broken",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, _schema())


def test_error_log_schema_requires_utc_timestamp():
    record = {
        "timestamp": "2026-03-02T10:12:33+09:00",
        "file": "pumps.xlsx",
        "error_type": "DECODE_ERROR",
        "message": "broken",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, _schema())
