from __future__ import annotations

import codecs
import csv
import io
import logging

import pandas as pd
from charset_normalizer import from_bytes

from ..models.cells import RawCell, RawRow
from ..models.workbook import Sheet, SourceFormat, Workbook

"""Tabular decoder: opaque bytes -> Workbook.

The format is detected from the payload itself (magic bytes), never from the
file name:
- ``PK\\x03\\x04`` (ZIP / OOXML) -> xlsx via pandas + openpyxl
- ``D0 CF 11 E0 A1 B1 1A E1`` (OLE2) -> legacy xls via pandas + xlrd
- anything else -> delimited text (UTF-8, else charset-normalizer; delimiter
  sniffed, parsed with the csv module so ragged rows survive)

No header row is assumed. Decoding has no side effects.
"""

__all__ = [
    "DecodeError",
    "decode",
    "detect_format",
]

logger = logging.getLogger(__name__)

XLSX_MAGIC = b"PK\x03\x04"
XLS_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
_UNICODE_BOMS = (
    codecs.BOM_UTF32_LE,
    codecs.BOM_UTF32_BE,
    codecs.BOM_UTF16_LE,
    codecs.BOM_UTF16_BE,
)

CSV_DELIMITERS = ",;\t|"
CSV_SHEET_NAME = "Sheet1"
SNIFF_SAMPLE_CHARS = 4096

_ENGINES = {
    SourceFormat.XLSX: "openpyxl",
    SourceFormat.XLS: "xlrd",
}


class DecodeError(Exception):
    """Raised when the payload is not a parseable tabular format."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def detect_format(payload: bytes) -> SourceFormat:
    """Detect the payload format from its leading bytes."""
    if payload.startswith(XLSX_MAGIC):
        return SourceFormat.XLSX
    if payload.startswith(XLS_MAGIC):
        return SourceFormat.XLS
    return SourceFormat.CSV


def decode(payload: bytes) -> Workbook:
    """Decode ``payload`` into a Workbook.

    A payload without any data rows is a valid result (one empty sheet); only
    unparseable content raises DecodeError.
    """
    fmt = detect_format(payload)
    if fmt is SourceFormat.CSV:
        sheets: tuple[Sheet, ...] = (_decode_delimited(payload),)
    else:
        sheets = _decode_spreadsheet(payload, fmt)
    logger.debug(
        f"decoded format={fmt.value} sheets={[s.name for s in sheets]} "
        f"first_sheet_rows={sheets[0].row_count if sheets else 0}"
    )
    return Workbook(source_format=fmt, sheets=sheets)


def _decode_spreadsheet(payload: bytes, fmt: SourceFormat) -> tuple[Sheet, ...]:
    try:
        xls = pd.ExcelFile(io.BytesIO(payload), engine=_ENGINES[fmt])
    except Exception as e:  # openpyxl / xlrd / zipfile raise unrelated types
        raise DecodeError(f"corrupt or unsupported {fmt.value} workbook: {e}") from e

    sheets: list[Sheet] = []
    with xls:
        for position, name in enumerate(xls.sheet_names):
            try:
                # keep_default_na=False: literal "NA"/"null" text stays text
                df = xls.parse(name, header=None, dtype=object, keep_default_na=False)
            except Exception as e:
                if position == 0:
                    raise DecodeError(f"sheet '{name}' could not be read: {e}") from e
                # only the first sheet is consumed
                logger.warning(f"ignoring unreadable sheet '{name}': {e}")
                continue
            sheets.append(Sheet(name=str(name), rows=_frame_rows(df)))
    return tuple(sheets)


def _frame_rows(df: pd.DataFrame) -> tuple[RawRow, ...]:
    return tuple(
        tuple(RawCell.from_value(v) for v in row)
        for row in df.itertuples(index=False, name=None)
    )


def _decode_delimited(payload: bytes) -> Sheet:
    text = _decode_text(payload)
    if not text.strip():
        return Sheet(name=CSV_SHEET_NAME)
    delimiter = _sniff_delimiter(text)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    try:
        rows = tuple(tuple(RawCell.from_value(c) for c in row) for row in reader)
    except csv.Error as e:
        raise DecodeError(f"malformed delimited text: {e}") from e
    return Sheet(name=CSV_SHEET_NAME, rows=rows)


def _decode_text(payload: bytes) -> str:
    if not payload.strip():
        return ""
    if payload.startswith(codecs.BOM_UTF8):
        try:
            return payload.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid UTF-8 text: {e}") from e
    # NUL bytes without a UTF-16/32 BOM: binary content, not text
    if b"\x00" in payload and not payload.startswith(_UNICODE_BOMS):
        raise DecodeError("payload is binary and not a known spreadsheet format")
    if not payload.startswith(_UNICODE_BOMS):
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError:
            pass  # not UTF-8, let charset-normalizer guess
    match = from_bytes(payload).best()
    if match is None:
        raise DecodeError("payload is not text in any supported encoding")
    logger.debug(f"detected text encoding: {match.encoding}")
    return str(match)


def _sniff_delimiter(text: str) -> str:
    sample = text[:SNIFF_SAMPLE_CHARS]
    try:
        return csv.Sniffer().sniff(sample, delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        return ","
