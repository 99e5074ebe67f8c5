from __future__ import annotations

import math
import numbers
from collections.abc import Iterable, Sequence
from decimal import Decimal

from ..models.asset_record import AssetRecord
from ..models.cells import CellKind, RawCell
from ..models.config_models import DEFAULT_ASSET_LABEL_PREFIX
from ..models.normalized_row import NormalizedRow
from ..models.workbook import Sheet

"""Row normalizer: raw sheet rows -> text rows -> asset records.

normalize():
1. Coerce every cell to text (empty -> "", booleans -> "true"/"false",
   numbers without float artifacts, text untouched)
2. Optional null sentinels (e.g. "N/A") coerce to ""
3. Drop rows whose values are all blank after trimming; survivors keep their
   pre-filter row index

project_assets():
- first retained row is the header and is skipped
- rows whose first column trims empty are skipped
- key = "<col0>-<pre-filter index>", label = col1 or "<prefix> <col0>"
"""

__all__ = [
    "coerce_cell",
    "normalize",
    "normalize_rows",
    "project_assets",
]

# Floats are rendered with this many significant digits; enough for any
# value typed into a cell while hiding binary artifacts (0.1 + 0.2).
FLOAT_SIGNIFICANT_DIGITS = 15
# Beyond this, integral floats are no longer exact integers
_MAX_EXACT_FLOAT_INT = 2**53


def coerce_cell(cell: RawCell) -> str:
    """Canonical text for a decoded cell."""
    if cell.kind is CellKind.EMPTY:
        return ""
    if cell.kind is CellKind.BOOLEAN:
        return "true" if cell.value else "false"
    if cell.kind is CellKind.NUMERIC:
        return _format_number(cell.value)
    if cell.kind is CellKind.TEXT:
        return cell.value
    raise ValueError(f"unknown cell kind: {cell.kind!r}")


def _format_number(value: numbers.Number) -> str:
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            return str(value).lower()
        text = format(value.normalize(), "f")
        return "0" if text in ("-0", "0") else text
    number = float(value)  # type: ignore[arg-type]
    if math.isnan(number):
        return ""
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number.is_integer() and abs(number) < _MAX_EXACT_FLOAT_INT:
        return str(int(number))
    return format(number, f".{FLOAT_SIGNIFICANT_DIGITS}g")


def _coerce_row(row: Sequence[RawCell], null_sentinels: frozenset[str]) -> tuple[str, ...]:
    values = tuple(coerce_cell(c) for c in row)
    if not null_sentinels:
        return values
    return tuple("" if v.strip().upper() in null_sentinels else v for v in values)


def normalize_rows(
    rows: Iterable[Sequence[RawCell]],
    null_sentinels: Iterable[str] | None = None,
) -> list[NormalizedRow]:
    """Coerce and filter rows, keeping each survivor's pre-filter index."""
    sentinels = frozenset(s.strip().upper() for s in null_sentinels or ())
    normalized: list[NormalizedRow] = []
    for index, raw in enumerate(rows):
        values = _coerce_row(raw, sentinels)
        # fully blank rows are dropped; the index still counts them
        if not any(v.strip() for v in values):
            continue
        normalized.append(NormalizedRow(source_index=index, values=values))
    return normalized


def normalize(sheet: Sheet, null_sentinels: Iterable[str] | None = None) -> list[NormalizedRow]:
    """Normalize one sheet. See module docstring for the rules."""
    return normalize_rows(sheet.rows, null_sentinels)


def project_assets(
    rows: Sequence[NormalizedRow],
    label_prefix: str = DEFAULT_ASSET_LABEL_PREFIX,
) -> list[AssetRecord]:
    """Project ``{key, label}`` records from the first two columns.

    Parameters
    ----------
    rows: normalized rows in sheet order (first one is the header)
    label_prefix: fallback label prefix when the second column is blank
    """
    records: list[AssetRecord] = []
    for row in rows[1:]:
        code = row.cell(0).strip()
        if not code:
            continue
        name = row.cell(1).strip()
        records.append(
            AssetRecord(
                key=f"{code}-{row.source_index}",
                label=name or f"{label_prefix} {code}",
            )
        )
    return records
