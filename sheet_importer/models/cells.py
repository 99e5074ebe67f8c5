from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

"""Tagged cell values produced by the tabular decoder.

Decoders hand back whatever their backend produced (str, int, float, bool,
datetime, numpy scalars, NaN for blanks ...). Every value is classified into a
RawCell once, at the decode boundary, so that text coercion downstream only has
to deal with four kinds.
"""

__all__ = [
    "CellKind",
    "RawCell",
    "RawRow",
    "EMPTY_CELL",
]


class CellKind(Enum):
    """Kind of a decoded cell value."""
    TEXT = "text"
    NUMERIC = "numeric"
    BOOLEAN = "boolean"
    EMPTY = "empty"


@dataclass(frozen=True)
class RawCell:
    """A single decoded cell: its kind plus the backend value.

    For EMPTY cells ``value`` is always None. TEXT cells always carry a str.
    """
    kind: CellKind
    value: Any = None

    @staticmethod
    def from_value(value: Any) -> RawCell:
        """Classify a value coming out of pandas / openpyxl / xlrd / csv."""
        if _is_blank(value):
            return EMPTY_CELL
        # bool is an int subclass, check it before the numeric branch
        if isinstance(value, (bool, np.bool_)):
            return RawCell(CellKind.BOOLEAN, bool(value))
        if isinstance(value, numbers.Number):
            return RawCell(CellKind.NUMERIC, value)
        if isinstance(value, (datetime, date, time)):
            return RawCell(CellKind.TEXT, _temporal_text(value))
        if isinstance(value, str):
            return RawCell(CellKind.TEXT, value)
        return RawCell(CellKind.TEXT, str(value))


EMPTY_CELL = RawCell(CellKind.EMPTY)

RawRow = tuple[RawCell, ...]


def _is_blank(value: Any) -> bool:
    if value is None or value is pd.NaT or (isinstance(value, str) and not value):
        return True
    if isinstance(value, float):  # covers numpy.float64
        return math.isnan(value)
    return False


def _temporal_text(value: date | time) -> str:
    # pd.Timestamp is a datetime subclass
    if isinstance(value, datetime):
        if value.time() == time(0, 0) and value.tzinfo is None:
            return value.date().isoformat()
        return value.isoformat()
    return value.isoformat()
