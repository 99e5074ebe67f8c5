from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .cells import RawRow

"""Workbook / Sheet containers returned by the decoder."""

__all__ = [
    "SourceFormat",
    "Sheet",
    "Workbook",
]


class SourceFormat(Enum):
    """Payload format as detected from content."""
    XLSX = "xlsx"
    XLS = "xls"
    CSV = "csv"


@dataclass(frozen=True)
class Sheet:
    """A named grid of raw rows. Rows may be ragged."""
    name: str
    rows: tuple[RawRow, ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class Workbook:
    """Decoded container. Only the first sheet is consumed downstream."""
    source_format: SourceFormat
    sheets: tuple[Sheet, ...] = field(default_factory=tuple)

    @property
    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]

    @property
    def first_sheet(self) -> Sheet:
        # A workbook without sheets behaves like one empty sheet
        if not self.sheets:
            return Sheet(name="Sheet1")
        return self.sheets[0]
