from __future__ import annotations

from dataclasses import dataclass

"""NormalizedRow model.

A NormalizedRow is one retained row of the first sheet after text coercion and
blank-row filtering. ``source_index`` is the zero-based index of the row in the
sheet *before* filtering; downstream numbering ("row N") is over the filtered
sequence and never uses it.
"""

__all__ = [
    "NormalizedRow",
]


@dataclass(frozen=True)
class NormalizedRow:
    """Text values of a retained row plus its pre-filter position."""
    source_index: int  # 0-based, counted before blank rows were dropped
    values: tuple[str, ...]

    def cell(self, column: int) -> str:
        """Return the value at ``column`` or "" when the row is shorter."""
        if column < len(self.values):
            return self.values[column]
        return ""

    def __len__(self) -> int:
        return len(self.values)
