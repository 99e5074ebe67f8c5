from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "AssetRecord",
]


@dataclass(frozen=True)
class AssetRecord:
    """Record projected from the first two columns of a data row.

    ``key`` embeds the pre-filter row index so repeated codes never collide.
    """
    key: str
    label: str
