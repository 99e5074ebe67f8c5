from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .asset_record import AssetRecord
from .normalized_row import NormalizedRow

"""Import lifecycle models.

ImportStatus mirrors the lifecycle of a single interactive import:
    idle → importing → (success | failed)

SUCCESS and FAILED are terminal until the user acts again: a new import
(→ importing) or, from SUCCESS only, a clear (→ idle).
"""

__all__ = [
    "ImportStatus",
    "OutputMode",
    "ImportResult",
    "ImportState",
]


class ImportStatus(Enum):
    """Status of the import state machine.

    - IDLE: nothing in flight (initial state, after cancel, after clear)
    - IMPORTING: a file is being acquired / decoded / normalized
    - SUCCESS: the last import produced a result
    - FAILED: the last import failed, ``message`` says why
    """
    IDLE = "idle"
    IMPORTING = "importing"
    SUCCESS = "success"
    FAILED = "failed"


class OutputMode(Enum):
    """What a successful import hands to the presentation sink."""
    ROWS = "rows"
    ASSETS = "assets"


@dataclass(frozen=True)
class ImportResult:
    """Data produced by one successful import. Fully replaces the previous one."""
    file_name: str
    mode: OutputMode
    rows: tuple[NormalizedRow, ...] = ()
    records: tuple[AssetRecord, ...] = ()

    @property
    def row_count(self) -> int:
        if self.mode is OutputMode.ASSETS:
            return len(self.records)
        return len(self.rows)

    @property
    def column_count(self) -> int:
        """Width of the widest retained row (2 for asset records).

        Not the width of the first row: a short header would under-report
        ragged data rows.
        """
        if self.mode is OutputMode.ASSETS:
            return 2 if self.records else 0
        return max((len(r) for r in self.rows), default=0)


@dataclass(frozen=True)
class ImportState:
    """Snapshot of the state machine.

    ``result`` is the data currently held. It is replaced on SUCCESS and only
    discarded by clear; cancelling or failing a later import leaves it alone.
    """
    status: ImportStatus = ImportStatus.IDLE
    result: ImportResult | None = None
    message: str | None = None  # set in FAILED only

    @property
    def file_name(self) -> str | None:
        return self.result.file_name if self.result is not None else None
