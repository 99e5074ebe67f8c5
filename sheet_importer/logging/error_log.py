from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from sheet_importer.models.error_record import ErrorRecord

"""Structured error log (JSON Lines).

One record per failed import, keys fixed to timestamp/file/error_type/message.
Records collect in memory and are appended on flush() to a single file per
session, ``<log_dir>/errors-YYYYMMDD-HHMMSS.log``, stamped (UTC) when the
buffer is created. Nothing touches the disk until there is something to write.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

DEFAULT_LOG_DIR = Path("./logs")
SESSION_STAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Pending error records plus the session log file they go to.

    Not thread-safe; the state machine already serializes imports.
    """

    def __init__(self, log_dir: Path | str = DEFAULT_LOG_DIR) -> None:
        self.log_dir = Path(log_dir)
        session = datetime.now(UTC).strftime(SESSION_STAMP_FMT)
        self.file_path = self.log_dir / f"errors-{session}.log"
        self._pending: list[ErrorRecord] = []

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Append pending records to the session file.

        Returns the file path, or None when nothing was pending. Records stay
        pending if the write fails (OSError propagates).
        """
        if not self._pending:
            return None
        self.log_dir.mkdir(parents=True, exist_ok=True)
        lines = "".join(f"{r.to_json_line()}\n" for r in self._pending)
        with self.file_path.open("a", encoding="utf-8") as out:
            out.write(lines)
        self._pending = []
        return self.file_path
