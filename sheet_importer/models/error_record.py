from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""One line of the structured error log.

The key set matches ``sheet_importer/config/error_log_schema.json``.
"""

__all__ = [
    "ErrorRecord",
]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    """A failed import.

    Attributes:
        timestamp: UTC time of the failure, ISO 8601 with a 'Z' suffix
        file: display name of the selected file ("" when none was resolved)
        error_type: UPPER_SNAKE_CASE class (ACQUISITION_FAILED, DECODE_ERROR, ...)
        message: reason shown to the user, without the "Could not import" prefix
    """
    timestamp: str
    file: str
    error_type: str
    message: str

    @classmethod
    def create(cls, file: str, error_type: str, message: str) -> ErrorRecord:
        return cls(timestamp=_utc_now(), file=file, error_type=error_type, message=message)

    def to_json_line(self) -> str:
        # non-ASCII file names stay readable in the log
        return json.dumps(asdict(self), ensure_ascii=False)
