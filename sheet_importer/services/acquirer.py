from __future__ import annotations

import asyncio
import logging
import mimetypes
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Final, Protocol

"""File acquisition boundary.

The importer asks a FileAcquirer for a file restricted to spreadsheet / CSV
MIME types. The acquirer either returns an AcquiredFile (display name plus an
awaitable binary read) or the CANCELLED token. Cancelling is a normal outcome,
not an error; anything that prevents a file from being resolved or read raises
AcquisitionFailed.
"""

__all__ = [
    "XLSX_MIME",
    "XLS_MIME",
    "CSV_MIME",
    "SPREADSHEET_MIME_TYPES",
    "guess_mime_type",
    "CANCELLED",
    "Cancelled",
    "AcquisitionFailed",
    "AcquiredFile",
    "FileAcquirer",
    "LocalFile",
    "LocalFileAcquirer",
    "PromptFileAcquirer",
]

logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIME = "application/vnd.ms-excel"
CSV_MIME = "text/csv"

SPREADSHEET_MIME_TYPES: Final = frozenset({XLSX_MIME, XLS_MIME, CSV_MIME})
_SUFFIXES = {XLSX_MIME: ".xlsx", XLS_MIME: ".xls", CSV_MIME: ".csv"}


class Cancelled(Enum):
    """Token type for a selection the user dismissed."""
    TOKEN = "cancelled"


CANCELLED: Final = Cancelled.TOKEN


class AcquisitionFailed(Exception):
    """No file could be resolved, or its contents could not be read."""


class AcquiredFile(Protocol):
    name: str

    async def read(self) -> bytes: ...


class FileAcquirer(Protocol):
    async def request(self, allowed_types: frozenset[str]) -> AcquiredFile | Cancelled: ...


def guess_mime_type(name: str) -> str | None:
    # platform mime tables disagree on spreadsheet types; known suffixes win
    suffix = Path(name).suffix.lower()
    for mime, known in _SUFFIXES.items():
        if suffix == known:
            return mime
    return mimetypes.guess_type(name)[0]


class LocalFile:
    """A file on the local filesystem."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = path.name

    async def read(self) -> bytes:
        try:
            # off the event loop so a read timeout can fire
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as e:
            raise AcquisitionFailed(f"could not read {self.name}: {e}") from e

    def __repr__(self) -> str:  # pragma: no cover (trivial)
        return f"LocalFile({str(self.path)!r})"


def _resolve_local(path: Path, allowed_types: frozenset[str]) -> LocalFile:
    if not path.is_file():
        raise AcquisitionFailed(f"file not found: {path}")
    mime = guess_mime_type(path.name)
    if mime not in allowed_types:
        raise AcquisitionFailed(f"unsupported file type: {path.name} ({mime or 'unknown'})")
    return LocalFile(path)


class LocalFileAcquirer:
    """Acquirer for a path known up front (e.g. a CLI argument)."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    async def request(self, allowed_types: frozenset[str]) -> AcquiredFile | Cancelled:
        return _resolve_local(self.path, allowed_types)


class PromptFileAcquirer:
    """Ask for a path on the terminal. A blank answer cancels the selection."""

    def __init__(self, ask: Callable[[str], str] | None = None) -> None:
        self._ask = ask or input

    async def request(self, allowed_types: frozenset[str]) -> AcquiredFile | Cancelled:
        suffixes = sorted(_SUFFIXES[t] for t in allowed_types if t in _SUFFIXES)
        hint = f" [{', '.join(suffixes)}]" if suffixes else ""
        try:
            answer = await asyncio.to_thread(
                self._ask, f"Spreadsheet or CSV file{hint} (blank to cancel): "
            )
        except EOFError:
            return CANCELLED
        answer = answer.strip().strip('"')
        if not answer:
            logger.debug("selection cancelled")
            return CANCELLED
        try:
            path = Path(answer).expanduser()
        except RuntimeError as e:  # ~user with no resolvable home directory
            raise AcquisitionFailed(f"cannot resolve {answer}: {e}") from e
        return _resolve_local(path, allowed_types)
