from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from ..excel.decoder import DecodeError, decode
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import ImporterConfig
from ..models.import_state import ImportResult, ImportState, OutputMode
from .acquirer import (
    CANCELLED,
    SPREADSHEET_MIME_TYPES,
    AcquiredFile,
    AcquisitionFailed,
    FileAcquirer,
)
from .normalizer import normalize, project_assets
from .state_machine import ImportInProgressError, ImportStateMachine

"""Import orchestration.

Runs one import end to end and drives the state machine:
1. start (rejected while another import is in flight)
2. await the file selection (CANCELLED -> back to idle, silently)
3. await the binary read (optional timeout)
4. decode -> normalize -> (optionally) project asset records, synchronously
5. succeed / fail, notify the presentation sink, append failures to the
   structured error log

Nothing is retried; a retry is a new run_import() call.
"""

__all__ = [
    "UNNAMED_FILE",
    "PresentationSink",
    "Importer",
]

logger = logging.getLogger(__name__)

UNNAMED_FILE = "unnamed file"

# error_type values written to the structured error log
ERROR_ACQUISITION = "ACQUISITION_FAILED"
ERROR_TIMEOUT = "READ_TIMEOUT"
ERROR_DECODE = "DECODE_ERROR"
ERROR_NORMALIZE = "NORMALIZE_ERROR"


class PresentationSink(Protocol):
    def on_success(self, result: ImportResult) -> None: ...

    def on_failure(self, message: str) -> None: ...


class _ImportFailure(Exception):
    def __init__(self, error_type: str, reason: str) -> None:
        super().__init__(reason)
        self.error_type = error_type
        self.reason = reason


class Importer:
    """Owns the state machine of one import session.

    Parameters
    ----------
    config: importer configuration (output mode, timeout, ...)
    sink: optional presentation sink notified after each completed import
    error_log: structured error log; defaults to one under ``config.error_log_dir``
    """

    def __init__(
        self,
        config: ImporterConfig | None = None,
        sink: PresentationSink | None = None,
        error_log: ErrorLogBuffer | None = None,
    ) -> None:
        self.config = config or ImporterConfig()
        self.sink = sink
        self.machine = ImportStateMachine()
        self.error_log = error_log or ErrorLogBuffer(self.config.error_log_dir)

    @property
    def state(self) -> ImportState:
        return self.machine.state

    async def run_import(self, acquirer: FileAcquirer) -> ImportState:
        """Run one import and return the resulting state.

        A request made while an import is already running is ignored and the
        current (IMPORTING) state is returned.
        """
        try:
            self.machine.start()
        except ImportInProgressError:
            logger.warning("import request ignored: another import is in progress")
            return self.machine.state

        file_name = ""
        try:
            try:
                selection = await acquirer.request(SPREADSHEET_MIME_TYPES)
                if selection is CANCELLED:
                    logger.info("import cancelled")
                    self.machine.cancel()
                    return self.machine.state
                if selection is None:
                    raise AcquisitionFailed("no file selected")
                file_name = selection.name or UNNAMED_FILE
                logger.info(f"importing {file_name}")
                payload = await self._read(selection)
            except _ImportFailure:
                raise
            except (AcquisitionFailed, OSError) as e:
                raise _ImportFailure(ERROR_ACQUISITION, str(e)) from e
            except Exception as e:
                # acquirers are external code; whatever they raise fails this import
                raise _ImportFailure(ERROR_ACQUISITION, f"{type(e).__name__}: {e}") from e
            result = self._build_result(file_name, payload)
        except asyncio.CancelledError:
            # task cancelled from outside; leave no import dangling
            self.machine.cancel()
            raise
        except _ImportFailure as e:
            return self._fail(file_name, e.error_type, e.reason)

        self.machine.succeed(result)
        logger.info(
            f"imported {file_name}: {result.row_count} {result.mode.value} "
            f"x {result.column_count} columns"
        )
        if self.sink is not None:
            self.sink.on_success(result)
        return self.machine.state

    def clear(self) -> bool:
        """Discard the current result (only from SUCCESS)."""
        cleared = self.machine.clear()
        if cleared:
            logger.info("import cleared")
        return cleared

    async def _read(self, selection: AcquiredFile) -> bytes:
        timeout = self.config.read_timeout_seconds
        try:
            if timeout is None:
                return await selection.read()
            return await asyncio.wait_for(selection.read(), timeout)
        except TimeoutError as e:
            raise _ImportFailure(ERROR_TIMEOUT, f"reading timed out after {timeout:g}s") from e

    def _build_result(self, file_name: str, payload: bytes) -> ImportResult:
        # No partial results: any failure below fails the whole import
        try:
            workbook = decode(payload)
        except DecodeError as e:
            raise _ImportFailure(ERROR_DECODE, e.reason) from e
        if len(workbook.sheets) > 1:
            logger.debug(f"ignoring {len(workbook.sheets) - 1} additional sheet(s)")

        mode = self.config.output_mode
        try:
            rows = normalize(workbook.first_sheet, self.config.null_sentinels)
            records = (
                project_assets(rows, self.config.asset_label_prefix)
                if mode is OutputMode.ASSETS
                else []
            )
        except Exception as e:
            raise _ImportFailure(ERROR_NORMALIZE, f"{type(e).__name__}: {e}") from e

        if mode is OutputMode.ASSETS:
            return ImportResult(file_name=file_name, mode=mode, records=tuple(records))
        return ImportResult(file_name=file_name, mode=mode, rows=tuple(rows))

    def _fail(self, file_name: str, error_type: str, reason: str) -> ImportState:
        message = f"Could not import {file_name or 'the file'}: {reason}"
        logger.error(message)
        self.machine.fail(message)
        self._record_error(file_name, error_type, reason)
        if self.sink is not None:
            self.sink.on_failure(message)
        return self.machine.state

    def _record_error(self, file_name: str, error_type: str, reason: str) -> None:
        self.error_log.append(ErrorRecord.create(file_name, error_type, reason))
        try:
            path = self.error_log.flush()
        except OSError as e:
            logger.warning(f"could not write error log: {e}")
            return
        logger.debug(f"error recorded in {path}")
