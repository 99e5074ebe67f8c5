from __future__ import annotations

import logging
from collections.abc import Callable

from ..models.import_state import ImportResult, ImportState, ImportStatus

"""Import state machine.

The only mutable state of an import session lives here and is changed only by
the transition methods below.

    IDLE / SUCCESS / FAILED --start--> IMPORTING
    IMPORTING --cancel--> IDLE        (silent, stored result untouched)
    IMPORTING --succeed--> SUCCESS    (stored result replaced)
    IMPORTING --fail--> FAILED
    SUCCESS --clear--> IDLE           (stored result discarded; no-op elsewhere)

At most one import is in flight: start() while IMPORTING is rejected.
"""

__all__ = [
    "ImportInProgressError",
    "InvalidTransitionError",
    "ImportStateMachine",
    "StateListener",
]

logger = logging.getLogger(__name__)

StateListener = Callable[[ImportState], None]


class InvalidTransitionError(Exception):
    """Raised when a transition is not allowed from the current status."""


class ImportInProgressError(InvalidTransitionError):
    """Raised when an import is requested while another one is running."""


class ImportStateMachine:
    """Single-instance state holder for one import session."""

    def __init__(self) -> None:
        self._state = ImportState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ImportState:
        return self._state

    @property
    def status(self) -> ImportStatus:
        return self._state.status

    @property
    def can_start(self) -> bool:
        """False while an import is running (UI should disable its import entry point)."""
        return self._state.status is not ImportStatus.IMPORTING

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def start(self) -> None:
        if not self.can_start:
            raise ImportInProgressError("an import is already in progress")
        self._set(ImportState(status=ImportStatus.IMPORTING, result=self._state.result))

    def cancel(self) -> None:
        self._require(ImportStatus.IMPORTING, "cancel")
        self._set(ImportState(status=ImportStatus.IDLE, result=self._state.result))

    def succeed(self, result: ImportResult) -> None:
        self._require(ImportStatus.IMPORTING, "succeed")
        self._set(ImportState(status=ImportStatus.SUCCESS, result=result))

    def fail(self, message: str) -> None:
        self._require(ImportStatus.IMPORTING, "fail")
        self._set(
            ImportState(status=ImportStatus.FAILED, result=self._state.result, message=message)
        )

    def clear(self) -> bool:
        """Discard the stored result. Only valid from SUCCESS; returns False otherwise."""
        if self._state.status is not ImportStatus.SUCCESS:
            logger.debug(f"clear ignored in status={self._state.status.value}")
            return False
        self._set(ImportState(status=ImportStatus.IDLE))
        return True

    def _require(self, status: ImportStatus, action: str) -> None:
        if self._state.status is not status:
            raise InvalidTransitionError(
                f"cannot {action} from status={self._state.status.value}"
            )

    def _set(self, new_state: ImportState) -> None:
        logger.debug(f"import state {self._state.status.value} -> {new_state.status.value}")
        self._state = new_state
        for listener in self._listeners:
            listener(new_state)
