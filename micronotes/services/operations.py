"""
Operation Primitives.

Building blocks for the note store:

    OperationResult     - outcome of one operation, either a value or an error message
    OperationGuard      - single in-flight token; refuses new operations while held
    DeleteConfirmation  - idle → armed(candidate) → executing → idle

Usage:
    guard = OperationGuard()
    with guard.held("create"):
        note = await repo.insert(payload)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from micronotes.core.exceptions import OperationInProgressError, ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a store operation: the merged value, or a message."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, message: str) -> "OperationResult[T]":
        return cls(error=message)


@dataclass(frozen=True)
class GuardToken:
    """Proof of holding the guard for one operation."""

    operation: str
    serial: int


class OperationGuard:
    """
    Allows one operation in flight at a time.

    There is no queue: acquiring while held raises immediately. There is no
    timeout either; a call that never settles keeps the guard held.
    """

    def __init__(self) -> None:
        self._token: GuardToken | None = None
        self._serial = 0

    @property
    def busy(self) -> bool:
        return self._token is not None

    @property
    def operation(self) -> str | None:
        """Name of the operation holding the guard, if any."""
        return self._token.operation if self._token else None

    def acquire(self, operation: str) -> GuardToken:
        """
        Take the guard for an operation.

        Raises:
            OperationInProgressError: If another operation holds it
        """
        if self._token is not None:
            raise OperationInProgressError()
        self._serial += 1
        self._token = GuardToken(operation=operation, serial=self._serial)
        return self._token

    def release(self, token: GuardToken) -> None:
        """Release the guard. Stale tokens are ignored."""
        if self._token == token:
            self._token = None

    @contextmanager
    def held(self, operation: str) -> Iterator[GuardToken]:
        """Hold the guard for the duration of the block."""
        token = self.acquire(operation)
        try:
            yield token
        finally:
            self.release(token)


class DeleteState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    EXECUTING = "executing"


class DeleteConfirmation:
    """Two-step delete: a candidate must be armed before it can execute."""

    def __init__(self) -> None:
        self.state = DeleteState.IDLE
        self.candidate: str | None = None

    def arm(self, note_id: str) -> None:
        """
        Mark a note as the delete candidate. Re-arming replaces the candidate.

        Raises:
            OperationInProgressError: If a delete is executing
        """
        if self.state is DeleteState.EXECUTING:
            raise OperationInProgressError()
        self.state = DeleteState.ARMED
        self.candidate = note_id

    def cancel(self) -> None:
        """Drop the armed candidate. Has no effect while executing."""
        if self.state is DeleteState.ARMED:
            self.state = DeleteState.IDLE
            self.candidate = None

    def begin(self) -> str:
        """
        Move the armed candidate to executing.

        Returns:
            The candidate note id

        Raises:
            ValidationError: If nothing is armed
        """
        if self.state is not DeleteState.ARMED or self.candidate is None:
            raise ValidationError("No note is awaiting deletion.")
        self.state = DeleteState.EXECUTING
        return self.candidate

    def finish(self) -> None:
        """Return to idle once the delete has settled."""
        self.state = DeleteState.IDLE
        self.candidate = None
