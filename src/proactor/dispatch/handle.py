"""Task handle: the caller's view of one submitted operation.

A handle starts unfinished and becomes finished exactly once, when the worker
executing its entry records the outcome. Nothing on a handle blocks; callers
poll it or receive the same outcome through the completion callback.
"""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

from proactor.core.errors import DispatcherStateError, TaskFailedError, TaskNotFinishedError
from proactor.core.result import Err, Result

T = TypeVar("T")


class TaskHandle(Generic[T]):
    """Shared record of the eventual outcome of one operation.

    Example:
        >>> handle = dispatcher.submit(lambda: 5)
        >>> handle.is_finished()
        False
        >>> # ... once settled ...
        >>> handle.result()
        5
    """

    __slots__ = ("_sequence_id", "_lock", "_outcome", "_finished")

    def __init__(self, sequence_id: int) -> None:
        self._sequence_id = sequence_id
        self._lock = threading.Lock()
        self._outcome: Result[T] | None = None
        self._finished = False

    @property
    def sequence_id(self) -> int:
        return self._sequence_id

    def is_finished(self) -> bool:
        return self._finished

    def outcome(self) -> Result[T] | None:
        """``Ok``/``Err`` once finished, ``None`` before."""
        return self._outcome if self._finished else None

    def succeeded(self) -> bool:
        return self._finished and self._outcome.is_ok()

    def failed(self) -> bool:
        return self._finished and self._outcome.is_err()

    def error(self) -> BaseException | None:
        """The exception the operation raised, if it failed."""
        if self.failed():
            return self._outcome.error
        return None

    def result(self) -> T:
        """Return the produced value.

        Raises:
            TaskNotFinishedError: The operation has not finished yet.
            TaskFailedError: The operation raised; the original exception is
                chained as the cause.
        """
        if not self._finished:
            raise TaskNotFinishedError(
                f"Task {self._sequence_id} has not finished"
            ).with_context(sequence_id=self._sequence_id)

        outcome = self._outcome
        if isinstance(outcome, Err):
            raise TaskFailedError(
                f"Task {self._sequence_id} failed: {type(outcome.error).__name__}: {outcome.error}",
                cause=outcome.error,
            ).with_context(sequence_id=self._sequence_id)
        return outcome.value

    def _record(self, outcome: Result[T]) -> None:
        """Record the outcome. Called once, by the worker that ran the entry."""
        with self._lock:
            if self._finished:
                raise DispatcherStateError(
                    f"Outcome for task {self._sequence_id} recorded twice"
                ).with_context(sequence_id=self._sequence_id)
            # outcome is published before the flag so readers never see finished without it
            self._outcome = outcome
            self._finished = True

    def __repr__(self) -> str:
        if not self._finished:
            state = "pending"
        elif self._outcome.is_ok():
            state = "ok"
        else:
            state = "failed"
        return f"TaskHandle(sequence_id={self._sequence_id}, state={state})"
