"""Worker: runs exactly one work entry on a pool thread.

The worker executes the entry's operation, records ``Ok``/``Err`` on the
handle, appends the entry to the completed queue and wakes the dispatcher.
It never calls the completion callback; settlement does that on the
dispatcher thread. The entry reaches the completed queue even when the
operation raises a ``BaseException`` such as ``SystemExit``; that outcome is
recorded as ``Err`` and the exception is re-raised into the pool future.
"""

from __future__ import annotations

from proactor.core.result import Err, try_result
from proactor.dispatch.entry import WorkEntry
from proactor.dispatch.queues import WorkQueue
from proactor.dispatch.wakeup import WakeupSignal
from proactor.logging import get_logger, push_context

logger = get_logger(__name__)


class Worker:
    """Execution wrapper bound to one entry and one slot."""

    def __init__(
        self,
        entry: WorkEntry,
        completed: WorkQueue,
        wakeup: WakeupSignal,
        dispatcher_name: str | None = None,
    ) -> None:
        self.entry = entry
        self._completed = completed
        self._wakeup = wakeup
        self._dispatcher_name = dispatcher_name

    def run(self) -> None:
        entry = self.entry
        token = push_context(
            dispatcher=self._dispatcher_name,
            sequence_id=entry.sequence_id,
            slot=entry.slot_index,
        )
        try:
            logger.debug("worker.started")
            try:
                outcome = try_result(entry.operation)
            except BaseException as exc:
                # entry still settles; the pool future keeps the re-raised exception
                logger.error("worker.operation_aborted", error_type=type(exc).__name__)
                entry.handle._record(Err(exc))
                raise
            if outcome.is_err():
                logger.warning(
                    "worker.operation_failed",
                    error_type=type(outcome.error).__name__,
                    error=str(outcome.error),
                )
            else:
                logger.debug("worker.finished")

            entry.handle._record(outcome)
        finally:
            self._completed.put(entry)
            self._wakeup.set()
            token.restore()

    def __repr__(self) -> str:
        return f"Worker(sequence_id={self.entry.sequence_id}, slot={self.entry.slot_index})"
