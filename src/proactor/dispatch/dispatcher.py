"""Dispatcher: the single scheduling loop over a fixed pool of worker slots.

Callers submit zero-argument operations; the dispatcher thread moves them from
the pending queue onto free slots, and settles finished entries by invoking
their callbacks on its own thread and freeing their slots.

Usage::

    from proactor import Dispatcher

    with Dispatcher(worker_count=3) as dispatcher:
        handle = dispatcher.submit(lambda: 5, lambda outcome: print(outcome))
    # leaving the block drains all work and runs every callback
    assert handle.result() == 5

Architecture:
    ::

        submit() ──► pending queue ──┐
                                     ▼
                 ┌──────────── dispatcher thread ─────────────┐
                 │ 1. settle completed (callbacks, free slots) │
                 │ 2. lowest free slot? no ─► wait()           │
                 │ 3. head of pending?  no ─► wait(timeout)    │
                 │ 4. bind slot, start worker                  │
                 └─────────────────────────────────────────────┘
                                     │
                   worker pool ◄─────┘
                      │ record outcome
                      └──► completed queue ──► wakeup ──► dispatcher

Thread-safety:
    The pending and completed queues have independent locks. The slot pool
    and the stats counters are only mutated on the dispatcher thread; other
    threads read slot occupancy from an immutable tuple it republishes after
    every dispatch and release. The wakeup signal is the only other state
    shared with workers.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from proactor.core.errors import (
    DispatcherStateError,
    DispatcherStoppedError,
    InvalidConfigError,
    InvalidSubmissionError,
)
from proactor.core.result import Result
from proactor.core.settings import ProactorSettings, get_settings
from proactor.dispatch.entry import CompletionCallback, Operation, SequenceCounter, WorkEntry
from proactor.dispatch.handle import TaskHandle
from proactor.dispatch.queues import WorkQueue
from proactor.dispatch.slots import SlotPool
from proactor.dispatch.wakeup import WakeupSignal
from proactor.dispatch.worker import Worker
from proactor.logging import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DispatcherState(str, Enum):
    """Lifecycle of a dispatcher.

    ::

        CREATED ──start()──► RUNNING ──stop()──► STOPPING ──drained──► STOPPED
           │                    │
           └──stop()──► STOPPED └──loop crashed──► FAILED
    """

    CREATED = "created"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


@dataclass
class DispatcherStats:
    """Point-in-time counters for a dispatcher."""

    submitted: int = 0
    dispatched: int = 0
    completed: int = 0
    failed: int = 0
    callback_errors: int = 0
    active: int = 0
    pending: int = 0
    peak_active: int = 0
    uptime_seconds: float = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "submitted": self.submitted,
            "dispatched": self.dispatched,
            "completed": self.completed,
            "failed": self.failed,
            "callback_errors": self.callback_errors,
            "active": self.active,
            "pending": self.pending,
            "peak_active": self.peak_active,
            "uptime_seconds": round(self.uptime_seconds, 2),
        }


@dataclass
class DispatcherInfo:
    """Static metadata about a dispatcher."""

    name: str
    worker_count: int
    state: DispatcherState
    thread_name: str
    wakeup_timeout: float
    started_at: datetime | None = None
    stopped_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "worker_count": self.worker_count,
            "state": self.state.value,
            "thread_name": self.thread_name,
            "wakeup_timeout": self.wakeup_timeout,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "stopped_at": self.stopped_at.isoformat() if self.stopped_at else None,
        }


class Dispatcher:
    """Bounded-concurrency task dispatcher.

    Guarantees:
        - At most ``worker_count`` operations execute at once.
        - Pending work is scheduled in submission order.
        - Callbacks run one at a time on the dispatcher thread, in the order
          operations finished.
        - ``stop()`` returns only after every accepted operation has run and
          every callback has been invoked.
        - An operation that raises is recorded as ``Err`` on its handle and
          passed to its callback; it never disturbs other work.
    """

    def __init__(
        self,
        worker_count: int | None = None,
        *,
        wakeup_timeout: float | None = None,
        name: str | None = None,
        settings: ProactorSettings | None = None,
    ):
        """
        Args:
            worker_count: Number of worker slots. Defaults to
                ``ProactorSettings.worker_count``.
            wakeup_timeout: Seconds the idle dispatcher waits before
                re-checking the pending queue on its own. Defaults to
                ``ProactorSettings.wakeup_timeout``.
            name: Identifier used in logs. Auto-generated if ``None``.
            settings: Settings to read defaults from. Falls back to the
                cached global settings.
        """
        settings = settings or get_settings()
        worker_count = settings.worker_count if worker_count is None else worker_count
        wakeup_timeout = settings.wakeup_timeout if wakeup_timeout is None else wakeup_timeout

        if worker_count < 1:
            raise InvalidConfigError("worker_count", worker_count, "must be at least 1")
        if wakeup_timeout <= 0:
            raise InvalidConfigError("wakeup_timeout", wakeup_timeout, "must be positive")

        self._name = name or f"dispatcher-{uuid.uuid4().hex[:8]}"
        self._thread_name = settings.dispatcher_thread_name
        self._worker_prefix = settings.worker_thread_prefix
        self._wakeup_timeout = wakeup_timeout

        self._sequence = SequenceCounter()
        self._pending = WorkQueue("pending")
        self._completed = WorkQueue("completed")
        self._wakeup = WakeupSignal()
        self._slots = SlotPool(worker_count)

        self._pool: ThreadPoolExecutor | None = None
        self._thread: threading.Thread | None = None
        self._state = DispatcherState.CREATED
        self._state_lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._started_at: datetime | None = None
        self._stopped_at: datetime | None = None
        self._stats = DispatcherStats()
        self._published_slots: tuple[int | None, ...] = tuple(self._slots.snapshot())

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def name(self) -> str:
        return self._name

    @property
    def worker_count(self) -> int:
        return self._slots.capacity

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state in (DispatcherState.RUNNING, DispatcherState.STOPPING)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def start(self) -> None:
        """Start the dispatcher thread and the worker pool."""
        with self._state_lock:
            if self._state is DispatcherState.RUNNING:
                logger.warning("dispatcher.already_started", dispatcher=self._name)
                return
            if self._state is not DispatcherState.CREATED:
                raise DispatcherStoppedError(
                    f"Dispatcher {self._name} cannot be restarted"
                ).with_context(dispatcher=self._name, state=self._state.value)

            self._pool = ThreadPoolExecutor(
                max_workers=self._slots.capacity,
                thread_name_prefix=self._worker_prefix,
            )
            self._thread = threading.Thread(
                target=self._run,
                name=self._thread_name,
                daemon=True,
            )
            self._started_at = _utcnow()
            self._state = DispatcherState.RUNNING
            self._thread.start()

        logger.info(
            "dispatcher.started",
            dispatcher=self._name,
            workers=self._slots.capacity,
            wakeup_timeout=self._wakeup_timeout,
        )

    def stop(self) -> None:
        """Stop accepting work, drain, and block until fully settled.

        Pending entries are still dispatched, in-flight workers are joined,
        and every completion callback runs before this returns. Calling it
        again has no further effect. Called from inside a callback (on the
        dispatcher thread) it only requests the stop.
        """
        with self._state_lock:
            self._stop_requested.set()
            if self._state is DispatcherState.CREATED:
                self._state = DispatcherState.STOPPED
                abandoned = len(self._pending)
                if abandoned:
                    logger.warning(
                        "dispatcher.stopped_before_start",
                        dispatcher=self._name,
                        abandoned=abandoned,
                    )
                return
            if self._state is DispatcherState.RUNNING:
                self._state = DispatcherState.STOPPING
                logger.info("dispatcher.stopping", dispatcher=self._name, pending=len(self._pending))
            thread = self._thread

        if thread is None:
            return
        self._wakeup.set()
        if thread is threading.current_thread():
            logger.debug("dispatcher.stop_requested_from_dispatcher_thread", dispatcher=self._name)
            return
        thread.join()

    def __enter__(self) -> Dispatcher:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # ------------------------------------------------------------------ #
    # Submission
    # ------------------------------------------------------------------ #

    def submit(
        self,
        operation: Operation,
        callback: CompletionCallback | None = None,
    ) -> TaskHandle:
        """Queue an operation and return its handle immediately.

        Args:
            operation: Zero-argument callable; may block.
            callback: Called on the dispatcher thread with the ``Ok``/``Err``
                outcome once the operation finished.

        Raises:
            InvalidSubmissionError: ``operation`` (or ``callback``) is not callable.
            DispatcherStoppedError: ``stop()`` has been requested.
        """
        self._validate_callable("operation", operation)
        if callback is not None:
            self._validate_callable("callback", callback)

        with self._state_lock:
            if self._stop_requested.is_set():
                raise DispatcherStoppedError(
                    f"Dispatcher {self._name} is stopped"
                ).with_context(dispatcher=self._name, state=self._state.value)
            entry = WorkEntry(
                operation=operation,
                sequence_id=self._sequence.next(),
                callback=callback,
            )
            self._pending.put(entry)

        logger.debug("task.queued", dispatcher=self._name, sequence_id=entry.sequence_id)
        self._wakeup.set()
        return entry.handle

    def submit_action(
        self,
        action: Callable[[], None],
        callback: Callable[[], None] | None = None,
    ) -> TaskHandle:
        """Queue an action with no return value.

        The handle's result is ``None``. ``callback`` takes no arguments and
        is only invoked if the action completed without raising.
        """
        self._validate_callable("action", action)
        if callback is not None:
            self._validate_callable("callback", callback)

        def operation() -> None:
            action()
            return None

        on_done = None
        if callback is not None:

            def on_done(outcome: Result[None]) -> None:
                if outcome.is_ok():
                    callback()

        return self.submit(operation, on_done)

    def _validate_callable(self, what: str, value: Any) -> None:
        if value is None or not callable(value):
            raise InvalidSubmissionError(
                f"{what} must be callable, got {type(value).__name__}"
            ).with_context(dispatcher=self._name)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def stats(self) -> DispatcherStats:
        """Return a snapshot of the dispatcher counters."""
        snapshot = DispatcherStats(**vars(self._stats))
        snapshot.submitted = self._sequence.issued
        snapshot.pending = len(self._pending)
        snapshot.active = sum(1 for sequence_id in self._published_slots if sequence_id is not None)
        if self._started_at is not None:
            until = self._stopped_at or _utcnow()
            snapshot.uptime_seconds = (until - self._started_at).total_seconds()
        return snapshot

    def info(self) -> DispatcherInfo:
        return DispatcherInfo(
            name=self._name,
            worker_count=self._slots.capacity,
            state=self._state,
            thread_name=self._thread_name,
            wakeup_timeout=self._wakeup_timeout,
            started_at=self._started_at,
            stopped_at=self._stopped_at,
        )

    def slot_snapshot(self) -> list[int | None]:
        """Sequence id executing in each slot (``None`` when empty).

        Safe from any thread: reads the tuple the dispatcher thread publishes
        after every dispatch and release.
        """
        return list(self._published_slots)

    def pending_ids(self) -> list[int]:
        return self._pending.sequence_ids()

    def __repr__(self) -> str:
        return (
            f"Dispatcher(name={self._name!r}, workers={self._slots.capacity}, "
            f"state={self._state.value})"
        )

    # ------------------------------------------------------------------ #
    # Dispatcher thread
    # ------------------------------------------------------------------ #

    def _run(self) -> None:
        failed = False
        try:
            self._loop()
            self._slots.join_all()
            self._settle()
        except BaseException as exc:
            failed = True
            logger.exception("dispatcher.crashed", dispatcher=self._name)
            if not isinstance(exc, Exception):
                raise
        finally:
            self._pool.shutdown(wait=True)
            self._stopped_at = _utcnow()
            with self._state_lock:
                self._stop_requested.set()
                self._state = DispatcherState.FAILED if failed else DispatcherState.STOPPED
            logger.info("dispatcher.stopped", dispatcher=self._name, **self.stats().to_dict())

    def _loop(self) -> None:
        while True:
            # settle first so slots freed by finished work are visible below
            self._settle()

            stopping = self._stop_requested.is_set()
            index = self._slots.find_free()
            if index is None:
                self._wakeup.wait()
                continue

            entry = self._pending.get()
            if entry is None:
                if stopping:
                    return
                self._wakeup.wait(self._wakeup_timeout)
                continue

            self._dispatch(entry, index)

    def _dispatch(self, entry: WorkEntry, index: int) -> None:
        entry.bind(index)
        worker = Worker(entry, self._completed, self._wakeup, dispatcher_name=self._name)
        future = self._pool.submit(worker.run)
        self._slots.occupy(index, entry, future)
        self._published_slots = tuple(self._slots.snapshot())

        self._stats.dispatched += 1
        self._stats.peak_active = max(self._stats.peak_active, self._slots.occupied_count)
        logger.debug(
            "task.dispatched",
            dispatcher=self._name,
            sequence_id=entry.sequence_id,
            slot=index,
        )

    def _settle(self) -> int:
        """Run callbacks for finished entries and free their slots."""
        settled = 0
        while (entry := self._completed.get()) is not None:
            outcome = entry.handle.outcome()
            if outcome is None:
                raise DispatcherStateError(
                    f"Entry {entry.sequence_id} completed without an outcome"
                ).with_context(dispatcher=self._name, sequence_id=entry.sequence_id)

            if entry.callback is not None:
                try:
                    entry.callback(outcome)
                except Exception:
                    self._stats.callback_errors += 1
                    logger.exception(
                        "task.callback_failed",
                        dispatcher=self._name,
                        sequence_id=entry.sequence_id,
                    )

            freed = self._slots.release(entry.slot_index)
            self._published_slots = tuple(self._slots.snapshot())
            if freed is not entry:
                raise DispatcherStateError(
                    f"Slot {entry.slot_index} held entry {freed.sequence_id}, "
                    f"expected {entry.sequence_id}"
                ).with_context(dispatcher=self._name, slot=entry.slot_index)

            if outcome.is_ok():
                self._stats.completed += 1
            else:
                self._stats.failed += 1
            settled += 1
            logger.debug(
                "task.settled",
                dispatcher=self._name,
                sequence_id=entry.sequence_id,
                slot=entry.slot_index,
                ok=outcome.is_ok(),
            )
        return settled
