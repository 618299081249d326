"""Work entries and their sequence ids."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from proactor.core.errors import DispatcherStateError
from proactor.core.result import Result
from proactor.dispatch.handle import TaskHandle

UNASSIGNED = -1

Operation = Callable[[], Any]
CompletionCallback = Callable[[Result[Any]], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SequenceCounter:
    """Monotonic id source, one per dispatcher.

    ``next()`` is safe to call from any thread; ids start at ``start`` and
    never repeat for the lifetime of the counter.
    """

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()
        self._issued = 0

    def next(self) -> int:
        with self._lock:
            self._issued += 1
            return next(self._counter)

    @property
    def issued(self) -> int:
        """How many ids have been handed out."""
        return self._issued


@dataclass(eq=False)
class WorkEntry:
    """One submitted operation on its way through the dispatcher.

    Lives in the pending queue, then in a worker slot, then in the completed
    queue, and is dropped after settlement. Owns the :class:`TaskHandle`
    returned to the caller.
    """

    operation: Operation
    sequence_id: int
    callback: CompletionCallback | None = None
    slot_index: int = UNASSIGNED
    submitted_at: datetime = field(default_factory=_utcnow)
    handle: TaskHandle = field(init=False)

    def __post_init__(self) -> None:
        self.handle = TaskHandle(self.sequence_id)

    @property
    def is_bound(self) -> bool:
        return self.slot_index != UNASSIGNED

    def bind(self, slot_index: int) -> None:
        """Assign the worker slot. Allowed exactly once."""
        if self.is_bound:
            raise DispatcherStateError(
                f"Entry {self.sequence_id} already bound to slot {self.slot_index}"
            ).with_context(sequence_id=self.sequence_id, slot=slot_index)
        if slot_index < 0:
            raise DispatcherStateError(
                f"Invalid slot index {slot_index} for entry {self.sequence_id}"
            ).with_context(sequence_id=self.sequence_id)
        self.slot_index = slot_index
