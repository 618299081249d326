"""FIFO work queues shared between producers and the dispatcher.

The pending queue is fed by submitters and drained by the dispatcher; the
completed queue is fed by workers and drained by settlement. Each queue owns
its own lock, so a submitter never contends with a finishing worker.
"""

from __future__ import annotations

import threading
from collections import deque

from proactor.dispatch.entry import WorkEntry


class WorkQueue:
    """Lock-guarded FIFO of :class:`WorkEntry`.

    ``get()`` never blocks: waiting for work is the wakeup signal's job, not
    the queue's.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._items: deque[WorkEntry] = deque()
        self._lock = threading.Lock()

    def put(self, entry: WorkEntry) -> None:
        """Append to the tail."""
        with self._lock:
            self._items.append(entry)

    def get(self) -> WorkEntry | None:
        """Remove and return the head, or ``None`` if empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def sequence_ids(self) -> list[int]:
        """Sequence ids in queue order (diagnostics)."""
        with self._lock:
            return [entry.sequence_id for entry in self._items]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __repr__(self) -> str:
        return f"WorkQueue(name={self.name!r}, size={len(self)})"
