"""Fixed-size arena of worker slots.

Slots are indexed ``0..N-1``. A slot is either empty or holds the entry being
executed plus the future of the worker running it. Only the dispatcher thread
touches the pool (dispatch and settlement both run there), so it has no lock.

Lifecycle of one slot::

    empty ──occupy(entry, future)──► busy ──release()──► empty
                                      │        │
                                      │        └─ waits on the future first
                                      └─ join_all() waits, keeps it busy
"""

from __future__ import annotations

from concurrent.futures import Future, wait
from dataclasses import dataclass

from proactor.core.errors import DispatcherStateError, InvalidConfigError
from proactor.dispatch.entry import WorkEntry


@dataclass
class Slot:
    """One worker slot record."""

    index: int
    entry: WorkEntry | None = None
    future: Future | None = None

    @property
    def is_free(self) -> bool:
        return self.entry is None

    def join(self) -> None:
        """Block until the worker in this slot has returned."""
        if self.future is not None:
            wait([self.future])


class SlotPool:
    """Index-addressed pool of :class:`Slot` records."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise InvalidConfigError("worker_count", capacity, "must be at least 1")
        self._slots = [Slot(index=i) for i in range(capacity)]

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def occupied_count(self) -> int:
        return sum(1 for slot in self._slots if not slot.is_free)

    def __getitem__(self, index: int) -> Slot:
        return self._slots[index]

    def find_free(self) -> int | None:
        """Lowest-index empty slot, or ``None`` when all are busy."""
        for slot in self._slots:
            if slot.is_free:
                return slot.index
        return None

    def occupy(self, index: int, entry: WorkEntry, future: Future) -> None:
        slot = self._slots[index]
        if not slot.is_free:
            raise DispatcherStateError(
                f"Slot {index} is still held by entry {slot.entry.sequence_id}"
            ).with_context(slot=index, sequence_id=entry.sequence_id)
        slot.entry = entry
        slot.future = future

    def release(self, index: int) -> WorkEntry:
        """Join the slot's worker, then empty the slot.

        Returns:
            The entry that occupied the slot.
        """
        slot = self._slots[index]
        if slot.is_free:
            raise DispatcherStateError(f"Slot {index} released while empty").with_context(slot=index)
        slot.join()
        entry = slot.entry
        slot.entry = None
        slot.future = None
        return entry

    def join_all(self) -> None:
        """Wait for every busy slot's worker. Slots stay occupied."""
        futures = [slot.future for slot in self._slots if slot.future is not None]
        if futures:
            wait(futures)

    def snapshot(self) -> list[int | None]:
        """Sequence id per slot, ``None`` for empty slots."""
        ids: list[int | None] = []
        for slot in self._slots:
            entry = slot.entry
            ids.append(None if entry is None else entry.sequence_id)
        return ids
