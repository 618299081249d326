"""Wakeup signal between producers and the dispatcher.

┌──────────────────────────────────────────────────────────────────────┐
│  submit() ─┐                                                          │
│            ├──► set() ──► [pending = True] ──► wait() returns True    │
│  worker ───┘                 (coalesced)        and clears the flag   │
└──────────────────────────────────────────────────────────────────────┘

Any number of ``set()`` calls made while the dispatcher is busy collapse into
one pending wake. The dispatcher re-reads both queues and the slot pool after
every wake, so a coalesced or spurious wake is always harmless; the timed
wait covers the case where no wake arrives at all.
"""

from __future__ import annotations

import threading


class WakeupSignal:
    """Binary auto-reset signal built on a condition variable."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._pending = False

    def set(self) -> None:
        """Raise a wake. Never blocks, never stacks."""
        with self._cond:
            self._pending = True
            self._cond.notify()

    def wait(self, timeout: float | None = None) -> bool:
        """Consume a wake, waiting up to ``timeout`` seconds for one.

        Returns:
            True if a wake was consumed, False on timeout.
        """
        with self._cond:
            woke = self._cond.wait_for(lambda: self._pending, timeout=timeout)
            self._pending = False
            return woke

    def is_set(self) -> bool:
        with self._cond:
            return self._pending
