"""
Demo workloads for the shell and batch runner.

``timed_operation`` builds operations that sleep for a fixed time (and
optionally fail), the way a blocking I/O call would. ``ConcurrencyTracker``
counts how many of them run at once so the batch runner can report peak
concurrency next to the configured worker count.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any


class SimulatedFailure(RuntimeError):
    """Raised by operations built with ``fail=True``."""


class ConcurrencyTracker:
    """Thread-safe running/peak counter."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.running = 0
        self.peak = 0

    def enter(self) -> None:
        with self._lock:
            self.running += 1
            self.peak = max(self.peak, self.running)

    def exit(self) -> None:
        with self._lock:
            self.running -= 1


def timed_operation(
    duration_ms: int,
    *,
    result: Any = None,
    fail: bool = False,
    tracker: ConcurrencyTracker | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[[], Any]:
    """Build an operation that blocks for ``duration_ms`` then returns ``result``.

    Args:
        duration_ms: How long the operation blocks.
        result: Value to return.
        fail: Raise :class:`SimulatedFailure` instead of returning.
        tracker: Counter updated while the operation runs.
        sleep: Sleep function (injectable for tests).
    """

    def operation() -> Any:
        if tracker is not None:
            tracker.enter()
        try:
            sleep(duration_ms / 1000)
            if fail:
                raise SimulatedFailure(f"simulated failure after {duration_ms} ms")
            return result
        finally:
            if tracker is not None:
                tracker.exit()

    return operation
