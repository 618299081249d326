"""
Dispatcher/worker coordination engine.

Modules:
    handle.py      — TaskHandle, the caller's view of one operation
    entry.py       — WorkEntry and the per-dispatcher SequenceCounter
    queues.py      — lock-guarded FIFO WorkQueue (pending / completed)
    wakeup.py      — coalescing WakeupSignal
    slots.py       — fixed SlotPool arena
    worker.py      — Worker, runs one entry on a pool thread
    dispatcher.py  — Dispatcher loop, submission and lifecycle API
"""

from proactor.dispatch.dispatcher import (
    Dispatcher,
    DispatcherInfo,
    DispatcherState,
    DispatcherStats,
)
from proactor.dispatch.entry import UNASSIGNED, SequenceCounter, WorkEntry
from proactor.dispatch.handle import TaskHandle
from proactor.dispatch.queues import WorkQueue
from proactor.dispatch.slots import Slot, SlotPool
from proactor.dispatch.wakeup import WakeupSignal
from proactor.dispatch.worker import Worker

__all__ = [
    "Dispatcher",
    "DispatcherInfo",
    "DispatcherState",
    "DispatcherStats",
    "TaskHandle",
    "WorkEntry",
    "SequenceCounter",
    "UNASSIGNED",
    "WorkQueue",
    "WakeupSignal",
    "Slot",
    "SlotPool",
    "Worker",
]
