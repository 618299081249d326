"""
Proactor - bounded-concurrency task dispatcher.

Callers submit operations; one dispatcher thread schedules them onto a fixed
pool of worker slots and runs completion callbacks back on its own thread.

- proactor.dispatch: Dispatcher, TaskHandle and the coordination engine
- proactor.core: Errors, Result outcomes and settings
- proactor.logging: Structured logging setup
- proactor.cli: Interactive shell and batch runner
"""

__version__ = "0.1.0"

from proactor.core.errors import (
    DispatcherStateError,
    DispatcherStoppedError,
    InvalidSubmissionError,
    ProactorError,
    TaskFailedError,
    TaskNotFinishedError,
)
from proactor.core.result import Err, Ok, Result
from proactor.dispatch import Dispatcher, DispatcherState, DispatcherStats, TaskHandle

__all__ = [
    "__version__",
    "Dispatcher",
    "DispatcherState",
    "DispatcherStats",
    "TaskHandle",
    "Ok",
    "Err",
    "Result",
    "ProactorError",
    "InvalidSubmissionError",
    "DispatcherStoppedError",
    "DispatcherStateError",
    "TaskNotFinishedError",
    "TaskFailedError",
]
