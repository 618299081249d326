"""
Proactor core primitives: typed errors, task outcome results and settings.
"""

from proactor.core.errors import (
    ConfigError,
    DispatcherStateError,
    DispatcherStoppedError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    InvalidSubmissionError,
    ProactorError,
    TaskFailedError,
    TaskNotFinishedError,
    categorize_error,
)
from proactor.core.result import Err, Ok, Result, try_result
from proactor.core.settings import ProactorSettings, clear_settings_cache, get_settings

__all__ = [
    # Errors
    "ErrorCategory",
    "ErrorContext",
    "ProactorError",
    "InvalidSubmissionError",
    "DispatcherStoppedError",
    "DispatcherStateError",
    "TaskNotFinishedError",
    "TaskFailedError",
    "ConfigError",
    "InvalidConfigError",
    "categorize_error",
    # Result
    "Ok",
    "Err",
    "Result",
    "try_result",
    # Settings
    "ProactorSettings",
    "get_settings",
    "clear_settings_cache",
]
