"""
Structured error types for the proactor dispatcher.

Every failure the dispatcher can report is a :class:`ProactorError` carrying a
category, structured context, and an optional chained cause. Callers can
route on the category (a caller bug, a lifecycle misuse, a failed operation)
instead of parsing messages.

Manifesto:
    - **Typed Error Hierarchy:** One subclass per failure the caller can act on
    - **Contained Failures:** Operation errors are recorded, never propagated
      to the dispatcher thread
    - **Rich Context:** Errors carry sequence id, slot and dispatcher name
    - **Error Chaining:** The original exception is kept as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        ProactorError                             │
        │            (category, context, cause)                            │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  InvalidSubmissionError   DispatcherStoppedError                 │
        │  (VALIDATION)             (LIFECYCLE)                            │
        │                                                                  │
        │  TaskNotFinishedError     TaskFailedError                        │
        │  (LIFECYCLE)              (OPERATION)                            │
        │                                                                  │
        │  DispatcherStateError     ConfigError                            │
        │  (INTERNAL, fatal)        (CONFIG)                               │
        │                                │                                 │
        │                          InvalidConfigError                      │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = DispatcherStoppedError("dispatcher stopped")
    >>> error.category
    <ErrorCategory.LIFECYCLE: 'LIFECYCLE'>

    >>> try:
    ...     raise ZeroDivisionError("division by zero")
    ... except ZeroDivisionError as e:
    ...     error = TaskFailedError("operation failed", cause=e)
    >>> error.cause
    ZeroDivisionError('division by zero')

Guardrails:
    ❌ DON'T: Catch DispatcherStateError to keep the loop alive
    ✅ DO: Treat it as a programming error and let it surface

    ❌ DON'T: Swallow the original exception of a failed operation
    ✅ DO: Pass it as cause= so tracebacks chain

Tags:
    error-handling, exception-hierarchy, error-context, proactor, dispatcher
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        VALIDATION: Caller handed the dispatcher something unusable
        CONFIG: Missing or invalid settings
        LIFECYCLE: Call made in the wrong dispatcher or handle state
        OPERATION: A submitted operation raised
        INTERNAL: Dispatcher invariant violated (bug)
        UNKNOWN: Uncategorized errors
    """

    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    LIFECYCLE = "LIFECYCLE"
    OPERATION = "OPERATION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        dispatcher: Name of the dispatcher that raised
        sequence_id: Sequence id of the work entry involved
        slot: Worker slot index involved
        state: Dispatcher state at the time of the error
        metadata: Additional key-value pairs
    """

    dispatcher: str | None = None
    sequence_id: int | None = None
    slot: int | None = None
    state: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["dispatcher", "sequence_id", "slot", "state"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ProactorError(Exception):
    """
    Base exception for all proactor errors.

    Subclasses set ``default_category``; instances may override it.

    Examples:
        >>> error = ProactorError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(sequence_id=3, slot=1).context.slot
        1
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ProactorError:
        """
        Add context to this error (fluent API).

        Usage:
            raise DispatcherStateError("slot busy").with_context(slot=2)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SUBMISSION / LIFECYCLE ERRORS
# =============================================================================


class InvalidSubmissionError(ProactorError):
    """Submitted operation or callback is missing or not callable."""

    default_category = ErrorCategory.VALIDATION


class DispatcherStoppedError(ProactorError):
    """The dispatcher no longer accepts work (stop requested or completed)."""

    default_category = ErrorCategory.LIFECYCLE


class TaskNotFinishedError(ProactorError):
    """A handle's result was read before the operation finished."""

    default_category = ErrorCategory.LIFECYCLE


class TaskFailedError(ProactorError):
    """
    The operation behind a handle raised.

    The original exception is available as ``cause`` (and ``__cause__``).
    """

    default_category = ErrorCategory.OPERATION


# =============================================================================
# INTERNAL ERRORS
# =============================================================================


class DispatcherStateError(ProactorError):
    """
    A dispatcher invariant was violated.

    Raised for double slot binding, occupying a busy slot, releasing an empty
    slot or recording an outcome twice. These are bugs, not recoverable
    conditions.
    """

    default_category = ErrorCategory.INTERNAL


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ProactorError):
    """Configuration-related error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is out of range."""

    def __init__(self, key: str, value: Any, reason: str, **kwargs: Any):
        super().__init__(f"Invalid value for {key}={value!r}: {reason}", **kwargs)
        self.key = key
        self.value = value


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, ProactorError):
        return error.category
    return ErrorCategory.OPERATION


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ProactorError",
    "InvalidSubmissionError",
    "DispatcherStoppedError",
    "TaskNotFinishedError",
    "TaskFailedError",
    "DispatcherStateError",
    "ConfigError",
    "InvalidConfigError",
    "categorize_error",
]
