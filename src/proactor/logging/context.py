"""
Logging context management using contextvars.

Dispatch context (dispatcher name, sequence id, slot) is attached to every log
entry without passing it through every call. Workers push the context of the
entry they execute, so anything an operation logs carries its sequence id and
slot.

Design choice: contextvars
- Thread-safe; each worker thread sees its own value
- Clean integration with structlog processors
"""

import threading
from contextvars import ContextVar
from dataclasses import asdict, dataclass
from typing import Any

import structlog


@dataclass
class DispatchContext:
    """
    Dispatch context attached to all log entries.

        dispatcher: Dispatcher name
        sequence_id: Sequence id of the work entry being handled
        slot: Worker slot index executing the entry
    """

    dispatcher: str | None = None
    sequence_id: int | None = None
    slot: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def merge(self, **kwargs) -> "DispatchContext":
        """Create new context with merged values."""
        current = asdict(self)
        current.update({k: v for k, v in kwargs.items() if v is not None})
        return DispatchContext(**current)


_dispatch_context: ContextVar[DispatchContext] = ContextVar("dispatch_context")  # noqa: B039


def get_context() -> DispatchContext:
    """Get the current dispatch context."""
    return _dispatch_context.get(DispatchContext())


def bind_context(**kwargs) -> DispatchContext:
    """
    Bind additional values to current context.

    This merges with the existing context rather than replacing it.
    """
    updated = get_context().merge(**kwargs)
    _dispatch_context.set(updated)
    return updated


def clear_context() -> None:
    """Clear the current context (reset to empty)."""
    _dispatch_context.set(DispatchContext())


class _ContextToken:
    """Token for restoring context after a scoped operation."""

    def __init__(self, token):
        self._token = token

    def restore(self):
        """Restore the previous context."""
        _dispatch_context.reset(self._token)


def push_context(**kwargs) -> _ContextToken:
    """
    Push new context values, returning a token to restore later.

    Usage:
        token = push_context(sequence_id=7, slot=2)
        try:
            run_operation()
        finally:
            token.restore()
    """
    updated = get_context().merge(**kwargs)
    token = _dispatch_context.set(updated)
    return _ContextToken(token)


def add_context_processor(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Structlog processor that adds dispatch context to every log entry.

    Existing keys in the event are never overridden.
    """
    for key, value in get_context().to_dict().items():
        event_dict.setdefault(key, value)
    return event_dict


def add_thread_name(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that records the emitting thread's name."""
    event_dict.setdefault("thread", threading.current_thread().name)
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """
    Get a structured logger.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)
