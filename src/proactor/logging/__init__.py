"""
Proactor logging - structured, dispatch-aware logging.

This module provides:
- Structured logging with structlog
- Dispatch context propagation via contextvars
- Settings-based configuration

Usage:
    from proactor.logging import configure_logging, get_logger, push_context

    configure_logging()
    log = get_logger(__name__)

    token = push_context(sequence_id=4, slot=0)
    try:
        log.info("operation.progress", percent=50)
    finally:
        token.restore()
"""

from proactor.logging.config import configure_logging, is_configured, is_debug_enabled
from proactor.logging.context import (
    DispatchContext,
    add_context_processor,
    add_thread_name,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    push_context,
)

__all__ = [
    # Configuration
    "configure_logging",
    "is_configured",
    "is_debug_enabled",
    # Context
    "get_logger",
    "get_context",
    "bind_context",
    "push_context",
    "clear_context",
    "DispatchContext",
    "add_context_processor",
    "add_thread_name",
]
