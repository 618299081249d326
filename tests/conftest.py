"""
Shared pytest fixtures and configuration for proactor tests.

This module provides:
- Settings cache isolation
- Logging reset between tests
- A dispatcher factory that always stops what it started
"""

import logging
import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# Ensure proactor package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from proactor.core.settings import clear_settings_cache
from proactor.dispatch import Dispatcher
from proactor.logging import config as logging_config
from tests._support.threads import Gate


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Drop cached settings and PROACTOR_* env vars around every test."""
    for key in list(os.environ):
        if key.startswith("PROACTOR_"):
            monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging() so handlers never outlive a test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    logging.getLogger("proactor").setLevel(logging.NOTSET)
    logging_config._configured = False


@pytest.fixture()
def make_dispatcher() -> Iterator[Callable[..., Dispatcher]]:
    """Factory for started dispatchers; every one is stopped at teardown."""
    created: list[Dispatcher] = []

    def factory(worker_count: int = 3, *, start: bool = True, **kwargs) -> Dispatcher:
        dispatcher = Dispatcher(worker_count=worker_count, **kwargs)
        created.append(dispatcher)
        if start:
            dispatcher.start()
        return dispatcher

    yield factory

    for dispatcher in created:
        dispatcher.stop()


@pytest.fixture()
def gate(make_dispatcher) -> Iterator[Gate]:
    """Gate opened before any dispatcher from make_dispatcher is stopped."""
    g = Gate()
    yield g
    g.open()
