"""Tests for ProactorSettings and the settings cache."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from proactor.core.settings import ProactorSettings, clear_settings_cache, get_settings


class TestDefaults:
    def test_defaults(self):
        s = ProactorSettings()
        assert s.worker_count == 3
        assert s.wakeup_timeout == 300.0
        assert s.dispatcher_thread_name == "DISPATCHER"
        assert s.worker_thread_prefix == "WORKER"
        assert s.log_level == "INFO"
        assert s.log_format == "console"


class TestEnvironment:
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PROACTOR_WORKER_COUNT", "8")
        monkeypatch.setenv("PROACTOR_LOG_FORMAT", "json")
        s = ProactorSettings()
        assert s.worker_count == 8
        assert s.log_format == "json"

    def test_rejects_zero_workers(self, monkeypatch):
        monkeypatch.setenv("PROACTOR_WORKER_COUNT", "0")
        with pytest.raises(ValidationError):
            ProactorSettings()

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            ProactorSettings(wakeup_timeout=0)

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            ProactorSettings(log_level="TRACE")


class TestCache:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("PROACTOR_WORKER_COUNT", "5")
        assert get_settings() is first
        reloaded = get_settings(_force_reload=True)
        assert reloaded.worker_count == 5

    def test_clear(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first
