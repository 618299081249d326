"""
Centralized settings for proactor.

Manifesto:
    One validated, cached settings object supplies every default the
    dispatcher, the logging setup and the CLI need. Explicit constructor
    arguments always win over settings; settings win over built-in defaults.

    - **Pydantic validation:** Type-checked at startup, not runtime
    - **Environment-driven:** Reads ``PROACTOR_*`` env vars and ``.env`` files
    - **Sensible defaults:** Three workers, five-minute safety wake

Examples:
    >>> import os
    >>> os.environ["PROACTOR_WORKER_COUNT"] = "8"
    >>> get_settings(_force_reload=True).worker_count
    8

Tags:
    settings, configuration, pydantic, environment, proactor
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProactorSettings(BaseSettings):
    """Proactor configuration.

    All fields can be set via ``PROACTOR_*`` environment variables (e.g.
    ``PROACTOR_WORKER_COUNT=8``) or a ``.env`` file.

    Fields
    ──────
    worker_count            : Number of worker slots (fixed per dispatcher)
    wakeup_timeout          : Seconds the idle dispatcher waits before re-checking
    dispatcher_thread_name  : Name of the dispatcher thread
    worker_thread_prefix    : Thread name prefix of the worker pool
    log_level               : Structlog log level
    log_format              : ``console`` or ``json``
    """

    model_config = SettingsConfigDict(
        env_prefix="PROACTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Dispatcher ───────────────────────────────────────────────
    worker_count: int = Field(default=3, ge=1, description="Number of worker slots")
    wakeup_timeout: float = Field(
        default=300.0,
        gt=0,
        description="Safety-net wait (seconds) while no work is pending",
    )
    dispatcher_thread_name: str = Field(default="DISPATCHER")
    worker_thread_prefix: str = Field(default="WORKER")

    # ── Logging ──────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, ProactorSettings] = {}


def get_settings(*, _force_reload: bool = False) -> ProactorSettings:
    """Load, validate, and cache a :class:`ProactorSettings` instance.

    Parameters
    ----------
    _force_reload:
        Bypass cache and re-read the environment.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = ProactorSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
