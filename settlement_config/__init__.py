"""
settlement_config -- single public entrypoint for settlement settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_active_settings()``. Engines never read settings; services and
    the CLI pass the relevant values down explicitly.

Lookup order:
    1. The ``path`` argument.
    2. The ``SETTLEMENT_CONFIG`` environment variable.
    3. The packaged ``defaults.yaml``.

Failure modes:
    - ``ConfigurationError`` -- missing file, malformed YAML, unknown key
      or invalid value.

Audit relevance:
    Every load emits a ``SETTLEMENT_CONFIG_TRACE`` log entry with the
    source path and the settings checksum, tying a calculation run to the
    exact settings that governed its rounding and rendering.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path

from settlement_config.loader import load_settings, log_level, parse_settings
from settlement_config.schema import (
    CalculationSettings,
    InterchangeSettings,
    LoggingSettings,
    SettlementSettings,
)
from settlement_kernel.logging_config import get_logger

_logger = get_logger("config")

ENV_VAR = "SETTLEMENT_CONFIG"
DEFAULT_SETTINGS_PATH = Path(__file__).parent / "defaults.yaml"

_cache: dict[Path, SettlementSettings] = {}
_cache_lock = threading.Lock()


def _resolve_path(path: Path | str | None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_SETTINGS_PATH


def get_active_settings(path: Path | str | None = None) -> SettlementSettings:
    """
    Return the settings in effect, loading them on first use.

    Settings are cached per resolved path for the life of the process;
    ``reset_settings_cache()`` clears the cache.
    """
    resolved = _resolve_path(path)
    with _cache_lock:
        cached = _cache.get(resolved)
        if cached is not None:
            return cached
        settings = load_settings(resolved)
        _cache[resolved] = settings

    _logger.info(
        "SETTLEMENT_CONFIG_TRACE",
        extra={
            "trace_type": "SETTLEMENT_CONFIG_TRACE",
            "config_source": settings.source,
            "checksum": settings.checksum,
            "amount_places": settings.calculation.amount_places,
            "rounding": settings.calculation.rounding,
        },
    )
    return settings


def reset_settings_cache() -> None:
    """Drop cached settings. FOR TESTING ONLY."""
    with _cache_lock:
        _cache.clear()


__all__ = [
    "CalculationSettings",
    "DEFAULT_SETTINGS_PATH",
    "ENV_VAR",
    "InterchangeSettings",
    "LoggingSettings",
    "SettlementSettings",
    "get_active_settings",
    "log_level",
    "parse_settings",
    "reset_settings_cache",
]
