"""
Settings loader (``settlement_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into the typed
``settlement_config.schema`` dataclasses. Runtime callers go through
``settlement_config.get_active_settings()`` instead of calling this module.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Unknown sections and keys are rejected, so a misspelled setting never
  silently falls back to its default.
* ``compute_checksum`` is a deterministic SHA-256 over the parsed values.

Failure modes
-------------
* Missing file  -> ``ConfigurationError`` (setting ``<file>``).
* Malformed YAML  -> ``ConfigurationError`` chained from ``yaml.YAMLError``.
* Out-of-range or mistyped value  -> ``ConfigurationError`` naming the key.
"""

from __future__ import annotations

import decimal
import hashlib
import json
import logging
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any

import yaml

from settlement_config.schema import (
    CalculationSettings,
    InterchangeSettings,
    LoggingSettings,
    SettlementSettings,
)
from settlement_kernel.exceptions import ConfigurationError

_ROUNDING_MODES = frozenset({
    decimal.ROUND_05UP,
    decimal.ROUND_CEILING,
    decimal.ROUND_DOWN,
    decimal.ROUND_FLOOR,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_UP,
    decimal.ROUND_UP,
})

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

_SECTIONS: dict[str, type] = {
    "settlement": CalculationSettings,
    "interchange": InterchangeSettings,
    "logging": LoggingSettings,
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigurationError: if the file is missing, unreadable, malformed, or
            its top level is not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError("<file>", "settings file not found", str(path)) from e
    except OSError as e:
        raise ConfigurationError("<file>", f"cannot read settings file: {e}", str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError("<file>", f"malformed YAML: {e}", str(path)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("<file>", "top level must be a mapping", str(path))
    return data


def _require_int(section: str, key: str, value: Any, source: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{section}.{key}", "must be an integer", source)
    if not 0 <= value <= 10:
        raise ConfigurationError(f"{section}.{key}", "must be between 0 and 10", source)
    return value


def _parse_section(section: str, data: Any, source: str) -> Any:
    """Parse one top-level section into its schema dataclass."""
    schema = _SECTIONS[section]
    if data is None:
        return schema()
    if not isinstance(data, dict):
        raise ConfigurationError(section, "must be a mapping", source)

    known = {f.name for f in fields(schema)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"{section}.{unknown[0]}", "unknown setting", source)

    values: dict[str, Any] = {}
    for key, value in data.items():
        if key in ("amount_places", "quantity_places"):
            values[key] = _require_int(section, key, value, source)
        elif key == "rounding":
            mode = str(value).upper()
            if mode not in _ROUNDING_MODES:
                raise ConfigurationError(
                    f"{section}.{key}", f"unknown rounding mode {value!r}", source
                )
            values[key] = mode
        elif key == "delimiter":
            if not isinstance(value, str) or len(value) != 1:
                raise ConfigurationError(
                    f"{section}.{key}", "must be a single character", source
                )
            values[key] = value
        elif key == "quote_all":
            if not isinstance(value, bool):
                raise ConfigurationError(f"{section}.{key}", "must be true or false", source)
            values[key] = value
        elif key == "level":
            level = str(value).upper()
            if level not in _LOG_LEVELS:
                raise ConfigurationError(
                    f"{section}.{key}", f"unknown log level {value!r}", source
                )
            values[key] = level
        else:
            values[key] = str(value)
    return schema(**values)


def parse_settings(data: dict[str, Any], source: str = "<memory>") -> SettlementSettings:
    """
    Parse a settings mapping into ``SettlementSettings``.

    Postconditions:
        - Missing sections and keys take their schema defaults.
        - ``checksum`` is filled from the parsed values.
    """
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ConfigurationError(unknown[0], "unknown section", source)

    settings = SettlementSettings(
        calculation=_parse_section("settlement", data.get("settlement"), source),
        interchange=_parse_section("interchange", data.get("interchange"), source),
        logging=_parse_section("logging", data.get("logging"), source),
        source=source,
    )
    return replace(settings, checksum=compute_checksum(settings))


def compute_checksum(settings: SettlementSettings) -> str:
    """Deterministic SHA-256 over the parsed values (source and checksum excluded)."""
    payload = {
        "calculation": asdict(settings.calculation),
        "interchange": asdict(settings.interchange),
        "logging": asdict(settings.logging),
    }
    canonical = json.dumps(payload, sort_keys=True)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def load_settings(path: Path) -> SettlementSettings:
    """Load and parse one settings file."""
    return parse_settings(load_yaml_file(path), source=str(path))


def log_level(settings: SettlementSettings) -> int:
    """Numeric logging level for ``settings.logging.level``."""
    return logging.getLevelName(settings.logging.level)
