"""
Settings schema (``settlement_config.schema``).

Frozen dataclasses produced by ``settlement_config.loader``. Field defaults
mirror ``defaults.yaml`` so a partial settings file only names what it
changes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP


@dataclass(frozen=True)
class CalculationSettings:
    """Precision and rendering of engine output."""

    amount_places: int = 2
    quantity_places: int = 2
    rounding: str = ROUND_HALF_UP
    not_applicable_label: str = "N/A"


@dataclass(frozen=True)
class InterchangeSettings:
    """CSV export shape."""

    delimiter: str = ","
    quote_all: bool = True


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class SettlementSettings:
    """Root settings object returned by ``get_active_settings()``."""

    calculation: CalculationSettings = field(default_factory=CalculationSettings)
    interchange: InterchangeSettings = field(default_factory=InterchangeSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source: str = "<defaults>"
    checksum: str = ""
