"""
Module: settlement_engines.discount
Responsibility:
    Early-payment discount: a flat percentage of the allocated amount,
    gated by the presence of a numeric day difference.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - No discount (``None``, not zero) unless ``days`` is numeric.
    - The number of days never scales the discount; only its presence
      matters.
    - Decimal-only arithmetic, rounded to ``places`` with ``rounding``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from settlement_kernel.domain.amounts import HUNDRED, quantize
from settlement_kernel.domain.records import Applicability, is_numeric_days


def discount(
    amount: Decimal,
    rate_percent: Decimal,
    days: int | Applicability,
    places: int = 2,
    rounding: str = ROUND_HALF_UP,
) -> Decimal | None:
    """``amount * rate_percent / 100`` when ``days`` is numeric, else None."""
    if not is_numeric_days(days):
        return None
    return quantize(amount * rate_percent / HUNDRED, places, rounding)
