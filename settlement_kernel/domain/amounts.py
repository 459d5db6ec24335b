"""
Amounts -- Defensive text to Decimal conversion and rounding helpers.

Responsibility:
    Convert the string-typed numeric fields of settlement rows into Decimal
    before any arithmetic, and render Decimals back to fixed-precision text.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic; floats are converted through ``str``.
    - Unparsable, empty, NaN or infinite input becomes ``Decimal("0")``,
      as does a value beyond 10**100 in either direction; ``to_decimal``
      never raises.
    - ``quantize`` widens the context precision to the value it rounds.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Largest decimal exponent accepted by to_decimal, positive or negative.
_MAX_EXPONENT = 100


def _in_range(value: Decimal) -> bool:
    return value.is_finite() and (not value or abs(value.adjusted()) <= _MAX_EXPONENT)


def to_decimal(value: str | int | float | Decimal | None) -> Decimal:
    """
    Parse a numeric field, defaulting to zero.

    Thousands separators and surrounding whitespace are ignored, so
    ``" 1,250.50 "`` parses as ``Decimal("1250.50")``.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value if _in_range(value) else ZERO
    text = str(value).strip().replace(",", "")
    if not text:
        return ZERO
    try:
        parsed = Decimal(text)
    except (InvalidOperation, ValueError):
        return ZERO
    return parsed if _in_range(parsed) else ZERO


def quantum(places: int) -> Decimal:
    """Smallest step at the given number of decimal places."""
    return Decimal(1).scaleb(-places)


def quantize(value: Decimal, places: int, rounding: str = ROUND_HALF_UP) -> Decimal:
    """
    Round to ``places`` decimal places.

    The default context holds 28 digits, fewer than a large amount or a
    quotient by a tiny unit price needs once rounded, so the precision is
    raised to fit every integer digit plus the requested places.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(quantum(places), rounding=rounding)


def format_amount(
    value: Decimal | None,
    places: int = 2,
    rounding: str = ROUND_HALF_UP,
) -> str:
    """Render an amount with fixed decimals; ``None`` renders as ``""``."""
    if value is None:
        return ""
    return str(quantize(value, places, rounding))
