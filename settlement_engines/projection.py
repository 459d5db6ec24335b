"""
Module: settlement_engines.projection
Responsibility:
    Refine allocation records for display and export: derive the
    proportionate quantity, recompute the final settlement and normalize
    the three date fields.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Idempotent: ``project(project(r)) == project(r)``.
    - Never divides by zero; a zero, absent or unparsable unit price is
      treated as 1.
    - Records are rebuilt with ``dataclasses.replace``; inputs untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal

from settlement_engines.tracer import traced_engine
from settlement_kernel.domain.amounts import ZERO, quantize
from settlement_kernel.domain.dates import format_date
from settlement_kernel.domain.records import AllocationRecord

_ONE = Decimal("1")


def _divisor(unit_price: Decimal | None) -> Decimal:
    if unit_price is None or not unit_price.is_finite() or unit_price == ZERO:
        return _ONE
    return unit_price


def project_record(
    record: AllocationRecord,
    quantity_places: int = 2,
    rounding: str = ROUND_HALF_UP,
) -> AllocationRecord:
    """Derived fields for a single record."""
    if record.invoice_amount is None:
        quantity = None
        final_payment = None
    else:
        quantity = quantize(
            record.invoice_amount / _divisor(record.unit_price),
            quantity_places,
            rounding,
        )
        final_payment = record.invoice_amount - (record.discount_amount or ZERO)

    return replace(
        record,
        proportionate_quantity=quantity,
        final_payment=final_payment,
        invoice_date=format_date(record.invoice_date),
        due_date=format_date(record.due_date),
        payment_date=format_date(record.payment_date),
    )


@traced_engine("projection", "1.0", fingerprint_fields=("records",))
def project(
    records: Sequence[AllocationRecord],
    quantity_places: int = 2,
    rounding: str = ROUND_HALF_UP,
) -> tuple[AllocationRecord, ...]:
    """Single pass over engine output; see ``project_record``."""
    return tuple(project_record(r, quantity_places, rounding) for r in records)
