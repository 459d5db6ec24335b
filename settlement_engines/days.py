"""
Module: settlement_engines.days
Responsibility:
    Compute the number of whole days a payment arrived before an invoice's
    due date, collapsing on-time-or-late and unparsable cases to the
    ``NOT_APPLICABLE`` sentinel.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Result is either a positive int or ``NOT_APPLICABLE``; never zero or
      negative.
    - Payment on the due date does not qualify.
    - Purity: no clock access.
"""

from __future__ import annotations

from settlement_kernel.domain.dates import parse_date
from settlement_kernel.domain.records import NOT_APPLICABLE, Applicability


def days_between(due_date: str | None, payment_date: str | None) -> int | Applicability:
    """
    Whole days from ``payment_date`` up to ``due_date``.

    Returns ``NOT_APPLICABLE`` when either date is unparsable or when the
    payment was made on or after the due date.
    """
    due = parse_date(due_date)
    paid = parse_date(payment_date)
    if due is None or paid is None:
        return NOT_APPLICABLE
    days = (due - paid).days
    if days > 0:
        return days
    return NOT_APPLICABLE
