"""
Pure domain layer.

Value types and records with NO dependencies on:
- Configuration files
- Time/clock
- I/O

All domain objects are immutable and deterministic.
"""

from settlement_kernel.domain.amounts import format_amount, quantize, to_decimal
from settlement_kernel.domain.dates import format_date, parse_date, render_date
from settlement_kernel.domain.records import (
    NOT_APPLICABLE,
    AllocationRecord,
    Applicability,
    CaseLabel,
    InvoiceRecord,
    PaymentRecord,
    SettlementRow,
    is_numeric_days,
)

__all__ = [
    "NOT_APPLICABLE",
    "AllocationRecord",
    "Applicability",
    "CaseLabel",
    "InvoiceRecord",
    "PaymentRecord",
    "SettlementRow",
    "format_amount",
    "format_date",
    "is_numeric_days",
    "parse_date",
    "quantize",
    "render_date",
    "to_decimal",
]
