"""
Records -- Immutable invoice, payment and allocation value objects.

Responsibility:
    Define the typed inputs and outputs of the settlement engines, the
    case-label vocabulary, the ``NOT_APPLICABLE`` day-difference sentinel,
    and the string-typed ``SettlementRow`` exchanged with callers.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by engines, services and the interchange layer.

Invariants enforced:
    - Records are frozen; transformations build new records with
      ``dataclasses.replace``.
    - Invoice and payment amounts are Decimal and never negative.
    - ``AllocationRecord.discount_amount`` is None whenever
      ``days_difference`` is ``NOT_APPLICABLE``.

Failure modes:
    - ValueError on construction of an InvoiceRecord or PaymentRecord with a
      negative or non-numeric amount.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any


class CaseLabel(str, Enum):
    """Outcome label attached to every allocation record."""

    FULL_MATCH = "Full Match"
    ADJUSTED = "Adjusted"
    PARTIALLY_ADJUSTED = "Partially Adjusted"
    EXCESS_PAYMENT = "Excess Payment"
    UNADJUSTED_INVOICE = "Unadjusted Invoice"


class Applicability(str, Enum):
    """Non-numeric day difference: no discount window applies."""

    NOT_APPLICABLE = "N/A"


NOT_APPLICABLE = Applicability.NOT_APPLICABLE


def is_numeric_days(days: Any) -> bool:
    """True when ``days`` is the numeric variant of a day difference."""
    return isinstance(days, int) and not isinstance(days, bool)


def _coerce_amount(owner: object, name: str) -> None:
    value = getattr(owner, name)
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Invalid {name}: {value!r}") from e
        object.__setattr__(owner, name, value)
    if not value.is_finite() or value < Decimal("0"):
        raise ValueError(f"{name} cannot be negative or non-finite: {value}")


@dataclass(frozen=True, slots=True)
class InvoiceRecord:
    """
    An outstanding invoice balance.

    Contract:
        ``amount`` and ``discount_rate`` are Decimal. Descriptive fields are
        carried through to allocation records unmodified.
    Non-goals:
        - Does not bound ``discount_rate`` to 0-100.
    """

    invoice_id: str
    amount: Decimal
    due_date: str = ""
    discount_rate: Decimal = Decimal("0")
    product_code: str = ""
    description: str = ""
    invoice_number: str = ""
    invoice_date: str = ""
    quantity: str = ""
    unit_price: Decimal | None = None

    def __post_init__(self) -> None:
        _coerce_amount(self, "amount")
        if not isinstance(self.discount_rate, Decimal):
            object.__setattr__(self, "discount_rate", Decimal(str(self.discount_rate)))

    def carried_fields(self) -> dict[str, Any]:
        """Invoice-side fields copied onto every record this invoice produces."""
        return {
            "invoice_id": self.invoice_id,
            "product_code": self.product_code,
            "description": self.description,
            "invoice_number": self.invoice_number,
            "invoice_date": self.invoice_date,
            "due_date": self.due_date,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "discount_rate": self.discount_rate,
        }


@dataclass(frozen=True, slots=True)
class PaymentRecord:
    """An incoming payment."""

    payment_id: str
    amount: Decimal
    payment_date: str = ""
    payment_doc_no: str = ""

    def __post_init__(self) -> None:
        _coerce_amount(self, "amount")

    def carried_fields(self) -> dict[str, Any]:
        """Payment-side fields copied onto every record this payment produces."""
        return {
            "payment_id": self.payment_id,
            "payment_doc_no": self.payment_doc_no,
            "payment_date": self.payment_date,
        }


@dataclass(frozen=True, slots=True)
class AllocationRecord:
    """
    One matched or synthetic leftover settlement.

    Contract:
        Frozen dataclass emitted by the allocation engine and refined by the
        result projector.
    Guarantees:
        - Amounts are non-negative when present.
        - ``discount_amount`` is present iff ``days_difference`` is numeric.
        - ``is_split`` is True only for ``Excess Payment`` and
          ``Unadjusted Invoice`` records.
    Non-goals:
        - Does not carry the source records themselves, only their fields.
    """

    case: CaseLabel
    invoice_amount: Decimal | None = None
    payment_amount: Decimal | None = None
    days_difference: int | Applicability = NOT_APPLICABLE
    discount_amount: Decimal | None = None
    final_payment: Decimal | None = None
    proportionate_quantity: Decimal | None = None
    is_split: bool = False

    invoice_id: str | None = None
    product_code: str = ""
    description: str = ""
    invoice_number: str = ""
    invoice_date: str = ""
    due_date: str = ""
    quantity: str = ""
    unit_price: Decimal | None = None
    discount_rate: Decimal | None = None

    payment_id: str | None = None
    payment_doc_no: str = ""
    payment_date: str = ""

    @property
    def has_discount(self) -> bool:
        return self.discount_amount is not None


@dataclass(frozen=True, slots=True)
class SettlementRow:
    """
    String-typed tabular row exchanged with the UI, CLI and CSV layer.

    The first twelve fields are the editable input columns; the last five
    are derived by a calculation pass and never read back as input.
    """

    product_code: str = ""
    description: str = ""
    invoice_number: str = ""
    invoice_date: str = ""
    due_date: str = ""
    quantity: str = ""
    unit_price: str = ""
    invoice_amount: str = ""
    payment_doc_no: str = ""
    payment_date: str = ""
    payment_amount: str = ""
    discount_rate: str = ""

    days_difference: str = ""
    proportionate_quantity: str = ""
    discount_amount: str = ""
    final_payment: str = ""
    note: str = ""

    row_id: str = ""
