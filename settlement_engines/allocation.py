"""
Module: settlement_engines.allocation
Responsibility:
    Match an ordered list of invoices against an ordered list of payments in
    arrival order, splitting amounts across partial matches, and emit one
    allocation record per match annotated with its case label and
    early-payment discount.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import settlement_kernel/domain and sibling engines.

Invariants enforced:
    - Payment state (cursor index, remaining balance) persists across
      invoices and is threaded through the loop as an immutable
      ``AllocationCursor``.
    - Case selection uses exact Decimal comparison, no tolerance.
    - Output order is emission order; nothing is re-sorted.
    - Per invoice, emitted ``invoice_amount`` values plus any dropped
      balance equal the invoice amount.
    - Discount is present only for records with a numeric day difference;
      synthetic split records never carry one.

Failure modes:
    - None for well-typed records. A non-final invoice whose balance
      outlives the payments is dropped without a record; the drop is logged
      at WARNING and reported on ``AllocationResult.unallocated``.

Usage:
    from decimal import Decimal
    from settlement_engines.allocation import AllocationEngine
    from settlement_kernel.domain.records import InvoiceRecord, PaymentRecord

    engine = AllocationEngine()
    result = engine.allocate(
        invoices=[InvoiceRecord("1", Decimal("100.00"), due_date="30-01-2025")],
        payments=[PaymentRecord("1", Decimal("300.00"), payment_date="10-01-2025")],
    )
    # result.records -> Adjusted 100.00, Excess Payment 200.00
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal

from settlement_engines.days import days_between
from settlement_engines.discount import discount
from settlement_engines.tracer import traced_engine
from settlement_kernel.domain.amounts import ZERO
from settlement_kernel.domain.records import (
    NOT_APPLICABLE,
    AllocationRecord,
    Applicability,
    CaseLabel,
    InvoiceRecord,
    PaymentRecord,
)
from settlement_kernel.logging_config import get_logger

logger = get_logger("engines.allocation")


@dataclass(frozen=True)
class AllocationCursor:
    """
    Position in the payment list and the unallocated balance under it.

    Contract:
        ``index`` is -1 before the first payment is loaded.
    Guarantees:
        - ``remaining`` never goes negative when callers consume at most
          ``remaining``.
    """

    index: int = -1
    remaining: Decimal = ZERO

    @property
    def has_balance(self) -> bool:
        return self.remaining > ZERO

    def has_next(self, payments: Sequence[PaymentRecord]) -> bool:
        return self.index + 1 < len(payments)

    def advance(self, payments: Sequence[PaymentRecord]) -> AllocationCursor:
        """Load the next payment's full amount as the remaining balance."""
        index = self.index + 1
        return AllocationCursor(index=index, remaining=payments[index].amount)

    def consume(self, amount: Decimal) -> AllocationCursor:
        return replace(self, remaining=self.remaining - amount)

    def exhaust(self) -> AllocationCursor:
        return replace(self, remaining=ZERO)


@dataclass(frozen=True)
class UnallocatedBalance:
    """Invoice balance left without a record because payments ran out."""

    invoice_id: str
    amount: Decimal


@dataclass(frozen=True)
class AllocationResult:
    """
    Complete output of one allocation pass.

    Guarantees:
        - ``records`` are in emission order.
        - ``cursor`` is the payment state after the last invoice.
    """

    records: tuple[AllocationRecord, ...]
    unallocated: tuple[UnallocatedBalance, ...]
    cursor: AllocationCursor

    @property
    def record_count(self) -> int:
        return len(self.records)

    def count_by_case(self) -> dict[CaseLabel, int]:
        counts: dict[CaseLabel, int] = {}
        for record in self.records:
            counts[record.case] = counts.get(record.case, 0) + 1
        return counts


class AllocationEngine:
    """
    FIFO invoice/payment matching with partial-match splitting.

    Contract:
        Pure function of its two input sequences. No I/O, no clock.
    Guarantees:
        - Inputs are never mutated; every record is newly constructed.
        - Runs in O(len(invoices) + len(payments)) emissions and always
          terminates.
    Non-goals:
        - Does not re-order inputs by date; callers supply arrival order.
        - Does not report payments beyond the one matched against the final
          invoice.
    """

    def __init__(self, amount_places: int = 2, rounding: str = ROUND_HALF_UP):
        self._amount_places = amount_places
        self._rounding = rounding

    @traced_engine("allocation", "1.0", fingerprint_fields=("invoices", "payments"))
    def allocate(
        self,
        invoices: Sequence[InvoiceRecord],
        payments: Sequence[PaymentRecord],
    ) -> AllocationResult:
        """
        Walk invoices in order, drawing on payments in order.

        Args:
            invoices: Invoices with amount > 0, in arrival order.
            payments: Payments with amount > 0, in arrival order.

        Returns:
            AllocationResult with the emitted records.
        """
        # Zero amounts are filtered by callers; re-applied so the cursor
        # never loads an empty payment.
        invoices = [i for i in invoices if i.amount > ZERO]
        payments = [p for p in payments if p.amount > ZERO]

        logger.info("allocation_started", extra={
            "invoice_count": len(invoices),
            "payment_count": len(payments),
            "invoice_total": str(sum((i.amount for i in invoices), ZERO)),
            "payment_total": str(sum((p.amount for p in payments), ZERO)),
        })

        cursor = AllocationCursor()
        records: list[AllocationRecord] = []
        unallocated: list[UnallocatedBalance] = []
        last_index = len(invoices) - 1

        for position, invoice in enumerate(invoices):
            emitted, cursor, leftover = self._settle_invoice(
                invoice,
                payments,
                cursor,
                is_last=position == last_index,
            )
            records.extend(emitted)
            if leftover > ZERO:
                logger.warning("allocation_balance_dropped", extra={
                    "invoice_id": invoice.invoice_id,
                    "invoice_number": invoice.invoice_number,
                    "amount": str(leftover),
                    "is_last": position == last_index,
                })
                unallocated.append(UnallocatedBalance(invoice.invoice_id, leftover))

        result = AllocationResult(
            records=tuple(records),
            unallocated=tuple(unallocated),
            cursor=cursor,
        )

        logger.info("settlement_allocation_completed", extra={
            "record_count": result.record_count,
            "cases": {case.value: n for case, n in result.count_by_case().items()},
            "allocated_invoice_total": str(sum(
                (r.invoice_amount for r in records if r.invoice_amount is not None),
                ZERO,
            )),
            "unallocated_count": len(unallocated),
        })
        return result

    def _settle_invoice(
        self,
        invoice: InvoiceRecord,
        payments: Sequence[PaymentRecord],
        cursor: AllocationCursor,
        is_last: bool,
    ) -> tuple[list[AllocationRecord], AllocationCursor, Decimal]:
        """
        Draw on payments until the invoice is settled or payments run out.

        Postconditions:
            - Returns the emitted records, the advanced cursor, and the
              invoice balance left unsettled (zero unless payments ran out
              before a non-final invoice, or there were no payments at all).
        """
        records: list[AllocationRecord] = []
        remaining = invoice.amount

        while remaining > ZERO and (cursor.has_next(payments) or cursor.has_balance):
            if not cursor.has_balance:
                cursor = cursor.advance(payments)
            payment = payments[cursor.index]
            days = days_between(invoice.due_date, payment.payment_date)

            if remaining == cursor.remaining:
                records.append(
                    self._matched(invoice, payment, remaining, days, CaseLabel.FULL_MATCH)
                )
                remaining = ZERO
                cursor = cursor.exhaust()

            elif remaining < cursor.remaining:
                records.append(
                    self._matched(invoice, payment, remaining, days, CaseLabel.ADJUSTED)
                )
                cursor = cursor.consume(remaining)
                remaining = ZERO
                if is_last and cursor.has_balance:
                    records.append(self._excess_payment(payment, cursor.remaining))
                    cursor = cursor.exhaust()

            else:
                applied = cursor.remaining
                records.append(
                    self._matched(
                        invoice, payment, applied, days, CaseLabel.PARTIALLY_ADJUSTED
                    )
                )
                remaining -= applied
                cursor = cursor.exhaust()
                if is_last and remaining > ZERO:
                    records.append(self._unadjusted_invoice(invoice, remaining))
                    remaining = ZERO

        return records, cursor, remaining

    def _matched(
        self,
        invoice: InvoiceRecord,
        payment: PaymentRecord,
        amount: Decimal,
        days: int | Applicability,
        case: CaseLabel,
    ) -> AllocationRecord:
        discount_amount = discount(
            amount,
            invoice.discount_rate,
            days,
            places=self._amount_places,
            rounding=self._rounding,
        )
        return AllocationRecord(
            case=case,
            invoice_amount=amount,
            payment_amount=amount,
            days_difference=days,
            discount_amount=discount_amount,
            final_payment=amount - (discount_amount or ZERO),
            **invoice.carried_fields(),
            **payment.carried_fields(),
        )

    def _excess_payment(self, payment: PaymentRecord, leftover: Decimal) -> AllocationRecord:
        return AllocationRecord(
            case=CaseLabel.EXCESS_PAYMENT,
            payment_amount=leftover,
            days_difference=NOT_APPLICABLE,
            is_split=True,
            **payment.carried_fields(),
        )

    def _unadjusted_invoice(self, invoice: InvoiceRecord, leftover: Decimal) -> AllocationRecord:
        return AllocationRecord(
            case=CaseLabel.UNADJUSTED_INVOICE,
            invoice_amount=leftover,
            days_difference=NOT_APPLICABLE,
            final_payment=leftover,
            is_split=True,
            **invoice.carried_fields(),
        )
