"""
settlement_services.calculation_service -- Row-level settlement calculation.

Responsibility:
    Turn the caller's string-typed rows into invoice and payment records,
    run the allocation engine and the result projector, and render the
    resulting allocation records back into rows.

Architecture position:
    Services -- orchestration over engines + kernel. Reads settings once
    per calculator and passes precision values down to the pure engines.

Invariants enforced:
    - Numeric text is parsed with ``to_decimal`` before any arithmetic;
      raw text never reaches an engine comparison.
    - A row contributes an invoice iff its invoice amount parses > 0 and a
      payment iff its payment amount parses > 0; relative order is kept.
    - The caller's rows are never modified.

Failure modes:
    - None for any row shape. Malformed numbers become zero and malformed
      dates become ``N/A`` day differences.
    - ``ConfigurationError`` only when settings are loaded and invalid.

Usage:
    from settlement_services import calculate
    from settlement_kernel.domain.records import SettlementRow

    rows = calculate([
        SettlementRow(invoice_number="INV-1", invoice_amount="255.00",
                      due_date="20-01-2025", discount_rate="2",
                      payment_amount="255.00", payment_date="10-01-2025"),
    ])
    # rows[0].note == "Full Match"; rows[0].discount_amount == "5.10"
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from settlement_config import SettlementSettings, get_active_settings
from settlement_engines.allocation import AllocationEngine, AllocationResult
from settlement_engines.projection import project
from settlement_kernel.domain.amounts import ZERO, format_amount, to_decimal
from settlement_kernel.domain.records import (
    AllocationRecord,
    InvoiceRecord,
    PaymentRecord,
    SettlementRow,
    is_numeric_days,
)
from settlement_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.calculation")


class SettlementCalculator:
    """
    Calculation pass over settlement rows.

    Contract:
        Stateless between calls apart from the settings captured at
        construction; safe to share across threads.
    Non-goals:
        - Does not persist rows or results.
        - Does not re-order rows.
    """

    def __init__(self, settings: SettlementSettings | None = None):
        self._settings = settings or get_active_settings()
        calc = self._settings.calculation
        self._engine = AllocationEngine(
            amount_places=calc.amount_places,
            rounding=calc.rounding,
        )

    @property
    def settings(self) -> SettlementSettings:
        return self._settings

    def split_rows(
        self,
        rows: Sequence[SettlementRow],
    ) -> tuple[list[InvoiceRecord], list[PaymentRecord]]:
        """
        Build invoice and payment records from rows with positive amounts.

        A row's ``row_id`` (or its 1-based position when blank) becomes the
        record identifier on both sides.
        """
        invoices: list[InvoiceRecord] = []
        payments: list[PaymentRecord] = []
        for position, row in enumerate(rows, start=1):
            row_id = row.row_id or str(position)

            invoice_amount = to_decimal(row.invoice_amount)
            if invoice_amount > ZERO:
                invoices.append(InvoiceRecord(
                    invoice_id=row_id,
                    amount=invoice_amount,
                    due_date=row.due_date,
                    discount_rate=to_decimal(row.discount_rate),
                    product_code=row.product_code,
                    description=row.description,
                    invoice_number=row.invoice_number,
                    invoice_date=row.invoice_date,
                    quantity=row.quantity,
                    unit_price=to_decimal(row.unit_price) if row.unit_price.strip() else None,
                ))

            payment_amount = to_decimal(row.payment_amount)
            if payment_amount > ZERO:
                payments.append(PaymentRecord(
                    payment_id=row_id,
                    amount=payment_amount,
                    payment_date=row.payment_date,
                    payment_doc_no=row.payment_doc_no,
                ))
        return invoices, payments

    def reconcile(
        self,
        invoices: Sequence[InvoiceRecord],
        payments: Sequence[PaymentRecord],
    ) -> tuple[AllocationRecord, ...]:
        """Allocation engine followed by the result projector."""
        return self.run(invoices, payments)[1]

    def run(
        self,
        invoices: Sequence[InvoiceRecord],
        payments: Sequence[PaymentRecord],
    ) -> tuple[AllocationResult, tuple[AllocationRecord, ...]]:
        """Like ``reconcile`` but also returns the raw engine result."""
        calc = self._settings.calculation
        result = self._engine.allocate(invoices=invoices, payments=payments)
        projected = project(
            result.records,
            quantity_places=calc.quantity_places,
            rounding=calc.rounding,
        )
        return result, projected

    def calculate(self, rows: Sequence[SettlementRow]) -> list[SettlementRow]:
        """Rows in, calculated rows out; see module docstring."""
        with LogContext.bind(run_id=uuid4().hex[:12]):
            invoices, payments = self.split_rows(rows)
            logger.info("calculation_started", extra={
                "row_count": len(rows),
                "invoice_count": len(invoices),
                "payment_count": len(payments),
                "dropped_row_count": sum(
                    1 for row in rows
                    if to_decimal(row.invoice_amount) <= ZERO
                    and to_decimal(row.payment_amount) <= ZERO
                ),
            })
            records = self.reconcile(invoices, payments)
            output = [self.render(record, position) for position, record in enumerate(records, start=1)]
            logger.info("calculation_completed", extra={"output_row_count": len(output)})
            return output

    def render(self, record: AllocationRecord, position: int = 0) -> SettlementRow:
        """Render one allocation record as a display/export row."""
        calc = self._settings.calculation
        places = calc.amount_places

        def amount(value):
            return format_amount(value, places, calc.rounding)

        if is_numeric_days(record.days_difference):
            days = str(record.days_difference)
        else:
            days = calc.not_applicable_label

        return SettlementRow(
            product_code=record.product_code,
            description=record.description,
            invoice_number=record.invoice_number,
            invoice_date=record.invoice_date,
            due_date=record.due_date,
            quantity=record.quantity,
            unit_price=amount(record.unit_price),
            invoice_amount=amount(record.invoice_amount),
            payment_doc_no=record.payment_doc_no,
            payment_date=record.payment_date,
            payment_amount=amount(record.payment_amount),
            discount_rate="" if record.discount_rate is None else format(record.discount_rate, "f"),
            days_difference=days,
            proportionate_quantity=format_amount(
                record.proportionate_quantity, calc.quantity_places, calc.rounding
            ),
            discount_amount=amount(record.discount_amount),
            final_payment=amount(record.final_payment),
            note=record.case.value,
            row_id=str(position) if position else "",
        )


def calculate(
    rows: Sequence[SettlementRow],
    settings: SettlementSettings | None = None,
) -> list[SettlementRow]:
    """Module-level convenience for ``SettlementCalculator(settings).calculate``."""
    return SettlementCalculator(settings).calculate(rows)


def reconcile(
    invoices: Sequence[InvoiceRecord],
    payments: Sequence[PaymentRecord],
    settings: SettlementSettings | None = None,
) -> tuple[AllocationRecord, ...]:
    """Module-level convenience for ``SettlementCalculator(settings).reconcile``."""
    return SettlementCalculator(settings).reconcile(invoices, payments)
