"""
Column dictionary for the settlement interchange format.

The column order is fixed. Import reads the first twelve columns; export
writes all seventeen. Header lookup is case-insensitive and ignores
surrounding and repeated whitespace.
"""

from __future__ import annotations

import re
from typing import Any

# (header, SettlementRow attribute), in interchange order.
IMPORT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Product Code", "product_code"),
    ("Description", "description"),
    ("Invoice Number", "invoice_number"),
    ("Invoice Date", "invoice_date"),
    ("Due Date", "due_date"),
    ("Quantity", "quantity"),
    ("Unit Price", "unit_price"),
    ("Invoice Amount", "invoice_amount"),
    ("Payment Doc No", "payment_doc_no"),
    ("Payment Date", "payment_date"),
    ("Payment Amount", "payment_amount"),
    ("Discount Rate", "discount_rate"),
)

DERIVED_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Days Difference", "days_difference"),
    ("Proportionate Quantity", "proportionate_quantity"),
    ("Discount Amount", "discount_amount"),
    ("Final Payment", "final_payment"),
    ("Note", "note"),
)

EXPORT_COLUMNS: tuple[tuple[str, str], ...] = IMPORT_COLUMNS + DERIVED_COLUMNS

# Columns normalized through format_date on import.
DATE_ATTRIBUTES = frozenset({"invoice_date", "due_date", "payment_date"})

_ALIASES: dict[str, str] = {
    "product": "product_code",
    "item code": "product_code",
    "invoice no": "invoice_number",
    "invoice no.": "invoice_number",
    "invoice #": "invoice_number",
    "qty": "quantity",
    "price": "unit_price",
    "payment doc no.": "payment_doc_no",
    "payment document number": "payment_doc_no",
    "payment doc number": "payment_doc_no",
    "discount rate (%)": "discount_rate",
    "discount %": "discount_rate",
}

HEADER_DICTIONARY: dict[str, str] = {
    **{header.lower(): attr for header, attr in IMPORT_COLUMNS},
    **_ALIASES,
}


def normalize_header(value: Any) -> str:
    """Lower-case, strip and collapse whitespace in a header cell."""
    if value is None:
        return ""
    text = str(value).replace("\ufeff", "")
    return re.sub(r"\s+", " ", text).strip().lower()


def resolve_header(value: Any) -> str | None:
    """SettlementRow attribute for a header cell, or None if unrecognized."""
    return HEADER_DICTIONARY.get(normalize_header(value))
