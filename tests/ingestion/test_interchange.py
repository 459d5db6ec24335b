"""
Tests for CSV import and export of settlement rows.

Covers:
- Header matching (case, whitespace, aliases, unknown columns)
- Tolerance of short, blank and BOM-prefixed input
- Date normalization on import
- Fixed column order and quoting on export
"""

import csv
import io

from settlement_ingestion.columns import (
    EXPORT_COLUMNS,
    IMPORT_COLUMNS,
    normalize_header,
    resolve_header,
)
from settlement_ingestion.interchange import export_rows, import_rows, rows_from_table
from settlement_kernel.domain.records import SettlementRow

HEADER = ",".join(h for h, _ in IMPORT_COLUMNS)


class TestHeaderDictionary:

    def test_canonical_headers(self):
        for header, attr in IMPORT_COLUMNS:
            assert resolve_header(header) == attr

    def test_case_and_whitespace(self):
        assert resolve_header("  INVOICE   amount ") == "invoice_amount"

    def test_aliases(self):
        assert resolve_header("Qty") == "quantity"
        assert resolve_header("Invoice No.") == "invoice_number"
        assert resolve_header("Discount Rate (%)") == "discount_rate"

    def test_derived_headers_not_importable(self):
        assert resolve_header("Final Payment") is None
        assert resolve_header("Note") is None

    def test_normalize_strips_bom(self):
        assert normalize_header("\ufeffProduct Code") == "product code"

    def test_none(self):
        assert resolve_header(None) is None


class TestImportRows:

    def test_basic(self):
        text = (
            HEADER + "\n"
            "P1,Widget,INV-1,01-01-2025,20-01-2025,10,25.50,255.00,PD-1,10-01-2025,255.00,2\n"
        )
        rows = import_rows(text)

        assert len(rows) == 1
        row = rows[0]
        assert row.product_code == "P1"
        assert row.invoice_amount == "255.00"
        assert row.payment_doc_no == "PD-1"
        assert row.discount_rate == "2"
        assert row.row_id == "1"
        assert row.note == ""

    def test_empty_text(self):
        assert import_rows("") == []

    def test_header_only(self):
        assert import_rows(HEADER + "\n") == []

    def test_bom_and_leading_blank_lines(self):
        text = "\ufeff\n\n" + HEADER + "\n,,,,,,,100,,,,\n"
        rows = import_rows(text)
        assert len(rows) == 1
        assert rows[0].invoice_amount == "100"

    def test_columns_in_any_order_and_unknown_ignored(self):
        text = "Payment Amount,Comment,invoice amount\n50,hello,75\n"
        rows = import_rows(text)
        assert rows[0].payment_amount == "50"
        assert rows[0].invoice_amount == "75"
        assert rows[0].product_code == ""

    def test_short_row_leaves_fields_empty(self):
        text = HEADER + "\nP1,Widget\n"
        row = import_rows(text)[0]
        assert row.product_code == "P1"
        assert row.description == "Widget"
        assert row.payment_amount == ""

    def test_blank_lines_skipped(self):
        text = HEADER + "\n\n,,,,,,,,,,,\nP1\n\nP2\n"
        rows = import_rows(text)
        assert [r.product_code for r in rows] == ["P1", "P2"]
        assert [r.row_id for r in rows] == ["1", "2"]

    def test_quoted_fields_with_commas(self):
        text = 'Description,Invoice Amount\n"Bolts, M8","1,250.00"\n'
        row = import_rows(text)[0]
        assert row.description == "Bolts, M8"
        assert row.invoice_amount == "1,250.00"

    def test_dates_normalized(self):
        text = "Invoice Date,Due Date,Payment Date\n2025-01-05,5/2/2025,not a date\n"
        row = import_rows(text)[0]
        assert row.invoice_date == "05-01-2025"
        assert row.due_date == "05-02-2025"
        assert row.payment_date == "not a date"

    def test_duplicate_header_first_wins(self):
        text = "Invoice Amount,Invoice Amount\n10,20\n"
        assert import_rows(text)[0].invoice_amount == "10"

    def test_derived_columns_not_read_back(self):
        text = "Invoice Amount,Final Payment,Note\n10,999,Full Match\n"
        row = import_rows(text)[0]
        assert row.final_payment == ""
        assert row.note == ""

    def test_custom_delimiter(self):
        text = "Invoice Amount;Payment Amount\n10;20\n"
        row = import_rows(text, delimiter=";")[0]
        assert (row.invoice_amount, row.payment_amount) == ("10", "20")

    def test_logs_row_count(self, captured_logs):
        import_rows(HEADER + "\nP1\nP2\n")
        done = [r for r in captured_logs() if r["message"] == "interchange_rows_imported"]
        assert done[0]["row_count"] == 2


class TestRowsFromTable:

    def test_non_string_cells(self):
        rows = rows_from_table(["Invoice Amount", None, "Quantity"], [[100, "x", 3], [None, None, None]])
        assert len(rows) == 1
        assert rows[0].invoice_amount == "100"
        assert rows[0].quantity == "3"


class TestExportRows:

    def test_header_is_all_seventeen_columns(self):
        text = export_rows([])
        header = next(csv.reader(io.StringIO(text)))
        assert header == [h for h, _ in EXPORT_COLUMNS]
        assert len(header) == 17

    def test_every_field_quoted(self):
        text = export_rows([SettlementRow(invoice_amount="10.00", note="Full Match")])
        lines = text.splitlines()
        assert lines[0].startswith('"Product Code","Description"')
        assert lines[1].count('"') == 34
        assert '"Full Match"' in lines[1]

    def test_minimal_quoting(self):
        text = export_rows([SettlementRow(invoice_amount="10.00")], quote_all=False)
        assert text.splitlines()[1] == ",,,,,,,10.00,,,,,,,,,"

    def test_row_id_not_exported(self):
        text = export_rows([SettlementRow(row_id="42")])
        assert "42" not in text

    def test_embedded_quotes_and_newlines(self):
        row = SettlementRow(description='Say "hi"\nthere')
        back = import_rows(export_rows([row]))
        assert back[0].description == 'Say "hi"\nthere'

    def test_import_reads_export(self):
        """Exported input columns come back unchanged; derived columns are dropped."""
        row = SettlementRow(
            product_code="P1",
            invoice_number="INV-1",
            due_date="20-01-2025",
            invoice_amount="255.00",
            payment_date="10-01-2025",
            payment_amount="255.00",
            discount_rate="2",
            final_payment="249.90",
            note="Full Match",
        )
        back = import_rows(export_rows([row]))[0]
        assert back.invoice_number == "INV-1"
        assert back.due_date == "20-01-2025"
        assert back.payment_amount == "255.00"
        assert back.final_payment == ""
