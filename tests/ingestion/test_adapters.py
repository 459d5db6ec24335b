"""Tests for source adapters and suffix dispatch."""

from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import Workbook

from settlement_ingestion.adapters import CsvSourceAdapter, SourceAdapter, XlsxSourceAdapter
from settlement_ingestion.adapters.xlsx_adapter import cell_text, read_workbook_rows
from settlement_ingestion.sources import adapter_for, read_source
from settlement_kernel.exceptions import (
    InterchangeError,
    SourceNotFoundError,
    UnsupportedSourceError,
)


def _write_workbook(path: Path, rows: list[list], title: str = "Sheet") -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(row)
    wb.save(path)
    return path


class TestCsvSourceAdapter:
    """CSV adapter: header mapping, BOM, delimiter, encoding."""

    def test_read(self, tmp_path):
        path = tmp_path / "rows.csv"
        path.write_text("Invoice Number,Invoice Amount\nINV-1,100.00\n", encoding="utf-8")

        rows = CsvSourceAdapter().read(path, {})

        assert len(rows) == 1
        assert rows[0].invoice_number == "INV-1"
        assert rows[0].invoice_amount == "100.00"

    def test_bom_stripped(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes(b"\xef\xbb\xbfInvoice Amount\n5\n")

        rows = CsvSourceAdapter().read(path, {})

        assert rows[0].invoice_amount == "5"

    def test_custom_delimiter(self, tmp_path):
        path = tmp_path / "semi.csv"
        path.write_text("Invoice Amount;Payment Amount\n1;2\n", encoding="utf-8")

        rows = CsvSourceAdapter().read(path, {"delimiter": ";"})

        assert (rows[0].invoice_amount, rows[0].payment_amount) == ("1", "2")

    def test_latin1_encoding(self, tmp_path):
        path = tmp_path / "latin.csv"
        path.write_bytes("Description\nCafé\n".encode("latin-1"))

        rows = CsvSourceAdapter().read(path, {"encoding": "latin-1"})

        assert rows[0].description == "Café"

    def test_undecodable_raises(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_bytes(b"Description\n\xff\xfe\xfa\n")

        with pytest.raises(InterchangeError) as exc_info:
            CsvSourceAdapter().read(path, {})
        assert exc_info.value.code == "INTERCHANGE_ERROR"

    def test_satisfies_protocol(self):
        assert isinstance(CsvSourceAdapter(), SourceAdapter)


class TestXlsxSourceAdapter:
    """XLSX adapter: sheet selection, header row, typed cells."""

    def test_read_active_sheet(self, tmp_path):
        path = _write_workbook(tmp_path / "book.xlsx", [
            ["Invoice Number", "Due Date", "Invoice Amount", "Payment Amount", "Discount Rate"],
            ["INV-1", datetime(2025, 1, 20), 255.0, 255.5, 2],
        ])

        rows = XlsxSourceAdapter().read(path, {})

        assert len(rows) == 1
        row = rows[0]
        assert row.invoice_number == "INV-1"
        assert row.due_date == "20-01-2025"
        assert row.invoice_amount == "255"
        assert row.payment_amount == "255.5"
        assert row.discount_rate == "2"

    def test_header_after_blank_rows(self, tmp_path):
        path = _write_workbook(tmp_path / "offset.xlsx", [
            [None, None],
            ["Quantity", "Unit Price"],
            [3, 12.5],
        ])

        rows = XlsxSourceAdapter().read(path, {})

        assert (rows[0].quantity, rows[0].unit_price) == ("3", "12.5")

    def test_named_sheet(self, tmp_path):
        path = tmp_path / "multi.xlsx"
        wb = Workbook()
        wb.active.append(["Invoice Amount"])
        wb.active.append([1])
        ledger = wb.create_sheet("Ledger")
        ledger.append(["Invoice Amount"])
        ledger.append([2])
        wb.save(path)

        assert XlsxSourceAdapter().read(path, {"sheet": "Ledger"})[0].invoice_amount == "2"
        assert XlsxSourceAdapter().read(path, {"sheet": 0})[0].invoice_amount == "1"

    def test_missing_sheet(self, tmp_path):
        path = _write_workbook(tmp_path / "book.xlsx", [["Invoice Amount"], [1]])

        with pytest.raises(InterchangeError, match="not found"):
            XlsxSourceAdapter().read(path, {"sheet": "Nope"})

    def test_digit_text_selects_index(self, tmp_path):
        path = tmp_path / "multi.xlsx"
        wb = Workbook()
        wb.active.append(["Invoice Amount"])
        wb.active.append([1])
        ledger = wb.create_sheet("Ledger")
        ledger.append(["Invoice Amount"])
        ledger.append([2])
        wb.save(path)

        assert XlsxSourceAdapter().read(path, {"sheet": "1"})[0].invoice_amount == "2"

    def test_digit_sheet_name_wins(self, tmp_path):
        path = tmp_path / "years.xlsx"
        wb = Workbook()
        wb.active.append(["Invoice Amount"])
        wb.active.append([1])
        year = wb.create_sheet("0")
        year.append(["Invoice Amount"])
        year.append([2])
        wb.save(path)

        assert XlsxSourceAdapter().read(path, {"sheet": "0"})[0].invoice_amount == "2"

    def test_missing_sheet_index(self, tmp_path):
        path = _write_workbook(tmp_path / "book.xlsx", [["Invoice Amount"], [1]])

        with pytest.raises(InterchangeError, match="index 5"):
            XlsxSourceAdapter().read(path, {"sheet": 5})

    def test_empty_sheet(self, tmp_path):
        path = _write_workbook(tmp_path / "empty.xlsx", [])

        assert XlsxSourceAdapter().read(path, {}) == []

    def test_read_workbook_rows(self, tmp_path):
        path = tmp_path / "multi.xlsx"
        wb = Workbook()
        wb.active.append(["Invoice Amount"])
        wb.active.append([1])
        ledger = wb.create_sheet("Ledger")
        ledger.append(["Payment Amount", "Payment Date"])
        ledger.append([9.5, datetime(2024, 2, 29)])
        wb.save(path)

        assert read_workbook_rows(path)[0].invoice_amount == "1"
        row = read_workbook_rows(str(path), sheet="Ledger")[0]
        assert (row.payment_amount, row.payment_date) == ("9.5", "29-02-2024")

    def test_not_a_workbook(self, tmp_path):
        path = tmp_path / "fake.xlsx"
        path.write_text("not a zip", encoding="utf-8")

        with pytest.raises(InterchangeError):
            XlsxSourceAdapter().read(path, {})


class TestCellText:

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        (datetime(2025, 3, 7, 12, 30), "07-03-2025"),
        (10.0, "10"),
        (10.25, "10.25"),
        (7, "7"),
        ("  INV-1 ", "INV-1"),
    ])
    def test_rendering(self, value, expected):
        assert cell_text(value) == expected


class TestSources:
    """Suffix dispatch and file checks."""

    def test_adapter_for_suffix(self):
        assert isinstance(adapter_for(Path("a.CSV")), CsvSourceAdapter)
        assert isinstance(adapter_for(Path("a.xlsx")), XlsxSourceAdapter)

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "rows.ods"
        path.write_text("x", encoding="utf-8")

        with pytest.raises(UnsupportedSourceError) as exc_info:
            read_source(path)
        assert exc_info.value.suffix == ".ods"
        assert exc_info.value.code == "UNSUPPORTED_SOURCE"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFoundError) as exc_info:
            read_source(tmp_path / "nope.csv")
        assert exc_info.value.code == "SOURCE_NOT_FOUND"

    def test_directory_is_not_a_source(self, tmp_path):
        with pytest.raises(SourceNotFoundError):
            read_source(tmp_path)

    def test_read_source_logs(self, tmp_path, captured_logs):
        path = tmp_path / "rows.csv"
        path.write_text("Invoice Amount\n1\n2\n", encoding="utf-8")

        rows = read_source(str(path))

        assert len(rows) == 2
        done = [r for r in captured_logs() if r["message"] == "source_read"]
        assert done[0]["adapter"] == "CsvSourceAdapter"
        assert done[0]["row_count"] == 2
