"""
XLSX source adapter for settlement workbooks.

Reads one worksheet (by name, by 0-based index, or the active sheet). The
first non-blank row is the header; it is matched against the same header
dictionary as CSV import. Cell values are rendered to text: date and
datetime cells as ``DD-MM-YYYY``, integral floats without a trailing
``.0``.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from settlement_ingestion.interchange import rows_from_table
from settlement_kernel.domain.dates import render_date
from settlement_kernel.domain.records import SettlementRow
from settlement_kernel.exceptions import InterchangeError


def cell_text(value: Any) -> str:
    """Render an openpyxl cell value as interchange text."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return render_date(value.date())
    if isinstance(value, date):
        return render_date(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class XlsxSourceAdapter:
    """
    Read a settlement worksheet from an .xlsx workbook.

    source_options:
      sheet: worksheet name (str) or 0-based index (int, or digit-only text
             naming no sheet). Default: active sheet.
    """

    suffixes = (".xlsx", ".xlsm")

    def read(self, source_path: Path, options: dict[str, Any]) -> list[SettlementRow]:
        try:
            workbook = load_workbook(filename=source_path, read_only=True, data_only=True)
        except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
            raise InterchangeError(str(source_path), f"not a readable workbook: {e}") from e
        try:
            sheet = self._get_sheet(workbook, source_path, options.get("sheet"))
            rows = [
                [cell_text(v) for v in row]
                for row in sheet.iter_rows(values_only=True)
            ]
        finally:
            workbook.close()

        body = iter(rows)
        for header in body:
            if any(header):
                return rows_from_table(header, body)
        return []

    @staticmethod
    def _get_sheet(workbook: Any, source_path: Path, sheet: str | int | None) -> Any:
        if sheet is None:
            return workbook.active
        # Digit-only text from the command line is an index unless a sheet has that name
        if isinstance(sheet, str) and sheet.isdigit() and sheet not in workbook.sheetnames:
            sheet = int(sheet)
        if isinstance(sheet, int):
            try:
                return workbook.worksheets[sheet]
            except IndexError as e:
                raise InterchangeError(str(source_path), f"no worksheet at index {sheet}") from e
        try:
            return workbook[sheet]
        except KeyError as e:
            raise InterchangeError(str(source_path), f"worksheet {sheet!r} not found") from e


def read_workbook_rows(source_path: Path | str, sheet: str | int | None = None) -> list[SettlementRow]:
    """Settlement rows from one worksheet of an ``.xlsx`` workbook."""
    options = {} if sheet is None else {"sheet": sheet}
    return XlsxSourceAdapter().read(Path(source_path), options)
