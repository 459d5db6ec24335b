"""Source adapters for settlement rows (file I/O only)."""

from settlement_ingestion.adapters.base import SourceAdapter
from settlement_ingestion.adapters.csv_adapter import CsvSourceAdapter
from settlement_ingestion.adapters.xlsx_adapter import XlsxSourceAdapter, read_workbook_rows

__all__ = [
    "SourceAdapter",
    "CsvSourceAdapter",
    "XlsxSourceAdapter",
    "read_workbook_rows",
]
