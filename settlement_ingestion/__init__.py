"""Settlement interchange: CSV text encode/decode and tabular file readers."""

from settlement_ingestion.adapters.xlsx_adapter import read_workbook_rows
from settlement_ingestion.columns import (
    DERIVED_COLUMNS,
    EXPORT_COLUMNS,
    HEADER_DICTIONARY,
    IMPORT_COLUMNS,
)
from settlement_ingestion.interchange import export_rows, import_rows, rows_from_table
from settlement_ingestion.sources import adapter_for, read_source

__all__ = [
    "DERIVED_COLUMNS",
    "EXPORT_COLUMNS",
    "HEADER_DICTIONARY",
    "IMPORT_COLUMNS",
    "adapter_for",
    "export_rows",
    "import_rows",
    "read_source",
    "read_workbook_rows",
    "rows_from_table",
]
