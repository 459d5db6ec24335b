"""
CSV source adapter.

Reads the whole file as text (BOM stripped via utf-8-sig when the encoding
is utf-8) and hands it to ``import_rows``. Options: delimiter, encoding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from settlement_ingestion.interchange import import_rows
from settlement_kernel.domain.records import SettlementRow
from settlement_kernel.exceptions import InterchangeError


def _get_encoding(options: dict[str, Any]) -> str:
    enc = options.get("encoding", "utf-8")
    if enc.lower() == "utf-8":
        return "utf-8-sig"
    return enc


class CsvSourceAdapter:
    """Read a settlement CSV file."""

    suffixes = (".csv", ".txt")

    def read(self, source_path: Path, options: dict[str, Any]) -> list[SettlementRow]:
        try:
            text = source_path.read_text(encoding=_get_encoding(options))
        except UnicodeDecodeError as e:
            raise InterchangeError(str(source_path), f"not valid text: {e.reason}") from e
        return import_rows(text, delimiter=options.get("delimiter", ","))
