"""
Source dispatch: pick an adapter by file suffix and read settlement rows.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from settlement_ingestion.adapters import CsvSourceAdapter, SourceAdapter, XlsxSourceAdapter
from settlement_kernel.domain.records import SettlementRow
from settlement_kernel.exceptions import SourceNotFoundError, UnsupportedSourceError
from settlement_kernel.logging_config import get_logger

logger = get_logger("ingestion.sources")

_ADAPTERS: tuple[SourceAdapter, ...] = (CsvSourceAdapter(), XlsxSourceAdapter())


def adapter_for(source_path: Path) -> SourceAdapter:
    """Adapter registered for the file's suffix."""
    suffix = source_path.suffix.lower()
    for adapter in _ADAPTERS:
        if suffix in adapter.suffixes:
            return adapter
    raise UnsupportedSourceError(str(source_path), suffix)


def read_source(
    source_path: Path | str,
    options: dict[str, Any] | None = None,
) -> list[SettlementRow]:
    """
    Read settlement rows from a CSV or XLSX file.

    Raises:
        SourceNotFoundError: the file does not exist.
        UnsupportedSourceError: no adapter handles the suffix.
        InterchangeError: the file exists but cannot be read.
    """
    path = Path(source_path)
    if not path.is_file():
        raise SourceNotFoundError(str(path))
    adapter = adapter_for(path)
    rows = adapter.read(path, options or {})
    logger.info("source_read", extra={
        "source_path": str(path),
        "adapter": type(adapter).__name__,
        "row_count": len(rows),
    })
    return rows
