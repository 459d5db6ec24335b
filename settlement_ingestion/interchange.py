"""
Tabular interchange for settlement rows.

Contract:
    ``import_rows`` turns comma-separated text into SettlementRows;
    ``export_rows`` turns SettlementRows into comma-separated text with a
    header line and every field quoted. ``rows_from_table`` is the shared
    header-mapping step used by the file adapters.

Tolerances:
    - Header matching is case-insensitive and whitespace-insensitive;
      unrecognized headers are ignored.
    - Rows shorter than the header leave their missing fields empty.
    - Blank lines are skipped.
    - Invoice, due and payment dates are normalized with ``format_date``.
    - Derived columns (Days Difference ... Note) are never read back.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from typing import Any

from settlement_ingestion.columns import DATE_ATTRIBUTES, EXPORT_COLUMNS, resolve_header
from settlement_kernel.domain.dates import format_date
from settlement_kernel.domain.records import SettlementRow
from settlement_kernel.logging_config import get_logger

logger = get_logger("ingestion.interchange")


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_blank(cells: Sequence[Any]) -> bool:
    return all(_cell_text(c) == "" for c in cells)


def rows_from_table(
    header: Sequence[Any],
    body: Iterable[Sequence[Any]],
) -> list[SettlementRow]:
    """
    Map a header row and body rows onto SettlementRows.

    Postconditions:
        - One SettlementRow per non-blank body row, in order.
        - ``row_id`` is the 1-based position among the returned rows.
    """
    mapping: list[tuple[int, str]] = []
    seen: set[str] = set()
    ignored: list[str] = []
    for idx, cell in enumerate(header):
        attr = resolve_header(cell)
        if attr is None:
            if _cell_text(cell):
                ignored.append(_cell_text(cell))
            continue
        if attr in seen:
            # First occurrence wins
            continue
        seen.add(attr)
        mapping.append((idx, attr))

    if ignored:
        logger.debug("interchange_headers_ignored", extra={"headers": ignored})

    rows: list[SettlementRow] = []
    for cells in body:
        if _is_blank(cells):
            continue
        values: dict[str, str] = {}
        for idx, attr in mapping:
            text = _cell_text(cells[idx]) if idx < len(cells) else ""
            if attr in DATE_ATTRIBUTES:
                text = format_date(text)
            values[attr] = text
        rows.append(SettlementRow(row_id=str(len(rows) + 1), **values))

    logger.info("interchange_rows_imported", extra={
        "row_count": len(rows),
        "mapped_columns": len(mapping),
    })
    return rows


def import_rows(text: str, delimiter: str = ",") -> list[SettlementRow]:
    """
    Parse interchange text into SettlementRows.

    The first non-blank line is the header. Empty text yields ``[]``.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), delimiter=delimiter)
    header: list[str] | None = None
    for cells in reader:
        if not _is_blank(cells):
            header = cells
            break
    if header is None:
        return []
    return rows_from_table(header, reader)


def export_rows(
    rows: Sequence[SettlementRow],
    delimiter: str = ",",
    quote_all: bool = True,
) -> str:
    """Render SettlementRows as interchange text, header first."""
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        quoting=csv.QUOTE_ALL if quote_all else csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writerow([header for header, _ in EXPORT_COLUMNS])
    for row in rows:
        writer.writerow([getattr(row, attr) for _, attr in EXPORT_COLUMNS])
    return buffer.getvalue()
