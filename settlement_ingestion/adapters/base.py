"""
Source adapter protocol.

Contract:
    SourceAdapter.read() returns the SettlementRows held in a file.
    File I/O only; no calculation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from settlement_kernel.domain.records import SettlementRow


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for reading a tabular file into settlement rows."""

    suffixes: tuple[str, ...]

    def read(self, source_path: Path, options: dict[str, Any]) -> list[SettlementRow]:
        ...
