"""
Structured JSON logging for the settlement packages.

Every logger lives under the ``settlement`` namespace. Records are written
one JSON object per line; run-scoped fields bound on ``LogContext`` (the
calculation run id, the source file, ...) are merged into each line, and
``extra=`` fields are copied as top-level keys.

Usage:
    from settlement_kernel.logging_config import LogContext, get_logger

    logger = get_logger("services.calculation")
    with LogContext.bind(run_id="a1b2c3"):
        logger.info("calculation_started", extra={"row_count": 12})
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

_LOGGER_PREFIX = "settlement"


# ---------------------------------------------------------------------------
# Run-scoped context
# ---------------------------------------------------------------------------

_EMPTY: Mapping[str, str] = MappingProxyType({})
_context: ContextVar[Mapping[str, str]] = ContextVar("settlement_log_context", default=_EMPTY)


class LogContext:
    """
    Fields merged into every log line emitted in the current context.

    Backed by one ContextVar holding a read-only mapping, so threads and
    asyncio tasks each see their own fields. Unknown field names are ignored.
    """

    FIELDS = ("run_id", "source")

    @classmethod
    def _merged(cls, values: dict[str, str | None]) -> Mapping[str, str]:
        current = dict(_context.get())
        for name, value in values.items():
            if name in cls.FIELDS and value is not None:
                current[name] = value
        return MappingProxyType(current)

    @classmethod
    def set(
        cls,
        *,
        run_id: str | None = None,
        source: str | None = None,
    ) -> None:
        """Set fields for the rest of the current context. None leaves a field as is."""
        _context.set(cls._merged({"run_id": run_id, "source": source}))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type[LogContext]]:
        """Set fields for the duration of a ``with`` block, then restore."""
        token = _context.set(cls._merged(fields))
        try:
            yield cls
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # Public attributes of SettlementError subclasses (source, setting, ...)
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, message, context, extras."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES:
                line.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            line.update(_exception_fields(record.exc_info[1]))
            line["traceback"] = self.formatException(record.exc_info)

        return json.dumps(line, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``settlement.<name>``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach one JSON handler to the ``settlement`` logger.

    Only the first call has any effect until ``reset_logging()``. The
    handler writes to ``stream`` (default stderr) unless one is supplied.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())

    root = logging.getLogger(_LOGGER_PREFIX)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(handler)


def reset_logging() -> None:
    """Undo ``configure_logging``. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_LOGGER_PREFIX)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    root.propagate = True
