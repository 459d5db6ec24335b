"""
Typed exception hierarchy for the settlement packages.

Every error has a typed class, a class-level ``code`` attribute that is
machine-readable, and structured instance attributes rather than a message
string alone. Callers catch by type and read ``e.code``; the structured
logger copies public attributes of a logged exception into the log line.

    SettlementError (base)
    |
    +-- ConfigurationError
    |
    +-- InterchangeError
        +-- SourceNotFoundError
        +-- UnsupportedSourceError

Category        | Code                   | When Raised
----------------|------------------------|-----------------------------------
Configuration   | INVALID_CONFIGURATION  | Settings file malformed or invalid
----------------|------------------------|-----------------------------------
Interchange     | INTERCHANGE_ERROR      | Tabular source could not be read
                | SOURCE_NOT_FOUND       | Source file does not exist
                | UNSUPPORTED_SOURCE     | File suffix has no reader

The allocation engines never raise for malformed row data; unparsable numbers
become zero and unparsable dates become ``NOT_APPLICABLE``. These exceptions
belong to the file and configuration boundary only.
"""

from __future__ import annotations


class SettlementError(Exception):
    """
    Base exception for all settlement errors.

    All subclasses carry a ``code`` class attribute.
    """

    code: str = "SETTLEMENT_ERROR"


class ConfigurationError(SettlementError):
    """Settings file could not be parsed, or a setting has an invalid value."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, setting: str, reason: str, source: str | None = None):
        self.setting = setting
        self.reason = reason
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"Invalid setting {setting!r}{where}: {reason}")


class InterchangeError(SettlementError):
    """A tabular source could not be read."""

    code: str = "INTERCHANGE_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read {source}: {reason}")


class SourceNotFoundError(InterchangeError):
    """The source file does not exist."""

    code: str = "SOURCE_NOT_FOUND"

    def __init__(self, source: str):
        super().__init__(source, "file not found")


class UnsupportedSourceError(InterchangeError):
    """No reader is registered for the source file's suffix."""

    code: str = "UNSUPPORTED_SOURCE"

    def __init__(self, source: str, suffix: str):
        self.suffix = suffix
        super().__init__(source, f"unsupported file type {suffix!r}")
