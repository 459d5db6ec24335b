"""
Dates -- Fixed-format calendar date parsing and rendering.

Responsibility:
    Parse ``DD-MM-YYYY`` text into ``datetime.date`` and render dates back to
    that shape. This is the only date contract the settlement engines need.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - No time-zone or locale handling; purely numeric field extraction.
    - ``format_date`` never raises; unparsable text is returned unchanged.
    - ``parse_date`` never raises; anything that is not a real calendar day
      in ``DD-MM-YYYY`` shape yields ``None``.
"""

from __future__ import annotations

import re
from datetime import date

DATE_FORMAT = "%d-%m-%Y"

# Canonical rendering: two-digit day and month, four-digit year.
_CANONICAL = re.compile(r"^\d{2}-\d{2}-\d{4}$")
# Accepted by parse_date: one- or two-digit day and month.
_DAY_FIRST = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
# Extra shapes recognized only when normalizing for display or import.
_DAY_FIRST_ALT = re.compile(r"^(\d{1,2})[/.](\d{1,2})[/.](\d{4})$")
_ISO = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def _build(year: str, month: str, day: str) -> date | None:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_date(text: str | None) -> date | None:
    """
    Parse ``DD-MM-YYYY`` into a date.

    Postconditions:
        - Returns None for empty text, any other shape, or an impossible
          calendar date such as ``31-02-2024``.
    """
    if not text:
        return None
    match = _DAY_FIRST.match(text.strip())
    if match is None:
        return None
    day, month, year = match.groups()
    return _build(year, month, day)


def render_date(value: date) -> str:
    """Render a date as ``DD-MM-YYYY``."""
    return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"


def _parse_for_display(text: str) -> date | None:
    parsed = parse_date(text)
    if parsed is not None:
        return parsed
    match = _DAY_FIRST_ALT.match(text)
    if match is not None:
        day, month, year = match.groups()
        return _build(year, month, day)
    match = _ISO.match(text)
    if match is not None:
        year, month, day = match.groups()
        return _build(year, month, day)
    return None


def format_date(text: str | None) -> str:
    """
    Normalize date text to ``DD-MM-YYYY`` on a best-effort basis.

    Text already in canonical shape is returned unchanged (even if it names an
    impossible day). Otherwise the text is parsed -- day-first with ``-``,
    ``/`` or ``.`` separators, or ISO ``YYYY-MM-DD`` -- and re-rendered
    zero-padded. Anything else comes back as given.
    """
    if text is None:
        return ""
    stripped = text.strip()
    if _CANONICAL.match(stripped):
        return stripped
    parsed = _parse_for_display(stripped)
    if parsed is None:
        return text
    return render_date(parsed)
