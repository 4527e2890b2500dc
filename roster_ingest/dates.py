"""
Roster Ingestion — Spreadsheet Dates

Joined dates arrive as text in several layouts, as native date cells, as
compact ``YYYYMMDD`` numbers, or as a spreadsheet serial day count. All of
them normalize to ISO ``YYYY-MM-DD``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Optional

# Day 0 of the spreadsheet serial calendar. Using 1899-12-30 absorbs the
# phantom 1900-02-29 for every date after February 1900.
SERIAL_EPOCH = date(1899, 12, 30)

# Six digits of serial days reach the year 4637.
MAX_SERIAL = 999999

# Numbers in this range are compact YYYYMMDD dates, not serials.
COMPACT_MIN = 19000101
COMPACT_MAX = 29991231

_SEPARATED = re.compile(r"^(\d{4})[-./](\d{1,2})[-./](\d{1,2})\.?$")
_COMPACT = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_SERIAL = re.compile(r"^\d{1,6}(\.\d+)?$")


def serial_to_date(serial: float) -> date:
    """
    Calendar date of a spreadsheet serial day count (time part dropped).
    Raises ValueError unless 0 < serial <= MAX_SERIAL.
    """
    if not 0 < serial <= MAX_SERIAL:
        raise ValueError(f"Serial day count {serial!r} out of range")
    return SERIAL_EPOCH + timedelta(days=int(serial))


def _safe_date(year: str, month: str, day: str) -> Optional[date]:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def _from_text(text: str) -> str:
    m = _SEPARATED.match(text) or _COMPACT.match(text)
    if m:
        parsed = _safe_date(*m.groups())
        return parsed.isoformat() if parsed else text

    if _SERIAL.match(text):
        serial = float(text)
        if serial <= 0:
            return ""
        try:
            return serial_to_date(serial).isoformat()
        except (OverflowError, ValueError):
            return text

    return text


def normalize_date(value: object) -> str:
    """
    ISO date for *value*, or "" when there is nothing to parse.

    Values that are not a recognized layout (including out-of-range
    numbers) are returned as stripped text rather than discarded.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        if value <= 0:
            return ""
        if float(value).is_integer() and COMPACT_MIN <= value <= COMPACT_MAX:
            return _from_text(str(int(value)))
        try:
            return serial_to_date(value).isoformat()
        except (OverflowError, ValueError):
            return str(value)

    text = str(value).strip()
    if not text:
        return ""
    return _from_text(text)
