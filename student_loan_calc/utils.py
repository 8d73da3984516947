"""Utility functions for the student loan calculator.

This module provides helpers for parsing user input into Python data types and
for handling dates: adding months, turning the free-form start date into a
``datetime.date`` and rendering the short month labels used on the schedule.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime
from typing import Optional, Union

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m", "%Y/%m/%d", "%m/%d/%Y")

# Latest start year whose schedule labels stay within datetime.date
MAX_START_YEAR = 9900


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_date(value: Union[date, str, None]) -> Optional[date]:
    """Parse a date given as an object or an ISO / ``MM/DD/YYYY`` string.

    Returns ``None`` for empty or unparseable values.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        return None
    # Drop a time component ("2025-09-01T00:00:00.000Z")
    text = str(value).strip().split("T", 1)[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_start_date(value: Union[date, str, None], today: Optional[date] = None) -> date:
    """Turn the form's start date into a ``date``.

    Accepts ``date``/``datetime`` objects and strings in ISO (``YYYY-MM-DD``,
    ``YYYY-MM``) or ``MM/DD/YYYY`` form. Empty or unparseable values, and
    years after :data:`MAX_START_YEAR`, fall back to ``today`` (the current
    date when not given) instead of raising.
    """
    parsed = parse_date(value)
    if parsed is None or parsed.year > MAX_START_YEAR:
        return today or date.today()
    return parsed


def format_month_label(base_date: date, month_offset: int) -> str:
    """Return the short month/year label of a schedule row (``"Jan 2025"``)."""
    dt = add_months(base_date, month_offset)
    return f"{calendar.month_abbr[dt.month]} {dt.year}"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Python's ``round`` uses banker's rounding (``round(2.5) == 2``); loan
    terms such as 0.125 years (1.5 months) must round up to 2 months.
    """
    return int(math.floor(value + 0.5))


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("15000") and shorthand with ``k``/``m`` suffixes
    (e.g., "15k" meaning 15_000). Commas are ignored. Raises ``ValueError``
    if conversion fails.
    """
    text = str(value).strip().lower().replace(",", "")
    factor = 1.0
    if text.endswith("k"):
        factor = 1_000.0
        text = text[:-1]
    elif text.endswith("m"):
        factor = 1_000_000.0
        text = text[:-1]
    try:
        return float(text) * factor
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {value}") from exc


def parse_fraction(value: str) -> float:
    """Parse a fraction given as ``"0.1"``, ``"10%"`` or ``"10"``.

    Values with a percent sign or greater than 1 are read as percentages.
    """
    text = str(value).strip()
    is_percent = text.endswith("%")
    if is_percent:
        text = text[:-1]
    try:
        number = float(text)
    except ValueError as exc:
        raise ValueError(f"Invalid percentage: {value}") from exc
    if is_percent or number > 1:
        number = number / 100
    return number
