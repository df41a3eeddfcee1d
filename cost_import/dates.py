"""
dates.py — calendar date disambiguation for imported cost rows

parse_date() is a pure function of its input: the same string always gives
the same date, whatever else is in the file.

Rule order (first match wins):
    1. ISO, year first:        2024-01-15, 2024/1/5, 2024-01-15T10:30:00Z
    2. Slash/dot, year last:   15/01/2024, 01/15/2024, 15.01.2024
         first number > 12  -> day-first
         second number > 12 -> month-first
         both <= 12         -> month-first (03/05/2024 is 5 March)
       an impossible date falls back to the other reading
    3. Named month:            January 15, 2024 / 15 Jan 2024 / Jan 15, 2024
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from cost_import.errors import InvalidDateError

ISO_RE = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})")
NUMERIC_RE = re.compile(r"^(\d{1,2})[/.](\d{1,2})[/.](\d{4})")
MONTH_FIRST_RE = re.compile(r"^([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})$")
DAY_FIRST_RE = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?,?\s+(\d{4})$")

MONTH_NAMES = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}


def _build(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_iso(value: str) -> Optional[date]:
    m = ISO_RE.match(value)
    if not m:
        return None
    return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def _parse_numeric(value: str) -> Optional[date]:
    m = NUMERIC_RE.match(value)
    if not m:
        return None
    a, b, year = int(m.group(1)), int(m.group(2)), int(m.group(3))

    if a > 12:
        readings = [(b, a), (a, b)]       # (month, day): day-first
    else:
        readings = [(a, b), (b, a)]       # month-first, also the ambiguous default

    for month, day in readings:
        parsed = _build(year, month, day)
        if parsed is not None:
            return parsed
    return None


def _parse_named_month(value: str) -> Optional[date]:
    m = MONTH_FIRST_RE.match(value)
    if m:
        month_name, day, year = m.group(1), m.group(2), m.group(3)
    else:
        m = DAY_FIRST_RE.match(value)
        if not m:
            return None
        day, month_name, year = m.group(1), m.group(2), m.group(3)

    month = MONTH_NAMES.get(month_name.lower())
    if month is None:
        return None
    return _build(int(year), month, int(day))


def parse_date(raw: str) -> date:
    """Resolve one raw date string to a calendar date or raise InvalidDateError."""
    value = raw.strip()
    for rule in (_parse_iso, _parse_numeric, _parse_named_month):
        parsed = rule(value)
        if parsed is not None:
            return parsed
    raise InvalidDateError(raw)
