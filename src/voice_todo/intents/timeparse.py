# src/voice_todo/intents/timeparse.py

"""
Relative time expressions -> calendar dates.

resolve_time_expression("3rd week") -> "2026-11-09" (relative to now).
Rules are checked in a fixed order and the first match wins; anything that
cannot be resolved comes back unchanged.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
# Names are matched in this order; the first one found in the phrase wins.
_WEEKDAY_SCAN_ORDER = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

_ORDINAL_WEEK_RE = re.compile(r"(\d+)(?:st|nd|rd|th)\s*week")
_WEEKS_RE = re.compile(r"(\d+)\s*weeks?")
_MONTHS_RE = re.compile(r"(\d+)\s*months?")
_DAYS_RE = re.compile(r"(\d+)\s*days?")

# Generic fallbacks, tried in order. Formats without a year take now's year.
_DATED_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)
_YEARLESS_FORMATS = (
    "%m/%d",
    "%B %d",
    "%b %d",
    "%d %B",
    "%d %b",
)
_ORDINAL_SUFFIX_RE = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b")


def _as_date(now: datetime | date | None) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def add_months(base: date, months: int) -> date:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return base.replace(year=year, month=month, day=min(base.day, last_day))


def _next_weekday(base: date, target: int, *, force_next: bool) -> date:
    days_ahead = target - base.weekday()
    if force_next:
        days_ahead += 7
    elif days_ahead <= 0:
        days_ahead += 7
    return base + timedelta(days=days_ahead)


def _parse_literal_date(expression: str, today: date) -> date | None:
    cleaned = _ORDINAL_SUFFIX_RE.sub(r"\1", expression.strip())
    cleaned = " ".join(cleaned.split())

    # ISO datetimes ("2026-12-15T09:30:00Z") keep only the date part.
    iso = cleaned.replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(iso).date()
    except ValueError:
        pass

    for fmt in _DATED_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    for fmt in _YEARLESS_FORMATS:
        try:
            # Parse with an explicit leap year so "Feb 29" survives.
            parsed = datetime.strptime(f"2000 {cleaned}", f"%Y {fmt}").date()
        except ValueError:
            continue
        try:
            return parsed.replace(year=today.year)
        except ValueError:
            return None
    return None


def resolve_time_expression(expression: str, now: datetime | date | None = None) -> str:
    today = _as_date(now)
    try:
        resolved = _resolve(expression, today)
    except (OverflowError, ValueError):
        # e.g. "999999 months" runs past date.max
        return expression
    return expression if resolved is None else resolved


def _resolve(expression: str, today: date) -> str | None:
    lower = expression.lower().strip()

    if "today" in lower:
        return today.strftime(DATE_FORMAT)

    if "tomorrow" in lower:
        return (today + timedelta(days=1)).strftime(DATE_FORMAT)

    if "next week" in lower or "second week" in lower:
        return (today + timedelta(weeks=1)).strftime(DATE_FORMAT)

    # "3rd week" means three weeks out (1st week == next week).
    m = _ORDINAL_WEEK_RE.search(lower)
    if m:
        return (today + timedelta(weeks=int(m.group(1)))).strftime(DATE_FORMAT)

    m = _WEEKS_RE.search(lower)
    if m:
        return (today + timedelta(weeks=int(m.group(1)))).strftime(DATE_FORMAT)

    if "next month" in lower:
        return add_months(today, 1).strftime(DATE_FORMAT)

    m = _MONTHS_RE.search(lower)
    if m:
        return add_months(today, int(m.group(1))).strftime(DATE_FORMAT)

    for name in _WEEKDAY_SCAN_ORDER:
        if name in lower:
            target = _next_weekday(today, WEEKDAYS.index(name), force_next="next" in lower)
            return target.strftime(DATE_FORMAT)

    m = _DAYS_RE.search(lower)
    if m:
        return (today + timedelta(days=int(m.group(1)))).strftime(DATE_FORMAT)

    if any(ch.isdigit() for ch in expression):
        parsed = _parse_literal_date(expression, today)
        if parsed is not None:
            return parsed.strftime(DATE_FORMAT)

    return None
