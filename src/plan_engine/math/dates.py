"""Calendar date helpers shared by expansion, rescheduling and lookups.

Dates are plain ``datetime.date`` values (UTC calendar days). Weekday
indices follow the 0 = Sunday .. 6 = Saturday convention used by the
preferred-day tokens.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If *value* is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        raise ValueError(f"Invalid date string: {value!r}")
    return date.fromisoformat(value)


def format_iso_date(value: date | None) -> str:
    """ISO string for *value*, or "" when there is no date."""
    return value.isoformat() if value is not None else ""


def shift_date(start: date, offset_days: int) -> date:
    return start + timedelta(days=offset_days)


def weekday_index(value: date) -> int:
    """Sunday-based weekday index (0 = Sun .. 6 = Sat)."""
    return (value.weekday() + 1) % 7


def offset_from_weekday(day_of_week: int, start_day_of_week: int) -> int:
    """Days from *start_day_of_week* forward to the next *day_of_week* (0-6)."""
    diff = day_of_week - start_day_of_week
    return diff if diff >= 0 else diff + 7


@dataclass(frozen=True)
class TodayIndex:
    """Position of "today" within a dated program."""

    day_index: int
    iso_date: str
    is_before_start: bool
    is_after_end: bool


def today_index(
    start_date: str | date,
    timezone: str,
    total_days: int,
    now: datetime | None = None,
) -> TodayIndex:
    """Locate the current local day within a program that began on *start_date*.

    ``day_index`` is clamped to ``[-1, total_days - 1]``.

    Args:
        start_date: Program start (calendar date).
        timezone: IANA timezone name of the user.
        total_days: Number of calendar days the program spans.
        now: Reference instant; defaults to the current time. Naive values
            are treated as UTC.
    """
    start = parse_iso_date(start_date)
    tz = ZoneInfo(timezone)
    if now is None:
        now = datetime.now(tz=ZoneInfo("UTC"))
    elif now.tzinfo is None:
        now = now.replace(tzinfo=ZoneInfo("UTC"))
    local_today = now.astimezone(tz).date()

    diff = (local_today - start).days
    clamped = max(-1, min(diff, total_days - 1))
    return TodayIndex(
        day_index=clamped,
        iso_date=local_today.isoformat(),
        is_before_start=diff < 0,
        is_after_end=diff >= total_days,
    )
