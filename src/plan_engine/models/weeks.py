"""Week numbering types.

Calendars, workout instances and progression targets count weeks from 0
(``WeekIndex``); periodization blocks count them from 1 (``WeekNumber``).
Conversions between the two go through the helpers below.
"""

from __future__ import annotations

from typing import NewType

WeekIndex = NewType("WeekIndex", int)
WeekNumber = NewType("WeekNumber", int)


def to_week_number(week_index: int) -> WeekNumber:
    """0-based week index -> 1-based week number."""
    return WeekNumber(week_index + 1)


def to_week_index(week_number: int) -> WeekIndex:
    """1-based week number -> 0-based week index."""
    return WeekIndex(week_number - 1)
