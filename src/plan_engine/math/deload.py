"""Deload classification for dated programs.

The calendar marks fixed recovery weeks: the 3rd week of every program and,
for programs of 10+ weeks, also the 7th.
"""

from __future__ import annotations

from plan_engine.models.enums import DELOAD_WEEK_THRESHOLDS
from plan_engine.models.weeks import WeekIndex


def deload_weeks(total_weeks: int) -> frozenset[WeekIndex]:
    """0-based indices of the deload weeks in a program of *total_weeks*.

    Total over all integers; programs shorter than three weeks have none.
    """
    return frozenset(
        WeekIndex(week_index)
        for week_index, min_weeks in DELOAD_WEEK_THRESHOLDS
        if total_weeks >= min_weeks
    )


def is_deload_week(week_index: int, total_weeks: int) -> bool:
    return week_index in deload_weeks(total_weeks)
