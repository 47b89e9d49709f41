"""Schedule rebuilding: re-date existing workouts when a plan's start date changes.

Exercise content, deload flags and week/day indices of the instances are
kept; only ``session_date`` is recomputed and the calendar rebuilt.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from plan_engine.exceptions import InvalidStartDate, MissingTemplate
from plan_engine.math.dates import parse_iso_date, shift_date
from plan_engine.models.plan import (
    Calendar,
    Plan,
    WorkoutInstance,
    WorkoutScheduleUpdate,
)
from plan_engine.scheduling.calendar import build_calendar, session_offsets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleResult:
    calendar: Calendar
    updates: tuple[WorkoutScheduleUpdate, ...]
    instances: tuple[WorkoutInstance, ...]


def _coerce_start_date(start_date: str | date | None) -> date:
    if not start_date:
        raise InvalidStartDate(start_date)
    try:
        return parse_iso_date(start_date)
    except ValueError as exc:
        raise InvalidStartDate(start_date) from exc


def build_plan_schedule(
    plan: Plan,
    start_date: str | date,
    instances: Sequence[WorkoutInstance],
) -> ScheduleResult:
    """Re-date *instances* for a (new) plan start date.

    Each instance keeps its week; its weekday slot is recovered from
    ``day_index % days_per_week`` and placed on the first matching weekday
    on or after the start date's weekday within that week.

    Raises:
        InvalidStartDate: If *start_date* is empty or not a calendar date.
        MissingTemplate: If the plan has no template.
    """
    start = _coerce_start_date(start_date)
    if plan.template is None:
        raise MissingTemplate(plan.id)

    offsets = session_offsets(start, plan.days_per_week, plan.preferred_days)

    rescheduled: list[WorkoutInstance] = []
    for instance in instances:
        session_index = instance.day_index % plan.days_per_week if plan.days_per_week > 0 else 0
        offset = offsets[session_index] if session_index < len(offsets) else offsets[0]
        session_date = shift_date(start, instance.week_index * 7 + offset)
        rescheduled.append(dataclasses.replace(instance, session_date=session_date))

    weeks = plan.template.weeks or plan.duration_weeks
    calendar = build_calendar(plan.id, rescheduled, weeks, start)
    updates = tuple(
        WorkoutScheduleUpdate(
            id=w.id,
            session_date=w.session_date,
            week_index=w.week_index,
            day_index=w.day_index,
            is_deload=w.is_deload,
        )
        for w in rescheduled
    )

    logger.info(
        "Rescheduled %d workouts of plan %s from %s", len(rescheduled), plan.id, start,
    )
    return ScheduleResult(calendar=calendar, updates=updates, instances=tuple(rescheduled))
