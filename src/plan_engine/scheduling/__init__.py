"""Scheduling: calendar expansion, rescheduling and workout edits."""

from plan_engine.scheduling.calendar import (
    ScheduleOptions,
    build_calendar,
    expand_template,
    generate_instances,
    generate_week_instances,
    training_day_indices,
)
from plan_engine.scheduling.rebuild import ScheduleResult, build_plan_schedule

__all__ = [
    "ScheduleOptions",
    "ScheduleResult",
    "build_calendar",
    "build_plan_schedule",
    "expand_template",
    "generate_instances",
    "generate_week_instances",
    "training_day_indices",
]
