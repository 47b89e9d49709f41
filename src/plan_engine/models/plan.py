"""Plan aggregate, dated workout instances and the calendar projection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from plan_engine.models.enums import SESSION_KIND, PlanStatus
from plan_engine.models.template import Block, Template
from plan_engine.models.weeks import WeekIndex, WeekNumber


@dataclass(frozen=True)
class WorkoutPayload:
    """Copy of a day template's blocks as prescribed for one session."""

    workout_id: str
    focus: str
    blocks: tuple[Block, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class WorkoutInstance:
    """One concrete training session of a plan.

    ``day_index`` is global across the program
    (``week_index * days_per_week + session_index``); ``session_date`` stays
    None until the plan has a start date.
    """

    id: str
    plan_id: str
    user_id: str
    week_index: WeekIndex
    week_number: WeekNumber
    day_index: int
    session_date: date | None
    title: str
    focus: str
    is_deload: bool
    duration_minutes: int
    payload: WorkoutPayload
    template_day_ref: str = ""
    kind: str = SESSION_KIND


@dataclass(frozen=True)
class CalendarDay:
    day_index: int
    iso_date: str  # "" until the plan has a start date
    workout_id: str
    is_deload: bool
    focus: str


@dataclass(frozen=True)
class CalendarWeek:
    week_index: WeekIndex
    start_date: str  # "" until the plan has a start date
    days: tuple[CalendarDay, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Calendar:
    """Read-optimized per-plan projection of the workout instances."""

    plan_id: str
    weeks: tuple[CalendarWeek, ...] = field(default_factory=tuple)

    def week(self, week_index: int) -> CalendarWeek | None:
        for week in self.weeks:
            if week.week_index == week_index:
                return week
        return None


@dataclass(frozen=True)
class WorkoutScheduleUpdate:
    """Date change for one persisted workout after rescheduling."""

    id: str
    session_date: date
    week_index: WeekIndex
    day_index: int
    is_deload: bool


@dataclass(frozen=True)
class Plan:
    """Aggregate root of one generated training program."""

    id: str
    user_id: str
    duration_weeks: int
    days_per_week: int
    preferred_days: tuple[str, ...] = field(default_factory=tuple)
    start_date: date | None = None
    status: PlanStatus = PlanStatus.DRAFT
    template: Template | None = None
    calendar: Calendar | None = None
    minutes_per_session: int | None = None
    title: str = ""
