"""Calendar expansion: turns a weekly template into dated workout instances.

Each week of the program gets ``days_per_week`` sessions placed on the
training weekdays. Day templates rotate over the session slots
(``pattern[session_index % len(pattern)]``) so A/B templates shorter than
the weekly session count are supported. Deload weeks receive reduced
volume/intensity copies of the day's blocks.
"""

from __future__ import annotations

import dataclasses
import logging
import re
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from plan_engine.math.dates import (
    format_iso_date,
    offset_from_weekday,
    parse_iso_date,
    shift_date,
    weekday_index,
)
from plan_engine.math.deload import deload_weeks
from plan_engine.models.enums import (
    DEFAULT_TRAINING_DAYS,
    DELOAD_CONDITIONING_FRACTION,
    DELOAD_INTENSITY_CUE,
    DELOAD_VOLUME_CUE,
    FALLBACK_WEEKDAY,
    MAX_SESSION_ESTIMATE_MIN,
    MINUTES_PER_SET_ESTIMATE,
    WEEKDAY_TOKENS,
    BlockType,
)
from plan_engine.models.plan import (
    Calendar,
    CalendarDay,
    CalendarWeek,
    WorkoutInstance,
    WorkoutPayload,
)
from plan_engine.models.template import Block, Template
from plan_engine.models.weeks import WeekIndex, to_week_index, to_week_number

logger = logging.getLogger(__name__)

_WORKOUT_ID_NAMESPACE = uuid.UUID("8b0f7c4e-3d52-4a8e-9a71-5c2f0d6e1b94")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class ScheduleOptions:
    """Scheduling parameters for expanding a template into a plan."""

    plan_id: str
    user_id: str
    weeks: int
    days_per_week: int
    start_date: date | str | None = None  # date or "YYYY-MM-DD"
    preferred_days: tuple[str, ...] = field(default_factory=tuple)


def create_template_id(plan_id: str) -> str:
    """Stable template id (``mc_`` + 12 hex chars) for a plan."""
    return "mc_" + uuid.uuid5(_WORKOUT_ID_NAMESPACE, f"template:{plan_id}").hex[:12]


def create_workout_id(plan_id: str, day_index: int) -> str:
    return str(uuid.uuid5(_WORKOUT_ID_NAMESPACE, f"{plan_id}:{day_index}"))


def weekday_for_token(token: str) -> int:
    """Sunday-based index for a weekday token ("mon", "Tue", ...); unknown -> Monday."""
    return WEEKDAY_TOKENS.get(token.strip().lower()[:3], FALLBACK_WEEKDAY)


def training_day_indices(
    days_per_week: int, preferred_days: Sequence[str] | None = None
) -> list[int]:
    """Weekday indices (0 = Sun .. 6 = Sat) of the weekly training sessions.

    Without preferred days the built-in pattern for ``days_per_week`` is used
    (Mon/Wed/Fri for unknown counts). Preferred days are sorted and truncated
    to ``days_per_week``; too few preferred days fall back to the built-in
    pattern so every session slot has a weekday.
    """
    default = list(DEFAULT_TRAINING_DAYS.get(days_per_week, DEFAULT_TRAINING_DAYS[3]))
    if not preferred_days:
        return default

    if len(preferred_days) < days_per_week:
        logger.warning(
            "Only %d preferred days for %d sessions per week, using default pattern",
            len(preferred_days), days_per_week,
        )
        return default
    if len(preferred_days) > days_per_week:
        logger.debug(
            "Truncating preferred days %s to %d sessions per week",
            list(preferred_days), days_per_week,
        )
    indices = sorted(weekday_for_token(day) for day in preferred_days)
    return indices[:days_per_week]


def session_offsets(
    start_date: date, days_per_week: int, preferred_days: Sequence[str] | None
) -> list[int]:
    """Days from *start_date* to each weekly session within its program week."""
    start_dow = weekday_index(start_date)
    return [
        offset_from_weekday(dow, start_dow)
        for dow in training_day_indices(days_per_week, preferred_days)
    ]


# ---------------------------------------------------------------------------
# Deload transform and duration estimate
# ---------------------------------------------------------------------------


def _reduce_minutes(reps: str) -> str:
    if "min" not in reps:
        return reps
    match = _LEADING_INT_RE.match(reps)
    if match is None:
        return reps
    return f"{int(int(match.group(1)) * DELOAD_CONDITIONING_FRACTION)} min"


def apply_deload(blocks: Iterable[Block]) -> tuple[Block, ...]:
    """Deload copy of *blocks*.

    Strength/accessory work drops one set per exercise (floor 1);
    minute-valued conditioning work is cut by 20 %.
    """
    result = []
    for block in blocks:
        if block.type in (BlockType.STRENGTH, BlockType.ACCESSORY):
            exercises = tuple(
                dataclasses.replace(
                    ex,
                    sets=max(1, ex.sets - 1),
                    cues=ex.cues + (DELOAD_VOLUME_CUE,),
                )
                for ex in block.exercises
            )
        elif block.type == BlockType.CONDITIONING:
            exercises = tuple(
                dataclasses.replace(
                    ex,
                    reps=_reduce_minutes(ex.reps),
                    cues=ex.cues + (DELOAD_INTENSITY_CUE,),
                )
                for ex in block.exercises
            )
        else:
            exercises = block.exercises
        result.append(dataclasses.replace(block, exercises=exercises))
    return tuple(result)


def estimate_duration(blocks: Iterable[Block]) -> int:
    """Session estimate of ~3 minutes per set, capped at 90 minutes."""
    minutes = sum(block.total_sets * MINUTES_PER_SET_ESTIMATE for block in blocks)
    return min(MAX_SESSION_ESTIMATE_MIN, minutes)


# ---------------------------------------------------------------------------
# Instance generation
# ---------------------------------------------------------------------------


def _build_instance(
    template: Template,
    options: ScheduleOptions,
    week_index: int,
    session_index: int,
    offsets: Sequence[int] | None,
    is_deload: bool,
) -> WorkoutInstance:
    day = template.day_for_session(session_index)
    day_index = week_index * options.days_per_week + session_index
    workout_id = create_workout_id(options.plan_id, day_index)

    session_date = None
    if options.start_date is not None and offsets is not None:
        session_date = shift_date(options.start_date, week_index * 7 + offsets[session_index])

    # Frozen blocks: the tuple copy is the instance's own payload
    blocks = tuple(day.blocks)
    if is_deload:
        blocks = apply_deload(blocks)

    week_number = to_week_number(week_index)
    return WorkoutInstance(
        id=workout_id,
        plan_id=options.plan_id,
        user_id=options.user_id,
        week_index=WeekIndex(week_index),
        week_number=week_number,
        day_index=day_index,
        session_date=session_date,
        title=f"Week {week_number} - {day.focus}",
        focus=day.focus,
        is_deload=is_deload,
        duration_minutes=estimate_duration(blocks),
        payload=WorkoutPayload(workout_id=workout_id, focus=day.focus, blocks=blocks),
        template_day_ref=f"{template.id}_day_{day.day_index}" if template.id else "",
    )


def _with_parsed_start(options: ScheduleOptions) -> ScheduleOptions:
    """Copy of *options* whose start date is a ``date`` (ISO strings are parsed)."""
    if options.start_date is None:
        return options
    return dataclasses.replace(options, start_date=parse_iso_date(options.start_date))


def _offsets_for(options: ScheduleOptions) -> list[int] | None:
    if options.start_date is None:
        return None
    return session_offsets(options.start_date, options.days_per_week, options.preferred_days)


def generate_instances(template: Template, options: ScheduleOptions) -> list[WorkoutInstance]:
    """Expand *template* into ``weeks * days_per_week`` workout instances.

    Args:
        template: Weekly template (pattern length 1..n, rotated).
        options: Scheduling parameters.

    Returns:
        Instances ordered by global ``day_index`` (0 .. weeks*days_per_week-1).
    """
    if not template.pattern:
        raise ValueError("Template pattern must contain at least one day")

    options = _with_parsed_start(options)
    deloads = deload_weeks(options.weeks)
    offsets = _offsets_for(options)

    instances: list[WorkoutInstance] = []
    for week_index in range(options.weeks):
        is_deload = week_index in deloads
        for session_index in range(options.days_per_week):
            instances.append(_build_instance(
                template, options, week_index, session_index, offsets, is_deload,
            ))

    logger.debug(
        "Generated %d workouts for plan %s (%d weeks x %d sessions)",
        len(instances), options.plan_id, options.weeks, options.days_per_week,
    )
    return instances


def generate_week_instances(
    template: Template,
    week_number: int,
    options: ScheduleOptions,
) -> list[WorkoutInstance]:
    """Generate a single program week (1-based *week_number*).

    ``options.weeks`` is the full program length and decides whether the
    week is a deload week.
    """
    week_index = to_week_index(week_number)
    if not 0 <= week_index < max(options.weeks, 1):
        raise ValueError(
            f"Week {week_number} is outside plan range (1-{options.weeks})"
        )
    is_deload = week_index in deload_weeks(options.weeks)
    options = _with_parsed_start(options)
    offsets = _offsets_for(options)
    return [
        _build_instance(template, options, week_index, session_index, offsets, is_deload)
        for session_index in range(options.days_per_week)
    ]


# ---------------------------------------------------------------------------
# Calendar projection
# ---------------------------------------------------------------------------


def build_calendar(
    plan_id: str,
    instances: Sequence[WorkoutInstance],
    weeks: int,
    start_date: date | str | None = None,
) -> Calendar:
    """Group instances by week into the calendar projection."""
    start = parse_iso_date(start_date) if start_date else None
    calendar_weeks = []
    for week_index in range(weeks):
        week_start = shift_date(start, week_index * 7) if start else None
        days = tuple(
            CalendarDay(
                day_index=w.day_index,
                iso_date=format_iso_date(w.session_date),
                workout_id=w.id,
                is_deload=w.is_deload,
                focus=w.focus,
            )
            for w in instances
            if w.week_index == week_index
        )
        calendar_weeks.append(CalendarWeek(
            week_index=WeekIndex(week_index),
            start_date=format_iso_date(week_start),
            days=days,
        ))
    return Calendar(plan_id=plan_id, weeks=tuple(calendar_weeks))


def expand_template(
    template: Template, options: ScheduleOptions
) -> tuple[Template, Calendar, list[WorkoutInstance]]:
    """Attach identity to *template* and expand it into instances and a calendar."""
    stored = dataclasses.replace(
        template,
        id=template.id or create_template_id(options.plan_id),
        weeks=options.weeks,
        days_per_week=options.days_per_week,
    )
    instances = generate_instances(stored, options)
    calendar = build_calendar(options.plan_id, instances, options.weeks, options.start_date)
    logger.info(
        "Expanded template %s into %d workouts over %d weeks for plan %s",
        stored.id, len(instances), options.weeks, options.plan_id,
    )
    return stored, calendar, instances


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def workout_by_day_index(
    instances: Iterable[WorkoutInstance], day_index: int
) -> WorkoutInstance | None:
    for instance in instances:
        if instance.day_index == day_index:
            return instance
    return None


def workouts_for_week(
    instances: Iterable[WorkoutInstance], week_index: int
) -> list[WorkoutInstance]:
    return [w for w in instances if w.week_index == week_index]
