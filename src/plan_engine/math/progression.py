"""Progression projection: weekly total-load and conditioning targets.

Logged weeks are ground truth; unlogged future weeks are projected from the
latest logged load with a fixed weekly progression rate, reduced on deload
weeks. Conditioning targets are a floor derived from the template.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
import pandas as pd

from plan_engine.math.deload import deload_weeks
from plan_engine.models.enums import (
    DELOAD_LOAD_RATE,
    FOCUS_NOTE_DELOAD,
    FOCUS_NOTE_LOGGED,
    FOCUS_NOTE_PROGRESSION,
    MIN_CONDITIONING_MINUTES,
    MIN_CONDITIONING_SESSIONS,
    MIN_WEEKLY_LOAD_KG,
    MINUTES_PER_CONDITIONING_SESSION,
    SEED_WEEKLY_LOAD_KG,
    WEEKLY_PROGRESSION_RATE,
    BlockType,
)
from plan_engine.models.progression import (
    ConditioningFloor,
    LoggedSet,
    ProgressionTarget,
    WeeklyAggregate,
    WeeklyLogSummary,
)
from plan_engine.models.template import Template
from plan_engine.models.weeks import WeekIndex

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _set_values(logged_set: LoggedSet | Mapping[str, Any]) -> tuple[Any, Any]:
    if isinstance(logged_set, Mapping):
        return logged_set.get("weight_kg", logged_set.get("weightKg")), logged_set.get("reps")
    return getattr(logged_set, "weight_kg", None), getattr(logged_set, "reps", None)


def _numeric(values: Iterable[Any]) -> np.ndarray:
    """Coerce to float; anything non-numeric or non-finite becomes NaN."""
    cleaned = [None if isinstance(v, bool) else v for v in values]
    series = pd.to_numeric(pd.Series(cleaned, dtype=object), errors="coerce")
    arr = series.to_numpy(dtype=np.float64, copy=True)
    arr[~np.isfinite(arr)] = np.nan
    return arr


def load_kg(sets: Iterable[LoggedSet | Mapping[str, Any]]) -> int:
    """Total weight x reps over *sets*, rounded to the nearest kg.

    Sets whose weight or reps are not numeric contribute nothing.
    """
    pairs = [_set_values(s) for s in sets]
    if not pairs:
        return 0
    weights = _numeric(p[0] for p in pairs)
    reps = _numeric(p[1] for p in pairs)
    products = weights * reps
    return round_half_up(float(np.nansum(products)))


def aggregate_logs(logs: Iterable[WeeklyLogSummary]) -> dict[WeekIndex, WeeklyAggregate]:
    """Sum load and measured Zone-2 minutes per logged week.

    Several summaries may report the same week; each summary's load is
    rounded before the weekly sum. Summaries without an integral week
    index are skipped.
    """
    rows = []
    for log in logs:
        week = _numeric([log.week_index])[0]
        if np.isnan(week) or not float(week).is_integer():
            logger.debug("Skipping log summary with invalid week index %r", log.week_index)
            continue
        zone2 = _numeric([log.zone2_minutes])[0] if log.zone2_minutes is not None else np.nan
        rows.append({
            "week_index": int(week),
            "load": load_kg(log.sets),
            "zone2": zone2,
        })
    if not rows:
        return {}

    frame = pd.DataFrame(rows)
    weekly = frame.groupby("week_index", sort=True).agg(
        load=("load", "sum"),
        zone2=("zone2", lambda s: float(np.nansum(s.to_numpy(dtype=np.float64)))),
    )
    return {
        WeekIndex(int(week)): WeeklyAggregate(
            week_index=WeekIndex(int(week)),
            load_kg=int(row["load"]),
            zone2_minutes=float(row["zone2"]),
        )
        for week, row in weekly.iterrows()
    }


def conditioning_floor(template: Template) -> ConditioningFloor:
    """Weekly conditioning-minutes floor implied by the template.

    At least 90 minutes and two sessions per week, and never less than
    30 minutes per counted session.
    """
    planned_minutes = sum(
        block.duration_minutes
        for day in template.pattern
        for block in day.blocks_of_type(BlockType.CONDITIONING)
    )
    days_with_conditioning = sum(
        1 for day in template.pattern if day.has_block_type(BlockType.CONDITIONING)
    )

    sessions = max(MIN_CONDITIONING_SESSIONS, days_with_conditioning)
    minutes = max(MIN_CONDITIONING_MINUTES, planned_minutes)
    return ConditioningFloor(
        per_week_minutes=max(minutes, sessions * MINUTES_PER_CONDITIONING_SESSION),
        session_count=sessions,
    )


def project_targets(
    template: Template,
    total_weeks: int,
    logs: Iterable[WeeklyLogSummary],
) -> list[ProgressionTarget]:
    """Project a load and conditioning target for every week of the program.

    Args:
        template: Plan template (source of the conditioning floor).
        total_weeks: Program length; one target per week index 0..n-1.
        logs: Logged weekly summaries, any order.

    Returns:
        Targets ordered by week index. Never raises on malformed sets.
    """
    by_week = aggregate_logs(logs)
    deloads = deload_weeks(total_weeks)
    floor = conditioning_floor(template)

    last_logged_week = max(by_week) if by_week else -1
    rolling_load = by_week[last_logged_week].load_kg if by_week else SEED_WEEKLY_LOAD_KG

    targets: list[ProgressionTarget] = []
    for week_index in range(total_weeks):
        is_deload = week_index in deloads
        logged = by_week.get(WeekIndex(week_index))

        if logged is not None:
            rolling_load = logged.load_kg
        elif week_index > last_logged_week:
            rate = DELOAD_LOAD_RATE if is_deload else WEEKLY_PROGRESSION_RATE
            rolling_load = round_half_up(rolling_load * rate)

        if logged is not None:
            notes = FOCUS_NOTE_LOGGED
        elif is_deload:
            notes = FOCUS_NOTE_DELOAD
        else:
            notes = FOCUS_NOTE_PROGRESSION

        targets.append(ProgressionTarget(
            week_index=WeekIndex(week_index),
            total_load_kg=max(rolling_load, MIN_WEEKLY_LOAD_KG),
            zone2_minutes=floor.per_week_minutes,
            focus_notes=notes,
            is_deload=is_deload,
        ))

    return targets
