"""Training-log inputs and projected progression targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from plan_engine.models.weeks import WeekIndex


@dataclass(frozen=True)
class LoggedSet:
    """One logged set. Values are kept as received; bad data counts as zero load."""

    weight_kg: Any
    reps: Any
    rpe: float | None = None


@dataclass(frozen=True)
class WeeklyLogSummary:
    week_index: int
    sets: tuple[LoggedSet, ...] = field(default_factory=tuple)
    zone2_minutes: float | None = None


@dataclass(frozen=True)
class WeeklyAggregate:
    """Logged totals for one week."""

    week_index: WeekIndex
    load_kg: int
    zone2_minutes: float


@dataclass(frozen=True)
class ConditioningFloor:
    per_week_minutes: int
    session_count: int


@dataclass(frozen=True)
class ProgressionTarget:
    week_index: WeekIndex
    total_load_kg: int
    zone2_minutes: int
    focus_notes: str
    is_deload: bool
