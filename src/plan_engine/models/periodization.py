"""Periodization framework models."""

from __future__ import annotations

from dataclasses import dataclass, field

from plan_engine.models.enums import PeriodizationPhase
from plan_engine.models.weeks import WeekNumber


@dataclass(frozen=True)
class PeriodizationBlock:
    """A labeled training block.

    ``start_week``/``end_week`` are inclusive 1-based week numbers.
    """

    block_number: int
    block_type: PeriodizationPhase
    start_week: WeekNumber
    end_week: WeekNumber
    volume_target: str
    intensity_target: str
    strength_reps: str
    accessory_reps: str
    strength_rpe: float
    accessory_rpe: float

    @property
    def duration_weeks(self) -> int:
        return self.end_week - self.start_week + 1

    def contains(self, week_number: int) -> bool:
        return self.start_week <= week_number <= self.end_week


@dataclass(frozen=True)
class PeriodizationFramework:
    """Ordered, gap-free sequence of blocks covering weeks 1..total_weeks."""

    total_weeks: int
    blocks: tuple[PeriodizationBlock, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BlockGuidelines:
    """Coaching prose for one periodization phase."""

    volume: str
    intensity: str
    rep_ranges: str
    rpe: str
    description: str
