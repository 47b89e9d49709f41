"""Periodization framework generation: phase blocks with training targets.

Two strategies, selected by experience level:
- Beginner: linear accumulation with a deload every 4th week.
- Intermediate: block periodization in 3-week (short programs) or 4-week
  cycles of accumulation -> intensification -> deload, with tail handling
  for the weeks that do not fill a whole cycle.

All week numbers in this module are 1-based (``WeekNumber``).

References:
    Issurin (2010), New horizons for the methodology and physiology of
        training periodization.
    Helms et al. (2016), Application of the repetitions in reserve-based
        rating of perceived exertion scale for resistance training.
"""

from __future__ import annotations

from plan_engine.models.enums import (
    BEGINNER_DELOAD_INTERVAL,
    LONG_CYCLE_THRESHOLD_WEEKS,
    LONG_CYCLE_WEEKS,
    SHORT_CYCLE_WEEKS,
    ExperienceLevel,
    GoalBias,
    PeriodizationPhase,
)
from plan_engine.models.periodization import (
    BlockGuidelines,
    PeriodizationBlock,
    PeriodizationFramework,
)
from plan_engine.models.weeks import WeekNumber

BLOCK_GUIDELINES: dict[PeriodizationPhase, BlockGuidelines] = {
    PeriodizationPhase.ACCUMULATION: BlockGuidelines(
        volume="High volume to build work capacity and muscle",
        intensity="Moderate intensity to allow for recovery",
        rep_ranges="Strength: 8-12 reps, Accessory: 12-15 reps",
        rpe="Strength: RPE 7-8, Accessory: RPE 7-8",
        description="Build volume tolerance and movement proficiency",
    ),
    PeriodizationPhase.INTENSIFICATION: BlockGuidelines(
        volume="Moderate volume with focus on quality",
        intensity="High intensity to build strength",
        rep_ranges="Strength: 4-8 reps, Accessory: 8-12 reps",
        rpe="Strength: RPE 8-9, Accessory: RPE 8",
        description="Increase load and intensity for strength gains",
    ),
    PeriodizationPhase.DELOAD: BlockGuidelines(
        volume="Low volume (40% reduction) for recovery",
        intensity="Moderate intensity (15% load reduction)",
        rep_ranges="Strength: 6-8 reps, Accessory: 8-10 reps",
        rpe="Strength: RPE 6-7, Accessory: RPE 6",
        description="Active recovery to dissipate fatigue and prepare for next block",
    ),
    PeriodizationPhase.REALIZATION: BlockGuidelines(
        volume="Low volume to maintain freshness",
        intensity="Peak intensity for performance",
        rep_ranges="Strength: 3-6 reps, Accessory: 6-8 reps",
        rpe="Strength: RPE 9+, Accessory: RPE 8",
        description="Peak performance phase with maximum loads",
    ),
}


def generate_framework(
    total_weeks: int,
    experience_level: ExperienceLevel,
    goal_bias: GoalBias,
) -> PeriodizationFramework:
    """Build the periodization framework for a program.

    Args:
        total_weeks: Program length in weeks (>= 1).
        experience_level: Selects the linear (beginner) or block
            (intermediate) strategy.
        goal_bias: Tunes rep ranges and intensity labels.

    Returns:
        A framework whose blocks are sorted, non-overlapping, start at week 1
        and end at ``total_weeks``.

    Raises:
        ValueError: If total_weeks < 1.
    """
    if total_weeks < 1:
        raise ValueError(f"Program must be at least 1 week, got {total_weeks}")

    if ExperienceLevel(experience_level) == ExperienceLevel.BEGINNER:
        blocks = _beginner_blocks(total_weeks, GoalBias(goal_bias))
    else:
        blocks = _intermediate_blocks(total_weeks, GoalBias(goal_bias))
    return PeriodizationFramework(total_weeks=total_weeks, blocks=tuple(blocks))


def beginner_deload_weeks(total_weeks: int) -> list[int]:
    """Weeks 4, 8, 12, ... up to *total_weeks* (1-based)."""
    return list(range(BEGINNER_DELOAD_INTERVAL, total_weeks + 1, BEGINNER_DELOAD_INTERVAL))


def _block(
    number: int,
    phase: PeriodizationPhase,
    start: int,
    end: int,
    volume: str,
    intensity: str,
    reps: tuple[str, str],
    rpe: tuple[float, float],
) -> PeriodizationBlock:
    return PeriodizationBlock(
        block_number=number,
        block_type=phase,
        start_week=WeekNumber(start),
        end_week=WeekNumber(end),
        volume_target=volume,
        intensity_target=intensity,
        strength_reps=reps[0],
        accessory_reps=reps[1],
        strength_rpe=rpe[0],
        accessory_rpe=rpe[1],
    )


def _accumulation_intensity(goal_bias: GoalBias) -> str:
    return "moderate" if goal_bias == GoalBias.STRENGTH else "low"


def _accumulation_strength_reps(goal_bias: GoalBias) -> str:
    return "10-12" if goal_bias == GoalBias.HYPERTROPHY else "8-12"


def _beginner_blocks(total_weeks: int, goal_bias: GoalBias) -> list[PeriodizationBlock]:
    deloads = beginner_deload_weeks(total_weeks)
    blocks: list[PeriodizationBlock] = []
    week = 1

    while week <= total_weeks:
        if week in deloads:
            blocks.append(_block(
                len(blocks) + 1, PeriodizationPhase.DELOAD, week, week,
                volume="low", intensity="moderate",
                reps=("8-10", "10-12"), rpe=(6, 6),
            ))
            week += 1
            continue

        # Accumulate up to the week before the next deload
        next_deload = next((d for d in deloads if d > week), None)
        end_week = next_deload - 1 if next_deload is not None else total_weeks
        blocks.append(_block(
            len(blocks) + 1, PeriodizationPhase.ACCUMULATION, week, end_week,
            volume="high", intensity=_accumulation_intensity(goal_bias),
            reps=(_accumulation_strength_reps(goal_bias), "12-15"), rpe=(7, 7),
        ))
        week = end_week + 1

    return blocks


def cycle_length(total_weeks: int) -> int:
    """Intermediate cycle length: 4 weeks for 12+ week programs, else 3."""
    if total_weeks >= LONG_CYCLE_THRESHOLD_WEEKS:
        return LONG_CYCLE_WEEKS
    return SHORT_CYCLE_WEEKS


def _intermediate_blocks(total_weeks: int, goal_bias: GoalBias) -> list[PeriodizationBlock]:
    cycle = cycle_length(total_weeks)
    accumulation_weeks = cycle // 2
    intensification_weeks = cycle - accumulation_weeks - 1

    blocks: list[PeriodizationBlock] = []
    week = 1

    while week <= total_weeks:
        remaining = total_weeks - week + 1

        if remaining >= cycle:
            blocks.append(_block(
                len(blocks) + 1, PeriodizationPhase.ACCUMULATION,
                week, week + accumulation_weeks - 1,
                volume="high", intensity=_accumulation_intensity(goal_bias),
                reps=(_accumulation_strength_reps(goal_bias), "12-15"), rpe=(7.5, 7.5),
            ))
            week += accumulation_weeks

            if intensification_weeks > 0:
                blocks.append(_block(
                    len(blocks) + 1, PeriodizationPhase.INTENSIFICATION,
                    week, week + intensification_weeks - 1,
                    volume="moderate", intensity="high",
                    reps=("8-10" if goal_bias == GoalBias.HYPERTROPHY else "4-8", "8-12"),
                    rpe=(8.5, 8),
                ))
                week += intensification_weeks

            blocks.append(_deload_tail_block(len(blocks) + 1, week))
            week += 1
        elif remaining >= 2:
            # Tail: accumulate through all but the last week, then deload
            end_week = week + remaining - 2
            blocks.append(_tail_accumulation_block(len(blocks) + 1, week, end_week))
            week = end_week + 1
            blocks.append(_deload_tail_block(len(blocks) + 1, week))
            week += 1
        else:
            blocks.append(_tail_accumulation_block(len(blocks) + 1, week, week))
            week += 1

    return blocks


def _deload_tail_block(number: int, week: int) -> PeriodizationBlock:
    return _block(
        number, PeriodizationPhase.DELOAD, week, week,
        volume="low", intensity="moderate",
        reps=("6-8", "8-10"), rpe=(6.5, 6),
    )


def _tail_accumulation_block(number: int, start: int, end: int) -> PeriodizationBlock:
    # Tail accumulation keeps the neutral targets regardless of goal bias
    return _block(
        number, PeriodizationPhase.ACCUMULATION, start, end,
        volume="high", intensity="moderate",
        reps=("8-12", "12-15"), rpe=(7.5, 7.5),
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def current_block(
    framework: PeriodizationFramework, week_number: int
) -> PeriodizationBlock | None:
    """Block containing the 1-based *week_number*, or None if out of range."""
    for block in framework.blocks:
        if block.contains(week_number):
            return block
    return None


def block_progress(block: PeriodizationBlock, week_number: int) -> float:
    """Fraction of *block* elapsed at *week_number*, clamped to [0, 1]."""
    weeks_completed = week_number - block.start_week
    return min(max(weeks_completed / block.duration_weeks, 0.0), 1.0)


def block_guidelines(block_type: PeriodizationPhase) -> BlockGuidelines:
    return BLOCK_GUIDELINES[PeriodizationPhase(block_type)]


def describe_framework(framework: PeriodizationFramework) -> str:
    """Human-readable, one line per block."""
    lines = []
    for block in framework.blocks:
        if block.start_week == block.end_week:
            week_range = f"Week {block.start_week}"
        else:
            week_range = f"Weeks {block.start_week}-{block.end_week}"
        lines.append(
            f"{week_range}: {block.block_type.value} "
            f"({block.volume_target} volume, {block.intensity_target} intensity)"
        )
    return f"{framework.total_weeks}-week program:\n" + "\n".join(lines)
