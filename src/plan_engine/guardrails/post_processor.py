"""Guardrail post-processor for generated template drafts.

Pipeline, in order:

1. Schema validation (the only stage that fails the run).
2. PCOS protocol: at least two conditioning blocks program-wide, only
   PCOS-safe conditioning work, a recovery block on every day.
3. High-impact filter: no high-impact strength/accessory exercises.
4. Time budget: accessory volume is trimmed until each day fits the
   session budget or accessory work reaches its floor.

Soft problems never raise; each correction is recorded as a warning.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from plan_engine.guardrails.catalog import ExerciseCatalog, MemoizedCatalog
from plan_engine.guardrails.schema import validate_draft
from plan_engine.models.enums import (
    ACCESSORY_FLOOR_MIN,
    ACCESSORY_FLOOR_SETS,
    PCOS_MIN_CONDITIONING_BLOCKS,
    RECOVERY_BLOCK_MINUTES,
    TRIM_MINUTES_PER_SET,
    TRIM_STEP_MIN,
    ZONE2_BLOCK_MINUTES,
    BlockType,
)
from plan_engine.models.profile import GuardrailConstraints
from plan_engine.models.template import Block, DayTemplate, ExerciseEntry, Template

logger = logging.getLogger(__name__)

PCOS_SAFETY_NOTE = (
    "PCOS protocol active: Zone-2 cardio emphasized, high-impact exercises "
    "avoided, recovery prioritized"
)

ZONE2_EXERCISE = ExerciseEntry(
    id="bike_zone2",
    name="Bike - Zone 2",
    equipment="stationary bike",
    sets=1,
    reps=f"{ZONE2_BLOCK_MINUTES} min",
    notes="Easy conversational pace, 60-70% max HR",
)

ZONE2_BLOCK = Block(
    type=BlockType.CONDITIONING,
    title="Zone-2 Cardio (PCOS Protocol)",
    duration_minutes=ZONE2_BLOCK_MINUTES,
    exercises=(ZONE2_EXERCISE,),
)

RECOVERY_BLOCK = Block(
    type=BlockType.RECOVERY,
    title="PCOS Recovery Protocol",
    duration_minutes=RECOVERY_BLOCK_MINUTES,
    exercises=(
        ExerciseEntry(
            id="recovery_notes",
            name="Recovery & Stress Management",
            equipment="none",
            sets=1,
            reps="1 note",
            notes=(
                "Prioritize sleep, manage stress, stay hydrated. "
                "Light movement is better than missing workouts."
            ),
        ),
    ),
)

LOW_IMPACT_FALLBACK = ExerciseEntry(
    id="db_bench",
    name="Dumbbell Bench Press",
    equipment="dumbbells",
    sets=3,
    reps="8-12",
    notes="Low-impact alternative",
)


@dataclass(frozen=True)
class GuardrailResult:
    template: Template
    warnings: tuple[str, ...] = field(default_factory=tuple)
    safety_notes: tuple[str, ...] = field(default_factory=tuple)


def _with_day(template: Template, index: int, day: DayTemplate) -> Template:
    pattern = template.pattern[:index] + (day,) + template.pattern[index + 1:]
    return dataclasses.replace(template, pattern=pattern)


# ---------------------------------------------------------------------------
# PCOS protocol
# ---------------------------------------------------------------------------


def _ensure_conditioning(template: Template, warnings: list[str]) -> Template:
    count = template.count_blocks(BlockType.CONDITIONING)
    for i, day in enumerate(template.pattern):
        if count >= PCOS_MIN_CONDITIONING_BLOCKS:
            break
        if day.has_block_type(BlockType.CONDITIONING):
            continue
        template = _with_day(template, i, dataclasses.replace(day, blocks=day.blocks + (ZONE2_BLOCK,)))
        count += 1
        warnings.append(f"PCOS: Added Zone-2 conditioning block to day {i + 1}")
    return template


def _filter_conditioning(
    template: Template, catalog: MemoizedCatalog, warnings: list[str]
) -> Template:
    for i, day in enumerate(template.pattern):
        blocks = []
        for block in day.blocks:
            if block.type != BlockType.CONDITIONING:
                blocks.append(block)
                continue
            kept = []
            for ex in block.exercises:
                if catalog.is_pcos_safe(ex.id):
                    kept.append(ex)
                else:
                    warnings.append(f'PCOS: Removed high-intensity exercise "{ex.name}"')
            if not kept:
                kept.append(ZONE2_EXERCISE)
            blocks.append(dataclasses.replace(block, exercises=tuple(kept)))
        template = _with_day(template, i, dataclasses.replace(day, blocks=tuple(blocks)))
    return template


def _ensure_recovery(template: Template) -> Template:
    for i, day in enumerate(template.pattern):
        if not day.has_block_type(BlockType.RECOVERY):
            template = _with_day(
                template, i, dataclasses.replace(day, blocks=day.blocks + (RECOVERY_BLOCK,))
            )
    return template


def enforce_pcos_guidelines(
    template: Template, catalog: MemoizedCatalog, warnings: list[str]
) -> Template:
    template = _ensure_conditioning(template, warnings)
    template = _filter_conditioning(template, catalog, warnings)
    return _ensure_recovery(template)


# ---------------------------------------------------------------------------
# High-impact filter
# ---------------------------------------------------------------------------


def filter_high_impact(
    template: Template, catalog: MemoizedCatalog, warnings: list[str]
) -> Template:
    """Drop high-impact strength/accessory work, keeping every block non-empty."""
    for i, day in enumerate(template.pattern):
        blocks = []
        for block in day.blocks:
            if block.type not in (BlockType.STRENGTH, BlockType.ACCESSORY):
                blocks.append(block)
                continue
            kept = []
            for ex in block.exercises:
                if catalog.is_high_impact(ex.id):
                    warnings.append(f'Removed high-impact exercise: "{ex.name}"')
                else:
                    kept.append(ex)
            if not kept:
                kept.append(LOW_IMPACT_FALLBACK)
            blocks.append(dataclasses.replace(block, exercises=tuple(kept)))
        template = _with_day(template, i, dataclasses.replace(day, blocks=tuple(blocks)))
    return template


# ---------------------------------------------------------------------------
# Time budget
# ---------------------------------------------------------------------------


def is_trimmable(block: Block) -> bool:
    """Whether an accessory block is still above its duration or set floor."""
    return block.type == BlockType.ACCESSORY and (
        block.duration_minutes > ACCESSORY_FLOOR_MIN
        or any(ex.sets > ACCESSORY_FLOOR_SETS for ex in block.exercises)
    )


def _trim_block(block: Block, remaining: int) -> tuple[Block, int, bool]:
    """One trimming step on an accessory block.

    Returns the trimmed block, the minutes still over budget and whether
    anything changed.
    """
    duration = block.duration_minutes
    changed = False

    cut = max(0, min(TRIM_STEP_MIN, remaining, duration - ACCESSORY_FLOOR_MIN))
    if cut:
        duration -= cut
        remaining -= cut
        changed = True

    exercises = list(block.exercises)
    for j, ex in enumerate(exercises):
        if remaining <= 0:
            break
        if ex.sets > ACCESSORY_FLOOR_SETS:
            exercises[j] = dataclasses.replace(ex, sets=ex.sets - 1)
            changed = True
            set_cut = max(0, min(TRIM_MINUTES_PER_SET, remaining, duration - ACCESSORY_FLOOR_MIN))
            duration -= set_cut
            remaining -= set_cut

    trimmed = dataclasses.replace(block, duration_minutes=duration, exercises=tuple(exercises))
    return trimmed, remaining, changed


def trim_day(day: DayTemplate, target_minutes: int) -> DayTemplate:
    """Trim accessory volume until the day fits *target_minutes* or hits the floor."""
    blocks = list(day.blocks)
    while True:
        remaining = sum(b.duration_minutes for b in blocks) - target_minutes
        if remaining <= 0:
            break
        progressed = False
        for i, block in enumerate(blocks):
            if remaining <= 0:
                break
            if block.type != BlockType.ACCESSORY:
                continue
            blocks[i], remaining, changed = _trim_block(block, remaining)
            progressed = progressed or changed
        if not progressed:
            break
    return dataclasses.replace(day, blocks=tuple(blocks))


def enforce_time_budget(template: Template, target_minutes: int, warnings: list[str]) -> Template:
    for i, day in enumerate(template.pattern):
        total = day.total_minutes
        if total <= target_minutes:
            continue
        overage = total - target_minutes
        warnings.append(
            f"Day {i + 1} exceeded time budget by {overage}min. Trimming accessory volume."
        )
        trimmed = trim_day(day, target_minutes)
        logger.debug(
            "Day %d trimmed from %d to %d minutes (budget %d)",
            i + 1, total, trimmed.total_minutes, target_minutes,
        )
        template = _with_day(template, i, trimmed)
    return template


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def as_memoized(catalog: ExerciseCatalog | MemoizedCatalog | None) -> MemoizedCatalog:
    if isinstance(catalog, MemoizedCatalog):
        return catalog
    return MemoizedCatalog(catalog if catalog is not None else ExerciseCatalog.from_config())


def post_process_template(
    draft: Mapping[str, Any] | Template,
    constraints: GuardrailConstraints,
    catalog: ExerciseCatalog | MemoizedCatalog | None = None,
) -> GuardrailResult:
    """Validate a generator draft and apply the safety guardrails.

    Args:
        draft: Generator output (camelCase mapping) or a built template.
        constraints: PCOS / impact / time-budget flags for the user.
        catalog: Exercise catalog; defaults to the configured catalog.

    Returns:
        GuardrailResult with the adjusted template and the warnings raised
        while adjusting it.

    Raises:
        TemplateValidationError: If the draft fails schema validation.
    """
    template = validate_draft(draft)
    lookups = as_memoized(catalog)
    warnings: list[str] = []
    safety_notes: list[str] = []

    if constraints.days_per_week is not None and template.days_per_week != constraints.days_per_week:
        warnings.append(
            f"Template has {template.days_per_week} days per week, "
            f"expected {constraints.days_per_week}"
        )

    if constraints.has_pcos:
        template = enforce_pcos_guidelines(template, lookups, warnings)
        safety_notes.append(PCOS_SAFETY_NOTE)

    if constraints.no_high_impact:
        template = filter_high_impact(template, lookups, warnings)

    template = enforce_time_budget(template, constraints.target_minutes_per_session, warnings)

    for warning in warnings:
        logger.warning("Guardrail: %s", warning)
    return GuardrailResult(
        template=template,
        warnings=tuple(warnings),
        safety_notes=tuple(safety_notes),
    )
