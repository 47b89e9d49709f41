"""Read-only safety audit, the final gate before a template is persisted."""

from __future__ import annotations

from plan_engine.guardrails.catalog import ExerciseCatalog, MemoizedCatalog
from plan_engine.guardrails.post_processor import as_memoized, is_trimmable
from plan_engine.models.enums import (
    PCOS_MIN_CONDITIONING_BLOCKS,
    TIME_BUDGET_SLACK_MIN,
    BlockType,
)
from plan_engine.models.profile import GuardrailConstraints
from plan_engine.models.template import Template


def validate_safety(
    template: Template,
    constraints: GuardrailConstraints,
    catalog: ExerciseCatalog | MemoizedCatalog | None = None,
) -> list[str]:
    """Re-check the guardrail rules on *template* without changing it.

    A day over its time budget by more than the trimming slack is only a
    violation while some accessory block could still be trimmed.

    Returns:
        Human-readable violations; empty when the template is safe to store.
    """
    lookups = as_memoized(catalog)
    violations: list[str] = []

    if constraints.has_pcos:
        conditioning = template.count_blocks(BlockType.CONDITIONING)
        if conditioning < PCOS_MIN_CONDITIONING_BLOCKS:
            violations.append(
                f"PCOS requires {PCOS_MIN_CONDITIONING_BLOCKS}+ Zone-2 sessions/week, "
                f"found {conditioning}"
            )
        for n, day in enumerate(template.pattern, start=1):
            for block in day.blocks_of_type(BlockType.CONDITIONING):
                for ex in block.exercises:
                    if not lookups.is_pcos_safe(ex.id):
                        violations.append(
                            f'PCOS violation: High-intensity exercise "{ex.name}" on day {n}'
                        )
            if not day.has_block_type(BlockType.RECOVERY):
                violations.append(f"PCOS violation: Day {n} has no recovery block")

    if constraints.no_high_impact:
        for n, day in enumerate(template.pattern, start=1):
            for block in day.blocks:
                if block.type not in (BlockType.STRENGTH, BlockType.ACCESSORY):
                    continue
                for ex in block.exercises:
                    if lookups.is_high_impact(ex.id):
                        violations.append(f'High-impact exercise "{ex.name}" on day {n}')

    budget = constraints.target_minutes_per_session
    for n, day in enumerate(template.pattern, start=1):
        total = day.total_minutes
        if total > budget + TIME_BUDGET_SLACK_MIN and any(is_trimmable(b) for b in day.blocks):
            violations.append(f"Day {n} exceeds time budget: {total}min > {budget}min")

    return violations
