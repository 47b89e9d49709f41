"""Per-workout exercise edits.

Edits always apply to the workout's own payload. Edits to a first-week
workout are mirrored into the template day it was rotated from, so plans
regenerated later start from the edited template; already expanded later
weeks are left untouched.
"""

from __future__ import annotations

import dataclasses
import logging

from plan_engine.exceptions import ExerciseNotFound, InvalidBlockIndex
from plan_engine.models.plan import Plan, WorkoutInstance
from plan_engine.models.template import Block, ExerciseEntry, Template

logger = logging.getLogger(__name__)


def _insert(block: Block, exercise: ExerciseEntry, position: int | None) -> Block:
    exercises = list(block.exercises)
    exercises.insert(len(exercises) if position is None else position, exercise)
    return dataclasses.replace(block, exercises=tuple(exercises))


def _remove(block: Block, exercise_id: str) -> Block | None:
    """Block without the first *exercise_id* entry, or None if absent."""
    for i, ex in enumerate(block.exercises):
        if ex.id == exercise_id:
            return dataclasses.replace(
                block, exercises=block.exercises[:i] + block.exercises[i + 1:]
            )
    return None


def _replace_block(blocks: tuple[Block, ...], index: int, block: Block) -> tuple[Block, ...]:
    return blocks[:index] + (block,) + blocks[index + 1:]


def _with_payload_block(instance: WorkoutInstance, index: int, block: Block) -> WorkoutInstance:
    payload = dataclasses.replace(
        instance.payload, blocks=_replace_block(instance.payload.blocks, index, block)
    )
    return dataclasses.replace(instance, payload=payload)


def _template_day_position(template: Template, instance: WorkoutInstance) -> int:
    return instance.day_index % len(template.pattern)


def _mirror_to_template(plan: Plan, instance: WorkoutInstance, block_index: int, edit) -> Plan:
    if instance.week_index != 0 or plan.template is None or not plan.template.pattern:
        return plan

    position = _template_day_position(plan.template, instance)
    day = plan.template.pattern[position]
    if not 0 <= block_index < len(day.blocks):
        return plan
    edited = edit(day.blocks[block_index])
    if edited is None:
        return plan

    new_day = dataclasses.replace(day, blocks=_replace_block(day.blocks, block_index, edited))
    pattern = plan.template.pattern[:position] + (new_day,) + plan.template.pattern[position + 1:]
    logger.debug("Mirrored week-0 edit into template day %d of plan %s", position, plan.id)
    return dataclasses.replace(plan, template=dataclasses.replace(plan.template, pattern=pattern))


def _check_block_index(instance: WorkoutInstance, block_index: int) -> None:
    if not 0 <= block_index < len(instance.payload.blocks):
        raise InvalidBlockIndex(block_index, len(instance.payload.blocks))


def add_exercise(
    plan: Plan,
    instance: WorkoutInstance,
    block_index: int,
    exercise: ExerciseEntry,
    position: int | None = None,
) -> tuple[Plan, WorkoutInstance]:
    """Insert *exercise* into a workout block (appended when *position* is None).

    Raises:
        InvalidBlockIndex: If the workout has no block at *block_index*.
    """
    _check_block_index(instance, block_index)

    def edit(block: Block) -> Block:
        return _insert(block, exercise, position)

    updated = _with_payload_block(
        instance, block_index, edit(instance.payload.blocks[block_index])
    )
    return _mirror_to_template(plan, instance, block_index, edit), updated


def remove_exercise(
    plan: Plan,
    instance: WorkoutInstance,
    block_index: int,
    exercise_id: str,
) -> tuple[Plan, WorkoutInstance]:
    """Remove the exercise *exercise_id* from a workout block.

    Raises:
        InvalidBlockIndex: If the workout has no block at *block_index*.
        ExerciseNotFound: If the block does not contain the exercise.
    """
    _check_block_index(instance, block_index)

    def edit(block: Block) -> Block | None:
        return _remove(block, exercise_id)

    edited = edit(instance.payload.blocks[block_index])
    if edited is None:
        raise ExerciseNotFound(exercise_id)

    updated = _with_payload_block(instance, block_index, edited)
    return _mirror_to_template(plan, instance, block_index, edit), updated
