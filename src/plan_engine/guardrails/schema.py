"""Shape validation of generator-produced template drafts.

Drafts arrive as camelCase JSON-like mappings. They are validated with
pydantic against the cardinality and field bounds of the template contract
and then converted into the frozen template dataclasses.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from plan_engine.exceptions import TemplateValidationError
from plan_engine.models.enums import (
    MAX_BLOCKS_PER_DAY,
    MAX_DAYS_PER_WEEK,
    MAX_EXERCISES_PER_BLOCK,
    MAX_SETS,
    MIN_BLOCKS_PER_DAY,
    MIN_DAYS_PER_WEEK,
    MIN_EXERCISES_PER_BLOCK,
    MIN_SETS,
    BlockType,
)
from plan_engine.models.template import Block, DayTemplate, ExerciseEntry, Template


class _DraftModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ExerciseDraft(_DraftModel):
    id: str = Field(min_length=2, max_length=60)
    name: str = Field(min_length=2, max_length=80)
    equipment: str = Field(min_length=2, max_length=40)
    sets: int = Field(ge=MIN_SETS, le=MAX_SETS)
    reps: str = Field(min_length=1, max_length=40)
    tempo: Optional[str] = Field(default=None, max_length=20)
    cues: Optional[list[str]] = Field(default=None, max_length=4)
    notes: Optional[str] = Field(default=None, max_length=140)


class BlockDraft(_DraftModel):
    type: BlockType
    title: str = Field(min_length=2, max_length=80)
    duration_minutes: int = Field(alias="durationMinutes", ge=5, le=90)
    exercises: list[ExerciseDraft] = Field(
        min_length=MIN_EXERCISES_PER_BLOCK, max_length=MAX_EXERCISES_PER_BLOCK
    )


class DayDraft(_DraftModel):
    day_index: int = Field(alias="dayIndex", ge=0, le=6)
    focus: str = Field(min_length=3, max_length=80)
    blocks: list[BlockDraft] = Field(
        min_length=MIN_BLOCKS_PER_DAY, max_length=MAX_BLOCKS_PER_DAY
    )


class TemplateDraft(_DraftModel):
    """Weekly template as emitted by the content generator (no id, no weeks)."""

    days_per_week: int = Field(alias="daysPerWeek", ge=MIN_DAYS_PER_WEEK, le=MAX_DAYS_PER_WEEK)
    pattern: list[DayDraft] = Field(min_length=MIN_DAYS_PER_WEEK, max_length=MAX_DAYS_PER_WEEK)

    def to_template(self) -> Template:
        return Template(
            days_per_week=self.days_per_week,
            pattern=tuple(
                DayTemplate(
                    day_index=day.day_index,
                    focus=day.focus,
                    blocks=tuple(
                        Block(
                            type=block.type,
                            title=block.title,
                            duration_minutes=block.duration_minutes,
                            exercises=tuple(
                                ExerciseEntry(
                                    id=ex.id,
                                    name=ex.name,
                                    equipment=ex.equipment,
                                    sets=ex.sets,
                                    reps=ex.reps,
                                    tempo=ex.tempo,
                                    cues=tuple(ex.cues or ()),
                                    notes=ex.notes,
                                )
                                for ex in block.exercises
                            ),
                        )
                        for block in day.blocks
                    ),
                )
                for day in self.pattern
            ),
        )


class _BuiltDay(DayDraft):
    # Guardrail stages may append blocks past the draft cap
    blocks: list[BlockDraft] = Field(min_length=MIN_BLOCKS_PER_DAY)


class _BuiltTemplate(TemplateDraft):
    """An already-built template, as returned by the guardrail pipeline."""

    pattern: list[_BuiltDay] = Field(min_length=MIN_DAYS_PER_WEEK, max_length=MAX_DAYS_PER_WEEK)


def _template_to_raw(template: Template) -> dict[str, Any]:
    return {
        "daysPerWeek": template.days_per_week,
        "pattern": [
            {
                "dayIndex": day.day_index,
                "focus": day.focus,
                "blocks": [
                    {
                        "type": block.type.value,
                        "title": block.title,
                        "durationMinutes": block.duration_minutes,
                        "exercises": [
                            {
                                "id": ex.id,
                                "name": ex.name,
                                "equipment": ex.equipment,
                                "sets": ex.sets,
                                "reps": ex.reps,
                                "tempo": ex.tempo,
                                "cues": list(ex.cues),
                                "notes": ex.notes,
                            }
                            for ex in block.exercises
                        ],
                    }
                    for block in day.blocks
                ],
            }
            for day in template.pattern
        ],
    }


def validate_draft(draft: Mapping[str, Any] | Template) -> Template:
    """Validate a template draft and return it as a :class:`Template`.

    Accepts either the generator mapping (optionally wrapped as
    ``{"microcycle": {...}}``) or an already-built template. Built templates
    are checked against the same bounds except the per-day block cap, so
    guardrail output can be validated again.

    Raises:
        TemplateValidationError: If the draft does not conform. Nothing of
            the draft is returned in that case.
    """
    model_cls: type[TemplateDraft] = TemplateDraft
    if isinstance(draft, Template):
        raw: Any = _template_to_raw(draft)
        model_cls = _BuiltTemplate
    elif isinstance(draft, Mapping) and isinstance(draft.get("microcycle"), Mapping):
        raw = draft["microcycle"]
    else:
        raw = draft

    try:
        model = model_cls.model_validate(raw)
    except ValidationError as exc:
        raise TemplateValidationError(str(exc), errors=exc.errors()) from exc

    template = model.to_template()
    if isinstance(draft, Template):
        return Template(
            days_per_week=template.days_per_week,
            pattern=template.pattern,
            id=draft.id,
            weeks=draft.weeks,
        )
    return template
