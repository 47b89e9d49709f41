"""Persistence records for plans, calendars, workouts and projections.

Converts the internal frozen models into plain camelCase dicts with ISO
date strings, ready to hand to the storage layer or to ``json.dumps``.

All functions are pure (no I/O).
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from plan_engine.math.dates import format_iso_date
from plan_engine.models.periodization import PeriodizationBlock, PeriodizationFramework
from plan_engine.models.plan import Calendar, Plan, WorkoutInstance
from plan_engine.models.progression import ProgressionTarget
from plan_engine.models.template import Block, ExerciseEntry, Template


def _exercise_record(ex: ExerciseEntry) -> dict:
    record = {
        "id": ex.id,
        "name": ex.name,
        "equipment": ex.equipment,
        "sets": ex.sets,
        "reps": ex.reps,
    }
    # Optional fields are omitted rather than null
    if ex.tempo is not None:
        record["tempo"] = ex.tempo
    if ex.cues:
        record["cues"] = list(ex.cues)
    if ex.notes is not None:
        record["notes"] = ex.notes
    return record


def _block_record(block: Block) -> dict:
    return {
        "type": block.type.value,
        "title": block.title,
        "durationMinutes": block.duration_minutes,
        "exercises": [_exercise_record(ex) for ex in block.exercises],
    }


def template_to_record(template: Template) -> dict:
    record = {
        "daysPerWeek": template.days_per_week,
        "pattern": [
            {
                "dayIndex": day.day_index,
                "focus": day.focus,
                "blocks": [_block_record(b) for b in day.blocks],
            }
            for day in template.pattern
        ],
    }
    if template.id is not None:
        record["id"] = template.id
    if template.weeks is not None:
        record["weeks"] = template.weeks
    return record


def calendar_to_record(calendar: Calendar) -> dict:
    return {
        "planId": calendar.plan_id,
        "weeks": [
            {
                "weekIndex": int(week.week_index),
                "startDate": week.start_date,
                "days": [
                    {
                        "dayIndex": day.day_index,
                        "isoDate": day.iso_date,
                        "workoutId": day.workout_id,
                        "isDeload": day.is_deload,
                        "focus": day.focus,
                    }
                    for day in week.days
                ],
            }
            for week in calendar.weeks
        ],
    }


def plan_to_record(plan: Plan) -> dict:
    """Plan row including its template (microcycle) and calendar, if set."""
    return {
        "id": plan.id,
        "userId": plan.user_id,
        "title": plan.title,
        "status": plan.status.value,
        "durationWeeks": plan.duration_weeks,
        "daysPerWeek": plan.days_per_week,
        "minutesPerSession": plan.minutes_per_session,
        "preferredDays": list(plan.preferred_days),
        "startDate": format_iso_date(plan.start_date) or None,
        "microcycle": template_to_record(plan.template) if plan.template else None,
        "calendar": calendar_to_record(plan.calendar) if plan.calendar else None,
    }


def instance_to_record(instance: WorkoutInstance) -> dict:
    return {
        "id": instance.id,
        "planId": instance.plan_id,
        "userId": instance.user_id,
        "weekIndex": int(instance.week_index),
        "weekNumber": int(instance.week_number),
        "dayIndex": instance.day_index,
        "sessionDate": format_iso_date(instance.session_date) or None,
        "title": instance.title,
        "focus": instance.focus,
        "kind": instance.kind,
        "isDeload": instance.is_deload,
        "durationMinutes": instance.duration_minutes,
        "templateDayRef": instance.template_day_ref,
        "payload": {
            "workoutId": instance.payload.workout_id,
            "focus": instance.payload.focus,
            "blocks": [_block_record(b) for b in instance.payload.blocks],
        },
    }


def _framework_block_record(block: PeriodizationBlock) -> dict:
    return {
        "blockNumber": block.block_number,
        "blockType": block.block_type.value,
        "startWeek": int(block.start_week),
        "endWeek": int(block.end_week),
        "volumeTarget": block.volume_target,
        "intensityTarget": block.intensity_target,
        "repRanges": {
            "strength": block.strength_reps,
            "accessory": block.accessory_reps,
        },
        "rpeTargets": {
            "strength": block.strength_rpe,
            "accessory": block.accessory_rpe,
        },
    }


def framework_to_record(framework: PeriodizationFramework) -> dict:
    return {
        "totalWeeks": framework.total_weeks,
        "blocks": [_framework_block_record(b) for b in framework.blocks],
    }


def targets_to_records(targets: Iterable[ProgressionTarget]) -> list[dict]:
    return [
        {
            "weekIndex": int(t.week_index),
            "totalLoadKg": t.total_load_kg,
            "zone2Minutes": t.zone2_minutes,
            "focusNotes": t.focus_notes,
            "isDeload": t.is_deload,
        }
        for t in targets
    ]


def to_json_string(record: dict | list, indent: int | None = 2) -> str:
    """Serialize a record (or list of records) to a JSON string."""
    return json.dumps(record, indent=indent, sort_keys=False)
