"""Shared test fixtures: template drafts, templates, catalogs, training logs."""

from __future__ import annotations

import copy
from datetime import date
from typing import Any, Callable

import pytest

from plan_engine.guardrails.catalog import ExerciseCatalog
from plan_engine.guardrails.schema import validate_draft
from plan_engine.models.enums import BlockType, ExperienceLevel, GoalBias
from plan_engine.models.profile import ProfileConstraints
from plan_engine.models.progression import LoggedSet, WeeklyLogSummary
from plan_engine.models.template import Block, DayTemplate, ExerciseEntry, Template
from plan_engine.scheduling.calendar import ScheduleOptions


def exercise(ex_id: str, sets: int = 3, reps: str = "8-12", **extra: Any) -> dict:
    record = {
        "id": ex_id,
        "name": ex_id.replace("_", " ").title(),
        "equipment": "barbell",
        "sets": sets,
        "reps": reps,
    }
    record.update(extra)
    return record


def block(block_type: str, minutes: int, *exercises: dict, title: str | None = None) -> dict:
    return {
        "type": block_type,
        "title": title or f"{block_type.title()} Block",
        "durationMinutes": minutes,
        "exercises": list(exercises),
    }


@pytest.fixture
def sample_draft() -> dict:
    """Three-day generator draft, two conditioning blocks, one high-impact lift.

    Day totals: 55, 45 and 55 minutes.
    """
    return {
        "daysPerWeek": 3,
        "pattern": [
            {
                "dayIndex": 0,
                "focus": "Lower Body Strength",
                "blocks": [
                    block("warmup", 10, exercise("cat_camel", 1, "5 reps")),
                    block("strength", 20,
                          exercise("back_squat", 4, "5-6"),
                          exercise("romanian_deadlift", 3, "8")),
                    block("accessory", 15,
                          exercise("split_squat", 3, "10"),
                          exercise("plank", 3, "30 sec")),
                    block("conditioning", 10, exercise("bike_zone2", 1, "10 min")),
                ],
            },
            {
                "dayIndex": 2,
                "focus": "Upper Body Push/Pull",
                "blocks": [
                    block("warmup", 10, exercise("cat_camel", 1, "5 reps")),
                    block("strength", 20,
                          exercise("bench_press", 4, "5-6"),
                          exercise("barbell_row", 4, "8")),
                    block("accessory", 15,
                          exercise("seated_db_press", 3, "10-12"),
                          exercise("lat_pulldown", 3, "10-12")),
                ],
            },
            {
                "dayIndex": 4,
                "focus": "Full Body Power",
                "blocks": [
                    block("warmup", 10, exercise("cat_camel", 1, "5 reps")),
                    block("strength", 20,
                          exercise("conventional_deadlift", 3, "5"),
                          exercise("box_jump", 3, "5")),
                    block("accessory", 15,
                          exercise("hip_thrust", 3, "10"),
                          exercise("db_row", 3, "10")),
                    block("conditioning", 10, exercise("burpee", 1, "10 min")),
                ],
            },
        ],
    }


@pytest.fixture
def draft_copy(sample_draft: dict) -> Callable[[], dict]:
    """Factory for independent deep copies of the sample draft."""
    return lambda: copy.deepcopy(sample_draft)


@pytest.fixture
def sample_template(sample_draft: dict) -> Template:
    return validate_draft(sample_draft)


@pytest.fixture
def ab_template() -> Template:
    """Two-day A/B template used to exercise pattern rotation."""
    squat = ExerciseEntry(id="back_squat", name="Back Squat", equipment="barbell", sets=4, reps="5")
    bench = ExerciseEntry(id="bench_press", name="Bench Press", equipment="barbell", sets=4, reps="5")
    zone2 = ExerciseEntry(id="bike_zone2", name="Bike - Zone 2", equipment="bike", sets=1, reps="20 min")
    return Template(
        days_per_week=4,
        pattern=(
            DayTemplate(
                day_index=0,
                focus="Day A",
                blocks=(
                    Block(BlockType.STRENGTH, "Squat", 30, (squat,)),
                    Block(BlockType.CONDITIONING, "Zone 2", 20, (zone2,)),
                ),
            ),
            DayTemplate(
                day_index=1,
                focus="Day B",
                blocks=(Block(BlockType.STRENGTH, "Bench", 30, (bench,)),),
            ),
        ),
        id="mc_abtemplate01",
    )


@pytest.fixture
def catalog() -> ExerciseCatalog:
    return ExerciseCatalog.default()


@pytest.fixture
def schedule_options() -> Callable[..., ScheduleOptions]:
    def _make(**overrides: Any) -> ScheduleOptions:
        values = {
            "plan_id": "plan-123456",
            "user_id": "user-1",
            "weeks": 8,
            "days_per_week": 3,
            "start_date": date(2025, 1, 6),  # Monday
        }
        values.update(overrides)
        return ScheduleOptions(**values)

    return _make


@pytest.fixture
def beginner_profile() -> ProfileConstraints:
    return ProfileConstraints(
        experience_level=ExperienceLevel.BEGINNER,
        goal_bias=GoalBias.BALANCED,
        days_per_week=3,
        minutes_per_session=60,
        total_weeks=8,
    )


@pytest.fixture
def pcos_profile() -> ProfileConstraints:
    return ProfileConstraints(
        experience_level=ExperienceLevel.INTERMEDIATE,
        goal_bias=GoalBias.FAT_LOSS,
        has_pcos=True,
        no_high_impact=True,
        days_per_week=3,
        minutes_per_session=45,
        total_weeks=10,
        preferred_days=("mon", "wed", "fri"),
    )


@pytest.fixture
def week0_logs() -> list[WeeklyLogSummary]:
    """Week 0 logged at exactly 4000 kg (4 x 10 x 100 kg)."""
    return [
        WeeklyLogSummary(
            week_index=0,
            sets=tuple(LoggedSet(weight_kg=100, reps=10) for _ in range(4)),
            zone2_minutes=45,
        )
    ]
