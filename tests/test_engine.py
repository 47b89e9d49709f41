"""Tests for PlanEngine: end-to-end generation, rescheduling and projections."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable

import pytest

from plan_engine.engine import PlanEngine, PlanGenerationResult
from plan_engine.exceptions import InvalidStartDate, MissingTemplate, TemplateValidationError
from plan_engine.guardrails.catalog import ExerciseCatalog
from plan_engine.models.enums import BlockType, PeriodizationPhase, PlanStatus
from plan_engine.models.plan import Plan
from plan_engine.models.profile import ProfileConstraints
from plan_engine.models.progression import WeeklyLogSummary


@pytest.fixture
def engine(catalog: ExerciseCatalog) -> PlanEngine:
    return PlanEngine(catalog=catalog)


class TestGeneratePlan:
    def test_returns_complete_result(
        self, engine: PlanEngine, sample_draft: dict, beginner_profile: ProfileConstraints
    ) -> None:
        result = engine.generate_plan(
            sample_draft, beginner_profile, "plan-123456", "user-1", "2025-01-06"
        )
        assert isinstance(result, PlanGenerationResult)
        assert result.is_safe
        assert len(result.instances) == 24
        assert result.plan.template is not None
        assert result.plan.template.id.startswith("mc_")
        assert result.plan.calendar == result.calendar
        assert result.plan.status == PlanStatus.DRAFT
        assert result.plan.start_date == date(2025, 1, 6)
        assert result.instances[0].session_date == date(2025, 1, 6)
        assert result.plan.title == "8-week balanced plan"

    def test_pcos_profile(
        self, engine: PlanEngine, sample_draft: dict, pcos_profile: ProfileConstraints
    ) -> None:
        result = engine.generate_plan(sample_draft, pcos_profile, "plan-pcos01", "user-2")
        assert result.violations == ()
        assert result.safety_notes
        template = result.plan.template
        assert all(day.has_block_type(BlockType.RECOVERY) for day in template.pattern)
        ids = {ex.id for day in template.pattern for b in day.blocks for ex in b.exercises}
        assert "burpee" not in ids and "box_jump" not in ids
        assert any("exceeded time budget" in w for w in result.warnings)
        assert len(result.instances) == 30
        assert {w.week_index for w in result.instances if w.is_deload} == {2, 6}
        assert all(w.session_date is None for w in result.instances)

    def test_instances_carry_guarded_template(
        self, engine: PlanEngine, sample_draft: dict, pcos_profile: ProfileConstraints
    ) -> None:
        result = engine.generate_plan(sample_draft, pcos_profile, "plan-pcos01", "user-2")
        last_block = result.instances[0].payload.blocks[-1]
        assert last_block.type == BlockType.RECOVERY

    def test_profile_days_per_week_wins(
        self, engine: PlanEngine, draft_copy: Callable[[], dict], beginner_profile: ProfileConstraints
    ) -> None:
        draft = draft_copy()
        draft["daysPerWeek"] = 4
        result = engine.generate_plan(draft, beginner_profile, "plan-1", "u", "2025-01-06")
        assert "Template has 4 days per week, expected 3" in result.warnings
        assert result.plan.template.days_per_week == 3
        assert len(result.instances) == 24

    def test_invalid_draft(
        self, engine: PlanEngine, beginner_profile: ProfileConstraints
    ) -> None:
        with pytest.raises(TemplateValidationError):
            engine.generate_plan({"daysPerWeek": 3, "pattern": []}, beginner_profile, "p-1", "u")

    def test_invalid_start_date(
        self, engine: PlanEngine, sample_draft: dict, beginner_profile: ProfileConstraints
    ) -> None:
        with pytest.raises(InvalidStartDate):
            engine.generate_plan(sample_draft, beginner_profile, "p-1", "u", "06/01/2025")

    def test_deterministic(
        self, engine: PlanEngine, sample_draft: dict, beginner_profile: ProfileConstraints
    ) -> None:
        a = engine.generate_plan(sample_draft, beginner_profile, "plan-1", "u", "2025-01-06")
        b = engine.generate_plan(sample_draft, beginner_profile, "plan-1", "u", "2025-01-06")
        assert a == b

    def test_logs_generation(
        self,
        engine: PlanEngine,
        sample_draft: dict,
        beginner_profile: ProfileConstraints,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="plan_engine"):
            engine.generate_plan(sample_draft, beginner_profile, "plan-log", "u")
        assert "Generated plan plan-log" in caplog.text


class TestReschedule:
    def test_moves_plan(
        self, engine: PlanEngine, sample_draft: dict, beginner_profile: ProfileConstraints
    ) -> None:
        generated = engine.generate_plan(sample_draft, beginner_profile, "plan-1", "u")
        plan, result = engine.reschedule(generated.plan, generated.instances, "2025-03-03")
        assert plan.start_date == date(2025, 3, 3)
        assert plan.calendar == result.calendar
        assert result.instances[0].session_date == date(2025, 3, 3)
        assert len(result.updates) == 24

    def test_missing_template(
        self, engine: PlanEngine, sample_draft: dict, beginner_profile: ProfileConstraints
    ) -> None:
        generated = engine.generate_plan(sample_draft, beginner_profile, "plan-1", "u")
        bare = Plan(id="plan-1", user_id="u", duration_weeks=8, days_per_week=3)
        with pytest.raises(MissingTemplate):
            engine.reschedule(bare, generated.instances, "2025-03-03")


class TestProjections:
    def test_framework_for_profile(
        self, engine: PlanEngine, beginner_profile: ProfileConstraints
    ) -> None:
        framework = engine.framework_for(beginner_profile)
        assert framework.total_weeks == 8
        assert framework.blocks[1].block_type == PeriodizationPhase.DELOAD

    def test_progression_for_plan(
        self,
        engine: PlanEngine,
        sample_draft: dict,
        beginner_profile: ProfileConstraints,
        week0_logs: list[WeeklyLogSummary],
    ) -> None:
        generated = engine.generate_plan(sample_draft, beginner_profile, "plan-1", "u")
        targets = engine.progression_for(generated.plan, week0_logs)
        assert len(targets) == 8
        assert targets[1].total_load_kg == 4100

    def test_progression_requires_template(self, engine: PlanEngine) -> None:
        with pytest.raises(MissingTemplate):
            engine.progression_for(Plan(id="p", user_id="u", duration_weeks=8, days_per_week=3), [])

    def test_today(
        self, engine: PlanEngine, sample_draft: dict, beginner_profile: ProfileConstraints
    ) -> None:
        generated = engine.generate_plan(sample_draft, beginner_profile, "plan-1", "u", "2025-01-06")
        today = engine.today(generated.plan, "UTC", now=datetime(2025, 1, 20, tzinfo=timezone.utc))
        assert today.day_index == 14

    def test_today_requires_start_date(
        self, engine: PlanEngine, sample_draft: dict, beginner_profile: ProfileConstraints
    ) -> None:
        generated = engine.generate_plan(sample_draft, beginner_profile, "plan-1", "u")
        with pytest.raises(InvalidStartDate):
            engine.today(generated.plan, "UTC")
