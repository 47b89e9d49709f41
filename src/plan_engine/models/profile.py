"""Profile and constraint records supplied by the user-profile store."""

from __future__ import annotations

from dataclasses import dataclass, field

from plan_engine.config import DEFAULT_MINUTES_PER_SESSION
from plan_engine.models.enums import ExperienceLevel, GoalBias


@dataclass(frozen=True)
class GuardrailConstraints:
    """Flags steering the guardrail post-processor and the safety audit."""

    has_pcos: bool = False
    no_high_impact: bool = False
    target_minutes_per_session: int = DEFAULT_MINUTES_PER_SESSION
    days_per_week: int | None = None


@dataclass(frozen=True)
class ProfileConstraints:
    """Training profile of one user."""

    experience_level: ExperienceLevel = ExperienceLevel.BEGINNER
    goal_bias: GoalBias = GoalBias.BALANCED
    has_pcos: bool = False
    no_high_impact: bool = False
    days_per_week: int = 3
    minutes_per_session: int = DEFAULT_MINUTES_PER_SESSION
    total_weeks: int = 8
    preferred_days: tuple[str, ...] = field(default_factory=tuple)

    def guardrail_constraints(self) -> GuardrailConstraints:
        return GuardrailConstraints(
            has_pcos=self.has_pcos,
            no_high_impact=self.no_high_impact,
            target_minutes_per_session=self.minutes_per_session,
            days_per_week=self.days_per_week,
        )
