"""Guardrails: draft validation, safety adjustments and the safety audit."""

from plan_engine.guardrails.audit import validate_safety
from plan_engine.guardrails.catalog import (
    ExerciseCatalog,
    ExerciseDefinition,
    MemoizedCatalog,
    load_catalog,
)
from plan_engine.guardrails.post_processor import GuardrailResult, post_process_template
from plan_engine.guardrails.schema import validate_draft

__all__ = [
    "ExerciseCatalog",
    "ExerciseDefinition",
    "GuardrailResult",
    "MemoizedCatalog",
    "load_catalog",
    "post_process_template",
    "validate_draft",
    "validate_safety",
]
