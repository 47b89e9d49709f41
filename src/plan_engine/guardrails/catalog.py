"""Exercise catalog lookups used by the guardrails.

The catalog answers three questions about an exercise id: is it PCOS-safe,
what is its impact level, and what is it (movement, equipment). Ids are
resolved case-insensitively and through aliases. Ids the catalog does not
know are treated as PCOS-safe with unknown impact, so they are never
filtered out of a template.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from plan_engine import config
from plan_engine.models.enums import ImpactLevel, MovementPattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExerciseDefinition:
    id: str
    name: str
    movement: MovementPattern
    primary_muscle: str
    equipment: str
    impact: ImpactLevel
    is_pcos_friendly: bool
    aliases: tuple[str, ...] = field(default_factory=tuple)
    notes: str | None = None


def _ex(
    id: str,
    name: str,
    movement: MovementPattern,
    primary_muscle: str,
    equipment: str,
    impact: ImpactLevel = ImpactLevel.LOW,
    is_pcos_friendly: bool = True,
    aliases: tuple[str, ...] = (),
    notes: str | None = None,
) -> ExerciseDefinition:
    return ExerciseDefinition(
        id=id,
        name=name,
        movement=movement,
        primary_muscle=primary_muscle,
        equipment=equipment,
        impact=impact,
        is_pcos_friendly=is_pcos_friendly,
        aliases=aliases,
        notes=notes,
    )


_M = MovementPattern
_I = ImpactLevel

DEFAULT_EXERCISES: tuple[ExerciseDefinition, ...] = (
    # Squat / lunge
    _ex("back_squat", "Back Squat", _M.SQUAT, "quadriceps", "barbell", _I.MODERATE,
        aliases=("barbell squat", "high bar squat")),
    _ex("front_squat", "Front Squat", _M.SQUAT, "quadriceps", "barbell", _I.MODERATE),
    _ex("goblet_squat", "Goblet Squat", _M.SQUAT, "quadriceps", "dumbbell",
        aliases=("dumbbell goblet squat",), notes="Beginner-friendly squat pattern."),
    _ex("leg_press", "Leg Press", _M.SQUAT, "quadriceps", "machine",
        aliases=("machine leg press",)),
    _ex("box_squat", "Box Squat", _M.SQUAT, "quadriceps", "barbell"),
    _ex("box_jump", "Box Jump", _M.SQUAT, "power", "plyo_box", _I.HIGH, False,
        notes="Plyometric landing, high impact."),
    _ex("jump_squat", "Jump Squat", _M.SQUAT, "power", "bodyweight", _I.HIGH, False,
        aliases=("squat jump",)),
    _ex("split_squat", "Split Squat", _M.LUNGE, "quadriceps", "dumbbell",
        aliases=("stationary lunge",)),
    _ex("reverse_lunge", "Reverse Lunge", _M.LUNGE, "quadriceps", "dumbbell"),
    _ex("step_up", "Step Up", _M.LUNGE, "quadriceps", "dumbbell"),
    # Hinge
    _ex("conventional_deadlift", "Conventional Deadlift", _M.HINGE, "posterior chain",
        "barbell", _I.MODERATE, aliases=("deadlift", "barbell deadlift")),
    _ex("romanian_deadlift", "Romanian Deadlift", _M.HINGE, "hamstrings", "barbell",
        aliases=("rdl",)),
    _ex("hip_thrust", "Hip Thrust", _M.HINGE, "glutes", "barbell"),
    _ex("glute_bridge", "Glute Bridge", _M.HINGE, "glutes", "bodyweight"),
    _ex("kettlebell_swing", "Kettlebell Swing", _M.HINGE, "posterior chain", "kettlebell",
        _I.MODERATE, aliases=("kb swing",)),
    # Push
    _ex("bench_press", "Bench Press", _M.HORIZONTAL_PUSH, "chest", "barbell",
        aliases=("barbell bench press",)),
    _ex("db_bench_press", "Dumbbell Bench Press", _M.HORIZONTAL_PUSH, "chest", "dumbbell",
        aliases=("db_bench", "dumbbell flat press")),
    _ex("push_up", "Push-Up", _M.HORIZONTAL_PUSH, "chest", "bodyweight",
        aliases=("pushup",)),
    _ex("overhead_press", "Overhead Press", _M.VERTICAL_PUSH, "shoulders", "barbell",
        aliases=("military press", "ohp")),
    _ex("seated_db_press", "Seated Dumbbell Press", _M.VERTICAL_PUSH, "shoulders",
        "dumbbell"),
    _ex("push_press", "Push Press", _M.VERTICAL_PUSH, "shoulders", "barbell", _I.MODERATE),
    # Pull
    _ex("barbell_row", "Barbell Row", _M.HORIZONTAL_PULL, "upper back", "barbell",
        aliases=("bent over row",)),
    _ex("db_row", "Dumbbell Row", _M.HORIZONTAL_PULL, "lats", "dumbbell",
        aliases=("one arm row",)),
    _ex("seated_cable_row", "Seated Cable Row", _M.HORIZONTAL_PULL, "upper back", "cable"),
    _ex("lat_pulldown", "Lat Pulldown", _M.VERTICAL_PULL, "lats", "machine"),
    _ex("pull_up", "Pull-Up", _M.VERTICAL_PULL, "lats", "bodyweight", aliases=("pullup",)),
    # Carry / core
    _ex("farmers_walk", "Farmer's Walk", _M.CARRY, "grip", "dumbbell",
        aliases=("farmer carry",)),
    _ex("plank", "Plank", _M.CORE, "core", "bodyweight"),
    _ex("dead_bug", "Dead Bug", _M.CORE, "core", "bodyweight"),
    _ex("pallof_press", "Pallof Press", _M.CORE, "core", "cable"),
    # Conditioning
    _ex("bike_zone2", "Bike - Zone 2", _M.CONDITIONING, "cardio", "bike",
        aliases=("stationary bike zone 2",)),
    _ex("treadmill_walk", "Incline Treadmill Walk", _M.CONDITIONING, "cardio", "treadmill",
        aliases=("incline walk",)),
    _ex("rower_zone2", "Rower - Zone 2", _M.CONDITIONING, "cardio", "rower", _I.MODERATE),
    _ex("sled_push", "Sled Push", _M.CONDITIONING, "legs", "sled", _I.MODERATE,
        aliases=("prowler push",)),
    _ex("assault_bike", "Assault Bike", _M.CONDITIONING, "cardio", "bike",
        aliases=("air bike", "airdyne")),
    _ex("burpee", "Burpee", _M.CONDITIONING, "full body", "bodyweight", _I.HIGH, False),
    _ex("sprint_intervals", "Sprint Intervals", _M.CONDITIONING, "cardio", "track",
        _I.HIGH, False, aliases=("hiit sprints",)),
    # Mobility
    _ex("cat_camel", "Cat-Camel", _M.MOBILITY, "spine", "bodyweight"),
    _ex("worlds_greatest_stretch", "World's Greatest Stretch", _M.MOBILITY, "hips",
        "bodyweight"),
)


class ExerciseCatalog:
    """Read-only exercise lookup keyed by stable exercise ids."""

    def __init__(self, definitions: Iterable[ExerciseDefinition]) -> None:
        self._definitions = tuple(definitions)
        self._by_id = {d.id.lower(): d for d in self._definitions}
        self._aliases: dict[str, str] = {}
        for d in self._definitions:
            for alias in d.aliases:
                self._aliases.setdefault(alias.lower(), d.id.lower())

    @classmethod
    def default(cls) -> ExerciseCatalog:
        return cls(DEFAULT_EXERCISES)

    @classmethod
    def from_config(cls) -> ExerciseCatalog:
        """Catalog from ``PLAN_ENGINE_CATALOG_PATH``, else the built-in library."""
        if config.CATALOG_PATH is None:
            return cls.default()
        return load_catalog(config.CATALOG_PATH)

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions)

    def resolve_id(self, id_or_alias: str) -> str | None:
        normalized = id_or_alias.strip().lower()
        if normalized in self._by_id:
            return normalized
        return self._aliases.get(normalized)

    def lookup(self, id_or_alias: str) -> ExerciseDefinition | None:
        resolved = self.resolve_id(id_or_alias)
        return self._by_id.get(resolved) if resolved else None

    def is_pcos_safe(self, id_or_alias: str) -> bool:
        exercise = self.lookup(id_or_alias)
        return exercise.is_pcos_friendly if exercise else True

    def impact_level(self, id_or_alias: str) -> ImpactLevel | None:
        exercise = self.lookup(id_or_alias)
        return exercise.impact if exercise else None

    def is_high_impact(self, id_or_alias: str) -> bool:
        return self.impact_level(id_or_alias) == ImpactLevel.HIGH

    def recommend_alternatives(
        self,
        id_or_alias: str,
        limit: int = 3,
        exclude_high_impact: bool = True,
    ) -> list[ExerciseDefinition]:
        """PCOS-friendly exercises sharing the movement pattern of *id_or_alias*."""
        current = self.lookup(id_or_alias)
        if current is None:
            return []
        candidates = [
            d for d in self._definitions
            if d.id != current.id
            and d.movement == current.movement
            and d.is_pcos_friendly
            and not (exclude_high_impact and d.impact == ImpactLevel.HIGH)
        ]
        return candidates[:limit]


class MemoizedCatalog:
    """Per-invocation cache in front of a catalog.

    Wrap a catalog for the duration of one post-processing run so repeated
    lookups of the same id hit the underlying catalog once.
    """

    def __init__(self, catalog: ExerciseCatalog) -> None:
        self._catalog = catalog
        self._cache: dict[str, ExerciseDefinition | None] = {}

    def lookup(self, id_or_alias: str) -> ExerciseDefinition | None:
        key = id_or_alias.strip().lower()
        if key not in self._cache:
            self._cache[key] = self._catalog.lookup(id_or_alias)
        return self._cache[key]

    def is_pcos_safe(self, id_or_alias: str) -> bool:
        exercise = self.lookup(id_or_alias)
        return exercise.is_pcos_friendly if exercise else True

    def impact_level(self, id_or_alias: str) -> ImpactLevel | None:
        exercise = self.lookup(id_or_alias)
        return exercise.impact if exercise else None

    def is_high_impact(self, id_or_alias: str) -> bool:
        return self.impact_level(id_or_alias) == ImpactLevel.HIGH

    @property
    def cache_size(self) -> int:
        return len(self._cache)


def _definition_from_record(record: dict) -> ExerciseDefinition:
    return ExerciseDefinition(
        id=record["id"],
        name=record.get("name", record["id"]),
        movement=MovementPattern(record.get("movement", "conditioning")),
        primary_muscle=record.get("primaryMuscle", record.get("primary_muscle", "")),
        equipment=record.get("equipment", "none"),
        impact=ImpactLevel(record.get("impact", "low")),
        is_pcos_friendly=bool(record.get("isPcosFriendly", record.get("is_pcos_friendly", True))),
        aliases=tuple(record.get("aliases", ())),
        notes=record.get("notes"),
    )


def load_catalog(path: str | Path) -> ExerciseCatalog:
    """Load a catalog from a JSON list of exercise definitions.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a JSON list or a record is malformed.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        records = json.load(fh)
    if not isinstance(records, list):
        raise ValueError(f"Exercise catalog {path} must contain a JSON list")

    try:
        definitions = [_definition_from_record(r) for r in records]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed exercise record in {path}: {exc}") from exc

    logger.info("Loaded %d exercises from %s", len(definitions), path)
    return ExerciseCatalog(definitions)
