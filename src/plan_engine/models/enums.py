"""Enumerations and program heuristics for the plan engine.

String-valued enums keep the same tokens the template generator and the
persistence layer exchange ("strength", "deload", "fat_loss", ...).
"""

from enum import Enum


class BlockType(str, Enum):
    """Segment of a workout day."""

    WARMUP = "warmup"
    STRENGTH = "strength"
    ACCESSORY = "accessory"
    CONDITIONING = "conditioning"
    RECOVERY = "recovery"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"


class GoalBias(str, Enum):
    STRENGTH = "strength"
    BALANCED = "balanced"
    HYPERTROPHY = "hypertrophy"
    FAT_LOSS = "fat_loss"


class PeriodizationPhase(str, Enum):
    """Training phases of a periodization block."""

    ACCUMULATION = "accumulation"
    INTENSIFICATION = "intensification"
    DELOAD = "deload"
    REALIZATION = "realization"


class ImpactLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class MovementPattern(str, Enum):
    SQUAT = "squat"
    HINGE = "hinge"
    LUNGE = "lunge"
    HORIZONTAL_PUSH = "horizontal_push"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PUSH = "vertical_push"
    VERTICAL_PULL = "vertical_pull"
    CARRY = "carry"
    CORE = "core"
    CONDITIONING = "conditioning"
    MOBILITY = "mobility"


class PlanStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


# ---------------------------------------------------------------------------
# Weekday tokens (0 = Sunday .. 6 = Saturday)
# ---------------------------------------------------------------------------
WEEKDAY_TOKENS: dict[str, int] = {
    "sun": 0,
    "mon": 1,
    "tue": 2,
    "wed": 3,
    "thu": 4,
    "fri": 5,
    "sat": 6,
}

# Unknown weekday tokens fall back to Monday
FALLBACK_WEEKDAY = 1

# Built-in training-day patterns when no preferred days are supplied
DEFAULT_TRAINING_DAYS: dict[int, tuple[int, ...]] = {
    3: (1, 3, 5),            # Mon, Wed, Fri
    4: (1, 3, 5, 6),         # + Sat
    5: (1, 2, 3, 5, 6),      # + Tue
    6: (1, 2, 3, 4, 5, 6),   # Mon-Sat
}

# ---------------------------------------------------------------------------
# Template / plan bounds
# ---------------------------------------------------------------------------
MIN_DAYS_PER_WEEK = 3
MAX_DAYS_PER_WEEK = 6
MIN_PROGRAM_WEEKS = 6
MAX_PROGRAM_WEEKS = 16
MIN_BLOCKS_PER_DAY = 1
MAX_BLOCKS_PER_DAY = 5
MIN_EXERCISES_PER_BLOCK = 1
MAX_EXERCISES_PER_BLOCK = 6
MIN_SETS = 1
MAX_SETS = 6

# ---------------------------------------------------------------------------
# Calendar expansion
# ---------------------------------------------------------------------------
# 0-based week indices that become deload weeks, keyed by the minimum
# program length that activates them.
DELOAD_WEEK_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (2, 3),    # 3rd week once the program has >= 3 weeks
    (6, 10),   # 7th week once the program has >= 10 weeks
)

MINUTES_PER_SET_ESTIMATE = 3
MAX_SESSION_ESTIMATE_MIN = 90
DELOAD_CONDITIONING_FRACTION = 0.8   # minute-valued conditioning work keeps 80%
DELOAD_VOLUME_CUE = "Deload week - reduced volume"
DELOAD_INTENSITY_CUE = "Deload week - reduced intensity"
SESSION_KIND = "strength"

# ---------------------------------------------------------------------------
# Periodization framework
# ---------------------------------------------------------------------------
BEGINNER_DELOAD_INTERVAL = 4          # weeks 4, 8, 12, ...
SHORT_CYCLE_WEEKS = 3
LONG_CYCLE_WEEKS = 4
LONG_CYCLE_THRESHOLD_WEEKS = 12       # programs >= 12 weeks use 4-week cycles

# ---------------------------------------------------------------------------
# Guardrails
# ---------------------------------------------------------------------------
PCOS_MIN_CONDITIONING_BLOCKS = 2
ZONE2_BLOCK_MINUTES = 15
RECOVERY_BLOCK_MINUTES = 5
TRIM_STEP_MIN = 5                     # max minutes removed from a block per pass
TRIM_MINUTES_PER_SET = 2
ACCESSORY_FLOOR_MIN = 10
ACCESSORY_FLOOR_SETS = 2
TIME_BUDGET_SLACK_MIN = 5

# ---------------------------------------------------------------------------
# Progression projection
# ---------------------------------------------------------------------------
SEED_WEEKLY_LOAD_KG = 3200
MIN_WEEKLY_LOAD_KG = 2500
WEEKLY_PROGRESSION_RATE = 1.025       # +2.5 % per standard week
DELOAD_LOAD_RATE = 0.82               # -18 % on deload weeks
MIN_CONDITIONING_MINUTES = 90
MIN_CONDITIONING_SESSIONS = 2
MINUTES_PER_CONDITIONING_SESSION = 30

FOCUS_NOTE_LOGGED = "Logged week: targets based on recorded sessions."
FOCUS_NOTE_DELOAD = "Deload week: reduce loads ~18% and emphasize technique."
FOCUS_NOTE_PROGRESSION = (
    "Progressive week: hold quality, add ~2% load or 1 rep where smooth."
)
