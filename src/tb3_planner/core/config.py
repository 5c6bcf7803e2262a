"""
Configuration constants for the tb3-planner core.

All adjustable parameters are centralized here for easy tuning.
Values mirror the persisted-data contract of the mobile app, so changes
to the schema or validation bounds must stay in sync with exported backups.
"""

from typing import Final

# =============================================================================
# ONE-REP MAX (Epley)
# =============================================================================

EPLEY_REP_DIVISOR: Final[float] = 30.0  # 1RM = w * (1 + reps / 30)
TM_FACTOR: Final[float] = 0.90  # Training max as fraction of 1RM

PERCENTAGE_TABLE_STEPS: Final[tuple[int, ...]] = (65, 70, 75, 80, 85, 90, 95, 100)

MAX_TYPES: Final[tuple[str, ...]] = ("training", "true")
UNITS: Final[tuple[str, ...]] = ("lb", "kg")

# =============================================================================
# LIFTS
# =============================================================================

LIFT_SQUAT: Final[str] = "Squat"
LIFT_BENCH: Final[str] = "Bench"
LIFT_DEADLIFT: Final[str] = "Deadlift"
LIFT_MILITARY_PRESS: Final[str] = "Military Press"
LIFT_WEIGHTED_PULL_UP: Final[str] = "Weighted Pull-up"  # the only belt-loaded lift

KNOWN_LIFTS: Final[tuple[str, ...]] = (
    LIFT_SQUAT,
    LIFT_BENCH,
    LIFT_DEADLIFT,
    LIFT_MILITARY_PRESS,
    LIFT_WEIGHTED_PULL_UP,
)

# =============================================================================
# PLATE MATH
# =============================================================================

PLATE_EPSILON: Final[float] = 1e-6  # Tolerance for fractional plate sums
PLATE_UNITS_PER_LB: Final[int] = 100  # Exhaustive search works in hundredths

# (weight, available) per side of the bar
DEFAULT_BARBELL_PLATES: Final[tuple[tuple[float, int], ...]] = (
    (45, 4),
    (35, 1),
    (25, 1),
    (10, 2),
    (5, 1),
    (2.5, 1),
    (1.25, 1),
)

DEFAULT_BELT_PLATES: Final[tuple[tuple[float, int], ...]] = (
    (45, 2),
    (35, 1),
    (25, 2),
    (10, 2),
    (5, 2),
    (2.5, 1),
)

# =============================================================================
# PROFILE DEFAULTS
# =============================================================================

DEFAULT_UNIT: Final[str] = "lb"
DEFAULT_MAX_TYPE: Final[str] = "training"
DEFAULT_ROUNDING_INCREMENT: Final[float] = 5.0
DEFAULT_BARBELL_WEIGHT: Final[float] = 45.0

# =============================================================================
# REST TIMER
# =============================================================================

REST_HEAVY_PERCENTAGE: Final[int] = 90  # weeks at or above this rest longest
REST_MODERATE_PERCENTAGE: Final[int] = 70
REST_HEAVY_SECONDS: Final[int] = 180
REST_MODERATE_SECONDS: Final[int] = 120
REST_LIGHT_SECONDS: Final[int] = 90
REST_UNKNOWN_SECONDS: Final[int] = 120

# =============================================================================
# SCHEMA & VALIDATION
# =============================================================================

CURRENT_SCHEMA_VERSION: Final[int] = 3
DEFAULT_SCHEMA_VERSION: Final[int] = 1  # absent or 0 is read as v1

EXPORT_SENTINEL_KEY: Final[str] = "tb3_export"
MAX_IMPORT_BYTES: Final[int] = 1_000_000
MAX_NOTES_LENGTH: Final[int] = 500
UNSAFE_KEYS: Final[frozenset[str]] = frozenset({"__proto__", "prototype", "constructor"})

WEIGHT_MIN: Final[float] = 1.0
WEIGHT_MAX: Final[float] = 1500.0
REPS_MIN: Final[int] = 1
REPS_MAX: Final[int] = 15
