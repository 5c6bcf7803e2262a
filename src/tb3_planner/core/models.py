"""
Data models for tb3-planner.

All core dataclasses representing max tests, derived lifts, the active
program, plate inventories and the computed schedule.  Session history
records are owned by the UI layer and are carried around as raw dicts.
"""

import re
from dataclasses import dataclass, field
from typing import Literal

from .config import (
    DEFAULT_BARBELL_PLATES,
    DEFAULT_BARBELL_WEIGHT,
    DEFAULT_BELT_PLATES,
    DEFAULT_MAX_TYPE,
    DEFAULT_ROUNDING_INCREMENT,
    DEFAULT_UNIT,
    CURRENT_SCHEMA_VERSION,
    MAX_TYPES,
    UNITS,
)

MaxType = Literal["training", "true"]
Unit = Literal["lb", "kg"]
# A single rep count, or a per-set scheme such as [3, 2, 1, 3, 2]
RepsPerSet = int | list[int]

_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def _validate_date(date_str: str) -> None:
    """Accept YYYY-MM-DD or a full ISO8601 timestamp starting with one."""
    if not isinstance(date_str, str) or not _DATE_PREFIX.match(date_str):
        raise ValueError(f"Invalid date format: {date_str!r}. Expected YYYY-MM-DD")


@dataclass
class OneRepMaxTest:
    """
    A single max test entered by the user.

    Never edited once created; a newer test for the same lift (later
    ``date``) supersedes it.
    """

    id: str
    date: str
    lift_name: str
    weight: float
    reps: int
    calculated_max: float
    max_type: MaxType = "training"
    working_max: float = 0.0
    last_modified: str = ""

    def __post_init__(self) -> None:
        """Validate test data."""
        _validate_date(self.date)
        if not self.lift_name:
            raise ValueError("lift_name must be non-empty")
        if self.weight <= 0:
            raise ValueError("weight must be positive")
        if self.reps < 1:
            raise ValueError("reps must be at least 1")
        if self.max_type not in MAX_TYPES:
            raise ValueError(f"Invalid max_type: {self.max_type}")


@dataclass
class DerivedLiftEntry:
    """Current state of one lift, recomputed from the max-test history."""

    name: str
    weight: float
    reps: int
    one_rep_max: float
    working_max: float
    is_bodyweight: bool = False
    test_date: str = ""


@dataclass
class UserProfile:
    """
    User settings.

    Only ``max_type``, ``rounding_increment`` and ``barbell_weight`` feed the
    schedule math; the remaining fields are feedback toggles carried through
    for the UI and the schema migrations.
    """

    unit: Unit = DEFAULT_UNIT  # type: ignore[assignment]
    max_type: MaxType = DEFAULT_MAX_TYPE  # type: ignore[assignment]
    rounding_increment: float = DEFAULT_ROUNDING_INCREMENT
    barbell_weight: float = DEFAULT_BARBELL_WEIGHT
    rest_timer_default: int = 0  # seconds; 0 = derive from week intensity
    sound_mode: str = "on"
    voice_announcements: bool = False
    voice_name: str | None = None
    workout_reminders_enabled: bool = False
    rest_timer_alerts_enabled: bool = False

    def __post_init__(self) -> None:
        """Validate profile data."""
        if self.unit not in UNITS:
            raise ValueError(f"Invalid unit: {self.unit!r}. Must be one of {UNITS}")
        if self.max_type not in MAX_TYPES:
            raise ValueError(f"Invalid max_type: {self.max_type!r}. Must be one of {MAX_TYPES}")
        if self.rounding_increment <= 0:
            raise ValueError("rounding_increment must be positive")
        if self.barbell_weight <= 0:
            raise ValueError("barbell_weight must be positive")
        if self.rest_timer_default < 0:
            raise ValueError("rest_timer_default must be non-negative")


@dataclass
class Plate:
    """One plate denomination and how many of it are owned (per side for a barbell)."""

    weight: float
    available: int

    def __post_init__(self) -> None:
        if self.weight <= 0:
            raise ValueError("plate weight must be positive")
        if self.available < 0:
            raise ValueError("available must be non-negative")


@dataclass
class PlateInventory:
    """Physical plates owned.  Weights are unique within the list."""

    plates: list[Plate] = field(default_factory=list)

    def __post_init__(self) -> None:
        weights = [p.weight for p in self.plates]
        if len(weights) != len(set(weights)):
            raise ValueError("plate weights must be unique within an inventory")


def default_barbell_inventory() -> PlateInventory:
    """Return a fresh copy of the default barbell plate set."""
    return PlateInventory([Plate(float(w), n) for w, n in DEFAULT_BARBELL_PLATES])


def default_belt_inventory() -> PlateInventory:
    """Return a fresh copy of the default dip-belt plate set."""
    return PlateInventory([Plate(float(w), n) for w, n in DEFAULT_BELT_PLATES])


@dataclass
class PlateLoad:
    """``count`` plates of ``weight`` (per side for a barbell)."""

    weight: float
    count: int


@dataclass
class PlateResult:
    """Outcome of one plate computation.  Never persisted."""

    achievable: bool
    plates: list[PlateLoad] = field(default_factory=list)
    display_text: str = ""
    is_bar_only: bool = False
    is_below_bar: bool = False
    is_bodyweight_only: bool = False
    nearest_achievable: float | None = None


@dataclass
class ActiveProgram:
    """
    The template the user is currently running and where they are in it.

    ``current_week`` / ``current_session`` are 1-indexed and only move
    forward; see core.progress.advance_program.
    """

    template_id: str
    start_date: str
    current_week: int = 1
    current_session: int = 1
    lift_selections: dict[str, list[str]] = field(default_factory=dict)
    last_modified: str = ""

    def __post_init__(self) -> None:
        """Validate program position."""
        _validate_date(self.start_date)
        if self.current_week < 1:
            raise ValueError("current_week must be >= 1")
        if self.current_session < 1:
            raise ValueError("current_session must be >= 1")


@dataclass
class ComputedExercise:
    """One lift within a generated session."""

    lift_name: str
    target_weight: float
    achievable: bool
    plate_breakdown: PlateResult
    is_bodyweight: bool = False


@dataclass
class ComputedSession:
    """
    One generated session.

    ``percentage`` / ``reps_per_set`` / ``sets_range`` usually equal the
    owning week's values; Zulu cluster-two sessions and the Mass Strength
    deadlift day override them.
    """

    session_number: int
    percentage: int
    reps_per_set: RepsPerSet
    sets_range: list[int] = field(default_factory=list)
    exercises: list[ComputedExercise] = field(default_factory=list)


@dataclass
class ComputedWeek:
    """One generated week; percentage and reps come straight from the template."""

    week_number: int
    percentage: int
    reps_per_set: RepsPerSet
    sets_range: list[int] = field(default_factory=list)
    sessions: list[ComputedSession] = field(default_factory=list)


@dataclass
class ComputedSchedule:
    """Fully derived schedule.  Regenerated whole, never patched."""

    weeks: list[ComputedWeek] = field(default_factory=list)
    source_hash: str = ""


@dataclass
class AppData:
    """
    Complete persisted application state.

    ``session_history`` entries are kept as raw dicts; the core only checks
    their ids and notes.
    """

    profile: UserProfile = field(default_factory=UserProfile)
    schema_version: int = CURRENT_SCHEMA_VERSION
    active_program: ActiveProgram | None = None
    max_test_history: list[OneRepMaxTest] = field(default_factory=list)
    session_history: list[dict] = field(default_factory=list)
    barbell_inventory: PlateInventory = field(default_factory=default_barbell_inventory)
    belt_inventory: PlateInventory = field(default_factory=default_belt_inventory)
    computed_schedule: ComputedSchedule | None = None
