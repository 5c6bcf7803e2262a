"""
Base types for training template definitions.

A Template is a tagged, immutable data record; the schedule generator reads
its optional fields (lift slots, cluster percentages, session overrides)
instead of dispatching on subclasses.
"""

from dataclasses import dataclass, field

from ..models import RepsPerSet


@dataclass(frozen=True)
class TemplateWeek:
    """Intensity and volume for one week of a template."""

    week_number: int
    percentage: int
    reps_per_set: RepsPerSet
    sets_range: list[int] = field(default_factory=list)  # [n] or [min, max]


@dataclass(frozen=True)
class SessionDef:
    """
    Lifts trained in one session of the week.

    Either a fixed roster (``lifts``) or a reference to a user-filled lift
    slot (``slot``), never both.
    """

    session_number: int
    lifts: list[str] = field(default_factory=list)
    slot: str | None = None


@dataclass(frozen=True)
class LiftSlot:
    """A group of lifts the user picks when starting a template."""

    cluster: str             # key into ActiveProgram.lift_selections
    label: str
    min_lifts: int
    max_lifts: int
    default_lifts: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ClusterPercentages:
    """Zulu-style split intensities: sessions in cluster one vs cluster two."""

    cluster_one: int
    cluster_two: int


@dataclass(frozen=True)
class SetsReps:
    """A fixed sets × reps prescription."""

    sets: int
    reps: int


@dataclass(frozen=True)
class Template:
    """
    Full definition of one training template.

    Shared by every user; loaded once from the bundled YAML files.
    """

    # Identity
    id: str                  # e.g. "operator", "grey-man"
    name: str                # e.g. "Operator"
    description: str

    # Structure
    duration_weeks: int
    sessions_per_week: int
    weeks: list[TemplateWeek]
    session_defs: list[SessionDef]

    # Flags
    has_set_range: bool
    requires_lift_selection: bool
    hide_rest_timer: bool = False

    # Slot-based lift selection (Zulu, Fighter, Gladiator, ...)
    lift_slots: list[LiftSlot] = field(default_factory=list)

    # Split-intensity weeks: {week_number: ClusterPercentages}
    cluster_percentages: dict[int, ClusterPercentages] = field(default_factory=dict)
    cluster_two_sessions: list[int] = field(default_factory=list)

    # Session-specific volume: {session_number: {week_number: SetsReps}}
    session_overrides: dict[int, dict[int, SetsReps]] = field(default_factory=dict)

    def get_week(self, week_number: int) -> TemplateWeek | None:
        """Return the week record with the given 1-based number."""
        for week in self.weeks:
            if week.week_number == week_number:
                return week
        return None

    def get_slot(self, cluster: str) -> LiftSlot | None:
        """Return the lift slot keyed by ``cluster``."""
        for slot in self.lift_slots:
            if slot.cluster == cluster:
                return slot
        return None
