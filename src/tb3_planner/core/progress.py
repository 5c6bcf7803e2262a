"""
Program progress: starting a template, stepping through its sessions,
and the rest-timer helpers used while a session is in progress.
"""

from dataclasses import dataclass, replace

from .config import (
    REST_HEAVY_PERCENTAGE,
    REST_HEAVY_SECONDS,
    REST_LIGHT_SECONDS,
    REST_MODERATE_PERCENTAGE,
    REST_MODERATE_SECONDS,
    REST_UNKNOWN_SECONDS,
)
from .models import ActiveProgram, ComputedSchedule, ComputedSession, ComputedWeek, UserProfile
from .templates.registry import get_template, validate_lift_selections


@dataclass
class NextWorkout:
    """The session the user should train next."""

    template_id: str
    week: ComputedWeek
    session: ComputedSession

    @property
    def week_number(self) -> int:
        return self.week.week_number

    @property
    def session_number(self) -> int:
        return self.session.session_number


def start_program(
    template_id: str,
    start_date: str,
    lift_selections: dict[str, list[str]] | None = None,
) -> ActiveProgram:
    """
    Create a fresh ActiveProgram at week 1, session 1.

    Args:
        template_id: Catalog id, e.g. "operator"
        start_date: ISO date the cycle starts
        lift_selections: Slot key → lifts; omitted slots use their defaults

    Raises:
        ValueError: Unknown template, or selections that do not fit its slots
    """
    template = get_template(template_id)
    if template is None:
        raise ValueError(f"Unknown template: {template_id}")

    selections = {k: list(v) for k, v in (lift_selections or {}).items()}
    problems = validate_lift_selections(template, selections)
    if problems:
        raise ValueError("; ".join(problems))

    return ActiveProgram(
        template_id=template_id,
        start_date=start_date,
        current_week=1,
        current_session=1,
        lift_selections=selections,
        last_modified=start_date,
    )


def advance_program(program: ActiveProgram, last_modified: str = "") -> ActiveProgram:
    """
    Move to the next session, rolling over to the next week after the
    template's last session.

    Advancing past the final week leaves ``current_week`` at
    ``duration_weeks + 1``; see is_program_complete.  A completed program
    is returned unchanged.

    Returns:
        A new ActiveProgram; the input is not modified

    Raises:
        ValueError: If the program references an unknown template
    """
    template = get_template(program.template_id)
    if template is None:
        raise ValueError(f"Unknown template: {program.template_id}")
    if is_program_complete(program):
        return program

    week, session = program.current_week, program.current_session + 1
    if session > template.sessions_per_week:
        week, session = week + 1, 1

    return replace(
        program,
        current_week=week,
        current_session=session,
        lift_selections={k: list(v) for k, v in program.lift_selections.items()},
        last_modified=last_modified or program.last_modified,
    )


def is_program_complete(program: ActiveProgram) -> bool:
    """True once the program has moved past its template's final week."""
    template = get_template(program.template_id)
    if template is None:
        return False
    return program.current_week > template.duration_weeks


def get_next_workout(program: ActiveProgram, schedule: ComputedSchedule) -> NextWorkout | None:
    """
    Resolve the program's current position against the computed schedule.

    Returns:
        NextWorkout, or None when the cycle is complete or the position is
        not present in the schedule
    """
    week = next((w for w in schedule.weeks if w.week_number == program.current_week), None)
    if week is None:
        return None
    session = next(
        (s for s in week.sessions if s.session_number == program.current_session), None
    )
    if session is None:
        return None
    return NextWorkout(template_id=program.template_id, week=week, session=session)


def get_rest_duration(
    profile: UserProfile,
    schedule: ComputedSchedule | None,
    program: ActiveProgram | None,
) -> int:
    """
    Rest between sets, in seconds.

    The profile's ``rest_timer_default`` wins when set; otherwise the rest
    scales with the current week's intensity.
    """
    if profile.rest_timer_default > 0:
        return profile.rest_timer_default

    week = None
    if schedule is not None and program is not None:
        week = next((w for w in schedule.weeks if w.week_number == program.current_week), None)
    if week is None:
        return REST_UNKNOWN_SECONDS
    if week.percentage >= REST_HEAVY_PERCENTAGE:
        return REST_HEAVY_SECONDS
    if week.percentage >= REST_MODERATE_PERCENTAGE:
        return REST_MODERATE_SECONDS
    return REST_LIGHT_SECONDS


def format_timer_display(ms: int | float) -> str:
    """Format milliseconds as M:SS, truncating partial seconds (negatives show 0:00)."""
    total_seconds = max(0, int(ms // 1000))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"
