"""
Schedule generation for tb3-planner.

Expands a template into every week → session → exercise of the cycle,
with target weights from the user's working maxes and plate breakdowns
from their inventories.  Generation is deterministic: the same program,
lifts, profile and inventories always give the same schedule, which is
what lets callers cache it behind compute_source_hash().
"""

import hashlib
import json

from .config import LIFT_WEIGHTED_PULL_UP
from .lifts import get_current_lifts
from .models import (
    ActiveProgram,
    AppData,
    ComputedExercise,
    ComputedSchedule,
    ComputedSession,
    ComputedWeek,
    DerivedLiftEntry,
    PlateInventory,
    PlateResult,
    RepsPerSet,
    UserProfile,
    default_barbell_inventory,
    default_belt_inventory,
)
from .one_rep_max import calculate_percentage_weight
from .plates import calculate_barbell_plates, calculate_belt_plates
from .templates.base import SessionDef, Template, TemplateWeek
from .templates.registry import get_template

NO_MAX_TEXT = "No max recorded"


def resolve_session_lifts(
    template: Template,
    session_def: SessionDef,
    lift_selections: dict[str, list[str]],
) -> list[str]:
    """
    Lift names trained in one session.

    Fixed-roster sessions return their roster; slot sessions return the
    user's picks for that slot, or the slot defaults when nothing was
    picked.
    """
    if session_def.slot is None:
        return list(session_def.lifts)
    selected = lift_selections.get(session_def.slot)
    if selected:
        return list(selected)
    slot = template.get_slot(session_def.slot)
    return list(slot.default_lifts) if slot is not None else []


def session_prescription(
    template: Template,
    week: TemplateWeek,
    session_number: int,
) -> tuple[int, RepsPerSet, list[int]]:
    """
    Percentage, reps and sets for one session of one week.

    Zulu-style templates switch to the cluster-two percentage for their
    late-week sessions; templates with session overrides (the Mass Strength
    deadlift day) take sets and reps from the override table while the
    weight still follows the week percentage.

    Returns:
        (percentage, reps_per_set, sets_range)
    """
    percentage = week.percentage
    reps_per_set: RepsPerSet = week.reps_per_set
    sets_range = list(week.sets_range)

    clusters = template.cluster_percentages.get(week.week_number)
    if clusters is not None:
        if session_number in template.cluster_two_sessions:
            percentage = clusters.cluster_two
        else:
            percentage = clusters.cluster_one

    override = template.session_overrides.get(session_number, {}).get(week.week_number)
    if override is not None:
        reps_per_set = override.reps
        sets_range = [override.sets]

    return percentage, reps_per_set, sets_range


def _compute_exercise(
    lift_name: str,
    lift: DerivedLiftEntry | None,
    percentage: int,
    profile: UserProfile,
    barbell_inventory: PlateInventory,
    belt_inventory: PlateInventory,
) -> ComputedExercise:
    if lift is None:
        return ComputedExercise(
            lift_name=lift_name,
            target_weight=0,
            achievable=False,
            plate_breakdown=PlateResult(achievable=False, display_text=NO_MAX_TEXT),
            is_bodyweight=lift_name == LIFT_WEIGHTED_PULL_UP,
        )

    target = calculate_percentage_weight(lift.working_max, percentage, profile.rounding_increment)
    if lift.is_bodyweight:
        plates = calculate_belt_plates(target, belt_inventory)
    else:
        plates = calculate_barbell_plates(target, profile.barbell_weight, barbell_inventory)

    return ComputedExercise(
        lift_name=lift_name,
        target_weight=target,
        achievable=plates.achievable,
        plate_breakdown=plates,
        is_bodyweight=lift.is_bodyweight,
    )


def generate_schedule(
    program: ActiveProgram,
    current_lifts: list[DerivedLiftEntry],
    profile: UserProfile,
    barbell_inventory: PlateInventory | None = None,
    belt_inventory: PlateInventory | None = None,
) -> ComputedSchedule:
    """
    Build the full computed schedule for the active program.

    Args:
        program: Active program (template id + lift selections)
        current_lifts: Derived lifts; a lift absent here gets target 0
        profile: Supplies rounding increment and bar weight
        barbell_inventory: Barbell plates (default set when None)
        belt_inventory: Dip-belt plates (default set when None)

    Returns:
        ComputedSchedule in template week/session order

    Raises:
        ValueError: If the program references an unknown template
    """
    template = get_template(program.template_id)
    if template is None:
        raise ValueError(f"Unknown template: {program.template_id}")

    barbell = barbell_inventory if barbell_inventory is not None else default_barbell_inventory()
    belt = belt_inventory if belt_inventory is not None else default_belt_inventory()
    lifts_by_name = {lift.name: lift for lift in current_lifts}

    weeks: list[ComputedWeek] = []
    for week in template.weeks:
        week_pct = week.percentage
        clusters = template.cluster_percentages.get(week.week_number)
        if clusters is not None:
            week_pct = clusters.cluster_one

        sessions: list[ComputedSession] = []
        for session_def in template.session_defs:
            percentage, reps_per_set, sets_range = session_prescription(
                template, week, session_def.session_number
            )
            exercises = [
                _compute_exercise(
                    name, lifts_by_name.get(name), percentage, profile, barbell, belt
                )
                for name in resolve_session_lifts(template, session_def, program.lift_selections)
            ]
            sessions.append(
                ComputedSession(
                    session_number=session_def.session_number,
                    percentage=percentage,
                    reps_per_set=reps_per_set,
                    sets_range=sets_range,
                    exercises=exercises,
                )
            )

        weeks.append(
            ComputedWeek(
                week_number=week.week_number,
                percentage=week_pct,
                reps_per_set=week.reps_per_set,
                sets_range=list(week.sets_range),
                sessions=sessions,
            )
        )

    return ComputedSchedule(
        weeks=weeks,
        source_hash=compute_source_hash(program, current_lifts, profile, barbell_inventory, belt_inventory),
    )


def _inventory_key(inventory: PlateInventory | None) -> list | None:
    if inventory is None:
        return None
    return sorted([p.weight, p.available] for p in inventory.plates)


def compute_source_hash(
    program: ActiveProgram,
    lifts: list[DerivedLiftEntry],
    profile: UserProfile,
    barbell_inventory: PlateInventory | None = None,
    belt_inventory: PlateInventory | None = None,
) -> str:
    """
    Fingerprint every input that changes the schedule's content.

    Covers template id, lift selections, each lift's working max and
    bodyweight flag, rounding increment, bar weight and (when given) the
    plate inventories.  Progress fields (current week / session) are left
    out because they do not change the schedule.

    Returns:
        Hex SHA-256 of a canonical JSON document; identical inputs give an
        identical hash regardless of object identity or lift order
    """
    document = {
        "template_id": program.template_id,
        "lift_selections": {k: list(v) for k, v in program.lift_selections.items()},
        "lifts": sorted(
            [lift.name, float(lift.working_max), bool(lift.is_bodyweight)] for lift in lifts
        ),
        "rounding_increment": float(profile.rounding_increment),
        "barbell_weight": float(profile.barbell_weight),
        "barbell_inventory": _inventory_key(barbell_inventory),
        "belt_inventory": _inventory_key(belt_inventory),
    }
    payload = json.dumps(document, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def regenerate_schedule_if_needed(app_data: AppData) -> ComputedSchedule | None:
    """
    Return the schedule for ``app_data``, regenerating only when stale.

    The cached ``app_data.computed_schedule`` is reused when its
    ``source_hash`` matches the current inputs; otherwise a fresh schedule
    is generated and stored on ``app_data``.

    Returns:
        The up-to-date schedule, or None when no program is active

    Raises:
        ValueError: If the active program references an unknown template
    """
    program = app_data.active_program
    if program is None:
        app_data.computed_schedule = None
        return None

    lifts = get_current_lifts(app_data)
    source_hash = compute_source_hash(
        program, lifts, app_data.profile, app_data.barbell_inventory, app_data.belt_inventory
    )
    cached = app_data.computed_schedule
    if cached is not None and cached.source_hash == source_hash:
        return cached

    app_data.computed_schedule = generate_schedule(
        program, lifts, app_data.profile, app_data.barbell_inventory, app_data.belt_inventory
    )
    return app_data.computed_schedule
