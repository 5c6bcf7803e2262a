"""
JSON serialization for application data.

Handles conversion between the dataclasses in core.models and the
camelCase dicts used by the data file and by backup exports.
"""

from typing import Any

from ..core.config import CURRENT_SCHEMA_VERSION
from ..core.models import (
    ActiveProgram,
    AppData,
    ComputedExercise,
    ComputedSchedule,
    ComputedSession,
    ComputedWeek,
    OneRepMaxTest,
    Plate,
    PlateInventory,
    PlateLoad,
    PlateResult,
    UserProfile,
    default_barbell_inventory,
    default_belt_inventory,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


# (dataclass attribute, JSON key)
_PROFILE_FIELDS: tuple[tuple[str, str], ...] = (
    ("unit", "unit"),
    ("max_type", "maxType"),
    ("rounding_increment", "roundingIncrement"),
    ("barbell_weight", "barbellWeight"),
    ("rest_timer_default", "restTimerDefault"),
    ("sound_mode", "soundMode"),
    ("voice_announcements", "voiceAnnouncements"),
    ("voice_name", "voiceName"),
    ("workout_reminders_enabled", "workoutRemindersEnabled"),
    ("rest_timer_alerts_enabled", "restTimerAlertsEnabled"),
)


def user_profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    """
    Convert UserProfile to JSON-compatible dict.

    Args:
        profile: UserProfile to convert

    Returns:
        Dict representation
    """
    return {key: getattr(profile, attr) for attr, key in _PROFILE_FIELDS}


def dict_to_user_profile(data: dict[str, Any]) -> UserProfile:
    """
    Convert dict to UserProfile.

    Missing keys take the UserProfile defaults, so partial profiles from
    older files and backups load.

    Raises:
        ValidationError: If a present value is invalid
    """
    kwargs = {attr: data[key] for attr, key in _PROFILE_FIELDS if key in data}
    try:
        return UserProfile(**kwargs)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid profile: {e}") from e


def max_test_to_dict(test: OneRepMaxTest) -> dict[str, Any]:
    """Convert OneRepMaxTest to JSON-compatible dict."""
    return {
        "id": test.id,
        "date": test.date,
        "liftName": test.lift_name,
        "weight": test.weight,
        "reps": test.reps,
        "calculatedMax": test.calculated_max,
        "maxType": test.max_type,
        "workingMax": test.working_max,
        "lastModified": test.last_modified,
    }


def dict_to_max_test(data: dict[str, Any]) -> OneRepMaxTest:
    """
    Convert dict to OneRepMaxTest.

    Raises:
        ValidationError: If a required field is missing or invalid
    """
    try:
        return OneRepMaxTest(
            id=str(data["id"]),
            date=data["date"],
            lift_name=data["liftName"],
            weight=float(data["weight"]),
            reps=int(data["reps"]),
            calculated_max=float(data.get("calculatedMax", 0.0)),
            max_type=data.get("maxType", "training"),
            working_max=float(data.get("workingMax", 0.0)),
            last_modified=data.get("lastModified", ""),
        )
    except KeyError as e:
        raise ValidationError(f"Max test missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid max test {data.get('id')!r}: {e}") from e


def inventory_to_dict(inventory: PlateInventory) -> dict[str, Any]:
    return {"plates": [{"weight": p.weight, "available": p.available} for p in inventory.plates]}


def dict_to_inventory(data: dict[str, Any]) -> PlateInventory:
    """
    Convert dict to PlateInventory.

    Raises:
        ValidationError: If a plate entry is invalid or weights repeat
    """
    try:
        return PlateInventory(
            [Plate(float(p["weight"]), int(p["available"])) for p in data.get("plates", [])]
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid plate inventory: {e}") from e


def active_program_to_dict(program: ActiveProgram) -> dict[str, Any]:
    return {
        "templateId": program.template_id,
        "startDate": program.start_date,
        "currentWeek": program.current_week,
        "currentSession": program.current_session,
        "liftSelections": {k: list(v) for k, v in program.lift_selections.items()},
        "lastModified": program.last_modified,
    }


def dict_to_active_program(data: dict[str, Any]) -> ActiveProgram:
    """
    Convert dict to ActiveProgram.

    The template id is not checked here; an unknown id is reported by the
    validation gate and surfaces when the schedule is generated.

    Raises:
        ValidationError: If a required field is missing or invalid
    """
    try:
        return ActiveProgram(
            template_id=str(data["templateId"]),
            start_date=data["startDate"],
            current_week=int(data.get("currentWeek", 1)),
            current_session=int(data.get("currentSession", 1)),
            lift_selections={
                str(k): [str(x) for x in v] for k, v in (data.get("liftSelections") or {}).items()
            },
            last_modified=data.get("lastModified", ""),
        )
    except KeyError as e:
        raise ValidationError(f"Active program missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid active program: {e}") from e


def _plate_result_to_dict(result: PlateResult) -> dict[str, Any]:
    return {
        "achievable": result.achievable,
        "plates": [{"weight": p.weight, "count": p.count} for p in result.plates],
        "displayText": result.display_text,
        "isBarOnly": result.is_bar_only,
        "isBelowBar": result.is_below_bar,
        "isBodyweightOnly": result.is_bodyweight_only,
        "nearestAchievable": result.nearest_achievable,
    }


def _dict_to_plate_result(data: dict[str, Any]) -> PlateResult:
    return PlateResult(
        achievable=bool(data["achievable"]),
        plates=[PlateLoad(float(p["weight"]), int(p["count"])) for p in data.get("plates", [])],
        display_text=data.get("displayText", ""),
        is_bar_only=bool(data.get("isBarOnly", False)),
        is_below_bar=bool(data.get("isBelowBar", False)),
        is_bodyweight_only=bool(data.get("isBodyweightOnly", False)),
        nearest_achievable=data.get("nearestAchievable"),
    )


def schedule_to_dict(schedule: ComputedSchedule) -> dict[str, Any]:
    """Convert ComputedSchedule to JSON-compatible dict."""
    return {
        "sourceHash": schedule.source_hash,
        "weeks": [
            {
                "weekNumber": w.week_number,
                "percentage": w.percentage,
                "repsPerSet": w.reps_per_set,
                "setsRange": list(w.sets_range),
                "sessions": [
                    {
                        "sessionNumber": s.session_number,
                        "percentage": s.percentage,
                        "repsPerSet": s.reps_per_set,
                        "setsRange": list(s.sets_range),
                        "exercises": [
                            {
                                "liftName": e.lift_name,
                                "targetWeight": e.target_weight,
                                "achievable": e.achievable,
                                "isBodyweight": e.is_bodyweight,
                                "plateBreakdown": _plate_result_to_dict(e.plate_breakdown),
                            }
                            for e in s.exercises
                        ],
                    }
                    for s in w.sessions
                ],
            }
            for w in schedule.weeks
        ],
    }


def dict_to_schedule(data: dict[str, Any]) -> ComputedSchedule:
    """
    Convert dict to ComputedSchedule.

    Raises:
        ValidationError: If the cached schedule is malformed
    """
    try:
        return ComputedSchedule(
            source_hash=str(data.get("sourceHash", "")),
            weeks=[
                ComputedWeek(
                    week_number=int(w["weekNumber"]),
                    percentage=int(w["percentage"]),
                    reps_per_set=w["repsPerSet"],
                    sets_range=[int(x) for x in w.get("setsRange", [])],
                    sessions=[
                        ComputedSession(
                            session_number=int(s["sessionNumber"]),
                            percentage=int(s["percentage"]),
                            reps_per_set=s["repsPerSet"],
                            sets_range=[int(x) for x in s.get("setsRange", [])],
                            exercises=[
                                ComputedExercise(
                                    lift_name=e["liftName"],
                                    target_weight=float(e["targetWeight"]),
                                    achievable=bool(e["achievable"]),
                                    plate_breakdown=_dict_to_plate_result(e["plateBreakdown"]),
                                    is_bodyweight=bool(e.get("isBodyweight", False)),
                                )
                                for e in s.get("exercises", [])
                            ],
                        )
                        for s in w.get("sessions", [])
                    ],
                )
                for w in data.get("weeks", [])
            ],
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid computed schedule: {e}") from e


def app_data_to_dict(app_data: AppData) -> dict[str, Any]:
    """
    Convert AppData to the persisted JSON document.

    Args:
        app_data: AppData to convert

    Returns:
        Dict representation (camelCase keys)
    """
    return {
        "schemaVersion": app_data.schema_version,
        "profile": user_profile_to_dict(app_data.profile),
        "activeProgram": (
            active_program_to_dict(app_data.active_program)
            if app_data.active_program is not None
            else None
        ),
        "sessionHistory": [dict(s) for s in app_data.session_history],
        "maxTestHistory": [max_test_to_dict(t) for t in app_data.max_test_history],
        "barbellInventory": inventory_to_dict(app_data.barbell_inventory),
        "beltInventory": inventory_to_dict(app_data.belt_inventory),
        "computedSchedule": (
            schedule_to_dict(app_data.computed_schedule)
            if app_data.computed_schedule is not None
            else None
        ),
    }


def dict_to_app_data(data: dict[str, Any]) -> AppData:
    """
    Convert a migrated data dict to AppData.

    Optional sections fall back to defaults: no active program, empty
    histories, default inventories, no cached schedule.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data.get("profile"), dict):
        raise ValidationError("Missing profile")

    program = data.get("activeProgram")
    barbell = data.get("barbellInventory")
    belt = data.get("beltInventory")
    schedule = data.get("computedSchedule")
    sessions = data.get("sessionHistory") or []
    if not all(isinstance(s, dict) for s in sessions):
        raise ValidationError("sessionHistory entries must be objects")

    return AppData(
        profile=dict_to_user_profile(data["profile"]),
        schema_version=int(data.get("schemaVersion") or CURRENT_SCHEMA_VERSION),
        active_program=dict_to_active_program(program) if program else None,
        max_test_history=[dict_to_max_test(t) for t in data.get("maxTestHistory") or []],
        session_history=[dict(s) for s in sessions],
        barbell_inventory=dict_to_inventory(barbell) if barbell else default_barbell_inventory(),
        belt_inventory=dict_to_inventory(belt) if belt else default_belt_inventory(),
        computed_schedule=dict_to_schedule(schedule) if schedule else None,
    )
