"""
YAML → Template loader.

Loads template definitions from individual YAML files in the bundled
``src/tb3_planner/templates/`` directory.  Each file (e.g. operator.yaml)
contains a flat template definition matching the Template schema.

Templates are part of the persisted-data contract (ActiveProgram stores the
template id and lift-slot keys), so unlike user settings they cannot be
overridden from the home directory.

Usage (internal, called by registry.py):
    from .loader import load_templates_from_yaml
    templates = load_templates_from_yaml()
"""

from __future__ import annotations

from pathlib import Path

import yaml

from .base import ClusterPercentages, LiftSlot, SessionDef, SetsReps, Template, TemplateWeek

_REQUIRED_TEMPLATE_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "name",
        "duration_weeks",
        "sessions_per_week",
        "has_set_range",
        "requires_lift_selection",
        "weeks",
        "session_defs",
    }
)

_REQUIRED_WEEK_FIELDS: frozenset[str] = frozenset({"week_number", "percentage", "reps_per_set"})

_REQUIRED_SLOT_FIELDS: frozenset[str] = frozenset({"cluster", "min_lifts", "max_lifts"})


def _reps_from_raw(value) -> int | list[int]:
    if isinstance(value, list):
        return [int(r) for r in value]
    return int(value)


def _validate_week(d: dict) -> TemplateWeek:
    """Convert a raw dict to TemplateWeek, raising ValueError on missing fields."""
    missing = _REQUIRED_WEEK_FIELDS - set(d)
    if missing:
        raise ValueError(f"TemplateWeek missing fields: {sorted(missing)}")
    return TemplateWeek(
        week_number=int(d["week_number"]),
        percentage=int(d["percentage"]),
        reps_per_set=_reps_from_raw(d["reps_per_set"]),
        sets_range=[int(s) for s in d.get("sets_range", [])],
    )


def _validate_session_def(d: dict) -> SessionDef:
    if "session_number" not in d:
        raise ValueError("SessionDef missing fields: ['session_number']")
    lifts = [str(x) for x in d.get("lifts", [])]
    slot = d.get("slot")
    if bool(lifts) == (slot is not None):
        raise ValueError(
            f"SessionDef {d['session_number']} must define exactly one of 'lifts' or 'slot'"
        )
    return SessionDef(
        session_number=int(d["session_number"]),
        lifts=lifts,
        slot=str(slot) if slot is not None else None,
    )


def _validate_slot(d: dict) -> LiftSlot:
    missing = _REQUIRED_SLOT_FIELDS - set(d)
    if missing:
        raise ValueError(f"LiftSlot missing fields: {sorted(missing)}")
    slot = LiftSlot(
        cluster=str(d["cluster"]),
        label=str(d.get("label", d["cluster"])),
        min_lifts=int(d["min_lifts"]),
        max_lifts=int(d["max_lifts"]),
        default_lifts=[str(x) for x in d.get("default_lifts", [])],
    )
    if not 0 < slot.min_lifts <= slot.max_lifts:
        raise ValueError(f"LiftSlot {slot.cluster}: need 0 < min_lifts <= max_lifts")
    return slot


def template_from_dict(d: dict) -> Template:
    """Convert a raw dict (from YAML) to a Template.

    Raises ValueError if any required field is absent or the structure is
    inconsistent (week / session counts, unknown slot references).
    """
    d = dict(d)
    missing = _REQUIRED_TEMPLATE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Template missing fields: {sorted(missing)}")

    weeks = [_validate_week(w) for w in d["weeks"]]
    session_defs = [_validate_session_def(s) for s in d["session_defs"]]
    lift_slots = [_validate_slot(s) for s in d.get("lift_slots", [])]

    cluster_percentages = {
        int(week): ClusterPercentages(
            cluster_one=int(v["cluster_one"]),
            cluster_two=int(v["cluster_two"]),
        )
        for week, v in (d.get("cluster_percentages") or {}).items()
    }
    session_overrides = {
        int(session): {
            int(week): SetsReps(sets=int(v["sets"]), reps=int(v["reps"]))
            for week, v in by_week.items()
        }
        for session, by_week in (d.get("session_overrides") or {}).items()
    }

    template = Template(
        id=str(d["id"]),
        name=str(d["name"]),
        description=str(d.get("description", "")).strip(),
        duration_weeks=int(d["duration_weeks"]),
        sessions_per_week=int(d["sessions_per_week"]),
        weeks=weeks,
        session_defs=session_defs,
        has_set_range=bool(d["has_set_range"]),
        requires_lift_selection=bool(d["requires_lift_selection"]),
        hide_rest_timer=bool(d.get("hide_rest_timer", False)),
        lift_slots=lift_slots,
        cluster_percentages=cluster_percentages,
        cluster_two_sessions=[int(s) for s in d.get("cluster_two_sessions", [])],
        session_overrides=session_overrides,
    )

    if len(template.weeks) != template.duration_weeks:
        raise ValueError(
            f"{template.id}: {len(template.weeks)} weeks defined, "
            f"duration_weeks is {template.duration_weeks}"
        )
    if len(template.session_defs) != template.sessions_per_week:
        raise ValueError(
            f"{template.id}: {len(template.session_defs)} sessions defined, "
            f"sessions_per_week is {template.sessions_per_week}"
        )
    slot_keys = {s.cluster for s in template.lift_slots}
    for sd in template.session_defs:
        if sd.slot is not None and sd.slot not in slot_keys:
            raise ValueError(f"{template.id}: session {sd.session_number} uses unknown slot {sd.slot!r}")
    if template.requires_lift_selection and not template.lift_slots:
        raise ValueError(f"{template.id}: requires_lift_selection but no lift_slots")

    return template


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; raise ValueError unless it holds a mapping."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: expected a mapping at top level")
    return data


def get_bundled_templates_dir() -> Path:
    """Return path to the bundled templates/ data directory."""
    # loader.py lives at src/tb3_planner/core/templates/loader.py
    # three levels up → src/tb3_planner/
    return Path(__file__).parent.parent.parent / "templates"


def load_templates_from_yaml(directory: Path | None = None) -> dict[str, Template]:
    """Return {template_id: Template} loaded from ``*.yaml`` files.

    Args:
        directory: Directory to scan (default: the bundled templates/)

    Raises:
        ValueError: If a file is malformed or two files share an id
        OSError: If the directory cannot be read
    """
    directory = directory or get_bundled_templates_dir()
    result: dict[str, Template] = {}
    for path in sorted(directory.glob("*.yaml")):
        try:
            template = template_from_dict(_load_yaml_file(path))
        except (ValueError, KeyError, TypeError, yaml.YAMLError) as exc:
            raise ValueError(f"tb3-planner: invalid template file '{path.name}': {exc}") from exc
        if template.id in result:
            raise ValueError(f"tb3-planner: duplicate template id '{template.id}' in {path.name}")
        result[template.id] = template
    return result
