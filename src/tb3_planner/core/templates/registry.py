"""
Template registry.

All supported templates are registered here.  Use get_template() to look
up a Template by its id string.

Templates are loaded from per-template YAML files in the bundled
``src/tb3_planner/templates/`` directory at import time.  If loading fails
for any reason (parse error, missing field, missing template) a
RuntimeError is raised; the application cannot start without the full
catalog.
"""

from ..config import KNOWN_LIFTS
from .base import ClusterPercentages, SetsReps, Template

# Catalog order is the order templates are offered to the user.
TEMPLATE_IDS: tuple[str, ...] = (
    "operator",
    "zulu",
    "fighter",
    "gladiator",
    "mass-protocol",
    "mass-strength",
    "grey-man",
)

# Days-per-week → template ids offered for that schedule
_TEMPLATES_BY_DAYS: dict[int, tuple[str, ...]] = {
    2: ("fighter",),
    3: ("operator", "gladiator", "mass-protocol", "grey-man"),
    4: ("zulu",),
}


def _build_registry() -> dict[str, Template]:
    from .loader import load_templates_from_yaml

    try:
        loaded = load_templates_from_yaml()
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"tb3-planner: template definitions could not be loaded: {exc}") from exc

    missing = [tid for tid in TEMPLATE_IDS if tid not in loaded]
    if missing:
        raise RuntimeError(
            f"tb3-planner: missing template definitions: {', '.join(missing)}. "
            "Check that src/tb3_planner/templates/*.yaml files are present and valid."
        )
    return {tid: loaded[tid] for tid in TEMPLATE_IDS}


TEMPLATE_REGISTRY: dict[str, Template] = _build_registry()

ALL_TEMPLATES: list[Template] = list(TEMPLATE_REGISTRY.values())

OPERATOR = TEMPLATE_REGISTRY["operator"]
ZULU = TEMPLATE_REGISTRY["zulu"]
FIGHTER = TEMPLATE_REGISTRY["fighter"]
GLADIATOR = TEMPLATE_REGISTRY["gladiator"]
MASS_PROTOCOL = TEMPLATE_REGISTRY["mass-protocol"]
MASS_STRENGTH = TEMPLATE_REGISTRY["mass-strength"]
GREY_MAN = TEMPLATE_REGISTRY["grey-man"]

ZULU_CLUSTER_PERCENTAGES: dict[int, ClusterPercentages] = ZULU.cluster_percentages
MASS_STRENGTH_DL_WEEKS: dict[int, SetsReps] = MASS_STRENGTH.session_overrides[4]


def get_template(template_id: str) -> Template | None:
    """
    Return the Template for the given id, or None if there is none.

    Callers that cannot continue without a template (schedule generation)
    raise on None themselves.
    """
    return TEMPLATE_REGISTRY.get(template_id)


def get_templates_for_days(days: int) -> list[Template]:
    """
    Return the templates that fit ``days`` training days per week.

    2 → Fighter, 3 → the four 3-day templates, 4 → Zulu; any other value
    returns the whole catalog.
    """
    ids = _TEMPLATES_BY_DAYS.get(days)
    if ids is None:
        return list(ALL_TEMPLATES)
    return [TEMPLATE_REGISTRY[tid] for tid in ids]


def validate_lift_selections(template: Template, selections: dict[str, list[str]]) -> list[str]:
    """
    Check user lift picks against the template's slots.

    Slots missing from ``selections`` are fine; the generator falls back
    to their default lifts.

    Returns:
        Human-readable problems; empty when the selections are usable
    """
    problems: list[str] = []
    for key in selections:
        if template.get_slot(key) is None:
            problems.append(f"{template.name} has no lift slot '{key}'")

    for slot in template.lift_slots:
        lifts = selections.get(slot.cluster)
        if lifts is None:
            continue
        if not slot.min_lifts <= len(lifts) <= slot.max_lifts:
            problems.append(
                f"{slot.label}: choose {slot.min_lifts}-{slot.max_lifts} lifts, got {len(lifts)}"
            )
        if len(set(lifts)) != len(lifts):
            problems.append(f"{slot.label}: a lift is selected more than once")
        for lift in lifts:
            if lift not in KNOWN_LIFTS:
                problems.append(f"{slot.label}: unknown lift '{lift}'")
    return problems
