"""
Training template definitions for tb3-planner.

Each template is described by a Template record that parameterises the
shared schedule generator.
"""

from .base import ClusterPercentages, LiftSlot, SessionDef, SetsReps, Template, TemplateWeek
from .registry import (
    ALL_TEMPLATES,
    FIGHTER,
    GLADIATOR,
    GREY_MAN,
    MASS_PROTOCOL,
    MASS_STRENGTH,
    MASS_STRENGTH_DL_WEEKS,
    OPERATOR,
    TEMPLATE_REGISTRY,
    ZULU,
    ZULU_CLUSTER_PERCENTAGES,
    get_template,
    get_templates_for_days,
    validate_lift_selections,
)

__all__ = [
    "ClusterPercentages",
    "LiftSlot",
    "SessionDef",
    "SetsReps",
    "Template",
    "TemplateWeek",
    "ALL_TEMPLATES",
    "FIGHTER",
    "GLADIATOR",
    "GREY_MAN",
    "MASS_PROTOCOL",
    "MASS_STRENGTH",
    "MASS_STRENGTH_DL_WEEKS",
    "OPERATOR",
    "TEMPLATE_REGISTRY",
    "ZULU",
    "ZULU_CLUSTER_PERCENTAGES",
    "get_template",
    "get_templates_for_days",
    "validate_lift_selections",
]
