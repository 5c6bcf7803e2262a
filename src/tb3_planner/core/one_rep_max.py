"""
One-rep-max and percentage math.

All functions are pure and typed for testability.

Formulas
--------
  1RM (Epley)      :  w × (1 + reps / 30), and exactly w for a single
  Training max     :  1RM × 0.90
  Rounding         :  round-half-up of weight / increment, times increment
"""

import math

from .config import EPLEY_REP_DIVISOR, PERCENTAGE_TABLE_STEPS, TM_FACTOR


def calculate_one_rep_max(weight: float, reps: int) -> float:
    """
    Estimate a one-rep max from a submaximal set.

    Args:
        weight: Load lifted
        reps: Reps completed at that load

    Returns:
        Estimated 1RM; 0 for non-positive weight or reps
    """
    if weight <= 0 or reps <= 0:
        return 0
    if reps == 1:
        return weight
    return weight * (1 + reps / EPLEY_REP_DIVISOR)


def calculate_training_max(one_rep_max: float) -> float:
    """Return the training max (90% of the 1RM)."""
    return one_rep_max * TM_FACTOR


def calculate_working_max(one_rep_max: float, max_type: str) -> float:
    """
    Return the max that percentages are taken from.

    ``"training"`` profiles work off 90% of the 1RM, ``"true"`` profiles off
    the 1RM itself.
    """
    if max_type == "training":
        return calculate_training_max(one_rep_max)
    return one_rep_max


def round_weight(weight: float, increment: float) -> float:
    """
    Round a weight to the nearest multiple of ``increment``.

    Halves round up (212.5 → 215 at increment 5) rather than to even.

    Args:
        weight: Raw weight
        increment: Snap granularity, typically 2.5 or 5

    Returns:
        Rounded weight (``weight`` unchanged for a non-positive increment)
    """
    if increment <= 0:
        return weight
    return math.floor(weight / increment + 0.5) * increment


def calculate_percentage_weight(working_max: float, percent: float, increment: float) -> float:
    """Return ``percent``% of ``working_max``, rounded to ``increment``."""
    return round_weight(working_max * percent / 100, increment)


def calculate_percentage_table(working_max: float, increment: float) -> list[dict]:
    """
    Build the 65–100% lookup table shown next to each lift.

    Returns:
        Eight ``{"percentage", "weight"}`` rows in ascending percentage order
    """
    return [
        {
            "percentage": pct,
            "weight": calculate_percentage_weight(working_max, pct, increment),
        }
        for pct in PERCENTAGE_TABLE_STEPS
    ]
