"""
Plate-loading solver.

Turns a target load into the plates to put on a barbell (both sides, bar
weight included) or on a dip belt (one side, no bar), given the plates the
user actually owns.

Search
------
  1. Greedy descent over denominations, heaviest first, never overshooting
     the remaining load and never using more plates than are available.
  2. If greedy misses, a bounded exhaustive search over plate counts (in
     integer hundredths, sums capped at the target) looks for any exact
     combination, preferring the fewest plates.
  3. If nothing matches, ``nearest_achievable`` is the heaviest reachable
     load that does not exceed the target.

Plate computations never raise; "not achievable" is a normal result.
"""

from __future__ import annotations

import math

from .config import PLATE_EPSILON, PLATE_UNITS_PER_LB
from .models import Plate, PlateInventory, PlateLoad, PlateResult

NOT_ACHIEVABLE_TEXT = "Not achievable"
BAR_ONLY_TEXT = "Bar only"
BODYWEIGHT_ONLY_TEXT = "Bodyweight only"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _usable_plates(inventory: PlateInventory) -> list[Plate]:
    """Plates with stock, heaviest first."""
    return sorted(
        (p for p in inventory.plates if p.available > 0),
        key=lambda p: p.weight,
        reverse=True,
    )


def _to_units(weight: float) -> int:
    return int(round(weight * PLATE_UNITS_PER_LB))


def format_weight(weight: float) -> str:
    """Render 45.0 as "45" and 2.5 as "2.5"."""
    if float(weight).is_integer():
        return str(int(weight))
    return f"{weight:g}"


def _plates_text(plates: list[PlateLoad]) -> str:
    parts = []
    for load in plates:
        w = format_weight(load.weight)
        parts.append(f"{load.count}x{w}" if load.count > 1 else w)
    return " + ".join(parts)


def _greedy(target: float, plates: list[Plate]) -> tuple[list[PlateLoad], float]:
    """
    Take the heaviest plate that still fits until the target is met.

    Returns:
        (loads used, total load reached)
    """
    total = 0.0
    loads: list[PlateLoad] = []
    for plate in plates:
        count = 0
        while (
            count < plate.available
            and total < target - PLATE_EPSILON
            and total + plate.weight <= target + PLATE_EPSILON
        ):
            total += plate.weight
            count += 1
        if count > 0:
            loads.append(PlateLoad(weight=plate.weight, count=count))
    return loads, total


def _reachable_loads(target: float, plates: list[Plate]) -> dict[int, tuple[int, ...]]:
    """
    Every load (in hundredths) reachable without exceeding ``target``.

    Maps load → plate count per denomination (same order as ``plates``),
    keeping the combination with the fewest plates for each load.
    """
    cap = math.floor(target * PLATE_UNITS_PER_LB + PLATE_EPSILON)
    reachable: dict[int, tuple[int, ...]] = {0: ()}
    for plate in plates:
        step = _to_units(plate.weight)
        extended: dict[int, tuple[int, ...]] = {}
        for load, counts in reachable.items():
            for n in range(plate.available + 1):
                new_load = load + n * step
                if new_load > cap:
                    break
                candidate = counts + (n,)
                previous = extended.get(new_load)
                if previous is None or sum(candidate) < sum(previous):
                    extended[new_load] = candidate
        reachable = extended
    return reachable


def _solve(target: float, inventory: PlateInventory) -> tuple[list[PlateLoad] | None, float]:
    """
    Match ``target`` against the inventory.

    Returns:
        (plates, target) on an exact match, else (None, nearest load ≤ target)
    """
    plates = _usable_plates(inventory)

    loads, total = _greedy(target, plates)
    if abs(total - target) < PLATE_EPSILON:
        return loads, target

    reachable = _reachable_loads(target, plates)
    exact = reachable.get(_to_units(target))
    if exact is not None:
        loads = [
            PlateLoad(weight=plate.weight, count=n)
            for plate, n in zip(plates, exact)
            if n > 0
        ]
        # hundredths can hide a sub-cent miss
        if abs(sum(p.weight * p.count for p in loads) - target) < PLATE_EPSILON:
            return loads, target

    nearest_units = max(reachable)
    return None, nearest_units / PLATE_UNITS_PER_LB


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def calculate_barbell_plates(
    total_weight: float,
    bar_weight: float,
    inventory: PlateInventory,
) -> PlateResult:
    """
    Plates per side needed to reach ``total_weight`` on a barbell.

    Args:
        total_weight: Target load including the bar
        bar_weight: Empty-bar weight
        inventory: Plates owned, counted per side

    Returns:
        PlateResult; ``nearest_achievable`` is a total (bar included)
    """
    if total_weight <= 0:
        return PlateResult(achievable=False, display_text=NOT_ACHIEVABLE_TEXT)

    if abs(total_weight - bar_weight) < PLATE_EPSILON:
        return PlateResult(achievable=True, display_text=BAR_ONLY_TEXT, is_bar_only=True)

    if total_weight < bar_weight:
        return PlateResult(
            achievable=False,
            display_text=f"Below bar weight ({format_weight(bar_weight)})",
            is_below_bar=True,
        )

    per_side = (total_weight - bar_weight) / 2
    plates, reached = _solve(per_side, inventory)
    if plates is not None:
        return PlateResult(
            achievable=True,
            plates=plates,
            display_text=f"{_plates_text(plates)} per side",
        )

    nearest = reached * 2 + bar_weight
    return PlateResult(
        achievable=False,
        display_text=f"{NOT_ACHIEVABLE_TEXT} (nearest: {format_weight(nearest)})",
        nearest_achievable=nearest,
    )


def calculate_belt_plates(total_weight: float, inventory: PlateInventory) -> PlateResult:
    """
    Plates to hang on a dip belt for ``total_weight`` of added load.

    Args:
        total_weight: Added load (bodyweight excluded)
        inventory: Belt plates owned

    Returns:
        PlateResult; zero or negative load means bodyweight only
    """
    if total_weight <= 0:
        return PlateResult(
            achievable=True,
            display_text=BODYWEIGHT_ONLY_TEXT,
            is_bodyweight_only=True,
        )

    plates, reached = _solve(total_weight, inventory)
    if plates is not None:
        return PlateResult(
            achievable=True,
            plates=plates,
            display_text=f"{_plates_text(plates)} on belt",
        )

    return PlateResult(
        achievable=False,
        display_text=f"{NOT_ACHIEVABLE_TEXT} (nearest: {format_weight(reached)})",
        nearest_achievable=reached,
    )
