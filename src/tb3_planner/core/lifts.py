"""
Current-lift derivation.

Reduces the raw max-test history to one DerivedLiftEntry per lift.  The
result is never stored; it is recomputed from the full history whenever a
caller needs it.
"""

from .config import LIFT_WEIGHTED_PULL_UP
from .models import AppData, DerivedLiftEntry, OneRepMaxTest
from .one_rep_max import calculate_one_rep_max, calculate_working_max


def latest_tests_by_lift(tests: list[OneRepMaxTest]) -> dict[str, OneRepMaxTest]:
    """
    Pick the most recent test for each lift.

    Dates compare as ISO strings.  On a date tie the heavier test wins; on a
    full tie the later entry in history wins.
    """
    latest: dict[str, OneRepMaxTest] = {}
    for test in tests:
        current = latest.get(test.lift_name)
        if current is None or (test.date, test.weight) >= (current.date, current.weight):
            latest[test.lift_name] = test
    return latest


def get_current_lifts(app_data: AppData) -> list[DerivedLiftEntry]:
    """
    Derive the current lifts from ``app_data.max_test_history``.

    The working max follows the profile's current ``max_type`` (not the
    type recorded on the test), so flipping the setting re-derives every
    lift.

    Returns:
        One entry per distinct lift name, sorted by name
    """
    max_type = app_data.profile.max_type
    entries: list[DerivedLiftEntry] = []
    for name, test in latest_tests_by_lift(app_data.max_test_history).items():
        one_rep_max = calculate_one_rep_max(test.weight, test.reps)
        entries.append(
            DerivedLiftEntry(
                name=name,
                weight=test.weight,
                reps=test.reps,
                one_rep_max=one_rep_max,
                working_max=calculate_working_max(one_rep_max, max_type),
                is_bodyweight=name == LIFT_WEIGHTED_PULL_UP,
                test_date=test.date,
            )
        )
    entries.sort(key=lambda e: e.name)
    return entries
