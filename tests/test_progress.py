"""
Tests for program progress and the rest-timer helpers.
"""

import pytest

from tb3_planner.core.models import ActiveProgram, DerivedLiftEntry, UserProfile
from tb3_planner.core.progress import (
    advance_program,
    format_timer_display,
    get_next_workout,
    get_rest_duration,
    is_program_complete,
    start_program,
)
from tb3_planner.core.schedule import generate_schedule
from tb3_planner.core.templates import OPERATOR

ALL_LIFTS = [
    DerivedLiftEntry("Squat", 250, 5, 333.3, 300),
    DerivedLiftEntry("Bench", 170, 5, 222.2, 200),
    DerivedLiftEntry("Deadlift", 340, 5, 444.4, 400),
    DerivedLiftEntry("Weighted Pull-up", 45, 5, 55.5, 50, is_bodyweight=True),
]


def operator_schedule():
    program = start_program("operator", "2025-01-01")
    return program, generate_schedule(program, ALL_LIFTS, UserProfile())


class TestStartProgram:
    def test_starts_at_week_one_session_one(self):
        program = start_program("zulu", "2025-01-01", {"A": ["Squat", "Bench"]})
        assert (program.current_week, program.current_session) == (1, 1)
        assert program.lift_selections == {"A": ["Squat", "Bench"]}

    def test_unknown_template(self):
        with pytest.raises(ValueError, match="Unknown template"):
            start_program("nope", "2025-01-01")

    def test_invalid_selection(self):
        with pytest.raises(ValueError, match="2-3"):
            start_program("zulu", "2025-01-01", {"A": ["Squat"]})

    def test_bad_date(self):
        with pytest.raises(ValueError):
            start_program("operator", "01/01/2025")


class TestAdvanceProgram:
    def test_next_session(self):
        program = advance_program(start_program("operator", "2025-01-01"))
        assert (program.current_week, program.current_session) == (1, 2)

    def test_rolls_over_week(self):
        program = ActiveProgram("operator", "2025-01-01", current_week=1, current_session=3)
        advanced = advance_program(program)
        assert (advanced.current_week, advanced.current_session) == (2, 1)

    def test_input_not_modified(self):
        program = start_program("operator", "2025-01-01")
        advance_program(program)
        assert program.current_session == 1

    def test_completes_after_last_session(self):
        program = start_program("operator", "2025-01-01")
        for _ in range(OPERATOR.duration_weeks * OPERATOR.sessions_per_week):
            assert not is_program_complete(program)
            program = advance_program(program)
        assert is_program_complete(program)
        assert advance_program(program) is program


class TestNextWorkout:
    def test_first_workout(self):
        program, schedule = operator_schedule()
        workout = get_next_workout(program, schedule)
        assert workout is not None
        assert (workout.week_number, workout.session_number) == (1, 1)
        assert workout.session.percentage == 70

    def test_follows_progress(self):
        program, schedule = operator_schedule()
        program = advance_program(advance_program(advance_program(program)))
        workout = get_next_workout(program, schedule)
        assert (workout.week_number, workout.session_number) == (2, 1)
        assert workout.week.percentage == 80

    def test_none_when_complete(self):
        _, schedule = operator_schedule()
        done = ActiveProgram("operator", "2025-01-01", current_week=7, current_session=1)
        assert get_next_workout(done, schedule) is None


class TestRestDuration:
    def test_profile_default_wins(self):
        program, schedule = operator_schedule()
        assert get_rest_duration(UserProfile(rest_timer_default=150), schedule, program) == 150

    @pytest.mark.parametrize("week, expected", [(1, 120), (3, 180), (4, 120), (6, 180)])
    def test_scales_with_intensity(self, week, expected):
        _, schedule = operator_schedule()
        program = ActiveProgram("operator", "2025-01-01", current_week=week)
        assert get_rest_duration(UserProfile(), schedule, program) == expected

    def test_light_week(self):
        program = start_program("mass-strength", "2025-01-01")
        schedule = generate_schedule(program, ALL_LIFTS, UserProfile())
        assert get_rest_duration(UserProfile(), schedule, program) == 90

    def test_unknown_week(self):
        program, schedule = operator_schedule()
        past_end = ActiveProgram("operator", "2025-01-01", current_week=9)
        assert get_rest_duration(UserProfile(), schedule, past_end) == 120
        assert get_rest_duration(UserProfile(), None, program) == 120


class TestTimerDisplay:
    @pytest.mark.parametrize(
        "ms, text",
        [(0, "0:00"), (999, "0:00"), (1000, "0:01"), (65_000, "1:05"), (180_000, "3:00"), (600_500, "10:00")],
    )
    def test_format(self, ms, text):
        assert format_timer_display(ms) == text

    def test_negative_clamped(self):
        assert format_timer_display(-5000) == "0:00"
