"""Max-test commands: 1RM calculator, logging a test, current lifts."""

import uuid
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.config import KNOWN_LIFTS, MAX_TYPES, REPS_MAX, REPS_MIN, WEIGHT_MAX, WEIGHT_MIN
from ...core.lifts import get_current_lifts
from ...core.models import OneRepMaxTest
from ...core.one_rep_max import (
    calculate_one_rep_max,
    calculate_percentage_table,
    calculate_working_max,
)
from ...core.plates import format_weight
from .. import views
from ..app import DataPathOption, app, get_store, load_or_exit


def _check_test_input(weight: float, reps: int) -> None:
    if not WEIGHT_MIN <= weight <= WEIGHT_MAX:
        views.print_error(f"Weight out of range: {weight} (allowed {WEIGHT_MIN:g}-{WEIGHT_MAX:g})")
        raise typer.Exit(1)
    if not REPS_MIN <= reps <= REPS_MAX:
        views.print_error(f"Reps out of range: {reps} (allowed {REPS_MIN}-{REPS_MAX})")
        raise typer.Exit(1)


@app.command("one-rm")
def one_rm(
    weight: Annotated[float, typer.Option("--weight", "-w", help="Weight lifted")],
    reps: Annotated[int, typer.Option("--reps", "-r", help="Reps completed")],
    max_type: Annotated[
        str,
        typer.Option("--max-type", help="training (90% of 1RM) or true"),
    ] = "training",
    increment: Annotated[
        float,
        typer.Option("--increment", "-i", help="Rounding increment"),
    ] = 5.0,
) -> None:
    """
    Estimate a 1RM and print the percentage table.

    Example:
        tb3-planner one-rm --weight 225 --reps 5
    """
    if max_type not in MAX_TYPES:
        views.print_error(f"Invalid max type: {max_type}. Must be one of {', '.join(MAX_TYPES)}")
        raise typer.Exit(1)
    _check_test_input(weight, reps)

    one_rep_max = calculate_one_rep_max(weight, reps)
    working_max = calculate_working_max(one_rep_max, max_type)
    views.print_percentage_table(
        one_rep_max, working_max, calculate_percentage_table(working_max, increment)
    )


@app.command("log-max")
def log_max(
    lift: Annotated[str, typer.Option("--lift", "-l", help=f"Lift name: {', '.join(KNOWN_LIFTS)}")],
    weight: Annotated[float, typer.Option("--weight", "-w", help="Weight lifted")],
    reps: Annotated[int, typer.Option("--reps", "-r", help="Reps completed")],
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Test date YYYY-MM-DD (default today)"),
    ] = None,
    data_path: DataPathOption = None,
) -> None:
    """
    Record a max test.  The newest test per lift sets its working max.

    Example:
        tb3-planner log-max --lift Squat --weight 315 --reps 5
    """
    if lift not in KNOWN_LIFTS:
        views.print_error(f"Unknown lift: {lift}. Must be one of {', '.join(KNOWN_LIFTS)}")
        raise typer.Exit(1)
    _check_test_input(weight, reps)

    store = get_store(data_path)
    app_data = load_or_exit(store, create=True)

    now = datetime.now()
    one_rep_max = calculate_one_rep_max(weight, reps)
    try:
        test = OneRepMaxTest(
            id=uuid.uuid4().hex,
            date=date or now.strftime("%Y-%m-%d"),
            lift_name=lift,
            weight=weight,
            reps=reps,
            calculated_max=one_rep_max,
            max_type=app_data.profile.max_type,
            working_max=calculate_working_max(one_rep_max, app_data.profile.max_type),
            last_modified=now.isoformat(timespec="seconds"),
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    app_data.max_test_history.append(test)
    store.save(app_data)
    views.print_success(
        f"Logged {lift} {format_weight(weight)} x {reps}: "
        f"1RM {format_weight(test.calculated_max)}, working max {format_weight(test.working_max)}"
    )


@app.command("lifts")
def lifts_cmd(data_path: DataPathOption = None) -> None:
    """
    Show the current lifts derived from the max-test history.
    """
    app_data = load_or_exit(get_store(data_path))
    views.print_lifts(get_current_lifts(app_data), app_data.profile)
