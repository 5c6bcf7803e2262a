"""Program commands: start a template, show the schedule, next and complete."""

import uuid
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.config import MAX_NOTES_LENGTH
from ...core.models import ActiveProgram, AppData, ComputedSchedule
from ...core.progress import (
    advance_program,
    format_timer_display,
    get_next_workout,
    get_rest_duration,
    is_program_complete,
    start_program,
)
from ...core.schedule import regenerate_schedule_if_needed
from ...core.templates import get_template
from .. import views
from ..app import DataPathOption, app, get_store, load_or_exit


def _parse_selections(raw: list[str]) -> dict[str, list[str]]:
    """Parse ``SLOT=Lift,Lift`` strings into a selections dict."""
    selections: dict[str, list[str]] = {}
    for item in raw:
        slot, sep, lifts = item.partition("=")
        if not sep or not slot.strip():
            raise ValueError(f"Invalid selection {item!r}; expected SLOT=Lift,Lift")
        selections[slot.strip()] = [name.strip() for name in lifts.split(",") if name.strip()]
    return selections


def _schedule_or_exit(app_data: AppData) -> tuple[ActiveProgram, ComputedSchedule]:
    """Return the active program and its up-to-date schedule, or exit 1."""
    program = app_data.active_program
    if program is None:
        views.print_error("No active program. Run 'start' first.")
        raise typer.Exit(1)
    try:
        schedule = regenerate_schedule_if_needed(app_data)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if schedule is None:
        views.print_error("No active program. Run 'start' first.")
        raise typer.Exit(1)
    return program, schedule


@app.command("start")
def start(
    template_id: Annotated[str, typer.Argument(help="Template id, e.g. operator")],
    start_date: Annotated[
        Optional[str],
        typer.Option("--date", help="Start date YYYY-MM-DD (default today)"),
    ] = None,
    select: Annotated[
        Optional[list[str]],
        typer.Option("--select", "-s", help="Lift slot picks, e.g. A=Squat,Bench (repeatable)"),
    ] = None,
    data_path: DataPathOption = None,
) -> None:
    """
    Start a template at week 1, session 1, replacing any active program.

    Example:
        tb3-planner start zulu -s "A=Squat,Military Press" -s "B=Bench,Deadlift"
    """
    store = get_store(data_path)
    app_data = load_or_exit(store, create=True)

    try:
        program = start_program(
            template_id,
            start_date or datetime.now().strftime("%Y-%m-%d"),
            _parse_selections(select or []),
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    app_data.active_program = program
    regenerate_schedule_if_needed(app_data)
    store.save(app_data)

    template = get_template(template_id)
    name = template.name if template is not None else template_id
    views.print_success(f"Started {name} on {program.start_date}.")


@app.command("schedule")
def schedule_cmd(
    week: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Only show this week"),
    ] = None,
    data_path: DataPathOption = None,
) -> None:
    """
    Show the full computed schedule for the active program.
    """
    store = get_store(data_path)
    app_data = load_or_exit(store)
    program, schedule = _schedule_or_exit(app_data)
    store.save(app_data)

    template = get_template(program.template_id)
    views.print_schedule(
        schedule,
        template.name if template is not None else program.template_id,
        current_week=program.current_week,
        only_week=week,
    )


@app.command("next")
def next_cmd(data_path: DataPathOption = None) -> None:
    """
    Show the next session to train, with its rest timer.
    """
    store = get_store(data_path)
    app_data = load_or_exit(store)
    program, schedule = _schedule_or_exit(app_data)
    store.save(app_data)

    workout = get_next_workout(program, schedule)
    if workout is None:
        views.print_info("Program complete. Retest your maxes and start a new cycle.")
        return

    template = get_template(program.template_id)
    views.print_session(workout.week, workout.session, template.name if template else "")
    if template is None or not template.hide_rest_timer:
        rest = get_rest_duration(app_data.profile, schedule, program)
        views.console.print(f"Rest between sets: [bold]{format_timer_display(rest * 1000)}[/bold]")


@app.command("complete")
def complete(
    notes: Annotated[
        str,
        typer.Option("--notes", "-n", help="Session notes"),
    ] = "",
    data_path: DataPathOption = None,
) -> None:
    """
    Mark the next session done and advance the program.
    """
    if len(notes) > MAX_NOTES_LENGTH:
        views.print_error(f"Notes exceed {MAX_NOTES_LENGTH} characters")
        raise typer.Exit(1)

    store = get_store(data_path)
    app_data = load_or_exit(store)
    program, schedule = _schedule_or_exit(app_data)

    workout = get_next_workout(program, schedule)
    if workout is None or is_program_complete(program):
        views.print_info("Program already complete.")
        return

    now = datetime.now()
    app_data.session_history.append(
        {
            "id": uuid.uuid4().hex,
            "date": now.strftime("%Y-%m-%d"),
            "templateId": program.template_id,
            "week": workout.week_number,
            "sessionNumber": workout.session_number,
            "status": "completed",
            "completedAt": now.isoformat(timespec="seconds"),
            "exercises": [
                {"liftName": ex.lift_name, "targetWeight": ex.target_weight}
                for ex in workout.session.exercises
            ],
            "notes": notes,
            "lastModified": now.isoformat(timespec="seconds"),
        }
    )
    app_data.active_program = advance_program(program, now.isoformat(timespec="seconds"))
    store.save(app_data)

    views.print_success(f"Completed week {workout.week_number}, session {workout.session_number}.")
    if is_program_complete(app_data.active_program):
        views.print_info("That was the last session of the cycle.")
