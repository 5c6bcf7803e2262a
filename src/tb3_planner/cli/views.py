"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of templates, lifts, plate loads and
the computed schedule.
"""

from rich.console import Console
from rich.table import Table

from ..core.models import (
    ComputedSchedule,
    ComputedSession,
    ComputedWeek,
    DerivedLiftEntry,
    PlateResult,
    RepsPerSet,
    UserProfile,
)
from ..core.plates import format_weight
from ..core.templates.base import Template

console = Console()


def _fmt_reps(reps: RepsPerSet) -> str:
    if isinstance(reps, list):
        return ",".join(str(r) for r in reps)
    return str(reps)


def _fmt_sets(sets_range: list[int]) -> str:
    if not sets_range:
        return "-"
    if len(sets_range) == 1:
        return str(sets_range[0])
    return f"{sets_range[0]}-{sets_range[-1]}"


def _fmt_prescription(sets_range: list[int], reps: RepsPerSet) -> str:
    """'3-5 x 5' for a rep count, '3,2,1,3,2' for a per-set scheme."""
    if isinstance(reps, list):
        return _fmt_reps(reps)
    return f"{_fmt_sets(sets_range)} x {reps}"


def _plate_cell(result: PlateResult) -> str:
    if result.achievable:
        return result.display_text
    return f"[red]{result.display_text}[/red]"


def print_templates(templates: list[Template]) -> None:
    table = Table(title="Templates")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Weeks", justify="right")
    table.add_column("Sessions/wk", justify="right")
    table.add_column("Lift selection")
    for t in templates:
        table.add_row(
            t.id,
            t.name,
            str(t.duration_weeks),
            str(t.sessions_per_week),
            "yes" if t.requires_lift_selection or t.lift_slots else "fixed",
        )
    console.print(table)


def print_template_detail(template: Template) -> None:
    console.print(f"[bold]{template.name}[/bold] ({template.id})")
    if template.description:
        console.print(template.description)
    for slot in template.lift_slots:
        console.print(
            f"  Slot [cyan]{slot.cluster}[/cyan] {slot.label}: "
            f"{slot.min_lifts}-{slot.max_lifts} lifts, default {', '.join(slot.default_lifts)}"
        )
    table = Table()
    table.add_column("Week", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Sets x Reps")
    for week in template.weeks:
        table.add_row(
            str(week.week_number),
            str(week.percentage),
            _fmt_prescription(week.sets_range, week.reps_per_set),
        )
    console.print(table)


def print_percentage_table(one_rep_max: float, working_max: float, rows: list[dict]) -> None:
    console.print(
        f"1RM: [bold]{format_weight(one_rep_max)}[/bold]   "
        f"Working max: [bold]{format_weight(working_max)}[/bold]"
    )
    table = Table()
    table.add_column("%", justify="right")
    table.add_column("Weight", justify="right")
    for row in rows:
        table.add_row(str(row["percentage"]), format_weight(row["weight"]))
    console.print(table)


def print_lifts(lifts: list[DerivedLiftEntry], profile: UserProfile) -> None:
    if not lifts:
        console.print("[dim]No max tests logged yet.[/dim]")
        return
    table = Table(title=f"Current lifts ({profile.max_type} max, {profile.unit})")
    table.add_column("Lift", style="cyan")
    table.add_column("Tested", justify="right")
    table.add_column("1RM", justify="right")
    table.add_column("Working max", justify="right")
    table.add_column("Date")
    for lift in lifts:
        table.add_row(
            lift.name,
            f"{format_weight(lift.weight)} x {lift.reps}",
            format_weight(lift.one_rep_max),
            format_weight(lift.working_max),
            lift.test_date[:10],
        )
    console.print(table)


def print_plate_result(target: float, result: PlateResult) -> None:
    status = "[green]achievable[/green]" if result.achievable else "[red]not achievable[/red]"
    console.print(f"{format_weight(target)}: {_plate_cell(result)} ({status})")


def _session_table(session: ComputedSession, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Lift", style="cyan")
    table.add_column("Target", justify="right")
    table.add_column("Plates")
    for ex in session.exercises:
        target = format_weight(ex.target_weight) if ex.target_weight > 0 else "-"
        if ex.is_bodyweight:
            target = f"BW + {target}"
        table.add_row(ex.lift_name, target, _plate_cell(ex.plate_breakdown))
    return table


def print_session(week: ComputedWeek, session: ComputedSession, template_name: str = "") -> None:
    prefix = f"{template_name} " if template_name else ""
    title = (
        f"{prefix}Week {week.week_number}, Session {session.session_number}: "
        f"{session.percentage}%  {_fmt_prescription(session.sets_range, session.reps_per_set)}"
    )
    console.print(_session_table(session, title))


def print_schedule(
    schedule: ComputedSchedule,
    template_name: str,
    current_week: int | None = None,
    only_week: int | None = None,
) -> None:
    """
    Print every week of the schedule, one table per session.

    Args:
        schedule: Computed schedule
        template_name: Heading
        current_week: Week to highlight
        only_week: Restrict output to one week
    """
    console.print(f"[bold]{template_name}[/bold]")
    for week in schedule.weeks:
        if only_week is not None and week.week_number != only_week:
            continue
        marker = " [yellow]<- current[/yellow]" if week.week_number == current_week else ""
        console.print()
        console.print(
            f"[bold]Week {week.week_number}[/bold]  {week.percentage}%  "
            f"{_fmt_prescription(week.sets_range, week.reps_per_set)}{marker}"
        )
        for session in week.sessions:
            title = (
                f"Session {session.session_number}: {session.percentage}%  "
                f"{_fmt_prescription(session.sets_range, session.reps_per_set)}"
            )
            console.print(_session_table(session, title))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
