"""Template catalog commands."""

from typing import Annotated, Optional

import typer

from ...core.templates import ALL_TEMPLATES, get_template, get_templates_for_days
from .. import views
from ..app import app


@app.command("templates")
def templates_cmd(
    template_id: Annotated[
        Optional[str],
        typer.Argument(help="Show one template's weeks in detail"),
    ] = None,
    days: Annotated[
        Optional[int],
        typer.Option("--days", "-d", help="Only templates for this many training days per week"),
    ] = None,
) -> None:
    """
    List the template catalog, or show one template.

    Example:
        tb3-planner templates --days 3
        tb3-planner templates zulu
    """
    if template_id is not None:
        template = get_template(template_id)
        if template is None:
            views.print_error(f"Unknown template: {template_id}")
            raise typer.Exit(1)
        views.print_template_detail(template)
        return

    templates = get_templates_for_days(days) if days is not None else list(ALL_TEMPLATES)
    views.print_templates(templates)
