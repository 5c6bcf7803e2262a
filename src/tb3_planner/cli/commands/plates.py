"""Plate calculator command."""

from typing import Annotated, Optional

import typer

from ...core.config import DEFAULT_BARBELL_WEIGHT
from ...core.models import default_barbell_inventory, default_belt_inventory
from ...core.plates import calculate_barbell_plates, calculate_belt_plates
from .. import views
from ..app import DataPathOption, app, get_store, load_or_exit


@app.command("plates")
def plates_cmd(
    weight: Annotated[float, typer.Option("--weight", "-w", help="Total target weight")],
    belt: Annotated[
        bool,
        typer.Option("--belt", help="Load a dip belt instead of a barbell"),
    ] = False,
    bar_weight: Annotated[
        Optional[float],
        typer.Option("--bar", help="Bar weight (default: profile, else 45)"),
    ] = None,
    data_path: DataPathOption = None,
) -> None:
    """
    Show which plates to load for a target weight.

    Uses the stored plate inventory when a data file exists, otherwise the
    default plate set.

    Example:
        tb3-planner plates --weight 225
        tb3-planner plates --weight 45 --belt
    """
    store = get_store(data_path)
    if store.exists():
        app_data = load_or_exit(store)
        barbell, belt_inv = app_data.barbell_inventory, app_data.belt_inventory
        profile_bar = app_data.profile.barbell_weight
    else:
        barbell, belt_inv = default_barbell_inventory(), default_belt_inventory()
        profile_bar = DEFAULT_BARBELL_WEIGHT

    if belt:
        result = calculate_belt_plates(weight, belt_inv)
    else:
        bar = bar_weight if bar_weight is not None else profile_bar
        if bar <= 0:
            views.print_error("Bar weight must be positive")
            raise typer.Exit(1)
        result = calculate_barbell_plates(weight, bar, barbell)
    views.print_plate_result(weight, result)
