"""Shared Typer app object, shared option types, and store utilities."""

import warnings
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import AppData
from ..io.data_store import DataStore
from ..io.migrations import MigrationError
from ..io.serializers import ValidationError
from . import views

# Shared --data-path option type used across all commands that touch the store
DataPathOption = Annotated[
    Optional[Path],
    typer.Option("--data-path", "-p", help="Path to the JSON data file (default ~/.tb3-planner/data.json)"),
]

app = typer.Typer(
    name="tb3-planner",
    help="Tactical Barbell strength planner: maxes, templates, schedules and plate math.",
    no_args_is_help=True,
)


def get_store(data_path: Path | None) -> DataStore:
    """Get data store from path or default location."""
    return DataStore(data_path)


def load_or_exit(store: DataStore, create: bool = False) -> AppData:
    """
    Load the store, printing validation warnings through the console.

    Args:
        store: Data store
        create: Initialize a fresh store when the file is missing

    Raises:
        typer.Exit: With code 1 when the data cannot be loaded
    """
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            if create and not store.exists():
                app_data = store.init()
            else:
                app_data = store.load()
        except FileNotFoundError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        except (ValidationError, MigrationError) as e:
            views.print_error(str(e))
            raise typer.Exit(1)
    for w in caught:
        views.print_warning(str(w.message))
    return app_data
