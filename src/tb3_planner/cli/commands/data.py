"""Data file commands: validate, export and import backups."""

from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from ...io.export_import import validate_import
from ...io.serializers import ValidationError
from ...io.validation import validate_app_data
from .. import views
from ..app import DataPathOption, app, get_store


@app.command("validate")
def validate_cmd(data_path: DataPathOption = None) -> None:
    """
    Check the data file and report problems without changing it.

    Exits 1 when the data is fatally malformed.
    """
    store = get_store(data_path)
    try:
        raw = store.load_raw()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    result = validate_app_data(raw)
    if result.severity == "ok":
        views.print_success(f"{store.data_path}: ok")
        return
    for message in result.errors:
        if result.severity == "fatal":
            views.print_error(message)
        else:
            views.print_warning(message)
    views.print_info(f"Severity: {result.severity}")
    if result.severity == "fatal":
        raise typer.Exit(1)


@app.command("export")
def export_cmd(
    output: Annotated[Path, typer.Argument(help="Backup file to write")],
    data_path: DataPathOption = None,
) -> None:
    """
    Write a backup file that 'import' accepts.
    """
    store = get_store(data_path)
    try:
        out = store.export_to(output, datetime.now().isoformat(timespec="seconds"))
    except (FileNotFoundError, ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Exported to {out}")


@app.command("import")
def import_cmd(
    backup: Annotated[Path, typer.Argument(help="Backup file to import")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Replace existing data without asking"),
    ] = False,
    data_path: DataPathOption = None,
) -> None:
    """
    Replace all data with a backup file after validating it.

    Nothing is changed unless the whole file passes validation.
    """
    try:
        raw = backup.read_bytes()
    except OSError as e:
        views.print_error(f"Cannot read {backup}: {e}")
        raise typer.Exit(1)

    result = validate_import(raw)
    if not result.success or result.data is None:
        views.print_error(f"Import rejected: {result.error}")
        raise typer.Exit(1)

    preview = result.preview
    views.console.print(
        f"Backup holds {preview['sessions']} sessions, "
        f"{preview['max_tests']} max tests across {preview['lifts']} lifts."
    )
    store = get_store(data_path)
    if store.exists() and not yes and not views.confirm_action("Replace all existing data?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        store.replace_with(result.data)
    except ValidationError as e:
        views.print_error(f"Import rejected: {e}")
        raise typer.Exit(1)
    views.print_success(f"Imported {backup}")
