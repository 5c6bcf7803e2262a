"""
JSON file storage for application data.

Handles reading, writing and initializing the data file, running the
validation gate and the schema migrations on every load.
"""

import json
import os
import tempfile
import warnings
from pathlib import Path
from typing import Any

from ..core.config import EXPORT_SENTINEL_KEY
from ..core.engine.config_loader import (
    build_default_inventories,
    build_default_profile,
    load_user_config,
)
from ..core.models import AppData
from .export_import import build_export
from .migrations import migrate_data, needs_migration
from .serializers import ValidationError, app_data_to_dict, dict_to_app_data, dict_to_max_test
from .validation import validate_app_data


def _drop_unloadable_max_tests(data: dict[str, Any], source: str) -> None:
    """Remove max tests the model rejects, warning once per entry."""
    tests = data.get("maxTestHistory")
    if not isinstance(tests, list):
        return
    kept = []
    for test in tests:
        try:
            dict_to_max_test(test if isinstance(test, dict) else {})
        except ValidationError as e:
            warnings.warn(f"{source}: dropped max test ({e})")
            continue
        kept.append(test)
    data["maxTestHistory"] = kept


def get_default_data_path() -> Path:
    """Return ~/.tb3-planner/data.json (not created)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".tb3-planner" / "data.json"


class DataStore:
    """
    Manages application data stored as a single JSON document.

    The document holds the profile, active program, histories, plate
    inventories and the last computed schedule (reused while its source
    hash still matches).
    """

    def __init__(self, data_path: str | Path | None = None):
        """
        Initialize the data store.

        Args:
            data_path: Path to the JSON data file (default ~/.tb3-planner/data.json)
        """
        self.data_path = Path(data_path) if data_path is not None else get_default_data_path()

    def exists(self) -> bool:
        """Check if the data file exists."""
        return self.data_path.exists()

    def init(self, config_path: Path | None = None) -> AppData:
        """
        Create a fresh data file if none exists.

        The profile and inventories come from the user config file merged
        over the built-in defaults.

        Returns:
            The stored AppData (existing data when the file was present)
        """
        if self.exists():
            return self.load()
        config = load_user_config(config_path)
        barbell, belt = build_default_inventories(config)
        app_data = AppData(
            profile=build_default_profile(config),
            barbell_inventory=barbell,
            belt_inventory=belt,
        )
        self.save(app_data)
        return app_data

    def load_raw(self) -> Any:
        """
        Read and parse the data file without validating it.

        Raises:
            FileNotFoundError: If the data file doesn't exist
            ValidationError: If the file is not valid JSON
        """
        if not self.exists():
            raise FileNotFoundError(f"Data file not found: {self.data_path}. Run 'start' or 'log-max' first.")
        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Data file is not valid JSON: {e}") from e

    def load(self) -> AppData:
        """
        Load, validate and migrate the data file.

        Warnings found by the validation gate are issued with
        ``warnings.warn`` and loading continues.  An active program with an
        unknown template is dropped.

        Returns:
            AppData at the current schema version

        Raises:
            FileNotFoundError: If the data file doesn't exist
            ValidationError: If the data is fatally malformed
            MigrationError: If the data cannot be upgraded
        """
        raw = self.load_raw()
        result = validate_app_data(raw)
        if result.severity == "fatal":
            raise ValidationError(f"Invalid data file {self.data_path}: {'; '.join(result.errors)}")
        for message in result.errors:
            warnings.warn(f"{self.data_path.name}: {message}")

        data = migrate_data(raw) if needs_migration(raw) else raw
        if result.severity == "recoverable":
            warnings.warn("Active program references an unknown template and was cleared")
            data["activeProgram"] = None
            data["computedSchedule"] = None
        _drop_unloadable_max_tests(data, self.data_path.name)
        return dict_to_app_data(data)

    def save(self, app_data: AppData) -> None:
        """
        Write ``app_data`` to the data file.

        Writes to a temporary sibling first and renames it over the target,
        so an interrupted write leaves the previous file intact.
        """
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = tempfile.NamedTemporaryFile(
            "w", dir=self.data_path.parent, suffix=".tmp", delete=False, encoding="utf-8"
        )
        tmp_path = Path(tmp.name)
        try:
            with tmp:
                json.dump(app_data_to_dict(app_data), tmp, indent=2)
            os.replace(tmp_path, self.data_path)
        finally:
            tmp_path.unlink(missing_ok=True)

    def export_to(self, path: str | Path, exported_at: str = "") -> Path:
        """Write a backup file for the stored data; return its path."""
        out = Path(path)
        doc = build_export(self.load(), exported_at)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w", encoding="utf-8") as f:
            json.dump(doc, f, indent=2)
        return out

    def replace_with(self, data: dict[str, Any]) -> AppData:
        """
        Replace the stored data with an already validated and migrated
        import (see export_import.validate_import).

        Raises:
            ValidationError: If the import cannot be converted
        """
        data = dict(data)
        data.pop(EXPORT_SENTINEL_KEY, None)
        data.pop("exportedAt", None)
        data["computedSchedule"] = None
        app_data = dict_to_app_data(data)
        self.save(app_data)
        return app_data
