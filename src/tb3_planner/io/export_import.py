"""
Backup export and import.

Exports are the persisted document plus the ``tb3_export`` sentinel.
Imports pass the strict gate in validation.py, are migrated to the
current schema, and come back with a preview for the user to confirm
before anything is replaced.
"""

from dataclasses import dataclass, field
from typing import Any

from ..core.config import CURRENT_SCHEMA_VERSION, EXPORT_SENTINEL_KEY
from ..core.models import AppData
from .migrations import MigrationError, migrate_data
from .serializers import app_data_to_dict
from .validation import validate_import_data


@dataclass
class ImportResult:
    """
    Outcome of validate_import().

    ``preview`` holds ``sessions``, ``max_tests`` and ``lifts`` (distinct
    lift names) counts when the import succeeded.
    """

    success: bool
    data: dict[str, Any] | None = None
    preview: dict[str, int] = field(default_factory=dict)
    error: str = ""


def build_preview(data: dict[str, Any]) -> dict[str, int]:
    sessions = data.get("sessionHistory") or []
    tests = data.get("maxTestHistory") or []
    lifts = {t.get("liftName") for t in tests if isinstance(t, dict) and t.get("liftName")}
    return {"sessions": len(sessions), "max_tests": len(tests), "lifts": len(lifts)}


def validate_import(raw: str | bytes) -> ImportResult:
    """
    Gate, migrate and summarize a backup file.

    Args:
        raw: Backup file contents

    Returns:
        ImportResult with migrated data and preview, or the rejection reason
    """
    checked = validate_import_data(raw)
    if not checked.valid or checked.data is None:
        return ImportResult(success=False, error=checked.error)

    try:
        data = migrate_data(checked.data, CURRENT_SCHEMA_VERSION)
    except MigrationError as e:
        return ImportResult(success=False, error=str(e))

    return ImportResult(success=True, data=data, preview=build_preview(data))


def build_export(app_data: AppData, exported_at: str = "") -> dict[str, Any]:
    """
    Build the export document for ``app_data``.

    The cached schedule is left out; it is regenerated after import.
    """
    doc = app_data_to_dict(app_data)
    doc.pop("computedSchedule", None)
    doc[EXPORT_SENTINEL_KEY] = True
    if exported_at:
        doc["exportedAt"] = exported_at
    return doc
