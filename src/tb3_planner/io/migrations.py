"""
Schema migrations for persisted application data.

Each step upgrades a raw (camelCase) data dict by exactly one schema
version.  Steps only add missing fields, so re-running one on data that
already has the field leaves the existing value alone.
"""

import copy
import math
from typing import Any, Callable

from ..core.config import CURRENT_SCHEMA_VERSION, DEFAULT_SCHEMA_VERSION


class MigrationError(ValueError):
    """Raised when no upgrader exists for a required schema step."""

    pass


def _v1_to_v2(data: dict[str, Any]) -> dict[str, Any]:
    profile = data.setdefault("profile", {})
    profile.setdefault("voiceAnnouncements", False)
    return data


def _v2_to_v3(data: dict[str, Any]) -> dict[str, Any]:
    profile = data.setdefault("profile", {})
    profile.setdefault("voiceName", None)
    return data


# from-version → upgrader producing from-version + 1
MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _v1_to_v2,
    2: _v2_to_v3,
}


def get_schema_version(data: dict[str, Any]) -> int:
    """Return the data's schema version; absent or 0 counts as version 1."""
    version = data.get("schemaVersion")
    if not version:
        return DEFAULT_SCHEMA_VERSION
    if (
        not isinstance(version, (int, float))
        or isinstance(version, bool)
        or not math.isfinite(version)
        or not float(version).is_integer()
    ):
        raise MigrationError(f"Invalid schema version: {version!r}")
    return int(version)


def needs_migration(data: dict[str, Any], target_version: int = CURRENT_SCHEMA_VERSION) -> bool:
    return get_schema_version(data) < target_version


def migrate_data(data: dict[str, Any], target_version: int = CURRENT_SCHEMA_VERSION) -> dict[str, Any]:
    """
    Upgrade ``data`` one schema step at a time until it reaches
    ``target_version``.

    Args:
        data: Raw application data dict (not modified)
        target_version: Version to upgrade to

    Returns:
        A migrated deep copy with ``schemaVersion == target_version``, or
        the unchanged copy when the data is already at or above the target

    Raises:
        MigrationError: If the version is invalid or a required step has
            no upgrader
    """
    result = copy.deepcopy(data)
    version = get_schema_version(result)
    while version < target_version:
        step = MIGRATIONS.get(version)
        if step is None:
            raise MigrationError(f"No migration from v{version} to v{version + 1}")
        result = step(result)
        version += 1
        result["schemaVersion"] = version
    return result
