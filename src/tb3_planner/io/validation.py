"""
Validation gates for application data.

validate_app_data() inspects data that is already loaded and grades what
it finds without rejecting anything.  validate_import_data() is the strict
gate for external backup files: the first failing check rejects the whole
file with a reason string.

Both work on raw (camelCase) dicts so they can run before the data is
migrated or turned into dataclasses.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any, Literal

from ..core.config import (
    CURRENT_SCHEMA_VERSION,
    EXPORT_SENTINEL_KEY,
    KNOWN_LIFTS,
    MAX_IMPORT_BYTES,
    MAX_NOTES_LENGTH,
    REPS_MAX,
    REPS_MIN,
    UNSAFE_KEYS,
    WEIGHT_MAX,
    WEIGHT_MIN,
)
from ..core.templates.registry import get_template

Severity = Literal["ok", "warning", "recoverable", "fatal"]

_SEVERITY_RANK: dict[str, int] = {"ok": 0, "warning": 1, "recoverable": 2, "fatal": 3}


@dataclass
class ValidationResult:
    """Outcome of validate_app_data(); ``errors`` is empty iff severity is "ok"."""

    severity: Severity = "ok"
    errors: list[str] = field(default_factory=list)

    def add(self, severity: Severity, message: str) -> None:
        self.errors.append(message)
        if _SEVERITY_RANK[severity] > _SEVERITY_RANK[self.severity]:
            self.severity = severity


@dataclass
class ImportValidation:
    """Outcome of validate_import_data(); ``data`` is set only when valid."""

    valid: bool
    data: dict[str, Any] | None = None
    error: str = ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _weight_in_range(value: Any) -> bool:
    return _is_number(value) and WEIGHT_MIN <= value <= WEIGHT_MAX


def _reps_in_range(value: Any) -> bool:
    return _is_number(value) and REPS_MIN <= value <= REPS_MAX


def _duplicate_ids(entries: list) -> list[str]:
    seen: set[str] = set()
    dups: list[str] = []
    for entry in entries:
        if not isinstance(entry, dict) or "id" not in entry:
            continue
        entry_id = str(entry["id"])
        if entry_id in seen and entry_id not in dups:
            dups.append(entry_id)
        seen.add(entry_id)
    return dups


def _find_unsafe_key(node: Any) -> str | None:
    """Depth-first search for a prototype-pollution key anywhere in ``node``."""
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, dict):
            for key, value in current.items():
                if key in UNSAFE_KEYS:
                    return key
                stack.append(value)
        elif isinstance(current, list):
            stack.extend(current)
    return None


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def validate_app_data(data: Any) -> ValidationResult:
    """
    Grade loaded application data.

    Severity is the worst finding:
        fatal        not a mapping, or no ``profile``
        recoverable  active program references an unknown template
        warning      unknown lift, weight / reps out of range, duplicate ids
        ok           nothing found

    Returns:
        ValidationResult listing every finding
    """
    result = ValidationResult()
    if not isinstance(data, dict):
        result.add("fatal", "Data is not an object")
        return result
    if not isinstance(data.get("profile"), dict):
        result.add("fatal", "Missing profile")
        return result

    program = data.get("activeProgram")
    if isinstance(program, dict):
        template_id = program.get("templateId")
        if get_template(str(template_id)) is None:
            result.add("recoverable", f"Unknown template: {template_id}")

    max_tests = _as_list(data.get("maxTestHistory"))
    for test in max_tests:
        if not isinstance(test, dict):
            continue
        lift = test.get("liftName")
        if lift is not None and lift not in KNOWN_LIFTS:
            result.add("warning", f"Unknown lift: {lift}")
        if "weight" in test and not _weight_in_range(test["weight"]):
            result.add("warning", f"Weight out of range: {test['weight']}")
        if "reps" in test and not _reps_in_range(test["reps"]):
            result.add("warning", f"Reps out of range: {test['reps']}")

    for dup in _duplicate_ids(_as_list(data.get("sessionHistory"))):
        result.add("warning", f"Duplicate session ID: {dup}")
    for dup in _duplicate_ids(max_tests):
        result.add("warning", f"Duplicate max test ID: {dup}")

    return result


def _reject(message: str) -> ImportValidation:
    return ImportValidation(valid=False, error=message)


def validate_import_data(raw: str | bytes) -> ImportValidation:
    """
    Strict gate for a backup file, applied before any state changes.

    Checks run in order and the first failure rejects the file: size,
    JSON parse, ``tb3_export`` sentinel, numeric version, version not
    newer than supported, no unsafe keys at any depth, ``profile`` and
    ``sessionHistory`` present, max-test weight / reps in range, session
    notes length, duplicate ids.

    Args:
        raw: File contents

    Returns:
        ImportValidation with the parsed dict when valid, else the reason
    """
    encoded = raw if isinstance(raw, bytes) else raw.encode("utf-8")
    if len(encoded) > MAX_IMPORT_BYTES:
        return _reject(f"File too large (limit {MAX_IMPORT_BYTES:,} bytes)")

    try:
        data = json.loads(encoded)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        return _reject("File could not parse as JSON")
    if not isinstance(data, dict) or data.get(EXPORT_SENTINEL_KEY) is not True:
        return _reject("This file is not a TB3 backup")

    version = data.get("schemaVersion")
    if not _is_number(version) or not math.isfinite(version) or not float(version).is_integer():
        return _reject("Invalid version in backup file")
    if version > CURRENT_SCHEMA_VERSION:
        return _reject("Backup was made by a newer version of the app; update before importing")

    unsafe = _find_unsafe_key(data)
    if unsafe is not None:
        return _reject(f"Backup contains unsafe content (key {unsafe!r})")

    if not isinstance(data.get("profile"), dict):
        return _reject("Backup is missing profile data")
    if not isinstance(data.get("sessionHistory"), list):
        return _reject("Backup is missing session history")
    max_tests = data.get("maxTestHistory", [])
    if not isinstance(max_tests, list):
        return _reject("Backup max test history is not a list")

    for test in max_tests:
        if not isinstance(test, dict):
            return _reject("Backup max test history contains an invalid entry")
        if "weight" in test and not _weight_in_range(test["weight"]):
            return _reject(f"Weight out of range: {test['weight']}")
        if "reps" in test and not _reps_in_range(test["reps"]):
            return _reject(f"Reps out of range: {test['reps']}")

    for session in data["sessionHistory"]:
        notes = session.get("notes") if isinstance(session, dict) else None
        if isinstance(notes, str) and len(notes) > MAX_NOTES_LENGTH:
            return _reject(f"Session notes exceed {MAX_NOTES_LENGTH} characters")

    session_dups = _duplicate_ids(data["sessionHistory"])
    if session_dups:
        return _reject(f"Duplicate session ID: {session_dups[0]}")
    test_dups = _duplicate_ids(max_tests)
    if test_dups:
        return _reject(f"Duplicate max test ID: {test_dups[0]}")

    return ImportValidation(valid=True, data=data)
