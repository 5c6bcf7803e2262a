"""
YAML → profile defaults loader.

Merges optional user overrides from ~/.tb3-planner/config.yaml over the
built-in profile and plate-inventory defaults.  The result seeds a fresh
data store; existing stores keep whatever profile they already hold.

Example config.yaml:

    profile:
      unit: kg
      rounding_increment: 2.5
      barbell_weight: 20
    barbell_plates:
      - [25, 4]
      - [20, 2]
      - [10, 2]

If the user file exists but cannot be parsed, or holds values the models
reject, a warning is issued and the built-in defaults are used.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_BARBELL_PLATES, DEFAULT_BELT_PLATES
from ..models import Plate, PlateInventory, UserProfile


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} on a read or parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"Ignoring {path}: {exc}")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"Ignoring {path}: expected a mapping at top level")
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_user_yaml_path() -> Path | None:
    """Return ~/.tb3-planner/config.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".tb3-planner" / "config.yaml"
    return p if p.exists() else None


def builtin_config() -> dict[str, Any]:
    """Return the built-in defaults in the same shape as config.yaml."""
    return {
        "profile": asdict(UserProfile()),
        "barbell_plates": [list(p) for p in DEFAULT_BARBELL_PLATES],
        "belt_plates": [list(p) for p in DEFAULT_BELT_PLATES],
    }


def load_user_config(path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge configuration.

    Load order (later overrides earlier):
    1. Built-in defaults (see builtin_config)
    2. User override at ``path`` or ~/.tb3-planner/config.yaml

    Returns:
        Merged dict with ``profile``, ``barbell_plates`` and ``belt_plates``
    """
    config = builtin_config()
    user = path if path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)
    return config


def _inventory_from_rows(rows: Any, fallback: tuple) -> PlateInventory:
    try:
        return PlateInventory([Plate(float(w), int(n)) for w, n in rows])
    except (TypeError, ValueError) as exc:
        warnings.warn(f"Invalid plate list in config ({exc}); using defaults")
        return PlateInventory([Plate(float(w), n) for w, n in fallback])


def build_default_profile(config: dict[str, Any] | None = None) -> UserProfile:
    """Build the UserProfile for a fresh store from merged configuration."""
    config = config if config is not None else load_user_config()
    raw = config.get("profile") or {}
    known = set(asdict(UserProfile()))
    unknown = sorted(set(raw) - known)
    if unknown:
        warnings.warn(f"Unknown profile keys in config ignored: {', '.join(unknown)}")
    try:
        return UserProfile(**{k: v for k, v in raw.items() if k in known})
    except (TypeError, ValueError) as exc:
        warnings.warn(f"Invalid profile in config ({exc}); using defaults")
        return UserProfile()


def build_default_inventories(
    config: dict[str, Any] | None = None,
) -> tuple[PlateInventory, PlateInventory]:
    """Return (barbell, belt) inventories for a fresh store."""
    config = config if config is not None else load_user_config()
    barbell = _inventory_from_rows(config.get("barbell_plates", DEFAULT_BARBELL_PLATES), DEFAULT_BARBELL_PLATES)
    belt = _inventory_from_rows(config.get("belt_plates", DEFAULT_BELT_PLATES), DEFAULT_BELT_PLATES)
    return barbell, belt
