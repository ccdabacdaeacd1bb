"""
YAML → settings loader.

Loads settings from settings.yaml (bundled with the package) and
optionally merges user overrides from ~/.ironpulse/settings.yaml.

Usage:
    from ironpulse.core.engine.config_loader import get_setting
    weeks = get_setting("analytics", "weeks", DEFAULT_ACTIVITY_WEEKS)

A user override file that cannot be parsed is reported with a warning and
ignored; a broken bundled file is a packaging error and raises.
"""

from __future__ import annotations

import logging
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import DATA_DIR_ENV, DATA_DIR_NAME, SETTINGS_FILE_NAME

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; non-mapping documents load as {}."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_data_dir() -> Path:
    """Return the user data directory ($IRONPULSE_HOME or ~/.ironpulse)."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / DATA_DIR_NAME


def get_bundled_yaml_path() -> Path:
    """Return the path to the bundled settings.yaml."""
    # config_loader.py lives at src/ironpulse/core/engine/config_loader.py
    return Path(__file__).resolve().parent.parent.parent / SETTINGS_FILE_NAME


def get_user_yaml_path() -> Path | None:
    """Return the user settings.yaml if it exists, else None."""
    p = get_data_dir() / SETTINGS_FILE_NAME
    return p if p.exists() else None


def load_settings() -> dict[str, Any]:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/ironpulse/settings.yaml
    2. User override in the data directory

    Returns:
        Merged dict of settings sections.
    """
    settings = _load_yaml_file(get_bundled_yaml_path())

    user = get_user_yaml_path()
    if user is not None:
        try:
            user_cfg = _load_yaml_file(user)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            warnings.warn(f"ironpulse: ignoring {user} ({exc})", stacklevel=2)
        else:
            logger.debug("Merging user settings from %s", user)
            settings = _deep_merge(settings, user_cfg)

    return settings


def get_setting(section: str, key: str, default: Any = None) -> Any:
    """Look up settings[section][key], falling back to default when unset or null."""
    value = load_settings().get(section, {}).get(key)
    return default if value is None else value
