"""Configuration loading: priorities and rendering theme."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from gh_triage.models import (
    CONFIG_APP_NAME,
    DEFAULT_CODE_THEME,
    DEFAULT_PRIORITIES,
    Priority,
    UserConfig,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Loading
# ============================================================================
#
# Validation contract: _dict_to_config() returns a usable UserConfig for any
# JSON object. Entries of the wrong shape are dropped with a warning and
# missing sections fall back to defaults. An unreadable file or invalid JSON
# raises ConfigError, which aborts startup.
#
# Example config.json:
#
#   {
#     "priorities": [
#       {"name": "Low", "label": "Priority: Low", "color": "#532BE3"}
#     ],
#     "theme": {"code": "monokai"}
#   }

CONFIG_FILENAME = "config.json"

_HEX_COLOR_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")


class ConfigError(Exception):
    """The config file exists but cannot be used."""


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/gh-triage/config.json
    - macOS: ~/Library/Application Support/gh-triage/config.json
    - Windows: %APPDATA%/gh-triage/config.json
    """
    config_dir = Path(user_config_dir(CONFIG_APP_NAME))
    return config_dir / CONFIG_FILENAME


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type):
        return default
    return value


def _parse_priorities(data: dict[str, Any]) -> tuple[Priority, ...]:
    """Parse the priorities section, falling back to the defaults when empty."""
    raw_priorities = data.get("priorities", [])
    if not isinstance(raw_priorities, list):
        logger.warning("Config 'priorities' must be a list, using defaults")
        return DEFAULT_PRIORITIES

    result: list[Priority] = []
    seen: set[str] = set()
    for entry in raw_priorities:
        if not isinstance(entry, dict):
            logger.warning("Ignoring priority entry that is not an object: %r", entry)
            continue
        name = _safe_get(entry, "name", "", str).strip()
        label = _safe_get(entry, "label", "", str).strip()
        color = _safe_get(entry, "color", "", str).strip()
        if not name or not label:
            logger.warning("Ignoring priority entry without name or label: %r", entry)
            continue
        if not _HEX_COLOR_RE.match(color):
            logger.warning("Ignoring priority %r with invalid color %r", name, color)
            continue
        if name in seen:
            logger.warning("Ignoring duplicate priority %r", name)
            continue
        seen.add(name)
        result.append(Priority(name=name, label=label, color=color))

    return tuple(result) or DEFAULT_PRIORITIES


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    theme = _safe_get(data, "theme", {}, dict)
    code_theme = _safe_get(theme, "code", DEFAULT_CODE_THEME, str).strip() or DEFAULT_CODE_THEME
    return UserConfig(priorities=_parse_priorities(data), code_theme=code_theme)


def load_config(path: Path | None = None) -> UserConfig:
    """Load configuration from disk.

    Returns the default config when the file does not exist. Raises
    ``ConfigError`` when the file cannot be read or is not a JSON object.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"{config_path} has invalid JSON: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"could not read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")
    return _dict_to_config(data)


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "get_config_path",
    "load_config",
]
