"""Configuration: defaults and config loading (global + project overrides)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Directory name for pickgrid settings, both in the home directory and in a project
PICKGRID_DIR = ".pickgrid"
CONFIG_FILENAME = "config.json"


def _global_config_dir() -> Path:
    return Path.home() / PICKGRID_DIR


def global_config_path() -> Path:
    """Path to global config file (~/.pickgrid/config.json)."""
    return _global_config_dir() / CONFIG_FILENAME


def project_config_path(project_root: Path) -> Path:
    """Path to project-local config (<project>/.pickgrid/config.json)."""
    return project_root / PICKGRID_DIR / CONFIG_FILENAME


def default_config() -> dict[str, Any]:
    return {
        "grid": {
            "default_column_size": 256,
            "page_size": 10,
        },
        "select": {
            "max_displayed": 3,
            "max_visible": 3,
            "placeholder": "Select kinds",
            "search_placeholder": "Search kinds",
        },
        "viewer": {
            "font_size": 10,
            "pinned_row_color": "#fef3c7",
        },
        "logging": {
            "level": "INFO",
            "file": None,
        },
    }


def _load_json(path: Path) -> dict[str, Any] | None:
    """Load a JSON object from path; None if the file is missing, invalid, or not an object."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return None
    return data if isinstance(data, dict) else None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base recursively. Mutates base; returns base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_global_config() -> dict[str, Any]:
    """Load global config from ~/.pickgrid/config.json. Returns defaults if missing."""
    data = _load_json(global_config_path())
    if data is None:
        return default_config()
    return _deep_merge(default_config(), data)


def load_config(project_root: Path | None = None) -> dict[str, Any]:
    """
    Load merged configuration: defaults + global (~/.pickgrid/config.json) + project overrides.

    If project_root is None, only global config (and defaults) are used.
    """
    merged = load_global_config()
    if project_root is not None:
        project_data = _load_json(project_config_path(Path(project_root).resolve()))
        if project_data is not None:
            _deep_merge(merged, project_data)
    return merged


def save_config(path: Path, data: dict[str, Any]) -> None:
    """Write config as pretty JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def get_setting(config: dict[str, Any], key_path: str, default: Any = None) -> Any:
    """Value at a dotted key (e.g. 'grid.page_size'); default if missing."""
    current: Any = config
    for part in key_path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def resolve_path(path: Path) -> Path:
    """Resolve path to absolute, normalized."""
    return path.resolve()


# --- Typed settings ---

# Integer settings and their smallest allowed value
INT_SETTINGS: dict[str, int] = {
    "grid.default_column_size": 1,
    "grid.page_size": 0,  # 0 puts every row on one page
    "select.max_displayed": 0,
    "select.max_visible": 1,
    "viewer.font_size": 1,
}
STR_SETTINGS = {
    "select.placeholder",
    "select.search_placeholder",
    "viewer.pinned_row_color",
    "logging.level",
}


class ConfigValueError(ValueError):
    """Raised when a value does not fit the type of a known setting."""


def check_setting(key_path: str, value: Any) -> Any:
    """Return value if it fits key_path's type; unknown keys accept any JSON value."""
    if key_path in INT_SETTINGS:
        minimum = INT_SETTINGS[key_path]
        if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
            raise ConfigValueError(f"{key_path} must be an integer >= {minimum}, got {json.dumps(value)}")
    elif key_path in STR_SETTINGS and not isinstance(value, str):
        raise ConfigValueError(f"{key_path} must be a string, got {json.dumps(value)}")
    return value


def get_int_setting(config: dict[str, Any], key_path: str, default: int) -> int:
    """Integer setting at key_path; a badly typed value is logged and replaced by default."""
    value = get_setting(config, key_path, default)
    try:
        return check_setting(key_path, value)
    except ConfigValueError as e:
        logger.warning("Ignoring config value: %s; using %d", e, default)
        return default


def parse_setting_value(raw: str) -> Any:
    """Value half of KEY=VALUE: JSON when it parses (number, bool, null, quoted string), else the raw text."""
    raw = raw.strip()
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def set_setting(data: dict[str, Any], key_path: str, value: Any) -> dict[str, Any]:
    """
    Store value at a dotted key in data, creating intermediate sections.

    Typed settings are checked first (ConfigValueError). Returns data.
    """
    check_setting(key_path, value)
    *sections, last = key_path.split(".")
    current = data
    for part in sections:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[last] = value
    return data


def read_config_file(path: Path) -> dict[str, Any]:
    """Raw settings stored in one config file; {} when missing or unreadable."""
    return _load_json(path) or {}


def get_str_setting(config: dict[str, Any], key_path: str, default: str) -> str:
    """String setting at key_path; a badly typed value is logged and replaced by default."""
    value = get_setting(config, key_path, default)
    try:
        return check_setting(key_path, value)
    except ConfigValueError as e:
        logger.warning("Ignoring config value: %s; using %r", e, default)
        return default
