"""Configuration file management for millerfm."""

from __future__ import annotations

import copy
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore

import tomli_w

from millerfm.modes import SortingType

logger = logging.getLogger(__name__)

# Default configuration file location
CONFIG_FILE = Path.home() / ".millerfm.toml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "general": {
        "start_directory": "~",
        "show_hidden": False,
        "sorting": SortingType.LEXICOGRAPHIC.value,
        "max_tabs": 8,
    },
    "layout": {
        "columns_ratio": [2, 3, 3],
        "scrolling_gap": 4,
    },
    "transfers": {
        "done_notification_ms": 2000,
        "active_poll_ms": 500,
        "idle_poll_ms": 5000,
    },
    "colors": {
        "directory": "cyan_bold",
        "symlink": "yellow_bold",
        "regular": "white",
        "executable": "green_bold",
        "unknown": "gray_on_white_bold",
        "preview": "green",
    },
    "bookmarks": {
        "h": "~",
        "r": "/",
        "t": "/tmp",
    },
    "openers": {
        "text": "",
        "video": "mpv @",
        "document": "zathura @",
        "image": "sxiv @",
    },
    "logging": {
        "file": "~/.millerfm.log",
        "level": "WARNING",
    },
}


def load_config() -> Dict[str, Any]:
    """Load configuration from file or return defaults."""
    if not CONFIG_FILE.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(CONFIG_FILE, "rb") as f:
            config = tomllib.load(f)
        # Merge with defaults to ensure all keys exist
        return _merge_config(DEFAULT_CONFIG, config)
    except (OSError, tomllib.TOMLDecodeError) as err:
        logger.warning("Ignoring unreadable configuration %s: %s", CONFIG_FILE, err)
        return copy.deepcopy(DEFAULT_CONFIG)


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file."""
    try:
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "wb") as f:
            tomli_w.dump(config, f)
    except OSError as err:
        # Don't break the app if config save fails, but inform the user
        print(f"Warning: Failed to save configuration to {CONFIG_FILE}: {err}", file=sys.stderr)


def _merge_config(default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    """Merge user config with defaults, preserving user values."""
    result = copy.deepcopy(default)
    for key, value in user.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_config(result[key], value)
        else:
            result[key] = value
    return result


def with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Fill the keys missing from a partial configuration."""
    return _merge_config(DEFAULT_CONFIG, config)


def create_default_config() -> None:
    """Create default configuration file if it doesn't exist."""
    if CONFIG_FILE.exists():
        return

    save_config(DEFAULT_CONFIG)


def get_start_directory(config: Dict[str, Any]) -> Path:
    raw = config.get("general", {}).get("start_directory", "~")
    return Path(str(raw)).expanduser()


def get_sorting(config: Dict[str, Any]) -> SortingType:
    """Return the configured sorting, lexicographic when unknown."""
    name = config.get("general", {}).get("sorting", SortingType.LEXICOGRAPHIC.value)
    return SortingType.from_name(str(name))


def get_columns_ratio(config: Dict[str, Any]) -> List[int]:
    ratio = config.get("layout", {}).get("columns_ratio", DEFAULT_CONFIG["layout"]["columns_ratio"])
    if (
        not isinstance(ratio, list)
        or len(ratio) != 3
        or not all(isinstance(part, int) and part > 0 for part in ratio)
    ):
        logger.warning("Invalid columns_ratio %r, using the default", ratio)
        return list(DEFAULT_CONFIG["layout"]["columns_ratio"])
    return ratio


def get_bookmarks(config: Dict[str, Any]) -> Dict[str, str]:
    bookmarks = config.get("bookmarks", {})
    return {str(key): str(value) for key, value in bookmarks.items()}


def get_openers(config: Dict[str, Any]) -> Dict[str, str]:
    openers = config.get("openers", {})
    return {str(key): str(value) for key, value in openers.items()}


def get_color_names(config: Dict[str, Any]) -> Dict[str, str]:
    return dict(config.get("colors", DEFAULT_CONFIG["colors"]))


__all__ = [
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "create_default_config",
    "get_bookmarks",
    "get_color_names",
    "get_columns_ratio",
    "get_openers",
    "get_sorting",
    "get_start_directory",
    "load_config",
    "save_config",
    "with_defaults",
]
