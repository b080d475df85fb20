"""Persistent JSON config helpers.

Stores default highlight colors and the hidden-file preference.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .ui_theme import DEFAULT_BG_COLOR, DEFAULT_FG_COLOR, normalize_color_name

logger = logging.getLogger(__name__)

APP_NAME = "itree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored; a config that cannot
    be written never stops a session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _load_color(key: str, default: str) -> str:
    value = load_config().get(key)
    if not isinstance(value, str):
        return default
    return normalize_color_name(value, default)


def load_fg_color() -> str:
    """Return the persisted tree foreground color name."""
    return _load_color("fg_color", DEFAULT_FG_COLOR)


def load_bg_color() -> str:
    """Return the persisted focus highlight color name."""
    return _load_color("bg_color", DEFAULT_BG_COLOR)


def save_colors(fg_color: str, bg_color: str) -> None:
    config = load_config()
    config["fg_color"] = normalize_color_name(fg_color, DEFAULT_FG_COLOR)
    config["bg_color"] = normalize_color_name(bg_color, DEFAULT_BG_COLOR)
    save_config(config)


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    value = load_config().get("show_hidden")
    return value if isinstance(value, bool) else False


def save_show_hidden(show_hidden: bool) -> None:
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)
