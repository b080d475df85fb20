"""UI color palettes and color-name selection helpers.

A theme is the pair of ANSI sequences used to draw the tree (foreground) and
to highlight the focused entry (background), plus the reset sequence.
"""

from __future__ import annotations

from dataclasses import dataclass

# name -> (foreground SGR, background SGR)
_BASE_COLORS: dict[str, tuple[int, int]] = {
    "black": (30, 40),
    "red": (31, 41),
    "green": (32, 42),
    "yellow": (33, 43),
    "blue": (34, 44),
    "magenta": (35, 45),
    "cyan": (36, 46),
    "white": (37, 47),
}

DEFAULT_FG_COLOR = "white"
DEFAULT_BG_COLOR = "blue"


def _color_table() -> dict[str, tuple[str, str]]:
    table: dict[str, tuple[str, str]] = {}
    for name, (fg, bg) in _BASE_COLORS.items():
        table[name] = (f"\033[{fg}m", f"\033[{bg}m")
        table[f"light{name}"] = (f"\033[{fg + 60}m", f"\033[{bg + 60}m")
    return table


_COLORS = _color_table()


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the tree renderer."""

    name: str
    tree_fg: str
    focus_bg: str
    reset_fg: str
    reset_bg: str
    clear_screen: str


PLAIN_THEME = UITheme(
    name="plain",
    tree_fg="",
    focus_bg="",
    reset_fg="",
    reset_bg="",
    clear_screen="\033[2J\033[H",
)


def available_color_names() -> tuple[str, ...]:
    """Return selectable color names, base colors first."""
    base = tuple(_BASE_COLORS.keys())
    return base + tuple(f"light{name}" for name in base)


def normalize_color_name(name: str | None, default: str) -> str:
    """Return a valid color name, falling back to ``default``."""
    if not name:
        return default
    candidate = str(name).strip().lower()
    if candidate in _COLORS:
        return candidate
    return default


def resolve_theme(
    fg_color: str | None = None,
    bg_color: str | None = None,
    *,
    no_color: bool = False,
) -> UITheme:
    """Return the concrete theme for requested colors and color mode."""
    if no_color:
        return PLAIN_THEME
    fg_name = normalize_color_name(fg_color, DEFAULT_FG_COLOR)
    bg_name = normalize_color_name(bg_color, DEFAULT_BG_COLOR)
    return UITheme(
        name=f"{fg_name}-on-{bg_name}",
        tree_fg=_COLORS[fg_name][0],
        focus_bg=_COLORS[bg_name][1],
        reset_fg="\033[39m",
        reset_bg="\033[49m",
        clear_screen="\033[2J\033[H",
    )


__all__ = [
    "UITheme",
    "PLAIN_THEME",
    "DEFAULT_FG_COLOR",
    "DEFAULT_BG_COLOR",
    "available_color_names",
    "normalize_color_name",
    "resolve_theme",
]
