"""Text rendering for the tree: plain ``tree`` output and the interactive view."""

from __future__ import annotations

from .ansi import wrap_ansi_line
from .tree_model import FileTree, TreeRow
from .ui_theme import PLAIN_THEME, UITheme


def render_plain(tree: FileTree) -> str:
    """Render every visible row, a blank line, and the summary.

    Matches the classic ``tree`` layout: the root label on its own line, then
    ``"{prefix} {name}{suffix}"`` rows.
    """
    out = [row.plain for row in tree.rows()]
    out.append("")
    out.append(tree.summary())
    return "\n".join(out) + "\n"


def render_row(row: TreeRow, theme: UITheme) -> str:
    """Render one row, highlighting the name and suffix when focused."""
    if row.focused:
        return f"{row.head}{theme.focus_bg}{row.name}{row.suffix}{theme.reset_bg}"
    return f"{row.head}{row.name}{row.suffix}"


def render_around_focus(tree: FileTree, n: int, width: int, theme: UITheme = PLAIN_THEME) -> str:
    """Render at most ``n`` visual lines of consecutive rows around the focus.

    Rows are hard-wrapped at ``width`` and joined with ``\\r\\n`` because a
    raw-mode terminal does not return the carriage on a bare ``\\n``. There is
    no line ending after the last row.
    """
    screen_lines: list[str] = []
    for row in tree.rows_around_focus(n, width):
        screen_lines.extend(wrap_ansi_line(render_row(row, theme), width))
    return theme.tree_fg + "\r\n".join(screen_lines) + theme.reset_fg
