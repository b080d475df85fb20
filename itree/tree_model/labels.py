"""Text pieces of a tree row: branch prefix, name, and kind suffix."""

from __future__ import annotations

from ..ansi import display_width
from ..file_tree_model.types import (
    KIND_DIRECTORY,
    KIND_RESTRICTED_DIRECTORY,
    KIND_STDIN,
    KIND_SYMLINK,
    Entry,
)
from .lines import BAR_INDENT, BLANK_INDENT, END_BRANCH, MID_BRANCH

MID_BRANCH_GLYPH = "├──"
END_BRANCH_GLYPH = "└──"
BLANK_INDENT_GLYPH = "    "
BAR_INDENT_GLYPH = "│   "

FOLD_MARK = "*"
RESTRICTED_MARK = " [error opening dir]"
LINK_MARK = " -> "
STDIN_MARK = "<stdin>"

PIECE_GLYPHS = {
    BAR_INDENT: BAR_INDENT_GLYPH,
    BLANK_INDENT: BLANK_INDENT_GLYPH,
    MID_BRANCH: MID_BRANCH_GLYPH,
    END_BRANCH: END_BRANCH_GLYPH,
}


def prefix_string(prefix: tuple[str, ...]) -> str:
    return "".join(PIECE_GLYPHS[piece] for piece in prefix)


def suffix_for(entry: Entry, folded: bool) -> str:
    """Return the annotation drawn right after an entry's name."""
    if entry.kind == KIND_DIRECTORY:
        suffix = FOLD_MARK if folded else ""
        if entry.link_target is not None:
            suffix += LINK_MARK + entry.link_target
        return suffix
    if entry.kind == KIND_RESTRICTED_DIRECTORY:
        return RESTRICTED_MARK
    if entry.kind == KIND_SYMLINK:
        return LINK_MARK + (entry.link_target or "")
    if entry.kind == KIND_STDIN:
        return STDIN_MARK
    return ""


def row_head(prefix: tuple[str, ...]) -> str:
    """Return the prefix glyphs plus the separating space (empty for the root)."""
    if not prefix:
        return ""
    return prefix_string(prefix) + " "


def row_width(prefix: tuple[str, ...], entry: Entry, folded: bool, is_root: bool = False) -> int:
    """Return the display width of a row without color escapes."""
    if is_root:
        return display_width(entry.name)
    return display_width(row_head(prefix) + entry.name + suffix_for(entry, folded))
