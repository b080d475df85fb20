"""Tree model: construction, line projection, folding, focus, and windowing.

Defines the arena tree built from a walk stream, the foldable line list
projected from it, and ``FileTree``, which ties both to a focus cursor.
"""

from __future__ import annotations

from .arena import Arena, Node, NodeId
from .build import BuiltTree, build_tree, display_name, format_summary
from .focus import FocusCursor
from .lines import (
    BAR_INDENT,
    BLANK_INDENT,
    END_BRANCH,
    MID_BRANCH,
    LineProjection,
    TreeLine,
    draw,
    fold_line,
    toggle_fold,
    unfold_line,
)
from .model import (
    FOCUS_DOWN,
    FOCUS_LEFT,
    FOCUS_RIGHT,
    FOCUS_UP,
    NAVIGATION_COMMANDS,
    TOGGLE_FOLD,
    FileTree,
    TreeRow,
)
from .window import bounds_around_line, visual_lines

__all__ = [
    "Arena",
    "Node",
    "NodeId",
    "BuiltTree",
    "build_tree",
    "display_name",
    "format_summary",
    "FocusCursor",
    "BAR_INDENT",
    "BLANK_INDENT",
    "END_BRANCH",
    "MID_BRANCH",
    "LineProjection",
    "TreeLine",
    "draw",
    "fold_line",
    "unfold_line",
    "toggle_fold",
    "FOCUS_UP",
    "FOCUS_DOWN",
    "FOCUS_LEFT",
    "FOCUS_RIGHT",
    "TOGGLE_FOLD",
    "NAVIGATION_COMMANDS",
    "FileTree",
    "TreeRow",
    "bounds_around_line",
    "visual_lines",
]
