"""``FileTree``: the tree, its line projection, and the focus cursor together.

This is the object a session holds for its whole lifetime. It is built once
from a walk, then only mutated through navigation and fold commands.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..file_tree_model.types import Entry, WalkItem
from ..file_tree_model.walk import WalkOptions, walk_directory
from .build import BuiltTree, build_tree, format_summary
from .focus import FocusCursor
from .labels import row_head, row_width, suffix_for
from .lines import draw, toggle_fold
from .window import bounds_around_line

FOCUS_UP = "FOCUS_UP"
FOCUS_DOWN = "FOCUS_DOWN"
FOCUS_LEFT = "FOCUS_LEFT"
FOCUS_RIGHT = "FOCUS_RIGHT"
TOGGLE_FOLD = "TOGGLE_FOLD"

NAVIGATION_COMMANDS = frozenset({FOCUS_UP, FOCUS_DOWN, FOCUS_LEFT, FOCUS_RIGHT, TOGGLE_FOLD})


@dataclass(frozen=True)
class TreeRow:
    """Renderer-facing view of one visible row."""

    index: int
    head: str
    name: str
    suffix: str
    is_root: bool
    focused: bool

    @property
    def plain(self) -> str:
        return f"{self.head}{self.name}{self.suffix}"


class FileTree:
    """Built tree plus fold state and focus for one browsing session."""

    def __init__(self, built: BuiltTree) -> None:
        self.arena = built.arena
        self.root = built.root
        self.n_files = built.n_files
        self.n_dirs = built.n_dirs
        self.lines = draw(self.arena, self.root)
        self.cursor = FocusCursor(self.arena, self.root)

    @classmethod
    def from_walk(cls, stream: Iterable[WalkItem]) -> FileTree:
        return cls(build_tree(stream))

    @classmethod
    def from_directory(cls, root: Path | str, options: WalkOptions | None = None) -> FileTree:
        """Walk ``root`` and build a tree; raises ``TreeBuildError`` without a root."""
        return cls.from_walk(walk_directory(root, options))

    def summary(self) -> str:
        return format_summary(self.n_dirs, self.n_files)

    @property
    def focused(self) -> int:
        return self.cursor.focused

    @property
    def focused_entry(self) -> Entry:
        return self.arena[self.cursor.focused].entry

    @property
    def focused_line_index(self) -> int:
        return self.lines.line_for(self.cursor.focused)

    def focus_up(self) -> bool:
        return self.cursor.up()

    def focus_down(self) -> bool:
        return self.cursor.down(self.lines)

    def focus_left(self) -> bool:
        return self.cursor.left()

    def focus_right(self) -> bool:
        return self.cursor.right()

    def toggle_focus_fold(self) -> bool:
        return toggle_fold(self.arena, self.lines, self.focused_line_index)

    def apply(self, command: str) -> bool:
        """Run one navigation command; returns whether anything changed."""
        if command == FOCUS_UP:
            return self.focus_up()
        if command == FOCUS_DOWN:
            return self.focus_down()
        if command == FOCUS_LEFT:
            return self.focus_left()
        if command == FOCUS_RIGHT:
            return self.focus_right()
        if command == TOGGLE_FOLD:
            return self.toggle_focus_fold()
        raise ValueError(f"unknown navigation command: {command!r}")

    def visible_line_indices(self) -> list[int]:
        return list(self.lines.iter_linked())

    def line_width(self, index: int) -> int:
        line = self.lines[index]
        return row_width(
            line.prefix,
            self.arena[line.node].entry,
            self.lines.is_folded(index),
            is_root=index == 0,
        )

    def row(self, index: int) -> TreeRow:
        line = self.lines[index]
        entry = self.arena[line.node].entry
        is_root = index == 0
        return TreeRow(
            index=index,
            head=row_head(line.prefix),
            name=entry.name,
            suffix="" if is_root else suffix_for(entry, self.lines.is_folded(index)),
            is_root=is_root,
            focused=line.node == self.cursor.focused,
        )

    def line_text(self, index: int) -> str:
        return self.row(index).plain

    def window(self, n: int, width: int) -> tuple[int, int]:
        """Return ``[start, end)`` of rows fitting ``n`` visual lines around the focus."""
        return bounds_around_line(self.lines, self.focused_line_index, n, width, self.line_width)

    def rows_around_focus(self, n: int, width: int) -> list[TreeRow]:
        start, end = self.window(n, width)
        return [self.row(index) for index in self.lines.iter_linked(start, end)]

    def rows(self) -> list[TreeRow]:
        return [self.row(index) for index in self.lines.iter_linked()]
