"""Tree construction from a preorder ``(entry, depth)`` walk stream.

The builder consumes the walker exactly once with one-step lookahead. The
depth of the upcoming entry decides where the current one is attached and
where the insertion cursor moves next. Recoverable walker errors are
classified at that single lookahead point.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from ..errors import TreeBuildError
from ..file_tree_model.types import (
    KIND_DIRECTORY,
    KIND_FILE,
    KIND_RESTRICTED_DIRECTORY,
    KIND_STDIN,
    KIND_SYMLINK,
    Entry,
    WalkEntry,
    WalkError,
    WalkItem,
)
from .arena import Arena, NodeId

logger = logging.getLogger(__name__)

NAME_NON_UTF8 = "<node name non-UTF8>"
NAME_UNKNOWN = "<node name unknown>"
LINK_TARGET_UNREADABLE = "<error reading dest>"


@dataclass
class BuiltTree:
    """Arena plus root handle and running entry counts."""

    arena: Arena
    root: NodeId
    n_files: int
    n_dirs: int

    def summary(self) -> str:
        return format_summary(self.n_dirs, self.n_files)


def format_summary(n_dirs: int, n_files: int) -> str:
    """Return ``tree``-style counts, e.g. ``"1 directory, 2 files"``."""
    dir_word = "directory" if n_dirs == 1 else "directories"
    file_word = "file" if n_files == 1 else "files"
    return f"{n_dirs} {dir_word}, {n_files} {file_word}"


def display_name(path: Path | str) -> str:
    """Return the final path component as text, or a placeholder.

    Names that only decode via ``surrogateescape`` are not valid UTF-8.
    """
    name = Path(path).name
    if not name:
        return NAME_UNKNOWN
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return NAME_NON_UTF8
    return name


def root_display_name(path: Path) -> str:
    """Return the root label: the path as given, without a trailing slash."""
    text = str(path)
    if len(text) > 1:
        text = text.rstrip("/") or "/"
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return NAME_NON_UTF8
    return text


def read_link_target(path: Path) -> str:
    """Return the display name of a symlink's target, or a placeholder."""
    try:
        target = os.readlink(path)
    except OSError:
        return LINK_TARGET_UNREADABLE
    return display_name(target)


def entry_for_walk_entry(item: WalkEntry) -> Entry:
    """Convert a non-root walker record into an arena ``Entry``."""
    link_target = read_link_target(item.path) if item.is_symlink else None
    if item.is_stdin:
        kind = KIND_STDIN
    elif item.is_dir:
        kind = KIND_DIRECTORY
    elif item.is_symlink:
        kind = KIND_SYMLINK
    else:
        kind = KIND_FILE
    return Entry(
        name=display_name(item.path),
        kind=kind,
        path=item.path,
        depth=item.depth,
        link_target=link_target,
    )


def _root_entry(item: WalkEntry) -> Entry:
    if item.is_stdin:
        kind = KIND_STDIN
    elif item.is_dir:
        kind = KIND_DIRECTORY
    else:
        kind = KIND_FILE
    return Entry(name=root_display_name(item.path), kind=kind, path=item.path, depth=0)


class _Lookahead:
    """Iterator wrapper with a one-item peek slot."""

    _EMPTY = object()

    def __init__(self, items: Iterator[WalkItem]) -> None:
        self._items = items
        self._slot: object = self._EMPTY

    def peek(self) -> WalkItem | None:
        if self._slot is self._EMPTY:
            self._slot = next(self._items, None)
        return self._slot  # type: ignore[return-value]

    def next(self) -> WalkItem | None:
        item = self.peek()
        self._slot = self._EMPTY
        return item


def _settle_lookahead(items: _Lookahead, entry: Entry) -> int | None:
    """Consume errors ahead of the next entry and return that entry's depth.

    A permission-denied error for ``entry`` itself means its directory could
    not be listed, so it is downgraded to a restricted directory. Every other
    error is logged and dropped. Returns ``None`` at the end of the stream.
    """
    while True:
        upcoming = items.peek()
        if upcoming is None:
            return None
        if isinstance(upcoming, WalkEntry):
            return upcoming.depth
        items.next()
        if upcoming.is_permission_denied and upcoming.path == entry.path:
            entry.kind = KIND_RESTRICTED_DIRECTORY
            continue
        logger.warning("error while building tree: %s", upcoming.describe())


def _take_root(items: _Lookahead) -> WalkEntry:
    first = items.next()
    if first is None:
        raise TreeBuildError("failed to get the root: the walk produced no entries")
    if isinstance(first, WalkError):
        raise TreeBuildError(f"failed to get the root: {first.describe()}")
    if first.depth != 0:
        raise TreeBuildError(f"failed to get the root: first entry reported depth {first.depth}")

    while True:
        upcoming = items.peek()
        if not isinstance(upcoming, WalkError):
            return first
        items.next()
        if upcoming.path == first.path:
            raise TreeBuildError(f"cannot read root directory {upcoming.describe()}")
        logger.warning("error while building tree: %s", upcoming.describe())


def build_tree(stream: Iterable[WalkItem]) -> BuiltTree:
    """Materialize the walk stream as an arena tree.

    Raises ``TreeBuildError`` when no root can be obtained. Counts are taken
    over every non-root entry: directories (restricted or not) and everything
    else, except standard input.
    """
    items = _Lookahead(iter(stream))
    root_item = _take_root(items)

    arena = Arena()
    root = arena.new_node(_root_entry(root_item))
    current = root
    n_files = 0
    n_dirs = 0

    while True:
        item = items.next()
        if item is None:
            break
        # Errors never surface here: _settle_lookahead drains them while peeking.
        assert isinstance(item, WalkEntry)
        if item.depth <= 0:
            raise TreeBuildError(f"walker reported depth {item.depth} for {item.path} after the root")

        if item.is_dir:
            n_dirs += 1
        elif not item.is_stdin:
            n_files += 1

        entry = entry_for_walk_entry(item)
        next_depth = _settle_lookahead(items, entry)

        if next_depth is not None and next_depth > item.depth:
            current = arena.append_child(current, entry)
            continue

        arena.append_child(current, entry)
        if next_depth is None or next_depth == item.depth:
            continue
        for _ in range(item.depth - next_depth):
            parent = arena[current].parent
            if parent is None:
                break
            current = parent

    return BuiltTree(arena=arena, root=root, n_files=n_files, n_dirs=n_dirs)
