"""Depth-first, sorted, ignore-aware directory walker.

``walk_directory`` yields a preorder stream of ``WalkEntry`` records (root
first, depth 0) with ``WalkError`` records inline wherever a directory could
not be listed. The tree builder consumes this stream with one-step lookahead.
"""

from __future__ import annotations

import errno
import fnmatch
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ..gitignore import (
    GITIGNORE_FILENAME,
    IGNORE_FILENAME,
    IgnoreFile,
    IgnoreMatcher,
    get_ignore_matcher,
    is_ignored_by_files,
    load_ignore_file,
)
from .types import WalkEntry, WalkError, WalkItem

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


@dataclass
class WalkOptions:
    """Filesystem options controlling which entries the walker yields.

    ``max_depth`` of ``None`` means no limit; ``max_filesize`` is in bytes and
    only applies to non-directories.
    """

    max_depth: int | None = None
    follow_links: bool = False
    max_filesize: int | None = None
    hidden: bool = False
    only_dirs: bool = False
    no_ignore: bool = False
    no_git_exclude: bool = False
    custom_ignore: list[str] = field(default_factory=list)

    def add_custom_ignore(self, pattern: str) -> WalkOptions:
        """Add a glob whose matches are skipped; returns ``self`` for chaining."""
        self.custom_ignore.append(pattern)
        return self


def _sort_key(entry: os.DirEntry) -> bytes:
    """Order children by raw file-name bytes."""
    return os.fsencode(entry.name)


def _matches_custom_ignore(name: str, relative: str, patterns: list[str]) -> bool:
    """Return whether a glob matches the entry name or its root-relative path."""
    for pattern in patterns:
        if fnmatch.fnmatchcase(name, pattern) or fnmatch.fnmatchcase(relative, pattern):
            return True
    return False


def _safe_real_path(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path


class _DirectoryWalker:
    """Stateful helper behind ``walk_directory``."""

    def __init__(self, root: Path, options: WalkOptions, ignore_matcher: IgnoreMatcher | None) -> None:
        self.root = root
        self.options = options
        self.ignore_matcher = ignore_matcher

    def _ignore_files_for(self, directory: Path) -> tuple[IgnoreFile, ...]:
        """Return the ignore files that ``directory`` itself holds.

        ``.gitignore`` is read directly only when git gave no matcher; ``.ignore``
        is listed last so it overrides ``.gitignore`` in the same directory.
        """
        if self.options.no_ignore:
            return ()
        names = [GITIGNORE_FILENAME, IGNORE_FILENAME]
        if self.ignore_matcher is not None:
            names = [IGNORE_FILENAME]
        found = []
        for name in names:
            ignore_file = load_ignore_file(directory, name)
            if ignore_file is not None:
                found.append(ignore_file)
        return tuple(found)

    def _skip(
        self,
        child: os.DirEntry,
        child_path: Path,
        is_dir: bool,
        ignore_files: tuple[IgnoreFile, ...],
    ) -> bool:
        options = self.options
        if not options.hidden and child.name.startswith("."):
            return True
        if options.only_dirs and not is_dir:
            return True
        if options.custom_ignore:
            try:
                relative = child_path.relative_to(self.root).as_posix()
            except ValueError:
                relative = child.name
            if _matches_custom_ignore(child.name, relative, options.custom_ignore):
                return True
        if self.ignore_matcher is not None and self.ignore_matcher.is_ignored(child_path):
            return True
        if ignore_files and is_ignored_by_files(ignore_files, child_path, is_dir):
            return True
        if options.max_filesize is not None and not is_dir:
            try:
                size = child.stat(follow_symlinks=options.follow_links).st_size
            except OSError:
                return False
            if size > options.max_filesize:
                return True
        return False

    def walk_children(
        self,
        directory: Path,
        depth: int,
        ancestors: frozenset[Path],
        ignore_files: tuple[IgnoreFile, ...] = (),
    ) -> Iterator[WalkItem]:
        """Yield the subtree below ``directory`` whose own depth is ``depth - 1``.

        ``ignore_files`` holds the ignore files of ``directory``'s ancestors,
        outermost first.
        """
        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=_sort_key)
        except OSError as exc:
            yield WalkError(exc, directory, depth - 1)
            return
        ignore_files = ignore_files + self._ignore_files_for(directory)

        for child in children:
            child_path = Path(child.path)
            try:
                is_symlink = child.is_symlink()
            except OSError:
                is_symlink = False
            try:
                is_dir = child.is_dir(follow_symlinks=self.options.follow_links)
            except OSError:
                is_dir = False

            if self._skip(child, child_path, is_dir, ignore_files):
                continue

            yield WalkEntry(child_path, depth, is_dir, is_symlink=is_symlink)

            if not is_dir:
                continue
            if self.options.max_depth is not None and depth >= self.options.max_depth:
                continue
            real_path = _safe_real_path(child_path)
            if is_symlink and real_path in ancestors:
                loop_error = OSError(errno.ELOOP, "symlink loop", str(child_path))
                yield WalkError(loop_error, child_path, depth)
                continue
            yield from self.walk_children(child_path, depth + 1, ancestors | {real_path}, ignore_files)


def walk_directory(root: Path | str, options: WalkOptions | None = None) -> Iterator[WalkItem]:
    """Yield the preorder walk stream rooted at ``root``.

    A root of ``"-"`` yields a single standard-input record. A missing root
    yields one ``WalkError`` and nothing else.
    """
    options = options or WalkOptions()
    if str(root) == STDIN_PATH:
        yield WalkEntry(Path(STDIN_PATH), 0, False, is_stdin=True)
        return

    root_path = Path(root)
    try:
        root_path.lstat()
        is_dir = root_path.is_dir()
        is_symlink = root_path.is_symlink()
    except OSError as exc:
        yield WalkError(exc, root_path, 0)
        return

    yield WalkEntry(root_path, 0, is_dir, is_symlink=is_symlink)
    if not is_dir:
        return
    if options.max_depth is not None and options.max_depth <= 0:
        return

    ignore_matcher = None
    if not options.no_ignore:
        ignore_matcher = get_ignore_matcher(root_path, include_git_exclude=not options.no_git_exclude)
        if ignore_matcher is None:
            logger.debug("no git ignore rules apply under %s", root_path)

    walker = _DirectoryWalker(root_path, options, ignore_matcher)
    yield from walker.walk_children(root_path, 1, frozenset({_safe_real_path(root_path)}))


__all__ = [
    "STDIN_PATH",
    "WalkOptions",
    "walk_directory",
]
