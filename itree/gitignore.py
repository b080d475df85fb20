"""Ignore rules for the directory walker.

Two sources: a matcher built by asking git which files and directories are
ignored, and per-directory ignore files (``.ignore`` everywhere, plus
``.gitignore`` when there is no git work tree to ask). The walker consults
both unless ``--no-ignore`` is set.
"""

from __future__ import annotations

from collections import OrderedDict
import fnmatch
import logging
import shutil
import subprocess
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

IGNORE_MATCHER_CACHE_MAX = 16
IGNORE_MATCHER_CACHE_TTL_SECONDS = 2.0


@dataclass(frozen=True)
class _MatcherCacheEntry:
    """Cached matcher plus root directory mtime and insertion timestamp."""

    matcher: IgnoreMatcher | None
    root_mtime_ns: int | None
    loaded_at: float


_IGNORE_MATCHER_CACHE: OrderedDict[tuple[str, bool], _MatcherCacheEntry] = OrderedDict()


def clear_ignore_cache() -> None:
    """Clear cached ignore matchers."""
    _IGNORE_MATCHER_CACHE.clear()


def _is_within(path: Path, root: Path) -> bool:
    """Return whether ``path`` is at or under ``root``."""
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


@dataclass(frozen=True)
class IgnoreMatcher:
    """Snapshot of git-ignored paths below ``root``.

    Paths are stored resolved so an ignored directory hides its whole subtree
    by a parent walk.
    """

    root: Path
    ignored_files: frozenset[Path]
    ignored_dirs: frozenset[Path]

    def is_ignored(self, path: Path) -> bool:
        """Return whether ``path`` is ignored under this matcher root."""
        try:
            resolved = path.resolve()
        except OSError:
            return False
        if not _is_within(resolved, self.root):
            return False
        if resolved in self.ignored_files:
            return True
        current = resolved
        while True:
            if current in self.ignored_dirs:
                return True
            if current == self.root:
                break
            parent = current.parent
            if parent == current:
                break
            current = parent
        return False


def _ls_files_ignore_args(include_git_exclude: bool) -> list[str]:
    """Return the ``git ls-files`` arguments selecting ignore sources.

    ``--exclude-standard`` covers ``.gitignore``, ``.git/info/exclude`` and the
    user's global excludes file; without it only per-directory ``.gitignore``
    files apply.
    """
    if include_git_exclude:
        return ["--exclude-standard"]
    return ["--exclude-per-directory=.gitignore"]


def _load_matcher(root: Path, include_git_exclude: bool = True) -> IgnoreMatcher | None:
    """Build a matcher by querying git for ignored files and directories.

    Returns ``None`` when git is unavailable, ``root`` is not inside a work
    tree, or any git call fails. Only paths under ``root`` are kept even when
    the repository root sits higher.
    """
    if shutil.which("git") is None:
        return None

    root = root.resolve()
    try:
        top_proc = subprocess.run(
            ["git", "-C", str(root), "rev-parse", "--show-toplevel"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None

    top_level = top_proc.stdout.strip()
    if not top_level:
        return None

    repo_root = Path(top_level).resolve()
    if not _is_within(root, repo_root):
        return None

    try:
        proc = subprocess.run(
            [
                "git",
                "-C",
                str(repo_root),
                "ls-files",
                "-z",
                "--others",
                "-i",
                *_ls_files_ignore_args(include_git_exclude),
                "--directory",
            ],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("git ls-files failed under %s: %s", repo_root, exc)
        return None

    ignored_files: set[Path] = set()
    ignored_dirs: set[Path] = set()
    for raw in proc.stdout.split(b"\x00"):
        if not raw:
            continue
        rel = raw.decode("utf-8", errors="surrogateescape")
        is_dir = rel.endswith("/")
        rel = rel.rstrip("/")
        if not rel:
            continue
        abs_path = (repo_root / rel).resolve()
        if not _is_within(abs_path, root):
            continue
        if is_dir or abs_path.is_dir():
            ignored_dirs.add(abs_path)
        else:
            ignored_files.add(abs_path)

    return IgnoreMatcher(
        root=root,
        ignored_files=frozenset(ignored_files),
        ignored_dirs=frozenset(ignored_dirs),
    )


def get_ignore_matcher(root: Path, include_git_exclude: bool = True) -> IgnoreMatcher | None:
    """Return cached matcher for ``root`` with bounded staleness."""
    resolved_root = root.resolve()
    key = (str(resolved_root), include_git_exclude)
    try:
        root_mtime_ns: int | None = int(resolved_root.stat().st_mtime_ns)
    except OSError:
        root_mtime_ns = None
    now = time.monotonic()

    cached = _IGNORE_MATCHER_CACHE.get(key)
    if cached is not None:
        cache_age = now - cached.loaded_at
        if (
            cached.root_mtime_ns == root_mtime_ns
            and cache_age <= IGNORE_MATCHER_CACHE_TTL_SECONDS
        ):
            _IGNORE_MATCHER_CACHE.move_to_end(key)
            return cached.matcher

    matcher = _load_matcher(resolved_root, include_git_exclude)
    _IGNORE_MATCHER_CACHE[key] = _MatcherCacheEntry(
        matcher=matcher,
        root_mtime_ns=root_mtime_ns,
        loaded_at=now,
    )
    _IGNORE_MATCHER_CACHE.move_to_end(key)
    while len(_IGNORE_MATCHER_CACHE) > IGNORE_MATCHER_CACHE_MAX:
        _IGNORE_MATCHER_CACHE.popitem(last=False)
    return matcher


IGNORE_FILENAME = ".ignore"
GITIGNORE_FILENAME = ".gitignore"


@dataclass(frozen=True)
class IgnorePattern:
    """One parsed ignore-file line.

    ``anchored`` patterns contain a slash and match the path relative to the
    ignore file's directory; the rest match the entry name at any depth.
    """

    pattern: str
    negate: bool
    dir_only: bool
    anchored: bool

    def matches(self, name: str, relative: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        if self.anchored:
            if fnmatch.fnmatchcase(relative, self.pattern):
                return True
            if self.pattern.startswith("**/"):
                return fnmatch.fnmatchcase(name, self.pattern[3:])
            return False
        return fnmatch.fnmatchcase(name, self.pattern)


def parse_ignore_lines(text: str) -> list[IgnorePattern]:
    """Parse gitignore-style lines: comments, ``!`` negation, trailing ``/``."""
    patterns: list[IgnorePattern] = []
    for raw in text.splitlines():
        line = raw.rstrip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        elif line.startswith("\\"):
            line = line[1:]
        dir_only = line.endswith("/")
        line = line.rstrip("/")
        if not line:
            continue
        anchored = "/" in line
        patterns.append(
            IgnorePattern(
                pattern=line.lstrip("/"),
                negate=negate,
                dir_only=dir_only,
                anchored=anchored,
            )
        )
    return patterns


@dataclass(frozen=True)
class IgnoreFile:
    """Patterns read from one ignore file, scoped to its directory."""

    base: Path
    patterns: tuple[IgnorePattern, ...]

    def verdict(self, path: Path, is_dir: bool) -> bool | None:
        """Return ``True`` (ignored), ``False`` (re-included) or ``None`` (no match).

        The last matching pattern wins.
        """
        try:
            relative = path.relative_to(self.base).as_posix()
        except ValueError:
            return None
        result: bool | None = None
        for pattern in self.patterns:
            if pattern.matches(path.name, relative, is_dir):
                result = not pattern.negate
        return result


def load_ignore_file(directory: Path, filename: str) -> IgnoreFile | None:
    """Read ``directory/filename``; ``None`` when missing, unreadable or empty."""
    path = directory / filename
    try:
        text = path.read_text(encoding="utf-8", errors="surrogateescape")
    except FileNotFoundError:
        return None
    except OSError as exc:
        logger.warning("could not read ignore file %s: %s", path, exc)
        return None
    patterns = parse_ignore_lines(text)
    if not patterns:
        return None
    return IgnoreFile(base=directory, patterns=tuple(patterns))


def is_ignored_by_files(ignore_files: Sequence[IgnoreFile], path: Path, is_dir: bool) -> bool:
    """Apply ignore files from the outermost directory inward; deeper files win."""
    ignored = False
    for ignore_file in ignore_files:
        verdict = ignore_file.verdict(path, is_dir)
        if verdict is not None:
            ignored = verdict
    return ignored
