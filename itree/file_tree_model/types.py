"""Domain datatypes for filesystem walk records and tree entries."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

KIND_FILE = "file"
KIND_DIRECTORY = "directory"
KIND_RESTRICTED_DIRECTORY = "restricted_directory"
KIND_STDIN = "stdin"
KIND_SYMLINK = "symlink"


@dataclass
class Entry:
    """One filesystem object owned by the tree arena.

    ``kind`` is one of the ``KIND_*`` constants. It is mutable because a
    directory is downgraded to ``KIND_RESTRICTED_DIRECTORY`` when listing it
    fails. ``link_target`` is set for symlinks, including followed ones.
    """

    name: str
    kind: str
    path: Path
    depth: int
    link_target: str | None = None


@dataclass(frozen=True)
class WalkEntry:
    """One walker-produced entry descriptor."""

    path: Path
    depth: int
    is_dir: bool
    is_symlink: bool = False
    is_stdin: bool = False


@dataclass(frozen=True)
class WalkError:
    """A recoverable error reported inline by the walker.

    ``path`` is the path whose processing failed, when known.
    """

    error: OSError
    path: Path | None = None
    depth: int | None = None

    @property
    def is_permission_denied(self) -> bool:
        return isinstance(self.error, PermissionError)

    def describe(self) -> str:
        reason = self.error.strerror or str(self.error)
        if self.path is None:
            return reason
        return f"{self.path}: {reason}"


WalkItem = WalkEntry | WalkError


__all__ = [
    "KIND_FILE",
    "KIND_DIRECTORY",
    "KIND_RESTRICTED_DIRECTORY",
    "KIND_STDIN",
    "KIND_SYMLINK",
    "Entry",
    "WalkEntry",
    "WalkError",
    "WalkItem",
]
