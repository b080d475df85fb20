"""Filesystem-side model: walk records, entries, and the directory walker.

This package contains non-UI primitives:
- entry and walk-record datatypes
- the sorted, ignore-aware depth-first directory walker
"""

from __future__ import annotations

from .types import (
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
from .walk import STDIN_PATH, WalkOptions, walk_directory

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
    "STDIN_PATH",
    "WalkOptions",
    "walk_directory",
]
