"""Exception types raised by itree."""

from __future__ import annotations


class ItreeError(Exception):
    """Base class for errors reported to the user."""


class TreeBuildError(ItreeError):
    """The walk produced no usable root, so no tree can be built."""
