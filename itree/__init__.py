"""Public package surface for itree.

Exports ``main`` for programmatic CLI invocation.
The tree model lives in ``itree.tree_model``; filesystem walking in
``itree.file_tree_model``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
