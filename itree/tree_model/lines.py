"""Line projection of the tree plus in-place folding.

``draw`` flattens the arena into a fixed depth-first list of ``TreeLine``
rows threaded by ``prev``/``next`` indices. Folding never moves rows; it only
rewrites those indices so a folded directory's ``next`` jumps over its
descendants. Both fold directions cost O(depth), not O(subtree size).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from ..file_tree_model.types import KIND_DIRECTORY
from .arena import Arena, NodeId

BAR_INDENT = "bar_indent"
BLANK_INDENT = "blank_indent"
MID_BRANCH = "mid_branch"
END_BRANCH = "end_branch"

BRANCH_PIECES = frozenset({MID_BRANCH, END_BRANCH})


@dataclass
class TreeLine:
    """One display row.

    ``prev`` is ``None`` only for the root row. ``next`` equal to the number
    of rows means there is no following row.
    """

    node: NodeId
    prefix: tuple[str, ...]
    prev: int | None
    next: int


@dataclass
class LineProjection:
    """Backing rows in depth-first order, node lookup, and folded rows."""

    lines: list[TreeLine] = field(default_factory=list)
    index_of: dict[NodeId, int] = field(default_factory=dict)
    folded: set[int] = field(default_factory=set)

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> TreeLine:
        return self.lines[index]

    def is_real(self, index: int | None) -> bool:
        return index is not None and 0 <= index < len(self.lines)

    def is_folded(self, index: int) -> bool:
        return index in self.folded

    def line_for(self, node: NodeId) -> int:
        return self.index_of[node]

    def iter_linked(self, start: int = 0, end: int | None = None) -> Iterator[int]:
        """Yield row indices reachable from ``start`` via ``next`` below ``end``."""
        stop = len(self.lines) if end is None else min(end, len(self.lines))
        index = start
        while 0 <= index < stop:
            yield index
            index = self.lines[index].next

    def links(self) -> list[tuple[int | None, int]]:
        """Return every row's ``(prev, next)`` pair."""
        return [(line.prev, line.next) for line in self.lines]

    def _add(self, node: NodeId, prefix: tuple[str, ...]) -> None:
        index = len(self.lines)
        self.index_of[node] = index
        self.lines.append(
            TreeLine(
                node=node,
                prefix=prefix,
                prev=index - 1 if index > 0 else None,
                next=index + 1,
            )
        )


def draw(arena: Arena, root: NodeId) -> LineProjection:
    """Project the tree rooted at ``root`` into an unfolded ``LineProjection``.

    Each child's prefix is the indent stack of its ancestors plus a branch
    piece; descending into a child pushes a blank indent if it is the last
    sibling and a bar indent otherwise.
    """
    projection = LineProjection()
    projection._add(root, ())

    stack: list[tuple[Iterator[NodeId], tuple[str, ...]]] = [(arena.children(root), ())]
    while stack:
        children, indents = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            continue
        last = arena[child].next_sibling is None
        projection._add(child, indents + (END_BRANCH if last else MID_BRANCH,))
        stack.append((arena.children(child), indents + (BLANK_INDENT if last else BAR_INDENT,)))
    return projection


def can_fold(arena: Arena, projection: LineProjection, index: int) -> bool:
    """Only plain directory rows other than the root fold."""
    if index <= 0 or index >= len(projection):
        return False
    return arena[projection[index].node].entry.kind == KIND_DIRECTORY


def subtree_successor(arena: Arena, projection: LineProjection, node: NodeId) -> int:
    """Return the row after ``node``'s whole subtree, or the row count."""
    for ancestor in arena.ancestors(node):
        sibling = arena[ancestor].next_sibling
        if sibling is not None:
            return projection.index_of[sibling]
    return len(projection)


def last_visible_descendant(arena: Arena, projection: LineProjection, node: NodeId) -> int:
    """Return the last row shown for ``node``'s subtree when it is unfolded.

    Follows last children down, stopping at a childless or folded node.
    """
    current = node
    while True:
        last = arena[current].last_child
        if last is None:
            break
        current = last
        if projection.index_of[current] in projection.folded:
            break
    return projection.index_of[current]


def fold_line(arena: Arena, projection: LineProjection, index: int) -> bool:
    """Hide the descendants of row ``index``; returns whether anything changed."""
    if not can_fold(arena, projection, index) or index in projection.folded:
        return False
    successor = subtree_successor(arena, projection, projection[index].node)
    if projection.is_real(successor):
        projection[successor].prev = index
    projection[index].next = successor
    projection.folded.add(index)
    return True


def unfold_line(arena: Arena, projection: LineProjection, index: int) -> bool:
    """Reveal the descendants of folded row ``index``; returns whether anything changed."""
    if index not in projection.folded:
        return False
    last_shown = last_visible_descendant(arena, projection, projection[index].node)
    successor = projection[index].next
    if projection.is_real(successor):
        projection[successor].prev = last_shown
    projection[index].next = index + 1
    projection.folded.discard(index)
    return True


def toggle_fold(arena: Arena, projection: LineProjection, index: int) -> bool:
    if index in projection.folded:
        return unfold_line(arena, projection, index)
    return fold_line(arena, projection, index)
