"""Focus cursor over tree nodes with remembered descent positions."""

from __future__ import annotations

from .arena import Arena, NodeId
from .lines import LineProjection


class FocusCursor:
    """Current focus node plus the child last left when moving up from a node.

    The root is never focused unless it has no children. Every move is total:
    when there is nowhere to go, focus stays where it is.
    """

    def __init__(self, arena: Arena, root: NodeId) -> None:
        self.arena = arena
        self.root = root
        first_child = arena[root].first_child
        self.focused: NodeId = first_child if first_child is not None else root
        self.descents: dict[NodeId, NodeId] = {}

    def up(self) -> bool:
        parent = self.arena[self.focused].parent
        if parent is None or parent == self.root:
            return False
        self.descents[parent] = self.focused
        self.focused = parent
        return True

    def down(self, projection: LineProjection) -> bool:
        """Descend into the remembered or first child; folded rows stay put."""
        if projection.is_folded(projection.line_for(self.focused)):
            return False
        target = self.descents.get(self.focused)
        if target is None:
            target = self.arena[self.focused].first_child
        if target is None:
            return False
        self.focused = target
        return True

    def left(self) -> bool:
        sibling = self.arena[self.focused].prev_sibling
        if sibling is None:
            return False
        self.focused = sibling
        return True

    def right(self) -> bool:
        sibling = self.arena[self.focused].next_sibling
        if sibling is None:
            return False
        self.focused = sibling
        return True
