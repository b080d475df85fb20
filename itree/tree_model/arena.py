"""Arena-backed ownership tree addressed by integer node ids."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ..file_tree_model.types import Entry

NodeId = int


@dataclass
class Node:
    """Arena slot: one entry plus its structural links as node ids."""

    entry: Entry
    parent: NodeId | None = None
    first_child: NodeId | None = None
    last_child: NodeId | None = None
    prev_sibling: NodeId | None = None
    next_sibling: NodeId | None = None


class Arena:
    """Growable store of ``Node`` records.

    The arena owns every entry; edges between nodes are plain indices into
    ``nodes``, so nodes are never removed once added.
    """

    def __init__(self) -> None:
        self.nodes: list[Node] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, node: NodeId) -> Node:
        return self.nodes[node]

    def new_node(self, entry: Entry) -> NodeId:
        self.nodes.append(Node(entry))
        return len(self.nodes) - 1

    def append_child(self, parent: NodeId, entry: Entry) -> NodeId:
        """Add ``entry`` as the last child of ``parent`` and return its id."""
        child = self.new_node(entry)
        parent_node = self.nodes[parent]
        child_node = self.nodes[child]
        child_node.parent = parent
        if parent_node.last_child is None:
            parent_node.first_child = child
        else:
            self.nodes[parent_node.last_child].next_sibling = child
            child_node.prev_sibling = parent_node.last_child
        parent_node.last_child = child
        return child

    def children(self, node: NodeId) -> Iterator[NodeId]:
        child = self.nodes[node].first_child
        while child is not None:
            yield child
            child = self.nodes[child].next_sibling

    def ancestors(self, node: NodeId) -> Iterator[NodeId]:
        """Yield ``node`` followed by each of its ancestors up to the root."""
        current: NodeId | None = node
        while current is not None:
            yield current
            current = self.nodes[current].parent

    def depth(self, node: NodeId) -> int:
        return sum(1 for _ in self.ancestors(node)) - 1
