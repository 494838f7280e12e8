"""Containment structure for the hierarchy.

Nodes live in the registry; this module only keeps parent ids and ordered
child id lists, with the root list under the ROOT key.
"""

import logging
from typing import Dict, List, Tuple

from hierarchy.errors import InvalidContainer, IndexOutOfRange, NotAttached
from hierarchy.model import ROOT
from hierarchy.registry import NodeRegistry

logger = logging.getLogger(__name__)


class TreeModel:
    """Parent pointers and ordered children, keyed by node id."""

    def __init__(self, registry: NodeRegistry):
        self.registry = registry
        self._children: Dict[str, List[str]] = {ROOT: []}
        self._parent: Dict[str, str] = {}

    # ==================== Queries ====================

    def is_attached(self, node_id: str) -> bool:
        return node_id in self._parent

    def is_container(self, ref: str) -> bool:
        """True for the root and for live, attached groups."""
        if ref == ROOT:
            return True
        node = self.registry.resolve(ref)
        return node is not None and node.is_container and ref in self._parent

    def children_of(self, ref: str) -> Tuple[str, ...]:
        self._require_container(ref)
        return tuple(self._children.get(ref, ()))

    def child_count(self, ref: str) -> int:
        self._require_container(ref)
        return len(self._children.get(ref, ()))

    def parent_of(self, node_id: str) -> str:
        try:
            return self._parent[node_id]
        except KeyError:
            raise NotAttached(node_id) from None

    def index_of(self, node_id: str) -> int:
        return self._children[self.parent_of(node_id)].index(node_id)

    def is_descendant(self, ancestor_id: str, node_id: str) -> bool:
        """Check whether `ancestor_id` appears above `node_id`.

        Walks parent pointers from `node_id` toward the root, so the cost
        is the depth of `node_id`. A node is not its own descendant.
        """
        current = self._parent.get(node_id)
        while current is not None and current != ROOT:
            if current == ancestor_id:
                return True
            current = self._parent.get(current)
        return False

    def subtree(self, node_id: str) -> List[str]:
        """Ids of `node_id` and all its descendants, children first."""
        order: List[str] = []
        stack = [(node_id, False)]
        while stack:
            current, expanded = stack.pop()
            if expanded:
                order.append(current)
                continue
            stack.append((current, True))
            for child in reversed(self._children.get(current, ())):
                stack.append((child, False))
        return order

    # ==================== Mutations ====================

    def attach(self, node_id: str, ref: str, at_index: int):
        """Insert `node_id` into `ref` before position `at_index`.

        `at_index == child_count` appends.
        """
        node = self.registry.require(node_id)
        self._require_container(ref)
        if node_id in self._parent:
            raise InvalidContainer(ref, f"{node_id!r} is already attached")
        if ref == node_id or self.is_descendant(node_id, ref):
            raise InvalidContainer(ref, f"inside {node_id!r}")
        siblings = self._children.setdefault(ref, [])
        if at_index < 0 or at_index > len(siblings):
            raise IndexOutOfRange(ref, at_index, len(siblings))

        siblings.insert(at_index, node_id)
        self._parent[node_id] = ref
        if node.is_container:
            self._children.setdefault(node_id, [])
        node.parent_id = ref
        logger.debug(f"Attached {node_id} to {ref} at {at_index}")

    def detach(self, node_id: str) -> Tuple[str, int]:
        """Remove `node_id` from its container.

        Returns the previous container and index. The node keeps its own
        children.
        """
        ref = self.parent_of(node_id)
        siblings = self._children[ref]
        index = siblings.index(node_id)
        del siblings[index]
        del self._parent[node_id]
        node = self.registry.resolve(node_id)
        if node is not None:
            node.parent_id = None
        logger.debug(f"Detached {node_id} from {ref} at {index}")
        return ref, index

    def discard(self, node_id: str):
        """Drop child-list bookkeeping for a node that is no longer attached."""
        if node_id in self._parent:
            raise InvalidContainer(node_id, "still attached")
        self._children.pop(node_id, None)

    def remove_subtree(self, node_id: str) -> Tuple[str, List[str]]:
        """Detach `node_id` and drop all bookkeeping for its subtree.

        Returns the former container and the removed ids, children first.
        Registry entries are left for the caller to forget.
        """
        removed = self.subtree(node_id)
        ref, _ = self.detach(node_id)
        for current in removed:
            self._parent.pop(current, None)
            self.discard(current)
        return ref, removed

    def _require_container(self, ref: str):
        if ref == ROOT:
            return
        node = self.registry.resolve(ref)
        if node is None:
            raise InvalidContainer(ref, "no such node")
        if not node.is_container:
            raise InvalidContainer(ref, f"{node.kind.value} items cannot hold children")
        if ref not in self._parent:
            raise InvalidContainer(ref, "not in the tree")
