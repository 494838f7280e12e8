"""Identity allocation for hierarchy nodes."""

import logging
from typing import Optional, Dict, Iterator

from hierarchy.errors import NotFound
from hierarchy.model import Node, NodeKind, ROOT

logger = logging.getLogger(__name__)


class NodeRegistry:
    """Owns the id counter and the id -> node table.

    The counter starts at 1 when the registry is created and only ever
    increases, so an id is never handed out twice.
    """

    ID_PREFIX = "node-"

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self._next_sequence = 1

    @property
    def next_sequence(self) -> int:
        """Sequence number the next allocation will use."""
        return self._next_sequence

    def allocate(self, kind: NodeKind, display_name: str = "") -> str:
        """Create and register a node of `kind`, returning its id."""
        sequence = self._next_sequence
        self._next_sequence += 1
        node_id = f"{self.ID_PREFIX}{sequence}"
        self._nodes[node_id] = Node(id=node_id, kind=kind, display_name=display_name)
        logger.debug(f"Allocated {node_id} ({kind.value})")
        return node_id

    def resolve(self, node_id: str) -> Optional[Node]:
        """Get a node by id, or None if it is not live."""
        if node_id == ROOT:
            return None
        return self._nodes.get(node_id)

    def require(self, node_id: str) -> Node:
        node = self.resolve(node_id)
        if node is None:
            raise NotFound(node_id)
        return node

    def forget(self, node_id: str):
        """Remove a node from the table. Unknown ids are ignored."""
        if self._nodes.pop(node_id, None) is not None:
            logger.debug(f"Forgot {node_id}")

    def __contains__(self, node_id) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))
