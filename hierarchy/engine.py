"""Mutation engine: create, move, rename and delete nodes in the hierarchy."""

import logging
from typing import Optional, Callable, Dict, List, Tuple, Iterable

from hierarchy.errors import CircularMove, IndexOutOfRange
from hierarchy.model import Node, NodeKind, NodeSnapshot, StatusTone, ROOT, TEMPLATES
from hierarchy.registry import NodeRegistry
from hierarchy.settings import EngineSettings
from hierarchy.tree import TreeModel

logger = logging.getLogger(__name__)

Snapshot = Tuple[NodeSnapshot, ...]


class HierarchyEngine:
    """Validates and applies changes to the tree, then notifies observers.

    Every operation either applies completely or raises a HierarchyError
    with the tree untouched. Observers run after the change is in place.
    """

    STATUS_ADDED = "{label} added to the hierarchy."
    STATUS_MOVED = "Item moved."
    STATUS_NOOP = "Item is already in that position."
    STATUS_DELETED = "Item deleted."

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or EngineSettings()
        self.registry = NodeRegistry()
        self.tree = TreeModel(self.registry)

        # Callbacks
        self.on_tree_changed: Optional[Callable[[Snapshot], None]] = None
        self.on_container_badge_changed: Optional[Callable[[str, int, bool], None]] = None
        self.on_status_message: Optional[Callable[[str, StatusTone], None]] = None
        self.on_global_counts_changed: Optional[Callable[[Dict[NodeKind, int]], None]] = None

    # ==================== Queries ====================

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.registry.resolve(node_id)

    def children_of(self, ref: str = ROOT) -> Tuple[str, ...]:
        return self.tree.children_of(ref)

    def container_state(self, ref: str = ROOT) -> Tuple[int, bool]:
        """Return (child_count, is_empty) for a container."""
        count = self.tree.child_count(ref)
        return count, count == 0

    def global_counts(self) -> Dict[NodeKind, int]:
        counts = {kind: 0 for kind in NodeKind}
        for node in self.registry:
            counts[node.kind] += 1
        return counts

    def palette_counts(self) -> Dict[str, int]:
        """Global counts keyed by the palette badge names."""
        return {TEMPLATES[kind].count_key: count for kind, count in self.global_counts().items()}

    def snapshot(self) -> Snapshot:
        """Copy the whole tree, assembling each group after its children."""
        built: Dict[str, NodeSnapshot] = {}
        top_level = self.tree.children_of(ROOT)
        for top_id in top_level:
            # subtree() lists children before their parent
            for node_id in self.tree.subtree(top_id):
                node = self.registry.require(node_id)
                children: Snapshot = ()
                if node.is_container:
                    children = tuple(built.pop(child) for child in self.tree.children_of(node_id))
                built[node_id] = NodeSnapshot(
                    id=node.id,
                    kind=node.kind,
                    display_name=node.display_name,
                    is_collapsed=node.is_collapsed,
                    children=children,
                )
        return tuple(built.pop(top_id) for top_id in top_level)

    # ==================== Mutations ====================

    def create(self, kind, target: str = ROOT, at_index: Optional[int] = None,
               display_name: Optional[str] = None) -> Node:
        """Create a node from a template and place it in `target`.

        `at_index` defaults to the end of the container.
        """
        kind = NodeKind.parse(kind)
        count = self.tree.child_count(target)
        if at_index is None:
            at_index = count
        if at_index < 0 or at_index > count:
            raise IndexOutOfRange(target, at_index, count)

        template = kind.template
        label = display_name if display_name else template.default_label(self.registry.next_sequence)
        node_id = self.registry.allocate(kind, label)
        self.tree.attach(node_id, target, at_index)
        logger.info(f"Created {node_id} ({kind.value}) in {target} at {at_index}")

        self._publish(
            containers=[target],
            status=(self.STATUS_ADDED.format(label=template.label_prefix), StatusTone.SUCCESS),
        )
        return self.registry.require(node_id)

    def move(self, node_id: str, target: str = ROOT, at_index: Optional[int] = None) -> bool:
        """Relocate a node.

        `at_index` counts positions among the target's children with the
        moving node left out, so dropping a node just before itself keeps
        the order. Returns False when nothing needed to change.
        """
        self.registry.require(node_id)
        # Raises InvalidContainer for leaves and unknown targets
        self.tree.child_count(target)
        if target == node_id or self.tree.is_descendant(node_id, target):
            raise CircularMove(node_id, target)

        siblings = [child for child in self.tree.children_of(target) if child != node_id]
        if at_index is None:
            at_index = len(siblings)
        if at_index < 0 or at_index > len(siblings):
            raise IndexOutOfRange(target, at_index, len(siblings))

        previous = self.tree.parent_of(node_id)
        if previous == target and self.tree.index_of(node_id) == at_index:
            logger.debug(f"Move of {node_id} to {target}@{at_index} is a no-op")
            status = None
            if self.settings.announce_noop_moves:
                status = (self.STATUS_NOOP, StatusTone.INFO)
            self._publish(containers=[target], status=status)
            return False

        self.tree.detach(node_id)
        self.tree.attach(node_id, target, at_index)
        logger.info(f"Moved {node_id} from {previous} to {target} at {at_index}")

        self._publish(containers=[previous, target], status=(self.STATUS_MOVED, StatusTone.SUCCESS))
        return True

    def delete(self, node_id: str) -> List[str]:
        """Delete a node and, for groups, everything beneath it.

        Returns the removed ids.
        """
        self.registry.require(node_id)
        previous, removed = self.tree.remove_subtree(node_id)
        for removed_id in removed:
            self.registry.forget(removed_id)
        logger.info(f"Deleted {node_id} and {len(removed) - 1} descendant(s)")

        self._publish(containers=[previous], status=(self.STATUS_DELETED, StatusTone.SUCCESS))
        return removed

    def rename(self, node_id: str, label: str) -> bool:
        """Set a node's display name. Blank labels are ignored."""
        node = self.registry.require(node_id)
        label = (label or "").strip()
        if not label:
            logger.debug(f"Ignoring blank label for {node_id}")
            return False
        if label == node.display_name:
            return False
        node.display_name = label
        self._publish(containers=[node_id] if node.is_container else [], counts=False)
        return True

    def toggle_collapsed(self, node_id: str) -> bool:
        """Flip a group's collapsed flag and return the new value."""
        node = self.registry.require(node_id)
        # Raises InvalidContainer for leaf kinds
        self.tree.child_count(node_id)
        node.is_collapsed = not node.is_collapsed
        self._publish(containers=[], counts=False)
        return node.is_collapsed

    # ==================== Notifications ====================

    def notify_status(self, text: str, tone: StatusTone = StatusTone.INFO):
        if self.on_status_message:
            self.on_status_message(text, tone)

    def _publish(self, containers: Iterable[str],
                 status: Optional[Tuple[str, StatusTone]] = None, counts: bool = True):
        """Notify observers once the tree is in its final state."""
        seen = set()
        for ref in containers:
            if ref == ROOT or ref in seen:
                continue
            seen.add(ref)
            if self.on_container_badge_changed:
                count, is_empty = self.container_state(ref)
                self.on_container_badge_changed(ref, count, is_empty)

        if self.on_tree_changed:
            self.on_tree_changed(self.snapshot())
        if counts and self.on_global_counts_changed:
            self.on_global_counts_changed(self.global_counts())
        if status and self.on_status_message:
            self.on_status_message(*status)
