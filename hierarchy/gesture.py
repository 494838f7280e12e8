"""Drag gesture tracking for the hierarchy builder.

The coordinator holds at most one drag payload. It touches the tree only
when a drop resolves; drag-over just computes an insertion hint.
"""

import logging
from typing import Optional, Callable, Sequence, Union
from dataclasses import dataclass
from enum import Enum

from hierarchy.drop import NodeBounds, DropHint, resolve_insertion, insertion_index, drop_hint
from hierarchy.engine import HierarchyEngine
from hierarchy.errors import HierarchyError, CircularMove
from hierarchy.model import NodeKind, StatusTone, ROOT

logger = logging.getLogger(__name__)

LayoutProvider = Callable[[str], Sequence[NodeBounds]]


class GestureState(Enum):
    IDLE = "idle"
    ARMED = "armed"


@dataclass(frozen=True)
class MovePayload:
    """An existing node is being relocated."""
    node_id: str


@dataclass(frozen=True)
class CreatePayload:
    """A new node is being dragged out of the palette."""
    kind: NodeKind


Payload = Union[MovePayload, CreatePayload]


class GestureCoordinator:
    """Single-slot drag state machine routing drops to the engine."""

    STATUS_CIRCULAR = "Cannot move a group inside one of its descendants."
    STATUS_FAILED = "That change could not be applied."

    def __init__(self, engine: HierarchyEngine, layout_provider: Optional[LayoutProvider] = None):
        self.engine = engine
        # Supplies the rendered bounds of a container's children, top to bottom
        self.layout_provider = layout_provider
        self._payload: Optional[Payload] = None

    @property
    def state(self) -> GestureState:
        return GestureState.IDLE if self._payload is None else GestureState.ARMED

    @property
    def payload(self) -> Optional[Payload]:
        return self._payload

    # ==================== Pick-up ====================

    def pick_up_node(self, node_id: str):
        self._payload = MovePayload(node_id)
        logger.debug(f"Armed: move {node_id}")

    def pick_up_template(self, template):
        """Arm a create gesture. Unknown template names raise UnknownTemplate."""
        kind = NodeKind.parse(template)
        self._payload = CreatePayload(kind)
        logger.debug(f"Armed: create {kind.value}")

    # ==================== Drag-over / drop ====================

    def drag_over(self, container: str = ROOT, pointer_y: float = 0.0) -> DropHint:
        """Compute the insertion indicator for the pointer over `container`.

        Leaves and unknown targets give an empty hint.
        """
        if self._payload is None or not self.engine.tree.is_container(container):
            return DropHint()
        return drop_hint(self._layout(container), pointer_y, self._excluded())

    def drop(self, container: str = ROOT, pointer_y: float = 0.0):
        """Finish the gesture over `container`.

        Returns the engine result (created node, or the move flag), or None
        when nothing was applied. The coordinator is idle afterwards either
        way.
        """
        payload = self._release()
        if payload is None:
            logger.debug(f"Drop on {container} with no active gesture ignored")
            return None

        try:
            exclude = payload.node_id if isinstance(payload, MovePayload) else None
            reference = resolve_insertion(self._layout(container), pointer_y, exclude)
            index = insertion_index(self.engine.children_of(container), reference, exclude)
            if isinstance(payload, MovePayload):
                return self.engine.move(payload.node_id, container, index)
            return self.engine.create(payload.kind, container, index)
        except CircularMove as exc:
            logger.info(str(exc))
            self.engine.notify_status(self.STATUS_CIRCULAR, StatusTone.WARNING)
        except HierarchyError as exc:
            logger.error(f"Drop of {payload} on {container} failed: {exc}")
            self.engine.notify_status(self.STATUS_FAILED, StatusTone.WARNING)
        return None

    def drop_on_disposal(self):
        """Finish the gesture over the disposal target.

        A dragged node is deleted; a palette template is simply discarded.
        """
        payload = self._release()
        if not isinstance(payload, MovePayload):
            logger.debug(f"Disposal drop of {payload} ignored")
            return None
        try:
            return self.engine.delete(payload.node_id)
        except HierarchyError as exc:
            logger.error(f"Delete of {payload.node_id} failed: {exc}")
            self.engine.notify_status(self.STATUS_FAILED, StatusTone.WARNING)
        return None

    def cancel(self):
        """Abandon the gesture without touching the tree."""
        payload = self._release()
        if payload is not None:
            logger.debug(f"Cancelled {payload}")

    # ==================== Direct edits ====================

    def rename(self, node_id: str, label: str) -> bool:
        try:
            return self.engine.rename(node_id, label)
        except HierarchyError as exc:
            logger.error(f"Rename of {node_id} failed: {exc}")
            return False

    def toggle_collapsed(self, node_id: str) -> Optional[bool]:
        try:
            return self.engine.toggle_collapsed(node_id)
        except HierarchyError as exc:
            logger.error(f"Toggle of {node_id} failed: {exc}")
            return None

    # ==================== Helpers ====================

    def _release(self) -> Optional[Payload]:
        payload, self._payload = self._payload, None
        return payload

    def _excluded(self) -> Optional[str]:
        if isinstance(self._payload, MovePayload):
            return self._payload.node_id
        return None

    def _layout(self, container: str) -> Sequence[NodeBounds]:
        if self.layout_provider is None:
            return ()
        return self.layout_provider(container)
