"""Insertion point calculation for drops onto a container."""

from typing import Optional, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class NodeBounds:
    """Vertical extent of a rendered child, in pointer coordinates."""
    node_id: str
    top: float
    height: float

    @property
    def midpoint(self) -> float:
        return self.top + self.height / 2


@dataclass(frozen=True)
class DropHint:
    """Insertion indicator for drag-over feedback.

    `before` names the child the drop would land in front of; `at_end` is
    set when the drop would append after existing children. Both are empty
    for a container with nothing else in it.
    """
    before: Optional[str] = None
    at_end: bool = False


def resolve_insertion(layout: Sequence[NodeBounds], pointer_y: float,
                      exclude: Optional[str] = None) -> Optional[str]:
    """Return the first child whose midpoint is below the pointer.

    `layout` lists the container's children in display order. The node
    being dragged is passed as `exclude` and never used as a reference.
    None means insert at the end.
    """
    for bounds in layout:
        if bounds.node_id == exclude:
            continue
        if pointer_y < bounds.midpoint:
            return bounds.node_id
    return None


def insertion_index(children: Sequence[str], reference: Optional[str],
                    exclude: Optional[str] = None) -> int:
    """Translate a reference child into an index for the mutation engine.

    Positions are counted with `exclude` left out, matching how the engine
    reads indexes for a node moving within its own container.
    """
    siblings = [child for child in children if child != exclude]
    if reference is None or reference not in siblings:
        return len(siblings)
    return siblings.index(reference)


def drop_hint(layout: Sequence[NodeBounds], pointer_y: float,
              exclude: Optional[str] = None) -> DropHint:
    reference = resolve_insertion(layout, pointer_y, exclude)
    if reference is not None:
        return DropHint(before=reference)
    has_others = any(bounds.node_id != exclude for bounds in layout)
    return DropHint(at_end=has_others)
