"""Errors raised by the hierarchy engine.

Every error is local to a single mutation attempt and leaves the tree
unchanged.
"""


class HierarchyError(Exception):
    """Base class for tree mutation failures."""


class NotFound(HierarchyError):
    """An identifier does not resolve to a live node."""

    def __init__(self, node_id):
        super().__init__(f"No node with id {node_id!r}")
        self.node_id = node_id


class InvalidContainer(HierarchyError):
    """Target is neither the root nor a live group."""

    def __init__(self, container_id, reason: str = "not a group in the tree"):
        super().__init__(f"Cannot place nodes in {container_id!r}: {reason}")
        self.container_id = container_id


class IndexOutOfRange(HierarchyError):
    def __init__(self, container_id, index: int, limit: int):
        super().__init__(
            f"Index {index} out of range for {container_id!r} (0..{limit})"
        )
        self.container_id = container_id
        self.index = index
        self.limit = limit


class CircularMove(HierarchyError):
    """A node cannot be moved into itself or one of its descendants."""

    def __init__(self, node_id, container_id):
        super().__init__(f"Cannot move {node_id!r} inside {container_id!r}")
        self.node_id = node_id
        self.container_id = container_id


class NotAttached(HierarchyError):
    def __init__(self, node_id):
        super().__init__(f"Node {node_id!r} has no parent")
        self.node_id = node_id


class UnknownTemplate(HierarchyError, ValueError):
    """A palette template name outside the known node kinds."""

    def __init__(self, name):
        super().__init__(f"Unknown node template {name!r}")
        self.name = name
