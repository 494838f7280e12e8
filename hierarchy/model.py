"""Node types and templates for the hierarchy builder."""

from typing import Optional, Tuple, Dict
from dataclasses import dataclass, field
from enum import Enum

from hierarchy.errors import UnknownTemplate


# Sentinel container reference for the implicit top-level list.
ROOT = "root"


class NodeKind(Enum):
    """Kinds of node that can be placed in the hierarchy."""
    POLICY = "policy"
    SCRIPT = "script"
    REGISTRY = "registry"
    APPLICATION = "application"
    GROUP = "group"

    @property
    def is_container(self) -> bool:
        return TEMPLATES[self].container

    @property
    def template(self) -> "NodeTemplate":
        return TEMPLATES[self]

    @classmethod
    def parse(cls, value) -> "NodeKind":
        """Resolve a palette template name to a kind.

        Raises UnknownTemplate for anything outside the closed set.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownTemplate(value) from None


class StatusTone(Enum):
    """Tone of a status message shown to the user."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


@dataclass(frozen=True)
class NodeTemplate:
    """Palette template for a node kind."""
    kind: NodeKind
    label_prefix: str
    icon: str
    count_key: str
    container: bool = False

    def default_label(self, sequence: int) -> str:
        return f"{self.label_prefix} {sequence}"


TEMPLATES: Dict[NodeKind, NodeTemplate] = {
    NodeKind.POLICY: NodeTemplate(NodeKind.POLICY, "Policy", "🛡️", "policies"),
    NodeKind.SCRIPT: NodeTemplate(NodeKind.SCRIPT, "Script", "📜", "scripts"),
    NodeKind.REGISTRY: NodeTemplate(NodeKind.REGISTRY, "Registry", "🧾", "registry"),
    NodeKind.APPLICATION: NodeTemplate(NodeKind.APPLICATION, "Application", "📦", "applications"),
    NodeKind.GROUP: NodeTemplate(NodeKind.GROUP, "Group", "📁", "groups", container=True),
}


@dataclass
class Node:
    """A node in the hierarchy.

    Containment lives in the tree model; the node only records the id of
    the container that currently lists it.
    """
    id: str
    kind: NodeKind
    display_name: str = ""
    parent_id: Optional[str] = None
    is_collapsed: bool = False

    @property
    def is_container(self) -> bool:
        return self.kind.is_container


@dataclass(frozen=True)
class NodeSnapshot:
    """Immutable copy of a node and its subtree, handed to observers."""
    id: str
    kind: NodeKind
    display_name: str
    is_collapsed: bool = False
    children: Tuple["NodeSnapshot", ...] = field(default_factory=tuple)

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def is_empty(self) -> bool:
        return not self.children

    @property
    def icon(self) -> str:
        return self.kind.template.icon
