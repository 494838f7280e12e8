"""Hierarchy builder: drag-and-drop tree mutation engine."""

__version__ = "1.0.0"

from hierarchy.model import ROOT, Node, NodeKind, NodeSnapshot, NodeTemplate, StatusTone, TEMPLATES
from hierarchy.errors import (
    HierarchyError,
    NotFound,
    InvalidContainer,
    IndexOutOfRange,
    CircularMove,
    NotAttached,
    UnknownTemplate,
)
from hierarchy.registry import NodeRegistry
from hierarchy.tree import TreeModel
from hierarchy.engine import HierarchyEngine
from hierarchy.drop import NodeBounds, DropHint, resolve_insertion, insertion_index, drop_hint
from hierarchy.gesture import GestureCoordinator, GestureState, MovePayload, CreatePayload
from hierarchy.settings import EngineSettings, configure_logging
