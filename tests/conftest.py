import pytest

from hierarchy.engine import HierarchyEngine
from hierarchy.model import ROOT


class Recorder:
    """Collects every observer notification the engine sends."""

    def __init__(self, engine: HierarchyEngine):
        self.snapshots = []
        self.badges = []
        self.statuses = []
        self.counts = []
        engine.on_tree_changed = self.snapshots.append
        engine.on_container_badge_changed = lambda ref, count, empty: self.badges.append((ref, count, empty))
        engine.on_status_message = lambda text, tone: self.statuses.append((text, tone))
        engine.on_global_counts_changed = self.counts.append

    def clear(self):
        self.snapshots.clear()
        self.badges.clear()
        self.statuses.clear()
        self.counts.clear()


def assert_consistent(engine: HierarchyEngine):
    """Check the forest, parent pointer and registry invariants."""
    tree = engine.tree
    seen = set()

    def walk(ref, ancestors):
        for child in tree.children_of(ref):
            assert child not in seen, f"{child} listed twice"
            assert child not in ancestors, f"cycle through {child}"
            seen.add(child)
            node = engine.get_node(child)
            assert node is not None
            assert node.parent_id == ref
            assert tree.parent_of(child) == ref
            if node.is_container:
                count, empty = engine.container_state(child)
                assert count == len(tree.children_of(child))
                assert empty == (count == 0)
                walk(child, ancestors | {child})

    walk(ROOT, frozenset())
    assert seen == {node.id for node in engine.registry}


@pytest.fixture
def engine():
    return HierarchyEngine()


@pytest.fixture
def recorder(engine):
    return Recorder(engine)
