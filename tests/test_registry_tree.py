import pytest

from hierarchy.errors import NotFound, InvalidContainer, IndexOutOfRange, NotAttached
from hierarchy.model import NodeKind, ROOT
from hierarchy.registry import NodeRegistry
from hierarchy.tree import TreeModel


@pytest.fixture
def registry():
    return NodeRegistry()


@pytest.fixture
def tree(registry):
    return TreeModel(registry)


def add(tree, kind, ref=ROOT, index=None):
    node_id = tree.registry.allocate(kind)
    tree.attach(node_id, ref, tree.child_count(ref) if index is None else index)
    return node_id


class TestNodeRegistry:
    def test_ids_are_sequential_and_never_reused(self, registry):
        first = registry.allocate(NodeKind.POLICY)
        second = registry.allocate(NodeKind.GROUP)
        assert (first, second) == ("node-1", "node-2")

        registry.forget(second)
        assert registry.resolve(second) is None
        assert registry.allocate(NodeKind.SCRIPT) == "node-3"

    def test_next_sequence_tracks_allocations(self, registry):
        assert registry.next_sequence == 1
        registry.allocate(NodeKind.SCRIPT)
        assert registry.next_sequence == 2

    def test_require_raises_for_unknown_id(self, registry):
        with pytest.raises(NotFound):
            registry.require("node-99")

    def test_root_is_not_a_node(self, registry):
        assert registry.resolve(ROOT) is None

    def test_forget_unknown_id_is_harmless(self, registry):
        registry.forget("node-42")
        assert len(registry) == 0


class TestTreeModel:
    def test_attach_orders_children(self, tree):
        a = add(tree, NodeKind.POLICY)
        b = add(tree, NodeKind.SCRIPT)
        c = add(tree, NodeKind.REGISTRY, index=0)
        assert tree.children_of(ROOT) == (c, a, b)
        assert tree.parent_of(a) == ROOT
        assert tree.registry.require(a).parent_id == ROOT

    def test_attach_into_leaf_is_rejected(self, tree):
        leaf = add(tree, NodeKind.APPLICATION)
        orphan = tree.registry.allocate(NodeKind.POLICY)
        with pytest.raises(InvalidContainer):
            tree.attach(orphan, leaf, 0)
        assert not tree.is_attached(orphan)

    def test_attach_into_unattached_group_is_rejected(self, tree):
        floating = tree.registry.allocate(NodeKind.GROUP)
        orphan = tree.registry.allocate(NodeKind.POLICY)
        with pytest.raises(InvalidContainer):
            tree.attach(orphan, floating, 0)

    @pytest.mark.parametrize("index", [-1, 2])
    def test_attach_index_bounds(self, tree, index):
        add(tree, NodeKind.POLICY)
        orphan = tree.registry.allocate(NodeKind.POLICY)
        with pytest.raises(IndexOutOfRange):
            tree.attach(orphan, ROOT, index)
        assert tree.child_count(ROOT) == 1

    def test_append_at_child_count(self, tree):
        add(tree, NodeKind.POLICY)
        orphan = tree.registry.allocate(NodeKind.POLICY)
        tree.attach(orphan, ROOT, 1)
        assert tree.children_of(ROOT)[-1] == orphan

    def test_detach_returns_previous_position(self, tree):
        group = add(tree, NodeKind.GROUP)
        first = add(tree, NodeKind.POLICY, group)
        second = add(tree, NodeKind.SCRIPT, group)
        assert tree.detach(second) == (group, 1)
        assert tree.children_of(group) == (first,)
        assert tree.registry.require(second).parent_id is None

    def test_detach_unparented_node(self, tree):
        orphan = tree.registry.allocate(NodeKind.POLICY)
        with pytest.raises(NotAttached):
            tree.detach(orphan)

    def test_is_descendant_walks_up(self, tree):
        outer = add(tree, NodeKind.GROUP)
        middle = add(tree, NodeKind.GROUP, outer)
        inner = add(tree, NodeKind.GROUP, middle)
        assert tree.is_descendant(outer, inner)
        assert tree.is_descendant(middle, inner)
        assert not tree.is_descendant(inner, outer)
        assert not tree.is_descendant(inner, inner)

    def test_attach_refuses_cycle(self, tree):
        outer = add(tree, NodeKind.GROUP)
        inner = add(tree, NodeKind.GROUP, outer)
        tree.detach(outer)
        with pytest.raises(InvalidContainer):
            tree.attach(outer, inner, 0)

    def test_remove_subtree(self, tree):
        outer = add(tree, NodeKind.GROUP)
        inner = add(tree, NodeKind.GROUP, outer)
        leaf = add(tree, NodeKind.POLICY, inner)
        keep = add(tree, NodeKind.SCRIPT)

        previous, removed = tree.remove_subtree(outer)
        assert previous == ROOT
        assert removed == [leaf, inner, outer]
        assert tree.children_of(ROOT) == (keep,)
        assert not tree.is_attached(inner)
        assert not tree.is_attached(leaf)

    def test_discard_requires_detached_node(self, tree):
        group = add(tree, NodeKind.GROUP)
        with pytest.raises(InvalidContainer):
            tree.discard(group)

        tree.detach(group)
        tree.discard(group)
        assert group not in tree._children
        assert not tree.is_container(group)
        with pytest.raises(InvalidContainer):
            tree.children_of(group)

    def test_is_container(self, tree):
        group = add(tree, NodeKind.GROUP)
        leaf = add(tree, NodeKind.POLICY, group)
        assert tree.is_container(ROOT)
        assert tree.is_container(group)
        assert not tree.is_container(leaf)
        assert not tree.is_container("node-99")
