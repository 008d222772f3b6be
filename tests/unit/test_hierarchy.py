"""
Unit tests for HierarchyResolver.
"""

from src.core.repository import HierarchyResolver


class TestHierarchyResolver:
    """Tests for parent link resolution"""

    def test_resolve_known_parent(self, make_data):
        """Test a child's link points at its parent after resolution"""
        parent = make_data(id=1, name="customer")
        child = make_data(id=2, parent_id=1, name="email")

        HierarchyResolver().resolve([child, parent])

        assert child.parent is parent
        assert parent.parent is None

    def test_unknown_parent_stays_unset(self, make_data):
        """Test an unresolvable parent_id leaves the link unset without error"""
        orphan = make_data(id=3, parent_id=99)

        HierarchyResolver().resolve([orphan])

        assert orphan.parent_id == 99
        assert orphan.parent is None

    def test_resolve_returns_id_map(self, make_data):
        """Test resolve returns the id to record map it built"""
        datas = [make_data(id=i) for i in (1, 2, 3)]
        by_id = HierarchyResolver().resolve(datas)
        assert sorted(by_id) == [1, 2, 3]
        assert by_id[2] is datas[1]

    def test_multi_level_hierarchy(self, make_data):
        """Test links resolve across several levels regardless of order"""
        root = make_data(id=1, name="order")
        middle = make_data(id=2, parent_id=1, name="customer")
        leaf = make_data(id=3, parent_id=2, name="email")

        HierarchyResolver().resolve([leaf, middle, root])

        assert leaf.parent is middle
        assert leaf.parent.parent is root

    def test_resolve_clears_stale_link(self, make_data):
        """Test a link is recomputed from parent_id, not kept from a previous resolution"""
        parent = make_data(id=1)
        child = make_data(id=2, parent_id=1)
        HierarchyResolver().resolve([parent, child])

        child.parent_id = None
        HierarchyResolver().resolve([parent, child])

        assert child.parent is None

    def test_resolve_one_with_lookup(self, make_data):
        """Test resolve_one uses the given lookup"""
        parent = make_data(id=7)
        child = make_data(id=8, parent_id=7)

        HierarchyResolver().resolve_one(child, {7: parent}.get)

        assert child.parent is parent

    def test_detach_children(self, make_data):
        """Test children of a removed parent lose the link but keep parent_id"""
        parent = make_data(id=1)
        children = [make_data(id=2, parent_id=1), make_data(id=3, parent_id=1)]
        other = make_data(id=4)
        HierarchyResolver().resolve([parent, other, *children])

        detached = HierarchyResolver().detach_children(parent, [other, *children])

        assert detached == 2
        assert all(c.parent is None for c in children)
        assert all(c.parent_id == 1 for c in children)

    def test_attach_children(self, make_data):
        """Test records waiting on an id get linked once that parent is added"""
        waiting = make_data(id=1, parent_id=5)
        linked = make_data(id=2, parent_id=5)
        earlier = make_data(id=3)
        linked.set_parent(earlier)
        parent = make_data(id=5)

        attached = HierarchyResolver().attach_children(parent, [waiting, linked, parent])

        assert attached == 1
        assert waiting.parent is parent
        assert linked.parent is earlier
