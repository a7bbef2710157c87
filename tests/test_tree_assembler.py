"""Tests for flat list to forest assembly."""

from dataclasses import dataclass
from typing import Optional

from asset_service.app.crud.asset_hierarchy.tree_assembler import TreeNode, assemble


@dataclass
class Item:
    id: str
    parent_id: Optional[str] = None


def _ids(nodes):
    return [n.id for n in nodes]


class TestAssemble:
    def test_empty_input(self):
        assert assemble([]) == []

    def test_children_follow_parent_ids(self):
        items = [Item("A"), Item("B", "A"), Item("C", "A"), Item("D", "B")]
        roots = assemble(items)

        assert _ids(roots) == ["A"]
        a = roots[0]
        assert _ids(a.children) == ["B", "C"]
        assert _ids(a.children[0].children) == ["D"]
        assert a.children[1].children == []

    def test_node_count_equals_input_length(self):
        items = [Item("A"), Item("B", "A"), Item("C", "B"), Item("X"), Item("Y", "X")]
        roots = assemble(items)
        assert sum(r.size() for r in roots) == len(items)

    def test_children_keep_input_order(self):
        items = [Item("A"), Item("C", "A"), Item("B", "A")]
        assert _ids(assemble(items)[0].children) == ["C", "B"]

    def test_child_listed_before_parent(self):
        items = [Item("B", "A"), Item("A")]
        roots = assemble(items)
        assert _ids(roots) == ["A"]
        assert _ids(roots[0].children) == ["B"]

    def test_orphans_become_roots_without_root_filter(self):
        items = [Item("B", "missing"), Item("C", "B")]
        roots = assemble(items)
        assert _ids(roots) == ["B"]
        assert _ids(roots[0].children) == ["C"]

    def test_self_parented_item_is_a_root(self):
        items = [Item("A", "A"), Item("B", "A")]
        roots = assemble(items)
        assert _ids(roots) == ["A"]
        assert _ids(roots[0].children) == ["B"]
        assert [n.id for n in roots[0].walk()] == ["A", "B"]
        assert roots[0].size() == 2

    def test_root_filter_returns_only_that_root(self):
        items = [Item("B", "A"), Item("C", "B"), Item("Z", "elsewhere")]
        roots = assemble(items, root_id="B")
        assert _ids(roots) == ["B"]
        assert _ids(roots[0].children) == ["C"]

    def test_root_filter_compares_ids_as_strings(self, random_id):
        child_id = "child"
        items = [Item(random_id, "parent"), Item(child_id, str(random_id))]
        roots = assemble(items, root_id=str(random_id))
        assert _ids(roots) == [random_id]
        assert _ids(roots[0].children) == [child_id]


class TestTreeNode:
    def test_walk_is_pre_order(self):
        items = [Item("A"), Item("B", "A"), Item("D", "B"), Item("C", "A")]
        root = assemble(items)[0]
        assert [n.id for n in root.walk()] == ["A", "B", "D", "C"]

    def test_deep_chain_has_no_recursion_limit(self):
        items = [Item("0")] + [Item(str(i), str(i - 1)) for i in range(1, 5000)]
        roots = assemble(items)
        assert len(roots) == 1
        assert roots[0].size() == 5000

    def test_leaf_size(self):
        assert TreeNode(item=Item("A")).size() == 1
