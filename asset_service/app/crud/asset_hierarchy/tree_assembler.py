from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class TreeNode:
    item: Any
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def id(self):
        return self.item.id

    def walk(self) -> Iterator["TreeNode"]:
        """Pre-order traversal without recursion."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def size(self) -> int:
        return sum(1 for _ in self.walk())


def assemble(items: List[Any], root_id=None) -> List[TreeNode]:
    """
    Turn a flat list of items (objects with `id` and `parent_id`) into a forest.

    Without `root_id`, every item whose parent is not in the list becomes a
    root. With `root_id`, only that item is returned as root. Children keep
    the order of `items`.
    """
    nodes: Dict[str, TreeNode] = {}
    for item in items:
        nodes[str(item.id)] = TreeNode(item=item)

    wanted_root = str(root_id) if root_id is not None else None
    roots: List[TreeNode] = []
    for item in items:
        node = nodes[str(item.id)]
        parent_key: Optional[str] = str(item.parent_id) if item.parent_id is not None else None

        if parent_key is not None and parent_key != str(item.id) and parent_key in nodes:
            nodes[parent_key].children.append(node)
        elif wanted_root is None:
            roots.append(node)
        elif str(item.id) == wanted_root:
            roots.append(node)

    return roots
