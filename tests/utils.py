"""Test utilities for the minimd test suite.

Small helpers for inspecting loaded trees in assertions.
"""

from minimd.ast.nodes import Node, NodeType
from minimd.ast.serialization import node_to_dict


def child_types(node: Node) -> list[NodeType]:
    """Return the types of the direct children of ``node``."""
    return [child.type for child in node.children()]


def child_texts(node: Node) -> list:
    """Return the texts of the direct children of ``node``."""
    return [child.text for child in node.children()]


def nth_child(node: Node, index: int) -> Node:
    """Return the ``index``-th direct child of ``node``."""
    return list(node.children())[index]


def tree_shape(node: Node) -> dict:
    """Return a structural snapshot of a tree (types, texts, URLs, whitespace)."""
    return node_to_dict(node)


def assert_tree_consistent(root: Node) -> int:
    """Check parent/child/sibling links of a whole tree; return the node count.

    Walks iteratively so deep trees can be checked.
    """
    assert root.parent is None
    count = 0
    stack = [root]
    while stack:
        node = stack.pop()
        count += 1
        previous = None
        child = node.first_child
        while child is not None:
            assert child.parent is node
            assert child.prev_sibling is previous
            previous = child
            stack.append(child)
            child = child.next_sibling
        assert node.last_child is previous
        if not node.is_block:
            assert node.first_child is None
    return count
