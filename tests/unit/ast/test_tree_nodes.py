#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/ast/test_tree_nodes.py
"""Unit tests for the node structure and tree building.

Tests cover:
- NodeType labels, block flags and helpers
- Node creation and child/sibling links
- Detaching nodes
- Iterative tree teardown

"""

import pytest

from minimd.ast.nodes import Node, NodeType, SourceLocation, add_node, detach, free_tree
from minimd.ast.visitors import NodeVisitor


@pytest.mark.unit
class TestNodeType:
    """Tests for the NodeType enumeration."""

    def test_block_flag_split(self):
        """Test that every type before NORMAL_TEXT is a block and none after it is."""
        members = list(NodeType)
        split = members.index(NodeType.NORMAL_TEXT)
        assert all(member.is_block for member in members[:split])
        assert not any(member.is_block for member in members[split:])

    def test_metadata_text_is_inline(self):
        """Test that metadata entries are not blocks even though they sit in one."""
        assert NodeType.METADATA.is_block
        assert not NodeType.METADATA_TEXT.is_block

    def test_member_order(self):
        """Test the documented order of the first and last members."""
        members = list(NodeType)
        assert members[0] is NodeType.DOCUMENT
        assert members[-1] is NodeType.METADATA_TEXT
        assert members.index(NodeType.HEADING_1) < members.index(NodeType.PARAGRAPH)

    def test_heading_lookup(self):
        """Test heading type lookup by level."""
        assert NodeType.heading(1) is NodeType.HEADING_1
        assert NodeType.heading(6) is NodeType.HEADING_6
        assert NodeType.HEADING_3.heading_level == 3
        assert NodeType.PARAGRAPH.heading_level == 0

    @pytest.mark.parametrize("level", [0, 7, -1])
    def test_heading_lookup_out_of_range(self, level):
        """Test that heading levels outside 1-6 are rejected."""
        with pytest.raises(ValueError):
            NodeType.heading(level)

    def test_labels_round_trip(self):
        """Test that every member can be found by its label."""
        for member in NodeType:
            assert NodeType.from_label(member.label) is member

    def test_unknown_label(self):
        """Test that an unknown label raises ValueError."""
        with pytest.raises(ValueError, match="Unknown node type"):
            NodeType.from_label("blink")

    def test_category_helpers(self):
        """Test is_heading, is_list and is_table_cell."""
        assert NodeType.HEADING_2.is_heading
        assert not NodeType.PARAGRAPH.is_heading
        assert NodeType.ORDERED_LIST.is_list
        assert not NodeType.LIST_ITEM.is_list
        assert NodeType.TABLE_BODY_CELL_RIGHT.is_table_cell
        assert not NodeType.TABLE_ROW.is_table_cell


@pytest.mark.unit
class TestNodeCreation:
    """Tests for add_node and the node links."""

    def test_root_has_no_parent(self):
        """Test creating a parentless root."""
        root = add_node(None, NodeType.DOCUMENT)
        assert root.parent is None
        assert root.first_child is None
        assert root.last_child is None

    def test_children_are_linked_in_order(self):
        """Test that appended children keep document order and sibling links."""
        root = add_node(None, NodeType.DOCUMENT)
        first = add_node(root, NodeType.PARAGRAPH)
        second = add_node(root, NodeType.THEMATIC_BREAK)
        third = add_node(root, NodeType.PARAGRAPH)

        assert list(root.children()) == [first, second, third]
        assert root.first_child is first
        assert root.last_child is third
        assert first.prev_sibling is None
        assert first.next_sibling is second
        assert second.prev_sibling is first
        assert third.next_sibling is None
        assert all(child.parent is root for child in (first, second, third))

    def test_fields_are_stored(self):
        """Test that text, url, whitespace and location are stored."""
        root = add_node(None, NodeType.PARAGRAPH)
        node = add_node(
            root,
            NodeType.LINKED_TEXT,
            whitespace=True,
            text="docs",
            url="http://example.com",
            source_location=SourceLocation(3),
        )
        assert node.text == "docs"
        assert node.url == "http://example.com"
        assert node.whitespace is True
        assert node.source_location == SourceLocation(line=3, column=None)
        assert not node.is_block
        assert root.is_block

    def test_nodes_compare_by_identity(self):
        """Test that two nodes with equal fields are still different nodes."""
        a = Node(NodeType.NORMAL_TEXT, text="x")
        b = Node(NodeType.NORMAL_TEXT, text="x")
        assert a != b
        assert a == a

    def test_repr_does_not_include_links(self):
        """Test that repr leaves out parent and sibling links."""
        root = add_node(None, NodeType.PARAGRAPH)
        child = add_node(root, NodeType.NORMAL_TEXT, text="hi")
        text = repr(child)
        assert "hi" in text
        assert "parent" not in text

    def test_append_attached_child_rejected(self):
        """Test that a node cannot be attached to two parents."""
        a = add_node(None, NodeType.DOCUMENT)
        b = add_node(None, NodeType.DOCUMENT)
        child = add_node(a, NodeType.PARAGRAPH)
        with pytest.raises(ValueError):
            b.append_child(child)

    def test_accept_dispatches_to_visitor(self):
        """Test that accept hands the node to the visitor."""

        class Recorder(NodeVisitor):
            def __init__(self):
                self.seen = []

            def visit_paragraph(self, node):
                self.seen.append(node)

        root = add_node(None, NodeType.DOCUMENT)
        para = add_node(root, NodeType.PARAGRAPH)
        recorder = Recorder()
        root.accept(recorder)
        assert recorder.seen == [para]


@pytest.mark.unit
class TestDetach:
    """Tests for detaching nodes."""

    def _three_children(self):
        root = add_node(None, NodeType.DOCUMENT)
        nodes = [add_node(root, NodeType.PARAGRAPH, text=str(i)) for i in range(3)]
        return root, nodes

    def test_detach_middle(self):
        """Test detaching a middle child relinks its neighbours."""
        root, (a, b, c) = self._three_children()
        detach(b)
        assert list(root.children()) == [a, c]
        assert a.next_sibling is c
        assert c.prev_sibling is a
        assert b.parent is None and b.prev_sibling is None and b.next_sibling is None

    def test_detach_first_and_last(self):
        """Test detaching the first and last children updates the parent."""
        root, (a, b, c) = self._three_children()
        a.detach()
        c.detach()
        assert root.first_child is b
        assert root.last_child is b
        assert b.prev_sibling is None and b.next_sibling is None

    def test_detach_only_child(self):
        """Test detaching an only child empties the parent."""
        root = add_node(None, NodeType.DOCUMENT)
        only = add_node(root, NodeType.PARAGRAPH)
        only.detach()
        assert root.first_child is None
        assert root.last_child is None

    def test_detach_root_is_noop(self):
        """Test detaching a parentless node changes nothing."""
        root = add_node(None, NodeType.DOCUMENT)
        child = add_node(root, NodeType.PARAGRAPH)
        assert root.detach() is root
        assert root.first_child is child

    def test_detached_node_keeps_its_subtree(self):
        """Test that a detached node keeps its own children."""
        root = add_node(None, NodeType.DOCUMENT)
        para = add_node(root, NodeType.PARAGRAPH)
        word = add_node(para, NodeType.NORMAL_TEXT, text="kept")
        para.detach()
        assert para.first_child is word
        assert word.parent is para

    def test_children_iteration_survives_detach(self):
        """Test that detaching the yielded child does not stop iteration."""
        root, nodes = self._three_children()
        seen = []
        for child in root.children():
            seen.append(child)
            child.detach()
        assert seen == nodes
        assert root.first_child is None


@pytest.mark.unit
class TestFreeTree:
    """Tests for free_tree."""

    def test_free_document(self):
        """Test freeing a document clears every node."""
        root = add_node(None, NodeType.DOCUMENT)
        para = add_node(root, NodeType.PARAGRAPH)
        word = add_node(para, NodeType.NORMAL_TEXT, text="x", url="y")
        free_tree(root)
        for node in (root, para, word):
            assert node.parent is None
            assert node.first_child is None
            assert node.next_sibling is None
        assert word.text is None
        assert word.url is None

    def test_free_subtree_detaches_it(self):
        """Test freeing an attached node removes it from its parent."""
        root = add_node(None, NodeType.DOCUMENT)
        keep = add_node(root, NodeType.PARAGRAPH)
        drop = add_node(root, NodeType.PARAGRAPH)
        add_node(drop, NodeType.NORMAL_TEXT, text="gone")
        free_tree(drop)
        assert list(root.children()) == [keep]
        assert keep.next_sibling is None

    def test_free_single_node(self):
        """Test freeing a lone node."""
        node = Node(NodeType.NORMAL_TEXT, text="x")
        free_tree(node)
        assert node.text is None

    def test_free_twice_is_harmless(self):
        """Test that freeing an already freed tree does nothing."""
        root = add_node(None, NodeType.DOCUMENT)
        add_node(root, NodeType.PARAGRAPH)
        free_tree(root)
        free_tree(root)
        assert root.first_child is None

    def test_free_very_deep_tree(self):
        """Test that deep nesting does not hit the recursion limit."""
        root = add_node(None, NodeType.DOCUMENT)
        node = root
        nodes = []
        for _ in range(100_000):
            node = add_node(node, NodeType.BLOCK_QUOTE)
            nodes.append(node)
        free_tree(root)
        assert all(n.parent is None and n.first_child is None for n in nodes[::1000])

    def test_free_very_wide_tree(self):
        """Test that many siblings are all released."""
        root = add_node(None, NodeType.DOCUMENT)
        children = [add_node(root, NodeType.PARAGRAPH) for _ in range(50_000)]
        free_tree(root)
        assert all(child.parent is None and child.next_sibling is None for child in children)
