#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/parsers/test_link_references.py
"""Unit tests for the link parser and reference resolution.

Tests cover:
- parse_link() for inline, reference, shortcut and definition forms
- Quoted runs inside brackets and unterminated constructs
- ReferenceTable binding, pending lists and end-of-load settlement
- Forward references through the loader

"""

import pytest

from minimd.ast.nodes import NodeType, add_node
from minimd.parsers.links import LinkMatch, parse_link
from minimd.parsers.references import ReferenceTable, normalize_reference_name


@pytest.mark.unit
class TestParseLink:
    """Tests for parse_link()."""

    def test_inline(self):
        """Test an inline link."""
        assert parse_link("[a](b)", 0) == LinkMatch(text="a", url="b", ref_name=None, end=6)

    def test_inline_title_discarded(self):
        """Test that only the first word inside the parentheses is the URL."""
        match = parse_link('[a](http://x "a) title")!', 0)
        assert match is not None
        assert match.url == "http://x"
        assert match.end == 24

    def test_quoted_bracket_in_text(self):
        """Test that a ']' inside quotes does not close the text."""
        match = parse_link('[a "]" b](u)', 0)
        assert match is not None
        assert match.text == 'a "]" b'
        assert match.url == "u"
        assert match.end == 12

    def test_offset_start(self):
        """Test parsing from a position other than the line start."""
        match = parse_link("see [x](y) too", 4)
        assert match is not None
        assert match.text == "x"
        assert match.end == 10

    def test_full_reference(self):
        """Test '[text][name]'."""
        match = parse_link("[click][ Home ]", 0)
        assert match == LinkMatch(text="click", url=None, ref_name="Home", end=15)

    def test_empty_reference_uses_text(self):
        """Test that '[text][]' uses the text as the name."""
        match = parse_link("[logo][]", 0)
        assert match is not None
        assert match.ref_name == "logo"
        assert match.end == 8

    def test_shortcut(self):
        """Test that a bare '[name]' is a shortcut reference."""
        assert parse_link("[name] rest", 0) == LinkMatch(text="name", url=None, ref_name="name", end=6)

    def test_definition(self):
        """Test '[name]: url' when definitions are allowed."""
        match = parse_link('[name]: http://x "Title"', 0, allow_definition=True)
        assert match is not None
        assert match.is_definition
        assert match.url == "http://x"
        assert match.ref_name == "name"
        assert match.end == len('[name]: http://x "Title"')

    def test_definition_not_allowed(self):
        """Test that a colon after the bracket is ignored mid-line."""
        match = parse_link("[name]: http://x", 0)
        assert match is not None
        assert not match.is_definition
        assert match.end == 6

    def test_definition_without_url(self):
        """Test that '[name]:' with nothing after it is a shortcut."""
        match = parse_link("[name]:   ", 0, allow_definition=True)
        assert match is not None
        assert not match.is_definition
        assert match.ref_name == "name"

    @pytest.mark.parametrize("line", ["[a", "[a](b", "[a][b", '[a "b]', "[a](\"b)"])
    def test_unterminated(self, line):
        """Test that unterminated constructs return None."""
        assert parse_link(line, 0) is None


@pytest.mark.unit
class TestReferenceTable:
    """Tests for ReferenceTable."""

    def test_normalize(self):
        """Test case folding and whitespace collapsing of names."""
        assert normalize_reference_name("  Some \t Docs ") == "some docs"

    def test_pending_then_bound(self):
        """Test that a later URL patches every pending node."""
        table = ReferenceTable()
        first = add_node(None, NodeType.LINKED_TEXT, text="a")
        second = add_node(None, NodeType.IMAGE, text="b")
        table.register("Ref", node=first)
        table.register("ref", node=second)
        assert table.get("REF").pending == [first, second]

        entry = table.register("ref", url="http://x")
        assert first.url == second.url == "http://x"
        assert entry.pending == []

    def test_bound_immediately_when_known(self):
        """Test that a node registered after its definition is bound at once."""
        table = ReferenceTable()
        table.register("a", url="http://x")
        node = add_node(None, NodeType.LINKED_TEXT, text="a")
        entry = table.register("a", node=node)
        assert node.url == "http://x"
        assert entry.pending == []

    def test_url_and_node_together(self):
        """Test registering a URL and a node in one call."""
        table = ReferenceTable()
        waiting = add_node(None, NodeType.LINKED_TEXT)
        table.register("a", node=waiting)
        node = add_node(None, NodeType.LINKED_TEXT)
        table.register("a", url="u", node=node)
        assert waiting.url == node.url == "u"

    def test_first_url_wins(self):
        """Test that a second definition does not override the first."""
        table = ReferenceTable()
        table.register("a", url="first")
        table.register("a", url="second")
        assert table.get("a").url == "first"

    def test_membership(self):
        """Test len() and 'in'."""
        table = ReferenceTable()
        table.register("Docs", url="u")
        assert "docs" in table
        assert "other" not in table
        assert 42 not in table
        assert len(table) == 1
        assert table.get("other") is None

    def test_finish_unresolved(self):
        """Test that undefined references keep no URL by default."""
        table = ReferenceTable()
        node = add_node(None, NodeType.LINKED_TEXT)
        table.register("missing", node=node)
        table.register("defined", url="u")
        assert table.finish() == 1
        assert node.url is None
        assert len(table) == 0

    def test_finish_name_mode(self):
        """Test that 'name' mode uses the reference name as URL."""
        table = ReferenceTable()
        node = add_node(None, NodeType.LINKED_TEXT)
        table.register("Missing Page", node=node)
        assert table.finish("name") == 1
        assert node.url == "Missing Page"


@pytest.mark.unit
class TestReferencesInDocuments:
    """Tests for reference resolution through the loader."""

    def test_forward_reference(self, parse):
        """Test that a definition after the use binds the URL."""
        doc = parse("[ref]\n\n[ref]: http://example.com\n")
        assert [child.type for child in doc.children()] == [NodeType.PARAGRAPH]
        link = doc.first_child.first_child
        assert link.type is NodeType.LINKED_TEXT
        assert link.text == "ref"
        assert link.ref_name == "ref"
        assert link.url == "http://example.com"

    def test_all_uses_bound(self, parse):
        """Test that every use of a name gets the same URL."""
        doc = parse("[x] and [X]\n\n[x]: http://x\n")
        links = [child for child in doc.first_child.children() if child.type is NodeType.LINKED_TEXT]
        assert len(links) == 2
        assert all(link.url == "http://x" for link in links)

    def test_backward_reference(self, parse):
        """Test a definition before the use."""
        doc = parse("[a]: http://x\n\n[a]\n")
        assert doc.first_child.first_child.url == "http://x"

    def test_full_reference_case_insensitive(self, parse):
        """Test '[text][name]' against a differently cased definition."""
        doc = parse("[click here][home]\n\n[Home]: http://home\n")
        link = doc.first_child.first_child
        assert link.text == "click here"
        assert link.url == "http://home"

    def test_image_reference(self, parse):
        """Test an image resolved through a reference."""
        doc = parse("![logo][]\n\n[logo]: /logo.png\n")
        image = doc.first_child.first_child
        assert image.type is NodeType.IMAGE
        assert image.text == "logo"
        assert image.url == "/logo.png"

    def test_definition_line_leaves_no_node(self, parse):
        """Test that a document of only definitions is empty."""
        doc = parse('[a]: http://x\n[b]: http://y "T"\n')
        assert doc.first_child is None

    def test_first_definition_wins(self, parse):
        """Test duplicate definitions in a document."""
        doc = parse("[a]\n\n[a]: http://first\n[a]: http://second\n")
        assert doc.first_child.first_child.url == "http://first"

    def test_unresolved_default(self, parse):
        """Test that an undefined reference has no URL."""
        doc = parse("[nowhere]\n")
        link = doc.first_child.first_child
        assert link.url is None
        assert link.ref_name == "nowhere"

    def test_unresolved_name_mode(self, parse):
        """Test the compatibility mode for undefined references."""
        doc = parse("[nowhere]\n", unresolved_references="name")
        assert doc.first_child.first_child.url == "nowhere"

    def test_definition_mid_line_is_a_link(self, parse):
        """Test that '[a]: url' after other text is not a definition."""
        doc = parse("text [a]: http://x\n")
        types = [child.type for child in doc.first_child.children()]
        assert types == [NodeType.NORMAL_TEXT, NodeType.LINKED_TEXT, NodeType.NORMAL_TEXT, NodeType.NORMAL_TEXT]
        assert doc.first_child.first_child.next_sibling.url is None
