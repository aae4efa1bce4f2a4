"""Property-based tests for the Markdown loader.

This test module uses Hypothesis to feed generated Markdown to the loader
and checks properties that must hold for every input.

Test Coverage:
- Property: Loading never raises on arbitrary text
- Property: Every loaded tree has consistent parent/child/sibling links
- Property: Two independent loads of the same text are identical
- Property: Every row of a table has the same number of cells
- free_tree() on a wide loaded document
"""

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from utils import assert_tree_consistent, tree_shape

from minimd import loads
from minimd.ast.nodes import NodeType, free_tree
from minimd.ast.utils import walk

# Characters that drive the block and inline rules, plus ordinary text
MARKDOWN_ALPHABET = st.sampled_from(list("abc xyz019#>-+*_~`[]()<>!|:.\\=\"\t\n\r"))

markdown_text = st.text(alphabet=MARKDOWN_ALPHABET, max_size=400)

cell_text = st.text(alphabet="abcdefgh", min_size=1, max_size=6)
table_row = st.lists(cell_text, min_size=1, max_size=8)


def _row_line(cells):
    return "| " + " | ".join(cells) + " |"


@pytest.mark.unit
@pytest.mark.fuzzing
class TestLoaderProperties:
    """Property-based tests for loads()."""

    @given(st.text(max_size=300))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_arbitrary_unicode_never_raises(self, text):
        """Property: Any string loads into a consistent tree."""
        doc = loads(text)
        assert doc.type is NodeType.DOCUMENT
        assert_tree_consistent(doc)

    @given(markdown_text)
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_markdown_soup_consistent(self, text):
        """Property: Markup-heavy input loads into a consistent tree."""
        doc = loads(text)
        assert_tree_consistent(doc)
        for node in walk(doc):
            if node.type in (NodeType.NORMAL_TEXT, NodeType.EMPHASIZED_TEXT, NodeType.STRONG_TEXT):
                assert node.text

    @given(markdown_text)
    def test_loads_are_deterministic(self, text):
        """Property: Independent loads of the same input are structurally identical."""
        assert tree_shape(loads(text)) == tree_shape(loads(text))

    @given(header=table_row, body=st.lists(table_row, max_size=6))
    def test_table_rows_rectangular(self, header, body):
        """Property: Every row of one table has the same cell count."""
        lines = [_row_line(header), _row_line(["---"] * len(header))]
        lines.extend(_row_line(row) for row in body)
        doc = loads("\n".join(lines) + "\n")

        table = doc.first_child
        assert table.type is NodeType.TABLE
        rows = [row for section in table.children() for row in section.children()]
        assert len(rows) == 1 + len(body)

        expected = max(len(header), len(body[0])) if body else len(header)
        assert {len(list(row.children())) for row in rows} == {expected}

    @given(st.integers(min_value=1, max_value=200))
    def test_forward_references_bound(self, uses):
        """Property: A late definition binds every earlier use."""
        doc = loads("[ref] " * uses + "\n\n[ref]: http://example.com\n")
        links = [node for node in walk(doc) if node.type is NodeType.LINKED_TEXT]
        assert len(links) == uses
        assert all(link.url == "http://example.com" for link in links)


@pytest.mark.unit
class TestFreeTreeLimits:
    """free_tree() on loaded documents."""

    def test_wide_document(self):
        """Test freeing a loaded document with many siblings."""
        doc = loads("- item\n" * 20_000)
        items = list(doc.first_child.children())
        assert len(items) == 20_000
        free_tree(doc)
        assert doc.first_child is None
        assert all(item.parent is None and item.text is None for item in items)
