#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/ast/nodes.py
"""Node and tree structures for loaded Markdown documents.

Every element of a document, block or inline, is a :class:`Node` tagged
with a :class:`NodeType`. Nodes form a doubly linked tree: a parent owns its
child chain through ``first_child``/``last_child`` and each child points back
to its parent and to its neighbours through ``prev_sibling``/``next_sibling``.

Node Types
----------
Block nodes structure the document:
    - DOCUMENT, METADATA, BLOCK_QUOTE
    - ORDERED_LIST, UNORDERED_LIST, LIST_ITEM
    - TABLE, TABLE_HEADER, TABLE_BODY, TABLE_ROW and the cell variants
    - HEADING_1 .. HEADING_6, PARAGRAPH, CODE_BLOCK, THEMATIC_BREAK

Inline nodes carry text:
    - NORMAL_TEXT, EMPHASIZED_TEXT, STRONG_TEXT, STRUCK_TEXT
    - LINKED_TEXT, CODE_TEXT, IMAGE, HARD_BREAK
    - METADATA_TEXT (one ``key: value`` entry of the metadata block)

Block types come before inline types in member order, so consumers comparing
positions keep working, but block-ness is an explicit flag on each member.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional


class NodeType(Enum):
    """Type tag for document nodes.

    Each member carries a lowercase ``label`` (used for visitor dispatch and
    serialization) and an ``is_block`` capability flag.
    """

    DOCUMENT = ("document", True)
    METADATA = ("metadata", True)
    BLOCK_QUOTE = ("block_quote", True)
    ORDERED_LIST = ("ordered_list", True)
    UNORDERED_LIST = ("unordered_list", True)
    LIST_ITEM = ("list_item", True)
    TABLE = ("table", True)
    TABLE_HEADER = ("table_header", True)
    TABLE_BODY = ("table_body", True)
    TABLE_ROW = ("table_row", True)
    HEADING_1 = ("heading_1", True)
    HEADING_2 = ("heading_2", True)
    HEADING_3 = ("heading_3", True)
    HEADING_4 = ("heading_4", True)
    HEADING_5 = ("heading_5", True)
    HEADING_6 = ("heading_6", True)
    PARAGRAPH = ("paragraph", True)
    CODE_BLOCK = ("code_block", True)
    THEMATIC_BREAK = ("thematic_break", True)
    TABLE_HEADER_CELL = ("table_header_cell", True)
    TABLE_BODY_CELL_LEFT = ("table_body_cell_left", True)
    TABLE_BODY_CELL_CENTER = ("table_body_cell_center", True)
    TABLE_BODY_CELL_RIGHT = ("table_body_cell_right", True)
    NORMAL_TEXT = ("normal_text", False)
    EMPHASIZED_TEXT = ("emphasized_text", False)
    STRONG_TEXT = ("strong_text", False)
    STRUCK_TEXT = ("struck_text", False)
    LINKED_TEXT = ("linked_text", False)
    CODE_TEXT = ("code_text", False)
    IMAGE = ("image", False)
    HARD_BREAK = ("hard_break", False)
    METADATA_TEXT = ("metadata_text", False)

    def __init__(self, label: str, is_block: bool) -> None:
        self.label = label
        self.is_block = is_block

    @classmethod
    def heading(cls, level: int) -> NodeType:
        """Return the heading type for ``level``.

        Raises
        ------
        ValueError
            If level is not between 1 and 6

        """
        if not 1 <= level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {level}")
        return _HEADINGS[level - 1]

    @classmethod
    def from_label(cls, label: str) -> NodeType:
        """Look up a member by its label."""
        try:
            return _BY_LABEL[label]
        except KeyError:
            raise ValueError(f"Unknown node type label: {label!r}") from None

    @property
    def heading_level(self) -> int:
        """Heading level 1-6, or 0 for non-heading types."""
        try:
            return _HEADINGS.index(self) + 1
        except ValueError:
            return 0

    @property
    def is_heading(self) -> bool:
        return self in _HEADINGS

    @property
    def is_list(self) -> bool:
        return self in (NodeType.ORDERED_LIST, NodeType.UNORDERED_LIST)

    @property
    def is_table_cell(self) -> bool:
        return self in (
            NodeType.TABLE_HEADER_CELL,
            NodeType.TABLE_BODY_CELL_LEFT,
            NodeType.TABLE_BODY_CELL_CENTER,
            NodeType.TABLE_BODY_CELL_RIGHT,
        )


_HEADINGS = (
    NodeType.HEADING_1,
    NodeType.HEADING_2,
    NodeType.HEADING_3,
    NodeType.HEADING_4,
    NodeType.HEADING_5,
    NodeType.HEADING_6,
)
_BY_LABEL = {member.label: member for member in NodeType}


@dataclass
class SourceLocation:
    """Source location information for nodes.

    Parameters
    ----------
    line : int
        1-based number of the source line that created the node
    column : int or None, default = None
        1-based column in the source line, when known

    """

    line: int
    column: Optional[int] = None


@dataclass(eq=False)
class Node:
    """A single node of a document tree.

    Nodes compare by identity. The link fields are excluded from ``repr`` so
    printing a node never walks the tree.

    Parameters
    ----------
    type : NodeType
        The node's type tag
    text : str or None, default = None
        Text content (inline nodes, metadata entries, code lines)
    url : str or None, default = None
        Link or image target, or the language hint of a code block
    whitespace : bool, default = False
        Whether whitespace preceded this node in the source line
    ref_name : str or None, default = None
        Name of the reference a link or image was created from
    source_location : SourceLocation or None, default = None
        Where the node came from

    """

    type: NodeType
    text: Optional[str] = None
    url: Optional[str] = None
    whitespace: bool = False
    ref_name: Optional[str] = None
    source_location: Optional[SourceLocation] = None
    parent: Optional[Node] = field(default=None, repr=False)
    first_child: Optional[Node] = field(default=None, repr=False)
    last_child: Optional[Node] = field(default=None, repr=False)
    prev_sibling: Optional[Node] = field(default=None, repr=False)
    next_sibling: Optional[Node] = field(default=None, repr=False)

    @property
    def is_block(self) -> bool:
        """Whether this node is a block (structural) node."""
        return self.type.is_block

    def children(self) -> Iterator[Node]:
        """Iterate over the direct children in document order."""
        child = self.first_child
        while child is not None:
            # Read the link first so callers may detach the yielded child.
            following = child.next_sibling
            yield child
            child = following

    def append_child(self, child: Node) -> Node:
        """Append ``child`` to the end of this node's child list.

        Parameters
        ----------
        child : Node
            A parentless node

        Returns
        -------
        Node
            The appended child

        Raises
        ------
        ValueError
            If the child is already attached somewhere

        """
        if child.parent is not None:
            raise ValueError("Node is already attached to a parent; detach it first")

        child.parent = self
        if self.last_child is not None:
            self.last_child.next_sibling = child
            child.prev_sibling = self.last_child
            self.last_child = child
        else:
            self.first_child = self.last_child = child
        return child

    def detach(self) -> Node:
        """Remove this node from its parent's child list without freeing it."""
        parent = self.parent
        if parent is not None:
            if self.prev_sibling is not None:
                self.prev_sibling.next_sibling = self.next_sibling
            else:
                parent.first_child = self.next_sibling

            if self.next_sibling is not None:
                self.next_sibling.prev_sibling = self.prev_sibling
            else:
                parent.last_child = self.prev_sibling

            self.parent = None
            self.prev_sibling = None
            self.next_sibling = None
        return self

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with a ``visit`` method, typically a NodeVisitor

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        return visitor.visit(self)


def add_node(
    parent: Optional[Node],
    node_type: NodeType,
    whitespace: bool = False,
    text: Optional[str] = None,
    url: Optional[str] = None,
    source_location: Optional[SourceLocation] = None,
) -> Node:
    """Create a node and append it to ``parent``.

    Parameters
    ----------
    parent : Node or None
        Parent to append to; None creates a root
    node_type : NodeType
        Type of the new node
    whitespace : bool, default = False
        Whether whitespace preceded the node
    text : str or None, default = None
        Text content
    url : str or None, default = None
        URL content
    source_location : SourceLocation or None, default = None
        Where the node came from

    Returns
    -------
    Node
        The new node

    """
    node = Node(type=node_type, text=text, url=url, whitespace=whitespace, source_location=source_location)
    if parent is not None:
        parent.append_child(node)
    return node


def detach(node: Node) -> Node:
    """Remove ``node`` from its parent's child list without freeing it."""
    return node.detach()


def free_tree(node: Node) -> None:
    """Free ``node`` and every descendant.

    The node is detached first, then the subtree is released with an
    iterative post-order walk: a node's children are always released before
    the node itself, and no recursion is used, so arbitrarily deep or wide
    trees are safe. Released nodes lose their text, URL and every link.

    Parameters
    ----------
    node : Node
        Root of the subtree to free. May be a document root or any detached
        or attached node.

    """
    node.detach()

    current = node.first_child
    while current is not None:
        if current.first_child is not None:
            # Descend; the parent is released once its last child is gone.
            following = current.first_child
            current.first_child = None
            current = following
            continue

        following = current.next_sibling
        if following is None:
            following = current.parent
            if following is node:
                following = None

        _release(current)
        current = following

    _release(node)


def _release(node: Node) -> None:
    node.text = None
    node.url = None
    node.ref_name = None
    node.parent = None
    node.first_child = None
    node.last_child = None
    node.prev_sibling = None
    node.next_sibling = None


__all__ = [
    "Node",
    "NodeType",
    "SourceLocation",
    "add_node",
    "detach",
    "free_tree",
]
