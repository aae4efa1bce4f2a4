#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/ast/visitors.py
"""Visitor pattern implementation for document tree traversal.

Renderers and other consumers subclass :class:`NodeVisitor` and implement
``visit_<label>`` methods, where ``<label>`` is the node type's label
(``visit_paragraph``, ``visit_linked_text``, ...). Headings and table cells
additionally fall back to ``visit_heading`` and ``visit_table_cell`` so a
visitor does not need one method per level or alignment.

"""

from __future__ import annotations

from typing import Any, Callable, Optional

from minimd.ast.nodes import Node


class NodeVisitor:
    """Base class for tree visitors.

    Examples
    --------
    Count the links of a document:

        >>> class LinkCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_linked_text(self, node):
        ...         self.count += 1
        ...
        >>> counter = LinkCounter()
        >>> document.accept(counter)
        >>> print(counter.count)

    """

    def visit(self, node: Node) -> Any:
        """Dispatch ``node`` to the most specific visit method available."""
        return self._find_method(node)(node)

    def _find_method(self, node: Node) -> Callable[[Node], Any]:
        method: Optional[Callable[[Node], Any]] = getattr(self, f"visit_{node.type.label}", None)
        if method is None and node.type.is_heading:
            method = getattr(self, "visit_heading", None)
        if method is None and node.type.is_table_cell:
            method = getattr(self, "visit_table_cell", None)
        return method if method is not None else self.generic_visit

    def generic_visit(self, node: Node) -> Any:
        """Visit every child of ``node``; used when no specific method exists."""
        for child in node.children():
            self.visit(child)
        return None


class TreeFormatter(NodeVisitor):
    """Format a tree as indented text, one node per line.

    Each line shows the node's type label followed by its whitespace flag,
    text and URL when present, for example::

        document
          heading_1
            normal_text 'Title'

    Parameters
    ----------
    indent : str, default = "  "
        Indentation added per tree level

    """

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent
        self.lines: list[str] = []
        self._depth = 0

    def format(self, node: Node) -> str:
        """Return the indented dump of ``node``'s subtree."""
        self.lines = []
        self._depth = 0
        self.visit(node)
        return "\n".join(self.lines)

    def generic_visit(self, node: Node) -> None:
        self.lines.append(f"{self.indent * self._depth}{describe_node(node)}")
        self._depth += 1
        try:
            super().generic_visit(node)
        finally:
            self._depth -= 1


def describe_node(node: Node) -> str:
    """Return a one-line description of a node (without its children)."""
    parts = [node.type.label]
    if node.whitespace:
        parts.append("+ws")
    if node.text is not None:
        parts.append(repr(node.text))
    if node.url is not None:
        parts.append(f"<{node.url}>")
    elif node.ref_name is not None:
        parts.append(f"[{node.ref_name}]")
    return " ".join(parts)


__all__ = [
    "NodeVisitor",
    "TreeFormatter",
    "describe_node",
]
