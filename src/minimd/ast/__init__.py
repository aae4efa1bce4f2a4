#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/ast/__init__.py
"""Document tree module.

The loader produces a tree of :class:`Node` objects, each tagged with a
:class:`NodeType`. Renderers consume the tree through node attributes, the
helpers in :mod:`minimd.ast.utils`, or a :class:`NodeVisitor` subclass.

The module consists of several components:

- nodes: the node structure, type tags, and tree building/teardown
- utils: read-only helpers (walking, text flattening, metadata lookup)
- visitors: visitor pattern base class and a tree formatter
- serialization: JSON serialization and deserialization of trees

Examples
--------
Basic usage:

    >>> from minimd import loads
    >>> from minimd.ast import NodeType, copy_all_text
    >>> doc = loads("# Title\\n\\nSome *text*.\\n")
    >>> heading = doc.first_child
    >>> heading.type is NodeType.HEADING_1
    True
    >>> copy_all_text(heading)
    'Title'

"""

from __future__ import annotations

from minimd.ast.nodes import Node, NodeType, SourceLocation, add_node, detach, free_tree
from minimd.ast.serialization import dict_to_node, json_to_node, node_to_dict, node_to_json
from minimd.ast.utils import copy_all_text, get_metadata, metadata_to_dict, walk
from minimd.ast.visitors import NodeVisitor, TreeFormatter, describe_node

__all__ = [
    "Node",
    "NodeType",
    "NodeVisitor",
    "SourceLocation",
    "TreeFormatter",
    "add_node",
    "copy_all_text",
    "describe_node",
    "detach",
    "dict_to_node",
    "free_tree",
    "get_metadata",
    "json_to_node",
    "metadata_to_dict",
    "node_to_dict",
    "node_to_json",
    "walk",
]
