#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/ast/serialization.py
"""JSON serialization and deserialization for document trees.

Trees are converted to nested dictionaries of the form::

    {"node_type": "paragraph", "children": [
        {"node_type": "normal_text", "text": "Hello", "whitespace": false}
    ]}

Keys with empty values (no text, no URL, no children, no whitespace) are
omitted. Both directions are iterative, so very deep trees serialize without
hitting the recursion limit.

Examples
--------
Serialize a loaded document:

    >>> from minimd import loads
    >>> from minimd.ast.serialization import node_to_json
    >>> print(node_to_json(loads("# Title\\n")))
    {"schema_version": 1, "node_type": "document", "children": [...]}

"""

from __future__ import annotations

import json
from typing import Any

from minimd.ast.nodes import Node, NodeType, SourceLocation, add_node

SCHEMA_VERSION = 1


def _node_fields(node: Node) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": node.type.label}
    if node.whitespace:
        result["whitespace"] = True
    if node.text is not None:
        result["text"] = node.text
    if node.url is not None:
        result["url"] = node.url
    if node.ref_name is not None:
        result["ref_name"] = node.ref_name
    if node.source_location is not None:
        result["source_location"] = {
            "line": node.source_location.line,
            "column": node.source_location.column,
        }
    return result


def node_to_dict(node: Node, include_source: bool = False) -> dict[str, Any]:
    """Convert a node and its subtree to a dictionary.

    Parameters
    ----------
    node : Node
        Root of the subtree to convert
    include_source : bool, default False
        Whether to include source locations

    Returns
    -------
    dict
        Dictionary representation of the subtree

    """
    root = _node_fields(node)
    stack: list[tuple[Node, dict[str, Any]]] = [(node, root)]
    while stack:
        current, data = stack.pop()
        if not include_source:
            data.pop("source_location", None)
        if current.first_child is None:
            continue
        children: list[dict[str, Any]] = []
        data["children"] = children
        for child in current.children():
            child_data = _node_fields(child)
            children.append(child_data)
            stack.append((child, child_data))
    return root


def dict_to_node(data: dict[str, Any]) -> Node:
    """Rebuild a tree from its dictionary representation.

    Parameters
    ----------
    data : dict
        Dictionary produced by :func:`node_to_dict`

    Returns
    -------
    Node
        Root of the rebuilt tree

    Raises
    ------
    ValueError
        If a dictionary has no ``node_type`` or an unknown one

    """
    root = _build(None, data)
    stack: list[tuple[Node, dict[str, Any]]] = [(root, data)]
    while stack:
        parent, parent_data = stack.pop()
        for child_data in parent_data.get("children", ()):
            stack.append((_build(parent, child_data), child_data))
    return root


def _build(parent: Node | None, data: dict[str, Any]) -> Node:
    label = data.get("node_type")
    if not label:
        raise ValueError("Dictionary must contain 'node_type' field")

    location = data.get("source_location")
    node = add_node(
        parent,
        NodeType.from_label(label),
        whitespace=bool(data.get("whitespace", False)),
        text=data.get("text"),
        url=data.get("url"),
        source_location=SourceLocation(location["line"], location.get("column")) if location else None,
    )
    node.ref_name = data.get("ref_name")
    return node


def node_to_json(node: Node, indent: int | None = None, include_source: bool = False) -> str:
    """Serialize a tree to a JSON string with a schema version.

    Parameters
    ----------
    node : Node
        Root of the subtree to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)
    include_source : bool, default False
        Whether to include source locations

    Returns
    -------
    str
        JSON string representation

    """
    versioned = {"schema_version": SCHEMA_VERSION, **node_to_dict(node, include_source=include_source)}
    return json.dumps(versioned, indent=indent, ensure_ascii=False)


def json_to_node(json_str: str) -> Node:
    """Deserialize a JSON string produced by :func:`node_to_json`.

    Raises
    ------
    ValueError
        If the JSON is invalid or uses an unsupported schema version

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("JSON document must be an object")

    version = data.pop("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema version: {version}")

    return dict_to_node(data)


__all__ = [
    "SCHEMA_VERSION",
    "dict_to_node",
    "json_to_node",
    "node_to_dict",
    "node_to_json",
]
