#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/ast/utils.py
"""Read-only helpers for working with loaded document trees.

Functions
---------
walk : Iterate over a subtree in document order
copy_all_text : Flatten the text under a node
get_metadata : Look up one metadata entry by key
metadata_to_dict : Read the whole metadata block as a dictionary

Examples
--------
Flatten a heading into an anchor label:

    >>> from minimd import loads
    >>> from minimd.ast.utils import copy_all_text
    >>> doc = loads("# Getting *started* fast\\n")
    >>> copy_all_text(doc.first_child)
    'Getting started fast'

"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

import yaml

from minimd.ast.nodes import Node, NodeType

logger = logging.getLogger(__name__)


def walk(node: Node) -> Iterator[Node]:
    """Iterate over ``node`` and all of its descendants in document order.

    The traversal is iterative (pre-order, parents before children), so deep
    trees never hit the interpreter's recursion limit.

    Parameters
    ----------
    node : Node
        Root of the subtree to walk

    Yields
    ------
    Node
        Each node of the subtree, starting with ``node`` itself

    """
    yield node
    current = node.first_child
    while current is not None:
        yield current

        if current.first_child is not None:
            current = current.first_child
            continue

        while current is not node and current.next_sibling is None:
            current = current.parent  # type: ignore[assignment]
        if current is node:
            break
        current = current.next_sibling


def copy_all_text(node: Node) -> str:
    """Concatenate the text of every descendant of ``node``.

    A single space is inserted before each text fragment whose node has the
    whitespace flag set, which reproduces the spacing between words of the
    source line. Renderers use this for flattened labels such as heading
    anchors.

    Parameters
    ----------
    node : Node
        Parent node whose descendants are flattened

    Returns
    -------
    str
        The flattened text; empty when no descendant has text

    """
    parts: list[str] = []
    for current in walk(node):
        if current is node or current.text is None:
            continue
        if current.whitespace:
            parts.append(" ")
        parts.append(current.text)
    return "".join(parts)


def _metadata_block(document: Optional[Node]) -> Optional[Node]:
    if document is None:
        return None
    first = document.first_child
    if first is None or first.type is not NodeType.METADATA:
        return None
    return first


def get_metadata(document: Optional[Node], key: str) -> Optional[str]:
    """Return the value of metadata entry ``key``.

    Only the first child of the document is consulted, and only when it is a
    metadata block. The entry must start with ``key:`` (case-sensitive); the
    value is the remainder with leading whitespace removed.

    Parameters
    ----------
    document : Node or None
        Document root
    key : str
        Metadata key, e.g. "title"

    Returns
    -------
    str or None
        The value, or None when there is no such entry

    """
    metadata = _metadata_block(document)
    if metadata is None:
        return None

    prefix = f"{key}:"
    for entry in metadata.children():
        if entry.text is not None and entry.text.startswith(prefix):
            return entry.text[len(prefix) :].lstrip()
    return None


def metadata_to_dict(document: Optional[Node]) -> dict[str, Any]:
    """Read the document's metadata block as a dictionary.

    The entries are parsed as a YAML mapping so values such as lists,
    numbers and dates get their natural types. When the block is not a valid
    YAML mapping, each ``key: value`` entry is split on its first colon
    instead and values stay strings.

    Parameters
    ----------
    document : Node or None
        Document root

    Returns
    -------
    dict
        Metadata mapping; empty when the document has no metadata block

    """
    metadata = _metadata_block(document)
    if metadata is None:
        return {}

    entries = [entry.text for entry in metadata.children() if entry.text]
    try:
        data = yaml.safe_load("\n".join(entries))
    except yaml.YAMLError as e:
        logger.debug(f"Metadata block is not valid YAML, splitting entries instead: {e}")
        data = None

    if isinstance(data, dict):
        return {str(key): value for key, value in data.items()}

    result: dict[str, Any] = {}
    for entry in entries:
        key, sep, value = entry.partition(":")
        if sep and key.strip():
            result[key.strip()] = value.strip()
    return result


__all__ = [
    "copy_all_text",
    "get_metadata",
    "metadata_to_dict",
    "walk",
]
