#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/__init__.py
"""minimd - load a small Markdown dialect into a document tree.

minimd reads headings, paragraphs, lists, block quotes, fenced and indented
code, pipe tables, metadata blocks and inline formatting (emphasis, strong,
strikethrough, code, links, images, autolinks and hard breaks) into a tree of
:class:`Node` objects for renderers to walk.

Examples
--------
Load a string and flatten its first heading:

    >>> import minimd
    >>> doc = minimd.loads("# Hello *world*\\n")
    >>> minimd.copy_all_text(doc.first_child)
    'Hello world'

Load a file with options:

    >>> from minimd.options import MarkdownParserOptions
    >>> doc = minimd.load("README.md", MarkdownParserOptions(parse_tables=False))

"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Optional, Union

from minimd.ast.nodes import Node, NodeType, SourceLocation, free_tree
from minimd.ast.utils import copy_all_text, get_metadata, metadata_to_dict, walk
from minimd.exceptions import MiniMdError
from minimd.options.markdown import MarkdownParserOptions
from minimd.parsers.markdown import MarkdownParser

__version__ = "1.0.0"


def load(path: Union[str, Path], options: Optional[MarkdownParserOptions] = None) -> Node:
    """Load the named Markdown file into a document tree.

    Parameters
    ----------
    path : str or Path
        File to read
    options : MarkdownParserOptions or None, default None
        Parser options

    Returns
    -------
    Node
        DOCUMENT root; release it with :func:`free_tree` when done

    Raises
    ------
    minimd.exceptions.FileNotFoundError
        If the file does not exist
    minimd.exceptions.FileAccessError
        If the file cannot be read

    """
    return MarkdownParser(options).load(path)


def load_file(stream: Union[IO[bytes], IO[str]], options: Optional[MarkdownParserOptions] = None) -> Node:
    """Load Markdown from an open binary or text stream."""
    return MarkdownParser(options).load_file(stream)


def loads(text: str, options: Optional[MarkdownParserOptions] = None) -> Node:
    """Load Markdown from a string."""
    return MarkdownParser(options).loads(text)


__all__ = [
    "MarkdownParser",
    "MarkdownParserOptions",
    "MiniMdError",
    "Node",
    "NodeType",
    "SourceLocation",
    "__version__",
    "copy_all_text",
    "free_tree",
    "get_metadata",
    "load",
    "load_file",
    "loads",
    "metadata_to_dict",
    "walk",
]
