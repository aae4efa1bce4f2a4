#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/parsers/__init__.py
"""Parsers package.

The Markdown loader lives in :mod:`minimd.parsers.markdown`; the remaining
modules are its building blocks (inline scanning, links, references and
tables).
"""

from minimd.parsers.base import BaseParser
from minimd.parsers.markdown import MarkdownParser, markdown_to_tree

__all__ = ["BaseParser", "MarkdownParser", "markdown_to_tree"]
