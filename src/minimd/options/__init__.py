#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the minimd parsers.

Options are frozen dataclasses; use ``create_updated()`` to derive a
modified copy.
"""

from __future__ import annotations

from minimd.options.base import BaseParserOptions, CloneFrozenMixin
from minimd.options.markdown import MarkdownParserOptions

__all__ = [
    "BaseParserOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
]
