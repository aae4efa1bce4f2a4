#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for Markdown parsing.

This module defines the options accepted by the Markdown loader.
"""
# src/minimd/options/markdown.py


from __future__ import annotations

from dataclasses import dataclass, field

from minimd.constants import (
    DEFAULT_PARSE_METADATA,
    DEFAULT_PARSE_STRIKETHROUGH,
    DEFAULT_PARSE_TABLES,
    DEFAULT_UNRESOLVED_REFERENCES,
    UnresolvedReferenceMode,
)
from minimd.options.base import BaseParserOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Configuration options for Markdown-to-tree loading.

    Parameters
    ----------
    parse_metadata : bool, default True
        Whether a leading ``---`` block is read as ``key: value`` metadata.
    parse_tables : bool, default True
        Whether pipe tables are recognized.
    parse_strikethrough : bool, default True
        Whether ``~~text~~`` produces struck text.
    unresolved_references : {"unresolved", "name"}, default "unresolved"
        What happens to links whose reference is never defined. With
        "unresolved" their URL stays None; with "name" the reference name is
        used as a literal URL, for compatibility with older output.

    """

    parse_metadata: bool = field(
        default=DEFAULT_PARSE_METADATA,
        metadata={"help": "Read a leading '---' block as metadata", "cli_name": "no-metadata", "importance": "core"},
    )
    parse_tables: bool = field(
        default=DEFAULT_PARSE_TABLES,
        metadata={"help": "Parse pipe table syntax", "cli_name": "no-tables", "importance": "core"},
    )
    parse_strikethrough: bool = field(
        default=DEFAULT_PARSE_STRIKETHROUGH,
        metadata={
            "help": "Parse strikethrough syntax (~~text~~)",
            "cli_name": "no-strikethrough",
            "importance": "core",
        },
    )
    unresolved_references: UnresolvedReferenceMode = field(
        default=DEFAULT_UNRESOLVED_REFERENCES,
        metadata={
            "help": "URL given to links whose reference is never defined: none, or the reference name",
            "choices": ["unresolved", "name"],
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate option choices.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        super().__post_init__()
        if self.unresolved_references not in ("unresolved", "name"):
            raise ValueError(
                f"unresolved_references must be 'unresolved' or 'name', got {self.unresolved_references!r}"
            )
