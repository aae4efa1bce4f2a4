#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the minimd library.

This module centralizes the limits, marker characters, and default
configuration values used by the parser layers.

Constants are organized by category:
1. Type Definitions - Literal types used by options
2. Input Limits - Line length and encoding detection
3. Block Markers - Characters recognized by the block state machine
4. Table Limits - Column bookkeeping for pipe tables
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

LongLineMode = Literal["truncate", "error"]
UnresolvedReferenceMode = Literal["unresolved", "name"]
OutputFormat = Literal["tree", "json"]

# =============================================================================
# Input Limits
# =============================================================================

# A single source line is bounded to 64KB
DEFAULT_MAX_LINE_LENGTH = 65536
DEFAULT_LONG_LINE_MODE: LongLineMode = "truncate"

DEFAULT_ENCODING_SAMPLE_SIZE = 8192
DEFAULT_CHARDET_CONFIDENCE_THRESHOLD = 0.7
# latin-1 maps every byte to a character, so no input is replaced
DEFAULT_FALLBACK_ENCODING = "latin-1"

# =============================================================================
# Block Markers
# =============================================================================

# Columns of leading whitespace that start an indented code block
CODE_INDENT_WIDTH = 4
TAB_WIDTH = 4

BULLET_MARKERS = frozenset("-+*")
THEMATIC_BREAK_CHARS = frozenset("-*_")
SETEXT_UNDERLINE_CHARS = {"=": 1, "-": 2}
MAX_HEADING_LEVEL = 6

METADATA_OPEN = "---"
METADATA_CLOSE = ("---", "...")

LIST_CONTINUATION_SENTINEL = "+"

# =============================================================================
# Table Limits
# =============================================================================

MAX_TABLE_COLUMNS = 256
TABLE_SEPARATOR_CHARS = frozenset(" \t\r\n:-|")

# =============================================================================
# Parser Defaults
# =============================================================================

DEFAULT_PARSE_METADATA = True
DEFAULT_PARSE_TABLES = True
DEFAULT_PARSE_STRIKETHROUGH = True
DEFAULT_UNRESOLVED_REFERENCES: UnresolvedReferenceMode = "unresolved"
