#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/options/base.py
"""Base classes for parser options.

This module defines the foundation classes for the configuration objects
accepted by the minimd parsers.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from minimd.constants import (
    DEFAULT_LONG_LINE_MODE,
    DEFAULT_MAX_LINE_LENGTH,
    LongLineMode,
)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options.

    These settings control how raw input is turned into lines before any
    Markdown classification happens.

    Parameters
    ----------
    encoding : str or None, default None
        Encoding of binary input. When None, UTF-8 is used if the input
        decodes as UTF-8, otherwise the encoding is detected with chardet,
        falling back to latin-1 when detection is inconclusive.
    max_line_length : int, default 65536
        Maximum number of characters in a single source line
    long_line_mode : {"truncate", "error"}, default "truncate"
        What to do with lines longer than ``max_line_length``: drop the
        excess (logging a warning) or raise LineTooLongError

    """

    encoding: str | None = field(
        default=None,
        metadata={"help": "Encoding of binary input (detected when omitted)", "importance": "advanced"},
    )
    max_line_length: int = field(
        default=DEFAULT_MAX_LINE_LENGTH,
        metadata={
            "help": "Maximum number of characters in a single source line",
            "type": int,
            "metavar": "N",
            "importance": "advanced",
        },
    )
    long_line_mode: LongLineMode = field(
        default=DEFAULT_LONG_LINE_MODE,
        metadata={
            "help": "How to handle over-long lines: 'truncate' (drop the excess) or 'error'",
            "choices": ["truncate", "error"],
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and choices.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.max_line_length <= 0:
            raise ValueError(f"max_line_length must be positive, got {self.max_line_length}")
        if self.long_line_mode not in ("truncate", "error"):
            raise ValueError(f"long_line_mode must be 'truncate' or 'error', got {self.long_line_mode!r}")
