#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/parsers/base.py
"""Base classes for document parsers.

This module defines the abstract base class that minimd parsers inherit from.
A parser turns some input (a path, a stream, bytes or a string) into a
document tree rooted at a DOCUMENT node.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, Union

from minimd.ast.nodes import Node
from minimd.exceptions import InvalidOptionsError
from minimd.options.base import BaseParserOptions

logger = logging.getLogger(__name__)

ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]


class BaseParser(ABC):
    """Abstract base class for all document parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    Notes
    -----
    The parse() method should handle all supported input types:
    - str or Path: File path to read
    - IO[bytes] or IO[str]: File-like object
    - bytes: Raw document bytes

    Parsers keep only their (immutable) options between calls, so a single
    parser instance may be shared by several threads.

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration.

        Parameters
        ----------
        options : BaseParserOptions or None, default = None
            Format-specific parsing options. If None, default options will be used.

        """
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                parser_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Node:
        """Parse the input document into a tree.

        Parameters
        ----------
        input_data : str, Path, IO[bytes], IO[str], or bytes
            The input document to parse

        Returns
        -------
        Node
            DOCUMENT root of the loaded tree

        Raises
        ------
        FileNotFoundError
            If a named file does not exist
        FileAccessError
            If the input cannot be read
        ParsingError
            If the input cannot be parsed

        """
        raise NotImplementedError

    @abstractmethod
    def extract_metadata(self, document: Node) -> dict[str, Any]:
        """Extract metadata from a loaded document.

        Parameters
        ----------
        document : Node
            DOCUMENT root returned by :meth:`parse`

        Returns
        -------
        dict
            Metadata mapping; empty when the document has none

        """
        raise NotImplementedError


__all__ = ["BaseParser", "ParserInput"]
