#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/parsers/markdown.py
"""Markdown to document tree loader.

This module reads Markdown one line at a time and builds a tree of
:class:`~minimd.ast.nodes.Node` objects. Each line is classified by a block
state machine (headings, lists, quotes, code, tables, paragraphs...) and the
text it contributes is handed to the inline scanner.

The state machine keeps two cursors while it reads:

- ``current``: the innermost open container (document, block quote, list,
  table, or indented code block) that new blocks are added to
- ``block``: the open leaf block (paragraph, heading, list item, fenced code
  block) that continuation lines are appended to, or None

All of this state belongs to one load. Parsers hold nothing but their
options, so a parser may be shared freely.

"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from typing import IO, Any, Optional, Union

from minimd.ast.nodes import Node, NodeType, SourceLocation, add_node
from minimd.ast.utils import metadata_to_dict, walk
from minimd.constants import (
    BULLET_MARKERS,
    CODE_INDENT_WIDTH,
    LIST_CONTINUATION_SENTINEL,
    MAX_HEADING_LEVEL,
    METADATA_CLOSE,
    METADATA_OPEN,
    SETEXT_UNDERLINE_CHARS,
    TAB_WIDTH,
    THEMATIC_BREAK_CHARS,
)
from minimd.exceptions import FileAccessError
from minimd.exceptions import FileNotFoundError as MiniMdFileNotFoundError
from minimd.options.markdown import MarkdownParserOptions
from minimd.parsers.base import BaseParser, ParserInput
from minimd.parsers.inline import InlineScanner
from minimd.parsers.references import ReferenceTable
from minimd.parsers.tables import TableBuilder, is_separator_row
from minimd.utils.encoding import open_text_stream
from minimd.utils.inputs import LineSource

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^(`{3,})([^`]*)$")
_ORDERED_MARKER_RE = re.compile(r"^\d+\.(?:\s|$)")


def _measure_indent(text: str) -> tuple[int, int]:
    """Return (indent width in columns, index of the first non-space character)."""
    width = 0
    for index, ch in enumerate(text):
        if ch == "\t":
            width += TAB_WIDTH - width % TAB_WIDTH
        elif ch.isspace():
            width += 1
        else:
            return width, index
    return width, len(text)


def _strip_columns(text: str, columns: int) -> str:
    """Remove ``columns`` columns of leading indentation from ``text``.

    A tab that straddles the cut is replaced by the spaces left over.
    """
    width = 0
    for index, ch in enumerate(text):
        if width >= columns:
            return text[index:]
        if ch == "\t":
            width += TAB_WIDTH - width % TAB_WIDTH
        elif ch.isspace():
            width += 1
        else:
            return text[index:]
        if width > columns:
            return " " * (width - columns) + text[index + 1 :]
    return ""


def _is_rule(text: str, marker: str) -> bool:
    """Whether ``text`` is three or more ``marker`` characters plus trailing marker/whitespace."""
    if not text.startswith(marker * 3):
        return False
    return all(ch == marker or ch.isspace() for ch in text[3:])


def _is_thematic_break(text: str) -> bool:
    return bool(text) and text[0] in THEMATIC_BREAK_CHARS and _is_rule(text, text[0])


def _is_setext_underline(text: str) -> bool:
    """Whether ``text`` is a run of ``=`` or ``-`` followed only by whitespace."""
    if not text or text[0] not in SETEXT_UNDERLINE_CHARS or not text.startswith(text[0] * 3):
        return False
    return not text.lstrip(text[0]).strip()


def _fence_language(info: str) -> Optional[str]:
    words = info.split(maxsplit=1)
    return words[0] if words else None


def _is_closing_fence(text: str) -> bool:
    return text.startswith("```") and not text.strip("`").strip()


def _atx_heading(text: str) -> Optional[tuple[int, str]]:
    """Return (level, content) for an ATX heading line, else None."""
    level = len(text) - len(text.lstrip("#"))
    if level == 0 or level > MAX_HEADING_LEVEL:
        return None
    if level < len(text) and not text[level].isspace():
        return None

    content = text[level:].strip()
    body = content.rstrip("#")
    # "# C#" keeps its '#', "# Title ##" does not
    if not body or body[-1].isspace():
        content = body.rstrip()
    return level, content


class _LoadSession:
    """State of a single document load."""

    def __init__(self, source: LineSource, options: MarkdownParserOptions) -> None:
        self.source = source
        self.options = options
        self.references = ReferenceTable()
        self.scanner = InlineScanner(self.references, options)
        self.root = add_node(None, NodeType.DOCUMENT)
        self.current: Node = self.root
        self.block: Optional[Node] = None
        self.blank_code = False
        self.table: Optional[TableBuilder] = None

    def run(self) -> Node:
        for line in self.source:
            self._process_line(line)

        unresolved = self.references.finish(self.options.unresolved_references)
        if logger.isEnabledFor(logging.DEBUG):
            count = sum(1 for _ in walk(self.root))
            logger.debug(
                f"Loaded {self.source.line_number} lines into {count} nodes "
                f"({unresolved} unresolved reference(s))"
            )
        return self.root

    def _nearest_quote(self) -> Optional[Node]:
        node: Optional[Node] = self.current
        while node is not None and node is not self.root:
            if node.type is NodeType.BLOCK_QUOTE:
                return node
            node = node.parent
        return None

    def _leave_table(self) -> None:
        logger.debug(f"Table ended after {self.table.rows if self.table else 0} rows")
        self.current = self.current.parent or self.root
        self.block = None
        self.table = None

    def _process_line(self, line: str) -> None:
        location = SourceLocation(self.source.line_number)
        text = line.rstrip("\r\n")
        indent, offset = _measure_indent(text)
        rest = text[offset:]

        if self._indented_code(text, rest, indent, location):
            return
        if rest and self.current.type is NodeType.CODE_BLOCK:
            self.current = self.current.parent or self.root

        if self._fenced_code(text, rest, indent, location):
            return

        if (
            self.options.parse_metadata
            and self.root.first_child is None
            and text.strip() == METADATA_OPEN
        ):
            self._read_metadata(location)
            return

        if self.block is None and _is_thematic_break(rest):
            if self.current.type is NodeType.TABLE:
                self._leave_table()
            # An unquoted break always ends open lists and quotes
            self.current = self.root
            add_node(self.root, NodeType.THEMATIC_BREAK, source_location=location)
            return

        quoted = rest.startswith(">")
        if quoted:
            if self._nearest_quote() is None:
                self.current = add_node(self.root, NodeType.BLOCK_QUOTE, source_location=location)
                self.block = None
            rest = rest[1:].lstrip()
        elif self.current.type is NodeType.BLOCK_QUOTE:
            self.current = self.current.parent or self.root
        elif (
            self.current.type is NodeType.TABLE
            and self.current.parent is not None
            and self.current.parent.type is NodeType.BLOCK_QUOTE
        ):
            self.current = self.current.parent.parent or self.root
            self.table = None

        if not rest:
            self.blank_code = self.current.type is NodeType.CODE_BLOCK
            self.block = None
            if self.current.type is NodeType.TABLE:
                self._leave_table()
            return

        if self.options.parse_tables and "|" in rest:
            if self.current.type is NodeType.TABLE or is_separator_row(self.source.peek()):
                self._table_row(rest, location)
                return
        if self.current.type is NodeType.TABLE:
            self._leave_table()

        if rest == LIST_CONTINUATION_SENTINEL:
            self._continue_list_item(location)
            return

        node_type: Optional[NodeType] = None
        block = self.block

        if block is not None and block.type is NodeType.PARAGRAPH and rest[0] in SETEXT_UNDERLINE_CHARS:
            if _is_setext_underline(rest):
                block.type = NodeType.heading(SETEXT_UNDERLINE_CHARS[rest[0]])
                self.block = None
                return
            if rest.startswith(rest[0] * 3):
                node_type = NodeType.PARAGRAPH

        if node_type is None:
            list_item = self._list_item(rest, location)
            if list_item is not None:
                node_type, rest = list_item

        if node_type is None and rest.startswith("#"):
            heading = _atx_heading(rest)
            if heading is not None:
                level, rest = heading
                node_type = NodeType.heading(level)
                self.block = None
                self.current = self._nearest_quote() or self.root

        if node_type is None:
            if self.block is None:
                node_type = NodeType.PARAGRAPH
                if offset == 0 and not quoted:
                    self.current = self.root
            else:
                node_type = self.block.type

        self._append_text(node_type, rest, location)

    def _indented_code(self, text: str, rest: str, indent: int, location: SourceLocation) -> bool:
        if (
            indent < CODE_INDENT_WIDTH
            or not rest
            or self.block is not None
            or (self.current is not self.root and self.current.type is not NodeType.CODE_BLOCK)
        ):
            return False

        if self.current is self.root:
            self.current = add_node(self.root, NodeType.CODE_BLOCK, source_location=location)
        if self.blank_code:
            add_node(self.current, NodeType.CODE_TEXT, text="\n", source_location=location)
        add_node(
            self.current,
            NodeType.CODE_TEXT,
            text=_strip_columns(text, CODE_INDENT_WIDTH) + "\n",
            source_location=location,
        )
        self.blank_code = False
        return True

    def _fenced_code(self, text: str, rest: str, indent: int, location: SourceLocation) -> bool:
        block = self.block
        in_fence = block is not None and block.type is NodeType.CODE_BLOCK

        if in_fence:
            if _is_closing_fence(rest):
                self.block = None
            else:
                add_node(block, NodeType.CODE_TEXT, text=text + "\n", source_location=location)
            return True

        match = _FENCE_RE.match(rest)
        if match is None:
            return False

        if block is not None and block.type is NodeType.LIST_ITEM:
            parent = block
        elif block is not None and block.parent is not None and block.parent.type is NodeType.LIST_ITEM:
            parent = block.parent
        elif self.current.type.is_list:
            # An indented fence belongs to the last item, an unindented one ends the list
            if indent > 0 and self.current.last_child is not None:
                parent = self.current.last_child
            else:
                self.current = self.current.parent or self.root
                parent = self.current
        else:
            parent = self.current
        self.block = add_node(
            parent,
            NodeType.CODE_BLOCK,
            url=_fence_language(match.group(2)),
            source_location=location,
        )
        return True

    def _read_metadata(self, location: SourceLocation) -> None:
        metadata = add_node(self.root, NodeType.METADATA, source_location=location)
        while True:
            line = self.source.read_line()
            if line is None:
                logger.debug("Metadata block is not closed before end of input")
                break
            text = line.rstrip("\r\n")
            if text.startswith(METADATA_CLOSE):
                break
            entry = text.lstrip()
            if entry:
                add_node(
                    metadata,
                    NodeType.METADATA_TEXT,
                    text=entry,
                    source_location=SourceLocation(self.source.line_number),
                )
        self.block = None

    def _table_row(self, rest: str, location: SourceLocation) -> None:
        if self.current.type is not NodeType.TABLE or self.table is None:
            container = self.current
            if container is not self.root and container.type is not NodeType.BLOCK_QUOTE:
                container = container.parent or self.root
            table = add_node(container, NodeType.TABLE, source_location=location)
            self.table = TableBuilder(table, self.scanner)
            self.current = table
            logger.debug(f"Table started at line {location.line}")
        self.block = None
        self.table.add_row(rest, location)

    def _continue_list_item(self, location: SourceLocation) -> None:
        block = self.block
        if block is None:
            return
        if block.type is NodeType.LIST_ITEM:
            self.block = add_node(block, NodeType.PARAGRAPH, source_location=location)
        elif block.parent is not None and block.parent.type is NodeType.LIST_ITEM:
            self.block = add_node(block.parent, NodeType.PARAGRAPH, source_location=location)
        else:
            self.block = None

    def _list_item(self, rest: str, location: SourceLocation) -> Optional[tuple[NodeType, str]]:
        if rest[0] in BULLET_MARKERS and len(rest) > 1 and rest[1].isspace():
            kind = NodeType.UNORDERED_LIST
            content = rest[2:].lstrip()
        else:
            match = _ORDERED_MARKER_RE.match(rest)
            if match is None:
                return None
            kind = NodeType.ORDERED_LIST
            content = rest[match.end() :].lstrip()

        if self.current.type is not kind:
            container = self._nearest_quote() or self.root
            last = container.last_child
            if last is not None and last.type is kind:
                self.current = last
            else:
                self.current = add_node(container, kind, source_location=location)

        self.block = None
        return NodeType.LIST_ITEM, content

    def _append_text(self, node_type: NodeType, rest: str, location: SourceLocation) -> None:
        created = False
        if self.block is None or self.block.type is not node_type:
            parent = self.current
            if node_type is NodeType.PARAGRAPH and parent.type.is_list and parent.last_child is not None:
                parent = parent.last_child
            self.block = add_node(parent, node_type, source_location=location)
            created = True

        self.scanner.scan(self.block, rest, location)

        # A line holding only a reference definition leaves no paragraph behind
        if created and node_type is NodeType.PARAGRAPH and self.block.first_child is None:
            self.block.detach()
            self.block = None


class MarkdownParser(BaseParser):
    r"""Load Markdown documents into document trees.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> parser = MarkdownParser()
        >>> doc = parser.loads("# Hello\\n\\nThis is **bold**.\\n")
        >>> doc.first_child.type
        <NodeType.HEADING_1: ('heading_1', True)>

    With options:

        >>> options = MarkdownParserOptions(parse_tables=False)
        >>> doc = MarkdownParser(options).load("README.md")

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options

    def parse(self, input_data: ParserInput) -> Node:
        """Parse Markdown input into a document tree.

        Parameters
        ----------
        input_data : str, Path, IO[bytes], IO[str], or bytes
            Markdown input to parse. Can be:
            - File path (Path, or a str naming an existing file)
            - File-like object in binary or text mode
            - Raw markdown bytes
            - Markdown string

        Returns
        -------
        Node
            DOCUMENT root

        """
        if isinstance(input_data, Path):
            return self.load(input_data)
        if isinstance(input_data, bytes):
            return self.load_file(io.BytesIO(input_data))
        if isinstance(input_data, str):
            # Check length first: very long strings make Path.exists() raise OSError
            if len(input_data) <= 260 and "\n" not in input_data:
                try:
                    path = Path(input_data)
                    if path.is_file():
                        return self.load(path)
                except OSError:
                    pass
            return self.loads(input_data)
        return self.load_file(input_data)

    def load(self, path: Union[str, Path]) -> Node:
        """Load the named Markdown file.

        Raises
        ------
        FileNotFoundError
            If the file does not exist
        FileAccessError
            If the file cannot be opened or read

        """
        path_str = str(path)
        try:
            stream = open(path, "rb")
        except FileNotFoundError as e:
            raise MiniMdFileNotFoundError(file_path=path_str, original_error=e) from e
        except OSError as e:
            raise FileAccessError(file_path=path_str, original_error=e) from e

        logger.debug(f"Loading Markdown from {path_str}")
        with stream:
            return self._load_binary(stream, path_str)

    def load_file(self, stream: Union[IO[bytes], IO[str]]) -> Node:
        """Load Markdown from an open stream, starting at its current position.

        Binary streams are decoded with ``options.encoding`` when set,
        otherwise with UTF-8, the encoding detected by chardet, or latin-1.
        The stream is not closed.

        Raises
        ------
        FileAccessError
            If the stream is closed or cannot be read

        """
        name = str(getattr(stream, "name", "<stream>"))
        if getattr(stream, "closed", False):
            raise FileAccessError(file_path=name, message=f"Cannot read from closed stream: {name}")

        if isinstance(stream, io.TextIOBase):
            return self._load_text(stream, name)

        try:
            probe = stream.read(0)
        except OSError as e:
            raise FileAccessError(file_path=name, original_error=e) from e
        if isinstance(probe, str):
            return self._load_text(stream, name)  # type: ignore[arg-type]
        return self._load_binary(stream, name)  # type: ignore[arg-type]

    def loads(self, text: str) -> Node:
        """Load Markdown from a string."""
        return self._load_text(io.StringIO(text, newline=""), "<string>")

    def _load_binary(self, stream: IO[bytes], name: str) -> Node:
        try:
            wrapper = open_text_stream(stream, encoding=self.options.encoding)
        except OSError as e:
            raise FileAccessError(file_path=name, original_error=e) from e
        try:
            return self._load_text(wrapper, name)
        finally:
            wrapper.detach()

    def _load_text(self, stream: IO[str], name: str) -> Node:
        source = LineSource(
            stream,
            max_line_length=self.options.max_line_length,
            long_line_mode=self.options.long_line_mode,
        )
        try:
            return _LoadSession(source, self.options).run()
        except OSError as e:
            raise FileAccessError(file_path=name, message=f"Error reading {name}: {e}", original_error=e) from e

    def extract_metadata(self, document: Node) -> dict[str, Any]:
        """Return the document's metadata block as a dictionary.

        See :func:`minimd.ast.utils.metadata_to_dict`.
        """
        return metadata_to_dict(document)


def markdown_to_tree(markdown_content: str, options: MarkdownParserOptions | None = None) -> Node:
    r"""Convert a Markdown string to a document tree.

    This is a convenience function that creates a parser and loads the
    string in one step.

    Examples
    --------
    >>> from minimd.parsers.markdown import markdown_to_tree
    >>> doc = markdown_to_tree("# Hello\\n\\nWorld\\n")
    >>> len(list(doc.children()))
    2

    """
    return MarkdownParser(options).loads(markdown_content)


__all__ = ["MarkdownParser", "markdown_to_tree"]
