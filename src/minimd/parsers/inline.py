#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/parsers/inline.py
"""Inline formatting scanner.

Turns the text of one source line into inline nodes appended to a block
node. Text is split into one node per word; each node's ``whitespace`` flag
records whether whitespace preceded it in the source, which is how renderers
put the spaces back. Formatting is a single current style rather than a
nesting stack: ``*a **b** c*`` does not nest.
"""

from __future__ import annotations

import logging
from typing import Optional

from minimd.ast.nodes import Node, NodeType, SourceLocation, add_node
from minimd.options.markdown import MarkdownParserOptions
from minimd.parsers.links import LinkMatch, parse_link
from minimd.parsers.references import ReferenceTable

logger = logging.getLogger(__name__)

_EMPHASIS_DELIMITERS = "*_"


def _opens(line: str, index: int) -> bool:
    """Whether a delimiter ending just before ``index`` is followed by text."""
    return index < len(line) and not line[index].isspace()


class InlineScanner:
    """Scanner for the inline content of block nodes.

    Parameters
    ----------
    references : ReferenceTable
        Reference table of the current load; reference links register here
    options : MarkdownParserOptions or None, default None
        Parser options (only ``parse_strikethrough`` is consulted)

    """

    def __init__(self, references: ReferenceTable, options: Optional[MarkdownParserOptions] = None) -> None:
        self.references = references
        self.options = options or MarkdownParserOptions()

    def scan(self, parent: Node, line: str, source_location: Optional[SourceLocation] = None) -> None:
        """Append the inline nodes of ``line`` to ``parent``.

        Parameters
        ----------
        parent : Node
            Block node receiving the inline nodes
        line : str
            Line text with the line ending and any block markers removed
        source_location : SourceLocation or None, default None
            Location recorded on every created node

        """
        style = NodeType.NORMAL_TEXT
        whitespace = parent.first_child is not None
        buffer: list[str] = []

        def flush() -> bool:
            if not buffer:
                return False
            add_node(parent, style, whitespace=whitespace, text="".join(buffer), source_location=source_location)
            buffer.clear()
            return True

        strikethrough = self.options.parse_strikethrough
        n = len(line)
        i = 0
        while i < n:
            ch = line[i]
            in_code = style is NodeType.CODE_TEXT

            if ch == "`":
                if flush():
                    whitespace = False
                style = NodeType.NORMAL_TEXT if in_code else NodeType.CODE_TEXT
                i += 1
                continue

            if in_code:
                buffer.append(ch)
                i += 1
                continue

            if ch.isspace():
                flush()
                whitespace = True
                if i + 2 == n and line[i + 1].isspace():
                    add_node(parent, NodeType.HARD_BREAK, source_location=source_location)
                i += 1
                continue

            if ch == "\\" and i + 1 < n:
                buffer.append(line[i + 1])
                i += 2
                continue

            if ch == "!" and line.startswith("[", i + 1):
                match = parse_link(line, i + 1)
                if match is None:
                    buffer.append("![")
                    i += 2
                    continue
                if flush():
                    whitespace = False
                self._emit_link(parent, match, NodeType.IMAGE, whitespace, source_location)
                whitespace = False
                i = match.end
                continue

            if ch == "[":
                match = parse_link(line, i, allow_definition=i == 0)
                if match is None:
                    buffer.append("[")
                    i += 1
                    continue
                if flush():
                    whitespace = False
                self._emit_link(parent, match, NodeType.LINKED_TEXT, whitespace, source_location)
                whitespace = False
                i = match.end
                continue

            if ch == "<":
                close = line.find(">", i + 1)
                url = line[i + 1 : close] if close > i + 1 else ""
                if url and not any(c.isspace() for c in url):
                    if flush():
                        whitespace = False
                    add_node(
                        parent,
                        NodeType.LINKED_TEXT,
                        whitespace=whitespace,
                        text=url,
                        url=url,
                        source_location=source_location,
                    )
                    whitespace = False
                    i = close + 1
                    continue

            if ch in _EMPHASIS_DELIMITERS:
                doubled = line.startswith(ch, i + 1)
                if style is NodeType.NORMAL_TEXT:
                    if doubled and _opens(line, i + 2):
                        if flush():
                            whitespace = False
                        style = NodeType.STRONG_TEXT
                        i += 2
                        continue
                    if not doubled and _opens(line, i + 1):
                        if flush():
                            whitespace = False
                        style = NodeType.EMPHASIZED_TEXT
                        i += 1
                        continue
                elif style in (NodeType.EMPHASIZED_TEXT, NodeType.STRONG_TEXT):
                    if flush():
                        whitespace = False
                    style = NodeType.NORMAL_TEXT
                    i += 2 if doubled else 1
                    continue

            if ch == "~" and strikethrough and line.startswith("~", i + 1):
                if style is NodeType.STRUCK_TEXT:
                    if flush():
                        whitespace = False
                    style = NodeType.NORMAL_TEXT
                    i += 2
                    continue
                if style is NodeType.NORMAL_TEXT and _opens(line, i + 2):
                    if flush():
                        whitespace = False
                    style = NodeType.STRUCK_TEXT
                    i += 2
                    continue
                buffer.append("~~")
                i += 2
                continue

            buffer.append(ch)
            i += 1

        flush()

    def _emit_link(
        self,
        parent: Node,
        match: LinkMatch,
        node_type: NodeType,
        whitespace: bool,
        source_location: Optional[SourceLocation],
    ) -> None:
        if match.is_definition:
            logger.debug(f"Reference definition [{match.ref_name}] -> {match.url}")
            self.references.register(match.ref_name or "", url=match.url)
            return

        text = match.text
        # [`name`](url) links to code rather than to text
        if node_type is NodeType.LINKED_TEXT and text is not None and len(text) >= 2 and text[0] == text[-1] == "`":
            node_type = NodeType.CODE_TEXT
            text = text[1:-1]

        node = add_node(
            parent,
            node_type,
            whitespace=whitespace,
            text=text,
            url=match.url,
            source_location=source_location,
        )
        if match.ref_name is not None:
            node.ref_name = match.ref_name
            self.references.register(match.ref_name, node=node)


__all__ = ["InlineScanner"]
