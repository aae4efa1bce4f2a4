#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/parsers/tables.py
"""Pipe table support.

A table is a header row, a separator row giving column alignment, and any
number of body rows::

    | Name  | Size |
    |:------|-----:|
    | a.txt |  12k |

The separator row is what makes the header a header: a pipe line only starts
a table when the line after it is a separator row.
"""

from __future__ import annotations

import logging
from typing import Optional

from minimd.ast.nodes import Node, NodeType, SourceLocation, add_node
from minimd.constants import MAX_TABLE_COLUMNS, TABLE_SEPARATOR_CHARS
from minimd.parsers.inline import InlineScanner

logger = logging.getLogger(__name__)


def is_separator_row(line: Optional[str]) -> bool:
    """Return True if ``line`` is a table separator row such as ``|---|:--:|``.

    The row may only contain ``:``, ``-``, ``|`` and whitespace, optionally
    after a single leading ``>`` (a table inside a block quote), and must
    contain at least one ``-`` and one ``|``.
    """
    if not line:
        return False
    if line.startswith(">"):
        line = line[1:]
    if "-" not in line or "|" not in line:
        return False
    return all(ch in TABLE_SEPARATOR_CHARS for ch in line)


def split_row(text: str) -> list[str]:
    """Split a table row into raw cell strings.

    One leading and one trailing pipe are ignored. Escaped pipes (``\\|``)
    do not split and are left escaped for the inline scanner. Cells are not
    stripped.

    Examples
    --------
        >>> split_row("| a | b \\\\| c |")
        [' a ', ' b \\\\| c ']

    """
    text = text.rstrip()
    if text.startswith("|"):
        text = text[1:]
    if text.endswith("|") and not text.endswith("\\|"):
        text = text[:-1]
    if not text:
        return []

    cells: list[str] = []
    start = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == "|":
            cells.append(text[start:i])
            start = i + 1
        i += 1
    cells.append(text[start:])
    return cells


def parse_alignment(cell: str) -> NodeType:
    """Return the body cell type for one separator cell (``:-:``, ``-:``, ``--``)."""
    cell = cell.strip()
    if len(cell) > 1 and cell.startswith(":") and cell.endswith(":"):
        return NodeType.TABLE_BODY_CELL_CENTER
    if cell.endswith(":"):
        return NodeType.TABLE_BODY_CELL_RIGHT
    return NodeType.TABLE_BODY_CELL_LEFT


class TableBuilder:
    """Builds the rows of one TABLE node, keeping them rectangular.

    The header row fixes the column count, unless the first body row is
    wider, in which case the header is padded. Later rows are padded with
    empty cells of the column's alignment or truncated, so every row of the
    finished table has the same number of cells.

    Parameters
    ----------
    table : Node
        TABLE node receiving the header and body
    scanner : InlineScanner
        Scanner used for cell contents

    """

    def __init__(self, table: Node, scanner: InlineScanner) -> None:
        self.table = table
        self.scanner = scanner
        self.rows = 0
        self.num_columns = 0
        self.alignments: list[NodeType] = []
        self._header_row: Optional[Node] = None
        self._body: Optional[Node] = None
        self._columns_fixed = False

    def alignment(self, column: int) -> NodeType:
        if column < len(self.alignments):
            return self.alignments[column]
        return NodeType.TABLE_BODY_CELL_LEFT

    def add_row(self, text: str, source_location: Optional[SourceLocation] = None) -> None:
        """Add one source line (without block quote marker) to the table."""
        cells = split_row(text)[:MAX_TABLE_COLUMNS]
        row_index = self.rows
        self.rows += 1

        if row_index == 0:
            header = add_node(self.table, NodeType.TABLE_HEADER, source_location=source_location)
            self._header_row = add_node(header, NodeType.TABLE_ROW, source_location=source_location)
            for cell in cells:
                self._add_cell(self._header_row, NodeType.TABLE_HEADER_CELL, cell, source_location)
            self.num_columns = len(cells)
            return

        if row_index == 1:
            self.alignments = [parse_alignment(cell) for cell in cells]
            return

        if self._body is None:
            self._body = add_node(self.table, NodeType.TABLE_BODY, source_location=source_location)

        if not self._columns_fixed:
            self._columns_fixed = True
            if len(cells) > self.num_columns and self._header_row is not None:
                for _ in range(self.num_columns, len(cells)):
                    add_node(self._header_row, NodeType.TABLE_HEADER_CELL, source_location=source_location)
                self.num_columns = len(cells)

        if len(cells) > self.num_columns:
            logger.debug(f"Table row has {len(cells)} cells, truncating to {self.num_columns}")
            cells = cells[: self.num_columns]

        row = add_node(self._body, NodeType.TABLE_ROW, source_location=source_location)
        for column, cell in enumerate(cells):
            self._add_cell(row, self.alignment(column), cell, source_location)
        for column in range(len(cells), self.num_columns):
            add_node(row, self.alignment(column), source_location=source_location)

    def _add_cell(
        self, row: Node, cell_type: NodeType, text: str, source_location: Optional[SourceLocation]
    ) -> None:
        cell = add_node(row, cell_type, source_location=source_location)
        self.scanner.scan(cell, text.strip(), source_location)


__all__ = [
    "TableBuilder",
    "is_separator_row",
    "parse_alignment",
    "split_row",
]
