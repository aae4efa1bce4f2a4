#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/parsers/links.py
"""Parsing of bracketed link constructs.

Four forms start with ``[``::

    [text](url "optional title")     inline link
    [text][name]                     full reference ([text][] uses text as name)
    [name]: url                      reference definition, only at line start
    [text]                           shortcut reference

Images use the same forms behind a ``!``. Titles are skipped and discarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LinkMatch:
    """Result of parsing one bracketed construct.

    Parameters
    ----------
    text : str or None
        Bracket text; None for a reference definition, which produces no node
    url : str or None
        Inline URL, or the URL of a definition
    ref_name : str or None
        Name of the reference to resolve, for reference and shortcut forms
    end : int
        Index just past the consumed construct

    """

    text: Optional[str]
    url: Optional[str]
    ref_name: Optional[str]
    end: int

    @property
    def is_definition(self) -> bool:
        return self.text is None


def _skip_quoted(line: str, index: int) -> int:
    """Return the index of the closing quote for the quote at ``index``, or -1."""
    return line.find('"', index + 1)


def _find_closing(line: str, start: int, closer: str) -> int:
    """Find ``closer`` at or after ``start``, skipping quoted runs; -1 if absent."""
    i = start
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == closer:
            return i
        if ch == '"':
            i = _skip_quoted(line, i)
            if i < 0:
                return -1
        i += 1
    return -1


def _first_word(text: str) -> str:
    words = text.split(maxsplit=1)
    return words[0] if words else ""


def parse_link(line: str, start: int, allow_definition: bool = False) -> Optional[LinkMatch]:
    """Parse the bracketed construct opening at ``line[start]``.

    Parameters
    ----------
    line : str
        Source line without its line ending
    start : int
        Index of the opening ``[``
    allow_definition : bool, default False
        Whether ``[name]: url`` is recognized; true only when the bracket
        opens the line

    Returns
    -------
    LinkMatch or None
        The parsed construct, or None when a bracket, quote or parenthesis
        is never closed so the caller can fall back to literal text

    """
    close = _find_closing(line, start + 1, "]")
    if close < 0:
        return None

    text = line[start + 1 : close]
    after = close + 1
    follower = line[after] if after < len(line) else ""

    if follower == "(":
        paren = _find_closing(line, after + 1, ")")
        if paren < 0:
            return None
        return LinkMatch(text=text, url=_first_word(line[after + 1 : paren]), ref_name=None, end=paren + 1)

    if follower == "[":
        bracket = _find_closing(line, after + 1, "]")
        if bracket < 0:
            return None
        name = line[after + 1 : bracket].strip()
        return LinkMatch(text=text, url=None, ref_name=name or text, end=bracket + 1)

    if follower == ":" and allow_definition:
        url = _first_word(line[after + 1 :])
        if url:
            return LinkMatch(text=None, url=url, ref_name=text, end=len(line))

    return LinkMatch(text=text, url=None, ref_name=text, end=after)


__all__ = ["LinkMatch", "parse_link"]
