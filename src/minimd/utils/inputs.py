#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/utils/inputs.py
"""Line-at-a-time input with one-line lookahead.

The block parser reads its input one line at a time and occasionally needs
to look at the next line before deciding what the current one is (a table
header is only a table header when a separator row follows it). Instead of
seeking the underlying stream, :class:`LineSource` keeps a small pushback
buffer, so any readable text stream works, including pipes and stdin.
"""

from __future__ import annotations

import logging
from typing import IO, Iterator, Optional

from minimd.constants import DEFAULT_LONG_LINE_MODE, DEFAULT_MAX_LINE_LENGTH, LongLineMode
from minimd.exceptions import LineTooLongError

logger = logging.getLogger(__name__)


def _line_ending(chunk: str) -> str:
    if chunk.endswith("\r\n"):
        return "\r\n"
    if chunk.endswith("\n") or chunk.endswith("\r"):
        return chunk[-1]
    return ""


class LineSource:
    """Newline-inclusive lines from a text stream, with pushback.

    Parameters
    ----------
    stream : IO[str]
        Readable text stream. It should not translate newlines
        (``newline=""``) so that ``\\r\\n`` line endings survive a split
        read; a stream that does translate works just as well.
    max_line_length : int, default 65536
        Maximum number of characters of a line, not counting its line ending
    long_line_mode : {"truncate", "error"}, default "truncate"
        Whether over-long lines are cut to ``max_line_length`` (with a
        warning) or rejected with :class:`LineTooLongError`

    Examples
    --------
        >>> import io
        >>> source = LineSource(io.StringIO("a\\nb\\n"))
        >>> source.peek()
        'a\\n'
        >>> source.read_line()
        'a\\n'
        >>> source.line_number
        1

    """

    def __init__(
        self,
        stream: IO[str],
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        long_line_mode: LongLineMode = DEFAULT_LONG_LINE_MODE,
    ) -> None:
        self._stream = stream
        self._max_line_length = max_line_length
        self._long_line_mode = long_line_mode
        self._pushback: list[str] = []
        self._after_cr = False
        self._exhausted = False
        self.line_number = 0

    def read_line(self) -> Optional[str]:
        """Return the next line including its line ending, or None at end of input."""
        if self._pushback:
            line = self._pushback.pop()
        else:
            line = self._read_physical_line()
            if line is None:
                return None
        self.line_number += 1
        return line

    def peek(self) -> Optional[str]:
        """Return the next line without consuming it."""
        if self._pushback:
            return self._pushback[-1]
        line = self._read_physical_line()
        if line is not None:
            self._pushback.append(line)
        return line

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.read_line()
            if line is None:
                return
            yield line

    def _read_chunk(self, limit: int) -> str:
        while True:
            chunk = self._stream.readline(limit)
            # The "\n" of a "\r\n" pair can be left behind by a size-limited read
            if self._after_cr and chunk.startswith("\n"):
                chunk = chunk[1:]
                self._after_cr = False
                if not chunk:
                    continue
            self._after_cr = chunk.endswith("\r")
            return chunk

    def _read_physical_line(self) -> Optional[str]:
        if self._exhausted:
            return None

        # Room for the content, plus a two-character line ending
        chunk = self._read_chunk(self._max_line_length + 2)
        if not chunk:
            self._exhausted = True
            return None

        ending = _line_ending(chunk)
        content = chunk[: len(chunk) - len(ending)]
        if len(content) <= self._max_line_length:
            return chunk

        line_number = self.line_number + len(self._pushback) + 1
        if self._long_line_mode == "error":
            raise LineTooLongError(line_number, self._max_line_length)

        while not ending:
            rest = self._read_chunk(self._max_line_length)
            if not rest:
                break
            ending = _line_ending(rest)

        logger.warning(
            f"Line {line_number} exceeds {self._max_line_length} characters and was truncated"
        )
        return content[: self._max_line_length] + (ending or "")


__all__ = ["LineSource"]
