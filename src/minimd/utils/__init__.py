#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/utils/__init__.py
"""Utility modules for minimd package.

This package contains the input helpers used by the loader: encoding
detection for binary streams and the line source with lookahead.
"""

from minimd.utils.encoding import choose_encoding, detect_encoding, open_text_stream
from minimd.utils.inputs import LineSource

__all__ = [
    "LineSource",
    "choose_encoding",
    "detect_encoding",
    "open_text_stream",
]
