#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/utils/encoding.py
"""Character encoding detection for binary Markdown input.

Binary streams are decoded lazily, line by line, so the encoding has to be
chosen up front from a sample of the stream. UTF-8 is preferred whenever the
sample decodes cleanly; chardet is consulted only for input that is not
UTF-8, and latin-1 is used when chardet is unsure.
"""

from __future__ import annotations

import codecs
import io
import logging
from typing import IO

import chardet

from minimd.constants import (
    DEFAULT_CHARDET_CONFIDENCE_THRESHOLD,
    DEFAULT_ENCODING_SAMPLE_SIZE,
    DEFAULT_FALLBACK_ENCODING,
)

logger = logging.getLogger(__name__)


def detect_encoding(
    data: bytes,
    sample_size: int = DEFAULT_ENCODING_SAMPLE_SIZE,
    confidence_threshold: float = DEFAULT_CHARDET_CONFIDENCE_THRESHOLD,
) -> str | None:
    """Detect character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of bytes to sample for detection (uses first N bytes)
    confidence_threshold : float, default 0.7
        Minimum confidence level (0.0-1.0) required to trust detection

    Returns
    -------
    str | None
        Detected encoding name (e.g., 'utf-8', 'latin-1'), or None if
        detection fails or confidence is below threshold

    """
    sample = data[:sample_size]
    result = chardet.detect(sample)

    if not result or not result.get("encoding"):
        logger.debug("chardet: No encoding detected")
        return None

    encoding = result["encoding"]
    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")

    if confidence < confidence_threshold:
        logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
        return None

    # ASCII is a strict subset of UTF-8; decoding later bytes as ASCII would fail
    if encoding.lower() == "ascii":
        return "utf-8"
    return encoding


def _is_utf8(sample: bytes, complete: bool) -> bool:
    # An incomplete sample may end in the middle of a multi-byte sequence;
    # a complete one must not.
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=complete)
    except UnicodeDecodeError:
        return False
    return True


def choose_encoding(
    sample: bytes,
    complete: bool = True,
    fallback_encoding: str = DEFAULT_FALLBACK_ENCODING,
    confidence_threshold: float = DEFAULT_CHARDET_CONFIDENCE_THRESHOLD,
) -> str:
    """Pick the encoding used to decode a binary stream.

    Parameters
    ----------
    sample : bytes
        Leading bytes of the stream
    complete : bool, default True
        Whether ``sample`` holds the whole stream. When False the sample may
        be cut inside a multi-byte character.
    fallback_encoding : str, default "latin-1"
        Encoding used when detection is inconclusive
    confidence_threshold : float, default 0.7
        Minimum chardet confidence

    Returns
    -------
    str
        Encoding name

    """
    if _is_utf8(sample, complete):
        return "utf-8"

    detected = detect_encoding(sample, sample_size=len(sample), confidence_threshold=confidence_threshold)
    if detected is not None:
        try:
            codecs.lookup(detected)
        except LookupError:
            logger.debug(f"Detected encoding {detected} is not supported, using {fallback_encoding}")
        else:
            return detected

    logger.debug(f"Encoding detection inconclusive, using {fallback_encoding}")
    return fallback_encoding


def _read_sample(stream: IO[bytes], sample_size: int) -> tuple[bytes, IO[bytes]]:
    """Read a sample from a binary stream without losing it.

    Seekable streams are rewound. For other streams the sample is
    re-attached in front of the remaining data.
    """
    if stream.seekable():
        position = stream.tell()
        sample = stream.read(sample_size)
        stream.seek(position)
        return sample, stream

    sample = stream.read(sample_size)
    return sample, io.BufferedReader(_PrefixedStream(sample, stream))  # type: ignore[arg-type]


class _PrefixedStream(io.RawIOBase):
    """Raw stream yielding ``prefix`` and then the rest of ``stream``."""

    def __init__(self, prefix: bytes, stream: IO[bytes]) -> None:
        self._prefix = prefix
        self._stream = stream

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[no-untyped-def]
        if self._prefix:
            size = min(len(buffer), len(self._prefix))
            buffer[:size] = self._prefix[:size]
            self._prefix = self._prefix[size:]
            return size
        data = self._stream.read(len(buffer))
        if not data:
            return 0
        buffer[: len(data)] = data
        return len(data)


def open_text_stream(
    stream: IO[bytes],
    encoding: str | None = None,
    sample_size: int = DEFAULT_ENCODING_SAMPLE_SIZE,
) -> io.TextIOWrapper:
    """Wrap a binary stream in a line-decoding text wrapper.

    Parameters
    ----------
    stream : IO[bytes]
        Binary stream positioned at the start of the document
    encoding : str or None, default None
        Explicit encoding; detected from a sample of the stream when None
    sample_size : int, default 8192
        Number of bytes sampled for detection

    Returns
    -------
    io.TextIOWrapper
        Text wrapper decoding with ``errors="replace"``. Universal newline
        translation is disabled so ``\\r\\n`` endings reach the loader
        unchanged. Callers should ``detach()`` the wrapper when done so the
        caller's stream is not closed.

    """
    if encoding is None:
        sample, stream = _read_sample(stream, sample_size)
        # A short read means the sample is the whole stream
        encoding = choose_encoding(sample, complete=len(sample) < sample_size)
        logger.debug(f"Decoding binary input as {encoding}")

    return io.TextIOWrapper(stream, encoding=encoding, errors="replace", newline="")  # type: ignore[arg-type]


__all__ = [
    "choose_encoding",
    "detect_encoding",
    "open_text_stream",
]
