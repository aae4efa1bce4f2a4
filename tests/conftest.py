"""Pytest configuration and shared fixtures for the minimd test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import os
from pathlib import Path
from typing import Callable

import pytest
from hypothesis import Phase, Verbosity, settings

from minimd import loads
from minimd.ast.nodes import Node
from minimd.options import MarkdownParserOptions

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def parse() -> Callable[..., Node]:
    """Load a Markdown string, optionally with option overrides.

    Examples
    --------
    >>> doc = parse("# Title\\n", parse_tables=False)

    """

    def _parse(text: str, **option_overrides) -> Node:
        options = MarkdownParserOptions(**option_overrides) if option_overrides else None
        return loads(text, options)

    return _parse


@pytest.fixture
def markdown_file(tmp_path: Path) -> Callable[..., Path]:
    """Write Markdown content to a file under ``tmp_path`` and return its path."""

    def _write(content, name: str = "doc.md") -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return path

    return _write
