#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/cli.py
"""Command-line interface for minimd.

Loads one Markdown document and prints what the loader made of it.

Examples
--------
Dump the tree::

    $ minimd README.md

Pretty tree with rich::

    $ minimd README.md --rich

JSON output::

    $ minimd README.md --format json

Flattened text, or a single metadata value::

    $ minimd README.md --text
    $ minimd README.md --metadata title

Read from stdin::

    $ cat README.md | minimd -

"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import fields
from typing import Any, Optional, get_args

from minimd import __version__
from minimd.ast.nodes import Node, free_tree
from minimd.ast.serialization import node_to_json
from minimd.ast.utils import copy_all_text, get_metadata
from minimd.ast.visitors import TreeFormatter, describe_node
from minimd.constants import OutputFormat
from minimd.exceptions import MiniMdError
from minimd.logging_utils import configure_logging
from minimd.options.markdown import MarkdownParserOptions
from minimd.parsers.markdown import MarkdownParser

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2


def add_options_arguments(parser: argparse.ArgumentParser, options_class: type = MarkdownParserOptions) -> None:
    """Add one flag per field of ``options_class``, described by the field metadata.

    Boolean fields that default to True become ``--no-<name>`` switches.
    Other fields take a value, restricted by the ``choices`` and converted
    by the ``type`` metadata entries. ``cli_name`` overrides the flag name
    and ``importance`` picks the help group.
    """
    groups = {
        "core": parser.add_argument_group("parsing"),
        "advanced": parser.add_argument_group("advanced parsing"),
    }
    for option in fields(options_class):
        metadata = option.metadata
        kwargs: dict[str, Any] = {"dest": option.name, "default": option.default, "help": metadata["help"]}

        if isinstance(option.default, bool):
            default_name = f"no-{option.name}" if option.default else option.name
            kwargs["action"] = "store_false" if option.default else "store_true"
        else:
            default_name = option.name
            if "choices" in metadata:
                kwargs["choices"] = metadata["choices"]
            if "type" in metadata:
                kwargs["type"] = metadata["type"]
            if "metavar" in metadata:
                kwargs["metavar"] = metadata["metavar"]
            if option.default is not None:
                kwargs["help"] += " (default: %(default)s)"

        cli_name = metadata.get("cli_name", default_name.replace("_", "-"))
        groups[metadata.get("importance", "core")].add_argument(f"--{cli_name}", **kwargs)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``minimd`` command."""
    parser = argparse.ArgumentParser(
        prog="minimd",
        description="Load a Markdown document and print its document tree.",
    )
    parser.add_argument("input", metavar="FILE", help="Markdown file to load, or '-' for stdin")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    output = parser.add_argument_group("output")
    output.add_argument(
        "--format",
        choices=list(get_args(OutputFormat)),
        default="tree",
        help="Output format (default: tree)",
    )
    output.add_argument("--rich", action="store_true", help="Render the tree with rich")
    output.add_argument("--text", action="store_true", help="Print the flattened document text instead")
    output.add_argument("--metadata", metavar="KEY", help="Print the value of one metadata entry instead")

    add_options_arguments(parser)

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    logging_group.add_argument("--log-file", help="Also write log messages to this file")
    logging_group.add_argument("--trace", action="store_true", help="Debug logging with timestamps")
    return parser


def _build_options(parsed_args: argparse.Namespace) -> MarkdownParserOptions:
    values = {option.name: getattr(parsed_args, option.name) for option in fields(MarkdownParserOptions)}
    return MarkdownParserOptions(**values)


def _rich_tree(document: Node):  # type: ignore[no-untyped-def]
    """Build a rich Tree mirroring the document tree, iteratively."""
    from rich.markup import escape
    from rich.tree import Tree

    tree = Tree(escape(describe_node(document)))
    stack = [(document, tree)]
    while stack:
        node, branch = stack.pop()
        for child in node.children():
            label = escape(describe_node(child))
            style = "bold" if child.is_block else ""
            stack.append((child, branch.add(label, style=style)))
    return tree


def _render(document: Node, parsed_args: argparse.Namespace) -> Optional[str]:
    if parsed_args.metadata:
        return get_metadata(document, parsed_args.metadata)
    if parsed_args.text:
        return copy_all_text(document)
    if parsed_args.format == "json":
        return node_to_json(document, indent=2)
    return TreeFormatter().format(document)


def main(args: list[str] | None = None) -> int:
    """Execute the ``minimd`` command."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level)
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        options = _build_options(parsed_args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    loader = MarkdownParser(options)
    try:
        if parsed_args.input == "-":
            document = loader.load_file(sys.stdin.buffer if parsed_args.encoding else sys.stdin)
        else:
            document = loader.load(parsed_args.input)
    except MiniMdError as e:
        logger.debug("Load failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        if parsed_args.rich and not (parsed_args.text or parsed_args.metadata or parsed_args.format == "json"):
            from rich.console import Console

            Console().print(_rich_tree(document))
            return EXIT_SUCCESS

        output = _render(document, parsed_args)
        if output is None:
            print(f"Error: no metadata entry '{parsed_args.metadata}'", file=sys.stderr)
            return EXIT_ERROR
        print(output)
        return EXIT_SUCCESS
    finally:
        free_tree(document)


if __name__ == "__main__":
    sys.exit(main())
