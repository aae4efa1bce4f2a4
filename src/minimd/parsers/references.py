#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/minimd/parsers/references.py
"""Deferred resolution of reference-style link URLs.

A link such as ``[docs]`` may appear before the ``[docs]: http://...``
definition that gives it a URL. Resolution therefore happens in two phases:
nodes created from a reference record its name and wait in a pending list,
and the definition (whenever it arrives) binds the URL to every waiting node.
:meth:`ReferenceTable.finish` settles whatever is still pending when the
document ends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from minimd.ast.nodes import Node
from minimd.constants import UnresolvedReferenceMode

logger = logging.getLogger(__name__)


def normalize_reference_name(name: str) -> str:
    """Return the lookup key for a reference name.

    Names match case-insensitively, and runs of whitespace compare equal, so
    ``[Some  Docs]`` and ``[some docs]`` refer to the same definition.
    """
    return " ".join(name.split()).casefold()


@dataclass
class ReferenceEntry:
    """One named reference.

    Parameters
    ----------
    name : str
        Name as first written in the document
    url : str or None
        Bound URL, None until a definition is seen
    pending : list of Node
        Nodes created from the reference before its URL was known

    """

    name: str
    url: Optional[str] = None
    pending: list[Node] = field(default_factory=list)


class ReferenceTable:
    """Reference entries of one document load."""

    def __init__(self) -> None:
        self._entries: dict[str, ReferenceEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_reference_name(name) in self._entries

    def get(self, name: str) -> Optional[ReferenceEntry]:
        """Return the entry for ``name``, or None."""
        return self._entries.get(normalize_reference_name(name))

    def register(self, name: str, url: Optional[str] = None, node: Optional[Node] = None) -> ReferenceEntry:
        """Record a reference use, a definition, or both.

        The first URL registered for a name wins; later definitions of the
        same name are ignored. A node is bound immediately when its
        reference already has a URL and is queued otherwise. Binding a URL
        patches every queued node and empties the queue.

        Parameters
        ----------
        name : str
            Reference name
        url : str or None, default None
            URL supplied by a definition
        node : Node or None, default None
            Link or image node created from the reference

        Returns
        -------
        ReferenceEntry
            The (possibly new) entry for ``name``

        """
        key = normalize_reference_name(name)
        entry = self._entries.get(key)
        if entry is None:
            entry = ReferenceEntry(name=name)
            self._entries[key] = entry

        if url is not None and entry.url is None:
            entry.url = url
            for waiting in entry.pending:
                waiting.url = url
            entry.pending.clear()

        if node is not None:
            if entry.url is not None:
                node.url = entry.url
            else:
                entry.pending.append(node)

        return entry

    def finish(self, mode: UnresolvedReferenceMode = "unresolved") -> int:
        """Settle references that were used but never defined.

        Parameters
        ----------
        mode : {"unresolved", "name"}, default "unresolved"
            With "unresolved" the waiting nodes keep ``url=None``; with
            "name" they get the reference name as a literal URL.

        Returns
        -------
        int
            Number of reference names that had no definition

        """
        unresolved = 0
        for entry in self._entries.values():
            if entry.url is not None or not entry.pending:
                continue
            unresolved += 1
            logger.debug(f"Reference [{entry.name}] used by {len(entry.pending)} node(s) was never defined")
            if mode == "name":
                for waiting in entry.pending:
                    waiting.url = entry.name
        self._entries.clear()
        return unresolved


__all__ = ["ReferenceEntry", "ReferenceTable", "normalize_reference_name"]
