"""Coordination store capability contract.

Design principles:
- The election only needs four synchronous calls: create (optionally
  sequential), list children, stat and delete.
- Backends translate their client library errors into the
  ``StoreError`` hierarchy so election code never sees library types.
- ``stat`` reports a missing node as ``None`` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class NodeStat:
    """Metadata of an existing node."""

    path: str
    created_ms: int


class StoreClient(Protocol):
    """Backend abstraction for hierarchical coordination stores."""

    name: str

    def create(self, path: str, data: bytes = b"", *, sequential: bool = False, makepath: bool = False) -> str:
        """Create a node and return its full path (with sequence suffix if sequential).

        Raises NodeExistsError if the path is taken and NoNodeError if the
        parent is missing and ``makepath`` is false.
        """

    def list_children(self, path: str) -> list[str]:
        """Return child names of ``path``. Raises NoNodeError if it does not exist."""

    def stat(self, path: str) -> NodeStat | None:
        """Return node metadata, or None if the node does not exist."""

    def delete(self, path: str) -> None:
        """Delete a node. Raises NoNodeError if it does not exist."""
