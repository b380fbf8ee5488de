"""In-memory coordination store.

Mirrors the parts of ZooKeeper semantics the election relies on:
atomic sequential creates with a zero-padded per-parent counter,
creation timestamps, and NoNode/NodeExists errors. Safe to share
between threads of one process.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from zklock.core.constants import SEQUENCE_WIDTH
from zklock.core.exceptions import NodeExistsError, NoNodeError, StoreError
from zklock.store.base import NodeStat


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _parent(path: str) -> str:
    parent = path.rsplit("/", 1)[0]
    return parent or "/"


class MemoryStore:
    """Store backend that keeps all nodes in a dict."""

    name = "memory"

    def __init__(self, clock: Callable[[], int] | None = None):
        self.clock = clock or _wall_clock_ms
        self._nodes: dict[str, int] = {"/": 0}
        self._sequences: dict[str, int] = {}
        self._payloads: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def create(self, path: str, data: bytes = b"", *, sequential: bool = False, makepath: bool = False) -> str:
        with self._lock:
            parent = _parent(path)
            if parent not in self._nodes:
                if not makepath:
                    raise NoNodeError("Parent node does not exist", operation="create", path=path)
                self._create_ancestors(parent)

            if sequential:
                counter = self._sequences.get(parent, 0)
                self._sequences[parent] = counter + 1
                path = f"{path}{counter:0{SEQUENCE_WIDTH}d}"

            if path in self._nodes:
                raise NodeExistsError("Node already exists", operation="create", path=path)
            self._nodes[path] = self.clock()
            self._payloads[path] = data
            return path

    def list_children(self, path: str) -> list[str]:
        with self._lock:
            if path not in self._nodes:
                raise NoNodeError("Node does not exist", operation="list_children", path=path)
            prefix = "/" if path == "/" else f"{path}/"
            return [
                node[len(prefix) :]
                for node in self._nodes
                if node != path and node.startswith(prefix) and "/" not in node[len(prefix) :]
            ]

    def stat(self, path: str) -> NodeStat | None:
        with self._lock:
            created_ms = self._nodes.get(path)
            if created_ms is None:
                return None
            return NodeStat(path=path, created_ms=created_ms)

    def delete(self, path: str) -> None:
        with self._lock:
            if path not in self._nodes:
                raise NoNodeError("Node does not exist", operation="delete", path=path)
            prefix = f"{path}/"
            if any(node.startswith(prefix) for node in self._nodes):
                raise StoreError("Node has children", operation="delete", path=path)
            del self._nodes[path]
            self._payloads.pop(path, None)

    def read_data(self, path: str) -> bytes:
        with self._lock:
            if path not in self._nodes:
                raise NoNodeError("Node does not exist", operation="read_data", path=path)
            return self._payloads.get(path, b"")

    def exists(self, path: str) -> bool:
        with self._lock:
            return path in self._nodes

    def _create_ancestors(self, path: str) -> None:
        parts = [part for part in path.split("/") if part]
        current = ""
        for part in parts:
            current = f"{current}/{part}"
            self._nodes.setdefault(current, self.clock())
