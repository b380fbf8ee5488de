"""Coordination store backends.

The election talks to the store only through the ``StoreClient``
protocol; ``KazooStore`` is the production backend and ``MemoryStore``
backs tests and embedding.
"""

from zklock.store.base import NodeStat, StoreClient
from zklock.store.memory import MemoryStore
from zklock.store.resilience import RetryingStore, retry_with_backoff, with_retry

__all__ = [
    "MemoryStore",
    "NodeStat",
    "RetryingStore",
    "StoreClient",
    "retry_with_backoff",
    "with_retry",
]
