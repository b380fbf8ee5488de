"""ZooKeeper store backend built on kazoo."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator

from kazoo.client import KazooClient
from kazoo.exceptions import (
    ConnectionLoss,
    KazooException,
    NoAuthError,
    OperationTimeoutError,
    SessionExpiredError,
)
from kazoo.exceptions import NodeExistsError as KazooNodeExistsError
from kazoo.exceptions import NoNodeError as KazooNoNodeError
from kazoo.handlers.threading import KazooTimeoutError

from zklock.core.config import StoreConfig
from zklock.core.exceptions import NodeExistsError, NoNodeError, StoreError, StoreUnavailableError
from zklock.store.base import NodeStat

_UNAVAILABLE_ERRORS = (ConnectionLoss, SessionExpiredError, OperationTimeoutError, KazooTimeoutError)


@contextlib.contextmanager
def _translate_errors(operation: str, path: str) -> Iterator[None]:
    """Map kazoo exceptions onto the store error hierarchy."""
    try:
        yield
    except KazooNoNodeError as e:
        raise NoNodeError("Node does not exist", operation=operation, path=path, original_error=e) from e
    except KazooNodeExistsError as e:
        raise NodeExistsError("Node already exists", operation=operation, path=path, original_error=e) from e
    except _UNAVAILABLE_ERRORS as e:
        raise StoreUnavailableError(
            "ZooKeeper unavailable", operation=operation, path=path, details=type(e).__name__, original_error=e
        ) from e
    except NoAuthError as e:
        raise StoreError("Not authorized", operation=operation, path=path, original_error=e) from e
    except KazooException as e:
        raise StoreError(
            "ZooKeeper request failed", operation=operation, path=path, details=type(e).__name__, original_error=e
        ) from e


class KazooStore:
    """Store backend that forwards each call to a started ``KazooClient``.

    Calls go through the async API so every request is bounded by
    ``timeout_seconds``; an expired wait surfaces as ``StoreUnavailableError``.
    """

    name = "zookeeper"

    def __init__(self, client: KazooClient, timeout_seconds: float | None = None):
        self.client = client
        self.timeout_seconds = timeout_seconds

    def create(self, path: str, data: bytes = b"", *, sequential: bool = False, makepath: bool = False) -> str:
        with _translate_errors("create", path):
            result = self.client.create_async(path, data, sequence=sequential, makepath=makepath)
            return result.get(timeout=self.timeout_seconds)

    def list_children(self, path: str) -> list[str]:
        with _translate_errors("list_children", path):
            return list(self.client.get_children_async(path).get(timeout=self.timeout_seconds))

    def stat(self, path: str) -> NodeStat | None:
        with _translate_errors("stat", path):
            znode_stat = self.client.exists_async(path).get(timeout=self.timeout_seconds)
        if znode_stat is None:
            return None
        return NodeStat(path=path, created_ms=int(znode_stat.ctime))

    def delete(self, path: str) -> None:
        with _translate_errors("delete", path):
            self.client.delete_async(path).get(timeout=self.timeout_seconds)


def build_client(config: StoreConfig) -> KazooClient:
    """Create an unstarted client for the first configured endpoint."""
    return KazooClient(
        hosts=config.endpoint,
        timeout=config.timeout_seconds,
        auth_data=config.auth_data(),
    )


@contextlib.contextmanager
def connect_store(config: StoreConfig, logger: logging.Logger | None = None) -> Iterator[KazooStore]:
    """Connect to ZooKeeper for the duration of the block.

    Raises:
        StoreUnavailableError: If no session is established within the timeout
    """
    log = logger or logging.getLogger(__name__)
    client = build_client(config)
    log.debug(f"Connecting to {config.endpoint} (timeout {config.timeout_seconds}s)")
    try:
        client.start(timeout=config.timeout_seconds)
    except (KazooTimeoutError, KazooException) as e:
        with contextlib.suppress(KazooException):
            client.stop()
            client.close()
        raise StoreUnavailableError(
            f"Cannot connect to {config.endpoint}", operation="connect", details=str(e), original_error=e
        ) from e

    try:
        yield KazooStore(client, timeout_seconds=config.timeout_seconds)
    finally:
        with contextlib.suppress(KazooException):
            client.stop()
            client.close()
        log.debug(f"Disconnected from {config.endpoint}")
