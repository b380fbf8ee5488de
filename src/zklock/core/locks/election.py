"""Single-shot lock election over sequential nodes.

Every invocation runs the same five steps against the store:

1. ensure the lock root exists
2. reap attempt nodes of this lock older than the TTL
3. create its own sequential attempt node
4. list the siblings once and check whether its node sorts first
5. keep the node on a win, delete it on a loss

Only the sequential create is atomic. The sibling listing is a single
snapshot; nodes deleted by other processes afterwards do not change a
decision that has been made. A winner's node is never released
explicitly and stays in place until a later run reaps it, so a winner
whose work outlives the TTL can see a second winner appear.
"""

from __future__ import annotations

import json
import logging
import os
import socket
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from zklock.core.exceptions import (
    AttemptCreateError,
    NodeExistsError,
    NoNodeError,
    RootCreateError,
    StoreError,
    ZkLockError,
)
from zklock.core.locks.naming import (
    attempt_prefix,
    join_path,
    normalize_root,
    require_sequence,
    sibling_names,
    validate_lock_name,
)
from zklock.core.logging import with_log_context
from zklock.store.base import StoreClient


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class LockInfo:
    """Informational payload written into each attempt node.

    Ownership is defined by node order alone; this data is for operators
    inspecting the store and is never read back by the election.
    """

    lock_name: str
    pid: int
    host: str
    started_at: str
    version: int = 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_dict(), sort_keys=True).encode("utf-8")

    @classmethod
    def for_current_process(cls, lock_name: str) -> LockInfo:
        return cls(
            lock_name=lock_name,
            pid=os.getpid(),
            host=socket.gethostname(),
            started_at=datetime.now(UTC).isoformat(),
        )


class AcquireStatus(Enum):
    ACQUIRED = "acquired"
    LOST = "lost"
    ERROR = "error"


@dataclass
class ReapReport:
    """What one reaping pass saw and did."""

    examined: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    vanished: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass
class AcquireResult:
    status: AcquireStatus
    lock_path: str | None = None
    reaped: ReapReport | None = None
    cleaned_up: bool | None = None
    error: ZkLockError | None = None

    @property
    def acquired(self) -> bool:
        return self.status == AcquireStatus.ACQUIRED


# ==================== PROTOCOL STEPS ====================


def ensure_root(store: StoreClient, root: str, logger: logging.Logger | logging.LoggerAdapter | None = None) -> None:
    """Create the lock root, treating "already exists" as success.

    Raises:
        RootCreateError: If creation fails for any other reason
    """
    log = logger or logging.getLogger(__name__)
    root = normalize_root(root)
    if root == "/":
        return
    try:
        store.create(root, makepath=True)
        log.debug(f"Created lock root {root}")
    except NodeExistsError:
        log.debug(f"Lock root {root} already exists")
    except StoreError as e:
        raise RootCreateError(root, details=str(e), original_error=e) from e


def reap_stale_attempts(
    store: StoreClient,
    root: str,
    lock_name: str,
    ttl_seconds: int,
    *,
    now_ms: Callable[[], int] | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> ReapReport:
    """Delete attempt nodes of ``lock_name`` whose age exceeds ``ttl_seconds``.

    A node is deleted only when ``now - created > ttl``; a node exactly
    TTL old survives. Nodes that vanish between listing and stat, and
    deletes that fail, are skipped. Listing the root or a stat that fails
    for a reason other than a missing node raises ``StoreError``.

    Every child of the root is listed, whatever lock it belongs to, so
    the cost grows with all attempts under the root.
    """
    log = logger or logging.getLogger(__name__)
    clock = now_ms or _wall_clock_ms
    ttl_ms = ttl_seconds * 1000
    report = ReapReport()

    for name in sibling_names(store.list_children(root), lock_name):
        path = join_path(root, name)
        report.examined.append(path)

        node_stat = store.stat(path)
        if node_stat is None:
            log.debug(f"{path} vanished before it could be examined")
            report.vanished.append(path)
            continue

        age_ms = clock() - node_stat.created_ms
        if age_ms <= ttl_ms:
            continue

        log.debug(f"Reaping {path}: age {age_ms / 1000:.1f}s exceeds TTL {ttl_seconds}s")
        try:
            store.delete(path)
            report.deleted.append(path)
        except NoNodeError:
            log.debug(f"{path} was already reaped by another process")
            report.vanished.append(path)
        except StoreError as e:
            log.warning(f"Could not reap stale attempt {path}: {e}")
            report.failed.append(path)

    return report


def create_attempt(store: StoreClient, root: str, lock_name: str, payload: bytes = b"") -> str:
    """Create this process's sequential attempt node and return its full path.

    Raises:
        AttemptCreateError: If the store rejects the create or assigns a
            name without a fixed-width sequence suffix
    """
    try:
        path = store.create(join_path(root, attempt_prefix(lock_name)), payload, sequential=True)
    except StoreError as e:
        raise AttemptCreateError(lock_name, root, details=str(e), original_error=e) from e
    try:
        require_sequence(path, lock_name)
    except ZkLockError as e:
        raise AttemptCreateError(lock_name, root, details=str(e), original_error=e) from e
    return path


def is_leader(store: StoreClient, my_path: str, root: str, lock_name: str) -> bool:
    """Return True if ``my_path`` is the first attempt of ``lock_name`` in one listing."""
    siblings = sibling_names(store.list_children(root), lock_name)
    if not siblings:
        return False
    return my_path == join_path(root, siblings[0])


def release_on_loss(
    store: StoreClient, my_path: str, logger: logging.Logger | logging.LoggerAdapter | None = None
) -> bool:
    """Delete this process's losing attempt node. Failures are logged, not raised."""
    log = logger or logging.getLogger(__name__)
    try:
        store.delete(my_path)
        log.debug(f"Removed losing attempt {my_path}")
        return True
    except NoNodeError:
        log.debug(f"Losing attempt {my_path} was already removed")
        return True
    except StoreError as e:
        log.warning(f"Could not remove losing attempt {my_path}: {e}")
        return False


# ==================== ELECTION ====================


class LockElection:
    """Runs one lock election for ``lock_name`` under ``root``."""

    def __init__(
        self,
        store: StoreClient,
        *,
        lock_name: str,
        root: str,
        ttl_seconds: int,
        now_ms: Callable[[], int] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.store = store
        self.lock_name = validate_lock_name(lock_name)
        self.root = normalize_root(root)
        self.ttl_seconds = ttl_seconds
        self.now_ms = now_ms or _wall_clock_ms
        self.logger = with_log_context(
            logger or logging.getLogger(__name__), lock_name=self.lock_name, root=self.root
        )

    def acquire(self) -> AcquireResult:
        """Run the election once. Never raises for store or protocol failures.

        Fatal errors stop the remaining steps and come back as
        ``AcquireStatus.ERROR``; an attempt node created before the error
        is left for a later reap.
        """
        log = self.logger
        lock_path: str | None = None
        report: ReapReport | None = None
        try:
            log.debug(f"Ensuring lock root {self.root} exists")
            ensure_root(self.store, self.root, logger=log)

            log.debug(f"Reaping attempts of '{self.lock_name}' older than {self.ttl_seconds}s")
            report = reap_stale_attempts(
                self.store, self.root, self.lock_name, self.ttl_seconds, now_ms=self.now_ms, logger=log
            )
            log.debug(
                f"Examined {len(report.examined)} attempt(s), reaped {len(report.deleted)}",
                extra={"reaped": report.deleted},
            )

            payload = LockInfo.for_current_process(self.lock_name).to_bytes()
            lock_path = create_attempt(self.store, self.root, self.lock_name, payload)
            log.debug(f"Created attempt {lock_path}")

            won = is_leader(self.store, lock_path, self.root, self.lock_name)
        except ZkLockError as e:
            log.error(f"Lock election for '{self.lock_name}' failed: {e}")
            return AcquireResult(status=AcquireStatus.ERROR, lock_path=lock_path, reaped=report, error=e)

        if won:
            log.info(f"Acquired lock '{self.lock_name}' as {lock_path}")
            return AcquireResult(status=AcquireStatus.ACQUIRED, lock_path=lock_path, reaped=report)

        log.info(f"Lock '{self.lock_name}' is held by another process")
        cleaned_up = release_on_loss(self.store, lock_path, logger=log)
        return AcquireResult(status=AcquireStatus.LOST, lock_path=lock_path, reaped=report, cleaned_up=cleaned_up)
