"""Lock election over sequential store nodes.

This package holds the election protocol and the attempt-node naming
rules it depends on, independent of any particular store backend.
"""

from zklock.core.locks.election import (
    AcquireResult,
    AcquireStatus,
    LockElection,
    LockInfo,
    ReapReport,
    create_attempt,
    ensure_root,
    is_leader,
    reap_stale_attempts,
    release_on_loss,
)
from zklock.core.locks.naming import (
    attempt_prefix,
    join_path,
    normalize_root,
    parse_sequence,
    sibling_names,
    validate_lock_name,
)

__all__ = [
    "AcquireResult",
    "AcquireStatus",
    "LockElection",
    "LockInfo",
    "ReapReport",
    "attempt_prefix",
    "create_attempt",
    "ensure_root",
    "is_leader",
    "join_path",
    "normalize_root",
    "parse_sequence",
    "reap_stale_attempts",
    "release_on_loss",
    "sibling_names",
    "validate_lock_name",
]
