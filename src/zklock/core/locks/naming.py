"""Attempt-node naming and sequence ordering.

Attempt nodes are named ``<lock_name>.<sequence>`` where the store
assigns ``<sequence>`` as a zero-padded decimal of ``SEQUENCE_WIDTH``
digits. Ranking siblings by name is only correct while that width is
fixed, so every name is checked against it before it takes part in
reaping or leadership.
"""

from __future__ import annotations

import re

from zklock.core.constants import SEQUENCE_SEPARATOR, SEQUENCE_WIDTH
from zklock.core.exceptions import ConfigurationError, SequenceFormatError

_SEQUENCE_PATTERN = re.compile(rf"[0-9]{{{SEQUENCE_WIDTH}}}")


def normalize_root(root: str) -> str:
    """Strip trailing slashes; the bare root stays "/"."""
    stripped = root.rstrip("/")
    return stripped or "/"


def join_path(root: str, name: str) -> str:
    root = normalize_root(root)
    if root == "/":
        return f"/{name}"
    return f"{root}/{name}"


def validate_lock_name(lock_name: str) -> str:
    """Return the lock name if it can be used as a single path component.

    Raises:
        ConfigurationError: If the name is empty or contains "/"
    """
    if not lock_name or not lock_name.strip():
        raise ConfigurationError("Lock name cannot be empty", field="lock_name")
    if "/" in lock_name:
        raise ConfigurationError(f"Lock name '{lock_name}' cannot contain '/'", field="lock_name")
    if lock_name in {".", ".."}:
        raise ConfigurationError(f"Lock name '{lock_name}' is reserved", field="lock_name")
    return lock_name


def attempt_prefix(lock_name: str) -> str:
    return f"{lock_name}{SEQUENCE_SEPARATOR}"


def parse_sequence(name: str, lock_name: str) -> int | None:
    """Return the sequence number of an attempt node of ``lock_name``.

    Returns None when ``name`` is not ``lock_name`` followed by the
    separator and exactly ``SEQUENCE_WIDTH`` digits. This keeps attempts
    of other locks that share the prefix (e.g. ``jobs.nightly.0000000001``
    when ranking ``jobs``) out of the sibling set.
    """
    prefix = attempt_prefix(lock_name)
    if not name.startswith(prefix):
        return None
    suffix = name[len(prefix) :]
    if not _SEQUENCE_PATTERN.fullmatch(suffix):
        return None
    return int(suffix)


def require_sequence(path: str, lock_name: str) -> int:
    """Return the sequence number of a full attempt path returned by the store.

    Raises:
        SequenceFormatError: If the store did not assign a fixed-width suffix
    """
    name = path.rsplit("/", 1)[-1]
    sequence = parse_sequence(name, lock_name)
    if sequence is None:
        raise SequenceFormatError(name, lock_name)
    return sequence


def sibling_names(children: list[str], lock_name: str) -> list[str]:
    """Filter ``children`` to attempts of ``lock_name``, in ascending order.

    Names are compared as strings; the fixed-width check above makes that
    the same order as comparing sequence numbers.
    """
    return sorted(name for name in children if parse_sequence(name, lock_name) is not None)
