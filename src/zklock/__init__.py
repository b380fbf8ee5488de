"""
zklock - single-shot distributed locks on ZooKeeper

Lets exactly one of several processes started around the same time
(e.g. the same cron job on many hosts) proceed, by racing sequential
nodes under a shared lock root.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from zklock.core.version import __version__

__all__ = ["__version__", "main"]

if TYPE_CHECKING:
    from zklock.cli.main import main


def __getattr__(name: str) -> Any:
    if name == "main":
        from zklock.cli.main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
