"""CLI argument parsing."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from zklock.core.constants import EXIT_FAILED
from zklock.core.version import __version__

# Attempt to load argcomplete for shell tab-completion (optional dependency)
_ARGCOMPLETE_AVAILABLE = False
try:
    import argcomplete

    _ARGCOMPLETE_AVAILABLE = True
except ImportError:
    pass  # argcomplete not installed


class LockArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with the tool's single failure status."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILED, f"{self.prog}: error: {message}\n")


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Options that are not given stay ``None`` so config-file values and
    built-in defaults can fill them in later.
    """
    parser = LockArgumentParser(
        prog="zklock",
        description="Acquire a single-shot distributed lock in ZooKeeper. "
        "Exits 0 if this process won the lock, 1 otherwise.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the nightly job on one host only
  zklock nightly-report && ./nightly-report.sh

  # Use the staging environment from ~/.zklock.json
  zklock --env staging nightly-report

  # Bypass the config file
  zklock --host zk1.example.com --port 2181 --root /locks nightly-report

  # Longer TTL with step-by-step diagnostics
  zklock --ttl 300 --verbose nightly-report

Note:
  The lock is never renewed. A winner whose work outlives the TTL can be
  reaped by a later run, and that run can win too. Pick a TTL longer than
  the job plus any clock drift between hosts.
""",
    )

    parser.add_argument("lock_name", metavar="LOCKNAME", help="Name of the contested resource")

    config_group = parser.add_argument_group("Configuration")
    config_group.add_argument(
        "-c", "--config", metavar="PATH", help="Config file (default: $ZKLOCK_CONFIG or ~/.zklock.json)"
    )
    config_group.add_argument(
        "-e",
        "--env",
        metavar="NAME",
        help="Environment in the config file (default: $ZKLOCK_ENV, the file's default_environment, or 'default')",
    )

    lock_group = parser.add_argument_group("Lock")
    lock_group.add_argument("-t", "--ttl", type=int, metavar="SECONDS", help="Lock TTL in seconds (default: 30)")
    lock_group.add_argument("-r", "--root", metavar="PATH", help="Lock root path (default: /zklock)")

    store_group = parser.add_argument_group("ZooKeeper")
    store_group.add_argument("-H", "--host", help="ZooKeeper host (overrides the first configured endpoint)")
    store_group.add_argument("-p", "--port", type=int, help="ZooKeeper port (default: 2181)")
    store_group.add_argument(
        "--timeout", type=float, metavar="SECONDS", help="Connect and request timeout (default: 10)"
    )
    store_group.add_argument(
        "--retries",
        type=int,
        metavar="N",
        help="Retry transient store failures N times with backoff (default: 0, fail fast)",
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("-v", "--verbose", action="store_true", help="Print each protocol step")
    output_group.add_argument(
        "--log-format", choices=["text", "json"], default="text", help="Diagnostic output format (default: text)"
    )
    output_group.add_argument("--log-file", metavar="PATH", help="Also write diagnostics to a rotating log file")
    output_group.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Enable shell tab-completion if argcomplete is installed
    if _ARGCOMPLETE_AVAILABLE:
        argcomplete.autocomplete(parser)

    return parser.parse_args(argv)
