"""CLI entrypoint."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from zklock.cli.parser import parse_arguments
from zklock.core.config import ZkLockConfig
from zklock.core.config_validation import validate_config
from zklock.core.constants import EXIT_ACQUIRED, EXIT_FAILED
from zklock.core.environments import EnvironmentResolver
from zklock.core.exceptions import ZkLockError
from zklock.core.locks.election import LockElection
from zklock.core.locks.naming import validate_lock_name
from zklock.core.logging import setup_logging
from zklock.store.resilience import with_retry
from zklock.store.zookeeper import connect_store


def main(argv: Sequence[str] | None = None) -> int:
    """Run one lock election and return the process exit code."""
    args = parse_arguments(argv)

    log_config = ZkLockConfig.from_sources(args).log
    logger = setup_logging(log_config.level, log_config.format, log_config.file)

    try:
        validate_lock_name(args.lock_name)
        environment = EnvironmentResolver(logger).resolve(config_file=args.config, environment=args.env)
        config = ZkLockConfig.from_sources(args, environment)
        validate_config(config)
        if config.store.unused_hosts:
            logger.debug(f"Only the first endpoint is used; ignoring {', '.join(config.store.unused_hosts)}")

        logger.debug(
            f"Lock '{config.lock_name}' under {config.lock.root} on {config.store.endpoint} "
            f"(TTL {config.lock.ttl_seconds}s, environment '{config.environment}')"
        )

        with connect_store(config.store, logger=logger) as store:
            election = LockElection(
                with_retry(store, config.retry, logger=logger),
                lock_name=config.lock_name,
                root=config.lock.root,
                ttl_seconds=config.lock.ttl_seconds,
                logger=logger,
            )
            result = election.acquire()
    except ZkLockError as e:
        logger.error(str(e))
        return EXIT_FAILED

    if result.acquired:
        logger.debug(f"Lock acquired: {result.lock_path}")
        return EXIT_ACQUIRED
    logger.debug(f"Lock not acquired ({result.status.value})")
    return EXIT_FAILED


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
