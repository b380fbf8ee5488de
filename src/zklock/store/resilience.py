"""Opt-in retry for store calls.

The default is a single attempt per call: a failure or timeout is a
final loss and the caller's scheduler provides retry by re-invoking the
tool. When ``RetryConfig.max_retries`` is raised, transient store
failures are retried with exponential backoff.
"""

import functools
import logging
import random
import time
from collections.abc import Callable
from typing import Any, TypeVar

from zklock.core.config import RetryConfig
from zklock.core.constants import DEFAULT_RETRY
from zklock.core.exceptions import StoreUnavailableError
from zklock.store.base import NodeStat, StoreClient

T = TypeVar("T")

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (StoreUnavailableError,)


def retry_with_backoff(
    config: RetryConfig | None = None,
    retryable_exceptions: tuple[type[Exception], ...] | None = None,
    logger: logging.Logger | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that retries transient failures with exponential backoff.

    Args:
        config: Retry settings (default: no retries)
        retryable_exceptions: Exception types to retry (default: StoreUnavailableError)
        logger: Logger instance for retry messages

    Returns:
        Decorated function with retry capability

    Backoff Formula:
        delay = min(base_delay * (exponential_base ** attempt), max_delay)
        if jitter: delay = delay * random.uniform(0.5, 1.5)
    """
    _config = config or DEFAULT_RETRY
    _retryable = retryable_exceptions if retryable_exceptions is not None else RETRYABLE_EXCEPTIONS

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            _logger = logger or logging.getLogger(__name__)
            attempts = _config.max_retries + 1

            for attempt in range(attempts):
                try:
                    result = func(*args, **kwargs)
                    if attempt > 0:
                        _logger.info(f"{func.__name__} succeeded on attempt {attempt + 1}/{attempts}")
                    return result
                except _retryable as e:
                    if attempt == _config.max_retries:
                        _logger.error(f"All {attempts} attempts failed for {func.__name__}: {e!s}")
                        raise

                    delay = min(_config.base_delay * (_config.exponential_base**attempt), _config.max_delay)
                    if _config.jitter:
                        delay = delay * random.uniform(0.5, 1.5)

                    _logger.warning(
                        f"{func.__name__} attempt {attempt + 1}/{attempts} failed: {e!s}. Retrying in {delay:.1f}s..."
                    )
                    time.sleep(delay)

            raise RuntimeError(f"Retry loop exited unexpectedly for {func.__name__}")

        return wrapper

    return decorator


class RetryingStore:
    """Store wrapper that retries idempotent calls on transient failures.

    Sequential creates are passed through untouched: if the reply to a
    create is lost, a retry would leave a second attempt node behind.
    """

    def __init__(self, store: StoreClient, config: RetryConfig, logger: logging.Logger | None = None):
        self.store = store
        self.config = config
        self.name = f"{store.name}+retry"
        retry = retry_with_backoff(config, logger=logger)
        self._create = retry(store.create)
        self._list_children = retry(store.list_children)
        self._stat = retry(store.stat)
        self._delete = retry(store.delete)

    def create(self, path: str, data: bytes = b"", *, sequential: bool = False, makepath: bool = False) -> str:
        if sequential:
            return self.store.create(path, data, sequential=True, makepath=makepath)
        return self._create(path, data, sequential=False, makepath=makepath)

    def list_children(self, path: str) -> list[str]:
        return self._list_children(path)

    def stat(self, path: str) -> NodeStat | None:
        return self._stat(path)

    def delete(self, path: str) -> None:
        self._delete(path)


def with_retry(store: StoreClient, config: RetryConfig, logger: logging.Logger | None = None) -> StoreClient:
    """Wrap ``store`` in a RetryingStore only when retries are enabled."""
    if not config.enabled:
        return store
    return RetryingStore(store, config, logger=logger)
