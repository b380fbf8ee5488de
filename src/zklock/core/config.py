"""Configuration dataclasses for zklock.

These dataclasses centralize all configuration options for type safety
and easy testing. They are built from command-line arguments layered over
a config-file environment, or used directly in code.

Precedence for every field: explicit flag > config-file value > built-in default.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 2181
DEFAULT_ROOT = "/zklock"
DEFAULT_TTL_SECONDS = 30
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass
class RetryConfig:
    """Configuration for the opt-in retry policy.

    Retries are disabled by default: every store call is attempted once
    and any failure is final. Callers rely on outer scheduling for retry.

    Attributes:
        max_retries: Maximum number of retry attempts (default: 0)
        base_delay: Initial delay in seconds (default: 0.5)
        max_delay: Maximum delay cap in seconds (default: 5.0)
        exponential_base: Multiplier for exponential backoff (default: 2)
        jitter: Add randomization to delays (default: True)
    """

    max_retries: int = 0
    base_delay: float = 0.5
    max_delay: float = 5.0
    exponential_base: int = 2
    jitter: bool = True

    @property
    def enabled(self) -> bool:
        return self.max_retries > 0


@dataclass
class LogConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level string (default: "WARNING", "DEBUG" when verbose)
        format: "text" or "json" (default: "text")
        file: Optional path of a rotating log file
        file_max_bytes: Maximum size per log file (default: 10MB)
        file_backup_count: Number of backup log files (default: 5)
    """

    level: str = "WARNING"
    format: str = "text"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class StoreConfig:
    """Connection settings for the coordination store.

    Attributes:
        hosts: Endpoints as "host:port"; only the first one is connected to
        timeout_seconds: Bound on connecting and on each request
        auth: Optional "scheme:credential" pair, e.g. "digest:user:password"
    """

    hosts: list[str] = field(default_factory=lambda: [f"{DEFAULT_HOST}:{DEFAULT_PORT}"])
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    auth: str | None = None

    @property
    def endpoint(self) -> str:
        return self.hosts[0]

    @property
    def unused_hosts(self) -> list[str]:
        return self.hosts[1:]

    def auth_data(self) -> list[tuple[str, str]] | None:
        if not self.auth:
            return None
        scheme, _, credential = self.auth.partition(":")
        return [(scheme, credential)]


@dataclass
class LockConfig:
    """Settings of the lock election itself.

    Attributes:
        root: Path under which all attempt nodes live
        ttl_seconds: Age beyond which an attempt node is reaped
    """

    root: str = DEFAULT_ROOT
    ttl_seconds: int = DEFAULT_TTL_SECONDS


@dataclass
class ZkLockConfig:
    """Master configuration for one lock invocation."""

    lock_name: str = ""
    environment: str = "default"
    config_file: str | None = None
    store: StoreConfig = field(default_factory=StoreConfig)
    lock: LockConfig = field(default_factory=LockConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @classmethod
    def from_sources(cls, args: argparse.Namespace, environment: Any = None) -> ZkLockConfig:
        """Create configuration from parsed arguments layered over a config-file environment.

        Args:
            args: Parsed command-line arguments; ``None`` values mean "not given"
            environment: Resolved ``EnvironmentSettings`` from the config file, if any

        Returns:
            Fully resolved configuration
        """
        hosts = list(environment.servers) if environment is not None and environment.servers else []
        if not hosts:
            hosts = [f"{DEFAULT_HOST}:{DEFAULT_PORT}"]
        hosts[0] = _override_endpoint(hosts[0], getattr(args, "host", None), getattr(args, "port", None))

        def _pick(arg_name: str, env_attr: str, default: Any) -> Any:
            value = getattr(args, arg_name, None)
            if value is not None:
                return value
            if environment is not None and getattr(environment, env_attr, None) is not None:
                return getattr(environment, env_attr)
            return default

        verbose = getattr(args, "verbose", False)
        return cls(
            lock_name=getattr(args, "lock_name", ""),
            environment=environment.name if environment is not None else "default",
            config_file=environment.config_file if environment is not None else None,
            store=StoreConfig(
                hosts=hosts,
                timeout_seconds=float(_pick("timeout", "timeout", DEFAULT_TIMEOUT_SECONDS)),
                auth=environment.auth if environment is not None else None,
            ),
            lock=LockConfig(
                root=_pick("root", "root", DEFAULT_ROOT),
                ttl_seconds=int(_pick("ttl", "ttl", DEFAULT_TTL_SECONDS)),
            ),
            retry=RetryConfig(max_retries=getattr(args, "retries", None) or 0),
            log=LogConfig(
                level="DEBUG" if verbose else "WARNING",
                format=getattr(args, "log_format", None) or "text",
                file=getattr(args, "log_file", None),
            ),
        )


def _override_endpoint(endpoint: str, host: str | None, port: int | None) -> str:
    """Apply --host/--port overrides to a "host:port" endpoint."""
    current_host, sep, current_port = endpoint.rpartition(":")
    if not sep:
        current_host, current_port = endpoint, str(DEFAULT_PORT)
    new_host = host if host else current_host
    new_port = str(port) if port is not None else current_port
    return f"{new_host}:{new_port}"
