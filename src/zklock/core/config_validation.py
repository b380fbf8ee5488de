"""Configuration validation helpers for zklock."""

from __future__ import annotations

from zklock.core.config import ZkLockConfig
from zklock.core.exceptions import ConfigurationError


class ConfigValidator:
    """Provides field-level validation with readable error messages."""

    @staticmethod
    def validate_ttl(ttl_seconds: int) -> tuple[bool, str | None]:
        if ttl_seconds < 1:
            return False, f"TTL must be at least 1 second, got {ttl_seconds}"
        return True, None

    @staticmethod
    def validate_timeout(timeout_seconds: float) -> tuple[bool, str | None]:
        if timeout_seconds <= 0:
            return False, f"Timeout must be positive, got {timeout_seconds}"
        return True, None

    @staticmethod
    def validate_retries(max_retries: int) -> tuple[bool, str | None]:
        if max_retries < 0:
            return False, f"Retries cannot be negative, got {max_retries}"
        return True, None

    @staticmethod
    def validate_root(root: str) -> tuple[bool, str | None]:
        """
        Validate the lock root path.

        Args:
            root: Absolute store path, e.g. "/zklock"

        Returns:
            Tuple of (is_valid, error_message). error_message is None if valid.
        """
        if not root or not root.startswith("/"):
            return False, f"Lock root must be an absolute path starting with '/', got '{root}'"
        if "//" in root:
            return False, f"Lock root '{root}' contains an empty path component"
        return True, None

    @staticmethod
    def validate_endpoint(endpoint: str) -> tuple[bool, str | None]:
        """
        Validate a "host:port" endpoint.

        Args:
            endpoint: Endpoint string

        Returns:
            Tuple of (is_valid, error_message). error_message is None if valid.
        """
        host, sep, port = endpoint.rpartition(":")
        if not sep or not host:
            return False, f"Endpoint '{endpoint}' must have the form host:port"
        if not port.isdigit() or not 1 <= int(port) <= 65535:
            return False, f"Endpoint '{endpoint}' has an invalid port (expected 1-65535)"
        return True, None

    @staticmethod
    def validate_auth(auth: str | None) -> tuple[bool, str | None]:
        if auth is None:
            return True, None
        scheme, sep, credential = auth.partition(":")
        if not sep or not scheme or not credential:
            return False, "Auth must have the form scheme:credential (e.g. digest:user:password)"
        return True, None


def validate_config(config: ZkLockConfig) -> None:
    """Validate a resolved configuration.

    Raises:
        ConfigurationError: On the first invalid field
    """
    checks = [
        ("ttl", ConfigValidator.validate_ttl(config.lock.ttl_seconds)),
        ("timeout", ConfigValidator.validate_timeout(config.store.timeout_seconds)),
        ("retries", ConfigValidator.validate_retries(config.retry.max_retries)),
        ("root", ConfigValidator.validate_root(config.lock.root)),
        ("servers", ConfigValidator.validate_endpoint(config.store.endpoint)),
        ("auth", ConfigValidator.validate_auth(config.store.auth)),
    ]
    for field_name, (is_valid, error) in checks:
        if not is_valid:
            raise ConfigurationError(error or "Invalid configuration", config_file=config.config_file, field=field_name)
