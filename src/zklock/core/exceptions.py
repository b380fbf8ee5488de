"""Custom exceptions for zklock.

All exception classes carry a short message plus optional details so the
CLI can print one actionable line before exiting with a failure status.
"""


class ZkLockError(Exception):
    """Base exception for all zklock errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(ZkLockError):
    """Exception raised for configuration-related errors.

    Examples:
        - Explicitly requested config file does not exist
        - Invalid JSON in config file
        - Unknown environment name
        - Out-of-range TTL, timeout or port
    """

    def __init__(
        self, message: str, config_file: str | None = None, field: str | None = None, details: str | None = None
    ):
        self.config_file = config_file
        self.field = field
        super().__init__(message, details)


class StoreError(ZkLockError):
    """Exception raised when a coordination store call fails.

    Wraps client library errors with the operation and node path
    that were involved.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        path: str | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.operation = operation
        self.path = path
        self.original_error = original_error
        super().__init__(message, details)

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"during {self.operation}")
        if self.path:
            parts.append(f"on {self.path}")
        if self.details:
            parts.append(self.details)
        return " - ".join(parts)


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached.

    Covers failed connection attempts, lost connections, expired
    sessions and request timeouts.
    """

    pass


class NoNodeError(StoreError):
    """Raised when the target node does not exist."""

    pass


class NodeExistsError(StoreError):
    """Raised when creating a node whose path is already taken."""

    pass


class RootCreateError(ZkLockError):
    """Exception raised when the lock root cannot be created.

    "Already exists" is not an error; anything else (connection loss,
    missing permissions) aborts the election.
    """

    def __init__(self, root: str, details: str | None = None, original_error: Exception | None = None):
        self.root = root
        self.original_error = original_error
        super().__init__(f"Cannot create lock root '{root}'", details)


class AttemptCreateError(ZkLockError):
    """Exception raised when the sequential attempt node cannot be created."""

    def __init__(
        self,
        lock_name: str,
        root: str,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.lock_name = lock_name
        self.root = root
        self.original_error = original_error
        super().__init__(f"Cannot create attempt node for lock '{lock_name}' under '{root}'", details)


class SequenceFormatError(ZkLockError):
    """Raised when a node name does not carry a fixed-width sequence suffix."""

    def __init__(self, name: str, lock_name: str):
        self.name = name
        self.lock_name = lock_name
        super().__init__(f"'{name}' is not a sequenced attempt node of lock '{lock_name}'")
