"""Core module - Foundation components shared by the CLI and the election.

This module provides the basic building blocks used throughout the application:
- Version information
- Custom exceptions
- Configuration dataclasses and validation
- Constants and defaults
"""

from zklock.core.version import __version__

from zklock.core.exceptions import (
    ZkLockError,
    ConfigurationError,
    StoreError,
    StoreUnavailableError,
    NoNodeError,
    NodeExistsError,
    RootCreateError,
    AttemptCreateError,
    SequenceFormatError,
)

from zklock.core.config import (
    RetryConfig,
    LogConfig,
    StoreConfig,
    LockConfig,
    ZkLockConfig,
)

from zklock.core.config_validation import ConfigValidator, validate_config

from zklock.core.constants import (
    SEQUENCE_WIDTH,
    SEQUENCE_SEPARATOR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_ENVIRONMENT,
    CONFIG_FILE_ENV_VAR,
    ENVIRONMENT_ENV_VAR,
    EXIT_ACQUIRED,
    EXIT_FAILED,
)

__all__ = [
    # Version
    '__version__',
    # Exceptions
    'ZkLockError',
    'ConfigurationError',
    'StoreError',
    'StoreUnavailableError',
    'NoNodeError',
    'NodeExistsError',
    'RootCreateError',
    'AttemptCreateError',
    'SequenceFormatError',
    # Config dataclasses
    'RetryConfig',
    'LogConfig',
    'StoreConfig',
    'LockConfig',
    'ZkLockConfig',
    'ConfigValidator',
    'validate_config',
    # Constants
    'SEQUENCE_WIDTH',
    'SEQUENCE_SEPARATOR',
    'DEFAULT_CONFIG_FILE',
    'DEFAULT_ENVIRONMENT',
    'CONFIG_FILE_ENV_VAR',
    'ENVIRONMENT_ENV_VAR',
    'EXIT_ACQUIRED',
    'EXIT_FAILED',
]
