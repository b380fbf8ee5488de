"""Constants and default values for zklock.

This module centralizes the magic numbers and names used throughout
the application.
"""

from zklock.core.config import LogConfig, RetryConfig

# ==================== SEQUENCE NAMING ====================

# Width of store-assigned sequence suffixes ("%010d"); fixed width makes
# lexicographic order of attempt names equal to numeric order.
SEQUENCE_WIDTH: int = 10

# Separator between the lock name and its sequence suffix
SEQUENCE_SEPARATOR: str = "."

# ==================== CONFIG FILE ====================

DEFAULT_CONFIG_FILE: str = "~/.zklock.json"
DEFAULT_ENVIRONMENT: str = "default"
CONFIG_FILE_ENV_VAR: str = "ZKLOCK_CONFIG"
ENVIRONMENT_ENV_VAR: str = "ZKLOCK_ENV"

# ==================== EXIT CODES ====================

EXIT_ACQUIRED: int = 0
EXIT_FAILED: int = 1

# ==================== LOGGING DEFAULTS ====================

DEFAULT_LOG = LogConfig()
LOG_FILE_MAX_BYTES: int = DEFAULT_LOG.file_max_bytes
LOG_FILE_BACKUP_COUNT: int = DEFAULT_LOG.file_backup_count
LOGGER_NAME: str = "zklock"

# ==================== RETRY DEFAULTS ====================

DEFAULT_RETRY = RetryConfig()
