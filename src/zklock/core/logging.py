"""Logging helpers for zklock."""

import contextlib
import json
import logging
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler

from zklock.core.constants import LOG_FILE_BACKUP_COUNT, LOG_FILE_MAX_BYTES, LOGGER_NAME

_LOG_RECORD_RESERVED_FIELDS = set(logging.makeLogRecord({}).__dict__.keys()) | {"message", "asctime", "extra_fields"}
_REDACTION_FLAG_ATTR = "_zklock_redacted"
_REDACTION_MARKER = object()
_SENSITIVE_FIELD_NAMES = {
    "auth",
    "auth_data",
    "password",
    "passwd",
    "secret",
    "token",
    "credential",
    "credentials",
}
_REDACTED_VALUE = "[REDACTED]"
_SENSITIVE_KEY_REGEX = r"auth[_-]?data|auth|password|passwd|secret|token|credentials?"
_MESSAGE_VALUE_REGEX = r"""
(?:
    "(?:[^"\\]|\\.)*" |
    '(?:[^'\\]|\\.)*' |
    [^,\s;}\]]+
)
"""
_SENSITIVE_KEY_VALUE_PATTERN = re.compile(
    rf"""(?ix)
    (?P<full_key>["']?(?<![A-Za-z0-9_])(?:{_SENSITIVE_KEY_REGEX})(?![A-Za-z0-9_])["']?)
    (?P<separator>\s*[:=]\s*)
    (?P<value>{_MESSAGE_VALUE_REGEX})
    """
)
# ZooKeeper digest credentials ("digest:user:password") wherever they appear
_DIGEST_PATTERN = re.compile(r"(?i)\b(digest):([^:\s,;]+):(\S+)")


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:
        return "<unprintable>"


def _safe_record_message(record: logging.LogRecord) -> str:
    try:
        return record.getMessage()
    except Exception:
        return f"{_safe_str(getattr(record, 'msg', ''))} [log-message-format-error]"


def _is_record_redacted(record: logging.LogRecord) -> bool:
    return record.__dict__.get(_REDACTION_FLAG_ATTR) is _REDACTION_MARKER


def _mark_record_redacted(record: logging.LogRecord) -> None:
    record.__dict__[_REDACTION_FLAG_ATTR] = _REDACTION_MARKER


def _is_reserved_or_private_record_key(key: object) -> bool:
    if not isinstance(key, str):
        return True
    return key in _LOG_RECORD_RESERVED_FIELDS or key.startswith("_")


def _is_sensitive_field(name: str) -> bool:
    normalized = re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")
    if normalized in _SENSITIVE_FIELD_NAMES:
        return True
    parts = [part for part in normalized.split("_") if part]
    return any(part in {"password", "passwd", "secret", "token"} for part in parts)


def _redact_captured_value(value: str) -> str:
    if len(value) >= 2 and value[0] in {"'", '"'} and value[-1] == value[0]:
        return f"{value[0]}{_REDACTED_VALUE}{value[0]}"
    return _REDACTED_VALUE


def _redact_key_value_match(match: re.Match[str]) -> str:
    return f"{match.group('full_key')}{match.group('separator')}{_redact_captured_value(match.group('value'))}"


def _redact_message(message: str) -> str:
    redacted = _DIGEST_PATTERN.sub(lambda m: f"{m.group(1)}:{m.group(2)}:{_REDACTED_VALUE}", message)
    return _SENSITIVE_KEY_VALUE_PATTERN.sub(_redact_key_value_match, redacted)


def _redact_value(value: object) -> object:
    if isinstance(value, dict):
        return {
            key: _REDACTED_VALUE if _is_sensitive_field(_safe_str(key)) else _redact_value(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_redact_value(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_redact_value(item) for item in value)
    if isinstance(value, str):
        return _redact_message(value)
    return value


def _redact_extra_fields(extra_fields: dict[str, object]) -> dict[str, object]:
    return {
        key: _REDACTED_VALUE if _is_sensitive_field(_safe_str(key)) else _redact_value(value)
        for key, value in extra_fields.items()
    }


class SensitiveDataFilter(logging.Filter):
    """Best-effort redaction of store credentials in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if _is_record_redacted(record):
            return True

        record.msg = _redact_message(_safe_record_message(record))
        record.args = ()

        for key, value in list(record.__dict__.items()):
            if _is_reserved_or_private_record_key(key):
                continue
            if _is_sensitive_field(_safe_str(key)):
                record.__dict__[key] = _REDACTED_VALUE
                continue
            with contextlib.suppress(Exception):
                record.__dict__[key] = _redact_value(value)
        _mark_record_redacted(record)
        return True


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging output.

    Each log record is a single JSON object on one line, suitable for
    shipping cron output to a log aggregation system.
    """

    def format(self, record: logging.LogRecord) -> str:
        already_redacted = _is_record_redacted(record)
        message = _safe_record_message(record)
        if not already_redacted:
            message = _redact_message(message)

        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {}
        for key, value in record.__dict__.items():
            if _is_reserved_or_private_record_key(key):
                continue
            extra_fields[key] = value

        if extra_fields:
            if already_redacted:
                log_entry.update(extra_fields)
            else:
                log_entry.update(_redact_extra_fields(extra_fields))

        return json.dumps(log_entry, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges contextual fields into record extras."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = kwargs.get("extra")
        merged_extra = dict(self.extra)
        if isinstance(extra, dict):
            merged_extra.update(extra)
        kwargs["extra"] = merged_extra
        return msg, kwargs


def _unwrap_logger(logger: logging.Logger | logging.LoggerAdapter | None) -> logging.Logger | None:
    current = logger
    while isinstance(current, logging.LoggerAdapter):
        current = current.logger
    if isinstance(current, logging.Logger):
        return current
    return None


def with_log_context(
    logger: logging.Logger | logging.LoggerAdapter, **context: object
) -> logging.Logger | logging.LoggerAdapter:
    """Return a logger enriched with persistent contextual fields."""
    base_logger = _unwrap_logger(logger)
    if base_logger is None:
        # Preserve test doubles that do not satisfy logging interfaces.
        return logger

    existing_context = {}
    if isinstance(logger, logging.LoggerAdapter):
        existing_context = dict(getattr(logger, "extra", {}))
    existing_context.update({k: v for k, v in context.items() if v is not None})
    return ContextLoggerAdapter(base_logger, existing_context)


def setup_logging(log_level: str = "WARNING", log_format: str = "text", log_file: str | None = None) -> logging.Logger:
    """Setup logging to stderr and, optionally, a rotating file.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format - "text" (default) or "json" for structured logging
        log_file: Optional log file path

    Returns:
        The configured package logger
    """
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if log_level.upper() not in valid_levels:
        print(f"Warning: Invalid log level '{log_level}', using WARNING", file=sys.stderr)
        log_level = "WARNING"
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            handlers.append(
                RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUP_COUNT)
            )
        except OSError as e:
            print(f"Warning: Cannot open log file {log_file}: {e}. Logging to console only.", file=sys.stderr)

    if log_format.lower() == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        handler.addFilter(SensitiveDataFilter())
        logger.addHandler(handler)

    logger.setLevel(numeric_level)
    logger.propagate = False
    return logger
