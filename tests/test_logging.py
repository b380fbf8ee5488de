"""Tests for logging setup, structured output and credential redaction"""

import json
import logging
import sys

import pytest

from zklock.core.logging import (
    ContextLoggerAdapter,
    JSONFormatter,
    SensitiveDataFilter,
    setup_logging,
    with_log_context,
)


def _record(msg, *args, **extra):
    record = logging.LogRecord("zklock", logging.WARNING, __file__, 10, msg, args, None)
    record.__dict__.update(extra)
    return record


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("zklock")
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


class TestRedaction:
    """Test that store credentials never reach log output"""

    def test_digest_credentials_in_message(self):
        record = _record("Connecting with digest:admin:s3cret to zk1:2181")
        SensitiveDataFilter().filter(record)
        assert "s3cret" not in record.getMessage()
        assert "digest:admin:[REDACTED]" in record.getMessage()

    def test_key_value_pairs(self):
        record = _record("auth=digest password: hunter2")
        SensitiveDataFilter().filter(record)
        assert "hunter2" not in record.getMessage()

    def test_message_args_are_rendered_then_redacted(self):
        record = _record("auth %s", "digest:admin:s3cret")
        SensitiveDataFilter().filter(record)
        assert record.args == ()
        assert "s3cret" not in record.getMessage()

    def test_sensitive_extra_fields(self):
        record = _record("connecting", auth="digest:admin:s3cret", endpoint="zk1:2181")
        SensitiveDataFilter().filter(record)
        assert record.auth == "[REDACTED]"
        assert record.endpoint == "zk1:2181"

    def test_plain_messages_untouched(self):
        record = _record("Acquired lock 'job' as /zklock/job.0000000000")
        SensitiveDataFilter().filter(record)
        assert record.getMessage() == "Acquired lock 'job' as /zklock/job.0000000000"


class TestJSONFormatter:
    """Test structured log lines"""

    def test_standard_fields(self):
        entry = json.loads(JSONFormatter().format(_record("Reaped %d nodes", 2)))
        assert entry["message"] == "Reaped 2 nodes"
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "zklock"
        assert entry["line"] == 10
        assert "timestamp" in entry
        assert "process" in entry

    def test_extra_fields_are_included(self):
        entry = json.loads(JSONFormatter().format(_record("hello", lock_name="job", root="/zklock")))
        assert entry["lock_name"] == "job"
        assert entry["root"] == "/zklock"

    def test_redacts_without_filter(self):
        entry = json.loads(JSONFormatter().format(_record("using digest:admin:s3cret", auth_data="x")))
        assert "s3cret" not in entry["message"]
        assert entry["auth_data"] == "[REDACTED]"

    def test_exception_info(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("zklock", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
        entry = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]


class TestLogContext:
    """Test contextual logger adapters"""

    def test_adds_context(self):
        adapter = with_log_context(logging.getLogger("zklock.test"), lock_name="job")
        assert isinstance(adapter, ContextLoggerAdapter)
        assert adapter.extra == {"lock_name": "job"}

    def test_merges_nested_context_and_skips_none(self):
        base = with_log_context(logging.getLogger("zklock.test"), lock_name="job")
        nested = with_log_context(base, root="/zklock", path=None)
        assert nested.extra == {"lock_name": "job", "root": "/zklock"}
        assert nested.logger is logging.getLogger("zklock.test")

    def test_per_call_extra_wins(self):
        adapter = with_log_context(logging.getLogger("zklock.test"), lock_name="job")
        _, kwargs = adapter.process("msg", {"extra": {"lock_name": "other", "path": "/p"}})
        assert kwargs["extra"] == {"lock_name": "other", "path": "/p"}

    def test_non_logger_is_returned_unchanged(self):
        double = object()
        assert with_log_context(double, lock_name="job") is double


class TestSetupLogging:
    """Test logger configuration"""

    def test_default_level_is_warning(self):
        logger = setup_logging()
        assert logger.name == "zklock"
        assert logger.level == logging.WARNING
        assert logger.propagate is False
        assert len(logger.handlers) == 1

    def test_repeated_setup_replaces_handlers(self):
        setup_logging("DEBUG")
        logger = setup_logging("DEBUG")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_invalid_level_falls_back(self, capsys):
        logger = setup_logging("LOUD")
        assert logger.level == logging.WARNING
        assert "Invalid log level" in capsys.readouterr().err

    def test_json_output_to_stderr(self, capsys):
        logger = setup_logging("INFO", "json")
        logger.info("Acquired lock", extra={"lock_name": "job"})
        entry = json.loads(capsys.readouterr().err.strip())
        assert entry["message"] == "Acquired lock"
        assert entry["lock_name"] == "job"

    def test_log_file_receives_records(self, tmp_path):
        log_file = tmp_path / "zklock.log"
        logger = setup_logging("INFO", log_file=str(log_file))
        assert len(logger.handlers) == 2
        logger.info("connecting with digest:admin:s3cret")
        content = log_file.read_text()
        assert "connecting with digest:admin:[REDACTED]" in content
        assert "s3cret" not in content

    def test_unwritable_log_file_falls_back_to_console(self, tmp_path, capsys):
        logger = setup_logging(log_file=str(tmp_path / "missing" / "zklock.log"))
        assert len(logger.handlers) == 1
        assert "Cannot open log file" in capsys.readouterr().err
