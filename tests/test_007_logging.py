"""
Unit tests for sqlitequery logging module.
Tests the logging API, configuration, output modes, and formatting.
"""
import logging
import os
import pytest
import re
import shutil
from sqlitequery.logging import logger, setup_logging, DEBUG, STDOUT, FILE, BOTH, MAX_MESSAGE_LENGTH
from sqlitequery import SQLiteConnector


@pytest.fixture
def cleanup_logger(tmp_path, monkeypatch):
    """Reset logger state before and after each test"""
    # Default log folder is created under the working directory
    monkeypatch.chdir(tmp_path)

    def reset():
        logger._logger.setLevel(logging.CRITICAL)
        for handler in logger._logger.handlers[:]:
            handler.close()
            logger._logger.removeHandler(handler)
        logger._handlers_initialized = False
        logger._custom_log_path = None
        logger._output_mode = FILE
        logger._log_file = None
        logger.clear_trace_id()

    reset()
    yield
    reset()


def read_log(path):
    for handler in logger.handlers:
        handler.flush()
    with open(path, encoding="utf-8") as f:
        return f.read()


class TestLoggingBasics:
    """Test basic logging functionality"""

    def test_logger_disabled_by_default(self, cleanup_logger):
        assert logger.getLevel() == logging.CRITICAL
        assert not logger.isEnabledFor(logging.DEBUG)
        assert not logger.isEnabledFor(logging.INFO)

    def test_setup_logging_enables_debug(self, cleanup_logger):
        result = setup_logging()
        assert result is logger
        assert logger.getLevel() == DEBUG
        assert logger.isEnabledFor(logging.DEBUG)

    def test_singleton_behavior(self, cleanup_logger):
        from sqlitequery.logging import SQLiteQueryLogger
        assert SQLiteQueryLogger() is logger

    def test_no_log_file_until_enabled(self, cleanup_logger, tmp_path):
        logger.debug("Not written")
        assert not os.path.exists(os.path.join(str(tmp_path), "sqlitequery_logs"))


class TestOutputModes:
    """Test different output modes (file, stdout, both)"""

    def test_default_output_mode_is_file(self, cleanup_logger):
        setup_logging()
        assert logger.output == FILE
        assert logger.log_file is not None
        assert os.path.exists(logger.log_file)

    def test_stdout_mode_no_file_created(self, cleanup_logger, capsys):
        setup_logging(output=STDOUT)
        assert logger.output == STDOUT
        assert logger.log_file is None
        logger.info("Hello stdout")
        assert "[Python] Hello stdout" in capsys.readouterr().out

    def test_both_mode_creates_file(self, cleanup_logger):
        setup_logging(output=BOTH)
        assert logger.output == BOTH
        assert os.path.exists(logger.log_file)
        assert len(logger.handlers) == 2

    def test_invalid_output_mode_raises_error(self, cleanup_logger):
        with pytest.raises(ValueError, match="Invalid output mode"):
            setup_logging(output='invalid')

    def test_output_setter_validates(self, cleanup_logger):
        with pytest.raises(ValueError, match="Invalid output mode"):
            logger.output = 'invalid'


class TestLogFile:
    """Test log file creation and naming"""

    def test_log_file_created_in_logs_folder(self, cleanup_logger, tmp_path):
        setup_logging()
        assert os.path.dirname(logger.log_file) == os.path.join(str(tmp_path), "sqlitequery_logs")

    def test_log_file_naming_pattern(self, cleanup_logger):
        setup_logging()
        filename = os.path.basename(logger.log_file)
        match = re.match(r'^sqlitequery_trace_\d{8}_\d{6}_(\d+)\.log$', filename)
        assert match, f"Filename '{filename}' doesn't match pattern"
        assert int(match.group(1)) == os.getpid()

    def test_custom_log_file_path_creates_directory(self, cleanup_logger, tmp_path):
        path = os.path.join(str(tmp_path), "nested", "custom.log")
        setup_logging(log_file_path=path)
        logger.debug("Custom path message")
        assert logger.log_file == path
        assert "Custom path message" in read_log(path)


class TestFormatting:
    """Test message formatting and sanitization"""

    def test_python_prefix_and_args(self, cleanup_logger):
        setup_logging()
        logger.debug("Value is %d", 42)
        assert "[Python] Value is 42" in read_log(logger.log_file)

    def test_multiline_message_collapsed(self, cleanup_logger):
        setup_logging()
        logger.debug("select *\n   from account\n  where id = 1")
        assert "[Python] select * from account where id = 1" in read_log(logger.log_file)

    def test_long_message_truncated(self, cleanup_logger):
        setup_logging()
        logger.debug("x" * (MAX_MESSAGE_LENGTH * 2))
        content = read_log(logger.log_file)
        # The limit includes the "[Python] " prefix
        assert "x" * (MAX_MESSAGE_LENGTH - len("[Python] ")) + "..." in content
        assert "x" * MAX_MESSAGE_LENGTH not in content

    def test_level_names(self, cleanup_logger):
        setup_logging()
        logger.warning("careful")
        logger.error("broken")
        content = read_log(logger.log_file)
        assert "WARNING" in content
        assert "ERROR" in content


class TestTraceIds:
    """Test trace ID generation and propagation"""

    def test_generate_trace_id_format(self, cleanup_logger):
        trace_id = logger.generate_trace_id("CONN")
        assert re.match(r'^CONN-\d+-\d+-\d+$', trace_id)

    def test_generate_trace_id_unique(self, cleanup_logger):
        assert logger.generate_trace_id() != logger.generate_trace_id()

    def test_trace_id_set_get_clear(self, cleanup_logger):
        logger.set_trace_id("TRACE-1")
        assert logger.get_trace_id() == "TRACE-1"
        logger.clear_trace_id()
        assert logger.get_trace_id() is None

    def test_trace_id_in_records(self, cleanup_logger):
        setup_logging()
        logger.set_trace_id("CONN-TEST-1")
        logger.debug("traced")
        assert "[CONN-TEST-1]" in read_log(logger.log_file)

    def test_missing_trace_id_placeholder(self, cleanup_logger):
        setup_logging()
        logger.debug("untraced")
        assert "[-]" in read_log(logger.log_file)


class TestConnectorLogging:
    """Test logging emitted by connector operations"""

    def test_connector_operations_logged(self, cleanup_logger, data_dir):
        setup_logging()
        db = SQLiteConnector("logged.db")
        db.open()
        db.execute("create table t(v text)")
        db.set_parameter("secret", "do-not-log-me")
        db.execute("insert into t(v) values(@secret)")
        db.close()

        content = read_log(logger.log_file)
        assert "Database opened" in content
        assert "Compiled statement: create table t(v text)" in content
        assert "Bound secret" in content
        assert "do-not-log-me" not in content
        assert "Database closed" in content

    def test_connector_trace_id(self, cleanup_logger, data_dir):
        setup_logging()
        db = SQLiteConnector("traced.db")
        db.open()
        trace_id = logger.get_trace_id()
        assert trace_id.startswith("CONN-")
        db.close()
        assert logger.get_trace_id() is None
        assert f"[{trace_id}]" in read_log(logger.log_file)
