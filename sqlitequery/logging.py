"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.

Logging module for sqlitequery.
Logging is disabled until setup_logging() is called and costs a level check when off.
"""

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
import threading
import datetime
import re
import contextvars
from typing import Optional


DEBUG = logging.DEBUG

# Output destination constants
STDOUT = 'stdout'  # Log to stdout only
FILE = 'file'      # Log to file only (default)
BOTH = 'both'      # Log to both file and stdout

# Longest message written before truncation (SQL text and reasons can be large)
MAX_MESSAGE_LENGTH = 2048

# Module-level context variable for trace IDs
_trace_id_var = contextvars.ContextVar('trace_id', default=None)


class TraceIDFilter(logging.Filter):
    """Filter that adds trace_id to all log records."""

    def filter(self, record):
        """Add trace_id attribute to log record."""
        trace_id = _trace_id_var.get()
        record.trace_id = trace_id if trace_id else '-'
        return True


class SQLiteQueryLogger:
    """
    Singleton logger for sqlitequery.

    Features:
    - Disabled by default, single DEBUG level once enabled
    - Automatic file rotation (64MB, 5 backups)
    - Messages collapsed to a single line and truncated
    - Trace ID support with contextvars
    """

    _instance: Optional['SQLiteQueryLogger'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'SQLiteQueryLogger':
        """Ensure singleton pattern"""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(SQLiteQueryLogger, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the logger (only once)"""
        if hasattr(self, '_initialized'):
            return

        self._initialized = True

        self._logger = logging.getLogger('sqlitequery')
        self._logger.setLevel(logging.CRITICAL)  # Disabled by default
        self._logger.propagate = False

        self._logger.addFilter(TraceIDFilter())

        self._trace_counter = 0
        self._trace_lock = threading.Lock()

        self._output_mode = FILE
        self._file_handler = None
        self._stdout_handler = None
        self._log_file = None
        self._custom_log_path = None
        # Handlers are created lazily by setup_logging() so that no log file
        # appears unless logging is actually enabled
        self._handlers_initialized = False

    def _setup_handlers(self):
        """
        Setup handlers based on output mode.
        Creates file handler and/or stdout handler as needed.
        """
        if self._logger.handlers:
            for handler in self._logger.handlers[:]:
                handler.close()
                self._logger.removeHandler(handler)

        self._file_handler = None
        self._stdout_handler = None

        formatter = logging.Formatter(
            '%(asctime)s [%(trace_id)s] - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        )

        if self._output_mode in (FILE, BOTH):
            if self._custom_log_path:
                self._log_file = self._custom_log_path
                log_dir = os.path.dirname(self._custom_log_path)
                if log_dir and not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)
            else:
                log_dir = os.path.join(os.getcwd(), "sqlitequery_logs")
                if not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)

                timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
                pid = os.getpid()
                self._log_file = os.path.join(
                    log_dir,
                    f"sqlitequery_trace_{timestamp}_{pid}.log"
                )

            self._file_handler = RotatingFileHandler(
                self._log_file,
                maxBytes=64 * 1024 * 1024,  # 64MB
                backupCount=5
            )
            self._file_handler.setFormatter(formatter)
            self._logger.addHandler(self._file_handler)
        else:
            self._log_file = None

        if self._output_mode in (STDOUT, BOTH):
            self._stdout_handler = logging.StreamHandler(sys.stdout)
            self._stdout_handler.setFormatter(formatter)
            self._logger.addHandler(self._stdout_handler)

    @staticmethod
    def _sanitize_message(msg: str) -> str:
        """
        Collapse whitespace runs (including newlines inside SQL text) to a single
        space and truncate overly long messages.

        Args:
            msg: The message to sanitize

        Returns:
            str: A single-line message of at most MAX_MESSAGE_LENGTH characters
        """
        sanitized = re.sub(r'\s+', ' ', msg).strip()
        if len(sanitized) > MAX_MESSAGE_LENGTH:
            sanitized = sanitized[:MAX_MESSAGE_LENGTH] + "..."
        return sanitized

    def generate_trace_id(self, prefix: str = "TRACE") -> str:
        """
        Generate a unique trace ID for correlating log messages.

        Format: PREFIX-PID-ThreadID-Counter, e.g. CONN-12345-67890-1

        Args:
            prefix: Prefix for the trace ID (e.g., "CONN", "TRACE")

        Returns:
            str: Unique trace ID
        """
        with self._trace_lock:
            self._trace_counter += 1
            counter = self._trace_counter

        pid = os.getpid()
        thread_id = threading.get_ident()

        return f"{prefix}-{pid}-{thread_id}-{counter}"

    def set_trace_id(self, trace_id: str):
        """Set the trace ID for the current context."""
        _trace_id_var.set(trace_id)

    def get_trace_id(self) -> Optional[str]:
        """Get the trace ID for the current context, or None if not set."""
        return _trace_id_var.get()

    def clear_trace_id(self):
        """Clear the trace ID for the current context."""
        _trace_id_var.set(None)

    def _log(self, level: int, msg: str, *args, **kwargs):
        """
        Internal logging method with sanitization.

        Args:
            level: Log level
            msg: Message format string
            *args: Arguments for message formatting
            **kwargs: Additional keyword arguments
        """
        if not self._logger.isEnabledFor(level):
            return

        if args:
            msg = msg % args

        sanitized_msg = self._sanitize_message(msg)

        self._logger.log(level, sanitized_msg, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log at DEBUG level"""
        self._log(logging.DEBUG, f"[Python] {msg}", *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        """Log at INFO level"""
        self._log(logging.INFO, f"[Python] {msg}", *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log at WARNING level"""
        self._log(logging.WARNING, f"[Python] {msg}", *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log at ERROR level"""
        self._log(logging.ERROR, f"[Python] {msg}", *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs):
        """Log at CRITICAL level"""
        self._log(logging.CRITICAL, f"[Python] {msg}", *args, **kwargs)

    def _setLevel(self, level: int, output: Optional[str] = None, log_file_path: Optional[str] = None):
        """
        Internal method to set logging level (use setup_logging() instead).

        Args:
            level: Logging level (typically DEBUG)
            output: Optional output mode (FILE, STDOUT, BOTH)
            log_file_path: Optional custom path for log file

        Raises:
            ValueError: If output mode is invalid
        """
        if output is not None:
            if output not in (FILE, STDOUT, BOTH):
                raise ValueError(
                    f"Invalid output mode: {output}. "
                    f"Must be one of: {FILE}, {STDOUT}, {BOTH}"
                )
            self._output_mode = output

        if log_file_path is not None:
            self._custom_log_path = log_file_path

        if not self._handlers_initialized or output is not None or log_file_path is not None:
            self._setup_handlers()
            self._handlers_initialized = True

        self._logger.setLevel(level)

    def getLevel(self) -> int:
        """Get the current logging level."""
        return self._logger.level

    def isEnabledFor(self, level: int) -> bool:
        """Check if a given log level is enabled."""
        return self._logger.isEnabledFor(level)

    def addHandler(self, handler: logging.Handler):
        """Add a handler to the logger"""
        self._logger.addHandler(handler)

    def removeHandler(self, handler: logging.Handler):
        """Remove a handler from the logger"""
        self._logger.removeHandler(handler)

    @property
    def handlers(self) -> list:
        """Get list of handlers attached to the logger"""
        return self._logger.handlers

    @property
    def output(self) -> str:
        """Get the current output mode"""
        return self._output_mode

    @output.setter
    def output(self, mode: str):
        """
        Set the output mode.

        Raises:
            ValueError: If mode is not FILE, STDOUT or BOTH
        """
        if mode not in (FILE, STDOUT, BOTH):
            raise ValueError(
                f"Invalid output mode: {mode}. "
                f"Must be one of: {FILE}, {STDOUT}, {BOTH}"
            )
        self._output_mode = mode

        if self._handlers_initialized:
            self._setup_handlers()

    @property
    def log_file(self) -> Optional[str]:
        """Get the current log file path (None if file output is disabled)"""
        return self._log_file

    @property
    def level(self) -> int:
        """Get the current logging level"""
        return self._logger.level


# Singleton logger instance
logger = SQLiteQueryLogger()


def setup_logging(output: str = 'file', log_file_path: Optional[str] = None):
    """
    Enable DEBUG logging for troubleshooting.

    Args:
        output: Where to send logs (default: 'file')
                Options: 'file', 'stdout', 'both'
        log_file_path: Optional custom path for log file
                      If not specified, auto-generates in ./sqlitequery_logs/

    Examples:
        import sqlitequery

        # File only (default, in sqlitequery_logs folder)
        sqlitequery.setup_logging()

        # Stdout only
        sqlitequery.setup_logging(output='stdout')

        # Custom path with both outputs
        sqlitequery.setup_logging(output='both', log_file_path="/tmp/debug.log")
    """
    logger._setLevel(logging.DEBUG, output, log_file_path)
    return logger
