"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module provides helper functions and package settings for sqlitequery.
"""

import os
import re
import threading
from sqlitequery.logging import logger

# Environment variable that overrides the default data directory
DATA_DIRECTORY_ENV = "SQLITEQUERY_DATA_DIR"


def log(level: str, message: str, *args) -> None:
    """
    Universal logging helper that routes to the package logger.

    Args:
        level: Log level ('debug', 'info', 'warning', 'error')
        message: Log message with optional format placeholders
        *args: Arguments for message formatting
    """
    getattr(logger, level)(message, *args)


def sanitize_user_input(user_input: str, max_length: int = 50) -> str:
    """
    Sanitize user input for safe logging by removing control characters,
    limiting length, and ensuring safe characters only.

    Args:
        user_input (str): The user input to sanitize.
        max_length (int): Maximum length of the sanitized output.

    Returns:
        str: The sanitized string safe for logging.
    """
    if not isinstance(user_input, str):
        return "<non-string>"

    # Allow alphanumeric, dash, underscore, and dot
    sanitized = re.sub(r"[^\w\-\.]", "", user_input)

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."

    return sanitized if sanitized else "<invalid>"


def _default_data_directory() -> str:
    """
    Return the directory database names resolve into when none has been set.
    """
    configured = os.environ.get(DATA_DIRECTORY_ENV)
    if configured:
        return os.path.abspath(os.path.expanduser(configured))
    return os.path.join(os.path.expanduser("~"), ".sqlitequery")


class Settings:
    """
    Settings class for sqlitequery package configuration.

    Holds the application-private storage directory that database names are
    resolved in.
    """
    def __init__(self) -> None:
        self.data_directory: str = _default_data_directory()


# Global settings instance
_settings: Settings = Settings()
_settings_lock: threading.Lock = threading.Lock()


def get_settings() -> Settings:
    """Return the global settings object"""
    with _settings_lock:
        return _settings


def set_data_directory(path: str) -> None:
    """
    Set the directory in which database names are resolved.

    Args:
        path (str): Directory path; '~' is expanded and the path made absolute.

    Raises:
        ValueError: If path is not a non-empty string.
    """
    if not isinstance(path, (str, os.PathLike)) or not str(path):
        raise ValueError("Data directory must be a non-empty path")
    with _settings_lock:
        _settings.data_directory = os.path.abspath(os.path.expanduser(str(path)))
    log('info', "Data directory set to %s", _settings.data_directory)


def get_data_directory() -> str:
    """Return the directory in which database names are resolved."""
    with _settings_lock:
        return _settings.data_directory


def resolve_database_path(database_name: str) -> str:
    """
    Resolve a logical database name to a file path inside the data directory.

    Args:
        database_name (str): Name of the database file to open or create.

    Returns:
        str: The absolute file path. An empty name resolves to the directory
        itself, which the engine refuses to open.
    """
    return os.path.join(get_data_directory(), database_name)
