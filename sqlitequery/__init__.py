"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module initializes the sqlitequery package.
"""

import atexit
import sys
import threading
import types
import weakref

# Import settings from helpers module
from .helpers import (
    Settings,
    get_settings,
    set_data_directory,
    get_data_directory,
    resolve_database_path,
    _settings,
    _settings_lock,
)

# Package version
__version__ = "1.0.0"

# Exceptions
from .exceptions import (
    Warning,
    Error,
    InterfaceError,
    DatabaseError,
    DataError,
    OperationalError,
    IntegrityError,
    InternalError,
    ProgrammingError,
    NotSupportedError,
    DatabaseAlreadyOpenError,
    DatabaseOpenError,
    ClosedDatabaseError,
    EmptyQueryError,
    StatementCompileError,
    ParameterBindError,
    ExecutionError,
    IntegrityExecutionError,
    ResultSetNotScalarError,
    UnsupportedParameterTypeError,
    ParameterValueOutOfRangeError,
    ColumnNameAlreadyExistsError,
    ColumnsFrozenError,
    RowLengthMismatchError,
)

# Value kinds
from .type import ValueKind, kind_of

# Result containers
from .row import DataRow
from .table import DataTable

# Connector
from .connector import SQLiteConnector, StatementState

# Engine
from .sqlite_bindings import libversion

# Logging Configuration
from .logging import logger, setup_logging

# Constants
from .constants import PARAMETER_PREFIX

# Global registry for tracking open connectors (using weak references)
_active_connectors = weakref.WeakSet()
_connectors_lock = threading.Lock()


def _register_connector(connector):
    """Register a connector for cleanup before shutdown."""
    with _connectors_lock:
        _active_connectors.add(connector)


def _cleanup_connectors():
    """
    Cleanup function called by atexit to close all open connectors.

    Statements must be finalized and connections closed before the
    interpreter tears down the loaded SQLite library.
    """
    with _connectors_lock:
        connectors_to_close = list(_active_connectors)

    for connector in connectors_to_close:
        try:
            if connector.is_open():
                connector.close()
        except Exception as e:
            logger.error(
                f"Error during connector cleanup at shutdown: {type(e).__name__}: {e}"
            )


# Register cleanup function to run before Python exits
atexit.register(_cleanup_connectors)

# GLOBALS
# Read-Only
paramstyle: str = "named"
threadsafety: int = 1


# Create a custom module class that exposes settings as properties
class _SQLiteQueryModule(types.ModuleType):
    @property
    def data_directory(self) -> str:
        """Get the directory database names resolve into."""
        return _settings.data_directory

    @data_directory.setter
    def data_directory(self, value: str) -> None:
        """Set the directory database names resolve into."""
        set_data_directory(value)


# Replace the current module with our custom module class
old_module: types.ModuleType = sys.modules[__name__]
new_module: _SQLiteQueryModule = _SQLiteQueryModule(__name__)

# Copy all existing attributes to the new module
for attr_name in dir(old_module):
    if attr_name != "__class__":
        try:
            setattr(new_module, attr_name, getattr(old_module, attr_name))
        except AttributeError:
            pass

# Replace the module in sys.modules
sys.modules[__name__] = new_module
