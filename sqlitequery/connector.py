"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module defines the SQLiteConnector class, which owns one SQLite database
connection and at most one compiled statement at a time.
Resource Management:
- Compiling a query with different text finalizes the previous statement first.
- Re-running the same query text resets and re-binds the existing statement.
- close() finalizes the compiled statement before closing the connection.
- Connectors are not thread-safe; use one connector per thread.
"""
import os
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional
from sqlitequery.constants import ConstantsSQLite, ColumnTypes, PARAMETER_PREFIX
from sqlitequery.exceptions import (
    ClosedDatabaseError,
    DatabaseAlreadyOpenError,
    DatabaseOpenError,
    EmptyQueryError,
    ParameterBindError,
    ResultSetNotScalarError,
    StatementCompileError,
    raise_exception,
)
from sqlitequery.helpers import log, resolve_database_path, sanitize_user_input
from sqlitequery.logging import logger
from sqlitequery.sqlite_bindings import DatabaseHandle, StatementHandle
from sqlitequery.table import DataTable
from sqlitequery.type import ValueKind, kind_of

SQLITE_OK = ConstantsSQLite.SQLITE_OK.value
SQLITE_ROW = ConstantsSQLite.SQLITE_ROW.value
SQLITE_DONE = ConstantsSQLite.SQLITE_DONE.value

TABLE_EXISTS_QUERY = (
    f"select count(*) from sqlite_master where type='table' and name={PARAMETER_PREFIX}tableName"
)


class StatementState(Enum):
    """Whether the connector currently holds a compiled statement."""
    NO_STATEMENT = "no_statement"
    COMPILED = "compiled"


class SQLiteConnector:
    """
    A wrapper around the SQLite C API that compiles, binds and executes one
    statement at a time.

    Query text refers to parameters as @name, where name is the name passed to
    set_parameter(). Values surfaced from results are None, int, float or str.

    Methods:
        open() -> None
        close() -> None
        set_parameter(name, value) -> None
        clear_parameters() -> None
        execute(query=None) -> None
        execute_scalar(query=None) -> None | int | float | str
        execute_data_table(query=None) -> DataTable
        last_row_id() -> int
        total_changes() -> int
        table_exists(table_name) -> bool
        finalize() -> None
        clear() -> None

    Example:
        db = SQLiteConnector("accounts.db")
        db.open()
        db.set_parameter("accountID", 1)
        name = db.execute_scalar("select name from account where account_id=@accountID")
        db.set_parameter("accountID", 2)
        name = db.execute_scalar()  # reuses the compiled statement
        db.close()
    """

    def __init__(self, database_name: str) -> None:
        """
        Initialize a connector for the named database. Nothing is opened yet.

        Args:
            database_name (str): Name of the database file to open or create,
                resolved inside the configured data directory.
        """
        self.database_name = database_name
        self._file_path = resolve_database_path(database_name)
        self._db: Optional[DatabaseHandle] = None
        self._statement: Optional[StatementHandle] = None
        self._parameters = {}
        self._trace_id = logger.generate_trace_id("CONN")
        log('info', "Database location: %s", self._file_path)

    @property
    def file_path(self) -> str:
        """Absolute path of the database file."""
        return self._file_path

    @property
    def parameters(self) -> Mapping[str, Any]:
        """Read-only view of the parameters bound on the next execution."""
        return MappingProxyType(self._parameters)

    @property
    def statement(self) -> Optional[StatementHandle]:
        """The compiled statement, or None."""
        return self._statement

    @property
    def statement_state(self) -> StatementState:
        if self._statement is None:
            return StatementState.NO_STATEMENT
        return StatementState.COMPILED

    def is_open(self) -> bool:
        """Determine if the database has been opened."""
        return self._db is not None and self._db.is_open

    def open(self) -> None:
        """
        Open the named database, creating the file if it doesn't exist.

        Raises:
            DatabaseAlreadyOpenError: If the database is already open.
            DatabaseOpenError: If the database could not be opened or created.
        """
        if self.is_open():
            raise DatabaseAlreadyOpenError()

        logger.set_trace_id(self._trace_id)

        directory = os.path.dirname(self._file_path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
        except OSError as e:
            log('error', "Could not create data directory %s: %s", directory, e)
            raise DatabaseOpenError(reason=str(e)) from e

        db = DatabaseHandle()
        ret = db.open(self._file_path)
        if ret != SQLITE_OK:
            reason = db.errmsg()
            db.close()
            log('error', "Could not open database %s: %s", self._file_path, reason)
            raise DatabaseOpenError(reason=reason)

        self._db = db
        # Local import to avoid circular dependency
        from sqlitequery import _register_connector
        _register_connector(self)
        log('info', "Database opened: %s", self._file_path)

    def close(self) -> None:
        """
        Close the database if it has been opened, finalizing any compiled
        statement first. Calling close on a closed connector does nothing.
        """
        if not self.is_open():
            return

        self.finalize()
        ret = self._db.close()
        self._db = None
        if ret != SQLITE_OK:
            log('warning', "sqlite3_close_v2 returned %s", ret)
        log('info', "Database closed: %s", self._file_path)
        logger.clear_trace_id()

    def last_row_id(self) -> int:
        """
        Retrieve the rowid of the most recent successful INSERT into a rowid table.

        Returns:
            int: The most recent rowid, or 0 if no INSERT was done on this connection.

        Raises:
            ClosedDatabaseError: If the database is not open.
        """
        self._check_open()
        return self._db.last_insert_rowid()

    def total_changes(self) -> int:
        """
        Get the number of rows inserted, updated, or deleted by the most recent
        modifying statement.

        Raises:
            ClosedDatabaseError: If the database is not open.
        """
        self._check_open()
        return self._db.changes()

    def table_exists(self, table_name: str) -> bool:
        """
        Determine if a table exists in this database.

        The caller's pending parameters are restored afterwards; the compiled
        statement is replaced by the lookup query.

        Args:
            table_name: Name of the table to look for.

        Returns:
            bool: True if the table exists, False otherwise.
        """
        saved_parameters = self._parameters
        self._parameters = {"tableName": table_name}
        try:
            count = self.execute_scalar(TABLE_EXISTS_QUERY)
        finally:
            self._parameters = saved_parameters
        return bool(count)

    # SQL interface

    def execute(self, query: Optional[str] = None) -> None:
        """
        Compile (or reuse), bind any parameters and execute a query.

        Args:
            query: The SQL statement to execute. When omitted, the last
                compiled statement is executed again with the current parameters.

        Raises:
            ClosedDatabaseError: If the database is not open.
            EmptyQueryError: If there is no query text.
            StatementCompileError: If the statement couldn't be compiled.
            ParameterBindError: If a parameter couldn't be bound to the statement.
            ExecutionError: If there was a problem executing the statement.
        """
        self._prepare_and_bind(query)
        self._step()
        self._statement.reset()

    def execute_scalar(self, query: Optional[str] = None) -> Any:
        """
        Compile (or reuse), bind any parameters and execute a query that
        returns a single column, returning the first row's value.

        Args:
            query: The SQL statement to execute. When omitted, the last
                compiled statement is executed again with the current parameters.

        Returns:
            None, int, float or str. None when the query produced no row.

        Raises:
            ClosedDatabaseError: If the database is not open.
            EmptyQueryError: If there is no query text.
            StatementCompileError: If the statement couldn't be compiled.
            ParameterBindError: If a parameter couldn't be bound to the statement.
            ExecutionError: If there was a problem executing the statement.
            ResultSetNotScalarError: If the result set has more than one column.
        """
        self._prepare_and_bind(query)
        ret = self._step()

        num_columns = self._statement.column_count()
        if num_columns > 1:
            self._statement.reset()
            raise ResultSetNotScalarError()

        value = None
        if ret == SQLITE_ROW and num_columns == 1:
            value = self._column_value(0)
        self._statement.reset()
        return value

    def execute_data_table(self, query: Optional[str] = None) -> DataTable:
        """
        Compile (or reuse), bind any parameters and execute a query, collecting
        every row of the result into a DataTable.

        Args:
            query: The SELECT statement to execute. When omitted, the last
                compiled statement is executed again with the current parameters.

        Returns:
            DataTable: One column per result column, one row per result row.
            Access values with table.rows[row_index][column_name].

        Raises:
            ClosedDatabaseError: If the database is not open.
            EmptyQueryError: If there is no query text.
            StatementCompileError: If the statement couldn't be compiled.
            ParameterBindError: If a parameter couldn't be bound to the statement.
            ExecutionError: If there was a problem executing the statement.
            ColumnNameAlreadyExistsError: If the result has duplicate column names.
        """
        self._prepare_and_bind(query)

        table = DataTable()
        total_columns = self._statement.column_count()
        for index in range(total_columns):
            table.append_column(self._statement.column_name(index))

        while self._step() == SQLITE_ROW:
            row = table.new_row()
            for index in range(total_columns):
                row[index] = self._column_value(index)
            table.append_row(row)

        self._statement.reset()
        log('debug', "Data table built with %d columns and %d rows", total_columns, len(table))
        return table

    # Statement parameters

    def set_parameter(self, name: str, value: Any) -> None:
        """
        Set a parameter to bind on the next execution. Setting a name again
        overwrites its value.

        Args:
            name: Name of the parameter, without the @ prefix.
            value: An int, float, str or None.

        Raises:
            ValueError: If name is not a non-empty string.
            UnsupportedParameterTypeError: If value is of any other type.
            ParameterValueOutOfRangeError: If an int does not fit in 64 bits.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Parameter name must be a non-empty string")
        kind = kind_of(value)
        self._parameters[name] = value
        log('debug', "Parameter %s set (%s)", sanitize_user_input(name), kind.value)

    def clear_parameters(self) -> None:
        """
        Clear any bound parameters from the statement and every parameter
        stored for execution.
        """
        self._clear_statement_parameters()
        self._parameters = {}

    # Reset and cleanup

    def reset_statement(self) -> None:
        """Reset the compiled statement so it can be executed again."""
        if self._statement is not None:
            self._statement.reset()

    def finalize(self) -> None:
        """
        Finalize the compiled statement. Stored parameters are kept.
        """
        if self._statement is not None:
            ret = self._statement.free()
            if ret != SQLITE_OK:
                log('debug', "sqlite3_finalize returned %s", ret)
            self._statement = None
            log('debug', "Statement finalized")

    def clear(self) -> None:
        """Clear all parameters and finalize the statement."""
        self.clear_parameters()
        self.finalize()

    # Private

    def _check_open(self) -> None:
        if not self.is_open():
            raise ClosedDatabaseError()

    def _prepare_and_bind(self, query: Optional[str]) -> None:
        """
        Check preconditions, then compile or reset the statement and bind the
        stored parameters to it.
        """
        self._check_open()

        if query is None:
            query = self._statement.sql if self._statement is not None else ""
        if query == "":
            raise EmptyQueryError()

        self._prepare(query)
        self._bind_parameters()

    def _prepare(self, query: str) -> None:
        """
        Compile query, or reset the compiled statement when it was compiled
        from the same text.

        Raises:
            StatementCompileError: If the engine rejects the query.
        """
        if self._statement is not None and self._statement.sql == query:
            self._statement.reset()
            log('debug', "Reusing compiled statement: %s", query)
            return

        self.finalize()

        ret, statement = self._db.prepare(query)
        if ret != SQLITE_OK:
            reason = self._db.errmsg()
            log('error', "Statement could not be compiled: %s (%s)", reason, query)
            raise StatementCompileError(reason=reason)
        if statement is None:
            raise StatementCompileError(reason="query contains no SQL statement")

        self._statement = statement
        log('debug', "Compiled statement: %s", query)

    def _bind_parameters(self) -> None:
        """
        Unbind the statement, then bind every stored parameter by name.

        Raises:
            ParameterBindError: If the statement has no placeholder for a
                parameter or the engine rejects a value.
        """
        self._clear_statement_parameters()

        for name, value in self._parameters.items():
            placeholder = f"{PARAMETER_PREFIX}{name}"
            index = self._statement.bind_parameter_index(placeholder)
            if index == 0:
                raise ParameterBindError(
                    reason=f"no parameter named {placeholder} in statement"
                )

            kind = kind_of(value)
            if kind is ValueKind.INTEGER:
                ret = self._statement.bind_int64(index, int(value))
            elif kind is ValueKind.FLOAT:
                ret = self._statement.bind_double(index, value)
            elif kind is ValueKind.TEXT:
                ret = self._statement.bind_text(index, value)
            else:
                ret = self._statement.bind_null(index)

            if ret != SQLITE_OK:
                raise ParameterBindError(reason=self._db.errmsg())
            log('debug', "Bound %s at index %d as %s", sanitize_user_input(placeholder), index, kind.value)

    def _clear_statement_parameters(self) -> None:
        """Reset the compiled statement and clear its bindings."""
        if self._statement is not None:
            self._statement.reset()
            self._statement.clear_bindings()

    def _step(self) -> int:
        """
        Advance the statement one step.

        Returns:
            SQLITE_ROW or SQLITE_DONE.

        Raises:
            ExecutionError: For any other result code.
        """
        ret = self._statement.step()
        if ret not in (SQLITE_ROW, SQLITE_DONE):
            reason = self._db.errmsg()
            log('error', "Statement execution failed (%s): %s", ret, reason)
            self._statement.reset()
            raise_exception(ret, reason)
        return ret

    def _column_value(self, index: int) -> Any:
        """
        Get the value of column index at the current step.

        Returns:
            int, float or str for those column types; None otherwise.
        """
        column_type = self._statement.column_type(index)
        kind = ValueKind.from_column_type(column_type)
        if kind is ValueKind.INTEGER:
            return self._statement.column_int64(index)
        if kind is ValueKind.FLOAT:
            return self._statement.column_double(index)
        if kind is ValueKind.TEXT:
            return self._statement.column_text(index)
        if column_type != ColumnTypes.SQLITE_NULL.value:
            log('warning', "Column %d has unsupported type %s; returning None", index, column_type)
        return None

    # Context management

    def __enter__(self) -> "SQLiteConnector":
        if not self.is_open():
            self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self):
        """
        Close the database when the connector is garbage collected, in case
        close() was not called explicitly.
        """
        if "_db" in self.__dict__ and self._db is not None:
            try:
                self.close()
            except Exception as e:
                # Don't raise from __del__
                log('error', f"Error during connector cleanup: {e}")
