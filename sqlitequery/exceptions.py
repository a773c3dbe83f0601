"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module contains custom exception classes for the sqlitequery package.
These classes are used to raise exceptions when an error occurs while executing a query.
"""

from sqlitequery.constants import ConstantsSQLite


class Exception(Exception):
    """
    Base class for all exceptions.
    This is the base class for all custom exceptions in this module.
    It can be used to catch any exception raised by the database operations.
    """
    def __init__(self, message: str = "An exception occurred", reason: str = "") -> None:
        self.message = message
        self.reason = reason
        if reason:
            super().__init__(f"{message}; SQLite Error: {reason}")
        else:
            super().__init__(message)


class Warning(Exception):
    """
    Base class for warnings.
    This class is used to represent warnings that do not necessarily stop the execution
    but indicate that something unexpected happened.
    """


class Error(Exception):
    """
    Base class for errors.
    This is the base class for all error-related exceptions. It is a subclass of the
    general Exception class and serves as a parent for more specific error types.
    """


class InterfaceError(Error):
    """
    Error related to the database interface.
    This exception is raised for errors that are related to the database interface,
    such as using a connector in the wrong state or failing to load the engine.
    """


class DatabaseError(Error):
    """
    Base class for database errors.
    This is the base class for all database-related errors. It serves as a parent
    for more specific database error types.
    """


class DataError(DatabaseError):
    """
    Error related to problems with the processed data.
    This exception is raised for errors that occur due to issues with the data being
    processed, such as values that cannot be represented by the engine.
    """


class OperationalError(DatabaseError):
    """
    Error related to the database's operation.
    This exception is raised for errors that occur during the operation of the database,
    such as failing to open the file or a statement failing while it runs.
    """


class IntegrityError(DatabaseError):
    """
    Error related to database integrity.
    This exception is raised for errors that occur due to integrity constraints being
    violated, such as a duplicate primary key or a NOT NULL column left empty.
    """


class InternalError(DatabaseError):
    """
    Error related to internal database errors.
    This exception is raised for errors that occur due to internal issues within
    the database engine.
    """


class ProgrammingError(DatabaseError):
    """
    Error related to programming errors.
    This exception is raised for errors that occur due to mistakes in the database
    programming, such as syntax errors in SQL queries or incorrect API usage.
    """


class NotSupportedError(DatabaseError):
    """
    Error related to unsupported operations.
    This exception is raised for errors that occur when an unsupported operation is
    attempted, such as binding a value of a type the engine does not model.
    """


# Connector state

class DatabaseAlreadyOpenError(InterfaceError):
    """Raised by open() when the connector already holds a database connection."""
    def __init__(self, message: str = "Database is already open", reason: str = "") -> None:
        super().__init__(message, reason)


class DatabaseOpenError(OperationalError):
    """Raised when the database file could not be opened or created."""
    def __init__(self, message: str = "Database could not be opened or created", reason: str = "") -> None:
        super().__init__(message, reason)


class ClosedDatabaseError(InterfaceError):
    """Raised when a query is executed on a connector that is not open."""
    def __init__(self, message: str = "Attempting to execute query on closed database", reason: str = "") -> None:
        super().__init__(message, reason)


# Statement lifecycle

class EmptyQueryError(ProgrammingError):
    """Raised when there is no query text to compile."""
    def __init__(self, message: str = "Attempting to execute empty query", reason: str = "") -> None:
        super().__init__(message, reason)


class StatementCompileError(ProgrammingError):
    """Raised when the engine rejects the query text."""
    def __init__(self, message: str = "Statement could not be compiled", reason: str = "") -> None:
        super().__init__(message, reason)


class ParameterBindError(ProgrammingError):
    """Raised when a pending parameter cannot be bound to the compiled statement."""
    def __init__(self, message: str = "Parameter could not be bound", reason: str = "") -> None:
        super().__init__(message, reason)


class ExecutionError(OperationalError):
    """Raised when stepping the statement ends in anything but a row or completion."""
    def __init__(self, message: str = "Statement execution failed", reason: str = "", result_code: int = None) -> None:
        self.result_code = result_code
        super().__init__(message, reason)


class IntegrityExecutionError(ExecutionError, IntegrityError):
    """Raised when a statement fails because it violates a constraint."""


class ResultSetNotScalarError(ProgrammingError):
    """Raised by execute_scalar() when the result set has more than one column."""
    def __init__(self, message: str = "Result set is not scalar", reason: str = "") -> None:
        super().__init__(message, reason)


# Parameter values

class UnsupportedParameterTypeError(NotSupportedError):
    """Raised when a parameter value is not an integer, float, text or None."""


class ParameterValueOutOfRangeError(DataError):
    """Raised when an integer parameter does not fit in a signed 64-bit integer."""


# DataTable

class ColumnNameAlreadyExistsError(ProgrammingError):
    """Raised when a column name is appended to a DataTable twice."""
    def __init__(self, column_name: str) -> None:
        self.column_name = column_name
        super().__init__(f"Column name already exists: {column_name}")


class ColumnsFrozenError(ProgrammingError):
    """Raised when a column is appended after the table has started creating rows."""
    def __init__(self, column_name: str) -> None:
        self.column_name = column_name
        super().__init__(
            f"Cannot append column '{column_name}': rows have already been created for this table"
        )


class RowLengthMismatchError(ProgrammingError):
    """Raised when a row is appended whose length differs from the table's column count."""
    def __init__(self, table_columns: int, row_columns: int) -> None:
        self.table_columns = table_columns
        self.row_columns = row_columns
        super().__init__(
            f"Row has {row_columns} elements but the table has {table_columns} columns"
        )


# Mapping SQLite primary result codes to the exception raised for a failed step
result_code_to_exception = {
    ConstantsSQLite.SQLITE_CONSTRAINT.value: IntegrityExecutionError,
}


def raise_exception(result_code: int, reason: str) -> None:
    """
    Raise the execution exception for the given SQLite result code.
    Extended result codes are reduced to their primary code before the lookup.
    If the code is not found in the mapping, a generic ExecutionError is raised.
    Args:
        result_code (int): The result code returned by sqlite3_step.
        reason (str): The engine's error message.
    Raises:
        ExecutionError: Always.
    """
    primary_code = result_code & 0xFF
    exception_class = result_code_to_exception.get(primary_code, ExecutionError)
    raise exception_class(reason=reason, result_code=result_code)
