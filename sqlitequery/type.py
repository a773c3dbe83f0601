"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module defines the value kinds that can be bound to a statement or read
back from a result set: integer, floating point, text and null.
"""

from enum import Enum
from typing import Any
from sqlitequery.constants import ColumnTypes
from sqlitequery.exceptions import ParameterValueOutOfRangeError, UnsupportedParameterTypeError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ValueKind(Enum):
    """
    The closed set of dynamically-typed scalar kinds.
    """
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    NULL = "null"

    @classmethod
    def from_column_type(cls, column_type: int) -> "ValueKind":
        """
        Map a fundamental datatype code from sqlite3_column_type to a value kind.
        BLOB and any unknown code map to NULL.
        """
        return _column_type_to_kind.get(column_type, cls.NULL)


_column_type_to_kind = {
    ColumnTypes.SQLITE_INTEGER.value: ValueKind.INTEGER,
    ColumnTypes.SQLITE_FLOAT.value: ValueKind.FLOAT,
    ColumnTypes.SQLITE_TEXT.value: ValueKind.TEXT,
    ColumnTypes.SQLITE_NULL.value: ValueKind.NULL,
}


def kind_of(value: Any) -> ValueKind:
    """
    Classify a Python value as one of the supported value kinds.

    bool is an int subclass and is stored as the integer 0 or 1.

    Args:
        value: The value to classify.

    Returns:
        ValueKind: The kind the value binds as.

    Raises:
        ParameterValueOutOfRangeError: If an integer does not fit in 64 bits.
        UnsupportedParameterTypeError: If the value is not int, float, str or None.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise ParameterValueOutOfRangeError(
                f"Integer value {value} does not fit in a signed 64-bit integer"
            )
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.TEXT
    raise UnsupportedParameterTypeError(
        f"Unsupported parameter type: {type(value).__name__}. "
        "Supported types are int, float, str and None"
    )
