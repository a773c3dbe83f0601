"""
This file contains tests for the value kinds in the sqlitequery package.
Functions:
- test_kind_of_*: Check classification of supported Python values.
- test_kind_of_unsupported: Check unsupported types are rejected.
- test_kind_of_out_of_range: Check integers outside 64 bits are rejected.
- test_from_column_type: Check mapping from engine datatype codes.
"""

import datetime
import pytest
from sqlitequery import ValueKind, kind_of
from sqlitequery.constants import ColumnTypes
from sqlitequery.exceptions import (
    NotSupportedError,
    DataError,
    UnsupportedParameterTypeError,
    ParameterValueOutOfRangeError,
)
from sqlitequery.type import INT64_MAX, INT64_MIN


def test_kind_of_none():
    assert kind_of(None) is ValueKind.NULL


def test_kind_of_int():
    assert kind_of(42) is ValueKind.INTEGER
    assert kind_of(-7) is ValueKind.INTEGER
    assert kind_of(INT64_MAX) is ValueKind.INTEGER
    assert kind_of(INT64_MIN) is ValueKind.INTEGER


def test_kind_of_bool():
    assert kind_of(True) is ValueKind.INTEGER
    assert kind_of(False) is ValueKind.INTEGER


def test_kind_of_float():
    assert kind_of(2.5) is ValueKind.FLOAT
    assert kind_of(float("inf")) is ValueKind.FLOAT


def test_kind_of_str():
    assert kind_of("john") is ValueKind.TEXT
    assert kind_of("") is ValueKind.TEXT


@pytest.mark.parametrize("value", [b"bytes", [1, 2], {"a": 1}, datetime.date(2020, 1, 1), object()])
def test_kind_of_unsupported(value):
    with pytest.raises(UnsupportedParameterTypeError) as excinfo:
        kind_of(value)
    assert isinstance(excinfo.value, NotSupportedError)
    assert type(value).__name__ in str(excinfo.value)


@pytest.mark.parametrize("value", [INT64_MAX + 1, INT64_MIN - 1, 2 ** 100])
def test_kind_of_out_of_range(value):
    with pytest.raises(ParameterValueOutOfRangeError) as excinfo:
        kind_of(value)
    assert isinstance(excinfo.value, DataError)


def test_from_column_type():
    assert ValueKind.from_column_type(ColumnTypes.SQLITE_INTEGER.value) is ValueKind.INTEGER
    assert ValueKind.from_column_type(ColumnTypes.SQLITE_FLOAT.value) is ValueKind.FLOAT
    assert ValueKind.from_column_type(ColumnTypes.SQLITE_TEXT.value) is ValueKind.TEXT
    assert ValueKind.from_column_type(ColumnTypes.SQLITE_NULL.value) is ValueKind.NULL


def test_from_column_type_blob_and_unknown():
    assert ValueKind.from_column_type(ColumnTypes.SQLITE_BLOB.value) is ValueKind.NULL
    assert ValueKind.from_column_type(99) is ValueKind.NULL
