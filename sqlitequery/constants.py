"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module contains the constants used by the SQLite engine bindings.
"""

from enum import Enum


class ConstantsSQLite(Enum):
    """
    Primary result codes returned by the SQLite C library.
    """
    SQLITE_OK = 0
    SQLITE_ERROR = 1
    SQLITE_INTERNAL = 2
    SQLITE_PERM = 3
    SQLITE_ABORT = 4
    SQLITE_BUSY = 5
    SQLITE_LOCKED = 6
    SQLITE_NOMEM = 7
    SQLITE_READONLY = 8
    SQLITE_INTERRUPT = 9
    SQLITE_IOERR = 10
    SQLITE_CORRUPT = 11
    SQLITE_NOTFOUND = 12
    SQLITE_FULL = 13
    SQLITE_CANTOPEN = 14
    SQLITE_PROTOCOL = 15
    SQLITE_EMPTY = 16
    SQLITE_SCHEMA = 17
    SQLITE_TOOBIG = 18
    SQLITE_CONSTRAINT = 19
    SQLITE_MISMATCH = 20
    SQLITE_MISUSE = 21
    SQLITE_NOLFS = 22
    SQLITE_AUTH = 23
    SQLITE_FORMAT = 24
    SQLITE_RANGE = 25
    SQLITE_NOTADB = 26
    SQLITE_NOTICE = 27
    SQLITE_WARNING = 28
    SQLITE_ROW = 100
    SQLITE_DONE = 101


class ColumnTypes(Enum):
    """
    Fundamental datatype codes reported by sqlite3_column_type.
    """
    SQLITE_INTEGER = 1
    SQLITE_FLOAT = 2
    SQLITE_TEXT = 3
    SQLITE_BLOB = 4
    SQLITE_NULL = 5


class OpenFlags(Enum):
    """
    Flags accepted by sqlite3_open_v2.
    """
    SQLITE_OPEN_READONLY = 0x00000001
    SQLITE_OPEN_READWRITE = 0x00000002
    SQLITE_OPEN_CREATE = 0x00000004


# Destructor sentinel telling SQLite to make its own copy of bound text
SQLITE_TRANSIENT = -1

# Sigil that prefixes every named placeholder in query text, e.g. @accountName
PARAMETER_PREFIX = "@"
