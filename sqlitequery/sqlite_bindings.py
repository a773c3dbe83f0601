"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module wraps the SQLite C library through ctypes.
DatabaseHandle owns a sqlite3* connection and StatementHandle owns a sqlite3_stmt*.
Both return raw SQLite result codes; interpreting them is left to the caller.
"""

import ctypes
import threading
from ctypes import POINTER, byref, c_char_p, c_double, c_int, c_int64, c_void_p
from typing import Optional, Tuple
from sqlitequery.constants import ConstantsSQLite, OpenFlags, SQLITE_TRANSIENT
from sqlitequery.exceptions import InterfaceError
from sqlitequery.helpers import log
from sqlitequery.platform_utils import get_sqlite_library_candidates

_library: Optional[ctypes.CDLL] = None
_library_lock = threading.Lock()

_SQLITE_OK = ConstantsSQLite.SQLITE_OK.value


def _declare_prototypes(lib: ctypes.CDLL) -> None:
    """
    Declare argument and return types for every SQLite function used.
    Without these, ctypes would truncate pointers and 64-bit integers to int.
    """
    prototypes = {
        "sqlite3_libversion": ([], c_char_p),
        "sqlite3_open_v2": ([c_char_p, POINTER(c_void_p), c_int, c_char_p], c_int),
        "sqlite3_close_v2": ([c_void_p], c_int),
        "sqlite3_errmsg": ([c_void_p], c_char_p),
        "sqlite3_last_insert_rowid": ([c_void_p], c_int64),
        "sqlite3_changes": ([c_void_p], c_int),
        "sqlite3_prepare_v2": ([c_void_p, c_char_p, c_int, POINTER(c_void_p), POINTER(c_void_p)], c_int),
        "sqlite3_finalize": ([c_void_p], c_int),
        "sqlite3_reset": ([c_void_p], c_int),
        "sqlite3_clear_bindings": ([c_void_p], c_int),
        "sqlite3_step": ([c_void_p], c_int),
        "sqlite3_bind_parameter_count": ([c_void_p], c_int),
        "sqlite3_bind_parameter_index": ([c_void_p, c_char_p], c_int),
        "sqlite3_bind_int64": ([c_void_p, c_int, c_int64], c_int),
        "sqlite3_bind_double": ([c_void_p, c_int, c_double], c_int),
        "sqlite3_bind_text": ([c_void_p, c_int, c_char_p, c_int, c_void_p], c_int),
        "sqlite3_bind_null": ([c_void_p, c_int], c_int),
        "sqlite3_column_count": ([c_void_p], c_int),
        "sqlite3_column_name": ([c_void_p, c_int], c_char_p),
        "sqlite3_column_type": ([c_void_p, c_int], c_int),
        "sqlite3_column_int64": ([c_void_p, c_int], c_int64),
        "sqlite3_column_double": ([c_void_p, c_int], c_double),
        "sqlite3_column_text": ([c_void_p, c_int], c_void_p),
        "sqlite3_column_bytes": ([c_void_p, c_int], c_int),
    }
    for name, (argtypes, restype) in prototypes.items():
        function = getattr(lib, name)
        function.argtypes = argtypes
        function.restype = restype


def load_library() -> ctypes.CDLL:
    """
    Load the SQLite shared library once and return it.

    Returns:
        ctypes.CDLL: The loaded library with prototypes declared.

    Raises:
        InterfaceError: If no candidate library could be loaded.
    """
    global _library
    if _library is not None:
        return _library

    with _library_lock:
        if _library is None:
            failures = []
            for candidate in get_sqlite_library_candidates():
                try:
                    lib = ctypes.CDLL(candidate)
                    _declare_prototypes(lib)
                except (OSError, AttributeError) as e:
                    failures.append(f"{candidate}: {e}")
                    continue
                _library = lib
                log('debug', "Loaded SQLite %s from %s",
                    lib.sqlite3_libversion().decode("ascii"), candidate)
                break
            else:
                log('error', "Unable to load the SQLite library: %s", "; ".join(failures))
                raise InterfaceError(
                    "SQLite library could not be loaded",
                    reason="; ".join(failures) or "no candidate libraries found",
                )
    return _library


def libversion() -> str:
    """Return the version string of the loaded SQLite library."""
    return load_library().sqlite3_libversion().decode("ascii")


def _decode(value: Optional[bytes]) -> str:
    if value is None:
        return ""
    return value.decode("utf-8", errors="replace")


class StatementHandle:
    """
    A compiled statement (sqlite3_stmt*) together with the text it was compiled from.
    """

    def __init__(self, lib: ctypes.CDLL, stmt: c_void_p, sql: str) -> None:
        self._lib = lib
        self._stmt = stmt
        self.sql = sql

    @property
    def is_finalized(self) -> bool:
        return not self._stmt.value

    def free(self) -> int:
        """
        Finalize the statement. Calling free on a finalized statement does nothing.
        """
        if not self._stmt.value:
            return _SQLITE_OK
        ret = self._lib.sqlite3_finalize(self._stmt)
        self._stmt = c_void_p()
        return ret

    def step(self) -> int:
        return self._lib.sqlite3_step(self._stmt)

    def reset(self) -> int:
        return self._lib.sqlite3_reset(self._stmt)

    def clear_bindings(self) -> int:
        return self._lib.sqlite3_clear_bindings(self._stmt)

    def bind_parameter_count(self) -> int:
        return self._lib.sqlite3_bind_parameter_count(self._stmt)

    def bind_parameter_index(self, name: str) -> int:
        """Return the 1-based index of the named placeholder, or 0 if it is absent."""
        return self._lib.sqlite3_bind_parameter_index(self._stmt, name.encode("utf-8"))

    def bind_int64(self, index: int, value: int) -> int:
        return self._lib.sqlite3_bind_int64(self._stmt, index, value)

    def bind_double(self, index: int, value: float) -> int:
        return self._lib.sqlite3_bind_double(self._stmt, index, value)

    def bind_text(self, index: int, value: str) -> int:
        encoded = value.encode("utf-8")
        return self._lib.sqlite3_bind_text(
            self._stmt, index, encoded, len(encoded), c_void_p(SQLITE_TRANSIENT)
        )

    def bind_null(self, index: int) -> int:
        return self._lib.sqlite3_bind_null(self._stmt, index)

    def column_count(self) -> int:
        return self._lib.sqlite3_column_count(self._stmt)

    def column_name(self, index: int) -> str:
        return _decode(self._lib.sqlite3_column_name(self._stmt, index))

    def column_type(self, index: int) -> int:
        return self._lib.sqlite3_column_type(self._stmt, index)

    def column_int64(self, index: int) -> int:
        return self._lib.sqlite3_column_int64(self._stmt, index)

    def column_double(self, index: int) -> float:
        return self._lib.sqlite3_column_double(self._stmt, index)

    def column_text(self, index: int) -> str:
        # sqlite3_column_bytes must be called after sqlite3_column_text so the
        # length refers to the UTF-8 conversion
        pointer = self._lib.sqlite3_column_text(self._stmt, index)
        if not pointer:
            return ""
        size = self._lib.sqlite3_column_bytes(self._stmt, index)
        return ctypes.string_at(pointer, size).decode("utf-8", errors="replace")


class DatabaseHandle:
    """
    A database connection (sqlite3*).
    """

    def __init__(self) -> None:
        self._lib = load_library()
        self._db = c_void_p()

    @property
    def is_open(self) -> bool:
        return bool(self._db.value)

    def open(self, path: str) -> int:
        """
        Open or create the database file at path for reading and writing.

        A handle is allocated even when opening fails so that errmsg() can
        describe the failure; close() must still be called afterwards.
        """
        flags = OpenFlags.SQLITE_OPEN_READWRITE.value | OpenFlags.SQLITE_OPEN_CREATE.value
        db = c_void_p()
        ret = self._lib.sqlite3_open_v2(path.encode("utf-8"), byref(db), flags, None)
        self._db = db
        return ret

    def close(self) -> int:
        """Close the connection. Calling close on a closed handle does nothing."""
        if not self._db.value:
            return _SQLITE_OK
        ret = self._lib.sqlite3_close_v2(self._db)
        self._db = c_void_p()
        return ret

    def errmsg(self) -> str:
        return _decode(self._lib.sqlite3_errmsg(self._db))

    def last_insert_rowid(self) -> int:
        return self._lib.sqlite3_last_insert_rowid(self._db)

    def changes(self) -> int:
        return self._lib.sqlite3_changes(self._db)

    def prepare(self, sql: str) -> Tuple[int, Optional[StatementHandle]]:
        """
        Compile the first statement in sql.

        Returns:
            (result code, StatementHandle) on success; the handle is None when
            the text held no statement (only whitespace or comments) or on failure.
        """
        stmt = c_void_p()
        encoded = sql.encode("utf-8")
        ret = self._lib.sqlite3_prepare_v2(self._db, encoded, len(encoded), byref(stmt), None)
        if ret != _SQLITE_OK or not stmt.value:
            if stmt.value:
                self._lib.sqlite3_finalize(stmt)
            return ret, None
        return ret, StatementHandle(self._lib, stmt, sql)
