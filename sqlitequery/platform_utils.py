"""
Platform detection utilities for sqlitequery.

This module locates the SQLite shared library that the engine bindings load.
"""

import ctypes.util
import glob
import os
import sys
from typing import List

# Environment variable naming an explicit SQLite shared library to load
SQLITE_LIBRARY_ENV = "SQLITEQUERY_SQLITE_LIBRARY"


def _platform_library_names() -> List[str]:
    """
    Get the conventional SQLite library locations for the running platform.

    Returns:
        List of file paths or loader names, most specific first.
    """
    if sys.platform.startswith("win"):
        # CPython for Windows ships sqlite3.dll next to the _sqlite3 extension
        return [
            os.path.join(sys.base_prefix, "DLLs", "sqlite3.dll"),
            os.path.join(sys.prefix, "DLLs", "sqlite3.dll"),
            os.path.join(sys.prefix, "Library", "bin", "sqlite3.dll"),
            "sqlite3.dll",
        ]

    if sys.platform.startswith("darwin"):
        return [
            os.path.join(sys.prefix, "lib", "libsqlite3.dylib"),
            "/opt/homebrew/opt/sqlite/lib/libsqlite3.dylib",
            "/usr/local/opt/sqlite/lib/libsqlite3.dylib",
            "/usr/lib/libsqlite3.dylib",
        ]

    names = glob.glob(os.path.join(sys.prefix, "lib", "libsqlite3.so*"))
    names.extend(["libsqlite3.so.0", "libsqlite3.so"])
    return names


def _stdlib_extension_path() -> List[str]:
    """
    Get the path of the interpreter's _sqlite3 extension module, which links
    the SQLite library and so resolves its symbols when loaded.
    """
    try:
        import _sqlite3
    except ImportError:
        return []
    path = getattr(_sqlite3, "__file__", None)
    return [path] if path else []


def get_sqlite_library_candidates() -> List[str]:
    """
    Get the SQLite shared library candidates in load priority order.

    Order: the SQLITEQUERY_SQLITE_LIBRARY environment variable, the system
    loader's answer for "sqlite3", platform conventional names, and finally
    the interpreter's own _sqlite3 extension module.

    Returns:
        De-duplicated list of candidates to pass to ctypes.CDLL.
    """
    candidates = []

    configured = os.environ.get(SQLITE_LIBRARY_ENV)
    if configured:
        candidates.append(configured)

    found = ctypes.util.find_library("sqlite3")
    if found:
        candidates.append(found)

    candidates.extend(_platform_library_names())
    candidates.extend(_stdlib_extension_path())

    unique = []
    for candidate in candidates:
        if candidate not in unique:
            unique.append(candidate)
    return unique
