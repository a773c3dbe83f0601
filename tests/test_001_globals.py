"""
This file contains tests for the global variables and settings in the sqlitequery package.
Functions:
- test_threadsafety: Check if threadsafety has the expected value.
- test_paramstyle: Check if paramstyle has the expected value.
- test_parameter_prefix: Check the placeholder sigil.
- test_version: Check that a version string is exposed.
- test_data_directory_default: Check the default data directory.
- test_data_directory_env: Check the environment variable override.
- test_data_directory_property: Check the module-level data_directory property.
- test_set_data_directory_invalid: Check empty paths are rejected.
- test_resolve_database_path: Check names resolve inside the data directory.
- test_data_directory_thread_safety: Concurrent writes leave a valid setting.
"""

import os
import threading
import pytest
import sqlitequery
from sqlitequery import (
    threadsafety,
    paramstyle,
    PARAMETER_PREFIX,
    get_data_directory,
    set_data_directory,
    resolve_database_path,
    get_settings,
)
from sqlitequery.helpers import DATA_DIRECTORY_ENV, _default_data_directory


def test_threadsafety():
    assert threadsafety == 1, "threadsafety should be 1"


def test_paramstyle():
    assert paramstyle == "named", "paramstyle should be 'named'"


def test_parameter_prefix():
    assert PARAMETER_PREFIX == "@"


def test_version():
    assert isinstance(sqlitequery.__version__, str)
    assert sqlitequery.__version__


def test_data_directory_default(monkeypatch):
    monkeypatch.delenv(DATA_DIRECTORY_ENV, raising=False)
    expected = os.path.join(os.path.expanduser("~"), ".sqlitequery")
    assert _default_data_directory() == expected


def test_data_directory_env(monkeypatch, tmp_path):
    monkeypatch.setenv(DATA_DIRECTORY_ENV, str(tmp_path))
    assert _default_data_directory() == str(tmp_path)


def test_data_directory_property(data_dir, tmp_path_factory):
    assert sqlitequery.data_directory == str(data_dir)

    other = tmp_path_factory.mktemp("other")
    sqlitequery.data_directory = str(other)
    assert get_data_directory() == str(other)
    assert get_settings().data_directory == str(other)


def test_set_data_directory_invalid(data_dir):
    with pytest.raises(ValueError):
        set_data_directory("")
    # The previous value is kept
    assert get_data_directory() == str(data_dir)


def test_resolve_database_path(data_dir):
    assert resolve_database_path("accounts.db") == os.path.join(str(data_dir), "accounts.db")


def test_data_directory_thread_safety(data_dir, tmp_path_factory):
    first = str(tmp_path_factory.mktemp("first"))
    second = str(tmp_path_factory.mktemp("second"))
    iterations = 100

    def worker():
        for _ in range(iterations):
            set_data_directory(first)
            set_data_directory(second)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # Every thread's last write is the second directory
    assert get_data_directory() == second
