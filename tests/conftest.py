"""
This file contains fixtures for the tests in the sqlitequery package.
Functions:
- pytest_addoption: Register the enable_logging ini option.
- pytest_configure: Enable package logging if configured.
- data_dir: Fixture that points the data directory at a temporary folder.
- connector: Fixture to create, open and yield a connector on a fresh database.
"""

import pytest
import sqlitequery
from sqlitequery import SQLiteConnector, set_data_directory, get_data_directory


def pytest_addoption(parser):
    parser.addini('enable_logging', 'Enable sqlitequery DEBUG logging to stdout', default='false')


def pytest_configure(config):
    # Enable logging if configured in pytest.ini
    enable_log = config.getini('enable_logging')
    if enable_log and str(enable_log).lower() in ('true', '1', 'yes'):
        sqlitequery.setup_logging(output='stdout')
        print("[pytest] sqlitequery logging enabled")


@pytest.fixture
def data_dir(tmp_path):
    original = get_data_directory()
    set_data_directory(str(tmp_path))
    yield tmp_path
    set_data_directory(original)


@pytest.fixture
def connector(data_dir):
    db = SQLiteConnector("test.db")
    db.open()
    yield db
    db.close()
