"""Pytest configuration and fixtures."""

import logging
from dataclasses import dataclass

import pytest

from recordsql.config import DatabaseConfig
from recordsql.connection import connect
from recordsql.records import Record
from recordsql.session import Session

TASK_SCHEMA = """
    CREATE TABLE task (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        url TEXT NOT NULL,
        count INTEGER NOT NULL,
        valid INTEGER NOT NULL,
        createAt INTEGER NOT NULL
    );
"""


@dataclass
class Task(Record):
    id: int = 0
    name: str = ""
    url: str = ""
    count: int = 0
    valid: bool = False
    createAt: int = 0


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging calls made by a test."""
    package_logger = logging.getLogger("recordsql")
    level = package_logger.level
    handlers = list(package_logger.handlers)
    yield
    package_logger.setLevel(level)
    package_logger.handlers[:] = handlers


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary for testing."""
    return {
        "database": {
            "backend": "mysql",
            "user": "app",
            "password": "secret",
            "host": "db.internal",
            "port": 3307,
            "database": "tasks",
        },
        "logging": {"level": "DEBUG", "format": "text"},
        "quoting": "always",
    }


@pytest.fixture
def db():
    """Connected in-memory SQLite handle with a ``task`` table."""
    database = connect(DatabaseConfig(backend="sqlite", path=":memory:"), strict=True)
    database.execute_script(TASK_SCHEMA)
    yield database
    database.close()


@pytest.fixture
def session(db):
    """Session on the in-memory database."""
    return Session(db)


@pytest.fixture
def task():
    """An unsaved task."""
    return Task(0, "test", "http://example.com", 33, True, 1700000000)
