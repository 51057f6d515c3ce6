"""
Logging Configuration Unit Tests
"""

import logging

import pytest

from findermeister_export.core.logging import setup_logging


@pytest.fixture
def restore_package_logger():
    """dictConfig mutates global loggers; put them back for other tests."""
    root = logging.getLogger()
    root_handlers, root_level = root.handlers[:], root.level
    yield
    root.handlers[:] = root_handlers
    root.setLevel(root_level)
    for name in ("findermeister_export", "sqlalchemy.engine", "asyncpg"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


def test_setup_logging_levels(restore_package_logger):
    setup_logging("debug")

    package_logger = logging.getLogger("findermeister_export")
    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
