# tests/conftest.py

"""Shared pytest fixtures for the shopdash test suite."""

import logging
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def detach_log_handlers() -> Generator[None, None, None]:
    """Close handlers added by setup_logging so files are not left open."""
    yield
    root_logger = logging.getLogger("shopdash")
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)
