"""Shared fixtures for mediablocks tests."""

import logging

import pytest

from mediablocks import logging as mb_logging


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the logger so handlers bind to the current test's streams."""
    mb_logging._logger = None
    logging.getLogger("mediablocks").handlers.clear()
    yield
    mb_logging._logger = None
    logging.getLogger("mediablocks").handlers.clear()


class MockLogger:
    """Collects transformer diagnostics as ``"<component>: <message>"`` strings."""

    def __init__(self):
        self.warnings = []
        self.errors = []
        self.debug_messages = []

    def warn(self, component, message):
        self.warnings.append(f"{component}: {message}")

    def error(self, component, message):
        self.errors.append(f"{component}: {message}")

    def debug(self, component, message):
        self.debug_messages.append(f"{component}: {message()}")


@pytest.fixture
def mock_logger():
    return MockLogger()
