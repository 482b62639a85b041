"""Pytest configuration and fixtures."""

import io
import logging

import pytest

from scopetally.lifecycle import ScopeStack, print_enabled, set_print_enabled
from scopetally.reporting.console import ConsoleReporter


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up scopetally loggers after each test to prevent handler leaks."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("scopetally")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture(autouse=True)
def restore_print_switch():
    """Tests may turn printing off; put the process-wide switch back."""
    previous = print_enabled()
    yield
    set_print_enabled(previous)


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def stack(output) -> ScopeStack:
    """A scope stack whose reporter writes to the ``output`` buffer."""
    return ScopeStack(reporter=ConsoleReporter(stream=output))
