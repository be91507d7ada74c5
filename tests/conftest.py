"""Pytest configuration and fixtures."""

import logging
import textwrap
from pathlib import Path

import pytest

from factcheck.reporting.console import ConsoleReporter
from factcheck.runtime import RunContext, reset_default_context


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up factcheck loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("factcheck")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture(autouse=True)
def fresh_default_context():
    """Each test starts and ends with an empty process-wide run context."""
    reset_default_context(reporter=ConsoleReporter(color=False))
    yield
    reset_default_context()


@pytest.fixture
def ctx():
    """An isolated run context with uncoloured output."""
    return RunContext(reporter=ConsoleReporter(color=False))


@pytest.fixture
def fact_file(tmp_path):
    """Helper that writes a fact file and returns its path."""

    def _write(content: str, name: str = "facts_sample.py") -> Path:
        p = tmp_path / name
        p.write_text(textwrap.dedent(content))
        return p

    return _write
