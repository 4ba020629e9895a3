"""Pytest configuration and shared fixtures."""

import logging
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from resterr import BufferedResponseSink, ErrorDispatcher, build_registry

LOGGER_NAME = "resterr.test-handler"

ERR_FOO = LookupError("foo err")
ERR_BAR = PermissionError("bar err")
ERR_NOT_FOUND = KeyError("not found")


@pytest.fixture
def error_table():
    """Sentinel table used by most tests."""
    return {
        ERR_FOO: (418, "foo err"),
        ERR_BAR: {"status-code": 425, "message": "bar err"},
        ERR_NOT_FOUND: {"status_code": 404, "message": "resource missing"},
    }


@pytest.fixture
def registry(error_table):
    return build_registry(error_table)


@pytest.fixture
def dispatcher(registry):
    """Dispatcher logging to a dedicated logger captured by caplog."""
    return ErrorDispatcher(registry, logging.getLogger(LOGGER_NAME))


@pytest.fixture
def sink():
    return BufferedResponseSink()


@pytest.fixture
def mock_sink():
    """Sink whose calls can be inspected and made to fail."""
    sink = Mock(spec=["set_status", "set_header", "write"])
    sink.write.return_value = 0
    return sink


@pytest.fixture
def handler_logs(caplog):
    """Capture INFO and above from the test dispatcher logger."""
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)

    def _records():
        return [r for r in caplog.records if r.name == LOGGER_NAME]

    return _records


@pytest.fixture
def sentinels():
    """The sentinel instances registered in error_table."""
    return SimpleNamespace(foo=ERR_FOO, bar=ERR_BAR, not_found=ERR_NOT_FOUND)
