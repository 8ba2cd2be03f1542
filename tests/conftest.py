"""Root conftest: resets global state after every test."""

import pytest

from courier.core.logging import error_monitor


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Clear error monitor counters after each test."""
    yield
    error_monitor.reset()
