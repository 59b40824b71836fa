"""
Pytest configuration shared by unit and integration tests.

Async tests run under pytest-asyncio (``asyncio_mode = "auto"`` in
pyproject.toml), one event loop per test.
"""

from typing import Generator

import pytest

from soakscale.env import Env
from soakscale.logging import LoggingConfig
from soakscale.platform.local import local_registry


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None, None, None]:
    config = LoggingConfig()
    config.update(log_level="error")
    yield
    config.update(log_level="info")


@pytest.fixture(autouse=True)
def fresh_local_registry() -> Generator[None, None, None]:
    """Named local brokers and platforms hold loop-bound events; never share them across tests."""
    local_registry.reset()
    yield
    local_registry.reset()


@pytest.fixture
def temp_log_directory(tmp_path) -> str:
    return str(tmp_path)


@pytest.fixture
def fast_env(temp_log_directory: str) -> Env:
    return Env(
        SOAK_DURATION="300ms",
        SOAK_DEADLINE_FACTOR=20.0,
        SOAK_SNAPSHOT_INTERVAL="20ms",
        SOAK_LIFECYCLE_PAUSE="10ms",
        SOAK_MONITOR_INTERVAL="50ms",
        SOAK_STATUS_POLL_INTERVAL="5ms",
        SOAK_STATUS_MAX_POLLS=200,
        SOAK_STATUS_QUERY_RETRIES=5,
        SOAK_RECONCILE_MAX_RETRIES=200,
        SOAK_RECONCILE_RETRY_DELAY="10ms",
        SOAK_PRODUCER_PACE="1ms",
        SOAK_PRODUCER_RETRY_PAUSE="5ms",
        SOAK_MAP_CLEAR_THRESHOLD=50,
        SOAK_EVENT_JOURNAL_CAPACITY=100_000,
        SOAK_LOGS_DIRECTORY=temp_log_directory,
    )
