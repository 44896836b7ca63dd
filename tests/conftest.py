"""
Pytest configuration and fixtures for resilient-request-client tests.
"""

import logging
import time
from typing import List

import pytest
import responses as responses_lib

from resilient_client.core.config import ClientConfig, RetryPolicy
from resilient_client.core.http_client import ResilientClient
from resilient_client.core.logging.config import LoggingConfig
from resilient_client.core.logging.filters import clear_correlation_id
from resilient_client.core.outcome import AttemptOutcome, Success


@pytest.fixture(autouse=True)
def reset_logging_state():
    """ClientLogger switches propagation off and attaches handlers; undo after each test."""
    yield
    clear_correlation_id()
    for name in list(logging.root.manager.loggerDict):
        if name == "resilient_client" or name.startswith("resilient_client."):
            logger = logging.getLogger(name)
            logger.propagate = True
            for handler in logger.handlers[:]:
                if not isinstance(handler, logging.NullHandler):
                    handler.close()
                    logger.removeHandler(handler)


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


class SleepRecorder:
    """Заменитель time.sleep: запоминает задержки, не ждёт."""

    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class AsyncSleepRecorder(SleepRecorder):
    """Заменитель asyncio.sleep."""

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def async_sleep_recorder():
    return AsyncSleepRecorder()


class ScriptedTransport:
    """
    Транспорт с заранее заданными ответами.

    Каждый элемент script - AttemptOutcome, исключение (будет выброшено)
    или число секунд задержки перед ответом 200 {"ok": true}.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.calls = []
        self.closed = False

    def send(self, descriptor, timeout_ms) -> AttemptOutcome:
        self.calls.append(descriptor)
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, (int, float)):
            time.sleep(step)
            return Success(200, b'{"ok": true}', "application/json")
        return step

    def close(self):
        self.closed = True


@pytest.fixture
def scripted_transport():
    return ScriptedTransport


@pytest.fixture
def client(base_url, sleep_recorder):
    """Resilient client instance for testing (no real waits between retries)."""
    client = ResilientClient(
        config=ClientConfig(base_url=base_url, timeout_ms=1000, retry=RetryPolicy(1, 1000)),
        sleep=sleep_recorder,
    )
    yield client
    client.close()


@pytest.fixture
def logging_config():
    """Standard logging configuration (console, DEBUG)."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with JSON file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
