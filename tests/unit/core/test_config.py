"""Тесты ClientConfig и RetryPolicy."""

import pytest

from resilient_client.core.config import (
    ClientConfig,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_TIMEOUT_MS,
    RetryPolicy,
    linear_backoff,
)
from resilient_client.core.logging import LoggingConfig


class TestRetryPolicy:
    """Тесты RetryPolicy."""

    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.max_retries == DEFAULT_MAX_RETRIES == 1
        assert policy.base_delay_ms == DEFAULT_RETRY_DELAY_MS == 1000
        assert policy.max_attempts == 2

    def test_linear_delay(self):
        """Задержка перед попыткой i+1 = base * (i+1)."""
        policy = RetryPolicy(max_retries=3, base_delay_ms=200)
        assert [policy.delay_ms(i) for i in range(3)] == [200, 400, 600]

    def test_custom_backoff(self):
        policy = RetryPolicy(max_retries=3, backoff=lambda i: 100 * 2 ** i)
        assert [policy.delay_ms(i) for i in range(3)] == [100, 200, 400]

    def test_negative_backoff_rejected(self):
        policy = RetryPolicy(backoff=lambda i: -1)
        with pytest.raises(ValueError):
            policy.delay_ms(0)

    def test_zero_retries(self):
        assert RetryPolicy(max_retries=0).max_attempts == 1

    @pytest.mark.parametrize("kwargs", [
        {"max_retries": -1},
        {"base_delay_ms": -5},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            RetryPolicy(**kwargs)

    def test_immutable(self):
        policy = RetryPolicy()
        with pytest.raises(AttributeError):
            policy.max_retries = 5


def test_linear_backoff():
    backoff = linear_backoff(1000)
    assert backoff(0) == 1000
    assert backoff(1) == 2000


class TestClientConfig:
    """Тесты ClientConfig."""

    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url is None
        assert config.timeout_ms == DEFAULT_TIMEOUT_MS == 10000
        assert config.retry == RetryPolicy()
        assert dict(config.headers) == {}
        assert config.fallbacks is None
        assert config.logging is None

    def test_base_url_trailing_slash_removed(self):
        config = ClientConfig(base_url="http://localhost:3000/api/")
        assert config.base_url == "http://localhost:3000/api"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            ClientConfig(timeout_ms=0)

    def test_headers_frozen(self):
        source = {"X-Client": "test"}
        config = ClientConfig(headers=source)
        source["X-Client"] = "changed"

        assert config.headers["X-Client"] == "test"
        with pytest.raises(TypeError):
            config.headers["X-New"] = "value"

    def test_fallbacks_frozen(self):
        config = ClientConfig(fallbacks={"/data": {"items": []}})
        with pytest.raises(TypeError):
            config.fallbacks["/users"] = {}

    def test_immutable(self):
        config = ClientConfig()
        with pytest.raises(AttributeError):
            config.timeout_ms = 5000

    def test_create(self):
        logging_config = LoggingConfig.create(level="DEBUG")
        config = ClientConfig.create(
            base_url="https://api.example.com",
            timeout_ms=5000,
            max_retries=3,
            retry_delay_ms=200,
            headers={"X-Client": "test"},
            logging=logging_config,
        )

        assert config.base_url == "https://api.example.com"
        assert config.timeout_ms == 5000
        assert config.retry.max_retries == 3
        assert config.retry.base_delay_ms == 200
        assert config.headers["X-Client"] == "test"
        assert config.logging is logging_config

    def test_with_timeout(self):
        config = ClientConfig(base_url="https://api.example.com")
        new_config = config.with_timeout(30000)

        assert new_config.timeout_ms == 30000
        assert new_config.base_url == config.base_url
        assert config.timeout_ms == 10000

    def test_with_retry_policy(self):
        config = ClientConfig()
        new_config = config.with_retry_policy(RetryPolicy(max_retries=0))

        assert new_config.retry.max_retries == 0
        assert config.retry.max_retries == 1

    def test_with_headers_merges(self):
        config = ClientConfig(headers={"X-A": "1"})
        new_config = config.with_headers({"X-B": "2"})

        assert dict(new_config.headers) == {"X-A": "1", "X-B": "2"}
        assert dict(config.headers) == {"X-A": "1"}
