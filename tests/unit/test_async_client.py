"""
Tests for AsyncResilientClient using respx and httpx.MockTransport.
"""

import asyncio
import json

import httpx
import pytest
import respx

from resilient_client.async_client import AsyncResilientClient
from resilient_client.core.config import ClientConfig, RetryPolicy
from resilient_client.core.exceptions import ApiError, ErrorKind
from resilient_client.core.transport import AsyncTransport

BASE_URL = "https://api.example.com"


@pytest.fixture
def config():
    return ClientConfig(base_url=BASE_URL, timeout_ms=1000, retry=RetryPolicy(1, 1000))


class TestAsyncResilientClientInit:

    def test_init_with_base_url(self):
        client = AsyncResilientClient(base_url="https://api.example.com/")
        assert client.base_url == "https://api.example.com"

    def test_init_with_kwargs(self):
        client = AsyncResilientClient(base_url=BASE_URL, timeout_ms=2500, max_retries=2)
        assert client.config.timeout_ms == 2500
        assert client.config.retry.max_retries == 2

    def test_init_with_config(self, config):
        client = AsyncResilientClient(config=config)
        assert client.config is config

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self):
        transport = AsyncTransport()
        http_client = transport._get_client()

        async with AsyncResilientClient(transport=transport):
            pass

        assert http_client.is_closed


class TestAsyncRequests:

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_json(self, config, async_sleep_recorder):
        route = respx.get(f"{BASE_URL}/data").mock(return_value=httpx.Response(200, json={"ok": True}))

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            result = await client.get("/data")

        assert result.to_dict() == {"success": True, "data": {"ok": True}, "statusCode": 200}
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_post_sends_json(self, config, async_sleep_recorder):
        route = respx.post(f"{BASE_URL}/users").mock(return_value=httpx.Response(201, json={"id": 1}))

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            result = await client.post("/users", {"name": "alice"})

        request = route.calls.last.request
        assert json.loads(request.content) == {"name": "alice"}
        assert request.headers["content-type"] == "application/json"
        assert "x-correlation-id" in request.headers
        assert result.status_code == 201

    @pytest.mark.asyncio
    @respx.mock
    async def test_text_response(self, config, async_sleep_recorder):
        respx.get(f"{BASE_URL}/health").mock(
            return_value=httpx.Response(200, text="OK", headers={"Content-Type": "text/plain"})
        )

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            result = await client.get("/health")

        assert result.data == "OK"

    @pytest.mark.asyncio
    @respx.mock
    async def test_500_retried_then_success(self, config, async_sleep_recorder):
        route = respx.get(f"{BASE_URL}/data").mock(side_effect=[
            httpx.Response(500),
            httpx.Response(200, json={"ok": True}),
        ])

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            result = await client.get("/data")

        assert result.success is True
        assert route.call_count == 2
        assert async_sleep_recorder.delays == [1.0]

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_not_retried(self, config, async_sleep_recorder):
        route = respx.get(f"{BASE_URL}/missing").mock(return_value=httpx.Response(404))

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Resource not found."
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_error(self, config, async_sleep_recorder):
        route = respx.get(f"{BASE_URL}/data").mock(side_effect=httpx.ConnectError)

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/data")

        assert exc_info.value.kind is ErrorKind.NETWORK
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_deadline_exceeded(self, async_sleep_recorder):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={"ok": True})

        client = AsyncResilientClient(
            base_url=BASE_URL,
            timeout_ms=50,
            max_retries=0,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            sleep=async_sleep_recorder,
        )

        with pytest.raises(ApiError) as exc_info:
            await client.get("/slow")
        await client.close()

        assert exc_info.value.kind is ErrorKind.TIMEOUT
        assert exc_info.value.status_code == 408
        assert exc_info.value.message == "Request timeout. Please check your connection and try again."

    @pytest.mark.asyncio
    async def test_body_on_get_rejected(self, config):
        client = AsyncResilientClient(config=config)
        with pytest.raises(ValueError):
            await client.request("GET", "/data", {"x": 1})


class TestAsyncFallback:

    @pytest.mark.asyncio
    @respx.mock
    async def test_fallback_get(self, config, async_sleep_recorder):
        respx.get(f"{BASE_URL}/data").mock(return_value=httpx.Response(503))

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            result = await client.fallback.get("/data")

        assert result.to_dict() == {
            "success": False,
            "data": {"items": [], "message": "Using cached data"},
            "statusCode": 503,
            "error": "Service unavailable. Please try again later.",
            "isFallback": True,
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_deeply_nested_json_degrades_to_fallback(self, config, async_sleep_recorder):
        route = respx.get(f"{BASE_URL}/data").mock(return_value=httpx.Response(
            200, content=b"[" * 200000 + b"]" * 200000, headers={"Content-Type": "application/json"}
        ))

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            result = await client.fallback.get("/data")

        assert result.is_fallback is True
        assert result.status_code == 0
        assert result.data == {"items": [], "message": "Using cached data"}
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_fallback_success_passes_through(self, config, async_sleep_recorder):
        respx.delete(f"{BASE_URL}/users/1").mock(return_value=httpx.Response(204))

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            result = await client.fallback.delete("/users/1")

        assert result.success is True
        assert result.is_fallback is False
        assert result.data is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_concurrent_requests(self, config, async_sleep_recorder):
        respx.get(f"{BASE_URL}/data").mock(return_value=httpx.Response(200, json={"ok": True}))
        respx.get(f"{BASE_URL}/users").mock(return_value=httpx.Response(500))

        async with AsyncResilientClient(config=config, sleep=async_sleep_recorder) as client:
            data, users = await asyncio.gather(
                client.fallback.get("/data"),
                client.fallback.get("/users"),
            )

        assert data.success is True
        assert users.is_fallback is True
        assert users.data == {"users": [], "message": "Using offline mode"}
