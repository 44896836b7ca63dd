# src/resilient_client/async_client.py
"""
Асинхронный resilient клиент на базе httpx.

Тот же контракт, что у ResilientClient, но все запросы - корутины.
Параллельные логические запросы не делят состояние: у каждого свой
счётчик попыток и свои дедлайны.
"""

from typing import Any, Awaitable, Callable, Mapping, Optional, TYPE_CHECKING

import httpx

from .core.config import ClientConfig, RetryPolicy
from .core.context import RequestDescriptor, build_request, merge_headers
from .core.coordinator import AsyncRetryCoordinator
from .core.decoder import ResponseDecoder
from .core.error_handler import ErrorClassifier
from .core.fallback import FallbackProvider
from .core.http_client import _logger_name, build_url
from .core.result import RequestResult
from .core.transport import AsyncTransport

if TYPE_CHECKING:
    from .core.logging import ClientLogger


class AsyncFallbackVerbs:
    """HTTP методы AsyncResilientClient, обёрнутые в fallback."""

    def __init__(self, client: "AsyncResilientClient"):
        self._client = client

    async def get(self, endpoint: str, **kwargs: Any) -> RequestResult:
        return await self._client.request_with_fallback("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return await self._client.request_with_fallback("POST", endpoint, data, **kwargs)

    async def put(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return await self._client.request_with_fallback("PUT", endpoint, data, **kwargs)

    async def patch(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return await self._client.request_with_fallback("PATCH", endpoint, data, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> RequestResult:
        return await self._client.request_with_fallback("DELETE", endpoint, **kwargs)


class AsyncResilientClient:
    """
    Асинхронный клиент с дедлайном на попытку, retry и fallback.

    Example:
        >>> async with AsyncResilientClient(base_url="http://localhost:3000/api") as client:
        ...     result = await client.get("/data")
        ...     print(result.data)

        >>> # Или без context manager
        >>> client = AsyncResilientClient(base_url="http://localhost:3000/api")
        >>> result = await client.fallback.get("/users")
        >>> await client.close()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        transport: Optional[AsyncTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        **kwargs: Any,
    ):
        """
        Инициализация асинхронного клиента.

        Args:
            base_url: Базовый URL для всех запросов
            config: ClientConfig (если указан, base_url и kwargs игнорируются)
            transport: Готовый AsyncTransport
            http_client: httpx.AsyncClient для транспорта по умолчанию
            sleep: Корутина ожидания между попытками (по умолчанию asyncio.sleep)
            **kwargs: Параметры ClientConfig.create (timeout_ms, max_retries, ...)
        """
        if config is None:
            config = ClientConfig.create(base_url=base_url, **kwargs)

        self._config = config
        self._transport = transport or AsyncTransport(http_client)
        self._fallback = FallbackProvider(config.fallbacks)

        self._logger: Optional['ClientLogger'] = None
        if config.logging:
            from .core.logging import ClientLogger
            self._logger = ClientLogger(config=config.logging, name=_logger_name(config.base_url))

        self._coordinator = AsyncRetryCoordinator(
            self._transport,
            decoder=ResponseDecoder(),
            classifier=ErrorClassifier(),
            logger=self._logger,
            sleep=sleep,
        )
        self.fallback = AsyncFallbackVerbs(self)

    async def __aenter__(self) -> "AsyncResilientClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Закрыть логгер и транспорт."""
        if self._logger is not None:
            self._logger.close()
        await self._transport.close()

    def _describe(
        self,
        method: str,
        endpoint: str,
        data: Any,
        headers: Optional[Mapping[str, str]],
    ) -> RequestDescriptor:
        merged = merge_headers(self._config.headers, headers)
        url = build_url(self._config.base_url, endpoint)
        return build_request(method, endpoint, url, headers=merged, body=data)

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout_ms: Optional[float] = None,
        retry: Optional[RetryPolicy] = None,
    ) -> RequestResult:
        """
        Выполнить логический запрос.

        Args:
            method: GET, POST, PUT, PATCH или DELETE
            endpoint: Логический путь (или абсолютный URL)
            data: Тело запроса (только POST/PUT/PATCH)
            headers: Дополнительные заголовки
            timeout_ms: Дедлайн каждой попытки
            retry: Политика retry для этого вызова

        Returns:
            RequestResult(success=True)

        Raises:
            ApiError: Терминальная ошибка после всех попыток
        """
        descriptor = self._describe(method, endpoint, data, headers)
        timeout_ms = self._config.timeout_ms if timeout_ms is None else timeout_ms
        policy = retry or self._config.retry

        if self._logger:
            from .core.logging.filters import set_correlation_id
            set_correlation_id(descriptor.request_id)
            self._logger.info(
                "Request started",
                method=descriptor.method,
                url=descriptor.url,
                timeout_ms=timeout_ms,
                max_retries=policy.max_retries,
            )

        try:
            return await self._coordinator.execute(descriptor, timeout_ms, policy)
        finally:
            if self._logger:
                from .core.logging.filters import clear_correlation_id
                clear_correlation_id()

    async def request_with_fallback(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        **kwargs: Any
    ) -> RequestResult:
        """request(), но ApiError превращается в RequestResult(is_fallback=True)."""
        return await self._fallback.async_with_fallback(
            endpoint,
            lambda: self.request(method, endpoint, data, **kwargs)
        )

    async def get(self, endpoint: str, **kwargs: Any) -> RequestResult:
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return await self.request("POST", endpoint, data, **kwargs)

    async def put(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return await self.request("PUT", endpoint, data, **kwargs)

    async def patch(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return await self.request("PATCH", endpoint, data, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> RequestResult:
        return await self.request("DELETE", endpoint, **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url
