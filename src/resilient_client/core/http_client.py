# src/resilient_client/core/http_client.py
from typing import Any, Callable, Mapping, Optional, TYPE_CHECKING
from urllib.parse import urlparse

import requests

from .config import ClientConfig, RetryPolicy
from .context import RequestDescriptor, build_request, merge_headers
from .coordinator import RetryCoordinator
from .decoder import ResponseDecoder
from .error_handler import ErrorClassifier
from .fallback import FallbackProvider
from .result import RequestResult
from .transport import SyncTransport

# Delayed import to avoid circular dependency
if TYPE_CHECKING:
    from .logging import ClientLogger


def _logger_name(base_url: Optional[str]) -> str:
    """Имя логгера: resilient_client или resilient_client.<domain>."""
    if not base_url:
        return "resilient_client"
    parsed = urlparse(base_url)
    domain = parsed.netloc if parsed.netloc else (parsed.path.split('/')[0] if parsed.path else "unknown")
    return f"resilient_client.{domain}"


def build_url(base_url: Optional[str], endpoint: str) -> str:
    """
    Строит полный URL из base_url и endpoint.

    Examples:
        >>> build_url("http://localhost:3000/api", "/data")
        'http://localhost:3000/api/data'
        >>> build_url("http://localhost:3000/api", "https://other.example.com/x")
        'https://other.example.com/x'
    """
    # Если endpoint - абсолютный URL, используем его как есть
    if endpoint.startswith(("http://", "https://")):
        return endpoint

    endpoint = endpoint.lstrip("/")
    if base_url:
        return f"{base_url.rstrip('/')}/{endpoint}"
    return endpoint


class FallbackVerbs:
    """
    Те же HTTP методы, но каждый обёрнут в fallback.

    Никогда не выбрасывает ApiError: после исчерпания попыток возвращается
    RequestResult(is_fallback=True).

    Example:
        >>> result = client.fallback.get("/data")
        >>> result.is_fallback
        True
    """

    def __init__(self, client: "ResilientClient"):
        self._client = client

    def get(self, endpoint: str, **kwargs: Any) -> RequestResult:
        return self._client.request_with_fallback("GET", endpoint, **kwargs)

    def post(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return self._client.request_with_fallback("POST", endpoint, data, **kwargs)

    def put(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return self._client.request_with_fallback("PUT", endpoint, data, **kwargs)

    def patch(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        return self._client.request_with_fallback("PATCH", endpoint, data, **kwargs)

    def delete(self, endpoint: str, **kwargs: Any) -> RequestResult:
        return self._client.request_with_fallback("DELETE", endpoint, **kwargs)


class ResilientClient:
    """
    Синхронный клиент: дедлайн на попытку, retry, классификация ошибок, fallback.

    Features:
        - Каждая попытка ограничена timeout_ms
        - Retry только для timeout, сетевых ошибок и 5xx
        - Все ошибки наружу - только ApiError
        - Fallback payload вместо исключения (client.fallback.*)
        - Immutable конфигурация, разделяемая между запросами

    Example:
        >>> with ResilientClient(base_url="http://localhost:3000/api") as client:
        ...     result = client.get("/data")
        ...     print(result.data)
        ...
        ...     # Без исключений, с деградацией до статического payload
        ...     result = client.fallback.get("/users")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[SyncTransport] = None,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        sleep: Optional[Callable[[float], None]] = None,
        **kwargs: Any
    ):
        """
        Initialize client.

        Args:
            base_url: Base URL (если config не указан)
            config: ClientConfig instance
            transport: Готовый транспорт (по умолчанию SyncTransport)
            session_factory: Фабрика сессий для транспорта по умолчанию
            sleep: Функция ожидания между попытками (по умолчанию time.sleep)
            **kwargs: Параметры ClientConfig.create (timeout_ms, max_retries, ...)
        """
        if config is None:
            config = ClientConfig.create(base_url=base_url, **kwargs)

        self._config = config
        self._transport = transport or SyncTransport(session_factory)
        self._fallback = FallbackProvider(config.fallbacks)

        # Initialize logger if logging config provided
        self._logger: Optional['ClientLogger'] = None
        if config.logging:
            from .logging import ClientLogger
            self._logger = ClientLogger(config=config.logging, name=_logger_name(config.base_url))

        self._coordinator = RetryCoordinator(
            self._transport,
            decoder=ResponseDecoder(),
            classifier=ErrorClassifier(),
            logger=self._logger,
            sleep=sleep,
        )
        self.fallback = FallbackVerbs(self)

    def __enter__(self):
        """Поддержка контекстного менеджера"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """
        Освобождает ресурсы: сначала handlers логгера, затем транспорт.
        """
        if self._logger is not None:
            self._logger.close()
        self._transport.close()

    # ==================== Внутренние методы ====================

    def _build_url(self, endpoint: str) -> str:
        return build_url(self._config.base_url, endpoint)

    def _describe(
        self,
        method: str,
        endpoint: str,
        data: Any,
        headers: Optional[Mapping[str, str]],
    ) -> RequestDescriptor:
        merged = merge_headers(self._config.headers, headers)
        return build_request(method, endpoint, self._build_url(endpoint), headers=merged, body=data)

    def _log_started(self, descriptor: RequestDescriptor, timeout_ms: float, policy: RetryPolicy) -> None:
        if self._logger:
            from .logging.filters import set_correlation_id
            set_correlation_id(descriptor.request_id)
            self._logger.info(
                "Request started",
                method=descriptor.method,
                url=descriptor.url,
                timeout_ms=timeout_ms,
                max_retries=policy.max_retries,
            )

    def _clear_correlation_id(self) -> None:
        if self._logger:
            from .logging.filters import clear_correlation_id
            clear_correlation_id()

    # ==================== Запросы ====================

    def request(
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
        Выполнить логический запрос с дедлайном и retry.

        Args:
            method: GET, POST, PUT, PATCH или DELETE
            endpoint: Логический путь (или абсолютный URL)
            data: Тело запроса (только POST/PUT/PATCH)
            headers: Заголовки поверх дефолтных и конфиговых
            timeout_ms: Дедлайн каждой попытки (по умолчанию config.timeout_ms)
            retry: Политика retry (по умолчанию config.retry)

        Returns:
            RequestResult(success=True)

        Raises:
            ApiError: Терминальная ошибка после всех попыток
            ValueError: Неподдерживаемый метод или тело у GET/DELETE
            TypeError: Тело нельзя сериализовать
        """
        descriptor = self._describe(method, endpoint, data, headers)
        timeout_ms = self._config.timeout_ms if timeout_ms is None else timeout_ms
        policy = retry or self._config.retry

        self._log_started(descriptor, timeout_ms, policy)
        try:
            return self._coordinator.execute(descriptor, timeout_ms, policy)
        finally:
            self._clear_correlation_id()

    def request_with_fallback(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        **kwargs: Any
    ) -> RequestResult:
        """
        То же, что request(), но ApiError превращается в fallback результат.

        Returns:
            RequestResult: успешный или RequestResult(is_fallback=True)
        """
        return self._fallback.with_fallback(
            endpoint,
            lambda: self.request(method, endpoint, data, **kwargs)
        )

    def get(self, endpoint: str, **kwargs: Any) -> RequestResult:
        """
        Выполняет GET запрос.

        Args:
            endpoint: Endpoint или полный URL
            **kwargs: headers, timeout_ms, retry
        """
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        """
        Выполняет POST запрос.

        Args:
            endpoint: Endpoint или полный URL
            data: Тело запроса
            **kwargs: headers, timeout_ms, retry
        """
        return self.request("POST", endpoint, data, **kwargs)

    def put(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        """Выполняет PUT запрос."""
        return self.request("PUT", endpoint, data, **kwargs)

    def patch(self, endpoint: str, data: Any = None, **kwargs: Any) -> RequestResult:
        """Выполняет PATCH запрос."""
        return self.request("PATCH", endpoint, data, **kwargs)

    def delete(self, endpoint: str, **kwargs: Any) -> RequestResult:
        """Выполняет DELETE запрос."""
        return self.request("DELETE", endpoint, **kwargs)

    # ==================== Свойства ====================

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        """Base URL (read-only)."""
        return self._config.base_url

    @property
    def fallback_provider(self) -> FallbackProvider:
        return self._fallback
