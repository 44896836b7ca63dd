"""
Fallback provider: деградация до статического payload после исчерпания retry.

Внешний слой поверх RetryCoordinator - сам никогда не повторяет запросы.
"""

import copy
import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional

from .exceptions import ApiError
from .result import RequestResult

logger = logging.getLogger(__name__)

DEFAULT_FALLBACKS: Mapping[str, Any] = MappingProxyType({
    "/data": {"items": [], "message": "Using cached data"},
    "/users": {"users": [], "message": "Using offline mode"},
})

GENERIC_UNAVAILABLE: Mapping[str, Any] = MappingProxyType({
    "message": "Service temporarily unavailable",
})


class FallbackProvider:
    """
    Статическая таблица fallback payload по логическому endpoint.

    Таблица read-only; lookup возвращает копию, поэтому изменение
    результата вызывающим не затрагивает таблицу.

    Examples:
        >>> provider = FallbackProvider()
        >>> provider.lookup("/data")
        {'items': [], 'message': 'Using cached data'}
        >>> provider.lookup("/unknown")
        {'message': 'Service temporarily unavailable'}
    """

    def __init__(self, table: Optional[Mapping[str, Any]] = None):
        """
        Args:
            table: endpoint -> payload (по умолчанию DEFAULT_FALLBACKS)
        """
        source = DEFAULT_FALLBACKS if table is None else table
        self._table: Mapping[str, Any] = MappingProxyType(copy.deepcopy(dict(source)))

    @property
    def table(self) -> Mapping[str, Any]:
        return self._table

    def lookup(self, endpoint: str) -> Any:
        """Payload для endpoint или общий 'service unavailable' payload."""
        if endpoint in self._table:
            return copy.deepcopy(self._table[endpoint])
        return dict(GENERIC_UNAVAILABLE)

    def degrade(self, endpoint: str, error: ApiError) -> RequestResult:
        """
        Превратить терминальную ошибку в fallback результат.

        Args:
            endpoint: Логический endpoint запроса
            error: Ошибка после исчерпания попыток

        Returns:
            RequestResult(success=False, is_fallback=True)
        """
        logger.error(
            f"API request failed, using fallback: {endpoint} "
            f"[{error.kind.value}, status {error.status_code}] {error.message}"
        )
        return RequestResult(
            success=False,
            data=self.lookup(endpoint),
            status_code=error.status_code,
            error=error.message,
            is_fallback=True,
        )

    def with_fallback(self, endpoint: str, call: Callable[[], RequestResult]) -> RequestResult:
        """
        Выполнить call; ApiError поглощается в fallback результат.

        Example:
            >>> result = provider.with_fallback("/data", lambda: client.get("/data"))
        """
        try:
            return call()
        except ApiError as e:
            return self.degrade(endpoint, e)

    async def async_with_fallback(
        self,
        endpoint: str,
        call: Callable[[], Awaitable[RequestResult]]
    ) -> RequestResult:
        """Async-версия with_fallback."""
        try:
            return await call()
        except ApiError as e:
            return self.degrade(endpoint, e)
