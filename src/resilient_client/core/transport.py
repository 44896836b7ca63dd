"""
Transport executor: одна сетевая попытка.

Завершённый HTTP обмен всегда даёт Success - классификация non-2xx
происходит позже, в ErrorClassifier.
"""

from typing import Callable, Optional

import httpx
import requests

from .context import RequestDescriptor
from .deadline import TIMEOUT_STATUS
from .exceptions import ErrorKind
from .outcome import AttemptOutcome, Failure, Success
from .session_manager import ThreadSafeSessionManager


class SyncTransport:
    """
    Транспорт на базе requests.Session.

    У каждого потока своя сессия: попытка, брошенная deadline gate,
    никогда не делит сессию со следующей попыткой или с другим запросом.

    Example:
        >>> with SyncTransport() as transport:
        ...     outcome = transport.send(descriptor, timeout_ms=10000)
    """

    def __init__(self, session_factory: Optional[Callable[[], requests.Session]] = None):
        """
        Args:
            session_factory: Создаёт сессию для нового потока (по умолчанию requests.Session)
        """
        self._sessions = ThreadSafeSessionManager(session_factory or requests.Session)

    def send(self, descriptor: RequestDescriptor, timeout_ms: float) -> AttemptOutcome:
        """
        Выполнить одну попытку.

        Args:
            descriptor: Описание запроса
            timeout_ms: Таймаут соединения и чтения (мс)

        Returns:
            Success или Failure(NETWORK/TIMEOUT)
        """
        timeout = timeout_ms / 1000
        try:
            response = self._sessions.get_session().request(
                method=descriptor.method,
                url=descriptor.url,
                headers=dict(descriptor.headers),
                data=descriptor.content.encode("utf-8") if descriptor.content is not None else None,
                timeout=(timeout, timeout),
            )
        except requests.exceptions.Timeout as e:
            return Failure(kind=ErrorKind.TIMEOUT, status=TIMEOUT_STATUS, cause=e)
        except requests.exceptions.RequestException as e:
            # DNS, connection refused/reset, прокси, обрыв передачи
            return Failure(kind=ErrorKind.NETWORK, cause=e)

        return Success(
            status=response.status_code,
            raw_body=response.content,
            content_type=response.headers.get("Content-Type", ""),
        )

    def close(self) -> None:
        """Закрыть сессии всех потоков."""
        self._sessions.close_all()

    def __enter__(self) -> "SyncTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class AsyncTransport:
    """
    Транспорт на базе httpx.AsyncClient.

    Клиент создаётся лениво, при первой попытке (внутри работающего loop).

    Example:
        >>> async with AsyncTransport() as transport:
        ...     outcome = await transport.send(descriptor, timeout_ms=10000)
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            client: Готовый httpx.AsyncClient (например, с MockTransport в тестах)
        """
        self._owns_client = client is None
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def send(self, descriptor: RequestDescriptor, timeout_ms: float) -> AttemptOutcome:
        """
        Выполнить одну попытку.

        Args:
            descriptor: Описание запроса
            timeout_ms: Таймаут httpx (мс); общий дедлайн держит deadline gate

        Returns:
            Success или Failure(NETWORK/TIMEOUT)
        """
        client = self._get_client()
        try:
            response = await client.request(
                descriptor.method,
                descriptor.url,
                headers=dict(descriptor.headers),
                content=descriptor.content,
                timeout=timeout_ms / 1000,
            )
        except httpx.TimeoutException as e:
            return Failure(kind=ErrorKind.TIMEOUT, status=TIMEOUT_STATUS, cause=e)
        except httpx.RequestError as e:
            return Failure(kind=ErrorKind.NETWORK, cause=e)

        return Success(
            status=response.status_code,
            raw_body=response.content,
            content_type=response.headers.get("content-type", ""),
        )

    async def close(self) -> None:
        """Закрыть клиент, если он создан транспортом."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AsyncTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
