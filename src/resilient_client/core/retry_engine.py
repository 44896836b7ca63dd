"""
Retry engine: состояние повторных попыток одного логического запроса.

Создаётся заново на каждый запрос - счётчик попыток никогда не
разделяется между запросами.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from .config import RetryPolicy
from .exceptions import ApiError

logger = logging.getLogger(__name__)


class RetryEngine:
    """
    Решения о retry для одного логического запроса.

    Examples:
        >>> engine = RetryEngine(RetryPolicy(max_retries=1, base_delay_ms=1000))
        >>> if engine.should_retry(error):
        >>>     engine.wait()          # 1.0 сек для attempt=0
        >>>     engine.increment()
    """

    def __init__(
        self,
        policy: RetryPolicy,
        sleep: Optional[Callable[[float], None]] = None,
        async_sleep: Optional[Callable[[float], Awaitable[None]]] = None
    ):
        """
        Args:
            policy: Политика retry
            sleep: Функция ожидания (по умолчанию time.sleep)
            async_sleep: Async функция ожидания (по умолчанию asyncio.sleep)
        """
        self.policy = policy
        self._sleep = sleep or time.sleep
        self._async_sleep = async_sleep or asyncio.sleep
        self._attempt = 0

    def should_retry(self, error: ApiError) -> bool:
        """
        Решить нужен ли retry.

        Args:
            error: Классифицированная ошибка текущей попытки

        Returns:
            True если ошибка retryable и бюджет попыток не исчерпан
        """
        # Лимит: attempt < max_retries
        if self._attempt >= self.policy.max_retries:
            return False

        return error.retryable

    def get_wait_time(self) -> float:
        """
        Вычислить время ожидания перед следующей попыткой.

        Зависит только от индекса попытки, не от прошедшего времени.

        Returns:
            Секунды для ожидания
        """
        return self.policy.delay_ms(self._attempt) / 1000

    def wait(self) -> None:
        """Синхронное ожидание перед retry."""
        self._sleep(self.get_wait_time())

    async def async_wait(self) -> None:
        """
        Асинхронное ожидание перед retry (async-версия).

        Examples:
            >>> await engine.async_wait()
        """
        await self._async_sleep(self.get_wait_time())

    def increment(self):
        """Увеличить счётчик попыток."""
        self._attempt += 1
        logger.debug(f"Advancing to attempt {self._attempt + 1}/{self.policy.max_attempts}")

    @property
    def attempt(self) -> int:
        """Текущая попытка (с 0)."""
        return self._attempt

    @property
    def max_attempts(self) -> int:
        return self.policy.max_attempts
