"""
Система конфигурации для Resilient Client.

Все конфиги immutable (frozen dataclasses): один и тот же ClientConfig
безопасно разделяется между параллельными логическими запросами.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, TYPE_CHECKING
from types import MappingProxyType

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_TIMEOUT_MS = 10000
DEFAULT_MAX_RETRIES = 1
DEFAULT_RETRY_DELAY_MS = 1000

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY POLICY
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def linear_backoff(base_delay_ms: float) -> Callable[[int], float]:
    """
    Линейный backoff: base_delay_ms * (attempt + 1).

    Examples:
        >>> backoff = linear_backoff(1000)
        >>> backoff(0), backoff(1)
        (1000, 2000)
    """
    def backoff(attempt: int) -> float:
        return base_delay_ms * (attempt + 1)
    return backoff


@dataclass(frozen=True)
class RetryPolicy:
    """
    Политика повторных попыток.

    Args:
        max_retries: Количество повторов (всего попыток = max_retries + 1)
        base_delay_ms: Базовая задержка (мс)
        backoff: Функция attempt -> задержка (мс); по умолчанию линейная

    Examples:
        >>> RetryPolicy()  # 2 попытки, пауза 1000 мс
        >>> RetryPolicy(max_retries=3, base_delay_ms=200)
        >>> RetryPolicy(max_retries=2, backoff=lambda i: 100 * 2 ** i)
    """
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_ms: float = DEFAULT_RETRY_DELAY_MS
    backoff: Optional[Callable[[int], float]] = None

    def __post_init__(self):
        """Валидация."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be non-negative")

    @property
    def max_attempts(self) -> int:
        """Всего попыток, включая первую."""
        return self.max_retries + 1

    def delay_ms(self, attempt: int) -> float:
        """
        Задержка перед попыткой attempt + 1.

        Args:
            attempt: Индекс неудачной попытки (с 0)

        Returns:
            Миллисекунды ожидания
        """
        backoff = self.backoff or linear_backoff(self.base_delay_ms)
        delay = backoff(attempt)
        if delay < 0:
            raise ValueError(f"backoff returned negative delay: {delay}")
        return delay

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze(d: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Convert mapping to immutable MappingProxyType."""
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация клиента.

    Args:
        base_url: Префикс для всех логических путей
        timeout_ms: Дедлайн одной попытки (мс)
        retry: Политика retry по умолчанию
        headers: Дефолтные заголовки
        fallbacks: Таблица fallback payload (None = таблица по умолчанию)
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> config = ClientConfig(base_url="http://localhost:3000/api")
        >>> config = ClientConfig.create(timeout_ms=5000, max_retries=2)
    """
    base_url: Optional[str] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    fallbacks: Optional[Mapping[str, Any]] = None
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация, нормализация base_url и заморозка dict."""
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', _freeze(self.headers))
        if isinstance(self.fallbacks, dict):
            object.__setattr__(self, 'fallbacks', _freeze(self.fallbacks))

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay_ms: float = DEFAULT_RETRY_DELAY_MS,
        headers: Optional[Dict[str, str]] = None,
        fallbacks: Optional[Dict[str, Any]] = None,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'ClientConfig':
        """
        Удобный конструктор из плоских опций.

        Args:
            base_url: Базовый URL
            timeout_ms: Таймаут попытки (мс)
            max_retries: Количество повторов (не включая первую попытку)
            retry_delay_ms: Линейный множитель задержки (мс)
            headers: Заголовки
            fallbacks: Таблица fallback
            logging: Конфигурация логирования

        Examples:
            >>> config = ClientConfig.create(base_url="https://api.example.com", max_retries=3)
        """
        return cls(
            base_url=base_url,
            timeout_ms=timeout_ms,
            retry=RetryPolicy(max_retries=max_retries, base_delay_ms=retry_delay_ms),
            headers=headers or {},
            fallbacks=fallbacks,
            logging=logging,
        )

    def _replace(self, **changes: Any) -> 'ClientConfig':
        values = {
            'base_url': self.base_url,
            'timeout_ms': self.timeout_ms,
            'retry': self.retry,
            'headers': self.headers,
            'fallbacks': self.fallbacks,
            'logging': self.logging,
        }
        values.update(changes)
        return ClientConfig(**values)

    def with_timeout(self, timeout_ms: int) -> 'ClientConfig':
        """
        Создать новый конфиг с изменённым таймаутом.

        Example:
            >>> new_config = config.with_timeout(30000)
        """
        return self._replace(timeout_ms=timeout_ms)

    def with_retry_policy(self, retry: RetryPolicy) -> 'ClientConfig':
        """
        Создать новый конфиг с другой retry политикой.

        Example:
            >>> new_config = config.with_retry_policy(RetryPolicy(max_retries=0))
        """
        return self._replace(retry=retry)

    def with_headers(self, headers: Dict[str, str]) -> 'ClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return self._replace(headers=merged)
