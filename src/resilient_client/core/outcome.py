"""Результат одной попытки (AttemptOutcome)."""

from dataclasses import dataclass
from typing import Any, Optional, Union

from .exceptions import ErrorKind


@dataclass(frozen=True)
class Success:
    """
    Завершённый HTTP обмен - независимо от статус кода.

    Attributes:
        status: HTTP статус
        raw_body: Сырое тело ответа
        content_type: Значение Content-Type ('' если отсутствует)
    """
    status: int
    raw_body: bytes
    content_type: str = ""

    @property
    def ok(self) -> bool:
        """2xx статус."""
        return 200 <= self.status < 300


@dataclass(frozen=True)
class Failure:
    """
    Попытка не дала HTTP ответа (или ответ не удалось декодировать).

    Attributes:
        kind: Категория (NETWORK, TIMEOUT, UNKNOWN)
        status: Статус если известен (408 для TIMEOUT)
        cause: Исходное исключение
    """
    kind: ErrorKind
    status: Optional[int] = None
    cause: Any = None


AttemptOutcome = Union[Success, Failure]
