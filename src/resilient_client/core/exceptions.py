"""
Исключения Resilient Client.

Наружу выходит только ApiError - единый тип ошибки с дискриминантом kind:
- NETWORK (status_code=0) - ошибка соединения, retryable
- TIMEOUT (status_code=408) - превышен дедлайн попытки, retryable
- HTTP (status_code=статус) - non-2xx ответ, retryable только для >= 500
- UNKNOWN (status_code=0) - ошибка декодирования или неизвестная причина
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TAXONOMY
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ErrorKind(str, Enum):
    """Стабильные категории ошибок."""
    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP = "http"
    UNKNOWN = "unknown"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# API ERROR
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ApiError(Exception):
    """
    Классифицированная ошибка запроса.

    Args:
        kind: Категория ошибки (ErrorKind)
        message: Сообщение для пользователя
        status_code: HTTP статус (0 если неприменимо)
        cause: Исходная ошибка или тело ответа (опционально)
        timestamp: Время создания (по умолчанию - сейчас, UTC)

    Examples:
        >>> error = ApiError(ErrorKind.HTTP, "Resource not found.", 404)
        >>> error.retryable
        False
        >>> ApiError(ErrorKind.TIMEOUT, "Request timeout.", 408).retryable
        True
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        status_code: int = 0,
        cause: Any = None,
        timestamp: Optional[datetime] = None
    ):
        self._kind = ErrorKind(kind)
        self._message = message
        self._status_code = status_code
        self._cause = cause
        self._timestamp = timestamp or datetime.now(timezone.utc)
        super().__init__(message)

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def message(self) -> str:
        return self._message

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def cause(self) -> Any:
        """Исходная ошибка транспорта/декодера или декодированное тело ответа."""
        return self._cause

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def retryable(self) -> bool:
        """
        Можно ли повторить попытку после этой ошибки.

        Зависит только от kind/status_code, не от номера попытки.
        429 намеренно НЕ ретраится.
        """
        if self._kind in (ErrorKind.TIMEOUT, ErrorKind.NETWORK):
            return True
        return self._kind is ErrorKind.HTTP and self._status_code >= 500

    def to_dict(self) -> Dict[str, Any]:
        """Представление для логов и UI."""
        return {
            "kind": self._kind.value,
            "message": self._message,
            "statusCode": self._status_code,
            "timestamp": self._timestamp.isoformat(),
        }

    def __repr__(self) -> str:
        return (
            f"ApiError(kind={self._kind.value!r}, message={self._message!r}, "
            f"status_code={self._status_code})"
        )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ВНУТРЕННИЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ResponseDecodeError(Exception):
    """
    Тело ответа не удалось разобрать.

    Не выходит за пределы RetryCoordinator - превращается в ApiError(UNKNOWN).

    Args:
        content_type: Заявленный Content-Type
        cause: Исходное исключение парсера
    """

    def __init__(self, content_type: str, cause: Exception):
        self.content_type = content_type
        self.cause = cause
        super().__init__(f"Failed to decode response body ({content_type}): {cause}")


class ConfigValidationError(Exception):
    """Невалидный файл конфигурации."""
    pass
