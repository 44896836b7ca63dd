# src/resilient_client/core/error_handler.py

from typing import Any, Mapping, Optional

from .exceptions import ApiError, ErrorKind
from .outcome import AttemptOutcome, Failure

STATUS_MESSAGES: Mapping[int, str] = {
    400: "Bad request. Please check your input.",
    401: "Unauthorized. Please log in again.",
    403: "Access forbidden. You don't have permission.",
    404: "Resource not found.",
    409: "Conflict. The resource already exists.",
    422: "Validation failed. Please check your input.",
    429: "Too many requests. Please try again later.",
    500: "Server error. Please try again later.",
    502: "Bad gateway. Service temporarily unavailable.",
    503: "Service unavailable. Please try again later.",
    504: "Gateway timeout. Please try again later.",
}

GENERIC_HTTP_MESSAGE = "An unexpected error occurred."
NETWORK_MESSAGE = "Network error. Please check your internet connection."
TIMEOUT_MESSAGE = "Request timeout. Please check your connection and try again."
UNKNOWN_MESSAGE = "An unexpected error occurred. Please try again."


def _body_message(data: Any) -> Optional[str]:
    """Сообщение сервера из тела {"message": "..."}, если есть."""
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message:
            return message
    return None


class ErrorClassifier:
    """Класс для преобразования результата попытки в ApiError"""

    def __init__(self, status_messages: Optional[Mapping[int, str]] = None):
        self._status_messages = dict(STATUS_MESSAGES)
        if status_messages:
            self._status_messages.update(status_messages)

    def message_for_status(self, status_code: int) -> str:
        """Сообщение из таблицы статусов или общее сообщение"""
        return self._status_messages.get(status_code, GENERIC_HTTP_MESSAGE)

    def classify(self, outcome: AttemptOutcome, data: Any = None) -> Optional[ApiError]:
        """
        Классифицирует результат попытки.

        Args:
            outcome: Success или Failure
            data: Декодированное тело (для Success)

        Returns:
            None для 2xx, иначе ApiError с текущим timestamp
        """
        if isinstance(outcome, Failure):
            return self._classify_failure(outcome)

        if outcome.ok:
            return None

        message = _body_message(data) or self.message_for_status(outcome.status)
        return ApiError(ErrorKind.HTTP, message, outcome.status, cause=data)

    @staticmethod
    def _classify_failure(failure: Failure) -> ApiError:
        if failure.kind is ErrorKind.NETWORK:
            return ApiError(ErrorKind.NETWORK, NETWORK_MESSAGE, 0, cause=failure.cause)

        if failure.kind is ErrorKind.TIMEOUT:
            return ApiError(ErrorKind.TIMEOUT, TIMEOUT_MESSAGE, 408, cause=failure.cause)

        return ApiError(ErrorKind.UNKNOWN, UNKNOWN_MESSAGE, 0, cause=failure.cause)

    @staticmethod
    def is_retryable(error: ApiError) -> bool:
        """Проверяет, можно ли повторить запрос после этой ошибки"""

        # Таймауты, сетевые ошибки и 5xx; 429 и прочие 4xx - никогда
        return error.retryable
