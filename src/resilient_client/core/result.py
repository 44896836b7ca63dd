"""RequestResult - единственная форма результата, возвращаемая вызывающему."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RequestResult:
    """
    Результат логического запроса.

    Attributes:
        success: True для 2xx ответа
        data: Декодированное тело или fallback payload
        status_code: HTTP статус (или status_code ошибки для fallback)
        error: Сообщение ошибки (только для fallback)
        is_fallback: Данные взяты из fallback таблицы

    Examples:
        >>> RequestResult(success=True, data={"ok": True}, status_code=200).to_dict()
        {'success': True, 'data': {'ok': True}, 'statusCode': 200}
    """
    success: bool
    data: Any
    status_code: int
    error: Optional[str] = None
    is_fallback: bool = False

    def __post_init__(self):
        """Инвариант: fallback никогда не считается успехом."""
        if self.is_fallback and self.success:
            raise ValueError("fallback result cannot be successful")

    def to_dict(self) -> Dict[str, Any]:
        """Wire-форма для UI: {success, data, statusCode, error?, isFallback?}."""
        result: Dict[str, Any] = {
            "success": self.success,
            "data": self.data,
            "statusCode": self.status_code,
        }
        if self.error is not None:
            result["error"] = self.error
        if self.is_fallback:
            result["isFallback"] = True
        return result
