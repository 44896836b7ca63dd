"""
Response decoder с явной таблицей согласования Content-Type.

Таблица: (паттерн Content-Type, стратегия). Побеждает первое совпадение.
"""

import json
import re
from typing import Any, Callable, List, Optional, Pattern, Sequence, Tuple

from .exceptions import ResponseDecodeError

DecodeStrategy = Callable[[bytes, str], Any]

_CHARSET_RE = re.compile(r'charset\s*=\s*"?([\w.:-]+)"?', re.IGNORECASE)


def _charset(content_type: str, default: str = "utf-8") -> str:
    match = _CHARSET_RE.search(content_type or "")
    return match.group(1) if match else default


def decode_json(raw_body: bytes, content_type: str) -> Any:
    """Структурный разбор JSON."""
    return json.loads(raw_body.decode(_charset(content_type)))


def decode_text(raw_body: bytes, content_type: str) -> str:
    """Сырой текст в заявленной кодировке (битые байты заменяются)."""
    try:
        return raw_body.decode(_charset(content_type), errors="replace")
    except LookupError:
        # Неизвестная кодировка в заголовке
        return raw_body.decode("utf-8", errors="replace")


DEFAULT_NEGOTIATION: Tuple[Tuple[Pattern[str], DecodeStrategy], ...] = (
    (re.compile(r"application/(?:[\w.+-]+\+)?json", re.IGNORECASE), decode_json),
    (re.compile(r".*", re.DOTALL), decode_text),
)


class ResponseDecoder:
    """
    Декодер тела ответа.

    Examples:
        >>> decoder = ResponseDecoder()
        >>> decoder.decode(b'{"ok": true}', "application/json; charset=utf-8")
        {'ok': True}
        >>> decoder.decode(b"plain", "text/plain")
        'plain'
    """

    def __init__(
        self,
        negotiation: Optional[Sequence[Tuple[Pattern[str], DecodeStrategy]]] = None
    ):
        """
        Args:
            negotiation: Своя таблица (по умолчанию DEFAULT_NEGOTIATION)
        """
        self._negotiation: List[Tuple[Pattern[str], DecodeStrategy]] = list(
            negotiation if negotiation is not None else DEFAULT_NEGOTIATION
        )

    def strategy_for(self, content_type: str) -> DecodeStrategy:
        """Стратегия для Content-Type (text, если ничего не подошло)."""
        for pattern, strategy in self._negotiation:
            if pattern.search(content_type or ""):
                return strategy
        return decode_text

    def decode(self, raw_body: bytes, content_type: str) -> Any:
        """
        Декодировать тело.

        Args:
            raw_body: Сырое тело
            content_type: Заявленный Content-Type

        Returns:
            Структура (JSON), строка или None для пустого тела

        Raises:
            ResponseDecodeError: Тело не соответствует заявленному формату
        """
        if not raw_body:
            return None

        strategy = self.strategy_for(content_type)
        try:
            return strategy(raw_body, content_type)
        except (ValueError, UnicodeDecodeError, LookupError, RecursionError) as e:
            # json.JSONDecodeError - подкласс ValueError; RecursionError - слишком глубокая вложенность
            raise ResponseDecodeError(content_type, e) from e
