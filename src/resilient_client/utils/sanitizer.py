# src/resilient_client/utils/sanitizer.py
"""
Маскирование чувствительных данных перед записью в логи.

Заголовки Authorization, токены в URL, пароли в теле запроса не должны
попадать в лог-файлы.
"""

import re
from typing import Any, Dict, Mapping

REDACTED = "***REDACTED***"

# Чувствительные поля (case-insensitive, частичное совпадение)
SENSITIVE_KEYS = frozenset({
    'password', 'passwd',
    'token', 'jwt',
    'secret',
    'api_key', 'apikey', 'private_key',
    'authorization', 'cookie', 'session',
    'credentials', 'credit_card', 'card_number', 'cvv',
})

# Паттерны для строк
SENSITIVE_PATTERNS = [
    # Bearer / Basic в заголовках
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + REDACTED),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + REDACTED),
    # key=value / key: value
    (re.compile(r'(api[_-]?key[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + REDACTED),
    (re.compile(r'(token[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + REDACTED),
    (re.compile(r'(password[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + REDACTED),
    # user:password@host
    (re.compile(r'://([^:/@\s]+):([^@/\s]+)@'), r'://\1:' + REDACTED + '@'),
]


def is_sensitive_key(key: str) -> bool:
    """
    Является ли ключ чувствительным.

    Examples:
        >>> is_sensitive_key("x_api_key")
        True
        >>> is_sensitive_key("status_code")
        False
    """
    key = key.lower()
    return any(sensitive in key for sensitive in SENSITIVE_KEYS)


def mask_sensitive_data(data: Any, mask: str = REDACTED) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в dict/list/tuple/str.

    Args:
        data: Данные для маскирования
        mask: Строка-заменитель

    Returns:
        Копия данных с замаскированными значениями

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "method": "GET"})
        {'Authorization': '***REDACTED***', 'method': 'GET'}
        >>> mask_sensitive_data("https://api.example.com?token=abc&page=1")
        'https://api.example.com?token=***REDACTED***&page=1'
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        result = data
        for pattern, replacement in SENSITIVE_PATTERNS:
            result = pattern.sub(replacement.replace(REDACTED, mask), result)
        return result

    if isinstance(data, Mapping):
        return mask_headers(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    # Прочие объекты (исключения, enum, datetime) - как есть
    return data


def mask_headers(headers: Mapping[str, Any], mask: str = REDACTED) -> Dict[str, Any]:
    """
    Маскирует значения чувствительных ключей словаря (заголовки, поля лога).

    Examples:
        >>> mask_headers({"Authorization": "Bearer token123", "Content-Type": "application/json"})
        {'Authorization': '***REDACTED***', 'Content-Type': 'application/json'}
    """
    result = {}
    for key, value in headers.items():
        # Дефисы заголовков приводим к виду полей: X-Api-Key -> x_api_key
        normalized = str(key).replace('-', '_')
        if is_sensitive_key(normalized):
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result
