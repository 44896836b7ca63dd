"""
Настройки логирования клиента.

Попадают в ClientConfig.logging; None там означает, что клиент не
создаёт ClientLogger и пишет только в module loggers (NullHandler).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def number(self) -> int:
        """Числовой уровень модуля logging."""
        return getattr(logging, self.value)


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Куда и в каком виде писать события запросов.

    События: "Request started", "Attempt failed, retrying",
    "Request completed", "Request failed". Поля событий маскируются
    перед записью (utils.sanitizer).

    Attributes:
        level: Минимальный уровень для handlers
        format: json (один объект на строку) или text
        enable_console: Писать в stdout
        enable_file: Писать в ротируемый файл file_path
        max_bytes / backup_count: Параметры ротации
        enable_correlation_id: Добавлять correlation_id запроса в каждую запись
        extra_fields: Статические поля каждой записи (service, environment, ...)

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json")
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")

    @classmethod
    def create(cls, level: str = "INFO", format: str = "text", **options: Any) -> "LoggingConfig":
        """
        Собрать конфиг из строк (env переменные, YAML).

        Args:
            level: Имя уровня в любом регистре
            format: json или text в любом регистре
            **options: Остальные поля LoggingConfig

        Raises:
            ValueError: Неизвестный уровень или формат
        """
        if options.get("extra_fields") is None:
            options.pop("extra_fields", None)
        return cls(level=LogLevel(level.upper()), format=LogFormat(format.lower()), **options)
