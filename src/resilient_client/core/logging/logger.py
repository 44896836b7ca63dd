"""
Structured logger for Resilient Client.

Keyword arguments of every call become record fields (extra=), masked by
the sanitizer before they reach any handler.
"""

import logging
from typing import Optional, Any, Dict

from .config import LoggingConfig
from .formatters import get_formatter, RESERVED_ATTRS
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data

DEFAULT_LOGGER_NAME = "resilient_client"


class ClientLogger:
    """
    Logger with console/file handlers, JSON or text output and correlation IDs.

    Example:
        >>> logger = ClientLogger(LoggingConfig.create(level="DEBUG", format="json"))
        >>> logger.info("Request started", method="GET", url="https://api.com/data")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = DEFAULT_LOGGER_NAME):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self.config.level.number)
        self._logger.propagate = False

        # Reinitialising the same name replaces the previous handlers
        self._close_handlers()

        filters = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)
        level = self.config.level.number

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters
            ))

    @staticmethod
    def _extra(fields: Dict[str, Any]) -> Dict[str, Any]:
        # LogRecord refuses extra keys that shadow its own attributes
        safe = {
            (f"field_{key}" if key in RESERVED_ATTRS else key): value
            for key, value in fields.items()
        }
        return mask_sensitive_data(safe)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, extra=self._extra(kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Example:
            >>> logger.info("Request completed", status_code=200, duration_ms=150)
        """
        self._logger.info(message, extra=self._extra(kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, extra=self._extra(kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, extra=self._extra(kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log with traceback; call from an exception handler."""
        self._logger.exception(message, extra=self._extra(kwargs))

    @property
    def handlers(self):
        return list(self._logger.handlers)

    def _close_handlers(self) -> None:
        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

    def close(self) -> None:
        """
        Flush and close all handlers. Idempotent.

        Example:
            >>> with ClientLogger(config) as logger:
            ...     logger.info("Processing...")
        """
        if self._closed:
            return
        self._close_handlers()
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
