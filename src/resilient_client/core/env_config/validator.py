"""
Pydantic validators for client configuration.

ClientSettings reads RESILIENT_CLIENT_* environment variables;
FileSettings validates the contents of YAML/JSON config files.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY_MS, DEFAULT_TIMEOUT_MS
from ..logging.config import DEFAULT_MAX_BYTES, LoggingConfig

MAX_RETRIES_LIMIT = 10


class LoggingSettings(BaseModel):
    """Logging section of a config file."""

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text"] = Field(default="text")
    enable_console: bool = Field(default=True)
    enable_file: bool = Field(default=False)
    file_path: Optional[str] = None
    max_bytes: int = Field(default=DEFAULT_MAX_BYTES, gt=0)
    backup_count: int = Field(default=5, ge=0)
    enable_correlation_id: bool = Field(default=True)

    @model_validator(mode="after")
    def validate_file_path(self) -> "LoggingSettings":
        """Validate file_path is required when enable_file=True."""
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        return self

    def to_logging_config(self) -> LoggingConfig:
        return LoggingConfig.create(**self.model_dump())


class FileSettings(BaseModel):
    """
    Contents of a config file (the resilient_client section).

    Unknown keys are rejected so that typos do not silently fall back
    to defaults.
    """

    model_config = ConfigDict(extra='forbid')

    base_url: Optional[str] = None
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, le=MAX_RETRIES_LIMIT)
    retry_delay_ms: float = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)
    headers: Dict[str, str] = Field(default_factory=dict)
    fallbacks: Optional[Dict[str, Any]] = None
    logging: Optional[LoggingSettings] = None


class ClientSettings(BaseSettings):
    """
    Client configuration from environment variables.

    Reads from:
    1. Init arguments (overrides)
    2. Environment variables (RESILIENT_CLIENT_*)
    3. .env file
    4. Defaults

    Example .env file:
        RESILIENT_CLIENT_BASE_URL=http://localhost:3000/api
        RESILIENT_CLIENT_TIMEOUT_MS=5000
        RESILIENT_CLIENT_MAX_RETRIES=2
        RESILIENT_CLIENT_RETRY_DELAY_MS=500
        RESILIENT_CLIENT_LOG_ENABLED=true
        RESILIENT_CLIENT_LOG_LEVEL=DEBUG

    Usage:
        >>> settings = ClientSettings()
        >>> print(settings.timeout_ms)
        10000
    """

    model_config = SettingsConfigDict(
        env_prefix='RESILIENT_CLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="", description="Base URL for all requests")
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0, description="Per-attempt deadline")
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0, le=MAX_RETRIES_LIMIT)
    retry_delay_ms: float = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)

    # Logging
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    def to_logging_config(self) -> Optional[LoggingConfig]:
        """LoggingConfig if logging is enabled, else None."""
        if not self.log_enabled:
            return None

        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_file=bool(self.log_file_path),
            file_path=self.log_file_path,
        )
