"""
Configuration file loader for YAML and JSON files.

Supports loading ClientConfig from external configuration files.

Example config.yaml:
    resilient_client:
      base_url: http://localhost:3000/api
      timeout_ms: 5000
      max_retries: 2
      retry_delay_ms: 500
      headers:
        X-Client: dashboard
      fallbacks:
        /data: {items: [], message: Using cached data}
      logging:
        level: DEBUG
        format: json
"""

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..config import ClientConfig
from ..exceptions import ConfigValidationError
from .validator import FileSettings

CONFIG_FILE_ENV_VAR = "RESILIENT_CLIENT_CONFIG_FILE"
SECTION_NAME = "resilient_client"


class ConfigFileLoader:
    """
    Загрузчик конфигурации из файлов.

    Supports YAML and JSON formats with automatic format detection.

    Examples:
        >>> config = ConfigFileLoader.from_yaml("config.yaml")
        >>> config = ConfigFileLoader.from_json("config.json")
        >>> config = ConfigFileLoader.from_file("config.yaml")  # Auto-detect
        >>> config = ConfigFileLoader.from_env_path()  # From RESILIENT_CLIENT_CONFIG_FILE env var
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> ClientConfig:
        """
        Загрузить конфиг из YAML файла.

        Args:
            path: Путь к YAML файлу

        Returns:
            ClientConfig instance

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный

        Example:
            >>> config = ConfigFileLoader.from_yaml("config.yaml")
            >>> client = ResilientClient(config=config)
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}") from e

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> ClientConfig:
        """
        Загрузить конфиг из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}") from e

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> ClientConfig:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in [".yaml", ".yml"]:
            return ConfigFileLoader.from_yaml(path)
        elif suffix == ".json":
            return ConfigFileLoader.from_json(path)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                f"Supported formats: .yaml, .yml, .json"
            )

    @staticmethod
    def from_env_path() -> Optional[ClientConfig]:
        """
        Загрузить из пути указанного в RESILIENT_CLIENT_CONFIG_FILE.

        Returns:
            ClientConfig instance or None if env var not set

        Example:
            >>> # export RESILIENT_CLIENT_CONFIG_FILE=/path/to/config.yaml
            >>> config = ConfigFileLoader.from_env_path()
            >>> if config:
            ...     client = ResilientClient(config=config)
        """
        config_path = os.environ.get(CONFIG_FILE_ENV_VAR)
        if not config_path:
            return None

        return ConfigFileLoader.from_file(config_path)

    @staticmethod
    def _build_config(data: Any, source: str) -> ClientConfig:
        """
        Build ClientConfig from parsed data.

        Raises:
            ConfigValidationError: If config is invalid
        """
        # Extract resilient_client section if present
        if isinstance(data, dict) and SECTION_NAME in data:
            config_data = data[SECTION_NAME]
        else:
            config_data = data

        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(config_data).__name__} in {source}"
            )

        try:
            settings = FileSettings.model_validate(config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}") from e

        try:
            return ClientConfig.create(
                base_url=settings.base_url,
                timeout_ms=settings.timeout_ms,
                max_retries=settings.max_retries,
                retry_delay_ms=settings.retry_delay_ms,
                headers=settings.headers,
                fallbacks=settings.fallbacks,
                logging=settings.logging.to_logging_config() if settings.logging else None,
            )
        except (ValueError, TypeError) as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}") from e


def load_config_file(path: Union[str, Path]) -> ClientConfig:
    """Shortcut for ConfigFileLoader.from_file()."""
    return ConfigFileLoader.from_file(path)

