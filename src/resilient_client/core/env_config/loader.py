"""
Configuration loader from environment variables and .env files.

Main entry point for loading configuration.
"""

from typing import Any, Optional

from ..config import ClientConfig
from .validator import ClientSettings


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (RESILIENT_CLIENT_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path (default: ./.env if present)
        **overrides: Explicit values for ClientSettings fields

    Returns:
        ClientConfig instance

    Raises:
        TypeError: Unknown override name
        pydantic.ValidationError: Invalid value (out of range, wrong type)

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(base_url="https://custom.api.com", max_retries=3)
    """
    unknown = set(overrides) - set(ClientSettings.model_fields)
    if unknown:
        raise TypeError(f"Unknown config override(s): {', '.join(sorted(unknown))}")

    # Init kwargs have the highest priority in pydantic-settings
    if env_file is None:
        settings = ClientSettings(**overrides)
    else:
        settings = ClientSettings(_env_file=env_file, **overrides)

    return ClientConfig.create(
        base_url=settings.base_url or None,
        timeout_ms=settings.timeout_ms,
        max_retries=settings.max_retries,
        retry_delay_ms=settings.retry_delay_ms,
        logging=settings.to_logging_config(),
    )


def print_config_summary(config: ClientConfig) -> None:
    """
    Print configuration summary.

    Header values are masked.

    Example:
        >>> print_config_summary(load_from_env())
        ClientConfig:
          base_url: http://localhost:3000/api
          timeout_ms: 10000
          ...
    """
    from ...utils.sanitizer import mask_headers

    print("ClientConfig:")
    print(f"  base_url: {config.base_url}")
    print(f"  timeout_ms: {config.timeout_ms}")
    print(f"  retry: max_retries={config.retry.max_retries}, base_delay_ms={config.retry.base_delay_ms}")
    if config.headers:
        print(f"  headers: {mask_headers(config.headers)}")
    if config.fallbacks is not None:
        print(f"  fallbacks: {', '.join(config.fallbacks)}")

    if config.logging:
        print(f"  logging: level={config.logging.level.value}, format={config.logging.format.value}")
        if config.logging.enable_file:
            print(f"    file: {config.logging.file_path}")
