"""
Configuration loading for Resilient Client.

Load configuration from environment variables, .env files and YAML/JSON files.

Example:
    >>> from resilient_client.core.env_config import load_from_env, ConfigFileLoader
    >>>
    >>> # Load from environment / .env
    >>> config = load_from_env()
    >>>
    >>> # Load with overrides
    >>> config = load_from_env(base_url="https://custom.api.com")
    >>>
    >>> # Load from file
    >>> config = ConfigFileLoader.from_file("config.yaml")
"""

from .loader import load_from_env, print_config_summary
from .file_loader import ConfigFileLoader, load_config_file
from .validator import ClientSettings, FileSettings, LoggingSettings

__all__ = [
    # Loaders
    "load_from_env",
    "print_config_summary",
    "ConfigFileLoader",
    "load_config_file",
    # Validators
    "ClientSettings",
    "FileSettings",
    "LoggingSettings",
]
