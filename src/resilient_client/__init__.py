"""Resilient Client - HTTP client with per-attempt deadlines, retry and fallback."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.http_client import ResilientClient
from .async_client import AsyncResilientClient
from .core.config import ClientConfig, RetryPolicy
from .core.result import RequestResult
from .core.fallback import FallbackProvider, DEFAULT_FALLBACKS
from .core.exceptions import (
    ErrorKind,
    ApiError,
    ConfigValidationError,
)
from .core.logging import LoggingConfig
from .core.env_config import load_from_env, ConfigFileLoader

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('resilient_client')
logging.getLogger('resilient_client').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("resilient-request-client")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__author__ = "Resilient Client Contributors"
__license__ = "MIT"

# All public exports
__all__ = [
    # Clients
    "ResilientClient",
    "AsyncResilientClient",

    # Config
    "ClientConfig",
    "RetryPolicy",
    "LoggingConfig",
    "load_from_env",
    "ConfigFileLoader",

    # Results
    "RequestResult",
    "FallbackProvider",
    "DEFAULT_FALLBACKS",

    # Exceptions
    "ErrorKind",
    "ApiError",
    "ConfigValidationError",

    # Version
    "__version__",
]
