"""Core Resilient Client модули."""

from .config import (
    RetryPolicy,
    ClientConfig,
    linear_backoff,
)
from .context import RequestDescriptor, build_request
from .deadline import run_under_deadline, run_under_deadline_sync
from .transport import SyncTransport, AsyncTransport
from .session_manager import ThreadSafeSessionManager
from .outcome import AttemptOutcome, Success, Failure
from .decoder import ResponseDecoder
from .error_handler import ErrorClassifier
from .retry_engine import RetryEngine
from .coordinator import RetryCoordinator, AsyncRetryCoordinator
from .fallback import FallbackProvider
from .result import RequestResult
from .exceptions import (
    ErrorKind,
    ApiError,
    ResponseDecodeError,
    ConfigValidationError,
)
from .http_client import ResilientClient

__all__ = [
    # Config
    "RetryPolicy",
    "ClientConfig",
    "linear_backoff",
    # Request / outcome / result
    "RequestDescriptor",
    "build_request",
    "AttemptOutcome",
    "Success",
    "Failure",
    "RequestResult",
    # Components
    "run_under_deadline",
    "run_under_deadline_sync",
    "SyncTransport",
    "ThreadSafeSessionManager",
    "AsyncTransport",
    "ResponseDecoder",
    "ErrorClassifier",
    "RetryEngine",
    "RetryCoordinator",
    "AsyncRetryCoordinator",
    "FallbackProvider",
    # Client
    "ResilientClient",
    # Exceptions
    "ErrorKind",
    "ApiError",
    "ResponseDecodeError",
    "ConfigValidationError",
]
