"""Request descriptor: immutable description of one logical request."""

import json
import uuid
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH"})

DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType({"Content-Type": "application/json"})


@dataclass(frozen=True)
class RequestDescriptor:
    """Logical request built by the facade, shared by every attempt.

    Attributes:
        method: HTTP method (GET, POST, PUT, PATCH, DELETE)
        path: Logical endpoint path, also the fallback table key
        url: Full URL the transport sends to
        headers: Read-only header mapping
        body: Body value before serialization
        content: Encoded body (None for GET/DELETE)
        request_id: Unique identifier, sent as X-Correlation-ID

    Example:
        >>> descriptor = build_request("POST", "/users", "https://api.example.com/users",
        ...                            body={"name": "alice"})
        >>> descriptor.content
        '{"name": "alice"}'
    """

    method: str
    path: str
    url: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: Any = None
    content: Optional[str] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return ""


def merge_headers(*layers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """
    Merge header layers left to right, case-insensitively.

    A later layer replaces an earlier header even when the name differs
    in case, and keeps its own spelling.

    Example:
        >>> merge_headers({"Content-Type": "application/json"}, {"content-type": "text/plain"})
        {'content-type': 'text/plain'}
    """
    merged: Dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            for existing in [k for k in merged if k.lower() == key.lower()]:
                del merged[existing]
            merged[key] = value
    return merged


def encode_body(body: Any, content_type: str) -> Optional[str]:
    """
    Encode body to the declared content format.

    JSON content types get JSON text; str/bytes pass through for other
    content types.

    Raises:
        TypeError: Body cannot be encoded for the content type
    """
    if body is None:
        return None
    if "json" in content_type.lower():
        return json.dumps(body)
    if isinstance(body, bytes):
        return body.decode("utf-8")
    if isinstance(body, str):
        return body
    raise TypeError(
        f"Cannot encode body of type {type(body).__name__} as {content_type or 'unknown content type'}"
    )


def build_request(
    method: str,
    path: str,
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    body: Any = None,
) -> RequestDescriptor:
    """
    Build an immutable RequestDescriptor.

    Args:
        method: HTTP method (case-insensitive)
        path: Logical endpoint path
        url: Resolved URL
        headers: Extra headers layered over DEFAULT_HEADERS
        body: Body value for POST/PUT/PATCH

    Raises:
        ValueError: Unsupported method, or body passed to GET/DELETE
        TypeError: Body cannot be encoded
    """
    method = method.upper()
    if method not in SUPPORTED_METHODS:
        raise ValueError(
            f"Unsupported HTTP method: {method}. "
            f"Supported: {', '.join(sorted(SUPPORTED_METHODS))}"
        )
    if body is not None and method not in MUTATING_METHODS:
        raise ValueError(f"{method} requests cannot carry a body")

    merged = merge_headers(DEFAULT_HEADERS, headers)

    # Caller-supplied correlation ID wins
    request_id = next(
        (v for k, v in merged.items() if k.lower() == "x-correlation-id"), None
    )
    if request_id is None:
        request_id = str(uuid.uuid4())
        merged["X-Correlation-ID"] = request_id

    content_type = next((v for k, v in merged.items() if k.lower() == "content-type"), "")

    return RequestDescriptor(
        method=method,
        path=path,
        url=url,
        headers=MappingProxyType(merged),
        body=body,
        content=encode_body(body, content_type),
        request_id=request_id,
    )
