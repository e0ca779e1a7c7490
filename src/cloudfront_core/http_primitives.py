"""
HTTP primitives for cloudfront_core.

This module defines the core data structures for HTTP requests and responses.
Both classes are immutable.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

# Type aliases for better readability
Headers = List[Tuple[bytes, bytes]]
StatusCode = int


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return value


@dataclass(frozen=True)
class Request:
    """
    Immutable HTTP request representation.

    ``target`` is the request-target as sent on the request line
    (path plus optional query string).
    """

    method: bytes
    target: bytes
    headers: Headers = field(default_factory=list)
    body: Optional[bytes] = None

    def __post_init__(self) -> None:
        """Validate request data after initialization."""
        if not isinstance(self.method, bytes):
            raise ValueError("method must be bytes")

        if not isinstance(self.target, bytes) or not self.target.startswith(b"/"):
            raise ValueError("target must be bytes starting with '/'")

        if not isinstance(self.headers, list):
            raise ValueError("headers must be a list")

        for name, value in self.headers:
            if not isinstance(name, bytes) or not isinstance(value, bytes):
                raise ValueError("header names and values must be bytes")

        if self.body is not None and not isinstance(self.body, bytes):
            raise ValueError("body must be bytes or None")

    @classmethod
    def create(
        cls,
        method: Union[str, bytes],
        target: Union[str, bytes],
        headers: Optional[Headers] = None,
        body: Optional[Union[str, bytes]] = None,
    ) -> "Request":
        """
        Create a Request with proper type conversion.

        Args:
            method: HTTP method (GET, POST, etc.)
            target: Path and optional query string
            headers: Optional list of (name, value) header tuples
            body: Optional request body; text is encoded as UTF-8

        Returns:
            New Request instance
        """
        return cls(
            method=_to_bytes(method),
            target=_to_bytes(target),
            headers=list(headers or []),
            body=None if body is None else _to_bytes(body),
        )

    @property
    def content_length(self) -> int:
        """Byte length of the body (0 when there is none)."""
        return len(self.body) if self.body is not None else 0


@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response representation.

    Header names are stored lower-cased so lookups are case-insensitive.
    ``body`` always holds the complete payload.
    """

    status_code: StatusCode
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    reason: str = ""

    def __post_init__(self) -> None:
        """Validate response data after initialization."""
        if not isinstance(self.status_code, int):
            raise ValueError("status_code must be int")

        if not isinstance(self.headers, dict):
            raise ValueError("headers must be a dict")

        for name in self.headers:
            if name != name.lower():
                raise ValueError("header names must be lower-case")

    @classmethod
    def create(
        cls,
        status_code: StatusCode,
        headers: Optional[Dict[str, str]] = None,
        body: bytes = b"",
        reason: str = "",
    ) -> "Response":
        """Create a Response, normalizing header names to lower case."""
        normalized = {name.lower(): value for name, value in (headers or {}).items()}
        return cls(
            status_code=status_code,
            headers=normalized,
            body=body,
            reason=reason,
        )

    def get_header(self, name: str) -> Optional[str]:
        """Get a header value by name (case-insensitive)."""
        return self.headers.get(name.lower())

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def etag(self) -> Optional[str]:
        return self.get_header("etag")
