"""
Custom exceptions for cloudfront_core.

This module defines the exception hierarchy used throughout
the library. Every failure is surfaced as one of these types;
none of them is retried internally.
"""

from typing import Optional


class CloudFrontError(Exception):
    """Base exception for all cloudfront_core errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class TransportError(CloudFrontError):
    """Raised when a connection cannot be opened, written to or read from."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Transport error: {message}", cause)


class TimeoutError(TransportError):
    """Raised when connecting or an I/O operation exceeds its deadline."""

    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        if timeout is not None:
            message = f"{message} (timeout: {timeout}s)"
        super().__init__(message, cause)
        self.timeout = timeout


class StreamError(CloudFrontError):
    """Raised when a response body stream is used after it was closed."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Stream error: {message}", cause)


class ProtocolError(CloudFrontError):
    """Raised when the response violates HTTP framing or the document schema."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Protocol error: {message}", cause)


class ApiError(CloudFrontError):
    """
    Raised when the server answers with an ErrorResponse document.

    The message is exactly ``"{Code}: {Message}"`` as reported by the
    server; ``status_code`` is the HTTP status of the response.
    """

    def __init__(
        self,
        code: str,
        error_message: str,
        status_code: int,
        error_type: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(f"{code}: {error_message}")
        self.code = code
        self.error_message = error_message
        self.status_code = status_code
        self.error_type = error_type
        self.request_id = request_id


class ValidationError(CloudFrontError):
    """Raised when required configuration is missing before any network call."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Validation error: {message}", cause)


class StateError(CloudFrontError):
    """Raised when a distribution is not in a state that allows the operation."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"State error: {message}", cause)


class ConflictError(StateError):
    """Raised when a cached etag no longer matches the server's current one."""

    def __init__(self, local_etag: Optional[str], server_etag: Optional[str]) -> None:
        super().__init__(
            f"etag {local_etag!r} is stale, server reports {server_etag!r}"
        )
        self.local_etag = local_etag
        self.server_etag = server_etag
