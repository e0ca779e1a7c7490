"""
HTTP/1.1 connection implementation for cloudfront_core.

This module implements the HTTP11Connection class that manages one
HTTP/1.1 request/response exchange over a NetworkStream. Outgoing
requests are framed with h11; the response is parsed directly from
the stream so that a missing status code, corrupt chunk framing and a
short read each surface as their own error.
"""

import logging
import re
import time
from enum import Enum
from typing import Any, Dict

import h11

from .exceptions import CloudFrontError, ProtocolError, TransportError
from .http_primitives import Request, Response
from .network.stream import NetworkStream
from .streams import StreamReader, create_body_stream

logger = logging.getLogger(__name__)

STATUS_CODE_PATTERN = re.compile(rb"(\d{3})")


class ConnectionState(Enum):
    """States of an HTTP/1.1 connection."""
    NEW = "new"           # Connection created, not yet used
    ACTIVE = "active"     # Connection handling a request
    IDLE = "idle"         # Response complete, server did not ask to close
    CLOSED = "closed"     # Connection closed, cannot be reused


def parse_status_code(status_line: bytes) -> int:
    """
    Extract the three-digit status code from a status line.

    Raises:
        ProtocolError: If the line holds no three-digit code
    """
    match = STATUS_CODE_PATTERN.search(status_line)
    if match is None:
        raise ProtocolError("No status code in response")
    return int(match.group(1))


class HTTP11Connection:
    """
    HTTP/1.1 connection manager.

    Sends one request at a time and reads the complete response,
    reassembling chunked bodies. The connection is closed as soon as
    the server sends ``Connection: close``.
    """

    def __init__(self, stream: NetworkStream) -> None:
        """
        Initialize HTTP/1.1 connection.

        Args:
            stream: The NetworkStream to use for communication
        """
        self._stream = stream
        self._reader = StreamReader(stream)
        self._state = ConnectionState.NEW

        # Metrics
        self._request_count = 0
        self._bytes_sent = 0
        self._errors_count = 0
        self._total_request_time = 0.0

        logger.debug("HTTP/1.1 connection initialized")

    def __enter__(self) -> "HTTP11Connection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def handle_request(self, request: Request) -> Response:
        """
        Handle a complete HTTP request/response cycle.

        Args:
            request: The HTTP request to send

        Returns:
            The HTTP response with its body fully read

        Raises:
            TransportError: If the connection fails or the body is truncated
            ProtocolError: If the response is not valid HTTP/1.1
        """
        start_time = time.time()
        self._request_count += 1

        self._acquire_connection()

        try:
            self._send_request(request)
            response = self._receive_response(request.method)
        except CloudFrontError as e:
            duration = time.time() - start_time
            self._errors_count += 1
            logger.error(
                f"Request {self._request_count} failed: {e} ({duration:.3f}s)"
            )
            self.close()
            raise

        duration = time.time() - start_time
        self._total_request_time += duration
        logger.debug(
            f"Request {self._request_count}: {request.method.decode()} "
            f"{request.target.decode()} -> {response.status_code} "
            f"({len(response.body)} bytes, {duration:.3f}s)"
        )

        self._release_connection(response)
        return response

    def _send_request(self, request: Request) -> None:
        """
        Frame the request with h11 and write it to the stream.

        Raises:
            ProtocolError: If h11 refuses to frame the request
        """
        h11_connection = h11.Connection(h11.CLIENT)
        try:
            parts = [
                h11_connection.send(
                    h11.Request(
                        method=request.method,
                        target=request.target,
                        headers=request.headers,
                    )
                )
            ]
            if request.body:
                parts.append(h11_connection.send(h11.Data(data=request.body)))
            parts.append(h11_connection.send(h11.EndOfMessage()))
        except h11.LocalProtocolError as e:
            raise ProtocolError(f"Cannot frame request: {e}", cause=e) from e

        data = b"".join(part for part in parts if part)
        self._stream.write(data)
        self._bytes_sent += len(data)

    def _receive_response(self, method: bytes) -> Response:
        """
        Read the status line, headers and body of the response.

        Args:
            method: Method of the request being answered

        Returns:
            The response with its body fully read
        """
        status_line = self._reader.readline()
        if not status_line:
            raise TransportError("Connection closed before a response was received")

        status_code = parse_status_code(status_line)
        reason = status_line.split(str(status_code).encode(), 1)[-1].strip()

        headers = self._read_headers()

        body_stream = create_body_stream(self._reader, headers, status_code, method)
        body = body_stream.read()

        return Response.create(
            status_code=status_code,
            headers=headers,
            body=body,
            reason=reason.decode("latin-1"),
        )

    def _read_headers(self) -> Dict[str, str]:
        """
        Read header lines up to the blank line ending the header block.

        Names are lower-cased; repeated headers are joined with ", ".
        """
        headers: Dict[str, str] = {}

        while True:
            line = self._reader.readline()
            if not line:
                raise TransportError("Connection closed while reading headers")
            if not line.strip():
                return headers

            if b":" not in line:
                raise ProtocolError(f"Malformed header line {line.strip()!r}")

            raw_name, raw_value = line.split(b":", 1)
            name = raw_name.strip().decode("latin-1").lower()
            value = raw_value.strip().decode("latin-1")

            if name in headers:
                headers[name] = f"{headers[name]}, {value}"
            else:
                headers[name] = value

    def _acquire_connection(self) -> None:
        """
        Acquire connection for use.

        Raises:
            TransportError: If connection is not available
        """
        if self._state == ConnectionState.CLOSED:
            raise TransportError("Connection is closed")

        if self._state == ConnectionState.ACTIVE:
            raise TransportError("Connection is busy")

        self._state = ConnectionState.ACTIVE

    def _release_connection(self, response: Response) -> None:
        """Close the connection if the server asked to, else mark it idle."""
        connection_header = response.get_header("connection") or ""
        if "close" in connection_header.lower():
            self.close()
        else:
            self._state = ConnectionState.IDLE

    def close(self) -> None:
        """
        Close the connection and cleanup resources.
        """
        if self._state != ConnectionState.CLOSED:
            self._state = ConnectionState.CLOSED
            self._stream.close()
            logger.debug(f"Connection closed after {self._request_count} requests")

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_closed(self) -> bool:
        """Check if connection is closed."""
        return self._state == ConnectionState.CLOSED

    @property
    def is_idle(self) -> bool:
        """Check if the connection finished a response and is still open."""
        return self._state == ConnectionState.IDLE

    @property
    def metrics(self) -> Dict[str, Any]:
        """
        Get connection metrics.

        Returns:
            Dictionary with connection metrics
        """
        return {
            "request_count": self._request_count,
            "bytes_sent": self._bytes_sent,
            "bytes_received": self._reader.bytes_received,
            "errors_count": self._errors_count,
            "total_request_time": self._total_request_time,
            "state": self._state.value,
        }
