"""
Mock network implementations for testing.

This module provides mock implementations of NetworkStream and NetworkBackend
that serve scripted responses from memory, allowing the whole request/response
cycle to be exercised without network access.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import TransportError
from .backend import NetworkBackend
from .stream import NetworkStream


class MockNetworkStream(NetworkStream):
    """
    Mock network stream for testing.

    Reads are served from an in-memory buffer and writes are recorded.
    """

    def __init__(self, data: bytes = b"", max_read_size: Optional[int] = None):
        """
        Initialize the mock stream.

        Args:
            data: Data to be available for reading.
            max_read_size: Cap on bytes returned by a single read, to
                          simulate data arriving in small segments.
        """
        self._data = data
        self._position = 0
        self._max_read_size = max_read_size
        self._closed = False
        self._extra_info: Dict[str, Any] = {}
        self._write_buffer: List[bytes] = []

    def read(self, max_bytes: Optional[int] = None) -> bytes:
        if self._closed:
            raise TransportError("Stream is closed")

        if self._position >= len(self._data):
            return b""

        limit = len(self._data) - self._position
        if max_bytes is not None:
            limit = min(limit, max_bytes)
        if self._max_read_size is not None:
            limit = min(limit, self._max_read_size)

        result = self._data[self._position:self._position + limit]
        self._position += limit
        return result

    def write(self, data: bytes) -> None:
        if self._closed:
            raise TransportError("Stream is closed")

        self._write_buffer.append(data)

    def close(self) -> None:
        self._closed = True

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def written_data(self) -> bytes:
        """Get all data that was written to the stream."""
        return b"".join(self._write_buffer)

    def set_extra_info(self, name: str, value: Any) -> None:
        self._extra_info[name] = value

    def add_data(self, data: bytes) -> None:
        """Append data to be available for reading."""
        self._data += data


class MockNetworkBackend(NetworkBackend):
    """
    Mock network backend for testing.

    Each call to connect_tcp opens a fresh MockNetworkStream that will
    replay the next queued response. Opened streams are kept in
    ``streams`` so tests can inspect what was written.
    """

    def __init__(
        self,
        responses: Optional[List[bytes]] = None,
        max_read_size: Optional[int] = None,
        connect_error: Optional[Exception] = None,
    ):
        """
        Initialize the mock backend.

        Args:
            responses: Raw responses to serve, one per connection, in order.
            max_read_size: Passed to each MockNetworkStream.
            connect_error: If set, raised by connect_tcp instead of connecting.
        """
        self._responses: List[bytes] = list(responses or [])
        self._max_read_size = max_read_size
        self._connect_error = connect_error
        self.streams: List[MockNetworkStream] = []
        self.connections: List[Tuple[str, int, Optional[float]]] = []

    def queue_response(self, data: bytes) -> None:
        """Queue a raw response for the next connection."""
        self._responses.append(data)

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> MockNetworkStream:
        if self._connect_error is not None:
            raise self._connect_error

        data = self._responses.pop(0) if self._responses else b""
        stream = MockNetworkStream(data, max_read_size=self._max_read_size)
        stream.set_extra_info("peername", (host, port))
        stream.set_extra_info("sockname", ("127.0.0.1", 12345))
        self.streams.append(stream)
        self.connections.append((host, port, timeout))
        return stream

    def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        if isinstance(stream, MockNetworkStream):
            stream.set_extra_info("ssl_object", True)
            stream.set_extra_info("server_hostname", host)
        return stream

    @property
    def requests(self) -> List[bytes]:
        """Raw bytes written on each connection, in connection order."""
        return [stream.written_data for stream in self.streams]

    @property
    def pending_responses(self) -> int:
        return len(self._responses)

    def reset(self) -> None:
        """Forget all connections and queued responses."""
        self._responses.clear()
        self.streams.clear()
        self.connections.clear()
