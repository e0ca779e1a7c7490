"""
Blocking socket backend for cloudfront_core.

Opens TCP connections with the standard library socket module and
wraps them in TLS. Every platform failure is converted into a
TransportError (or TimeoutError) at this boundary.
"""

import logging
import socket
import ssl
from typing import Any, Dict, Optional

from ..exceptions import TimeoutError, TransportError
from .backend import NetworkBackend
from .stream import NetworkStream
from .utils import create_ssl_context, get_socket_info

logger = logging.getLogger(__name__)


class SocketNetworkStream(NetworkStream):
    """NetworkStream over a connected (optionally TLS-wrapped) socket."""

    DEFAULT_READ_SIZE = 65536

    def __init__(self, sock: socket.socket, io_timeout: Optional[float] = None) -> None:
        self._sock = sock
        self._io_timeout = io_timeout
        self._closed = False
        self._extra_info: Dict[str, Any] = get_socket_info(sock)
        self._extra_info["ssl_object"] = isinstance(sock, ssl.SSLSocket)
        sock.settimeout(io_timeout)

    @property
    def socket(self) -> socket.socket:
        return self._sock

    def read(self, max_bytes: Optional[int] = None) -> bytes:
        if self._closed:
            raise TransportError("Stream is closed")
        try:
            return self._sock.recv(max_bytes or self.DEFAULT_READ_SIZE)
        except socket.timeout as e:
            raise TimeoutError("Read timed out", timeout=self._io_timeout, cause=e) from e
        except OSError as e:
            raise TransportError(f"Error reading response from server: {e}", cause=e) from e

    def write(self, data: bytes) -> None:
        if self._closed:
            raise TransportError("Stream is closed")
        try:
            self._sock.sendall(data)
        except socket.timeout as e:
            raise TimeoutError("Write timed out", timeout=self._io_timeout, cause=e) from e
        except OSError as e:
            raise TransportError(f"Error writing request to server: {e}", cause=e) from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.close()
        except OSError as e:
            logger.debug(f"Ignoring error while closing socket: {e}")

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)

    @property
    def is_closed(self) -> bool:
        return self._closed


class SocketNetworkBackend(NetworkBackend):
    """
    Network backend built on blocking sockets.

    Args:
        io_timeout: Deadline applied to each read and write once connected
        verify_tls: Whether to verify the server certificate
    """

    def __init__(self, io_timeout: Optional[float] = None, verify_tls: bool = True) -> None:
        self._io_timeout = io_timeout
        self._ssl_context = create_ssl_context(verify=verify_tls)

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> SocketNetworkStream:
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except socket.timeout as e:
            raise TimeoutError(f"Connecting to {host}:{port} timed out", timeout=timeout, cause=e) from e
        except OSError as e:
            raise TransportError(f"Unable to connect to {host}:{port}: {e}", cause=e) from e

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        logger.debug(f"TCP connection established to {host}:{port}")
        return SocketNetworkStream(sock, self._io_timeout)

    def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> SocketNetworkStream:
        if not isinstance(stream, SocketNetworkStream):
            raise TransportError("TLS upgrade requires a SocketNetworkStream")

        sock = stream.socket
        sock.settimeout(timeout)
        try:
            tls_sock = self._ssl_context.wrap_socket(sock, server_hostname=host)
        except socket.timeout as e:
            stream.close()
            raise TimeoutError(f"TLS handshake with {host}:{port} timed out", timeout=timeout, cause=e) from e
        except (ssl.SSLError, OSError) as e:
            stream.close()
            raise TransportError(f"TLS handshake with {host}:{port} failed: {e}", cause=e) from e

        logger.debug(f"TLS established with {host}:{port} ({tls_sock.version()})")
        return SocketNetworkStream(tls_sock, self._io_timeout)
