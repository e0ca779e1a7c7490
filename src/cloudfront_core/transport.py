"""
Signed request transport for cloudfront_core.

The Transport composes the signed header block for each request, opens a
TLS connection to the API endpoint and returns the complete response.
Every call uses a fresh connection and asks the server to close it.
"""

import logging
from typing import List, Mapping, Optional, Tuple, Union

from .config import ClientConfig
from .exceptions import CloudFrontError, TransportError
from .http11 import HTTP11Connection
from .http_primitives import Request, Response
from .network.backend import NetworkBackend
from .network.sockets import SocketNetworkBackend
from .network.stream import NetworkStream
from .network.utils import format_host_header
from .signer import Signer

logger = logging.getLogger(__name__)


class Transport:
    """
    Sends signed requests to the CloudFront API.

    Args:
        signer: Signer holding the credentials
        http_date: RFC-1123 date sent with, and signed into, every request
        config: Endpoint and timeout configuration
        backend: Network backend; a SocketNetworkBackend by default
    """

    def __init__(
        self,
        signer: Signer,
        http_date: str,
        config: Optional[ClientConfig] = None,
        backend: Optional[NetworkBackend] = None,
    ) -> None:
        self._signer = signer
        self._http_date = http_date
        self._config = config or ClientConfig()
        self._backend = backend or SocketNetworkBackend(
            io_timeout=self._config.io_timeout,
            verify_tls=self._config.verify_tls,
        )

    @property
    def http_date(self) -> str:
        return self._http_date

    def build_request(
        self,
        method: str,
        target: str,
        body: Optional[Union[str, bytes]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Request:
        """
        Compose the request with its signed header block.

        Header order: Host, Date, x-amz-date, Authorization, then
        Content-Length and Content-Type when a body is present, then
        the caller's headers, then Connection.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")

        header_list: List[Tuple[str, str]] = [
            ("Host", format_host_header(self._config.host, self._config.port)),
            ("Date", self._http_date),
            ("x-amz-date", self._http_date),
            ("Authorization", self._signer.authorization(self._http_date)),
        ]

        if body is not None:
            header_list.append(("Content-Length", str(len(body))))
            header_list.append(("Content-Type", "application/xml"))

        for name, value in (headers or {}).items():
            header_list.append((name.strip(), value.strip()))

        header_list.append(("Connection", "close"))

        return Request.create(
            method=method,
            target=target,
            headers=[(name.encode("latin-1"), value.encode("latin-1")) for name, value in header_list],
            body=body,
        )

    def send(
        self,
        method: str,
        target: str,
        body: Optional[Union[str, bytes]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Response:
        """
        Send one request and return its complete response.

        Args:
            method: HTTP method
            target: Path and optional query string
            body: Optional request body
            headers: Additional headers such as If-Match

        Returns:
            The response with status, lower-cased headers and full body

        Raises:
            TransportError: If the connection cannot be used or the body is truncated
            ProtocolError: If the response is not valid HTTP/1.1
        """
        request = self.build_request(method, target, body, headers)
        logger.debug(
            f"Sending {method} {target} to {self._config.host}:{self._config.port} "
            f"({request.content_length} body bytes)"
        )

        stream = self._connect()
        with HTTP11Connection(stream) as connection:
            return connection.handle_request(request)

    def _connect(self) -> NetworkStream:
        """Open the TLS connection to the configured endpoint."""
        host = self._config.host
        port = self._config.port
        timeout = self._config.connect_timeout

        try:
            tcp_stream = self._backend.connect_tcp(host, port, timeout=timeout)
        except OSError as e:
            raise TransportError(f"Unable to connect to {host}:{port}: {e}", cause=e) from e

        try:
            return self._backend.connect_tls(tcp_stream, host, port, timeout=timeout)
        except CloudFrontError:
            tcp_stream.close()
            raise
        except OSError as e:
            tcp_stream.close()
            raise TransportError(f"TLS setup with {host}:{port} failed: {e}", cause=e) from e
