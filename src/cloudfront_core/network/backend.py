"""
Network backend interface for cloudfront_core.

This module defines the NetworkBackend interface that provides
abstractions for creating network connections.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .stream import NetworkStream


class NetworkBackend(ABC):
    """
    Interface for network backend implementations.

    A backend opens TCP connections and upgrades them to TLS. The
    transport layer only talks to this interface, so tests and callers
    can substitute their own backend.
    """

    @abstractmethod
    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        """
        Connect to a TCP endpoint.

        Args:
            host: The hostname or IP address to connect to.
            port: The port number to connect to.
            timeout: Optional deadline in seconds for establishing the connection.

        Returns:
            A NetworkStream representing the TCP connection.

        Raises:
            TransportError: If the connection fails.
            TimeoutError: If the connection times out.
        """
        pass

    @abstractmethod
    def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        """
        Upgrade a TCP stream to TLS.

        Args:
            stream: The existing TCP NetworkStream to upgrade.
            host: The hostname for TLS certificate verification.
            port: The port number (used for logging).
            timeout: Optional deadline in seconds for the TLS handshake.

        Returns:
            A NetworkStream representing the TLS connection.

        Raises:
            TransportError: If the TLS handshake fails.
            TimeoutError: If the TLS handshake times out.
        """
        pass
