"""
Network backend components for cloudfront_core.

This module provides the low-level networking abstractions
including blocking network streams and their backends.
"""

from .backend import NetworkBackend
from .stream import NetworkStream
from .mock import MockNetworkBackend, MockNetworkStream
from .sockets import SocketNetworkBackend, SocketNetworkStream
from .utils import (
    create_ssl_context,
    format_host_header,
    get_socket_info,
    validate_port,
)

__all__ = [
    "NetworkBackend",
    "NetworkStream",
    "MockNetworkBackend",
    "MockNetworkStream",
    "SocketNetworkBackend",
    "SocketNetworkStream",
    "create_ssl_context",
    "format_host_header",
    "get_socket_info",
    "validate_port",
]
