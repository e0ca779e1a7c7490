"""
Network utilities for cloudfront_core.

This module provides utility functions for SSL context setup,
Host header formatting and port validation.
"""

import socket
import ssl
from typing import Any, Dict, Union


def create_ssl_context(verify: bool = True) -> ssl.SSLContext:
    """
    Create a client SSL context.

    Args:
        verify: Whether to verify the server certificate and hostname

    Returns:
        Configured SSL context

    Raises:
        ssl.SSLError: If SSL context creation fails
    """
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    context.options |= ssl.OP_NO_COMPRESSION
    context.minimum_version = ssl.TLSVersion.TLSv1_2

    return context


def format_host_header(host: str, port: int, scheme: str = "https") -> str:
    """
    Format host header for HTTP requests.

    Args:
        host: Hostname
        port: Port number
        scheme: URL scheme

    Returns:
        Formatted host header string
    """
    if (scheme == "https" and port == 443) or (scheme == "http" and port == 80):
        return host
    return f"{host}:{port}"


def get_socket_info(sock: socket.socket) -> Dict[str, Any]:
    """
    Get peer and local addresses of a socket.

    Missing values are reported as None.
    """
    info: Dict[str, Any] = {}

    try:
        info["peername"] = sock.getpeername()
    except OSError:
        info["peername"] = None

    try:
        info["sockname"] = sock.getsockname()
    except OSError:
        info["sockname"] = None

    return info


def validate_port(port: Union[int, str]) -> int:
    """
    Validate and convert port to integer.

    Args:
        port: Port number (int or string)

    Returns:
        Port as integer

    Raises:
        ValueError: If port is invalid
    """
    try:
        port_int = int(port)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid port: {port}")

    if not (1 <= port_int <= 65535):
        raise ValueError(f"Port must be between 1 and 65535, got {port_int}")

    return port_int
