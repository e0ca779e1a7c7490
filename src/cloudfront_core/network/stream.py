"""
Network stream interface for cloudfront_core.

This module defines the NetworkStream interface that all network stream
implementations must follow for consistent behavior across the library.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class NetworkStream(ABC):
    """
    Interface for blocking network streams.

    Implementations convert platform failures into TransportError so
    callers never see a raw OSError.
    """

    @abstractmethod
    def read(self, max_bytes: Optional[int] = None) -> bytes:
        """
        Read data from the stream.

        Args:
            max_bytes: Maximum number of bytes to read. If None, an
                      implementation-defined amount is returned.

        Returns:
            The data read, or b"" once the peer has closed the connection.

        Raises:
            TransportError: If the stream is closed or the read fails.
            TimeoutError: If the read deadline expires.
        """
        pass

    @abstractmethod
    def write(self, data: bytes) -> None:
        """
        Write all of ``data`` to the stream.

        Raises:
            TransportError: If the stream is closed or the write fails.
            TimeoutError: If the write deadline expires.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the stream. Closing twice is a no-op."""
        pass

    @abstractmethod
    def get_extra_info(self, name: str) -> Optional[Any]:
        """
        Get extra information about the stream.

        Args:
            name: Common values include "peername", "sockname" and
                 "ssl_object".

        Returns:
            The requested information or None if not available.
        """
        pass

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """True once close() has been called."""
        pass
