"""
Streaming framework for cloudfront_core.

This module provides a buffered reader over a NetworkStream and the
pull-based body streams used to decode HTTP/1.1 response bodies.
Bodies are produced lazily, one chunk per iteration step, so a caller
that iterates never holds more than one network read in memory.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, List, Optional

from .exceptions import ProtocolError, StreamError, TransportError
from .network.stream import NetworkStream

_HEX_DIGITS = re.compile(rb"[0-9A-Fa-f]+")


class StreamReader:
    """
    Buffered reader over a NetworkStream.

    Provides the line-oriented and exact-length reads needed to parse
    HTTP/1.1 framing.
    """

    READ_SIZE = 65536
    MAX_LINE_SIZE = 65536

    def __init__(self, stream: NetworkStream) -> None:
        self._stream = stream
        self._buffer = bytearray()
        self._eof = False
        self.bytes_received = 0

    def _fill(self) -> bool:
        """Read more data into the buffer; False once the peer has closed."""
        if self._eof:
            return False
        data = self._stream.read(self.READ_SIZE)
        if not data:
            self._eof = True
            return False
        self._buffer.extend(data)
        self.bytes_received += len(data)
        return True

    def readline(self) -> bytes:
        """
        Read one line including its terminator.

        Returns:
            The line, any unterminated remainder at end of stream, or b""
            if the stream is exhausted.

        Raises:
            ProtocolError: If the line exceeds MAX_LINE_SIZE
        """
        start = 0
        while True:
            index = self._buffer.find(b"\n", start)
            if index != -1:
                line = bytes(self._buffer[:index + 1])
                del self._buffer[:index + 1]
                return line
            if len(self._buffer) > self.MAX_LINE_SIZE:
                raise ProtocolError(f"Line exceeds {self.MAX_LINE_SIZE} bytes")
            start = len(self._buffer)
            if not self._fill():
                line = bytes(self._buffer)
                self._buffer.clear()
                return line

    def read_exact(self, size: int) -> bytes:
        """
        Read exactly ``size`` bytes.

        Raises:
            TransportError: If the stream ends first
        """
        while len(self._buffer) < size:
            if not self._fill():
                received = len(self._buffer)
                self._buffer.clear()
                raise TransportError(
                    f"Connection closed after {received} of {size} expected bytes"
                )
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def read_some(self, max_bytes: int) -> bytes:
        """Read up to ``max_bytes``; b"" once the stream is exhausted."""
        if not self._buffer and not self._fill():
            return b""
        data = bytes(self._buffer[:max_bytes])
        del self._buffer[:max_bytes]
        return data

    @property
    def at_eof(self) -> bool:
        return self._eof and not self._buffer


class BodyStream(ABC):
    """
    Base interface for response body streams.

    Iterating yields the body in chunks; read() drains the rest of it.
    """

    def __init__(self, reader: StreamReader) -> None:
        self._reader = reader
        self._closed = False
        self._done = False
        self._bytes_read = 0

    @abstractmethod
    def _next_chunk(self) -> Optional[bytes]:
        """Return the next non-empty chunk, or None at the end of the body."""
        pass

    def __iter__(self) -> Iterator[bytes]:
        if self._closed:
            raise StreamError("Cannot iterate over closed stream")
        return self

    def __next__(self) -> bytes:
        if self._closed:
            raise StreamError("Cannot read from closed stream")
        if self._done:
            raise StopIteration

        chunk = self._next_chunk()
        if chunk is None:
            self._done = True
            raise StopIteration

        self._bytes_read += len(chunk)
        return chunk

    def read(self) -> bytes:
        """Read the remainder of the body and return it as bytes."""
        return read_stream_to_bytes(self)

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def complete(self) -> bool:
        """True once the end of the body has been reached."""
        return self._done

    @property
    def bytes_read(self) -> int:
        return self._bytes_read


class ChunkedBodyStream(BodyStream):
    """
    Decoder for ``Transfer-Encoding: chunked`` bodies.

    Each step reads a hexadecimal size line, exactly that many bytes and
    the CRLF after them. A zero-size chunk ends the body; any
    trailer lines after it are consumed and discarded.
    """

    def _next_chunk(self) -> Optional[bytes]:
        line = self._reader.readline()
        if not line:
            raise TransportError("Connection closed before the final chunk")

        size_text = line.split(b";", 1)[0].strip()
        if not _HEX_DIGITS.fullmatch(size_text):
            raise TransportError(
                f"Invalid chunk size {size_text.decode('latin-1')!r}, "
                f"unable to read chunked body"
            )

        size = int(size_text, 16)
        if size == 0:
            self._consume_trailers()
            return None

        data = self._reader.read_exact(size)

        terminator = self._reader.readline()
        if not terminator:
            raise TransportError("Connection closed inside a chunk")
        if terminator != b"\r\n":
            raise TransportError(
                f"Missing CRLF after {size}-byte chunk data, unable to read chunked body"
            )

        return data

    def _consume_trailers(self) -> None:
        while True:
            line = self._reader.readline()
            if not line.strip():
                return


class FixedLengthBodyStream(BodyStream):
    """Body delimited by a Content-Length header."""

    def __init__(self, reader: StreamReader, content_length: int) -> None:
        if content_length < 0:
            raise ValueError("content_length must be non-negative")
        super().__init__(reader)
        self._content_length = content_length
        self._remaining = content_length

    def _next_chunk(self) -> Optional[bytes]:
        if self._remaining == 0:
            return None

        data = self._reader.read_some(min(self._remaining, StreamReader.READ_SIZE))
        if not data:
            received = self._content_length - self._remaining
            raise TransportError(
                f"Connection closed after {received} of "
                f"{self._content_length} body bytes"
            )

        self._remaining -= len(data)
        return data

    @property
    def content_length(self) -> int:
        return self._content_length


class UntilCloseBodyStream(BodyStream):
    """Body delimited by the server closing the connection."""

    def _next_chunk(self) -> Optional[bytes]:
        data = self._reader.read_some(StreamReader.READ_SIZE)
        return data or None


def is_chunked(headers: Dict[str, str]) -> bool:
    """
    Check if response uses chunked transfer encoding.

    Args:
        headers: Lower-cased response headers

    Returns:
        True if chunked is the final transfer coding
    """
    value = headers.get("transfer-encoding")
    if not value:
        return False
    codings = [coding.strip().lower() for coding in value.split(",")]
    return codings[-1] == "chunked"


def get_content_length(headers: Dict[str, str]) -> Optional[int]:
    """
    Extract Content-Length from headers.

    Raises:
        ProtocolError: If the header is present but not a non-negative integer
    """
    value = headers.get("content-length")
    if value is None:
        return None
    try:
        length = int(value.strip())
    except ValueError as e:
        raise ProtocolError(f"Invalid Content-Length {value!r}", cause=e) from e
    if length < 0:
        raise ProtocolError(f"Invalid Content-Length {value!r}")
    return length


def create_body_stream(
    reader: StreamReader,
    headers: Dict[str, str],
    status_code: int,
    method: bytes = b"GET",
) -> BodyStream:
    """
    Factory function choosing the body framing for a response.

    Args:
        reader: Reader positioned at the start of the body
        headers: Lower-cased response headers
        status_code: Response status code
        method: Request method the response answers

    Returns:
        BodyStream instance
    """
    if method == b"HEAD" or status_code in (204, 304) or 100 <= status_code < 200:
        return FixedLengthBodyStream(reader, 0)

    if is_chunked(headers):
        return ChunkedBodyStream(reader)

    content_length = get_content_length(headers)
    if content_length is not None:
        return FixedLengthBodyStream(reader, content_length)

    return UntilCloseBodyStream(reader)


def read_stream_to_bytes(stream: Iterable[bytes]) -> bytes:
    """
    Read entire stream and return as bytes.

    Args:
        stream: Iterable of bytes

    Returns:
        All bytes from the stream concatenated
    """
    chunks: List[bytes] = []
    for chunk in stream:
        chunks.append(chunk)
    return b"".join(chunks)
