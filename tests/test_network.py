"""
Tests for network interfaces and mock implementations.

This module contains tests for the mock NetworkStream and NetworkBackend
used throughout the suite, the socket backend's error conversion, and the
network utilities.
"""

import socket
import ssl
from unittest.mock import MagicMock, patch

import pytest

from cloudfront_core.exceptions import TimeoutError, TransportError
from cloudfront_core.network import (
    MockNetworkBackend,
    MockNetworkStream,
    NetworkBackend,
    NetworkStream,
    SocketNetworkBackend,
    SocketNetworkStream,
    create_ssl_context,
    format_host_header,
    validate_port,
)


class TestMockNetworkStream:
    """Test cases for MockNetworkStream."""

    def test_read_write_basic(self):
        stream = MockNetworkStream()

        stream.write(b"hello world")
        assert stream.written_data == b"hello world"

        stream.add_data(b"hello world")
        assert stream.read(5) == b"hello"
        assert stream.read() == b" world"

    def test_read_empty_stream(self):
        stream = MockNetworkStream()
        assert stream.read() == b""
        assert stream.read(10) == b""

    def test_max_read_size(self):
        stream = MockNetworkStream(b"abcdef", max_read_size=2)
        assert stream.read(10) == b"ab"
        assert stream.read() == b"cd"

    def test_closed_stream_raises(self):
        stream = MockNetworkStream(b"data")
        stream.close()

        assert stream.is_closed
        with pytest.raises(TransportError):
            stream.read()
        with pytest.raises(TransportError):
            stream.write(b"x")

    def test_extra_info(self):
        stream = MockNetworkStream()
        stream.set_extra_info("peername", ("example.com", 443))
        assert stream.get_extra_info("peername") == ("example.com", 443)
        assert stream.get_extra_info("missing") is None

    def test_implements_interface(self):
        assert isinstance(MockNetworkStream(), NetworkStream)


class TestMockNetworkBackend:
    """Test cases for MockNetworkBackend."""

    def test_each_connection_replays_next_response(self):
        backend = MockNetworkBackend([b"first", b"second"])

        first = backend.connect_tcp("example.com", 443)
        second = backend.connect_tcp("example.com", 443)

        assert first.read() == b"first"
        assert second.read() == b"second"
        assert backend.pending_responses == 0

    def test_records_connections_and_writes(self):
        backend = MockNetworkBackend([b""])
        stream = backend.connect_tcp("example.com", 443, timeout=5.0)
        stream.write(b"GET / HTTP/1.1\r\n\r\n")

        assert backend.connections == [("example.com", 443, 5.0)]
        assert backend.requests == [b"GET / HTTP/1.1\r\n\r\n"]

    def test_connect_tls_marks_stream(self):
        backend = MockNetworkBackend()
        stream = backend.connect_tcp("example.com", 443)
        tls_stream = backend.connect_tls(stream, "example.com", 443)

        assert tls_stream.get_extra_info("ssl_object") is True
        assert tls_stream.get_extra_info("server_hostname") == "example.com"

    def test_connect_error(self):
        backend = MockNetworkBackend(connect_error=TransportError("refused"))
        with pytest.raises(TransportError):
            backend.connect_tcp("example.com", 443)

    def test_queue_and_reset(self):
        backend = MockNetworkBackend()
        backend.queue_response(b"x")
        assert backend.pending_responses == 1

        backend.connect_tcp("example.com", 443)
        backend.reset()
        assert backend.streams == []
        assert backend.pending_responses == 0

    def test_implements_interface(self):
        assert isinstance(MockNetworkBackend(), NetworkBackend)


class TestSocketNetworkStream:
    """Test error conversion in the socket stream."""

    @pytest.fixture
    def sock(self):
        sock = MagicMock(spec=socket.socket)
        sock.getpeername.return_value = ("203.0.113.1", 443)
        sock.getsockname.return_value = ("192.0.2.1", 50000)
        return sock

    def test_read_and_write(self, sock):
        sock.recv.return_value = b"data"
        stream = SocketNetworkStream(sock, io_timeout=5.0)

        assert stream.read(4) == b"data"
        stream.write(b"payload")

        sock.settimeout.assert_called_with(5.0)
        sock.sendall.assert_called_once_with(b"payload")
        assert stream.get_extra_info("peername") == ("203.0.113.1", 443)
        assert stream.get_extra_info("ssl_object") is False

    def test_read_timeout(self, sock):
        sock.recv.side_effect = socket.timeout("timed out")
        stream = SocketNetworkStream(sock, io_timeout=5.0)

        with pytest.raises(TimeoutError) as exc_info:
            stream.read()
        assert exc_info.value.timeout == 5.0

    def test_write_failure(self, sock):
        sock.sendall.side_effect = BrokenPipeError("broken pipe")
        stream = SocketNetworkStream(sock)

        with pytest.raises(TransportError) as exc_info:
            stream.write(b"x")
        assert isinstance(exc_info.value.cause, BrokenPipeError)

    def test_close_is_idempotent(self, sock):
        stream = SocketNetworkStream(sock)
        stream.close()
        stream.close()

        assert stream.is_closed
        sock.close.assert_called_once()
        with pytest.raises(TransportError):
            stream.read()


class TestSocketNetworkBackend:
    """Test connection failures in the socket backend."""

    def test_connect_refused(self):
        backend = SocketNetworkBackend()
        with patch("socket.create_connection", side_effect=ConnectionRefusedError("refused")):
            with pytest.raises(TransportError) as exc_info:
                backend.connect_tcp("cloudfront.amazonaws.com", 443, timeout=1.0)
        assert "Unable to connect" in exc_info.value.message

    def test_connect_timeout(self):
        backend = SocketNetworkBackend()
        with patch("socket.create_connection", side_effect=socket.timeout("timed out")):
            with pytest.raises(TimeoutError):
                backend.connect_tcp("cloudfront.amazonaws.com", 443, timeout=1.0)

    def test_tls_requires_socket_stream(self):
        backend = SocketNetworkBackend()
        with pytest.raises(TransportError):
            backend.connect_tls(MockNetworkStream(), "cloudfront.amazonaws.com", 443)


class TestNetworkUtils:
    """Test network utility functions."""

    def test_format_host_header(self):
        assert format_host_header("cloudfront.amazonaws.com", 443) == "cloudfront.amazonaws.com"
        assert format_host_header("localhost", 8443) == "localhost:8443"
        assert format_host_header("localhost", 80, scheme="http") == "localhost"

    def test_validate_port(self):
        assert validate_port("443") == 443
        with pytest.raises(ValueError):
            validate_port(0)
        with pytest.raises(ValueError):
            validate_port("abc")

    def test_create_ssl_context(self):
        context = create_ssl_context()
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True

        unverified = create_ssl_context(verify=False)
        assert unverified.verify_mode == ssl.CERT_NONE
        assert unverified.check_hostname is False
