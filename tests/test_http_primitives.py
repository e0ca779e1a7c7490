"""
Unit tests for HTTP primitives.

Tests the Request and Response classes to ensure they convert their
inputs correctly and maintain immutability.
"""

import dataclasses

import pytest

from cloudfront_core.http_primitives import Request, Response


class TestRequest:
    """Test Request class functionality."""

    def test_create_with_strings(self) -> None:
        request = Request.create("GET", "/2008-06-30/distribution?MaxItems=2")
        assert request.method == b"GET"
        assert request.target == b"/2008-06-30/distribution?MaxItems=2"
        assert request.headers == []
        assert request.body is None

    def test_create_encodes_body_as_utf8(self) -> None:
        request = Request.create("POST", "/", body="<Comment>café</Comment>")
        assert request.body == "<Comment>café</Comment>".encode("utf-8")
        assert request.content_length == len("<Comment>café</Comment>".encode("utf-8"))

    def test_create_copies_headers(self) -> None:
        headers = [(b"Host", b"cloudfront.amazonaws.com")]
        request = Request.create("GET", "/", headers=headers)
        headers.append((b"If-Match", b"E1"))
        assert request.headers == [(b"Host", b"cloudfront.amazonaws.com")]

    def test_target_must_be_absolute_path(self) -> None:
        with pytest.raises(ValueError):
            Request.create("GET", "distribution")

    def test_header_types_are_checked(self) -> None:
        with pytest.raises(ValueError):
            Request(method=b"GET", target=b"/", headers=[("Host", b"x")])  # type: ignore[list-item]

    def test_immutability(self) -> None:
        request = Request.create("GET", "/")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.method = b"POST"  # type: ignore[misc]

    def test_content_length_without_body(self) -> None:
        assert Request.create("DELETE", "/").content_length == 0


class TestResponse:
    """Test Response class functionality."""

    def test_create_lowercases_headers(self) -> None:
        response = Response.create(200, headers={"ETag": "E1", "Content-Type": "text/xml"})
        assert response.headers == {"etag": "E1", "content-type": "text/xml"}
        assert response.get_header("ETAG") == "E1"
        assert response.get_header("Location") is None
        assert response.etag == "E1"

    def test_direct_construction_requires_lowercase(self) -> None:
        with pytest.raises(ValueError):
            Response(status_code=200, headers={"ETag": "E1"})

    def test_is_success(self) -> None:
        assert Response.create(200).is_success
        assert Response.create(204).is_success
        assert not Response.create(412).is_success
        assert not Response.create(500).is_success

    def test_missing_etag(self) -> None:
        assert Response.create(200).etag is None

    def test_immutability(self) -> None:
        response = Response.create(200, body=b"<Distribution/>")
        with pytest.raises(dataclasses.FrozenInstanceError):
            response.body = b""  # type: ignore[misc]
