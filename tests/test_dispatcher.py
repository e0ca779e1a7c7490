"""
Tests for mapping responses onto outcomes.
"""

import pytest

from cloudfront_core.dispatcher import RootTag, Success, dispatch, extract_document
from cloudfront_core.exceptions import ApiError, ProtocolError
from cloudfront_core.http_primitives import Response
from cloudfront_core.models import Distribution, DistributionConfig, DistributionList

NAMESPACE = "http://cloudfront.amazonaws.com/doc/2008-06-30/"


def response(status_code=200, body=b"", headers=None) -> Response:
    return Response.create(status_code, headers=headers or {}, body=body)


class TestExtractDocument:
    """Test locating the XML element in a body."""

    def test_skips_declaration(self) -> None:
        body = b'<?xml version="1.0"?>\n<Distribution><Id>E1</Id></Distribution>\n'
        assert extract_document(body) == b"<Distribution><Id>E1</Id></Distribution>"

    def test_not_found(self) -> None:
        with pytest.raises(ProtocolError) as exc_info:
            extract_document(b"Service Unavailable")
        assert "XML document not found" in exc_info.value.message


class TestDispatch:
    """Test response dispatch."""

    def test_distribution(self, distribution_xml) -> None:
        outcome = dispatch(response(body=distribution_xml(), headers={"ETag": "E2QWRUHEXAMPLE"}))

        assert isinstance(outcome, Distribution)
        assert outcome.id == "EDFDVBD6EXAMPLE"
        assert outcome.etag == "E2QWRUHEXAMPLE"

    def test_created_distribution(self, distribution_xml) -> None:
        outcome = dispatch(response(201, distribution_xml(status="InProgress")))

        assert isinstance(outcome, Distribution)
        assert outcome.in_progress

    def test_distribution_list(self, list_xml) -> None:
        outcome = dispatch(response(body=list_xml))

        assert isinstance(outcome, DistributionList)
        assert len(outcome) == 2

    def test_distribution_config(self) -> None:
        body = DistributionConfig(origin="o", caller_reference="1", enabled=True).to_xml()

        outcome = dispatch(response(body=body))

        assert isinstance(outcome, DistributionConfig)
        assert outcome.origin == "o"
        assert outcome.enabled is True

    def test_empty_body_with_etag(self) -> None:
        outcome = dispatch(response(204, headers={"ETag": "E2QWRUHEXAMPLE"}))

        assert outcome == Success("E2QWRUHEXAMPLE")
        assert outcome.value == "E2QWRUHEXAMPLE"

    def test_empty_body_without_etag(self) -> None:
        outcome = dispatch(response(204))

        assert isinstance(outcome, Success)
        assert outcome.value is True

    def test_whitespace_body_is_empty(self) -> None:
        assert dispatch(response(200, b"\r\n  ")) == Success()

    def test_error_response(self, error_xml) -> None:
        body = error_xml("PreconditionFailed", "The If-Match version is missing or not valid.")

        with pytest.raises(ApiError) as exc_info:
            dispatch(response(412, body))

        error = exc_info.value
        assert str(error) == "PreconditionFailed: The If-Match version is missing or not valid."
        assert error.status_code == 412
        assert error.error_type == "Sender"
        assert error.request_id == "b4ba1a2f-d4d5-11de-a7d3-ebc3f3e6f1e5"

    def test_error_response_on_2xx_is_still_error(self, error_xml) -> None:
        with pytest.raises(ApiError):
            dispatch(response(200, error_xml("InternalError", "oops")))

    def test_non_xml_error_body(self) -> None:
        with pytest.raises(ProtocolError):
            dispatch(response(503, b"Service Unavailable"))

    def test_empty_error_body(self) -> None:
        with pytest.raises(ProtocolError):
            dispatch(response(500))

    def test_unknown_root(self) -> None:
        with pytest.raises(ProtocolError) as exc_info:
            dispatch(response(body=f'<InvalidationList xmlns="{NAMESPACE}"/>'.encode()))
        assert "Invalid response document from server" in exc_info.value.message
        assert "InvalidationList" in exc_info.value.message

    def test_malformed_xml(self) -> None:
        with pytest.raises(ProtocolError):
            dispatch(response(body=b"<Distribution><Id>E1</Distribution>"))

    def test_root_tags(self) -> None:
        assert {tag.value for tag in RootTag} == {
            "Distribution", "DistributionList", "DistributionConfig", "ErrorResponse",
        }
