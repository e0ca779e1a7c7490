"""
Response dispatch for cloudfront_core.

Turns a complete HTTP response into exactly one outcome: a Distribution,
a DistributionList, a DistributionConfig or a bare Success. An
ErrorResponse document is raised as ApiError; any other document is a
ProtocolError.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from lxml import etree
from typing_extensions import assert_never

from . import schema
from .exceptions import ApiError, ProtocolError
from .http_primitives import Response
from .models import (
    Distribution,
    DistributionConfig,
    DistributionList,
    child_text,
    find_child,
    local_name,
    parse_document,
)

logger = logging.getLogger(__name__)

# First element in the body, skipping <?...?> processing instructions.
XML_ELEMENT_PATTERN = re.compile(rb"<[^?].*[^?]>", re.DOTALL)


class RootTag(Enum):
    """Root elements the server may answer with."""
    DISTRIBUTION = schema.DISTRIBUTION
    DISTRIBUTION_LIST = schema.DISTRIBUTION_LIST
    DISTRIBUTION_CONFIG = schema.DISTRIBUTION_CONFIG
    ERROR_RESPONSE = schema.ERROR_RESPONSE


@dataclass(frozen=True)
class Success:
    """
    A 2xx response without a body.

    ``etag`` holds the ETag header when the server sent one.
    """

    etag: Optional[str] = None

    @property
    def value(self) -> Union[str, bool]:
        """The ETag if present, else True."""
        return self.etag if self.etag is not None else True


Outcome = Union[Distribution, DistributionList, DistributionConfig, Success]


def extract_document(body: bytes) -> bytes:
    """
    Return the XML element found in a response body.

    Raises:
        ProtocolError: If the body contains no element
    """
    match = XML_ELEMENT_PATTERN.search(body)
    if match is None:
        raise ProtocolError("XML document not found in response body")
    return match.group(0)


def root_tag(element: etree._Element) -> RootTag:
    """
    Raises:
        ProtocolError: If the root element is not one the API defines
    """
    name = local_name(element)
    try:
        return RootTag(name)
    except ValueError as e:
        raise ProtocolError(f"Invalid response document from server: <{name}>", cause=e) from e


def _api_error(element: etree._Element, status_code: int) -> ApiError:
    error = find_child(element, schema.ERROR)
    if error is None:
        error = element

    return ApiError(
        code=child_text(error, schema.ERROR_CODE) or "",
        error_message=child_text(error, schema.ERROR_MESSAGE) or "",
        status_code=status_code,
        error_type=child_text(error, schema.ERROR_TYPE),
        request_id=child_text(element, schema.REQUEST_ID),
    )


def dispatch(response: Response) -> Outcome:
    """
    Map a complete response onto its outcome.

    Args:
        response: Response with its body fully read

    Returns:
        Success for an empty 2xx body, else the parsed resource

    Raises:
        ApiError: If the server returned an ErrorResponse document
        ProtocolError: If no known document could be found in the body
    """
    if response.is_success and not response.body.strip():
        return Success(response.etag)

    root = parse_document(extract_document(response.body))
    tag = root_tag(root)
    logger.debug(f"Dispatching HTTP {response.status_code} <{tag.value}> response")

    if tag is RootTag.DISTRIBUTION:
        return Distribution.from_element(root, response.etag)
    elif tag is RootTag.DISTRIBUTION_LIST:
        return DistributionList.from_element(root)
    elif tag is RootTag.DISTRIBUTION_CONFIG:
        return DistributionConfig.from_element(root)
    elif tag is RootTag.ERROR_RESPONSE:
        raise _api_error(root, response.status_code)
    else:
        assert_never(tag)
