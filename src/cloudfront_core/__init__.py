"""
cloudfront_core - CloudFront distribution API client

Signs requests, frames them over HTTP/1.1, decodes the responses
(including chunked bodies) and maps the returned XML documents onto
distribution objects.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .client import DistributionClient
from .config import ClientConfig, Credentials
from .dispatcher import Outcome, RootTag, Success, dispatch
from .exceptions import (
    ApiError,
    CloudFrontError,
    ConflictError,
    ProtocolError,
    StateError,
    StreamError,
    TimeoutError,
    TransportError,
    ValidationError,
)
from .http11 import ConnectionState, HTTP11Connection
from .http_primitives import Request, Response
from .models import Distribution, DistributionConfig, DistributionList
from .signer import Signer, http_date, sign
from .transport import Transport

__all__ = [
    "DistributionClient",
    "ClientConfig",
    "Credentials",
    "Outcome",
    "RootTag",
    "Success",
    "dispatch",
    "ApiError",
    "CloudFrontError",
    "ConflictError",
    "ProtocolError",
    "StateError",
    "StreamError",
    "TimeoutError",
    "TransportError",
    "ValidationError",
    "ConnectionState",
    "HTTP11Connection",
    "Request",
    "Response",
    "Distribution",
    "DistributionConfig",
    "DistributionList",
    "Signer",
    "http_date",
    "sign",
    "Transport",
]
