"""
Request signing for cloudfront_core.

CloudFront authenticates a request with an HMAC-SHA1 of the request
date keyed by the secret access key::

    "AWS" + " " + AccessKeyId + ":" + Base64(HMAC-SHA1(UTF-8(Date), UTF-8(SecretAccessKey)))
"""

import base64
import hashlib
import hmac
from email.utils import formatdate
from typing import Optional

from .config import Credentials


def http_date(timestamp: Optional[float] = None) -> str:
    """
    Format a timestamp as an RFC-1123 GMT date.

    Args:
        timestamp: Seconds since the epoch; the current time when None

    Returns:
        Date string such as ``"Thu, 19 Nov 2009 19:37:58 GMT"``
    """
    return formatdate(timestamp, usegmt=True)


def sign(date: str, secret_access_key: str) -> str:
    """Return the base64 HMAC-SHA1 signature of ``date``."""
    digest = hmac.new(
        secret_access_key.encode("utf-8"),
        date.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


class Signer:
    """Computes Authorization header values for one set of credentials."""

    def __init__(self, credentials: Credentials) -> None:
        self._credentials = credentials

    @property
    def access_key_id(self) -> str:
        return self._credentials.access_key_id

    def authorization(self, date: str) -> str:
        """
        Build the Authorization header value for a request dated ``date``.

        Args:
            date: The exact value sent in the Date and x-amz-date headers

        Returns:
            ``"AWS <access key id>:<signature>"``
        """
        signature = sign(date, self._credentials.secret_access_key)
        return f"AWS {self._credentials.access_key_id}:{signature}"
