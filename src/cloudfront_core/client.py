"""
Distribution client for cloudfront_core.

DistributionClient implements the distribution lifecycle (create, get,
list, update, delete) on top of the signed Transport and the response
dispatcher. Every failure is raised to the caller; nothing is retried.
"""

import logging
from typing import Iterator, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import quote, urlencode

from .config import ClientConfig, Credentials
from .dispatcher import Outcome, Success, dispatch
from .exceptions import ConflictError, ProtocolError, StateError, ValidationError
from .models import Distribution, DistributionConfig, DistributionList
from .network.backend import NetworkBackend
from .signer import Signer, http_date as format_http_date
from .transport import Transport

logger = logging.getLogger(__name__)

T = TypeVar("T", Distribution, DistributionList, DistributionConfig, Success)


def _expect(outcome: Outcome, kind: Type[T], operation: str) -> T:
    if not isinstance(outcome, kind):
        raise ProtocolError(
            f"{operation} expected {kind.__name__}, got {type(outcome).__name__}"
        )
    return outcome


class DistributionClient:
    """
    Client for CloudFront distributions.

    The request date is fixed when the client is created and used to sign
    every request it sends. AWS rejects signatures older than about fifteen
    minutes, so long-lived callers should create a new client rather than
    reuse one.

    A client is not safe for concurrent use, and callers sharing a
    Distribution between threads must serialize access to it themselves.

    Args:
        credentials: Access key pair used to sign requests
        config: Endpoint, timeout and etag policy; defaults to ClientConfig()
        backend: Network backend; real sockets by default
        http_date: RFC-1123 request date; the current time by default
    """

    def __init__(
        self,
        credentials: Credentials,
        config: Optional[ClientConfig] = None,
        backend: Optional[NetworkBackend] = None,
        http_date: Optional[str] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._http_date = http_date or format_http_date()
        self._transport = Transport(
            Signer(credentials),
            self._http_date,
            self._config,
            backend,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def http_date(self) -> str:
        return self._http_date

    def create_distribution(self, config: DistributionConfig) -> Distribution:
        """
        Create a new distribution.

        Raises:
            ValidationError: If the config has no Origin (nothing is sent)
        """
        body = config.to_xml(self._config.namespace)
        outcome = self._request("POST", self._config.distribution_path, body)
        distribution = _expect(outcome, Distribution, "create_distribution")
        logger.debug(f"Created distribution {distribution.id} ({distribution.status})")
        return distribution

    def get_distribution(self, distribution_id: str) -> Distribution:
        """Fetch a distribution, including its current etag."""
        outcome = self._request("GET", self._distribution_target(distribution_id))
        return _expect(outcome, Distribution, "get_distribution")

    def get_distribution_list(
        self,
        marker: Optional[str] = None,
        max_items: Optional[int] = None,
    ) -> DistributionList:
        """
        Fetch one page of distribution summaries.

        Args:
            marker: Return distributions after this id (the previous page's
                    next_marker)
            max_items: Maximum number of distributions in the page
        """
        query = {}
        if marker is not None:
            query["Marker"] = marker
        if max_items is not None:
            query["MaxItems"] = str(max_items)

        target = self._config.distribution_path
        if query:
            target = f"{target}?{urlencode(query)}"

        outcome = self._request("GET", target)
        return _expect(outcome, DistributionList, "get_distribution_list")

    def iter_distributions(self, max_items: Optional[int] = None) -> Iterator[Distribution]:
        """Iterate over every distribution, fetching pages as needed."""
        marker = None
        while True:
            page = self.get_distribution_list(marker, max_items)
            yield from page
            if not page.is_truncated or not page.next_marker:
                return
            marker = page.next_marker

    def update_distribution(self, distribution: Distribution) -> Distribution:
        """
        Replace a distribution's configuration.

        The request is conditional on ``distribution.etag``. On success the
        etag is updated in place from the response's ETag header and the
        same object is returned. If the response carries no ETag the cached
        value is kept and a warning is logged; it is then stale, so fetch
        the distribution again before the next update.
        """
        body = distribution.config.to_xml(self._config.namespace)
        headers = self._if_match(distribution)

        outcome = self._request(
            "PUT",
            self._distribution_target(distribution.id, "/config"),
            body,
            headers,
        )

        if isinstance(outcome, Distribution):
            new_etag = outcome.etag
        elif isinstance(outcome, Success):
            new_etag = outcome.etag
        else:
            raise ProtocolError(
                f"update_distribution expected Distribution, got {type(outcome).__name__}"
            )

        if new_etag is None:
            logger.warning(
                f"Update of distribution {distribution.id} returned no ETag, "
                f"keeping stale etag {distribution.etag!r}"
            )
        else:
            distribution.etag = new_etag
        return distribution

    def delete_distribution(self, distribution: Distribution) -> bool:
        """
        Delete a disabled distribution.

        The distribution is fetched again first. Deletion is refused while
        the server reports it InProgress. If the cached etag is stale it is
        replaced by the server's value, unless the client was configured
        with ``strict_etag``, in which case ConflictError is raised.

        Raises:
            StateError: If the distribution is enabled or still in progress
            ConflictError: If the etag is stale and strict_etag is set
        """
        if distribution.config.enabled:
            raise StateError(
                "The distribution must first be disabled before it can be deleted"
            )

        current = self.get_distribution(distribution.id)
        if current.in_progress:
            raise StateError(
                "The distribution cannot be deleted because it is still in progress"
            )

        if distribution.etag != current.etag:
            if self._config.strict_etag:
                raise ConflictError(distribution.etag, current.etag)
            logger.warning(
                f"Distribution {distribution.id} etag {distribution.etag!r} is stale, "
                f"using server etag {current.etag!r}"
            )
            distribution.etag = current.etag

        outcome = self._request(
            "DELETE",
            self._distribution_target(distribution.id),
            headers=self._if_match(distribution),
        )
        _expect(outcome, Success, "delete_distribution")
        logger.debug(f"Deleted distribution {distribution.id}")
        return True

    def _request(
        self,
        method: str,
        target: str,
        body: Optional[Union[str, bytes]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Outcome:
        response = self._transport.send(method, target, body, headers)
        return dispatch(response)

    def _distribution_target(self, distribution_id: str, suffix: str = "") -> str:
        if not distribution_id:
            raise ValidationError("distribution id must not be empty")
        return f"{self._config.distribution_path}/{quote(distribution_id, safe='')}{suffix}"

    @staticmethod
    def _if_match(distribution: Distribution) -> Mapping[str, str]:
        if not distribution.etag:
            raise ValidationError(
                f"Distribution {distribution.id} has no etag; fetch it with get_distribution first"
            )
        return {"If-Match": distribution.etag}