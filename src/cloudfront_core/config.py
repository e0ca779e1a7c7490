"""
Configuration for cloudfront_core.

Holds the endpoint, API version, timeouts and concurrency policy used by
a client, and the credentials used to sign its requests.
"""

import os
from dataclasses import dataclass
from typing import Mapping, NamedTuple, Optional

from . import schema
from .exceptions import ValidationError
from .network.utils import validate_port


class Credentials(NamedTuple):
    """AWS access key pair."""
    access_key_id: str
    secret_access_key: str

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Credentials":
        """
        Read credentials from AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY.

        Raises:
            ValidationError: If either variable is missing or empty
        """
        env = os.environ if environ is None else environ
        access_key_id = env.get("AWS_ACCESS_KEY_ID", "")
        secret_access_key = env.get("AWS_SECRET_ACCESS_KEY", "")
        if not access_key_id or not secret_access_key:
            raise ValidationError(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must both be set"
            )
        return cls(access_key_id, secret_access_key)


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValidationError(f"{name} must be a boolean, got {value!r}")


def _parse_timeout(name: str, value: str) -> float:
    try:
        timeout = float(value)
    except ValueError as e:
        raise ValidationError(f"{name} must be a number, got {value!r}", cause=e) from e
    if timeout <= 0:
        raise ValidationError(f"{name} must be positive, got {timeout}")
    return timeout


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable client configuration.

    Attributes:
        host: API endpoint hostname
        port: HTTPS port
        api_version: Dated API version used in paths and the XML namespace
        connect_timeout: Deadline for establishing the TLS connection
        io_timeout: Deadline for each read or write on an open connection
        strict_etag: Refuse to delete when the cached etag is stale instead
                     of adopting the server's value
        verify_tls: Verify the server certificate and hostname
    """

    host: str = schema.HOST
    port: int = schema.HTTPS_PORT
    api_version: str = schema.API_VERSION
    connect_timeout: float = 30.0
    io_timeout: float = 60.0
    strict_etag: bool = False
    verify_tls: bool = True

    def __post_init__(self) -> None:
        if not self.host:
            raise ValidationError("host must not be empty")
        try:
            validate_port(self.port)
        except ValueError as e:
            raise ValidationError(str(e), cause=e) from e
        if self.connect_timeout <= 0 or self.io_timeout <= 0:
            raise ValidationError("timeouts must be positive")

    @property
    def distribution_path(self) -> str:
        """Path of the distribution collection resource."""
        return f"/{self.api_version}/distribution"

    @property
    def namespace(self) -> str:
        return schema.namespace_for(self.api_version)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a configuration from CLOUDFRONT_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        if env.get("CLOUDFRONT_HOST"):
            kwargs["host"] = env["CLOUDFRONT_HOST"]
        if env.get("CLOUDFRONT_PORT"):
            try:
                kwargs["port"] = validate_port(env["CLOUDFRONT_PORT"])
            except ValueError as e:
                raise ValidationError(str(e), cause=e) from e
        if env.get("CLOUDFRONT_API_VERSION"):
            kwargs["api_version"] = env["CLOUDFRONT_API_VERSION"]
        if env.get("CLOUDFRONT_CONNECT_TIMEOUT"):
            kwargs["connect_timeout"] = _parse_timeout(
                "CLOUDFRONT_CONNECT_TIMEOUT", env["CLOUDFRONT_CONNECT_TIMEOUT"]
            )
        if env.get("CLOUDFRONT_IO_TIMEOUT"):
            kwargs["io_timeout"] = _parse_timeout(
                "CLOUDFRONT_IO_TIMEOUT", env["CLOUDFRONT_IO_TIMEOUT"]
            )
        if "CLOUDFRONT_STRICT_ETAG" in env:
            kwargs["strict_etag"] = _parse_bool(
                "CLOUDFRONT_STRICT_ETAG", env["CLOUDFRONT_STRICT_ETAG"]
            )

        return cls(**kwargs)
