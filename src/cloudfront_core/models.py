"""
Distribution resources for cloudfront_core.

DistributionConfig is built by callers or parsed from a response;
Distribution and DistributionList are rebuilt from every response that
carries them. The only field the client changes afterwards is
``Distribution.etag``.
"""

import time
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from lxml import etree

from . import schema
from .exceptions import ProtocolError, ValidationError

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def parse_document(data: bytes) -> etree._Element:
    """
    Parse an XML document and return its root element.

    Raises:
        ProtocolError: If the document is not well-formed
    """
    try:
        return etree.fromstring(data, _PARSER)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise ProtocolError(f"Malformed XML document: {e}", cause=e) from e


def local_name(element: etree._Element) -> str:
    """Tag name of ``element`` without its namespace."""
    return etree.QName(element).localname


def _children(element: etree._Element, name: str) -> Iterator[etree._Element]:
    for child in element.iterchildren(tag=etree.Element):
        if local_name(child) == name:
            yield child


def find_child(element: etree._Element, name: str) -> Optional[etree._Element]:
    return next(_children(element, name), None)


def child_text(element: etree._Element, name: str) -> Optional[str]:
    child = find_child(element, name)
    if child is None:
        return None
    return child.text or ""


def _flag(element: etree._Element, name: str) -> bool:
    return (child_text(element, name) or "").strip() == "true"


def generate_caller_reference() -> str:
    """Caller reference derived from the current UTC time."""
    return time.strftime("%Y%m%d%H%M%S", time.gmtime())


@dataclass
class DistributionConfig:
    """
    Configuration of a distribution.

    Attributes:
        origin: Origin server the distribution pulls from (required)
        caller_reference: Idempotency token; generated on first serialization
                          when not set
        cnames: Alternate domain names, in the order they were added
        comment: Optional free-form comment
        enabled: Whether the distribution serves requests
    """

    origin: str = ""
    caller_reference: Optional[str] = None
    cnames: List[str] = field(default_factory=list)
    comment: Optional[str] = None
    enabled: bool = False

    @classmethod
    def from_element(cls, element: etree._Element) -> "DistributionConfig":
        """
        Build a config from a DistributionConfig or DistributionSummary element.
        """
        return cls(
            origin=child_text(element, schema.ORIGIN) or "",
            caller_reference=child_text(element, schema.CALLER_REFERENCE) or None,
            cnames=[child.text or "" for child in _children(element, schema.CNAME)],
            comment=child_text(element, schema.COMMENT) or None,
            enabled=_flag(element, schema.ENABLED),
        )

    @classmethod
    def from_xml(cls, data: bytes) -> "DistributionConfig":
        return cls.from_element(parse_document(data))

    def add_cname(self, name: str) -> "DistributionConfig":
        self.cnames.append(name)
        return self

    def remove_cname(self, index_or_value: Union[int, str]) -> "DistributionConfig":
        """
        Remove a CNAME by position, or else by value.

        Unknown positions and values are ignored.
        """
        if isinstance(index_or_value, int):
            if 0 <= index_or_value < len(self.cnames):
                del self.cnames[index_or_value]
        elif index_or_value in self.cnames:
            self.cnames.remove(index_or_value)
        return self

    def cname(self, index: int) -> str:
        return self.cnames[index]

    def ensure_caller_reference(self) -> str:
        """Return the caller reference, generating and storing one if unset."""
        if not self.caller_reference:
            self.caller_reference = generate_caller_reference()
        return self.caller_reference

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If Origin is missing
        """
        if not self.origin:
            raise ValidationError("DistributionConfig requires Origin")

    def to_element(self, namespace: str = schema.NAMESPACE) -> etree._Element:
        """
        Build the DistributionConfig element.

        Children are written in the order Origin, CallerReference,
        CNAME*, Comment, Enabled.

        Raises:
            ValidationError: If Origin is missing
        """
        self.validate()

        def qualified(name: str) -> str:
            return f"{{{namespace}}}{name}"

        root = etree.Element(qualified(schema.DISTRIBUTION_CONFIG), nsmap={None: namespace})
        etree.SubElement(root, qualified(schema.ORIGIN)).text = self.origin
        etree.SubElement(root, qualified(schema.CALLER_REFERENCE)).text = self.ensure_caller_reference()
        for cname in self.cnames:
            etree.SubElement(root, qualified(schema.CNAME)).text = cname or None
        etree.SubElement(root, qualified(schema.COMMENT)).text = self.comment or None
        etree.SubElement(root, qualified(schema.ENABLED)).text = "true" if self.enabled else "false"
        return root

    def to_xml(self, namespace: str = schema.NAMESPACE) -> bytes:
        """Serialize to a UTF-8 XML document."""
        return etree.tostring(
            self.to_element(namespace),
            xml_declaration=True,
            encoding="UTF-8",
        )


@dataclass
class Distribution:
    """
    A distribution as reported by the server.

    Attributes:
        id: Server-assigned identifier
        config: The distribution's configuration
        domain_name: Domain name assigned by CloudFront
        last_modified_time: Timestamp string as reported by the server
        status: "Deployed" or "InProgress"
        etag: Version token required by update and delete
    """

    id: str
    config: DistributionConfig
    domain_name: str = ""
    last_modified_time: str = ""
    status: str = ""
    etag: Optional[str] = None

    @classmethod
    def from_element(cls, element: etree._Element, etag: Optional[str] = None) -> "Distribution":
        """
        Build a distribution from a Distribution or DistributionSummary element.

        A Distribution element nests its DistributionConfig; a summary
        carries the config fields directly.
        """
        config_element = find_child(element, schema.DISTRIBUTION_CONFIG)
        if config_element is None:
            config_element = element

        return cls(
            id=child_text(element, schema.ID) or "",
            config=DistributionConfig.from_element(config_element),
            domain_name=child_text(element, schema.DOMAIN_NAME) or "",
            last_modified_time=child_text(element, schema.LAST_MODIFIED_TIME) or "",
            status=child_text(element, schema.STATUS) or "",
            etag=etag,
        )

    @property
    def in_progress(self) -> bool:
        return self.status == schema.STATUS_IN_PROGRESS

    @property
    def deployed(self) -> bool:
        return self.status == schema.STATUS_DEPLOYED


@dataclass
class DistributionList:
    """One page of distribution summaries."""

    distributions: List[Distribution] = field(default_factory=list)
    marker: str = ""
    max_items: Optional[int] = None
    next_marker: Optional[str] = None
    is_truncated: bool = False

    @classmethod
    def from_element(cls, element: etree._Element) -> "DistributionList":
        max_items_text = (child_text(element, schema.MAX_ITEMS) or "").strip()
        try:
            max_items = int(max_items_text) if max_items_text else None
        except ValueError as e:
            raise ProtocolError(f"Invalid MaxItems {max_items_text!r}", cause=e) from e

        return cls(
            distributions=[
                Distribution.from_element(summary)
                for summary in _children(element, schema.DISTRIBUTION_SUMMARY)
            ],
            marker=child_text(element, schema.MARKER) or "",
            max_items=max_items,
            next_marker=child_text(element, schema.NEXT_MARKER) or None,
            is_truncated=_flag(element, schema.IS_TRUNCATED),
        )

    def __len__(self) -> int:
        return len(self.distributions)

    def __iter__(self) -> Iterator[Distribution]:
        return iter(self.distributions)

    def __getitem__(self, index: int) -> Distribution:
        return self.distributions[index]
