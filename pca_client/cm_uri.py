"""
CM URI — Parse and format compact content identifiers.

A CM URI addresses one item in the content store:

    <namespace>:<publicationId>-<itemId>[-<itemType>][-v<version>]

    tcm:5-123            Component 123 in publication 5 (item type defaults to 16)
    tcm:5-456-64         Page 456 in publication 5
    ish:7-89-16-v3       Version 3 of component 89 in the Docs namespace

The namespace token is case-sensitive and must be registered in
ContentNamespace; an explicit item type must be a registered ItemType code.
Formatting always writes the item type, and writes the version suffix only
when a version is present, so parse(format(uri)) == uri for every uri.

CmUri("tcm:5-123") is the same as CmUri.parse("tcm:5-123"): a lone string
argument is parsed as CM URI text.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from .enums import ContentNamespace, ItemType
from .exceptions import ParseError

logger = logging.getLogger(__name__)

SEPARATOR = "-"
URI_SEPARATOR = ":"

CM_URI_PATTERN = re.compile(
    r"(?P<namespace>[a-zA-Z]+):(?P<pub_id>[0-9]+)-(?P<item_id>[0-9]+)"
    r"(?:-(?P<item_type>[0-9]+))?(?:-v(?P<version>[0-9]+))?"
)


@dataclass(frozen=True, eq=False)
class CmUri:
    """An immutable CM URI value.

    Attributes:
        namespace: The ContentNamespace the item lives in.
        publication_id: Publication id (non-negative).
        item_id: Item id (non-negative).
        item_type: Item type code, ItemType.COMPONENT when the text omits it.
        version: Item version, or None when the text carries no version.
    """

    namespace: Union[ContentNamespace, str]
    publication_id: Optional[int] = None
    item_id: Optional[int] = None
    item_type: ItemType = ItemType.COMPONENT
    version: Optional[int] = None

    def __post_init__(self):
        if self.publication_id is None and self.item_id is None and isinstance(self.namespace, str):
            parsed = CmUri.parse(self.namespace)
            for name in ("namespace", "publication_id", "item_id", "item_type", "version"):
                object.__setattr__(self, name, getattr(parsed, name))
            return
        if self.publication_id is None or self.item_id is None:
            raise ValueError("publication_id and item_id are required unless parsing URI text")
        if not isinstance(self.namespace, ContentNamespace):
            object.__setattr__(self, "namespace", ContentNamespace.from_token(self.namespace))
        object.__setattr__(self, "item_type", ItemType.from_code(int(self.item_type)))
        for name in ("publication_id", "item_id", "version"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @classmethod
    def parse(cls, text: str) -> "CmUri":
        """Parse a CM URI string.

        Raises:
            ParseError: If the text does not match the CM URI grammar.
            UnknownNamespaceError: If the namespace token is not registered.
            UnknownItemTypeError: If the item type code is not registered.
        """
        if not isinstance(text, str):
            raise ParseError(f"Unable to parse CM URI: {text!r}")
        match = CM_URI_PATTERN.fullmatch(text)
        if not match:
            raise ParseError(f"Unable to parse CM URI: {text}")

        namespace = ContentNamespace.from_token(match.group("namespace"))
        item_type = match.group("item_type")
        version = match.group("version")

        return cls(
            namespace=namespace,
            publication_id=int(match.group("pub_id")),
            item_id=int(match.group("item_id")),
            item_type=ItemType.from_code(int(item_type)) if item_type else ItemType.COMPONENT,
            version=int(version) if version else None,
        )

    def format(self) -> str:
        version = f"{SEPARATOR}v{self.version}" if self.version is not None else ""
        return (
            f"{self.namespace.token}{URI_SEPARATOR}{self.publication_id}{SEPARATOR}"
            f"{self.item_id}{SEPARATOR}{int(self.item_type)}{version}"
        )

    @property
    def namespace_id(self) -> int:
        return self.namespace.namespace_id

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"CmUri('{self.format()}')"

    def __eq__(self, other) -> bool:
        if isinstance(other, str):
            try:
                other = CmUri.parse(other)
            except ParseError:
                logger.debug("Unable to parse uri: %s. Assuming it doesn't equal %s", other, self)
                return False
        if not isinstance(other, CmUri):
            return NotImplemented
        return (
            self.namespace is other.namespace
            and self.publication_id == other.publication_id
            and self.item_id == other.item_id
            and self.item_type == other.item_type
            and self.version == other.version
        )

    def __hash__(self) -> int:
        return hash(self.format())


def parse_cm_uri(value: Union[str, CmUri]) -> CmUri:
    """Return value as a CmUri, parsing it when it is a string."""
    if isinstance(value, CmUri):
        return value
    return CmUri.parse(value)


def format_cm_uri(uri: CmUri) -> str:
    return uri.format()
