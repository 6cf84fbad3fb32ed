"""
Enums — Closed registries consumed by the client.

  ContentNamespace     The two registered CM namespaces (tcm = Sites, ish = Docs)
  ItemType             CM item type codes used in compact identifiers
  FilterItemType       Item type tags accepted by the item query filter
  ContentIncludeMode   Whether and how raw content is fetched with an item
  ContentType, DataModelType, PageInclusion, DcpType
                       Model service options, sent to the server as claims
  ClaimValueType       Value type tag carried by a claim
  Ancestor             Ancestor expansion mode for sitemap subtrees
  SortFieldType, SortOrderType
                       Item query sort parameters

Enums sent as GraphQL variables serialize by value (see models.to_variable),
except ContentNamespace which is sent as its numeric id.
"""

from enum import Enum, IntEnum
from typing import Dict

from .exceptions import UnknownItemTypeError, UnknownNamespaceError


class ContentNamespace(Enum):
    """A CM namespace: its URI token and numeric id."""

    SITES = ("tcm", 1)
    DOCS = ("ish", 2)

    def __init__(self, token: str, namespace_id: int):
        self.token = token
        self.namespace_id = namespace_id

    @classmethod
    def from_token(cls, token: str) -> "ContentNamespace":
        """Resolve a namespace from its URI token ("tcm" or "ish").

        Tokens are case-sensitive.

        Raises:
            UnknownNamespaceError: If no namespace uses this token.
        """
        namespace = _NAMESPACES_BY_TOKEN.get(token)
        if namespace is None:
            raise UnknownNamespaceError(f"Unable to resolve namespace '{token}'")
        return namespace

    @classmethod
    def from_id(cls, namespace_id: int) -> "ContentNamespace":
        for namespace in cls:
            if namespace.namespace_id == namespace_id:
                return namespace
        raise UnknownNamespaceError(f"Unable to resolve namespace id {namespace_id}")

    @classmethod
    def lookup(cls, value: str) -> "ContentNamespace":
        """Resolve a namespace from a token ("tcm") or an enum name ("sites").

        Used by the CLI and settings, where users type either form.
        """
        if value in _NAMESPACES_BY_TOKEN:
            return _NAMESPACES_BY_TOKEN[value]
        try:
            return cls[value.upper()]
        except KeyError:
            raise UnknownNamespaceError(f"Unable to resolve namespace '{value}'") from None


_NAMESPACES_BY_TOKEN: Dict[str, ContentNamespace] = {ns.token: ns for ns in ContentNamespace}


class ItemType(IntEnum):
    """CM item type codes."""

    PUBLICATION = 1
    FOLDER = 2
    STRUCTURE_GROUP = 4
    SCHEMA = 8
    COMPONENT = 16
    COMPONENT_TEMPLATE = 32
    PAGE = 64
    PAGE_TEMPLATE = 128
    TARGET_GROUP = 256
    CATEGORY = 512
    KEYWORD = 1024
    TEMPLATE_BUILDING_BLOCK = 2048
    BUSINESS_PROCESS_TYPE = 4096
    VIRTUAL_FOLDER = 8192

    @classmethod
    def from_code(cls, code: int) -> "ItemType":
        """Resolve an item type from its numeric code.

        Raises:
            UnknownItemTypeError: If the code is not registered.
        """
        try:
            return cls(code)
        except ValueError:
            raise UnknownItemTypeError(f"Unknown item type code: {code}") from None


class FilterItemType(Enum):
    PUBLICATION = "PUBLICATION"
    STRUCTURE_GROUP = "STRUCTURE_GROUP"
    PAGE = "PAGE"
    COMPONENT = "COMPONENT"
    BINARY_COMPONENT = "BINARY_COMPONENT"
    KEYWORD = "KEYWORD"


class ContentIncludeMode(Enum):
    """How raw content is fetched alongside an item.

    EXCLUDE drops the rawContent block entirely. The *_JSON modes also request
    the parsed JSON data, and the *_AND_RENDER modes ask the server to render
    the content before returning it.
    """

    EXCLUDE = "EXCLUDE"
    INCLUDE_DATA = "INCLUDE_DATA"
    INCLUDE_JSON = "INCLUDE_JSON"
    INCLUDE_DATA_AND_RENDER = "INCLUDE_DATA_AND_RENDER"
    INCLUDE_JSON_AND_RENDER = "INCLUDE_JSON_AND_RENDER"

    @property
    def include_content(self) -> bool:
        return self is not ContentIncludeMode.EXCLUDE

    @property
    def include_json(self) -> bool:
        return self in (ContentIncludeMode.INCLUDE_JSON, ContentIncludeMode.INCLUDE_JSON_AND_RENDER)

    @property
    def render_content(self) -> bool:
        return self in (
            ContentIncludeMode.INCLUDE_DATA_AND_RENDER,
            ContentIncludeMode.INCLUDE_JSON_AND_RENDER,
        )


class ContentType(Enum):
    IGNORE = "IGNORE"
    MODEL = "MODEL"
    RAW = "RAW"


class DataModelType(Enum):
    R2 = "R2"
    DD4T = "DD4T"


class PageInclusion(Enum):
    INCLUDE = "INCLUDE"
    EXCLUDE = "EXCLUDE"


class DcpType(Enum):
    DEFAULT = "DEFAULT"
    HIGHEST_PRIORITY = "HIGHEST_PRIORITY"


class ClaimValueType(Enum):
    STRING = "STRING"
    INT = "INT"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"


class Ancestor(Enum):
    NONE = "NONE"
    INCLUDE = "INCLUDE"
    ONLY = "ONLY"


class SortFieldType(Enum):
    CREATION_DATE = "CREATION_DATE"
    UPDATED_DATE = "UPDATED_DATE"
    LAST_PUBLISH_DATE = "LAST_PUBLISH_DATE"
    INITIAL_PUBLISH_DATE = "INITIAL_PUBLISH_DATE"
    TITLE = "TITLE"


class SortOrderType(Enum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"
