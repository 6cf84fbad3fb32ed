"""
Models — Typed request inputs and response shapes.

Request side (dataclasses, serialized by to_variable()):
  ClaimValue, ContextData        Out-of-band claims and per-request context
  Pagination                     first/after cursor paging
  InputItemFilter, InputSortParam, InputPublicationFilter,
  InputComponentPresentationFilter, InputCustomMetaCriteria
                                 GraphQL input objects

Response side (pydantic models, read with model_validate()):
  Item and its variants          Page, Component, BinaryComponent, Keyword,
                                 Publication, StructureGroup
  SitemapItem and its variants   TaxonomySitemapItem (recursive), PageSitemapItem
  Connection, Edge, PageInfo     Paged results
  PublicationMapping, ComponentPresentation, RawContent, CustomMeta,
  BinaryVariant                  Supporting shapes

Response fields are read from the camelCase JSON key of their name and are
type checked: a value of the wrong shape fails validation, and
validate_model() reports the failure as MappingError. Fields holding Item or
SitemapItem nodes select the concrete class from the "type" discriminator
through ITEM_VARIANTS and SITEMAP_VARIANTS, so a nested node is decoded the
same way as a top-level one.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .enums import ClaimValueType, ContentNamespace, FilterItemType, SortFieldType, SortOrderType
from .exceptions import MappingError, UnknownVariantError

DISCRIMINATOR = "type"

ModelT = TypeVar("ModelT", bound=BaseModel)
NodeT = TypeVar("NodeT")


def camel_case(name: str) -> str:
    head, *rest = name.rstrip("_").split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def json_key(f) -> str:
    """JSON name of a request dataclass field ("json" metadata, else camelCase)."""
    return f.metadata.get("json", camel_case(f.name))


def to_variable(value: Any) -> Any:
    """Serialize a Python value into a GraphQL variable value.

    Dataclasses become dicts keyed by their JSON names with None members
    dropped, enums become their value (namespaces their numeric id), and
    lists/tuples are serialized element-wise.
    """
    if hasattr(value, "to_variable"):
        return value.to_variable()
    if isinstance(value, ContentNamespace):
        return value.namespace_id
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        result = {}
        for f in fields(value):
            member = getattr(value, f.name)
            if member is not None:
                result[json_key(f)] = to_variable(member)
        return result
    if isinstance(value, (list, tuple)):
        return [to_variable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_variable(v) for k, v in value.items() if v is not None}
    return value


# ---------------------------------------------------------------------------
# Claims and context data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClaimValue:
    """A typed claim sent to the server alongside a request."""

    uri: str
    value: Any
    type: ClaimValueType = ClaimValueType.STRING

    def to_variable(self) -> Dict[str, Any]:
        return {"uri": self.uri, "value": to_variable(self.value), "type": self.type.value}


class ContextData:
    """Context claims for a request, keyed by claim URI.

    Instances are never modified in place: with_claim() and merge() return new
    instances, so a process-wide default can be shared freely.
    """

    def __init__(self, claim_values: Optional[Iterable[ClaimValue]] = None):
        self._claims: Dict[str, ClaimValue] = {}
        for claim in claim_values or ():
            self._claims[claim.uri] = claim

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ContextData":
        """Build context data from a plain {uri: value} mapping of string claims."""
        return cls(ClaimValue(uri, value) for uri, value in values.items())

    @classmethod
    def merge(cls, default: Optional["ContextData"], override: Optional["ContextData"]) -> "ContextData":
        """Combine two context data instances; claims in override win on collision."""
        merged = cls()
        for source in (default, override):
            if source is not None:
                merged._claims.update(source._claims)
        return merged

    def with_claim(self, claim: ClaimValue) -> "ContextData":
        return ContextData.merge(self, ContextData([claim]))

    @property
    def claim_values(self) -> Tuple[ClaimValue, ...]:
        return tuple(self._claims.values())

    def get(self, uri: str) -> Optional[ClaimValue]:
        return self._claims.get(uri)

    def to_variable(self) -> List[Dict[str, Any]]:
        return [claim.to_variable() for claim in self._claims.values()]

    def __len__(self) -> int:
        return len(self._claims)

    def __contains__(self, uri) -> bool:
        return uri in self._claims

    def __eq__(self, other) -> bool:
        if not isinstance(other, ContextData):
            return NotImplemented
        return self._claims == other._claims

    def __repr__(self) -> str:
        return f"ContextData({list(self._claims.values())!r})"


# ---------------------------------------------------------------------------
# Request inputs
# ---------------------------------------------------------------------------

@dataclass
class Pagination:
    first: Optional[int] = None
    after: Optional[str] = None


@dataclass
class InputCustomMetaCriteria:
    key: str
    value: Optional[str] = None
    scope: Optional[str] = None


@dataclass
class InputItemFilter:
    item_types: Optional[List[FilterItemType]] = None
    namespace_ids: Optional[List[int]] = None
    publication_ids: Optional[List[int]] = None
    item_ids: Optional[List[int]] = None
    schema_id: Optional[int] = None
    custom_meta: Optional[InputCustomMetaCriteria] = None
    and_: Optional[List["InputItemFilter"]] = field(default=None, metadata={"json": "_and"})
    or_: Optional[List["InputItemFilter"]] = field(default=None, metadata={"json": "_or"})


@dataclass
class InputSortParam:
    order: SortOrderType = SortOrderType.ASCENDING
    sort_by: SortFieldType = SortFieldType.TITLE


@dataclass
class InputPublicationFilter:
    custom_meta: Optional[InputCustomMetaCriteria] = None


@dataclass
class InputComponentPresentationFilter:
    schema_id: Optional[int] = None
    template_id: Optional[int] = None
    custom_meta: Optional[InputCustomMetaCriteria] = None


# ---------------------------------------------------------------------------
# Response decoding helpers
# ---------------------------------------------------------------------------

class ResponseModel(BaseModel):
    """Base of every response shape: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def validate_model(cls: Type[ModelT], node: Any) -> ModelT:
    """Validate a JSON node into cls.

    Raises:
        MappingError: If node does not fit cls (wrong container or field types).
    """
    try:
        return cls.model_validate(node)
    except ValidationError as e:
        raise MappingError(f"Unable to map result to {cls.__name__}: {e}") from e


def decode_variant(node: Any, variants: Mapping[str, Type[ModelT]], kind: str) -> Optional[ModelT]:
    """Decode node into the variant its discriminator names.

    Raises:
        MappingError: If node is not an object or does not fit the variant.
        UnknownVariantError: If the discriminator is missing, not a string or
            not in variants.
    """
    if node is None:
        return None
    if not isinstance(node, dict):
        raise MappingError(f"Unable to map {type(node).__name__} to {kind}: expected an object")
    discriminator = node.get(DISCRIMINATOR)
    variant = variants.get(discriminator) if isinstance(discriminator, str) else None
    if variant is None:
        raise UnknownVariantError(
            f"Unknown {kind} type {discriminator!r} (expected one of: {', '.join(variants)})",
            discriminator=discriminator,
        )
    return validate_model(variant, node)


def _decode_variant_list(value: Any, variants: Mapping[str, Type[ModelT]], kind: str) -> Any:
    # Anything but a list is left for the field's own validation to reject
    if not isinstance(value, list):
        return value
    return [
        element if isinstance(element, BaseModel) else decode_variant(element, variants, kind)
        for element in value
    ]


# ---------------------------------------------------------------------------
# Paged results
# ---------------------------------------------------------------------------

class PageInfo(ResponseModel):
    has_next_page: bool = False
    end_cursor: Optional[str] = None


class Edge(ResponseModel, Generic[NodeT]):
    cursor: Optional[str] = None
    node: Optional[NodeT] = None


class Connection(ResponseModel, Generic[NodeT]):
    edges: List[Edge[NodeT]] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo)

    @field_validator("page_info", mode="before")
    @classmethod
    def _missing_page_info(cls, value):
        return PageInfo() if value is None else value

    @property
    def nodes(self) -> List[Any]:
        return [edge.node for edge in self.edges]


# ---------------------------------------------------------------------------
# Supporting shapes
# ---------------------------------------------------------------------------

class CustomMeta(ResponseModel):
    key: Optional[str] = None
    value: Optional[str] = None
    value_type: Optional[str] = None


class RawContent(ResponseModel):
    id: Optional[str] = None
    char_set: Optional[str] = None
    content: Optional[str] = None
    data: Any = None


class BinaryVariant(ResponseModel):
    binary_id: Optional[int] = None
    variant_id: Optional[str] = None
    description: Optional[str] = None
    download_url: Optional[str] = None
    path: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

class Item(ResponseModel):
    """Common fields of every content item. Never decoded directly: the
    "type" discriminator selects one of the subclasses."""

    id: Optional[str] = None
    item_id: Optional[int] = None
    item_type: Optional[int] = None
    title: Optional[str] = None
    namespace_id: Optional[int] = None
    publication_id: Optional[int] = None
    owning_publication_id: Optional[int] = None
    creation_date: Optional[str] = None
    updated_date: Optional[str] = None
    initial_publish_date: Optional[str] = None
    last_publish_date: Optional[str] = None
    custom_metas: Optional[Connection[CustomMeta]] = None


class Component(Item):
    schema_id: Optional[int] = None
    raw_content: Optional[RawContent] = None


class Page(Item):
    url: Optional[str] = None
    page_template_id: Optional[int] = None
    raw_content: Optional[RawContent] = None
    container_items: Optional[List[Item]] = None

    @field_validator("container_items", mode="before")
    @classmethod
    def _decode_container_items(cls, value):
        return _decode_variant_list(value, ITEM_VARIANTS, "Item")


class BinaryComponent(Item):
    variants: Optional[Connection[BinaryVariant]] = None


class Keyword(Item):
    key: Optional[str] = None
    description: Optional[str] = None
    taxonomy_id: Optional[int] = None
    has_children: Optional[bool] = None
    use_for_navigation: Optional[bool] = None


class Publication(Item):
    publication_key: Optional[str] = None
    publication_url: Optional[str] = None
    publication_path: Optional[str] = None
    multimedia_url: Optional[str] = None
    multimedia_path: Optional[str] = None


class StructureGroup(Item):
    directory: Optional[str] = None
    path: Optional[str] = None


class ComponentPresentation(ResponseModel):
    item_id: Optional[int] = None
    item_type: Optional[int] = None
    namespace_id: Optional[int] = None
    publication_id: Optional[int] = None
    component_template_id: Optional[int] = None
    component: Optional[Component] = None
    raw_content: Optional[RawContent] = None


class PublicationMapping(ResponseModel):
    publication_id: Optional[int] = None
    namespace_id: Optional[int] = None
    cm_uri: Optional[str] = None
    domain: Optional[str] = None
    path: Optional[str] = None
    port: Optional[str] = None
    protocol: Optional[str] = None


# ---------------------------------------------------------------------------
# Sitemap
# ---------------------------------------------------------------------------

class SitemapItem(ResponseModel):
    id: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    original_title: Optional[str] = None
    url: Optional[str] = None
    visible: Optional[bool] = None
    publication_id: Optional[int] = None
    namespace_id: Optional[int] = None


class PageSitemapItem(SitemapItem):
    pass


class TaxonomySitemapItem(SitemapItem):
    """A taxonomy node and its children.

    items is None when the children were not fetched (the query stopped
    recursing above this node) and an empty list when the node has none.
    """

    key: Optional[str] = None
    description: Optional[str] = None
    abstract: Optional[bool] = None
    has_child_nodes: Optional[bool] = None
    classified_items_count: Optional[int] = None
    navigable: Optional[bool] = None
    items: Optional[List[SitemapItem]] = None

    @field_validator("items", mode="before")
    @classmethod
    def _decode_children(cls, value):
        return _decode_variant_list(value, SITEMAP_VARIANTS, "SitemapItem")

    @property
    def children_fetched(self) -> bool:
        return self.items is not None


# Discriminator value -> concrete class
ITEM_VARIANTS: Dict[str, Type[Item]] = {
    "Page": Page,
    "Component": Component,
    "BinaryComponent": BinaryComponent,
    "Keyword": Keyword,
    "Publication": Publication,
    "StructureGroup": StructureGroup,
}

SITEMAP_VARIANTS: Dict[str, Type[SitemapItem]] = {
    "TaxonomySitemapItem": TaxonomySitemapItem,
    "PageSitemapItem": PageSitemapItem,
}
