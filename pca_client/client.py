"""
Public Content API — One method per content delivery use case.

Every operation follows the same four steps:

  1. BUILD      Configure a fresh RequestBuilder with the operation's query,
                variables, claims and the merged default + per-call context.
  2. EXECUTE    Hand the request to the transport (GraphQLClient.execute).
  3. EXTRACT    Parse the response and read the operation's JSON path
                (e.g. /data/publication). A missing path means "not found"
                and yields None.
  4. DECODE     Map the node into model objects with ResponseDecoder. Model
                data operations skip this step and return the raw JSON, whose
                shape is defined by the caller's data model.

Errors from any step are raised as PublicContentApiError with the original
exception chained; nothing is retried and no partial result is returned.

Typical usage:
    api = PublicContentApi.from_settings(load_settings("./.env"))
    mapping = api.get_publication_mapping(ContentNamespace.SITES, "/home")
    sitemap = api.get_sitemap(ContentNamespace.SITES, mapping.publication_id, descendant_levels=2)
"""

import functools
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from .claims import create_claim
from .cm_uri import CmUri, parse_cm_uri
from .enums import (
    Ancestor,
    ContentIncludeMode,
    ContentNamespace,
    ContentType,
    DataModelType,
    DcpType,
    PageInclusion,
)
from .exceptions import PcaClientError, PublicContentApiError, TransportError
from .graphql_client import DefaultGraphQLClient, GraphQLClient
from .models import (
    BinaryComponent,
    ComponentPresentation,
    Connection,
    ContextData,
    InputComponentPresentationFilter,
    InputItemFilter,
    InputPublicationFilter,
    InputSortParam,
    Page,
    Pagination,
    Publication,
    PublicationMapping,
    SitemapItem,
    TaxonomySitemapItem,
)
from .request import GraphQLRequest
from .request_builder import RequestBuilder, fragment_names_for
from .response_decoder import ResponseDecoder
from .settings import Settings

logger = logging.getLogger(__name__)

Namespace = Union[ContentNamespace, str]


def api_operation(func):
    """Raise every client error from func as PublicContentApiError."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PublicContentApiError:
            raise
        except PcaClientError as e:
            action = func.__name__.replace("_", " ")
            raise PublicContentApiError(f"Unable to {action}: {e}") from e

    return wrapper


def _namespace(ns: Namespace) -> ContentNamespace:
    if isinstance(ns, ContentNamespace):
        return ns
    return ContentNamespace.lookup(ns)


class PublicContentApi:
    """Facade over the content service GraphQL API.

    The instance holds no per-call state: each operation builds its own
    request, so one instance can serve concurrent callers.

    Attributes:
        client: The transport executing requests.
        request_timeout: Milliseconds attached to every request (0 = transport default).
        default_context_data: Context claims sent with every request; per-call
                              context data wins on collision.
        debug: If True, log each operation at DEBUG level.
    """

    def __init__(
        self,
        client: GraphQLClient,
        request_timeout: int = 0,
        default_context_data: Optional[ContextData] = None,
        debug: bool = False,
    ):
        self.client = client
        self.request_timeout = request_timeout
        self.default_context_data = default_context_data if default_context_data is not None else ContextData()
        self.debug = debug
        self._decoder = ResponseDecoder(debug)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        headers: Optional[Dict[str, str]] = None,
        default_context_data: Optional[ContextData] = None,
    ) -> "PublicContentApi":
        """Create an API backed by DefaultGraphQLClient from loaded settings."""
        client = DefaultGraphQLClient(
            settings.endpoint,
            headers=headers,
            default_timeout=settings.request_timeout,
            debug=settings.debug,
        )
        return cls(
            client,
            request_timeout=settings.request_timeout,
            default_context_data=default_context_data,
            debug=settings.debug,
        )

    # ------------------------------------------------------------------
    # Publications
    # ------------------------------------------------------------------

    @api_operation
    def get_publication(
        self,
        ns: Namespace,
        publication_id: int,
        custom_meta_filter: Optional[str] = None,
        context_data: Optional[ContextData] = None,
    ) -> Optional[Publication]:
        builder = (
            self._builder("Publication")
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/publication", self._as(Publication))

    @api_operation
    def get_publications(
        self,
        ns: Namespace,
        pagination: Optional[Pagination] = None,
        filter: Optional[InputPublicationFilter] = None,
        custom_meta_filter: Optional[str] = None,
        context_data: Optional[ContextData] = None,
    ) -> Optional[Connection]:
        pagination = pagination or Pagination()
        builder = (
            self._builder("Publications")
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("first", pagination.first)
            .with_variable("after", pagination.after)
            .with_variable("filter", filter)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/publications", self._connection_of(self._as(Publication)))

    @api_operation
    def get_publication_mapping(self, ns: Namespace, url: str) -> Optional[PublicationMapping]:
        """Find the publication serving a site URL."""
        builder = (
            self._builder("PublicationMapping")
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("siteUrl", url)
        )
        return self._fetch(builder, "/data/publicationMapping", self._as(PublicationMapping))

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    @api_operation
    def get_page(
        self,
        ns: Namespace,
        publication_id: int,
        page_id: int,
        custom_meta_filter: Optional[str] = None,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.INCLUDE_DATA,
        context_data: Optional[ContextData] = None,
    ) -> Optional[Page]:
        builder = (
            self._builder("PageById")
            .with_content_include_mode(content_include_mode)
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("pageId", page_id)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/page", self._as(Page))

    @api_operation
    def get_page_by_url(
        self,
        ns: Namespace,
        publication_id: int,
        url: str,
        custom_meta_filter: Optional[str] = None,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.INCLUDE_DATA,
        context_data: Optional[ContextData] = None,
    ) -> Optional[Page]:
        builder = (
            self._builder("PageByUrl")
            .with_content_include_mode(content_include_mode)
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("url", url)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/page", self._as(Page))

    @api_operation
    def get_page_by_cm_uri(
        self,
        cm_uri: Union[CmUri, str],
        custom_meta_filter: Optional[str] = None,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.INCLUDE_DATA,
        context_data: Optional[ContextData] = None,
    ) -> Optional[Page]:
        uri = parse_cm_uri(cm_uri)
        builder = (
            self._builder("PageByCmUri")
            .with_content_include_mode(content_include_mode)
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", uri.namespace_id)
            .with_variable("publicationId", uri.publication_id)
            .with_variable("cmUri", str(uri))
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/page", self._as(Page))

    @api_operation
    def get_pages(
        self,
        ns: Namespace,
        url: Optional[str] = None,
        pagination: Optional[Pagination] = None,
        custom_meta_filter: Optional[str] = None,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.EXCLUDE,
        context_data: Optional[ContextData] = None,
    ) -> Optional[Connection]:
        """Page through every page published at url across publications."""
        pagination = pagination or Pagination()
        builder = (
            self._builder("Pages")
            .with_content_include_mode(content_include_mode)
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("url", url)
            .with_variable("first", pagination.first)
            .with_variable("after", pagination.after)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/pages", self._connection_of(self._as(Page)))

    # ------------------------------------------------------------------
    # Binaries and component presentations
    # ------------------------------------------------------------------

    @api_operation
    def get_binary_component(
        self,
        ns: Namespace,
        publication_id: int,
        binary_id: int,
        custom_meta_filter: Optional[str] = None,
        context_data: Optional[ContextData] = None,
    ) -> Optional[BinaryComponent]:
        builder = (
            self._builder("BinaryComponentById")
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("binaryId", binary_id)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/binaryComponent", self._as(BinaryComponent))

    @api_operation
    def get_binary_component_by_url(
        self,
        ns: Namespace,
        publication_id: int,
        url: str,
        custom_meta_filter: Optional[str] = None,
        context_data: Optional[ContextData] = None,
    ) -> Optional[BinaryComponent]:
        """Fetch the binary served at url; only the variant at that url is returned."""
        builder = (
            self._builder("BinaryComponentByUrl")
            .with_variant_args(url)
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("url", url)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/binaryComponent", self._as(BinaryComponent))

    @api_operation
    def get_binary_component_by_cm_uri(
        self,
        cm_uri: Union[CmUri, str],
        custom_meta_filter: Optional[str] = None,
        context_data: Optional[ContextData] = None,
    ) -> Optional[BinaryComponent]:
        uri = parse_cm_uri(cm_uri)
        builder = (
            self._builder("BinaryComponentByCmUri")
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", uri.namespace_id)
            .with_variable("publicationId", uri.publication_id)
            .with_variable("cmUri", str(uri))
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/binaryComponent", self._as(BinaryComponent))

    @api_operation
    def get_component_presentation(
        self,
        ns: Namespace,
        publication_id: int,
        component_id: int,
        template_id: int,
        custom_meta_filter: Optional[str] = None,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.INCLUDE_DATA,
        context_data: Optional[ContextData] = None,
    ) -> Optional[ComponentPresentation]:
        builder = (
            self._builder("ComponentPresentation")
            .with_content_include_mode(content_include_mode)
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("componentId", component_id)
            .with_variable("templateId", template_id)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/componentPresentation", self._as(ComponentPresentation))

    @api_operation
    def get_component_presentations(
        self,
        ns: Namespace,
        publication_id: int,
        filter: Optional[InputComponentPresentationFilter] = None,
        sort: Optional[InputSortParam] = None,
        pagination: Optional[Pagination] = None,
        custom_meta_filter: Optional[str] = None,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.EXCLUDE,
        context_data: Optional[ContextData] = None,
    ) -> Optional[Connection]:
        pagination = pagination or Pagination()
        builder = (
            self._builder("ComponentPresentations")
            .with_content_include_mode(content_include_mode)
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("filter", filter)
            .with_variable("sort", sort)
            .with_variable("first", pagination.first)
            .with_variable("after", pagination.after)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(
            builder, "/data/componentPresentations", self._connection_of(self._as(ComponentPresentation))
        )

    # ------------------------------------------------------------------
    # Item query
    # ------------------------------------------------------------------

    @api_operation
    def execute_item_query(
        self,
        filter: Optional[InputItemFilter] = None,
        sort: Optional[InputSortParam] = None,
        pagination: Optional[Pagination] = None,
        custom_meta_filter: Optional[str] = None,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.EXCLUDE,
        include_container_items: bool = False,
        context_data: Optional[ContextData] = None,
    ) -> Optional[Connection]:
        """Run a generic item query; each node is decoded into its own Item variant.

        Only the fragments for the item types named in filter.item_types are
        added to the query.
        """
        filter = filter or InputItemFilter()
        pagination = pagination or Pagination()
        builder = (
            self._builder("ItemQuery")
            .with_inject_fragments(fragment_names_for(filter.item_types))
            .with_include_region("includeContainerItems", include_container_items)
            .with_content_include_mode(content_include_mode)
            .with_custom_meta_filter(custom_meta_filter)
            .with_variable("first", pagination.first)
            .with_variable("after", pagination.after)
            .with_variable("filter", filter)
            .with_variable("sort", sort)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/items", self._connection_of(self._decoder.decode_item))

    # ------------------------------------------------------------------
    # Link resolution
    # ------------------------------------------------------------------

    @api_operation
    def resolve_page_link(
        self, ns: Namespace, publication_id: int, page_id: int, render_relative_link: bool = True
    ) -> Optional[str]:
        builder = (
            self._builder("ResolvePageLink")
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("pageId", page_id)
            .with_variable("renderRelativeLink", render_relative_link)
        )
        return self._fetch(builder, "/data/pageLink/url")

    @api_operation
    def resolve_component_link(
        self,
        ns: Namespace,
        publication_id: int,
        component_id: int,
        source_page_id: Optional[int] = None,
        exclude_component_template_id: Optional[int] = None,
        render_relative_link: bool = True,
    ) -> Optional[str]:
        builder = (
            self._builder("ResolveComponentLink")
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("targetComponentId", component_id)
            .with_variable("sourcePageId", source_page_id)
            .with_variable("excludeComponentTemplateId", exclude_component_template_id)
            .with_variable("renderRelativeLink", render_relative_link)
        )
        return self._fetch(builder, "/data/componentLink/url")

    @api_operation
    def resolve_binary_link(
        self,
        ns: Namespace,
        publication_id: int,
        binary_id: int,
        variant_id: Optional[str] = None,
        render_relative_link: bool = True,
    ) -> Optional[str]:
        builder = (
            self._builder("ResolveBinaryLink")
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("binaryId", binary_id)
            .with_variable("variantId", variant_id)
            .with_variable("renderRelativeLink", render_relative_link)
        )
        return self._fetch(builder, "/data/binaryLink/url")

    @api_operation
    def resolve_dynamic_component_link(
        self,
        ns: Namespace,
        publication_id: int,
        page_id: int,
        component_id: int,
        template_id: int,
        render_relative_link: bool = True,
    ) -> Optional[str]:
        builder = (
            self._builder("ResolveDynamicComponentLink")
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("targetPageId", page_id)
            .with_variable("targetComponentId", component_id)
            .with_variable("targetTemplateId", template_id)
            .with_variable("renderRelativeLink", render_relative_link)
        )
        return self._fetch(builder, "/data/dynamicComponentLink/url")

    # ------------------------------------------------------------------
    # Model data (raw JSON)
    # ------------------------------------------------------------------

    @api_operation
    def get_page_model_data(
        self,
        ns: Namespace,
        publication_id: int,
        url: str,
        content_type: ContentType = ContentType.MODEL,
        model_type: DataModelType = DataModelType.R2,
        page_inclusion: PageInclusion = PageInclusion.INCLUDE,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.INCLUDE_DATA,
        context_data: Optional[ContextData] = None,
    ) -> Any:
        """Return the page model at url as raw JSON (None if there is no such page)."""
        builder = (
            self._builder("PageModelByUrl")
            .with_content_include_mode(content_include_mode)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("url", url)
            .with_context_data(self.default_context_data, context_data)
            .with_claim(create_claim(content_type))
            .with_claim(create_claim(model_type))
            .with_claim(create_claim(page_inclusion))
            .with_operation("page")
        )
        return self._fetch(builder, "/data/page/rawContent/data")

    @api_operation
    def get_page_model_data_by_id(
        self,
        ns: Namespace,
        publication_id: int,
        page_id: int,
        content_type: ContentType = ContentType.MODEL,
        model_type: DataModelType = DataModelType.R2,
        page_inclusion: PageInclusion = PageInclusion.INCLUDE,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.INCLUDE_DATA,
        context_data: Optional[ContextData] = None,
    ) -> Any:
        builder = (
            self._builder("PageModelById")
            .with_content_include_mode(content_include_mode)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("pageId", page_id)
            .with_context_data(self.default_context_data, context_data)
            .with_claim(create_claim(content_type))
            .with_claim(create_claim(model_type))
            .with_claim(create_claim(page_inclusion))
            .with_operation("page")
        )
        return self._fetch(builder, "/data/page/rawContent/data")

    @api_operation
    def get_entity_model_data(
        self,
        ns: Namespace,
        publication_id: int,
        entity_id: int,
        template_id: int,
        content_type: ContentType = ContentType.MODEL,
        model_type: DataModelType = DataModelType.R2,
        dcp_type: DcpType = DcpType.DEFAULT,
        content_include_mode: ContentIncludeMode = ContentIncludeMode.INCLUDE_DATA,
        context_data: Optional[ContextData] = None,
    ) -> Any:
        builder = (
            self._builder("EntityModelById")
            .with_content_include_mode(content_include_mode)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("componentId", entity_id)
            .with_variable("templateId", template_id)
            .with_context_data(self.default_context_data, context_data)
            .with_claim(create_claim(content_type))
            .with_claim(create_claim(model_type))
            .with_claim(create_claim(dcp_type))
            .with_operation("entityModel")
        )
        return self._fetch(builder, "/data/componentPresentation/rawContent/data")

    # ------------------------------------------------------------------
    # Sitemap
    # ------------------------------------------------------------------

    @api_operation
    def get_sitemap(
        self,
        ns: Namespace,
        publication_id: int,
        descendant_levels: int,
        context_data: Optional[ContextData] = None,
    ) -> Optional[TaxonomySitemapItem]:
        """Fetch the sitemap root with descendant_levels levels of children.

        Nodes at the last fetched level have items=None.
        """
        builder = (
            self._builder("Sitemap")
            .with_recurse_fragment("RecurseItems", descendant_levels)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(builder, "/data/sitemap", self._decoder.decode_sitemap_item)

    @api_operation
    def get_sitemap_subtree(
        self,
        ns: Namespace,
        publication_id: int,
        taxonomy_node_id: Optional[str],
        descendant_levels: int,
        ancestor: Ancestor = Ancestor.NONE,
        context_data: Optional[ContextData] = None,
    ) -> Optional[List[SitemapItem]]:
        builder = (
            self._builder("SitemapSubtree")
            .with_recurse_fragment("RecurseItems", descendant_levels)
            .with_variable("namespaceId", _namespace(ns))
            .with_variable("publicationId", publication_id)
            .with_variable("taxonomyNodeId", taxonomy_node_id)
            .with_variable("ancestor", ancestor)
            .with_context_data(self.default_context_data, context_data)
        )
        return self._fetch(
            builder,
            "/data/sitemapSubtree",
            lambda node: self._decoder.decode_list(node, self._decoder.decode_sitemap_item),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _builder(self, query_name: str) -> RequestBuilder:
        return RequestBuilder(debug=self.debug).with_query(query_name).with_timeout(self.request_timeout)

    def _as(self, cls) -> Callable[[Any], Any]:
        return functools.partial(self._decoder.decode_as, cls)

    def _connection_of(self, node_decoder: Callable[[Any], Any]) -> Callable[[Any], Any]:
        return functools.partial(self._decoder.decode_connection, node_decoder=node_decoder)

    def _execute(self, request: GraphQLRequest) -> str:
        try:
            return self.client.execute(request)
        except PcaClientError:
            raise
        except Exception as e:
            raise TransportError(f"Unable to execute query: {request}") from e

    def _fetch(self, builder: RequestBuilder, path: str, decode: Optional[Callable[[Any], Any]] = None) -> Any:
        request = builder.build()
        if self.debug:
            logger.debug("Executing %s, reading %s", request.query_name, path)
        document = self._decoder.parse(self._execute(request))
        node = self._decoder.at(document, path)
        if decode is None:
            return node
        return decode(node)
