"""
PCA Client — Python client for the content delivery Public Content API.

The package turns typed calls into GraphQL requests, executes them over a
pluggable transport and maps the responses back into typed objects. Each
module handles one concern:

  client.py            PublicContentApi facade (one method per use case)
  request_builder.py   Assemble a GraphQLRequest from a query template
  graphql_queries.py   Query templates, fragments and recursive fragments
  request.py           The immutable GraphQLRequest
  graphql_client.py    Transport interface and the requests-based default
  response_decoder.py  Map response JSON into model objects
  models.py            Request inputs and response shapes
  cm_uri.py            Parse and format CM URIs ("tcm:5-123-64")
  claims.py            Model service options as claims
  enums.py             Namespaces, item types and option enums
  settings.py          .env / environment configuration
  exceptions.py        Error hierarchy
"""

from .client import PublicContentApi
from .cm_uri import CmUri, format_cm_uri, parse_cm_uri
from .enums import (
    Ancestor,
    ContentIncludeMode,
    ContentNamespace,
    ContentType,
    DataModelType,
    DcpType,
    FilterItemType,
    ItemType,
    PageInclusion,
)
from .exceptions import (
    ConfigurationError,
    GraphQLClientError,
    MappingError,
    ParseError,
    PcaClientError,
    PublicContentApiError,
    TransportError,
    UnknownVariantError,
)
from .graphql_client import DefaultGraphQLClient, GraphQLClient
from .models import ClaimValue, ContextData, InputItemFilter, InputSortParam, Pagination
from .request import GraphQLRequest
from .request_builder import RequestBuilder
from .response_decoder import ResponseDecoder
from .settings import Settings, load_settings

__version__ = "0.1.0"
