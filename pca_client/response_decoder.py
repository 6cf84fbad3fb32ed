"""
Response Decoder — Maps raw GraphQL JSON into typed model objects.

The decoder sits between the transport (which returns response text) and the
facade (which returns typed results). It knows nothing about which query was
sent; the caller names the JSON path to read and the shape to produce.

The response has this structure:
    {
      "data": {
        "items": {
          "edges": [
            {"cursor": "...", "node": {"type": "Page", "itemId": 64, ...}},
            {"cursor": "...", "node": {"type": "Component", ...}}
          ],
          "pageInfo": {"hasNextPage": false, "endCursor": "..."}
        }
      }
    }

Key behaviors:
  - at() resolves a JSON pointer ("/data/items"). A path that does not exist
    resolves to None: the service omits or nulls what it cannot find.
  - Typed nodes are validated by the pydantic response models; a value of
    the wrong type or shape raises MappingError with the ValidationError
    chained.
  - Item and SitemapItem nodes carry their concrete type in the "type" field
    (aliased from __typename). models.ITEM_VARIANTS and SITEMAP_VARIANTS map
    each known value to one variant; any other value, including a value that
    is not a string, raises UnknownVariantError.
  - TaxonomySitemapItem children are decoded recursively. An absent "items"
    field stays None (not fetched at this depth); an empty array stays [].

The decoder holds no per-call state and can be shared between threads.
"""

import json
import logging
from typing import Any, Callable, List, Optional, Type

from .exceptions import MappingError
from .models import (
    ITEM_VARIANTS,
    SITEMAP_VARIANTS,
    Connection,
    Edge,
    Item,
    ModelT,
    SitemapItem,
    decode_variant,
    validate_model,
)

logger = logging.getLogger(__name__)

Decoder = Callable[[Any], Any]


class ResponseDecoder:
    """Decodes GraphQL response JSON into response models.

    Attributes:
        debug: If True, logs each decode target at DEBUG level.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    # ------------------------------------------------------------------
    # Raw JSON access
    # ------------------------------------------------------------------

    def parse(self, text: str) -> Any:
        """Parse response text into JSON.

        Raises:
            MappingError: If the text is not valid JSON.
        """
        try:
            return json.loads(text)
        except (TypeError, ValueError) as e:
            raise MappingError(f"Unable to parse response as JSON: {e}") from e

    def at(self, document: Any, pointer: str) -> Any:
        """Resolve a JSON pointer such as "/data/page/rawContent/data".

        Returns:
            The node at pointer, or None if any step along it is missing.
        """
        node = document
        if not pointer:
            return node
        for token in pointer.lstrip("/").split("/"):
            token = token.replace("~1", "/").replace("~0", "~")
            if isinstance(node, dict):
                node = node.get(token)
            elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
                node = node[int(token)]
            else:
                return None
            if node is None:
                return None
        return node

    # ------------------------------------------------------------------
    # Typed decoding
    # ------------------------------------------------------------------

    def decode_as(self, cls: Type[ModelT], node: Any) -> Optional[ModelT]:
        """Validate a JSON object into the response model cls.

        Keys without a matching field are ignored.

        Raises:
            MappingError: If node is not an object or does not fit cls.
        """
        if node is None:
            return None
        if self.debug:
            logger.debug("Decoding %s", cls.__name__)
        return validate_model(cls, node)

    def decode_item(self, node: Any) -> Optional[Item]:
        """Decode an Item node into the variant named by its discriminator.

        Raises:
            UnknownVariantError: If the discriminator is missing or unknown.
        """
        return decode_variant(node, ITEM_VARIANTS, "Item")

    def decode_sitemap_item(self, node: Any) -> Optional[SitemapItem]:
        """Decode a SitemapItem node (and, for taxonomy nodes, its subtree).

        Raises:
            UnknownVariantError: If the discriminator is missing or unknown.
        """
        return decode_variant(node, SITEMAP_VARIANTS, "SitemapItem")

    def decode_list(self, node: Any, element_decoder: Decoder) -> Optional[List[Any]]:
        if node is None:
            return None
        if not isinstance(node, list):
            raise MappingError(f"Unable to map {type(node).__name__} to a list: expected an array")
        return [element_decoder(element) for element in node]

    def decode_connection(self, node: Any, node_decoder: Decoder) -> Optional[Connection]:
        """Decode a paged result; each edge node goes through node_decoder."""
        page = self.decode_as(Connection, node)
        if page is None:
            return None
        edges = [Edge(cursor=edge.cursor, node=node_decoder(edge.node)) for edge in page.edges]
        return Connection(edges=edges, page_info=page.page_info)
