"""
Request Builder — Assembles a GraphQLRequest from a named query template.

Configuration is accumulated through with_*() calls. Each call returns a new
builder and leaves the one it was called on untouched, so a partly configured
builder can be shared and extended safely. build() turns the configuration into
an immutable GraphQLRequest:

    request = (
        RequestBuilder()
        .with_query("ItemQuery")
        .with_inject_fragments(fragment_names_for(filter.item_types))
        .with_include_region("includeContainerItems", True)
        .with_content_include_mode(ContentIncludeMode.INCLUDE_DATA)
        .with_variable("filter", filter)
        .with_context_data(default_context, context)
        .build()
    )

Assembly steps (see graphql_queries for the marker syntax):
  1. Strip #if regions that are switched off.
  2. Replace #{fragmentList} with the injected fragment spreads.
  3. Unroll recursive fragments to their configured depth, or remove their
     spread at depth 0.
  4. Append the definition of every spread fragment, transitively, once each.
  5. Replace #{variantArgs}.

build() does not change the builder: calling it again yields an equal request.
"""

import copy
import json
import logging
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .graphql_queries import (
    FRAGMENT_LIST_MARKER,
    FRAGMENTS,
    QUERIES,
    RECURSE_MARKER,
    RECURSIVE_FRAGMENTS,
    VARIANT_ARGS_MARKER,
    RecursiveFragment,
)
from .enums import ContentIncludeMode
from .exceptions import ConfigurationError
from .models import ClaimValue, ContextData, to_variable
from .request import GraphQLRequest

logger = logging.getLogger(__name__)

FRAGMENT_SUFFIX = "Fields"

SPREAD_PATTERN = re.compile(r"\.\.\.\s*(?!on\b)([_A-Za-z][_0-9A-Za-z]*)")


def fragment_names_for(item_types: Optional[Iterable[Any]]) -> List[str]:
    """Derive the fragment needed to decode each requested item type.

    Each tag (e.g. FilterItemType.BINARY_COMPONENT) is turned into PascalCase
    and suffixed with "Fields" ("BinaryComponentFields"). Order follows the
    input; repeated tags yield one fragment.
    """
    names: List[str] = []
    for item_type in item_types or ():
        tag = item_type.value if isinstance(item_type, Enum) else str(item_type)
        name = "".join(part[:1].upper() + part[1:].lower() for part in tag.split("_")) + FRAGMENT_SUFFIX
        if name not in names:
            names.append(name)
    return names


class RequestBuilder:
    """Immutable, chainable builder for a GraphQLRequest.

    Attributes:
        debug: If True, log the assembled query at DEBUG level.
    """

    def __init__(
        self,
        queries: Optional[Mapping[str, str]] = None,
        fragments: Optional[Mapping[str, str]] = None,
        recursive_fragments: Optional[Mapping[str, RecursiveFragment]] = None,
        debug: bool = False,
    ):
        """Initialize the builder.

        Args:
            queries: Template store to select from (default: QUERIES).
            fragments: Fragment definitions (default: FRAGMENTS).
            recursive_fragments: Recursive fragments (default: RECURSIVE_FRAGMENTS).
            debug: Enable verbose logging.
        """
        self._queries = QUERIES if queries is None else queries
        self._fragment_store = FRAGMENTS if fragments is None else fragments
        self._recursive_store = RECURSIVE_FRAGMENTS if recursive_fragments is None else recursive_fragments
        self.debug = debug

        self._query_name: Optional[str] = None
        self._injected: Tuple[str, ...] = ()
        self._variables: Dict[str, Any] = {}
        self._regions: Dict[str, bool] = {}
        self._recurse_depths: Dict[str, int] = {}
        self._claims: Tuple[ClaimValue, ...] = ()
        self._operation_name: Optional[str] = None
        self._timeout = 0
        self._variant_url: Optional[str] = None

    def _derive(self, **changes) -> "RequestBuilder":
        """Copy this builder with the given private attributes replaced."""
        clone = copy.copy(self)
        clone._variables = dict(self._variables)
        clone._regions = dict(self._regions)
        clone._recurse_depths = dict(self._recurse_depths)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def with_query(self, query_name: str) -> "RequestBuilder":
        return self._derive(_query_name=query_name)

    def with_inject_fragments(self, fragment_names: Optional[Iterable[str]]) -> "RequestBuilder":
        """Spread the named fragments at the template's #{fragmentList} marker."""
        injected = list(self._injected)
        for name in fragment_names or ():
            if name not in injected:
                injected.append(name)
        return self._derive(_injected=tuple(injected))

    def with_variable(self, name: str, value: Any) -> "RequestBuilder":
        """Bind a GraphQL variable. None values are not sent at all."""
        if value is None:
            return self
        clone = self._derive()
        clone._variables[name] = to_variable(value)
        return clone

    def with_custom_meta_filter(self, custom_meta_filter: Optional[str]) -> "RequestBuilder":
        return self.with_variable("customMetaFilter", custom_meta_filter)

    def with_content_include_mode(self, mode: Optional[ContentIncludeMode]) -> "RequestBuilder":
        """Switch the content regions and the renderContent variable for mode."""
        if mode is None:
            return self
        clone = (
            self.with_include_region("includeContent", mode.include_content)
            .with_include_region("includeJson", mode.include_json)
        )
        if mode.include_content:
            return clone.with_variable("renderContent", mode.render_content)
        clone._variables.pop("renderContent", None)
        return clone

    def with_include_region(self, region: str, include: bool) -> "RequestBuilder":
        clone = self._derive()
        clone._regions[region] = bool(include)
        return clone

    def with_recurse_fragment(self, fragment_name: str, depth: int) -> "RequestBuilder":
        """Unroll a recursive fragment to exactly depth levels (0 = not at all)."""
        if depth is None or depth < 0:
            raise ConfigurationError(f"Recursion depth for {fragment_name} must be >= 0, got {depth}")
        clone = self._derive()
        clone._recurse_depths[fragment_name] = depth
        return clone

    def with_context_data(
        self, default: Optional[ContextData], override: Optional[ContextData] = None
    ) -> "RequestBuilder":
        """Attach default and per-call context data, per-call claims winning."""
        merged = ContextData.merge(default, override)
        if not len(merged):
            return self
        clone = self._derive()
        clone._variables["contextData"] = merged.to_variable()
        return clone

    def with_claim(self, claim: Optional[ClaimValue]) -> "RequestBuilder":
        if claim is None:
            return self
        return self._derive(_claims=self._claims + (claim,))

    def with_operation(self, operation_name: Optional[str]) -> "RequestBuilder":
        return self._derive(_operation_name=operation_name)

    def with_timeout(self, timeout: int) -> "RequestBuilder":
        return self._derive(_timeout=timeout or 0)

    def with_variant_args(self, url: Optional[str]) -> "RequestBuilder":
        """Restrict binary variants to the one served at url."""
        return self._derive(_variant_url=url)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> GraphQLRequest:
        """Assemble the request.

        Raises:
            ConfigurationError: If no query or an unknown query was selected,
                the document spreads an unknown fragment, or the template's
                regions are unbalanced.
        """
        if not self._query_name:
            raise ConfigurationError("A query name is required; call with_query() before build()")
        template = self._queries.get(self._query_name)
        if template is None:
            raise ConfigurationError(f"Unknown query: {self._query_name}")

        query = self._assemble(template)

        request = GraphQLRequest(
            query_name=self._query_name,
            query=query,
            variables=self._variables,
            operation_name=self._operation_name,
            timeout=self._timeout,
            claims=self._claims,
        )

        if self.debug:
            logger.debug("Built %s (%d chars, variables=%s, claims=%d)",
                         self._query_name, len(query), sorted(self._variables), len(self._claims))
        return request

    def _assemble(self, template: str) -> str:
        document = self._apply_regions(template)
        spreads = "".join(f"...{name}\n" for name in self._injected)
        document = document.replace(FRAGMENT_LIST_MARKER, spreads)

        available = dict(self._fragment_store)
        for name, fragment in self._recursive_store.items():
            depth = self._recurse_depths.get(name, 0)
            if depth == 0:
                document = self._remove_spread(document, name)
            else:
                available[name] = self._unroll(name, fragment, depth)

        definitions = self._collect_fragments(document, available)
        document = document.strip() + "\n" + "".join(definitions)

        variant_args = f"(url: {json.dumps(self._variant_url)})" if self._variant_url is not None else ""
        return document.replace(VARIANT_ARGS_MARKER, variant_args)

    def _apply_regions(self, text: str) -> str:
        """Drop the lines of every #if region that is not switched on."""
        kept = []
        stack: List[bool] = []
        for line in text.splitlines(keepends=True):
            stripped = line.strip()
            if stripped.startswith("#if "):
                stack.append(self._regions.get(stripped[4:].strip(), False))
                continue
            if stripped == "#endif":
                if not stack:
                    raise ConfigurationError(f"Unbalanced #endif in {self._query_name}")
                stack.pop()
                continue
            if all(stack):
                kept.append(line)
        if stack:
            raise ConfigurationError(f"Unterminated #if region in {self._query_name}")
        return "".join(kept)

    def _collect_fragments(self, document: str, available: Mapping[str, str]) -> List[str]:
        definitions = []
        seen = set()
        pending = SPREAD_PATTERN.findall(document)
        while pending:
            name = pending.pop(0)
            if name in seen:
                continue
            seen.add(name)
            definition = available.get(name)
            if definition is None:
                raise ConfigurationError(f"Unknown fragment '{name}' in {self._query_name}")
            definition = self._apply_regions(definition).strip() + "\n"
            definitions.append(definition)
            pending.extend(SPREAD_PATTERN.findall(definition))
        return definitions

    @staticmethod
    def _unroll(name: str, fragment: RecursiveFragment, depth: int) -> str:
        selection = ""
        for _ in range(depth):
            inner = fragment.nesting.replace(RECURSE_MARKER, selection) if selection else ""
            selection = fragment.selection.replace(RECURSE_MARKER, inner)
        return f"fragment {name} on {fragment.type_condition} {{\n{selection}}}\n"

    @staticmethod
    def _remove_spread(document: str, name: str) -> str:
        return re.sub(rf"[ \t]*\.\.\.\s*{re.escape(name)}\b[ \t]*\n?", "", document)
