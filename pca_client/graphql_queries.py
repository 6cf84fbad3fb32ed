"""
GraphQL Query Definitions — Query templates and fragments for the content service.

Every facade operation selects one template from QUERIES by name. Templates
are plain GraphQL with a few markers that RequestBuilder resolves before the
request is sent:

  #if <region> ... #endif     Lines kept only when the region is switched on
                              (e.g. includeContent, includeJson,
                              includeContainerItems). Regions may appear in
                              fragments too.
  #{fragmentList}             Replaced by fragment spreads chosen at runtime
                              (ItemQuery selects one per requested item type).
  #{variantArgs}              Replaced by the binary variant arguments, or
                              removed.
  ...RecurseItems             Spread of a recursive fragment; unrolled to the
                              requested depth, or removed at depth 0.

Fragment definitions are not part of the templates: the builder appends the
definition of every fragment the final document spreads, transitively and
exactly once, from FRAGMENTS.

Items and sitemap nodes alias __typename as "type" so ResponseDecoder can pick
the concrete variant of each node.
"""

from dataclasses import dataclass
from typing import Dict

RECURSE_MARKER = "#{recurse}"
FRAGMENT_LIST_MARKER = "#{fragmentList}"
VARIANT_ARGS_MARKER = "#{variantArgs}"


@dataclass(frozen=True)
class RecursiveFragment:
    """A fragment that selects its own type's children, unrolled to a fixed depth.

    Attributes:
        type_condition: The GraphQL type the fragment applies to.
        selection: One level of the selection; RECURSE_MARKER marks where the
                   next level goes.
        nesting: Wraps each deeper level (RECURSE_MARKER is the level).
    """

    type_condition: str
    selection: str
    nesting: str


# ---------------------------------------------------------------------------
# Fragments
# ---------------------------------------------------------------------------

FRAGMENTS: Dict[str, str] = {
    "CustomMetaFields": """
fragment CustomMetaFields on Item {
  customMetas(filter: $customMetaFilter) {
    edges {
      node {
        key
        value
        valueType
      }
    }
  }
}
""",
    "ItemFields": """
fragment ItemFields on Item {
  type: __typename
  id
  itemId
  itemType
  title
  namespaceId
  publicationId
  owningPublicationId
  creationDate
  updatedDate
  initialPublishDate
  lastPublishDate
}
""",
    "RawContentFields": """
fragment RawContentFields on RawContent {
  id
  charSet
  content
#if includeJson
  data
#endif
}
""",
    "PublicationFields": """
fragment PublicationFields on Publication {
  ...ItemFields
  publicationKey
  publicationUrl
  publicationPath
  multimediaUrl
  multimediaPath
}
""",
    "StructureGroupFields": """
fragment StructureGroupFields on StructureGroup {
  ...ItemFields
  directory
  path
}
""",
    "PageFields": """
fragment PageFields on Page {
  ...ItemFields
  url
  pageTemplateId
#if includeContent
  rawContent(renderContent: $renderContent) {
    ...RawContentFields
  }
#endif
#if includeContainerItems
  containerItems {
    ...ItemFields
    ...ComponentFields
  }
#endif
}
""",
    "ComponentFields": """
fragment ComponentFields on Component {
  ...ItemFields
  schemaId
#if includeContent
  rawContent(renderContent: $renderContent) {
    ...RawContentFields
  }
#endif
}
""",
    "BinaryComponentFields": """
fragment BinaryComponentFields on BinaryComponent {
  ...ItemFields
  variants#{variantArgs} {
    edges {
      node {
        binaryId
        variantId
        description
        downloadUrl
        path
        type
        url
      }
    }
  }
}
""",
    "KeywordFields": """
fragment KeywordFields on Keyword {
  ...ItemFields
  key
  description
  taxonomyId
  hasChildren
  useForNavigation
}
""",
    "TaxonomyItemFields": """
fragment TaxonomyItemFields on SitemapItem {
  type: __typename
  id
  title
  originalTitle
  url
  visible
  publicationId
  namespaceId
  ... on TaxonomySitemapItem {
    key
    description
    abstract
    hasChildNodes
    classifiedItemsCount
  }
}
""",
}

RECURSIVE_FRAGMENTS: Dict[str, RecursiveFragment] = {
    "RecurseItems": RecursiveFragment(
        type_condition="TaxonomySitemapItem",
        selection="""items {
  ...TaxonomyItemFields
#{recurse}}
""",
        nesting="""... on TaxonomySitemapItem {
#{recurse}}
""",
    ),
}


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

QUERIES: Dict[str, str] = {
    "Publication": """
query publication($namespaceId: Int!, $publicationId: Int!, $customMetaFilter: String,
    $contextData: [InputClaimValue!]) {
  publication(namespaceId: $namespaceId, publicationId: $publicationId, contextData: $contextData) {
    ...PublicationFields
    ...CustomMetaFields
  }
}
""",
    "Publications": """
query publications($namespaceId: Int!, $first: Int, $after: String, $filter: InputPublicationFilter,
    $customMetaFilter: String, $contextData: [InputClaimValue!]) {
  publications(namespaceId: $namespaceId, first: $first, after: $after, filter: $filter,
      contextData: $contextData) {
    edges {
      cursor
      node {
        ...PublicationFields
        ...CustomMetaFields
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
""",
    "PageById": """
query page($namespaceId: Int!, $publicationId: Int!, $pageId: Int!, $customMetaFilter: String,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  page(namespaceId: $namespaceId, publicationId: $publicationId, pageId: $pageId, contextData: $contextData) {
    ...PageFields
    ...CustomMetaFields
  }
}
""",
    "PageByUrl": """
query page($namespaceId: Int!, $publicationId: Int!, $url: String!, $customMetaFilter: String,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  page(namespaceId: $namespaceId, publicationId: $publicationId, url: $url, contextData: $contextData) {
    ...PageFields
    ...CustomMetaFields
  }
}
""",
    "PageByCmUri": """
query page($namespaceId: Int!, $publicationId: Int!, $cmUri: String!, $customMetaFilter: String,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  page(namespaceId: $namespaceId, publicationId: $publicationId, cmUri: $cmUri, contextData: $contextData) {
    ...PageFields
    ...CustomMetaFields
  }
}
""",
    "Pages": """
query pages($namespaceId: Int!, $url: String, $first: Int, $after: String, $customMetaFilter: String,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  pages(namespaceId: $namespaceId, url: $url, first: $first, after: $after, contextData: $contextData) {
    edges {
      cursor
      node {
        ...PageFields
        ...CustomMetaFields
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
""",
    "BinaryComponentById": """
query binaryComponent($namespaceId: Int!, $publicationId: Int!, $binaryId: Int!, $customMetaFilter: String,
    $contextData: [InputClaimValue!]) {
  binaryComponent(namespaceId: $namespaceId, publicationId: $publicationId, binaryId: $binaryId,
      contextData: $contextData) {
    ...BinaryComponentFields
    ...CustomMetaFields
  }
}
""",
    "BinaryComponentByUrl": """
query binaryComponent($namespaceId: Int!, $publicationId: Int!, $url: String!, $customMetaFilter: String,
    $contextData: [InputClaimValue!]) {
  binaryComponent(namespaceId: $namespaceId, publicationId: $publicationId, url: $url,
      contextData: $contextData) {
    ...BinaryComponentFields
    ...CustomMetaFields
  }
}
""",
    "BinaryComponentByCmUri": """
query binaryComponent($namespaceId: Int!, $publicationId: Int!, $cmUri: String!, $customMetaFilter: String,
    $contextData: [InputClaimValue!]) {
  binaryComponent(namespaceId: $namespaceId, publicationId: $publicationId, cmUri: $cmUri,
      contextData: $contextData) {
    ...BinaryComponentFields
    ...CustomMetaFields
  }
}
""",
    "ComponentPresentation": """
query componentPresentation($namespaceId: Int!, $publicationId: Int!, $componentId: Int!, $templateId: Int!,
    $customMetaFilter: String,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  componentPresentation(namespaceId: $namespaceId, publicationId: $publicationId, componentId: $componentId,
      templateId: $templateId, contextData: $contextData) {
    itemId
    itemType
    namespaceId
    publicationId
    componentTemplateId
    component {
      ...ComponentFields
      ...CustomMetaFields
    }
#if includeContent
    rawContent(renderContent: $renderContent) {
      ...RawContentFields
    }
#endif
  }
}
""",
    "ComponentPresentations": """
query componentPresentations($namespaceId: Int!, $publicationId: Int!,
    $filter: InputComponentPresentationFilter, $sort: InputSortParam, $first: Int, $after: String,
    $customMetaFilter: String,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  componentPresentations(namespaceId: $namespaceId, publicationId: $publicationId, filter: $filter,
      sort: $sort, first: $first, after: $after, contextData: $contextData) {
    edges {
      cursor
      node {
        itemId
        itemType
        namespaceId
        publicationId
        componentTemplateId
        component {
          ...ComponentFields
          ...CustomMetaFields
        }
#if includeContent
        rawContent(renderContent: $renderContent) {
          ...RawContentFields
        }
#endif
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
""",
    "ItemQuery": """
query itemQuery($first: Int, $after: String, $filter: InputItemFilter!, $sort: InputSortParam,
    $customMetaFilter: String,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  items(first: $first, after: $after, filter: $filter, sort: $sort, contextData: $contextData) {
    edges {
      cursor
      node {
        ...ItemFields
        ...CustomMetaFields
        #{fragmentList}
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
""",
    "ResolvePageLink": """
query pageLink($namespaceId: Int!, $publicationId: Int!, $pageId: Int!, $renderRelativeLink: Boolean) {
  pageLink(namespaceId: $namespaceId, publicationId: $publicationId, pageId: $pageId,
      renderRelativeLink: $renderRelativeLink) {
    url
  }
}
""",
    "ResolveComponentLink": """
query componentLink($namespaceId: Int!, $publicationId: Int!, $targetComponentId: Int!, $sourcePageId: Int,
    $excludeComponentTemplateId: Int, $renderRelativeLink: Boolean) {
  componentLink(namespaceId: $namespaceId, publicationId: $publicationId, targetComponentId: $targetComponentId,
      sourcePageId: $sourcePageId, excludeComponentTemplateId: $excludeComponentTemplateId,
      renderRelativeLink: $renderRelativeLink) {
    url
  }
}
""",
    "ResolveBinaryLink": """
query binaryLink($namespaceId: Int!, $publicationId: Int!, $binaryId: Int!, $variantId: String,
    $renderRelativeLink: Boolean) {
  binaryLink(namespaceId: $namespaceId, publicationId: $publicationId, binaryId: $binaryId,
      variantId: $variantId, renderRelativeLink: $renderRelativeLink) {
    url
  }
}
""",
    "ResolveDynamicComponentLink": """
query dynamicComponentLink($namespaceId: Int!, $publicationId: Int!, $targetPageId: Int!,
    $targetComponentId: Int!, $targetTemplateId: Int!, $renderRelativeLink: Boolean) {
  dynamicComponentLink(namespaceId: $namespaceId, publicationId: $publicationId, targetPageId: $targetPageId,
      targetComponentId: $targetComponentId, targetTemplateId: $targetTemplateId,
      renderRelativeLink: $renderRelativeLink) {
    url
  }
}
""",
    "PublicationMapping": """
query publicationMapping($namespaceId: Int!, $siteUrl: String!) {
  publicationMapping(namespaceId: $namespaceId, siteUrl: $siteUrl) {
    publicationId
    namespaceId
    cmUri
    domain
    path
    port
    protocol
  }
}
""",
    "PageModelByUrl": """
query page($namespaceId: Int!, $publicationId: Int!, $url: String!,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  page(namespaceId: $namespaceId, publicationId: $publicationId, url: $url, contextData: $contextData) {
#if includeContent
    rawContent(renderContent: $renderContent) {
      data
    }
#endif
    id
  }
}
""",
    "PageModelById": """
query page($namespaceId: Int!, $publicationId: Int!, $pageId: Int!,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  page(namespaceId: $namespaceId, publicationId: $publicationId, pageId: $pageId, contextData: $contextData) {
#if includeContent
    rawContent(renderContent: $renderContent) {
      data
    }
#endif
    id
  }
}
""",
    "EntityModelById": """
query entityModel($namespaceId: Int!, $publicationId: Int!, $componentId: Int!, $templateId: Int!,
#if includeContent
    $renderContent: Boolean,
#endif
    $contextData: [InputClaimValue!]) {
  componentPresentation(namespaceId: $namespaceId, publicationId: $publicationId, componentId: $componentId,
      templateId: $templateId, contextData: $contextData) {
#if includeContent
    rawContent(renderContent: $renderContent) {
      data
    }
#endif
    itemId
  }
}
""",
    "Sitemap": """
query sitemap($namespaceId: Int!, $publicationId: Int!, $contextData: [InputClaimValue!]) {
  sitemap(namespaceId: $namespaceId, publicationId: $publicationId, contextData: $contextData) {
    ...TaxonomyItemFields
    ...RecurseItems
  }
}
""",
    "SitemapSubtree": """
query sitemapSubtree($namespaceId: Int!, $publicationId: Int!, $taxonomyNodeId: String, $ancestor: Ancestor,
    $contextData: [InputClaimValue!]) {
  sitemapSubtree(namespaceId: $namespaceId, publicationId: $publicationId, taxonomyNodeId: $taxonomyNodeId,
      ancestor: $ancestor, contextData: $contextData) {
    ...TaxonomyItemFields
    ...RecurseItems
  }
}
""",
}
