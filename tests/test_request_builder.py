"""Tests for pca_client.request_builder.RequestBuilder."""

import pytest

from pca_client.claims import create_claim
from pca_client.enums import ContentIncludeMode, ContentNamespace, ContentType, FilterItemType
from pca_client.exceptions import ConfigurationError
from pca_client.models import ClaimValue, ContextData, InputItemFilter
from pca_client.request_builder import RequestBuilder, fragment_names_for


def _item_query(*item_types):
    return (
        RequestBuilder()
        .with_query("ItemQuery")
        .with_inject_fragments(fragment_names_for(item_types))
        .with_variable("filter", InputItemFilter(item_types=list(item_types)))
        .build()
    )


def _sitemap(levels):
    return (
        RequestBuilder()
        .with_query("Sitemap")
        .with_recurse_fragment("RecurseItems", levels)
        .with_variable("namespaceId", ContentNamespace.SITES)
        .with_variable("publicationId", 5)
        .build()
    )


# ---------------------------------------------------------------------------
# Fragment selection
# ---------------------------------------------------------------------------

def test_fragment_names_for_item_types():
    names = fragment_names_for([FilterItemType.PAGE, FilterItemType.COMPONENT, FilterItemType.PAGE])
    assert names == ["PageFields", "ComponentFields"]


def test_fragment_names_for_multi_word_tag():
    assert fragment_names_for([FilterItemType.BINARY_COMPONENT]) == ["BinaryComponentFields"]
    assert fragment_names_for([FilterItemType.STRUCTURE_GROUP]) == ["StructureGroupFields"]


def test_fragment_names_for_nothing():
    assert fragment_names_for(None) == []


def test_item_query_spreads_selected_fragments():
    request = _item_query(FilterItemType.PAGE, FilterItemType.COMPONENT)
    assert "...PageFields" in request.query
    assert "...ComponentFields" in request.query
    assert "#{fragmentList}" not in request.query


def test_item_query_appends_each_definition_once():
    request = _item_query(FilterItemType.PAGE, FilterItemType.COMPONENT)
    assert request.query.count("fragment PageFields on Page") == 1
    assert request.query.count("fragment ComponentFields on Component") == 1
    # ItemFields is spread by the query and by both fragments
    assert request.query.count("fragment ItemFields on Item") == 1
    assert request.query.count("fragment CustomMetaFields on Item") == 1


def test_item_query_omits_unselected_fragments():
    request = _item_query(FilterItemType.KEYWORD)
    assert "fragment KeywordFields on Keyword" in request.query
    assert "PageFields" not in request.query
    assert "BinaryComponentFields" not in request.query


def test_item_query_filter_variable():
    request = _item_query(FilterItemType.PAGE)
    assert request.variables["filter"] == {"itemTypes": ["PAGE"]}


# ---------------------------------------------------------------------------
# Recursive fragments
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("levels", [1, 2, 3, 5])
def test_recursion_unrolls_exactly_n_levels(levels):
    request = _sitemap(levels)
    assert request.query.count("items {") == levels
    assert request.query.count("fragment RecurseItems on TaxonomySitemapItem") == 1
    assert "#{recurse}" not in request.query


def test_recursion_depth_zero_removes_spread():
    request = _sitemap(0)
    assert "RecurseItems" not in request.query
    assert "items {" not in request.query
    assert "fragment TaxonomyItemFields on SitemapItem" in request.query


def test_recursion_not_configured_behaves_as_depth_zero():
    request = (
        RequestBuilder()
        .with_query("SitemapSubtree")
        .with_variable("namespaceId", 1)
        .with_variable("publicationId", 5)
        .build()
    )
    assert "RecurseItems" not in request.query


def test_recursion_negative_depth_rejected():
    with pytest.raises(ConfigurationError):
        RequestBuilder().with_recurse_fragment("RecurseItems", -1)


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------

def test_none_variables_are_omitted():
    request = (
        RequestBuilder()
        .with_query("Pages")
        .with_variable("namespaceId", ContentNamespace.DOCS)
        .with_variable("url", None)
        .with_variable("first", 10)
        .with_variable("after", None)
        .build()
    )
    assert dict(request.variables) == {"namespaceId": 2, "first": 10}
    assert "url" not in request.variables


def test_no_variables_leaves_them_out_of_payload():
    request = RequestBuilder().with_query("PublicationMapping").build()
    assert "variables" not in request.to_payload()
    assert request.to_payload()["query"] == request.query


def test_request_variables_are_read_only():
    request = RequestBuilder().with_query("PublicationMapping").with_variable("siteUrl", "/").build()
    with pytest.raises(TypeError):
        request.variables["siteUrl"] = "/other"


def test_timeout_and_operation():
    request = (
        RequestBuilder()
        .with_query("PageModelByUrl")
        .with_timeout(5000)
        .with_operation("page")
        .build()
    )
    assert request.timeout == 5000
    assert request.to_payload()["operationName"] == "page"


# ---------------------------------------------------------------------------
# Include regions
# ---------------------------------------------------------------------------

def test_exclude_mode_drops_raw_content():
    request = (
        RequestBuilder()
        .with_query("PageById")
        .with_content_include_mode(ContentIncludeMode.EXCLUDE)
        .build()
    )
    assert "rawContent" not in request.query
    assert "$renderContent" not in request.query
    assert "renderContent" not in request.variables
    assert "#if" not in request.query
    assert "#endif" not in request.query


def test_include_data_mode_keeps_raw_content_without_json():
    request = (
        RequestBuilder()
        .with_query("PageById")
        .with_content_include_mode(ContentIncludeMode.INCLUDE_DATA)
        .build()
    )
    assert "rawContent(renderContent: $renderContent)" in request.query
    assert "fragment RawContentFields on RawContent" in request.query
    assert "\n  data\n" not in request.query
    assert request.variables["renderContent"] is False


def test_include_json_and_render_mode():
    request = (
        RequestBuilder()
        .with_query("PageById")
        .with_content_include_mode(ContentIncludeMode.INCLUDE_JSON_AND_RENDER)
        .build()
    )
    assert "\n  data\n" in request.query
    assert request.variables["renderContent"] is True


def test_container_items_region():
    on = (
        RequestBuilder()
        .with_query("ItemQuery")
        .with_inject_fragments(["PageFields"])
        .with_include_region("includeContainerItems", True)
        .build()
    )
    off = RequestBuilder().with_query("ItemQuery").with_inject_fragments(["PageFields"]).build()
    assert "containerItems" in on.query
    assert "containerItems" not in off.query


def test_variant_args():
    with_url = (
        RequestBuilder()
        .with_query("BinaryComponentByUrl")
        .with_variant_args('/media/a "b".png')
        .build()
    )
    without = RequestBuilder().with_query("BinaryComponentById").build()
    assert 'variants(url: "/media/a \\"b\\".png") {' in with_url.query
    assert "variants {" in without.query
    assert "#{variantArgs}" not in without.query


# ---------------------------------------------------------------------------
# Context data and claims
# ---------------------------------------------------------------------------

def test_context_data_override_wins():
    default = ContextData.from_mapping({"a": "1", "b": "2"})
    override = ContextData.from_mapping({"b": "3"})
    request = RequestBuilder().with_query("Sitemap").with_context_data(default, override).build()
    assert request.variables["contextData"] == [
        {"uri": "a", "value": "1", "type": "STRING"},
        {"uri": "b", "value": "3", "type": "STRING"},
    ]
    # Inputs are untouched
    assert default.get("b").value == "2"


def test_empty_context_data_is_omitted():
    request = RequestBuilder().with_query("Sitemap").with_context_data(ContextData(), None).build()
    assert "contextData" not in request.variables


def test_claims_are_kept_out_of_variables():
    request = (
        RequestBuilder()
        .with_query("PageModelByUrl")
        .with_claim(create_claim(ContentType.MODEL))
        .with_claim(None)
        .build()
    )
    assert request.claims == (ClaimValue("taf:modelservice:contenttype", "MODEL"),)
    assert all(not name.startswith("taf:") for name in request.variables)


# ---------------------------------------------------------------------------
# Misuse
# ---------------------------------------------------------------------------

def test_build_without_query_name():
    with pytest.raises(ConfigurationError):
        RequestBuilder().build()


def test_build_unknown_query():
    with pytest.raises(ConfigurationError):
        RequestBuilder().with_query("NoSuchQuery").build()


def test_build_is_repeatable():
    builder = RequestBuilder().with_query("Sitemap").with_variable("publicationId", 5)
    assert builder.build() == builder.build()


def test_configuration_returns_new_builder():
    base = RequestBuilder().with_query("Sitemap")
    extended = base.with_variable("publicationId", 5).with_claim(create_claim(ContentType.RAW))
    assert extended is not base
    assert "publicationId" not in base.build().variables
    assert base.build().claims == ()
    assert extended.build().variables["publicationId"] == 5


def test_shared_base_builder_branches_independently():
    base = RequestBuilder().with_query("PageById").with_variable("namespaceId", 1)
    with_content = base.with_content_include_mode(ContentIncludeMode.INCLUDE_JSON)
    without = base.with_content_include_mode(ContentIncludeMode.EXCLUDE)
    assert "rawContent" in with_content.build().query
    assert "rawContent" not in without.build().query
    assert "renderContent" not in without.build().variables


def test_unknown_fragment_spread():
    builder = RequestBuilder(
        queries={"Q": "query q {\n  a {\n    ...Missing\n  }\n}\n"},
        fragments={},
        recursive_fragments={},
    )
    with pytest.raises(ConfigurationError):
        builder.with_query("Q").build()


def test_unbalanced_region():
    builder = RequestBuilder(
        queries={"Q": "query q {\n#if x\n  a\n}\n"},
        fragments={},
        recursive_fragments={},
    )
    with pytest.raises(ConfigurationError):
        builder.with_query("Q").build()


def test_builders_share_no_state():
    first = RequestBuilder().with_query("Sitemap").with_variable("publicationId", 5)
    second = RequestBuilder().with_query("Sitemap")
    assert "publicationId" not in second.build().variables
    assert first.build().variables["publicationId"] == 5
