"""Tests for the run.py command line entry point."""

import json
import os
from unittest.mock import MagicMock, patch

import pytest

import run
from pca_client.exceptions import PublicContentApiError
from pca_client.models import PageSitemapItem, PublicationMapping, TaxonomySitemapItem


def test_parse_uri_command(capsys):
    run.main(["parse-uri", "tcm:5-456-64"])
    output = json.loads(capsys.readouterr().out)
    assert output["namespaceId"] == 1
    assert output["publicationId"] == 5
    assert output["itemId"] == 456
    assert output["itemType"] == 64
    assert output["version"] is None


def test_parse_uri_command_invalid(capsys):
    with pytest.raises(SystemExit) as exc_info:
        run.main(["parse-uri", "tcm:x"])
    assert exc_info.value.code == 1
    assert "ERROR" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        run.main(["--version"])
    assert exc_info.value.code == 0
    assert "pca-client" in capsys.readouterr().out


def test_missing_endpoint_exits(capsys):
    with patch.dict(os.environ, {}, clear=True):
        with pytest.raises(SystemExit) as exc_info:
            run.main(["--env", "/nonexistent/.env", "mapping", "tcm", "/"])
    assert exc_info.value.code == 1
    assert "PCA_ENDPOINT is required" in capsys.readouterr().err


def _patched_api(**method_results):
    api = MagicMock()
    for name, result in method_results.items():
        getattr(api, name).return_value = result
    return patch("run.PublicContentApi.from_settings", return_value=api), api


def test_mapping_command(capsys):
    patcher, api = _patched_api(get_publication_mapping=PublicationMapping(publication_id=5, namespace_id=1))
    env = {"PCA_ENDPOINT": "https://cd.example.com/cd/api"}
    with patch.dict(os.environ, env, clear=True), patcher:
        run.main(["--env", "/nonexistent/.env", "mapping", "tcm", "/home"])

    api.get_publication_mapping.assert_called_once_with("tcm", "/home")
    assert json.loads(capsys.readouterr().out)["publication_id"] == 5


def test_sitemap_command_levels(capsys):
    patcher, api = _patched_api(get_sitemap=None)
    env = {"PCA_ENDPOINT": "https://cd.example.com/cd/api"}
    with patch.dict(os.environ, env, clear=True), patcher:
        run.main(["--env", "/nonexistent/.env", "sitemap", "sites", "5", "--levels", "3"])

    api.get_sitemap.assert_called_once_with("sites", 5, 3)
    assert capsys.readouterr().out.strip() == "null"


def test_api_error_exits(capsys):
    patcher, api = _patched_api()
    api.get_publication.side_effect = PublicContentApiError("Unable to get publication")
    env = {"PCA_ENDPOINT": "https://cd.example.com/cd/api"}
    with patch.dict(os.environ, env, clear=True), patcher:
        with pytest.raises(SystemExit) as exc_info:
            run.main(["--env", "/nonexistent/.env", "publication", "tcm", "5"])
    assert exc_info.value.code == 1
    assert "Unable to get publication" in capsys.readouterr().err


def test_sitemap_command_prints_children(capsys):
    root = TaxonomySitemapItem(
        id="t1",
        items=[TaxonomySitemapItem(id="t1-k10", key="10", items=[]), PageSitemapItem(id="t1-p2", url="/contact.html")],
    )
    patcher, api = _patched_api(get_sitemap=root)
    env = {"PCA_ENDPOINT": "https://cd.example.com/cd/api"}
    with patch.dict(os.environ, env, clear=True), patcher:
        run.main(["--env", "/nonexistent/.env", "sitemap", "sites", "5"])

    output = json.loads(capsys.readouterr().out)
    assert output["items"][0]["key"] == "10"
    assert output["items"][0]["items"] == []
    assert output["items"][1]["url"] == "/contact.html"
