"""Tests for pca_client.settings."""

import os
from unittest.mock import patch

import pytest

from pca_client.enums import ContentNamespace
from pca_client.exceptions import ConfigurationError
from pca_client.settings import DEFAULT_SETTINGS, Settings, load_settings


_BASE_ENV = {
    "PCA_ENDPOINT": "https://cd.example.com/cd/api",
    "PCA_REQUEST_TIMEOUT": "5000",
    "PCA_DEBUG": "false",
    "PCA_DEFAULT_NAMESPACE": "tcm",
}


def _load(env_overrides=None):
    env = dict(_BASE_ENV)
    if env_overrides:
        env.update(env_overrides)
    with patch.dict(os.environ, env, clear=True):
        return load_settings(env_file="/nonexistent/.env")


def test_load_from_environment():
    settings = _load()
    assert settings.endpoint == "https://cd.example.com/cd/api"
    assert settings.request_timeout == 5000
    assert settings.debug is False
    assert settings.namespace is ContentNamespace.SITES
    assert settings.validate() == []


def test_load_defaults():
    with patch.dict(os.environ, {}, clear=True):
        settings = load_settings(env_file=None)
    assert settings.endpoint == ""
    assert settings.request_timeout == DEFAULT_SETTINGS["PCA_REQUEST_TIMEOUT"]
    assert settings.default_namespace == "tcm"


def test_load_debug_flag():
    assert _load({"PCA_DEBUG": "True"}).debug is True


def test_load_from_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PCA_ENDPOINT=https://file.example.com/api\nPCA_DEFAULT_NAMESPACE=ish\n")
    with patch.dict(os.environ, {}, clear=True):
        settings = load_settings(env_file=str(env_file))
    assert settings.endpoint == "https://file.example.com/api"
    assert settings.namespace is ContentNamespace.DOCS


def test_load_invalid_timeout():
    with pytest.raises(ConfigurationError):
        _load({"PCA_REQUEST_TIMEOUT": "soon"})


def test_validate_missing_endpoint():
    errors = _load({"PCA_ENDPOINT": ""}).validate()
    assert any("PCA_ENDPOINT" in e for e in errors)


def test_validate_non_http_endpoint():
    errors = Settings(endpoint="ftp://cd.example.com").validate()
    assert len(errors) == 1


def test_validate_negative_timeout():
    errors = Settings(endpoint="https://cd.example.com", request_timeout=-1).validate()
    assert errors == ["PCA_REQUEST_TIMEOUT must be >= 0"]


def test_validate_unknown_namespace():
    errors = Settings(endpoint="https://cd.example.com", default_namespace="xyz").validate()
    assert any("PCA_DEFAULT_NAMESPACE" in e for e in errors)
