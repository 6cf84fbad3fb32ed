"""Tests for pca_client.graphql_client.DefaultGraphQLClient."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from pca_client.enums import ContentType
from pca_client.claims import create_claim
from pca_client.exceptions import GraphQLClientError, TransportError
from pca_client.graphql_client import CLAIMS_HEADER, DefaultGraphQLClient, GraphQLClient
from pca_client.request import GraphQLRequest


def _response(body, status_error=None):
    response = MagicMock()
    response.text = body if isinstance(body, str) else json.dumps(body)
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    return response


def _request(**kwargs):
    defaults = {"query_name": "Sitemap", "query": "query sitemap { sitemap { id } }"}
    defaults.update(kwargs)
    return GraphQLRequest(**defaults)


@pytest.fixture
def client():
    c = DefaultGraphQLClient("https://cd.example.com/cd/api/", default_timeout=30000)
    yield c
    c.close()


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------

def test_execute_posts_payload(client):
    body = {"data": {"sitemap": {"id": "t1"}}}
    with patch.object(client._session, "post", return_value=_response(body)) as mock_post:
        text = client.execute(_request(variables={"publicationId": 5}, operation_name="sitemap"))

    assert json.loads(text) == body
    args, kwargs = mock_post.call_args
    assert args[0] == "https://cd.example.com/cd/api"
    assert kwargs["json"] == {
        "query": "query sitemap { sitemap { id } }",
        "variables": {"publicationId": 5},
        "operationName": "sitemap",
    }
    assert CLAIMS_HEADER not in kwargs["headers"]
    assert kwargs["timeout"] == 30.0


def test_execute_sends_claims_header(client):
    claim = create_claim(ContentType.MODEL)
    with patch.object(client._session, "post", return_value=_response({"data": {}})) as mock_post:
        client.execute(_request(claims=(claim,)))

    headers = mock_post.call_args[1]["headers"]
    assert json.loads(headers[CLAIMS_HEADER]) == [
        {"uri": "taf:modelservice:contenttype", "value": "MODEL", "type": "STRING"}
    ]


def test_request_timeout_overrides_default(client):
    with patch.object(client._session, "post", return_value=_response({"data": {}})) as mock_post:
        client.execute(_request(timeout=1500))
    assert mock_post.call_args[1]["timeout"] == 1.5


def test_zero_timeout_disables_timeout():
    c = DefaultGraphQLClient("https://cd.example.com/cd/api", default_timeout=0)
    with patch.object(c._session, "post", return_value=_response({"data": {}})) as mock_post:
        c.execute(_request())
    assert mock_post.call_args[1]["timeout"] is None
    c.close()


def test_extra_headers_are_on_session():
    c = DefaultGraphQLClient("https://cd.example.com/cd/api", headers={"Authorization": "Bearer t"})
    assert c._session.headers["Authorization"] == "Bearer t"
    c.close()


def test_non_json_body_returned_as_is(client):
    with patch.object(client._session, "post", return_value=_response("<html>ok</html>")):
        assert client.execute(_request()) == "<html>ok</html>"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

def test_graphql_errors_raise(client):
    body = {"errors": [{"message": "Field 'x' undefined"}, {"message": "Bad variable"}]}
    with patch.object(client._session, "post", return_value=_response(body)):
        with pytest.raises(GraphQLClientError) as exc_info:
            client.execute(_request())
    assert "Field 'x' undefined; Bad variable" in str(exc_info.value)


def test_http_error_status_raises(client):
    response = _response("Server error", status_error=requests.HTTPError("500 Server Error"))
    with patch.object(client._session, "post", return_value=response):
        with pytest.raises(GraphQLClientError) as exc_info:
            client.execute(_request())
    assert isinstance(exc_info.value.__cause__, requests.HTTPError)


def test_connection_error_raises_transport_error(client):
    with patch.object(client._session, "post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(TransportError):
            client.execute(_request())


def test_transport_interface_is_abstract():
    with pytest.raises(TypeError):
        GraphQLClient()

    class EchoClient(GraphQLClient):
        def execute(self, request):
            return request.query

    assert EchoClient().execute(_request()) == "query sitemap { sitemap { id } }"
