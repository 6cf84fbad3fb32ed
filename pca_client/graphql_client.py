"""
GraphQL Client — Executes GraphQLRequests against the content service over HTTP.

PublicContentApi depends only on the GraphQLClient interface, an abstract base
with a single execute(request) -> str method. Anything with that method can
stand in for the transport (tests use a MagicMock). DefaultGraphQLClient is the
HTTP implementation.

Wire format:
    POST <endpoint>
    Content-Type: application/json
    x-pca-claims: [{"uri": "...", "value": "...", "type": "STRING"}, ...]

    {"query": "...", "variables": {...}, "operationName": "..."}

Claims never enter the GraphQL variables; they ride in the x-pca-claims
header, JSON encoded, and the header is omitted when a request has no claims.

Failures:
  - Connection errors, timeouts and HTTP error statuses raise
    GraphQLClientError chained from the requests exception.
  - A JSON body containing a GraphQL "errors" array raises GraphQLClientError
    with the concatenated error messages.
  - A body that is not JSON is returned as-is; rejecting it is the decoder's
    job.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests

from .exceptions import GraphQLClientError
from .request import GraphQLRequest

logger = logging.getLogger(__name__)

CLAIMS_HEADER = "x-pca-claims"


class GraphQLClient(ABC):
    """Transport interface used by PublicContentApi."""

    @abstractmethod
    def execute(self, request: GraphQLRequest) -> str:
        """Execute request and return the raw response text.

        Raises:
            TransportError: If the request could not be executed.
        """
        pass


class DefaultGraphQLClient(GraphQLClient):
    """HTTP transport for the content service GraphQL endpoint.

    Manages a requests.Session so connections are pooled across calls.

    Attributes:
        endpoint: Full URL of the GraphQL endpoint (trailing slash stripped).
        default_timeout: Timeout in milliseconds used when a request carries none.
        debug: If True, log request/response details at DEBUG level.
    """

    def __init__(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        default_timeout: int = 30000,
        debug: bool = False,
    ):
        """Initialize the client.

        Args:
            endpoint: GraphQL endpoint URL (e.g., "https://cd.example.com/cd/api").
            headers: Extra headers sent with every request.
            default_timeout: Milliseconds; 0 disables the timeout.
            debug: Enable verbose logging.
        """
        self.endpoint = endpoint.rstrip("/")
        self.default_timeout = default_timeout
        self.debug = debug
        self._session = requests.Session()
        if headers:
            self._session.headers.update(headers)

    def execute(self, request: GraphQLRequest) -> str:
        """POST the request and return the response body.

        Raises:
            GraphQLClientError: On HTTP failure or a GraphQL errors array.
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if request.claims:
            headers[CLAIMS_HEADER] = json.dumps([claim.to_variable() for claim in request.claims])

        timeout_ms = request.timeout or self.default_timeout
        timeout = timeout_ms / 1000.0 if timeout_ms else None

        if self.debug:
            logger.debug("Executing %s against %s (%d chars, timeout=%s)",
                         request.query_name, self.endpoint, len(request.query), timeout)

        try:
            response = self._session.post(
                self.endpoint, json=request.to_payload(), headers=headers, timeout=timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise GraphQLClientError(f"Unable to execute {request.query_name}: {e}") from e

        text = response.text

        try:
            result = json.loads(text)
        except ValueError:
            return text

        if isinstance(result, dict) and result.get("errors"):
            error_messages = [
                e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in result["errors"]
            ]
            raise GraphQLClientError(f"GraphQL errors: {'; '.join(error_messages)}")

        if self.debug:
            logger.debug("Received %d chars for %s", len(text), request.query_name)

        return text

    def close(self):
        self._session.close()
