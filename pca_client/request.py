"""
GraphQL Request — The immutable unit handed to a transport.

A GraphQLRequest is produced once by RequestBuilder.build() and executed once
by a GraphQLClient. Variables and claims travel separately: variables go into
the GraphQL payload, claims are sent out of band by the transport.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .models import ClaimValue


@dataclass(frozen=True)
class GraphQLRequest:
    """A fully assembled GraphQL request.

    Attributes:
        query_name: Name of the template the query was built from.
        query: The GraphQL document, fragments included.
        variables: Variable name -> serialized value. Absent values are omitted.
        operation_name: Operation to execute, or None to let the server pick.
        timeout: Request timeout in milliseconds; 0 leaves it to the transport.
        claims: Claims sent alongside the request, in the order they were added.
    """

    query_name: str
    query: str
    variables: Mapping[str, Any] = field(default_factory=dict)
    operation_name: Optional[str] = None
    timeout: int = 0
    claims: Tuple[ClaimValue, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))
        object.__setattr__(self, "claims", tuple(self.claims))

    def to_payload(self) -> Dict[str, Any]:
        """The JSON body for an HTTP GraphQL endpoint."""
        payload = {"query": self.query}
        if self.variables:
            payload["variables"] = dict(self.variables)
        if self.operation_name:
            payload["operationName"] = self.operation_name
        return payload

    def __str__(self) -> str:
        return f"GraphQLRequest({self.query_name}, variables={dict(self.variables)})"
