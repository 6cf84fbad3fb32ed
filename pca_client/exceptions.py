"""
Exceptions — Error kinds raised by the Public Content API client.

Every error derives from PcaClientError so callers can catch the whole family
with one clause. The facade (PublicContentApi) never lets the specific kinds
escape: it re-raises them as PublicContentApiError with the original exception
chained as __cause__.

Hierarchy:
    PcaClientError
      ParseError                 Malformed compact identifier text
        UnknownNamespaceError    Namespace token not registered
        UnknownItemTypeError     Item type code not registered
      ConfigurationError         Request builder misuse
      TransportError             Failure reported by the transport
        GraphQLClientError       Raised by DefaultGraphQLClient
      MappingError               JSON does not match the target shape
        UnknownVariantError      Discriminator value not recognized
      PublicContentApiError      The single error kind the facade raises
"""


class PcaClientError(Exception):
    """Base class for all client errors."""


class ParseError(PcaClientError, ValueError):
    """Raised when a compact identifier does not match the CM URI grammar."""


class UnknownNamespaceError(ParseError):
    """Raised when a namespace token does not resolve to a ContentNamespace."""


class UnknownItemTypeError(ParseError):
    """Raised when an item type code does not resolve to an ItemType."""


class ConfigurationError(PcaClientError):
    """Raised when a request cannot be built from the builder configuration."""


class TransportError(PcaClientError):
    """Raised when the transport fails to execute a request."""


class GraphQLClientError(TransportError):
    """Raised by the default HTTP transport (HTTP or GraphQL level failure)."""


class MappingError(PcaClientError):
    """Raised when a JSON node cannot be mapped to the requested type."""


class UnknownVariantError(MappingError):
    """Raised when a discriminator value has no registered decoder.

    Attributes:
        discriminator: The unrecognized value found in the JSON node.
    """

    def __init__(self, message: str, discriminator=None):
        super().__init__(message)
        self.discriminator = discriminator


class PublicContentApiError(PcaClientError):
    """The error raised by every PublicContentApi operation.

    The underlying failure is always available as __cause__.
    """
