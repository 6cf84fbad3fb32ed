"""
Claims — Model service options expressed as out-of-band claims.

The model data operations tell the server how to render a page or entity
(content type, data model, region inclusion, DCP selection). These options are
not GraphQL variables: each becomes a ClaimValue that the transport sends
alongside the request.

  ContentType    -> taf:modelservice:contenttype
  DataModelType  -> taf:modelservice:modeltype
  PageInclusion  -> taf:modelservice:pageincluderegions
  DcpType        -> taf:modelservice:entitydcptype

Claim values are the enum member name, typed STRING.
"""

from typing import Dict, Optional, Type

from .enums import ClaimValueType, ContentType, DataModelType, DcpType, PageInclusion
from .exceptions import ConfigurationError
from .models import ClaimValue


class ModelServiceClaimUris:
    CONTENT_TYPE = "taf:modelservice:contenttype"
    MODEL_TYPE = "taf:modelservice:modeltype"
    PAGE_INCLUDE_REGIONS = "taf:modelservice:pageincluderegions"
    ENTITY_DCP_TYPE = "taf:modelservice:entitydcptype"


CLAIM_URIS: Dict[Type, str] = {
    ContentType: ModelServiceClaimUris.CONTENT_TYPE,
    DataModelType: ModelServiceClaimUris.MODEL_TYPE,
    PageInclusion: ModelServiceClaimUris.PAGE_INCLUDE_REGIONS,
    DcpType: ModelServiceClaimUris.ENTITY_DCP_TYPE,
}


def create_claim(option) -> Optional[ClaimValue]:
    """Turn a model service option into its claim.

    Returns:
        The ClaimValue, or None when option is None (no claim is sent).

    Raises:
        ConfigurationError: If option is not one of the claim enums.
    """
    if option is None:
        return None
    uri = CLAIM_URIS.get(type(option))
    if uri is None:
        raise ConfigurationError(f"No claim is defined for {type(option).__name__}")
    return ClaimValue(uri=uri, value=option.name, type=ClaimValueType.STRING)
