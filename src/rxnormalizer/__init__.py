"""RxCUI lookups against the NLM RxNav rxcui.json endpoint.

Example usage::

    from rxnormalizer import RxNormClient

    async with RxNormClient(normalize=True) as client:
        result = await client.lookup("vit-c")
    result.rxcuis  # (1088438, 1151)
"""

from rxnormalizer.client import (
    RXNAV_DEFAULT_URL,
    RxNormClient,
    find_rxcui,
    get_rxnorm_client,
)
from rxnormalizer.errors import (
    RxNormClientError,
    RxNormError,
    RxNormParseError,
    RxNormRemoteError,
    RxNormServerError,
    RxNormTransportError,
)
from rxnormalizer.models import LookupRequest, LookupResult, SearchMode

__all__ = [
    "RXNAV_DEFAULT_URL",
    "RxNormClient",
    "find_rxcui",
    "get_rxnorm_client",
    "LookupRequest",
    "LookupResult",
    "SearchMode",
    "RxNormError",
    "RxNormTransportError",
    "RxNormRemoteError",
    "RxNormClientError",
    "RxNormServerError",
    "RxNormParseError",
]
