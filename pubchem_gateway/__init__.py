"""
Rate-limited async gateway to the PubChem PUG REST API.

Provides:
- PubChemGateway: Shared outbound client (rate limiting, error translation)
- RateLimiter: Rolling-window limiter used by the gateway
- fan_out: Concurrent per-item calls with a per-item failure channel
- XrefAggregator: Per-category cross-reference aggregation with pagination
- CompoundPropertyLookup: Batch property lookup over many CIDs
"""

from pubchem_gateway.client import PubChemGateway
from pubchem_gateway.context import RequestContext
from pubchem_gateway.exceptions import (
    ErrorKind,
    ExternalServiceError,
    GatewayError,
    GatewayTimeoutError,
    InternalError,
    InvalidInputError,
    MethodNotAllowedError,
    NotFoundError,
    ServiceUnavailableError,
    UpstreamError,
)
from pubchem_gateway.fanout import FanoutOutcome, fan_out, values_or_none
from pubchem_gateway.observer import GatewayObserver, LoggingObserver
from pubchem_gateway.properties import CompoundPropertyLookup
from pubchem_gateway.ratelimit import RateLimiter
from pubchem_gateway.schemas import (
    AggregatedXrefResult,
    CompoundPropertiesResult,
    XrefCategory,
    XrefGroup,
    XrefPagination,
)
from pubchem_gateway.settings import GatewaySettings, get_settings
from pubchem_gateway.xrefs import XrefAggregator

__all__ = [
    # Gateway
    "PubChemGateway",
    "RateLimiter",
    "RequestContext",
    "GatewaySettings",
    "get_settings",
    # Observers
    "GatewayObserver",
    "LoggingObserver",
    # Aggregation
    "XrefAggregator",
    "CompoundPropertyLookup",
    "fan_out",
    "values_or_none",
    "FanoutOutcome",
    # Schemas
    "XrefCategory",
    "XrefGroup",
    "XrefPagination",
    "AggregatedXrefResult",
    "CompoundPropertiesResult",
    # Errors
    "ErrorKind",
    "GatewayError",
    "UpstreamError",
    "InternalError",
    "InvalidInputError",
    "NotFoundError",
    "MethodNotAllowedError",
    "ServiceUnavailableError",
    "GatewayTimeoutError",
    "ExternalServiceError",
]
