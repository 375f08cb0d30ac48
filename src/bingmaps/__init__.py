"""Bing Maps REST API client.

This package provides a typed, thread-safe interface to the Bing Maps
Locations API with support for:
- Type-safe responses via Pydantic models
- Dependency injection for the HTTP transport (testability)
- A closed error taxonomy with the service's "overloaded, retry" hint

Example usage:
    >>> from bingmaps import Client, FindPoint, find_by_point, find_by_query
    >>> client = Client(api_key="your-key")
    >>> locations = find_by_point(client, FindPoint.from_latlng(47.64054, -122.12934))
    >>> locations = find_by_query(client, "1 Microsoft Way, Redmond WA")
"""

from __future__ import annotations

from .client import (
    CANDIDATE_ENV_KEYS,
    OVERLOAD_HEADER,
    Client,
    HTTPClient,
    HTTPResponse,
    RequestsHTTPClient,
    load_api_key,
)
from .common import CultureCode
from .encoding import encode_params, encode_value
from .errors import BingMapsError, ErrorKind, RequestError
from .locations import find_by_point, find_by_query
from .models import (
    Address,
    ClientConfig,
    Confidence,
    ContextParams,
    EntityType,
    FindPoint,
    GeocodePoint,
    Location,
    LocationSummary,
    MatchCode,
    Point,
)
from .parsers import locations_to_dataframe, summarize_location
from .response import ResourceSet, ResponseEnvelope, flatten_first

__all__ = [
    # Client
    "Client",
    "HTTPClient",
    "HTTPResponse",
    "RequestsHTTPClient",
    "load_api_key",
    # Locations API
    "find_by_point",
    "find_by_query",
    # Errors
    "BingMapsError",
    "ErrorKind",
    "RequestError",
    # Response envelope
    "ResponseEnvelope",
    "ResourceSet",
    "flatten_first",
    # Models
    "Address",
    "ClientConfig",
    "Confidence",
    "ContextParams",
    "CultureCode",
    "EntityType",
    "FindPoint",
    "GeocodePoint",
    "Location",
    "LocationSummary",
    "MatchCode",
    "Point",
    # Encoding
    "encode_params",
    "encode_value",
    # Tabular output
    "summarize_location",
    "locations_to_dataframe",
    # Constants
    "CANDIDATE_ENV_KEYS",
    "OVERLOAD_HEADER",
]
