"""Locations API: point-to-address and address-to-point lookups."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .client import Client
from .models import ContextParams, FindPoint, Location
from .response import ResponseEnvelope, flatten_first

LOCATIONS_PATH = "/Locations"


def _add_context(params: Dict[str, Any], context: Optional[ContextParams]) -> None:
    if context is not None:
        params.update(context.to_params())


def find_by_point(
    client: Client,
    find: FindPoint,
    context: Optional[ContextParams] = None,
) -> List[Location]:
    """Gets the location information associated with latitude and longitude coordinates.

    Args:
        client: Shared Bing Maps client.
        find: Point and lookup options.
        context: Optional localization hints.

    Returns:
        Locations of the first result set; empty if the service found nothing.

    Raises:
        BingMapsError: Propagated unchanged from ``Client.get``.
    """
    path = f"{LOCATIONS_PATH}/{find.point}"

    params: Dict[str, Any] = {}
    if find.include_entity_types:
        params["includeEntityTypes"] = list(find.include_entity_types)
    if find.include_neighborhood:
        params["inclnb"] = "1"
    if find.include_ciso2:
        params["incl"] = "ciso2"
    _add_context(params, context)

    response = client.get(path, params, ResponseEnvelope[Location])
    return flatten_first(response)


def find_by_query(
    client: Client,
    query: str,
    context: Optional[ContextParams] = None,
) -> List[Location]:
    """Gets latitude and longitude coordinates that correspond to location information provided as a query string.

    Raises:
        BingMapsError: Propagated unchanged from ``Client.get``.
    """
    params: Dict[str, Any] = {"q": query}
    _add_context(params, context)

    response = client.get(LOCATIONS_PATH, params, ResponseEnvelope[Location])
    return flatten_first(response)


__all__ = ["LOCATIONS_PATH", "find_by_point", "find_by_query"]
