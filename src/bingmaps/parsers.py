"""Transformations from decoded locations into tabular output."""

from __future__ import annotations

from typing import Iterable, List

import pandas as pd

from .models import Location, LocationSummary

SUMMARY_COLUMNS: List[str] = list(LocationSummary.model_fields)


def summarize_location(location: Location) -> LocationSummary:
    """Flatten one location into a single summary row."""
    address = location.address
    return LocationSummary(
        name=location.name,
        latitude=location.point.latitude,
        longitude=location.point.longitude,
        bbox_south=location.south,
        bbox_west=location.west,
        bbox_north=location.north,
        bbox_east=location.east,
        entity_type=location.entity_type.value,
        confidence=location.confidence.value,
        match_codes=",".join(code.value for code in location.match_codes) or None,
        formatted_address=address.formatted,
        address_line=address.address_line,
        locality=address.locality,
        postal_code=address.postal_code,
        admin_district1=address.admin_district1,
        admin_district2=address.admin_district2,
        country=address.country,
        country_iso=address.country_iso,
    )


def locations_to_dataframe(locations: Iterable[Location]) -> pd.DataFrame:
    """Build a DataFrame with one row per location, in input order."""
    rows = [summarize_location(location).model_dump() for location in locations]
    if not rows:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


__all__ = ["SUMMARY_COLUMNS", "summarize_location", "locations_to_dataframe"]
