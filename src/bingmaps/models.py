from __future__ import annotations
import ssl
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple, Union
from pydantic import BaseModel, Field, field_validator

from .common import CultureCode
from .config.settings import DEFAULT_BASE_URL

if TYPE_CHECKING:
    from .config.settings import Settings


class EntityType(str, Enum):
    """Kind of place a location represents.

    Values are the names used on the wire, both in responses and in the
    ``includeEntityTypes`` request parameter.
    """

    ADDRESS = "Address"
    NEIGHBORHOOD = "Neighborhood"
    POPULATED_PLACE = "PopulatedPlace"
    POSTCODE1 = "Postcode1"
    ADMIN_DIVISION1 = "AdminDivision1"
    ADMIN_DIVISION2 = "AdminDivision2"
    COUNTRY_REGION = "CountryRegion"
    # Returned by the service although undocumented
    POSTCODE2 = "Postcode2"
    ROAD_BLOCK = "RoadBlock"
    HIGHER_EDUCATION_FACILITY = "HigherEducationFacility"
    PARK = "Park"
    LAKE = "Lake"
    RIVER = "River"

    def __str__(self) -> str:
        return self.value


class Confidence(str, Enum):
    """How sure the geocoder is that the match is correct."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    def __str__(self) -> str:
        return self.value


class MatchCode(str, Enum):
    """Geocoding level of each match."""

    GOOD = "Good"
    AMBIGUOUS = "Ambiguous"
    UP_HIERARCHY = "UpHierarchy"

    def __str__(self) -> str:
        return self.value


class Point(BaseModel):
    """GeoJSON-like point; ``coordinates`` is [latitude, longitude]."""

    type: str = "Point"
    coordinates: List[float] = Field(min_length=2)

    model_config = {"frozen": True}

    @property
    def latitude(self) -> float:
        return self.coordinates[0]

    @property
    def longitude(self) -> float:
        return self.coordinates[1]


class GeocodePoint(Point):
    """A point with the method used to compute it and its intended usages."""

    calculation_method: Optional[str] = Field(None, alias="calculationMethod")
    usage_types: List[str] = Field(default_factory=list, alias="usageTypes")

    model_config = {"populate_by_name": True, "frozen": True}


class Address(BaseModel):
    """Structured address of a location.

    Every component is optional; the service only returns the components
    that apply to the matched entity.

    Attributes:
        address_line: Street line (e.g., '1 Microsoft Way').
        neighborhood: Neighborhood name, when requested with ``inclnb``.
        locality: City or town.
        postal_code: Postal code.
        admin_district1: First-level subdivision (e.g., state).
        admin_district2: Second-level subdivision (e.g., county).
        country: Country or region name.
        country_iso: ISO 3166 alpha-2 code, when requested with ``incl=ciso2``.
        landmark: Landmark name.
        formatted: Complete single-line address.
    """

    address_line: Optional[str] = Field(None, alias="addressLine")
    neighborhood: Optional[str] = None
    locality: Optional[str] = None
    postal_code: Optional[str] = Field(None, alias="postalCode")
    admin_district1: Optional[str] = Field(None, alias="adminDistrict")
    admin_district2: Optional[str] = Field(None, alias="adminDistrict2")
    country: Optional[str] = Field(None, alias="countryRegion")
    country_iso: Optional[str] = Field(None, alias="countryRegionIso2")
    landmark: Optional[str] = None
    formatted: Optional[str] = Field(None, alias="formattedAddress")

    model_config = {"populate_by_name": True, "frozen": True}


class Location(BaseModel):
    """Location resource returned by the Locations API.

    Attributes:
        name: Display name of the location.
        point: Representative coordinates.
        bbox: Area containing the location as
            (south latitude, west longitude, north latitude, east longitude).
        entity_type: Kind of place.
        address: Structured address.
        confidence: Match confidence.
        match_codes: Geocoding levels of the match.
        geocode_points: Additional points with calculation metadata.
    """

    name: str
    point: Point
    bbox: Tuple[float, float, float, float]
    entity_type: EntityType = Field(alias="entityType")
    address: Address
    confidence: Confidence
    match_codes: List[MatchCode] = Field(default_factory=list, alias="matchCodes")
    geocode_points: List[GeocodePoint] = Field(default_factory=list, alias="geocodePoints")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def south(self) -> float:
        return self.bbox[0]

    @property
    def west(self) -> float:
        return self.bbox[1]

    @property
    def north(self) -> float:
        return self.bbox[2]

    @property
    def east(self) -> float:
        return self.bbox[3]


class FindPoint(BaseModel):
    """Request options for looking up the address at a point.

    Attributes:
        point: "latitude,longitude" embedded in the request path.
        include_entity_types: Restrict results to these entity types.
        include_neighborhood: Ask for the neighborhood in the address.
        include_ciso2: Ask for the ISO 3166 country code in the address.
    """

    point: str
    include_entity_types: List[EntityType] = Field(default_factory=list)
    include_neighborhood: bool = False
    include_ciso2: bool = False

    @classmethod
    def from_latlng(cls, lat: float, lng: float, **options) -> "FindPoint":
        """Build from numeric coordinates, formatted to 5 decimal places."""
        return cls(point=f"{lat:.5f},{lng:.5f}", **options)

    @classmethod
    def from_str(cls, latlng: str, **options) -> "FindPoint":
        """Build from a pre-formatted "latitude,longitude" string, used verbatim."""
        return cls(point=latlng, **options)


class ContextParams(BaseModel):
    """Optional hints that bias or localize results.

    Attributes:
        culture: Culture for labels and address formats (``c``).
        user_map_view: Visible map area as [south, west, north, east] (``umv``).
        user_location: User position as [latitude, longitude] or
            [latitude, longitude, confidence radius] (``ul``).
        user_ip: User IPv4 address (``uip``).
        user_region: ISO 3166 region code of the user (``ur``).
    """

    culture: Optional[CultureCode] = None
    user_map_view: Optional[List[float]] = None
    user_location: Optional[List[float]] = None
    user_ip: Optional[str] = None
    user_region: Optional[str] = None

    def to_params(self) -> dict:
        """Map each field to its query parameter name; unset fields map to None."""
        return {
            "c": self.culture,
            "umv": self.user_map_view,
            "ul": self.user_location,
            "uip": self.user_ip,
            "ur": self.user_region,
        }


class LocationSummary(BaseModel):
    """Flattened location for DataFrame output."""

    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    bbox_south: Optional[float] = None
    bbox_west: Optional[float] = None
    bbox_north: Optional[float] = None
    bbox_east: Optional[float] = None
    entity_type: Optional[str] = None
    confidence: Optional[str] = None
    match_codes: Optional[str] = None
    formatted_address: Optional[str] = None
    address_line: Optional[str] = None
    locality: Optional[str] = None
    postal_code: Optional[str] = None
    admin_district1: Optional[str] = None
    admin_district2: Optional[str] = None
    country: Optional[str] = None
    country_iso: Optional[str] = None


class ClientConfig(BaseModel):
    """Configuration settings for the Bing Maps client.

    Attributes:
        base_url: REST base URL; resource paths are appended to it.
        timeout: Transport timeout in seconds. None waits indefinitely.
        verify: TLS verification: True, False, or a CA bundle path.
        cert: Client certificate path, if the network requires one.
        ssl_context: TLS context used instead of the one urllib3 builds,
            e.g. to pin protocol versions or ciphers.
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None
    verify: Union[bool, str] = True
    cert: Optional[str] = None
    ssl_context: Optional[ssl.SSLContext] = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ClientConfig":
        """Build a client configuration from loaded application settings."""
        verify: Union[bool, str] = settings.http.bing_maps_verify_tls
        if verify and settings.http.bing_maps_ca_bundle:
            verify = settings.http.bing_maps_ca_bundle
        return cls(
            base_url=settings.api.bing_maps_url,
            timeout=settings.http.bing_maps_timeout,
            verify=verify,
        )


__all__ = [
    "EntityType",
    "Confidence",
    "MatchCode",
    "Point",
    "GeocodePoint",
    "Address",
    "Location",
    "FindPoint",
    "ContextParams",
    "LocationSummary",
    "ClientConfig",
]
