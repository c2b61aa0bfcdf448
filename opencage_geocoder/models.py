"""
OpenCage Geocoder Data Models

Request options are frozen dataclasses, response shapes are TypedDicts
matching the JSON returned by the OpenCage geocoding API.
"""

import sys
from dataclasses import dataclass
from typing import Any, Dict, List, NotRequired, Optional

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


@dataclass(frozen=True)
class GeocodeBounds:
    """Rectangular area (in degrees) to restrict results to, dood!"""

    north: float
    south: float
    east: float
    west: float


@dataclass(frozen=True)
class GeocodeOptions:
    """
    Optional parameters for a geocode request.

    None means "not set" and the parameter is not sent at all. Boolean flags
    are only sent when True.

    Attributes:
        countryCode: Country hint (ISO 3166-1 alpha-2, sent lower-cased)
        limit: Maximum number of results
        minConfidence: Minimum confidence 1..10, 0 means unset. Values out of
            range are replaced with 5 rather than rejected.
        noAnnotations: Do not return annotations
        noDedupe: Do not deduplicate results
        noRecord: Ask the server not to log the query
        language: Preferred language of the results (IETF tag, e.g. "de")
        bounds: Restrict results to this bounding box
        addRequest: Echo the request back in the response
        abbreviate: Abbreviate street names in formatted addresses
        pretty: Pretty-print the JSON response
    """

    countryCode: Optional[str] = None
    limit: Optional[int] = None
    minConfidence: Optional[int] = None
    noAnnotations: bool = False
    noDedupe: bool = False
    noRecord: bool = False
    language: Optional[str] = None
    bounds: Optional[GeocodeBounds] = None
    addRequest: bool = False
    abbreviate: bool = False
    pretty: bool = False


class Status(TypedDict):
    """Application level status embedded in the response body."""

    code: int  # 200 on success
    message: str  # Human readable message, e.g. "OK"


class Rate(TypedDict):
    """Rate limit metadata (free and trial plans only)."""

    limit: int  # Requests allowed per window
    remaining: int  # Requests left in the current window
    reset: int  # Unix timestamp when the window resets


class Geometry(TypedDict):
    """Latitude/longitude pair, dood!"""

    lat: float
    lng: float


class ResultBounds(TypedDict):
    """Bounding box of a single result."""

    northeast: Geometry
    southwest: Geometry


class GeocodeResultItem(TypedDict):
    """Single entry of the results list."""

    confidence: int  # 0 (unknown) to 10 (most precise)
    formatted: str  # Formatted address
    geometry: Geometry  # Point location
    bounds: NotRequired[ResultBounds]  # Missing for some results
    components: NotRequired[Dict[str, Any]]  # Raw address components


class GeocodeResult(TypedDict):
    """Full decoded geocode response."""

    status: Status
    rate: NotRequired[Rate]  # Not sent for paid accounts
    results: List[GeocodeResultItem]
    totalResults: NotRequired[int]
