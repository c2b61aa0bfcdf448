"""
OpenCage Geocoder Client Library

This module provides a Python async client library for the OpenCage geocoding
API (api.opencagedata.com) with type-safe responses and automatic pacing
based on the rate limits reported by the server.

Example usage:
    from opencage_geocoder import GeocodeBounds, GeocodeError, GeocodeOptions, OpenCageClient

    client = OpenCageClient("your_api_key")

    # Simple query
    result = await client.geocode("Fonteinstraat, Leuven")

    # With options
    try:
        result = await client.geocode(
            "Fonteinstraat, Leuven",
            GeocodeOptions(
                countryCode="BE",
                bounds=GeocodeBounds(north=51, south=50, east=5, west=4),
            ),
        )
    except GeocodeError as e:
        print(f"Geocoding failed with code {e.code}: {e.message}")
"""

from .client import OpenCageClient
from .config import ClientConfig, getClientConfig, loadConfig
from .exceptions import ConfigError, DecodeError, GeocodeError, OpenCageError, TransportError
from .models import (
    GeocodeBounds,
    GeocodeOptions,
    GeocodeResult,
    GeocodeResultItem,
    Geometry,
    Rate,
    ResultBounds,
    Status,
)
from .pacing import Clock, RequestPacer, SystemClock

__all__ = [
    "OpenCageClient",
    "GeocodeOptions",
    "GeocodeBounds",
    "GeocodeResult",
    "GeocodeResultItem",
    "Geometry",
    "ResultBounds",
    "Status",
    "Rate",
    "OpenCageError",
    "TransportError",
    "DecodeError",
    "GeocodeError",
    "ConfigError",
    "Clock",
    "SystemClock",
    "RequestPacer",
    "ClientConfig",
    "loadConfig",
    "getClientConfig",
]
