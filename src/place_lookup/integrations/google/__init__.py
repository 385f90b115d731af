"""
Google Maps Platform integration for Place Lookup.

Thin async clients for the Geocoding API and the Places API (New).
"""

from .geocoding_client import GeocodingClient
from .places_client import PLACE_FIELD_MASK, PLACE_FIELD_MASK_VERSION, PlacesClient

__all__ = [
    "GeocodingClient",
    "PlacesClient",
    "PLACE_FIELD_MASK",
    "PLACE_FIELD_MASK_VERSION",
]
