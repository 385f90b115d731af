"""
Shared data models for Place Lookup.

Request and response shapes of the HTTP API plus defensive schemas for
upstream Google Maps Platform payloads.
"""

from .google import GeocodeApiResponse, GeocodeApiResult, PhotoMedia
from .lookup import GeocodeCandidate, GeocodeSummary, LookupRequest, LookupResult
from .photo import PHOTO_NAME_PREFIX, PhotoContent, PhotoRequest

__all__ = [
    # Request models
    "LookupRequest",
    "PhotoRequest",
    # Response models
    "GeocodeCandidate",
    "GeocodeSummary",
    "LookupResult",
    "PhotoContent",
    # Upstream payloads
    "GeocodeApiResponse",
    "GeocodeApiResult",
    "PhotoMedia",
    "PHOTO_NAME_PREFIX",
]
