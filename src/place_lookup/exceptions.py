"""
Exceptions raised while serving lookups and photos.

Every error carries the HTTP status the routes answer with. Non-fatal
problems (enrichment unavailable, ambiguous matches) are not exceptions;
they travel as strings in ``LookupResult.warnings``.
"""

from typing import Any


class PlaceLookupError(Exception):
    """Base exception for all lookup service errors."""

    status_code = 500

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail if detail is not None else message


class LookupValidationError(PlaceLookupError):
    """Raised when a request body or query parameter is malformed."""

    status_code = 400


class RateLimitError(PlaceLookupError):
    """Raised when a client exceeds its request allowance."""

    status_code = 429


class ConfigurationError(PlaceLookupError):
    """Raised when the upstream credential is not configured."""

    status_code = 500


class UpstreamTransportError(PlaceLookupError):
    """Raised when the forward-geocoding call itself fails."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class UpstreamResolutionError(PlaceLookupError):
    """Raised when a place or photo cannot be resolved after the initial call."""

    status_code = 502


class PlaceDetailsError(UpstreamResolutionError):
    """Raised when the place-details call answers with a non-success status."""

    def __init__(
        self, message: str, upstream_status: int | None = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body
