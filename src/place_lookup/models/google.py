"""
Schemas for Google Maps Platform payloads.

Upstream JSON is decoded defensively: a value of the wrong type is treated
as absent instead of failing the whole payload.
"""

from typing import Any

from pydantic import Field, field_validator

from .base import BaseLookupModel
from .lookup import GeocodeCandidate


def _number_or_none(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return float(value)


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _dict_or_none(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


class LatLng(BaseLookupModel):
    """Latitude/longitude pair from a geocoding result."""

    lat: float | None = None
    lng: float | None = None

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def numeric_only(cls, v: Any) -> float | None:
        return _number_or_none(v)


class Geometry(BaseLookupModel):
    location: LatLng | None = None

    @field_validator("location", mode="before")
    @classmethod
    def object_only(cls, v: Any) -> dict[str, Any] | None:
        return _dict_or_none(v)


class GeocodeApiResult(BaseLookupModel):
    """One entry of the Geocoding API ``results`` array."""

    formatted_address: str | None = None
    place_id: str | None = None
    geometry: Geometry | None = None
    address_components: list[dict[str, Any]] | None = None

    @field_validator("formatted_address", "place_id", mode="before")
    @classmethod
    def string_only(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("geometry", mode="before")
    @classmethod
    def geometry_object_only(cls, v: Any) -> dict[str, Any] | None:
        return _dict_or_none(v)

    @field_validator("address_components", mode="before")
    @classmethod
    def components_list_only(cls, v: Any) -> list[dict[str, Any]] | None:
        if not isinstance(v, list):
            return None
        return [item for item in v if isinstance(item, dict)]

    def to_candidate(self) -> GeocodeCandidate:
        location = self.geometry.location if self.geometry else None
        return GeocodeCandidate(
            formatted_address=self.formatted_address or "",
            place_id=self.place_id or None,
            lat=location.lat if location else None,
            lng=location.lng if location else None,
            address_components=self.address_components,
        )


class GeocodeApiResponse(BaseLookupModel):
    """Top-level Geocoding API response."""

    status: str | None = None
    error_message: str | None = None
    results: list[GeocodeApiResult] = Field(default_factory=list)

    @field_validator("status", "error_message", mode="before")
    @classmethod
    def string_only(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("results", mode="before")
    @classmethod
    def results_list_only(cls, v: Any) -> list[dict[str, Any]]:
        if not isinstance(v, list):
            return []
        return [item if isinstance(item, dict) else {} for item in v]

    @classmethod
    def from_payload(cls, payload: Any) -> "GeocodeApiResponse":
        return cls.model_validate(payload if isinstance(payload, dict) else {})


class PhotoMedia(BaseLookupModel):
    """Places API (New) photo media response when redirects are skipped."""

    name: str | None = None
    photo_uri: str | None = Field(default=None, alias="photoUri")

    @field_validator("name", "photo_uri", mode="before")
    @classmethod
    def string_only(cls, v: Any) -> str | None:
        return _str_or_none(v) or None

    @classmethod
    def from_payload(cls, payload: Any) -> "PhotoMedia":
        return cls.model_validate(payload if isinstance(payload, dict) else {})
