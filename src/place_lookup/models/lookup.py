from typing import Annotated, Any

from pydantic import ConfigDict, Field, field_validator

from .base import BaseLookupModel


class LookupRequest(BaseLookupModel):
    """Body of ``POST /api/lookup``."""

    address: str = Field(strict=True, description="Free-text address to geocode")
    selected_index: Annotated[int, Field(strict=True, ge=0)] | None = Field(
        default=None,
        alias="selectedIndex",
        description="Zero-based candidate override",
    )

    @field_validator("address")
    @classmethod
    def address_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Address is required")
        return v

    @field_validator("selected_index", mode="before")
    @classmethod
    def whole_number_only(cls, v: Any) -> Any:
        # JSON 1.0 is the integer 1
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v


class GeocodeCandidate(BaseLookupModel):
    """One ranked forward-geocoding match."""

    model_config = ConfigDict(frozen=True)

    formatted_address: str = Field(default="", description="Formatted address")
    place_id: str | None = Field(default=None, description="Upstream place id")
    lat: float | None = Field(default=None, description="Latitude")
    lng: float | None = Field(default=None, description="Longitude")
    address_components: list[dict[str, Any]] | None = Field(
        default=None, description="Structured address components"
    )


class GeocodeSummary(BaseLookupModel):
    query: str
    candidates: list[GeocodeCandidate] = Field(default_factory=list)
    selected_index: int = Field(default=0, alias="selectedIndex")


class LookupResult(BaseLookupModel):
    """Full answer to a lookup request."""

    geocode: GeocodeSummary
    place: dict[str, Any] | None = None
    warnings: list[str] = Field(default_factory=list)
    latency_ms: int = Field(default=0, alias="latencyMs")
