"""
Address lookup orchestration.

One address string becomes a ranked list of geocode candidates plus, for the
selected candidate, an enriched place record. Geocoding failures are fatal;
place-details failures are downgraded to warnings so the caller always gets
a usable geocode result.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from place_lookup.exceptions import (
    ConfigurationError,
    LookupValidationError,
    RateLimitError,
    UpstreamResolutionError,
)
from place_lookup.integrations.google import GeocodingClient, PlacesClient
from place_lookup.models.lookup import (
    GeocodeCandidate,
    GeocodeSummary,
    LookupRequest,
    LookupResult,
)
from place_lookup.utils.rate_limiter import RATE_LIMIT_MESSAGE, RateLimiter

logger = logging.getLogger(__name__)

NO_MATCH_WARNING = "No match found."
MULTIPLE_MATCHES_WARNING = "Multiple matches found; showing best match."
NO_PLACE_ID_WARNING = "No place_id from geocoding; place details not available."
PLACES_SOURCE_WARNING = (
    "Places details returned from Places API (New); "
    "attribute availability varies by place."
)
NOT_CONFIGURED_MESSAGE = "Server is not configured with GOOGLE_MAPS_API_KEY"


@dataclass
class GeocodeResolution:
    candidates: list[GeocodeCandidate] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class PlaceEnrichment:
    place: dict[str, Any] | None = None
    warning: str | None = None


def select_index(requested: int | None, candidate_count: int) -> int:
    """Clamp a caller-supplied index; anything out of range falls back to 0."""
    if requested is not None and 0 <= requested < candidate_count:
        return requested
    return 0


def _flatten_errors(error: ValidationError) -> dict[str, Any]:
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}
    for err in error.errors():
        message = err["msg"]
        if err["type"] == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        if err["loc"]:
            field_errors.setdefault(str(err["loc"][0]), []).append(message)
        else:
            form_errors.append(message)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def parse_lookup_request(body: bytes) -> LookupRequest:
    """Decode and validate a raw lookup request body."""
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise LookupValidationError("Invalid JSON body") from e

    try:
        return LookupRequest.model_validate(payload)
    except ValidationError as e:
        raise LookupValidationError(
            "Invalid request body", detail=_flatten_errors(e)
        ) from e


class LookupService:
    """Gate, geocode, select and enrich a single address lookup."""

    def __init__(
        self,
        geocoding_client: GeocodingClient,
        places_client: PlacesClient,
        rate_limiter: RateLimiter,
    ) -> None:
        self.geocoding_client = geocoding_client
        self.places_client = places_client
        self.rate_limiter = rate_limiter

    async def handle(self, client_id: str, body: bytes) -> LookupResult:
        """Serve one inbound lookup request.

        Checks run in order: throttling, configuration, body validation.
        No upstream call is made unless all three pass.
        """
        if not self.rate_limiter.admit(client_id):
            raise RateLimitError(RATE_LIMIT_MESSAGE)
        if not self.geocoding_client.is_configured:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)

        request = parse_lookup_request(body)
        return await self.lookup(request.address, request.selected_index)

    async def resolve(self, address: str) -> GeocodeResolution:
        """Geocode ``address`` into ranked candidates and resolver warnings."""
        candidates = await self.geocoding_client.geocode(address)
        if not candidates:
            return GeocodeResolution(candidates=[], warnings=[NO_MATCH_WARNING])

        warnings = []
        if len(candidates) > 1:
            warnings.append(MULTIPLE_MATCHES_WARNING)
        return GeocodeResolution(candidates=candidates, warnings=warnings)

    async def enrich(self, candidate: GeocodeCandidate) -> PlaceEnrichment:
        """Fetch the place record for ``candidate``.

        Raises:
            UpstreamResolutionError: if the place-details call fails.
        """
        if not candidate.place_id:
            return PlaceEnrichment(place=None, warning=NO_PLACE_ID_WARNING)

        place = await self.places_client.get_place_details(candidate.place_id)
        return PlaceEnrichment(place=place, warning=PLACES_SOURCE_WARNING)

    async def lookup(
        self, address: str, selected_index: int | None = None
    ) -> LookupResult:
        started = time.perf_counter()

        resolution = await self.resolve(address)
        warnings = list(resolution.warnings)
        candidates = resolution.candidates

        if not candidates:
            logger.info(f"No geocode match for {address!r}")
            return LookupResult(
                geocode=GeocodeSummary(query=address, candidates=[], selected_index=0),
                place=None,
                warnings=warnings,
                latency_ms=self._elapsed_ms(started),
            )

        index = select_index(selected_index, len(candidates))

        place = None
        try:
            enrichment = await self.enrich(candidates[index])
        except UpstreamResolutionError as e:
            logger.warning(f"Place enrichment failed: {e.message}")
            warnings.append(e.message)
        else:
            place = enrichment.place
            if enrichment.warning:
                warnings.append(enrichment.warning)

        latency_ms = self._elapsed_ms(started)
        logger.info(
            f"Lookup resolved {len(candidates)} candidate(s), "
            f"selected {index}, place={'yes' if place else 'no'} in {latency_ms}ms"
        )
        return LookupResult(
            geocode=GeocodeSummary(
                query=address, candidates=candidates, selected_index=index
            ),
            place=place,
            warnings=warnings,
            latency_ms=latency_ms,
        )

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int(round((time.perf_counter() - started) * 1000))
