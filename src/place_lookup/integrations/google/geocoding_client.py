import logging

import httpx

from place_lookup.exceptions import UpstreamTransportError
from place_lookup.models.google import GeocodeApiResponse
from place_lookup.models.lookup import GeocodeCandidate

logger = logging.getLogger(__name__)


class GeocodingClient:
    """Client for the Google Geocoding API (forward geocoding)."""

    GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(
        self,
        api_key: str | None,
        geocode_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.geocode_url = geocode_url or self.GEOCODE_URL
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def geocode(self, address: str) -> list[GeocodeCandidate]:
        """Resolve a free-text address to candidates in upstream rank order.

        Raises:
            UpstreamTransportError: if the call fails or answers non-2xx.
        """
        params = {"address": address, "key": self.api_key or ""}
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.get(self.geocode_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Geocoding request failed: {e}")
            raise UpstreamTransportError(f"Geocoding request failed: {e}") from e

        if not resp.is_success:
            logger.warning(f"Geocoding failed with status {resp.status_code}")
            raise UpstreamTransportError(
                f"Geocoding failed with status {resp.status_code}",
                upstream_status=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError:
            logger.warning("Geocoding returned a non-JSON body; treating as no match")
            payload = None

        data = GeocodeApiResponse.from_payload(payload)
        if data.status not in (None, "OK", "ZERO_RESULTS"):
            logger.warning(
                f"Geocoding answered status {data.status}: {data.error_message or ''}"
            )
        return [result.to_candidate() for result in data.results]
