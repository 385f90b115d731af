"""
Client for the Google Places API (New), v1.

Place details are always requested with ``PLACE_FIELD_MASK`` so the shape of
the record does not drift when the upstream default field set changes.
"""

import logging
from urllib.parse import quote

import httpx

from place_lookup.exceptions import PlaceDetailsError, UpstreamResolutionError

logger = logging.getLogger(__name__)

PLACE_FIELD_MASK_VERSION = "places-v1/2024-1"

PLACE_FIELD_MASK: tuple[str, ...] = (
    "id",
    "displayName",
    "formattedAddress",
    "addressComponents",
    "location",
    "viewport",
    "types",
    "primaryType",
    "primaryTypeDisplayName",
    "businessStatus",
    "priceLevel",
    "priceRange",
    "rating",
    "userRatingCount",
    "nationalPhoneNumber",
    "internationalPhoneNumber",
    "websiteUri",
    "googleMapsUri",
    "regularOpeningHours",
    "utcOffsetMinutes",
    "takeout",
    "delivery",
    "dineIn",
    "curbsidePickup",
    "reservable",
    "servesBreakfast",
    "servesLunch",
    "servesDinner",
    "servesBrunch",
    "servesBeer",
    "servesWine",
    "servesCocktails",
    "servesCoffee",
    "servesDessert",
    "servesVegetarianFood",
    "outdoorSeating",
    "liveMusic",
    "menuForChildren",
    "goodForChildren",
    "goodForGroups",
    "goodForWatchingSports",
    "allowsDogs",
    "restroom",
    "accessibilityOptions",
    "paymentOptions",
    "parkingOptions",
    "editorialSummary",
)


class PlacesClient:
    """Minimal client for place details and photo media."""

    BASE_URL = "https://places.googleapis.com/v1"

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self._transport = transport
        self.field_mask = ",".join(PLACE_FIELD_MASK)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _auth_headers(self) -> dict[str, str]:
        return {"X-Goog-Api-Key": self.api_key or ""}

    async def get_place_details(self, place_id: str) -> dict:
        """Fetch the place record for ``place_id`` restricted to the field mask."""
        headers = {**self._auth_headers(), "X-Goog-FieldMask": self.field_mask}
        url = f"{self.base_url}/places/{quote(place_id, safe='')}"
        logger.debug(
            f"Fetching place {place_id!r} with field mask {PLACE_FIELD_MASK_VERSION}"
        )
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise PlaceDetailsError(f"Places v1 details request failed: {e}") from e

        if not resp.is_success:
            body = resp.text
            message = f"Places v1 details failed with status {resp.status_code}"
            if body:
                message = f"{message}: {body}"
            raise PlaceDetailsError(
                message, upstream_status=resp.status_code, body=body
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise PlaceDetailsError("Places v1 details returned invalid JSON") from e
        if not isinstance(payload, dict):
            raise PlaceDetailsError("Places v1 details returned an unexpected payload")
        return payload

    async def request_photo_media(
        self,
        photo_name: str,
        max_width_px: int,
        max_height_px: int | None = None,
    ) -> httpx.Response:
        """Ask for a photo's media without following any redirect.

        The caller inspects the raw response, which may be a JSON body with
        a ``photoUri``, a 3xx with a ``location`` header, or the image itself.
        """
        params: dict[str, str] = {"maxWidthPx": str(max_width_px)}
        if max_height_px:
            params["maxHeightPx"] = str(max_height_px)
        params["skipHttpRedirect"] = "true"
        url = f"{self.base_url}/{photo_name}/media"
        try:
            async with httpx.AsyncClient(
                transport=self._transport, follow_redirects=False
            ) as client:
                resp = await client.get(
                    url, params=params, headers=self._auth_headers()
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Photo media request failed for {photo_name}: {e}")
            raise UpstreamResolutionError("Failed to fetch photo") from e
        return resp

    async def fetch_media(self, url: str) -> httpx.Response:
        """Fetch a resolved media URL; the credential is not sent."""
        try:
            async with httpx.AsyncClient(
                transport=self._transport, follow_redirects=True
            ) as client:
                resp = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Photo media download failed: {e}")
            raise UpstreamResolutionError("Failed to fetch photo") from e
        return resp
