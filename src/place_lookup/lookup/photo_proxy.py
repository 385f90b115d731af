"""
Photo proxy for Places API (New) photo media.

Callers pass a photo resource name taken from a place record; the proxy
fetches the image server side so the API key never reaches the client.
The media endpoint is asked to skip its redirect, but three response
shapes are still handled, in this order:

1. 2xx JSON body carrying ``photoUri``: fetch that URL.
2. 3xx with a ``location`` header: fetch the redirect target.
3. 2xx with any other content type: the body is the image.
"""

import logging
from collections.abc import Mapping

import httpx
from pydantic import ValidationError

from place_lookup.exceptions import (
    ConfigurationError,
    LookupValidationError,
    RateLimitError,
    UpstreamResolutionError,
)
from place_lookup.integrations.google import PlacesClient
from place_lookup.models.google import PhotoMedia
from place_lookup.models.photo import PhotoContent, PhotoRequest
from place_lookup.utils.rate_limiter import RATE_LIMIT_MESSAGE, RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"
PHOTO_NAME_PARAMS = ("photoName", "name", "photoRef")
MAX_WIDTH_PARAMS = ("maxWidthPx", "maxwidth")
MAX_HEIGHT_PARAMS = ("maxHeightPx", "maxheight")
PARAM_NAMES = {"max_width_px": "maxWidthPx", "max_height_px": "maxHeightPx"}


def _first_present(params: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        if name in params:
            return params[name]
    return None


class PhotoProxy:
    """Resolve a photo resource name to image bytes."""

    def __init__(
        self,
        places_client: PlacesClient,
        rate_limiter: RateLimiter,
        default_max_width_px: int = 400,
        cache_max_age_seconds: int = 86_400,
    ) -> None:
        self.places_client = places_client
        self.rate_limiter = rate_limiter
        self.default_max_width_px = default_max_width_px
        self.cache_control = f"public, max-age={cache_max_age_seconds}"

    async def handle(self, client_id: str, params: Mapping[str, str]) -> PhotoContent:
        """Serve one inbound photo request from its query parameters."""
        if not self.rate_limiter.admit(client_id):
            raise RateLimitError(RATE_LIMIT_MESSAGE)
        if not self.places_client.is_configured:
            raise ConfigurationError("Server not configured")

        request = self.parse_request(params)
        return await self.fetch_photo(request)

    def parse_request(self, params: Mapping[str, str]) -> PhotoRequest:
        photo_name = _first_present(params, PHOTO_NAME_PARAMS)
        if not photo_name:
            raise LookupValidationError("photoName required")

        max_width = _first_present(params, MAX_WIDTH_PARAMS)
        max_height = _first_present(params, MAX_HEIGHT_PARAMS)
        try:
            return PhotoRequest(
                photo_name=photo_name,
                max_width_px=max_width or self.default_max_width_px,
                max_height_px=max_height or None,
            )
        except ValidationError as e:
            err = e.errors()[0]
            if err["loc"] and err["loc"][0] == "photo_name":
                message = str(err.get("ctx", {}).get("error", err["msg"]))
            else:
                field_name = PARAM_NAMES.get(str(err["loc"][0]), str(err["loc"][0]))
                message = f"{field_name}: {err['msg']}"
            raise LookupValidationError(message) from e

    async def fetch_photo(self, request: PhotoRequest) -> PhotoContent:
        """Fetch the image for a validated request.

        Raises:
            UpstreamResolutionError: on any failure after the initial call.
        """
        resp = await self.places_client.request_photo_media(
            request.photo_name,
            max_width_px=request.max_width_px,
            max_height_px=request.max_height_px,
        )
        content_type = resp.headers.get("content-type", "")

        if resp.is_success and "application/json" in content_type:
            return await self._from_json_media(resp)

        if 300 <= resp.status_code < 400:
            location = resp.headers.get("location")
            if not location:
                logger.warning("Photo media redirect without a location header")
                raise UpstreamResolutionError("Failed to fetch photo")
            return await self._download(location)

        if not resp.is_success:
            logger.warning(f"Photo media failed with status {resp.status_code}")
            raise UpstreamResolutionError("Failed to fetch photo")

        return self._content(resp)

    async def _from_json_media(self, resp: httpx.Response) -> PhotoContent:
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        media = PhotoMedia.from_payload(payload)
        if not media.photo_uri:
            logger.warning("Photo media JSON did not include a photoUri")
            raise UpstreamResolutionError("Failed to resolve photo media URL")
        return await self._download(media.photo_uri)

    async def _download(self, url: str) -> PhotoContent:
        media_resp = await self.places_client.fetch_media(url)
        if not media_resp.is_success:
            logger.warning(
                f"Photo download failed with status {media_resp.status_code}"
            )
            raise UpstreamResolutionError("Failed to fetch photo")
        return self._content(media_resp)

    def _content(self, resp: httpx.Response) -> PhotoContent:
        return PhotoContent(
            content=resp.content,
            content_type=resp.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
            cache_control=self.cache_control,
        )
