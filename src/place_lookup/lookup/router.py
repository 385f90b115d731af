"""
FastAPI routes for address lookups and the photo proxy.

Both live on ``/api/lookup``: ``POST`` runs a lookup, ``GET`` proxies a photo.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..exceptions import PlaceLookupError
from ..integrations.google import GeocodingClient, PlacesClient
from ..settings import Settings, get_settings
from ..utils.rate_limiter import RateLimiter
from .photo_proxy import PhotoProxy
from .service import LookupService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["lookup"])

UNKNOWN_CLIENT = "unknown"


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Process-wide limiter shared by the lookup and photo routes."""
    settings = get_settings()
    return RateLimiter(
        window_seconds=settings.rate_limit_window_seconds,
        max_requests=settings.rate_limit_max_requests,
        max_clients=settings.rate_limit_max_clients,
    )


def get_lookup_service(
    settings: Settings = Depends(get_settings),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> LookupService:
    """Dependency to get the lookup orchestrator."""
    return LookupService(
        geocoding_client=GeocodingClient(
            settings.google_maps_api_key, geocode_url=settings.geocode_url
        ),
        places_client=PlacesClient(
            settings.google_maps_api_key, base_url=settings.places_base_url
        ),
        rate_limiter=rate_limiter,
    )


def get_photo_proxy(
    settings: Settings = Depends(get_settings),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> PhotoProxy:
    """Dependency to get the photo proxy."""
    return PhotoProxy(
        PlacesClient(settings.google_maps_api_key, base_url=settings.places_base_url),
        rate_limiter,
        default_max_width_px=settings.photo_default_max_width_px,
        cache_max_age_seconds=settings.photo_cache_max_age_seconds,
    )


def get_client_id(request: Request) -> str:
    """Throttling key: first X-Forwarded-For entry, then the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


@router.post("/lookup")
async def lookup_address(
    request: Request,
    client_id: str = Depends(get_client_id),
    service: LookupService = Depends(get_lookup_service),
):
    """Geocode an address and enrich the selected match with place details."""
    body = await request.body()
    try:
        result = await service.handle(client_id, body)
    except PlaceLookupError as e:
        return JSONResponse({"error": e.detail}, status_code=e.status_code)
    return JSONResponse(result.model_dump_wire())


@router.get("/lookup")
async def proxy_photo(
    request: Request,
    client_id: str = Depends(get_client_id),
    proxy: PhotoProxy = Depends(get_photo_proxy),
):
    """Return a place photo without exposing the API key to the caller."""
    try:
        photo = await proxy.handle(client_id, request.query_params)
    except PlaceLookupError as e:
        return PlainTextResponse(e.message, status_code=e.status_code)
    return Response(
        content=photo.content,
        media_type=photo.content_type,
        headers={"cache-control": photo.cache_control},
    )
