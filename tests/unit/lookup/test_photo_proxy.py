"""Unit tests for the photo proxy."""

import httpx
import pytest

from place_lookup.exceptions import (
    ConfigurationError,
    LookupValidationError,
    RateLimitError,
    UpstreamResolutionError,
)
from place_lookup.integrations.google import PlacesClient
from place_lookup.lookup.photo_proxy import PhotoProxy
from place_lookup.models.photo import PhotoRequest
from place_lookup.utils.rate_limiter import RateLimiter

PHOTO = "places/X/photos/Y"
MEDIA_URL = "https://lh3.googleusercontent.com/photo/abc"


@pytest.fixture
def proxy(places_client, rate_limiter):
    return PhotoProxy(places_client, rate_limiter)


class TestParseRequest:
    def test_defaults(self, proxy):
        request = proxy.parse_request({"photoName": PHOTO})
        assert request.photo_name == PHOTO
        assert request.max_width_px == 400
        assert request.max_height_px is None

    def test_first_present_name_wins(self, proxy):
        request = proxy.parse_request(
            {"photoRef": "places/ref", "name": "places/name", "photoName": PHOTO}
        )
        assert request.photo_name == PHOTO

        request = proxy.parse_request({"photoRef": "places/ref", "name": "places/n"})
        assert request.photo_name == "places/n"

    def test_dimension_aliases(self, proxy):
        request = proxy.parse_request(
            {"name": PHOTO, "maxwidth": "800", "maxheight": "600"}
        )
        assert request.max_width_px == 800
        assert request.max_height_px == 600

    def test_empty_height_is_omitted(self, proxy):
        request = proxy.parse_request({"name": PHOTO, "maxHeightPx": ""})
        assert request.max_height_px is None

    def test_missing_name(self, proxy):
        with pytest.raises(LookupValidationError) as exc_info:
            proxy.parse_request({"maxWidthPx": "400"})
        assert exc_info.value.message == "photoName required"

    def test_wrong_prefix(self, proxy):
        with pytest.raises(LookupValidationError) as exc_info:
            proxy.parse_request({"photoName": "notplaces/abc"})
        assert 'starts with "places/"' in exc_info.value.message

    @pytest.mark.parametrize(
        "name", ["places/abc\n", "places/a b", "places/abc\x00", "places/\tx"]
    )
    def test_unsafe_characters(self, proxy, name):
        with pytest.raises(LookupValidationError) as exc_info:
            proxy.parse_request({"photoName": name})
        assert "whitespace or control characters" in exc_info.value.message

    @pytest.mark.parametrize("width", ["abc", "0", "-5", "5000"])
    def test_malformed_width(self, proxy, width):
        with pytest.raises(LookupValidationError) as exc_info:
            proxy.parse_request({"photoName": PHOTO, "maxWidthPx": width})
        assert exc_info.value.message.startswith("maxWidthPx")


class TestFetchPhoto:
    @pytest.mark.asyncio
    async def test_json_wrapped_media_url(self, proxy, fake_google):
        fake_google.photo_response = lambda request: httpx.Response(
            200, json={"name": f"{PHOTO}/media", "photoUri": MEDIA_URL}
        )
        fake_google.media[MEDIA_URL] = httpx.Response(
            200, content=b"\x89PNG", headers={"content-type": "image/png"}
        )

        photo = await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))

        assert photo.content == b"\x89PNG"
        assert photo.content_type == "image/png"
        assert photo.cache_control == "public, max-age=86400"
        assert [str(r.url) for r in fake_google.requests][1] == MEDIA_URL

    @pytest.mark.asyncio
    async def test_json_without_photo_uri(self, proxy, fake_google):
        fake_google.photo_response = lambda request: httpx.Response(200, json={})

        with pytest.raises(UpstreamResolutionError) as exc_info:
            await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))

        assert exc_info.value.message == "Failed to resolve photo media URL"
        assert len(fake_google.requests) == 1

    @pytest.mark.asyncio
    async def test_malformed_photo_uri_is_upstream_failure(self, proxy, fake_google):
        fake_google.photo_response = lambda request: httpx.Response(
            200, json={"photoUri": "https://lh3.googleusercontent.com/photo/a\nb"}
        )

        with pytest.raises(UpstreamResolutionError) as exc_info:
            await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))

        assert exc_info.value.message == "Failed to fetch photo"
        assert len(fake_google.requests) == 1

    @pytest.mark.asyncio
    async def test_json_media_download_failure(self, proxy, fake_google):
        fake_google.photo_response = lambda request: httpx.Response(
            200, json={"photoUri": MEDIA_URL}
        )
        fake_google.media[MEDIA_URL] = httpx.Response(500)

        with pytest.raises(UpstreamResolutionError) as exc_info:
            await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))

        assert exc_info.value.message == "Failed to fetch photo"

    @pytest.mark.asyncio
    async def test_redirect(self, proxy, fake_google):
        fake_google.photo_response = lambda request: httpx.Response(
            302, headers={"location": MEDIA_URL}
        )
        fake_google.media[MEDIA_URL] = httpx.Response(
            200, content=b"jpeg-bytes", headers={"content-type": "image/jpeg"}
        )

        photo = await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))

        assert photo.content == b"jpeg-bytes"
        assert photo.content_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_redirect_without_location(self, proxy, fake_google):
        fake_google.photo_response = lambda request: httpx.Response(302)

        with pytest.raises(UpstreamResolutionError):
            await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))

    @pytest.mark.asyncio
    async def test_direct_binary(self, proxy, fake_google):
        fake_google.photo_response = lambda request: httpx.Response(
            200, content=b"webp-bytes", headers={"content-type": "image/webp"}
        )

        photo = await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))

        assert photo.content == b"webp-bytes"
        assert photo.content_type == "image/webp"
        assert len(fake_google.requests) == 1

    @pytest.mark.asyncio
    async def test_direct_binary_defaults_content_type(self, proxy, fake_google):
        fake_google.photo_response = lambda request: httpx.Response(
            200, content=b"raw"
        )

        photo = await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))

        assert photo.content_type == "image/jpeg"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 403, 404, 500])
    async def test_other_statuses_fail(self, proxy, fake_google, status):
        fake_google.photo_response = lambda request: httpx.Response(status)

        with pytest.raises(UpstreamResolutionError):
            await proxy.fetch_photo(PhotoRequest(photo_name=PHOTO))


class TestHandle:
    @pytest.mark.asyncio
    async def test_wrong_prefix_makes_no_outbound_call(self, proxy, fake_google):
        with pytest.raises(LookupValidationError):
            await proxy.handle("1.2.3.4", {"photoName": "notplaces/abc"})
        assert fake_google.requests == []

    @pytest.mark.asyncio
    async def test_control_character_makes_no_outbound_call(self, proxy, fake_google):
        with pytest.raises(LookupValidationError):
            await proxy.handle("1.2.3.4", {"photoName": "places/abc\n"})
        assert fake_google.requests == []

    @pytest.mark.asyncio
    async def test_unconfigured(self, rate_limiter, fake_google):
        proxy = PhotoProxy(
            PlacesClient(None, transport=fake_google.transport()), rate_limiter
        )
        with pytest.raises(ConfigurationError):
            await proxy.handle("1.2.3.4", {"photoName": PHOTO})
        assert fake_google.requests == []

    @pytest.mark.asyncio
    async def test_rate_limited(self, places_client, fake_google):
        proxy = PhotoProxy(places_client, RateLimiter(max_requests=0))
        with pytest.raises(RateLimitError):
            await proxy.handle("1.2.3.4", {"photoName": PHOTO})
        assert fake_google.requests == []

    @pytest.mark.asyncio
    async def test_custom_cache_directive(
        self, places_client, rate_limiter, fake_google
    ):
        fake_google.photo_response = lambda request: httpx.Response(
            200, content=b"img", headers={"content-type": "image/jpeg"}
        )
        proxy = PhotoProxy(places_client, rate_limiter, cache_max_age_seconds=60)

        photo = await proxy.handle("1.2.3.4", {"photoName": PHOTO})

        assert photo.cache_control == "public, max-age=60"
