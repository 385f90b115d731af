"""
Shared pytest configuration and fixtures for the test suite.

Upstream Google services are faked with ``httpx.MockTransport``; every
request the code under test sends is recorded so tests can assert on
call counts and parameters.
"""

from collections.abc import Callable

import httpx
import pytest

from place_lookup.integrations.google import GeocodingClient, PlacesClient
from place_lookup.settings import Settings
from place_lookup.utils.rate_limiter import RateLimiter

GEOCODE_HOST = "maps.googleapis.com"
PLACES_HOST = "places.googleapis.com"
MEDIA_HOST = "lh3.googleusercontent.com"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (full FastAPI app)",
    )


class FakeGoogle:
    """Programmable stand-in for the Geocoding, Places and media hosts."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.geocode_status = 200
        self.geocode_payload: object = {"status": "ZERO_RESULTS", "results": []}
        self.place_status = 200
        self.place_payload: object = {}
        self.place_error_text = ""
        self.photo_response: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(404)
        )
        self.media: dict[str, httpx.Response] = {}

    def set_geocode_results(self, *results: dict) -> None:
        self.geocode_payload = {
            "status": "OK" if results else "ZERO_RESULTS",
            "results": list(results),
        }

    @staticmethod
    def result(
        formatted_address: str,
        place_id: str | None = None,
        lat: float | None = None,
        lng: float | None = None,
    ) -> dict:
        """Build one Geocoding API result entry."""
        result: dict = {"formatted_address": formatted_address}
        if place_id is not None:
            result["place_id"] = place_id
        if lat is not None and lng is not None:
            result["geometry"] = {"location": {"lat": lat, "lng": lng}}
        return result

    def requests_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host == GEOCODE_HOST:
            if self.geocode_status != 200:
                return httpx.Response(self.geocode_status, text="upstream down")
            return httpx.Response(200, json=self.geocode_payload)
        if host == PLACES_HOST and request.url.path.endswith("/media"):
            return self.photo_response(request)
        if host == PLACES_HOST:
            if self.place_status != 200:
                return httpx.Response(self.place_status, text=self.place_error_text)
            return httpx.Response(200, json=self.place_payload)
        if str(request.url) in self.media:
            return self.media[str(request.url)]
        return httpx.Response(404)


@pytest.fixture
def fake_google() -> FakeGoogle:
    return FakeGoogle()


@pytest.fixture
def settings() -> Settings:
    return Settings(google_maps_api_key="test-key", _env_file=None)


@pytest.fixture
def rate_limiter() -> RateLimiter:
    return RateLimiter(window_seconds=60.0, max_requests=30)


@pytest.fixture
def geocoding_client(fake_google) -> GeocodingClient:
    return GeocodingClient("test-key", transport=fake_google.transport())


@pytest.fixture
def places_client(fake_google) -> PlacesClient:
    return PlacesClient("test-key", transport=fake_google.transport())
