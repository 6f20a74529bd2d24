"""Tests for GeoResolver against a stubbed Google Maps transport."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from src.exceptions import (
    DeviceLocationError,
    DeviceLocationFailure,
    GeocodingError,
    GeocodingFailure,
    LocationValidationError,
    OutOfServiceAreaError,
    ProviderParseError,
)
from src.models.enums import LocationMethod
from src.models.location import Coordinates
from src.services.cache import CacheManager
from src.services.gazetteer import Gazetteer
from src.services.geocoding import (
    DevicePosition,
    GeoResolver,
    GoogleMapsClient,
    ReportedDeviceLocation,
)
from src.services.proximity import ProximityMatcher

MUMBAI_PAYLOAD = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "Chhatrapati Shivaji Terminus Area, Fort, Mumbai, Maharashtra 400001, India",
            "geometry": {"location": {"lat": 19.0760, "lng": 72.8777}},
            "address_components": [
                {"long_name": "Mumbai", "short_name": "Mumbai", "types": ["locality", "political"]},
                {"long_name": "Maharashtra", "short_name": "MH", "types": ["administrative_area_level_1", "political"]},
                {"long_name": "India", "short_name": "IN", "types": ["country", "political"]},
                {"long_name": "400001", "short_name": "400001", "types": ["postal_code"]},
            ],
        }
    ],
}


class StubProvider:
    """Records requests and answers each with a canned JSON payload."""

    def __init__(self, payload: Any | Callable[[httpx.Request], Any]) -> None:
        self.payload = payload
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = self.payload(request) if callable(self.payload) else self.payload
        return httpx.Response(200, json=body)


@pytest.fixture(scope="module")
def matcher() -> ProximityMatcher:
    return ProximityMatcher(Gazetteer.default())


def _resolver(
    handler: Any,
    matcher: ProximityMatcher,
    *,
    cache: CacheManager | None = None,
    timeout: float = 10.0,
) -> GeoResolver:
    client = GoogleMapsClient(
        "test-key",
        min_interval_ms=0,
        transport=httpx.MockTransport(handler),
    )
    return GeoResolver(client, cache=cache, nearest_city=matcher.nearest_city, timeout=timeout)


# -----------------------------------------------------------------------
# Reverse geocoding
# -----------------------------------------------------------------------


class TestReverseGeocode:
    async def test_mumbai(self, matcher: ProximityMatcher) -> None:
        stub = StubProvider(MUMBAI_PAYLOAD)
        record = await _resolver(stub, matcher).reverse_geocode(19.0760, 72.8777)

        assert record.city == "Mumbai"
        assert record.state == "Maharashtra"
        assert record.state_code == "MH"
        assert record.pincode == "400001"
        assert record.method == LocationMethod.GPS
        assert record.coordinates == Coordinates(lat=19.076, lng=72.8777)

        params = stub.requests[0].url.params
        assert params["latlng"] == "19.076,72.8777"
        assert params["key"] == "test-key"

    async def test_keeps_caller_coordinates(self, matcher: ProximityMatcher) -> None:
        record = await _resolver(StubProvider(MUMBAI_PAYLOAD), matcher).reverse_geocode(19.08, 72.88, accuracy=15)
        assert (record.coordinates.lat, record.coordinates.lng) == (19.08, 72.88)
        assert record.coordinates.accuracy == 15

    async def test_out_of_area_rejected_before_network(self, matcher: ProximityMatcher) -> None:
        stub = StubProvider(MUMBAI_PAYLOAD)
        with pytest.raises(OutOfServiceAreaError):
            await _resolver(stub, matcher).reverse_geocode(51.5074, -0.1278)
        assert stub.requests == [], "no provider call should be made for invalid input"

    async def test_bare_result_falls_back_to_nearest_city(self, matcher: ProximityMatcher) -> None:
        payload = {"status": "OK", "results": [{"geometry": {"location": {"lat": 18.52, "lng": 73.85}}}]}
        record = await _resolver(StubProvider(payload), matcher).reverse_geocode(18.52, 73.85)
        assert record.city == "Pune"
        assert record.state_code == "MH", "gazetteer state code should be used"

    async def test_bare_result_far_from_any_city(self, matcher: ProximityMatcher) -> None:
        payload = {"status": "OK", "results": [{"geometry": {"location": {"lat": 24.0, "lng": 70.0}}}]}
        with pytest.raises(GeocodingError) as exc_info:
            await _resolver(StubProvider(payload), matcher).reverse_geocode(24.0, 70.0)
        assert exc_info.value.reason == GeocodingFailure.NO_RESULT

    async def test_invalid_postal_code_dropped(self, matcher: ProximityMatcher) -> None:
        payload = {
            "status": "OK",
            "results": [
                {
                    "geometry": {"location": {"lat": 19.076, "lng": 72.8777}},
                    "address_components": [
                        {"long_name": "Mumbai", "short_name": "Mumbai", "types": ["locality"]},
                        {"long_name": "Maharashtra", "short_name": "MH", "types": ["administrative_area_level_1"]},
                        {"long_name": "0400", "short_name": "0400", "types": ["postal_code"]},
                    ],
                }
            ],
        }
        record = await _resolver(StubProvider(payload), matcher).reverse_geocode(19.076, 72.8777)
        assert record.pincode is None
        assert record.city == "Mumbai"

    async def test_foreign_match_near_border_rejected(self, matcher: ProximityMatcher) -> None:
        # A fix just inside the box near the Nepal border resolving to Nepal.
        payload = {
            "status": "OK",
            "results": [
                {
                    "geometry": {"location": {"lat": 27.7172, "lng": 85.324}},
                    "address_components": [
                        {"long_name": "Kathmandu", "short_name": "Kathmandu", "types": ["locality"]},
                        {"long_name": "Bagmati Province", "short_name": "BA", "types": ["administrative_area_level_1"]},
                        {"long_name": "Nepal", "short_name": "NP", "types": ["country", "political"]},
                    ],
                }
            ],
        }
        resolver = _resolver(StubProvider(payload), matcher, cache=CacheManager(redis_url=None))
        with pytest.raises(OutOfServiceAreaError):
            await resolver.reverse_geocode(27.7, 85.3)
        with pytest.raises(OutOfServiceAreaError):
            await resolver.reverse_geocode(27.7, 85.3)

    async def test_provider_point_outside_box_rejected(self, matcher: ProximityMatcher) -> None:
        payload = {
            "status": "OK",
            "results": [
                {
                    "geometry": {"location": {"lat": 5.9, "lng": 80.0}},
                    "address_components": [
                        {"long_name": "Matara", "short_name": "Matara", "types": ["locality"]},
                        {"long_name": "Southern Province", "short_name": "SP", "types": ["administrative_area_level_1"]},
                    ],
                }
            ],
        }
        with pytest.raises(OutOfServiceAreaError):
            await _resolver(StubProvider(payload), matcher).reverse_geocode(6.05, 80.2)

    async def test_without_provider_uses_gazetteer(self, matcher: ProximityMatcher) -> None:
        resolver = GeoResolver(None, nearest_city=matcher.nearest_city)
        record = await resolver.reverse_geocode(19.0760, 72.8777)
        assert (record.city, record.state) == ("Mumbai", "Maharashtra")


# -----------------------------------------------------------------------
# Forward geocoding
# -----------------------------------------------------------------------


class TestForwardGeocode:
    async def test_manual_record(self, matcher: ProximityMatcher) -> None:
        stub = StubProvider(MUMBAI_PAYLOAD)
        record = await _resolver(stub, matcher).forward_geocode("  CST, Mumbai ")

        assert record.method == LocationMethod.MANUAL
        assert record.city == "Mumbai"
        assert record.address.startswith("Chhatrapati Shivaji Terminus")

        params = stub.requests[0].url.params
        assert params["address"] == "CST, Mumbai"
        assert params["components"] == "country:IN"
        assert params["region"] == "in"

    async def test_provider_point_outside_india(self, matcher: ProximityMatcher) -> None:
        payload = {
            "status": "OK",
            "results": [
                {
                    "geometry": {"location": {"lat": 51.5074, "lng": -0.1278}},
                    "address_components": [
                        {"long_name": "London", "short_name": "London", "types": ["locality"]},
                        {"long_name": "England", "short_name": "England", "types": ["administrative_area_level_1"]},
                    ],
                }
            ],
        }
        with pytest.raises(OutOfServiceAreaError):
            await _resolver(StubProvider(payload), matcher).forward_geocode("London")

    async def test_zero_results(self, matcher: ProximityMatcher) -> None:
        with pytest.raises(GeocodingError) as exc_info:
            await _resolver(StubProvider({"status": "ZERO_RESULTS", "results": []}), matcher).forward_geocode("xyzzy")
        assert exc_info.value.reason == GeocodingFailure.NO_RESULT

    async def test_unknown_status(self, matcher: ProximityMatcher) -> None:
        with pytest.raises(ProviderParseError):
            await _resolver(StubProvider({"status": "WHAT"}), matcher).forward_geocode("Pune")

    async def test_empty_address(self, matcher: ProximityMatcher) -> None:
        stub = StubProvider(MUMBAI_PAYLOAD)
        with pytest.raises(LocationValidationError):
            await _resolver(stub, matcher).forward_geocode("   ")
        assert stub.requests == []

    async def test_no_provider(self) -> None:
        with pytest.raises(GeocodingError) as exc_info:
            await GeoResolver(None).forward_geocode("Pune")
        assert exc_info.value.reason == GeocodingFailure.PROVIDER_ERROR


# -----------------------------------------------------------------------
# Failures and caching
# -----------------------------------------------------------------------


class TestProviderFailures:
    async def test_http_error_is_provider_error(self, matcher: ProximityMatcher) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(GeocodingError) as exc_info:
            await _resolver(handler, matcher).reverse_geocode(19.076, 72.8777)
        assert exc_info.value.reason == GeocodingFailure.PROVIDER_ERROR

    async def test_transport_timeout(self, matcher: ProximityMatcher) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(GeocodingError) as exc_info:
            await _resolver(handler, matcher).reverse_geocode(19.076, 72.8777)
        assert exc_info.value.reason == GeocodingFailure.TIMEOUT

    async def test_resolver_timeout(self, matcher: ProximityMatcher) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json=MUMBAI_PAYLOAD)

        with pytest.raises(GeocodingError) as exc_info:
            await _resolver(handler, matcher, timeout=0.05).reverse_geocode(19.076, 72.8777)
        assert exc_info.value.reason == GeocodingFailure.TIMEOUT

    async def test_no_retry(self, matcher: ProximityMatcher) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(503)

        with pytest.raises(GeocodingError):
            await _resolver(handler, matcher).forward_geocode("Pune")
        assert calls == 1, "a failed request must not be retried"


class TestCaching:
    async def test_second_lookup_served_from_cache(self, matcher: ProximityMatcher) -> None:
        stub = StubProvider(MUMBAI_PAYLOAD)
        resolver = _resolver(stub, matcher, cache=CacheManager(redis_url=None, namespace="geocode:"))

        first = await resolver.forward_geocode("Mumbai")
        second = await resolver.forward_geocode("mumbai")

        assert len(stub.requests) == 1, "second lookup should hit the cache"
        assert second.city == first.city
        assert second.pincode == first.pincode

    async def test_failures_not_cached(self, matcher: ProximityMatcher) -> None:
        stub = StubProvider({"status": "ZERO_RESULTS", "results": []})
        resolver = _resolver(stub, matcher, cache=CacheManager(redis_url=None))

        for _ in range(2):
            with pytest.raises(GeocodingError):
                await resolver.forward_geocode("nowhere")
        assert len(stub.requests) == 2


# -----------------------------------------------------------------------
# Device location
# -----------------------------------------------------------------------


class SlowDevice:
    async def current_position(self) -> DevicePosition:
        await asyncio.sleep(1)
        return DevicePosition(lat=19.076, lng=72.8777)


class TestDeviceLocation:
    async def test_fix_is_verified_gps_record(self, matcher: ProximityMatcher) -> None:
        source = ReportedDeviceLocation(position=DevicePosition(lat=19.076, lng=72.8777, accuracy=12.5))
        record = await _resolver(StubProvider(MUMBAI_PAYLOAD), matcher).current_device_location(source)

        assert record.verified is True
        assert record.method == LocationMethod.GPS
        assert record.coordinates.accuracy == 12.5
        assert record.city == "Mumbai"

    @pytest.mark.parametrize(
        ("code", "reason"),
        [
            (1, DeviceLocationFailure.PERMISSION_DENIED),
            (2, DeviceLocationFailure.POSITION_UNAVAILABLE),
            (3, DeviceLocationFailure.TIMEOUT),
            (99, DeviceLocationFailure.POSITION_UNAVAILABLE),
        ],
    )
    async def test_reported_errors(self, matcher: ProximityMatcher, code: int, reason: DeviceLocationFailure) -> None:
        resolver = GeoResolver(None, nearest_city=matcher.nearest_city)
        with pytest.raises(DeviceLocationError) as exc_info:
            await resolver.current_device_location(ReportedDeviceLocation(error_code=code))
        assert exc_info.value.reason == reason

    async def test_device_timeout(self, matcher: ProximityMatcher) -> None:
        resolver = GeoResolver(None, nearest_city=matcher.nearest_city, timeout=0.05)
        with pytest.raises(DeviceLocationError) as exc_info:
            await resolver.current_device_location(SlowDevice())
        assert exc_info.value.reason == DeviceLocationFailure.TIMEOUT

    def test_report_needs_exactly_one_input(self) -> None:
        with pytest.raises(ValueError):
            ReportedDeviceLocation()
        with pytest.raises(ValueError):
            ReportedDeviceLocation(position=DevicePosition(lat=19.0, lng=73.0), error_code=1)


# -----------------------------------------------------------------------
# Autocomplete and place details
# -----------------------------------------------------------------------


class TestPlaces:
    async def test_short_input_skips_provider(self, matcher: ProximityMatcher) -> None:
        stub = StubProvider({"status": "OK", "predictions": []})
        assert await _resolver(stub, matcher).autocomplete("pu") == []
        assert stub.requests == []

    async def test_autocomplete_with_bias(self, matcher: ProximityMatcher) -> None:
        stub = StubProvider(
            {
                "status": "OK",
                "predictions": [{"place_id": "p1", "description": "Pune, Maharashtra, India"}],
            }
        )
        near = Coordinates(lat=19.076, lng=72.8777)
        predictions = await _resolver(stub, matcher).autocomplete("pun", near=near)

        assert [p.place_id for p in predictions] == ["p1"]
        params = stub.requests[0].url.params
        assert params["components"] == "country:in"
        assert params["types"] == "(cities)"
        assert params["location"] == "19.076,72.8777"
        assert params["radius"] == "50000"

    async def test_autocomplete_denied(self, matcher: ProximityMatcher) -> None:
        with pytest.raises(GeocodingError) as exc_info:
            await _resolver(StubProvider({"status": "REQUEST_DENIED"}), matcher).autocomplete("pune")
        assert exc_info.value.reason == GeocodingFailure.PROVIDER_ERROR

    async def test_place_details(self, matcher: ProximityMatcher) -> None:
        payload = {"status": "OK", "result": MUMBAI_PAYLOAD["results"][0]}
        stub = StubProvider(payload)
        record = await _resolver(stub, matcher).place_details("ChIJ-mumbai")

        assert record.method == LocationMethod.MANUAL
        assert record.city == "Mumbai"
        assert stub.requests[0].url.params["place_id"] == "ChIJ-mumbai"
