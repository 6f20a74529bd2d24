"""Tests for Haversine distance and radius-bounded proximity matching."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from src.exceptions import LocationValidationError, OutOfServiceAreaError
from src.models.location import Coordinates
from src.models.provider import ServiceProvider
from src.services.gazetteer import Gazetteer
from src.services.proximity import ProximityMatcher, haversine_km, position_of


@pytest.fixture(scope="module")
def matcher() -> ProximityMatcher:
    return ProximityMatcher(Gazetteer.default())


def _provider(pid: str, lat: float, lng: float, role: str = "fixer") -> ServiceProvider:
    return ServiceProvider(
        provider_id=pid,
        name=pid.title(),
        role=role,
        coordinates=Coordinates(lat=lat, lng=lng),
    )


# -----------------------------------------------------------------------
# Distance
# -----------------------------------------------------------------------


class TestHaversine:
    def test_zero_distance(self) -> None:
        assert haversine_km(19.076, 72.8777, 19.076, 72.8777) == pytest.approx(0.0)

    def test_mumbai_to_delhi(self) -> None:
        distance = haversine_km(19.0760, 72.8777, 28.7041, 77.1025)
        assert 1100 < distance < 1200, f"Mumbai-Delhi should be ~1150 km, got {distance:.0f}"

    def test_symmetric(self) -> None:
        a = haversine_km(12.9716, 77.5946, 13.0827, 80.2707)
        b = haversine_km(13.0827, 80.2707, 12.9716, 77.5946)
        assert a == pytest.approx(b)

    def test_one_degree_latitude(self) -> None:
        assert haversine_km(20.0, 78.0, 21.0, 78.0) == pytest.approx(111.19, abs=0.1)


class TestPositionOf:
    def test_direct_and_nested_positions(self) -> None:
        coords = Coordinates(lat=19.0, lng=73.0)
        assert position_of(coords) == (19.0, 73.0)
        assert position_of(_provider("a", 19.0, 73.0)) == (19.0, 73.0)

    def test_missing_position(self) -> None:
        assert position_of(object()) is None


# -----------------------------------------------------------------------
# Matching
# -----------------------------------------------------------------------


class TestNearbyCities:
    def test_mumbai_area_within_50km(self, matcher: ProximityMatcher) -> None:
        matches = matcher.nearby_cities(19.07, 72.88, 50)
        names = [m.candidate.name for m in matches]

        assert names[0] == "Mumbai", "closest city should come first"
        assert {"Mumbai", "Thane", "Navi Mumbai"} <= set(names)
        assert "Delhi" not in names, "Delhi is ~1150 km away"
        assert "Pune" not in names, "Pune is ~120 km away"

    def test_results_ascending_and_within_radius(self, matcher: ProximityMatcher) -> None:
        matches = matcher.nearby_cities(19.07, 72.88, 50)
        distances = [m.distance_km for m in matches]
        assert distances == sorted(distances)
        assert all(d <= 50 for d in distances)

    def test_radius_smaller_than_every_candidate(self, matcher: ProximityMatcher) -> None:
        # Kutch: no gazetteer city within a few kilometres.
        assert matcher.nearby_cities(23.5, 69.5, 1) == []

    @pytest.mark.parametrize("radius", [0, 0.99, 100.01, 500])
    def test_radius_out_of_bounds(self, matcher: ProximityMatcher, radius: float) -> None:
        with pytest.raises(LocationValidationError):
            matcher.nearby_cities(19.07, 72.88, radius)

    def test_origin_outside_service_area(self, matcher: ProximityMatcher) -> None:
        with pytest.raises(OutOfServiceAreaError):
            matcher.nearby_cities(51.5, -0.12, 50)


class TestNearestCity:
    def test_pune(self, matcher: ProximityMatcher) -> None:
        assert matcher.nearest_city(18.52, 73.85).name == "Pune"

    def test_nothing_within_limit(self, matcher: ProximityMatcher) -> None:
        assert matcher.nearest_city(24.0, 70.0) is None


class TestNearbyProviders:
    def test_role_filter(self, matcher: ProximityMatcher) -> None:
        candidates = [
            _provider("bandra", 19.0596, 72.8295),
            _provider("andheri", 19.1136, 72.8697, role="hirer"),
            _provider("powai", 19.1176, 72.9060),
        ]
        matches = matcher.nearby(19.07, 72.88, 10, candidates, role="fixer")
        assert [m.candidate.provider_id for m in matches] == ["bandra", "powai"]
        assert all(m.candidate.role == "fixer" for m in matches)

    def test_ordering_by_distance(self, matcher: ProximityMatcher) -> None:
        candidates = [
            _provider("far", 19.30, 72.88),
            _provider("near", 19.08, 72.88),
            _provider("mid", 19.15, 72.88),
        ]
        matches = matcher.nearby(19.07, 72.88, 50, candidates)
        assert [m.candidate.provider_id for m in matches] == ["near", "mid", "far"]
        assert matches[0].distance_km == pytest.approx(1.11, abs=0.01)

    def test_candidates_without_position_skipped(self, matcher: ProximityMatcher) -> None:
        @dataclass
        class Nameless:
            name: str

        matches = matcher.nearby(19.07, 72.88, 50, [Nameless("x"), _provider("p", 19.08, 72.88)])
        assert len(matches) == 1
