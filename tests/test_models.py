"""Tests for location data models: coordinates, records, snapshots and enums."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.exceptions import LocationValidationError, OutOfServiceAreaError
from src.models.enums import LocationMethod, ProviderRole, Region
from src.models.location import (
    Coordinates,
    LocationRecord,
    LocationSnapshot,
    is_valid_pincode,
    is_within_india,
)
from src.models.provider import ServiceProvider


def _record(**overrides) -> LocationRecord:
    data = {
        "coordinates": Coordinates(lat=19.076, lng=72.8777),
        "city": "Mumbai",
        "state": "Maharashtra",
        "state_code": "MH",
    }
    data.update(overrides)
    return LocationRecord(**data)


# -----------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------


class TestEnums:
    def test_location_methods(self) -> None:
        assert {m.value for m in LocationMethod} == {"gps", "manual", "auto"}

    def test_region_labels(self) -> None:
        assert Region.NORTHEAST == "Northeast India"
        assert Region.INDIA == "India", "fallback region should be plain 'India'"
        assert len(Region) == 7

    def test_provider_roles(self) -> None:
        assert ProviderRole.FIXER == "fixer"
        assert ProviderRole.HIRER == "hirer"


# -----------------------------------------------------------------------
# Coordinates
# -----------------------------------------------------------------------


class TestCoordinates:
    @pytest.mark.parametrize(
        ("lat", "lng"),
        [(6.0, 68.0), (37.6, 97.25), (19.076, 72.8777), (28.7041, 77.1025)],
    )
    def test_points_inside_box_accepted(self, lat: float, lng: float) -> None:
        coords = Coordinates(lat=lat, lng=lng)
        assert coords.lat == lat and coords.lng == lng

    @pytest.mark.parametrize(
        ("lat", "lng"),
        [(51.5074, -0.1278), (5.99, 75.0), (37.61, 75.0), (20.0, 67.99), (20.0, 97.26)],
    )
    def test_points_outside_box_rejected(self, lat: float, lng: float) -> None:
        with pytest.raises(OutOfServiceAreaError) as exc_info:
            Coordinates(lat=lat, lng=lng)
        assert isinstance(exc_info.value, LocationValidationError)

    def test_rounded_to_six_places(self) -> None:
        coords = Coordinates(lat=19.07600012345, lng=72.87770098765)
        assert coords.lat == 19.076
        assert coords.lng == 72.877701

    def test_negative_accuracy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Coordinates(lat=19.0, lng=72.0, accuracy=-1)

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Coordinates(lat=float("nan"), lng=72.0)

    def test_bounding_box_helper(self) -> None:
        assert is_within_india(23.0, 80.0) is True
        assert is_within_india(40.7, -74.0) is False


# -----------------------------------------------------------------------
# LocationRecord
# -----------------------------------------------------------------------


class TestLocationRecord:
    @pytest.mark.parametrize("pincode", ["400001", "110001", "999999"])
    def test_valid_pincodes(self, pincode: str) -> None:
        assert _record(pincode=pincode).pincode == pincode
        assert is_valid_pincode(pincode)

    @pytest.mark.parametrize("pincode", ["012345", "40001", "4000011", "40000A", ""])
    def test_invalid_pincode_raises(self, pincode: str) -> None:
        with pytest.raises(LocationValidationError):
            _record(pincode=pincode)

    def test_defaults(self) -> None:
        record = _record()
        assert record.method == LocationMethod.GPS
        assert record.verified is False
        assert record.timestamp.tzinfo is not None, "timestamp should be timezone-aware"

    def test_formatted(self) -> None:
        assert _record().formatted == "Mumbai, Maharashtra"

    def test_records_are_immutable(self) -> None:
        record = _record()
        with pytest.raises(ValidationError):
            record.city = "Pune"

    def test_history_entry_keeps_trimmed_fields(self) -> None:
        when = datetime(2024, 1, 1, tzinfo=UTC)
        entry = _record(address="Gateway of India", timestamp=when, pincode="400001").to_history_entry()
        assert entry.city == "Mumbai"
        assert entry.address == "Gateway of India"
        assert entry.timestamp == when
        assert not hasattr(entry, "pincode")


# -----------------------------------------------------------------------
# Snapshot and provider
# -----------------------------------------------------------------------


class TestLocationSnapshot:
    def test_history_longer_than_three_rejected(self) -> None:
        record = _record()
        entry = record.to_history_entry()
        with pytest.raises(ValidationError):
            LocationSnapshot(
                entity_id="u1",
                current=record,
                history=(entry, entry, entry, entry),
                approximate={
                    "city": "Mumbai",
                    "state": "Maharashtra",
                    "region": Region.WEST,
                    "last_updated": datetime.now(UTC),
                },
            )

    def test_coordinates_shortcut(self) -> None:
        record = _record()
        snapshot = LocationSnapshot(
            entity_id="u1",
            current=record,
            approximate={
                "city": "Mumbai",
                "state": "Maharashtra",
                "region": Region.WEST,
                "last_updated": datetime.now(UTC),
            },
        )
        assert snapshot.coordinates == record.coordinates
        assert snapshot.version == 1


class TestServiceProvider:
    def test_default_radius(self) -> None:
        provider = ServiceProvider(
            provider_id="p1", name="Ravi", coordinates=Coordinates(lat=19.1, lng=72.9)
        )
        assert provider.service_radius_km == 10.0
        assert provider.role == "fixer"

    @pytest.mark.parametrize("radius", [0, 0.5, 101])
    def test_radius_out_of_range(self, radius: float) -> None:
        with pytest.raises(ValidationError):
            ServiceProvider(
                provider_id="p1",
                name="Ravi",
                coordinates=Coordinates(lat=19.1, lng=72.9),
                service_radius_km=radius,
            )
