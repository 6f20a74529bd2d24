"""Radius-bounded nearest-neighbour matching.

Distances are great-circle (Haversine) distances on a spherical Earth.
Matching is a linear scan over the candidate set, which is fine for the
few thousand candidates a single city holds; a geohash or R-tree index
would be needed well before the candidate set reaches city-wide provider
counts across the country.

The same matcher serves "nearest city to a GPS fix" (candidates are
gazetteer cities) and "service providers within radius" (candidates are
providers or located users).
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Final, Generic, TypeVar

import structlog

from src.exceptions import LocationValidationError
from src.models.gazetteer import City
from src.models.location import Coordinates
from src.services.gazetteer import Gazetteer

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_EARTH_RADIUS_KM: Final[float] = 6371.0

MIN_RADIUS_KM: Final[float] = 1.0
MAX_RADIUS_KM: Final[float] = 100.0


# ---------------------------------------------------------------------------
# Haversine distance calculation
# ---------------------------------------------------------------------------


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Calculate the great-circle distance between two points on Earth.

    Parameters
    ----------
    lat1, lng1:
        Latitude and longitude of point 1 in decimal degrees.
    lat2, lng2:
        Latitude and longitude of point 2 in decimal degrees.

    Returns
    -------
    float
        Distance in kilometres.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return _EARTH_RADIUS_KM * c


def position_of(candidate: Any) -> tuple[float, float] | None:
    """Extract ``(lat, lng)`` from a candidate.

    Accepts objects exposing ``lat``/``lng`` directly (cities, coordinates)
    or through a ``coordinates`` attribute (providers, location snapshots).
    Returns ``None`` for candidates without a position.
    """
    point = getattr(candidate, "coordinates", candidate)
    lat = getattr(point, "lat", None)
    lng = getattr(point, "lng", None)
    if lat is None or lng is None:
        return None
    return float(lat), float(lng)


@dataclass(frozen=True, slots=True)
class NearbyMatch(Generic[T]):
    candidate: T
    distance_km: float


# ---------------------------------------------------------------------------
# Matcher
# ---------------------------------------------------------------------------


class ProximityMatcher:
    """Finds candidates within a radius of an origin, nearest first.

    Usage::

        matcher = ProximityMatcher(gazetteer)

        matcher.nearby_cities(19.07, 72.88, radius_km=50)
        matcher.nearest_city(18.52, 73.85)
        matcher.nearby(19.07, 72.88, 10, providers, role="fixer")
    """

    __slots__ = ("_gazetteer",)

    def __init__(self, gazetteer: Gazetteer) -> None:
        self._gazetteer = gazetteer

    def nearby(
        self,
        lat: float,
        lng: float,
        radius_km: float,
        candidates: Iterable[T],
        role: str | None = None,
    ) -> list[NearbyMatch[T]]:
        """Return candidates within *radius_km* of the origin, ascending.

        Raises
        ------
        LocationValidationError
            If *radius_km* is outside 1-100 km.
        OutOfServiceAreaError
            If the origin is outside the service area.
        """
        if not MIN_RADIUS_KM <= radius_km <= MAX_RADIUS_KM:
            raise LocationValidationError(
                f"radius_km must be between {MIN_RADIUS_KM:g} and {MAX_RADIUS_KM:g}, got {radius_km}"
            )
        origin = Coordinates(lat=lat, lng=lng)

        scored: list[tuple[float, T]] = []
        for candidate in candidates:
            if role is not None and getattr(candidate, "role", None) != role:
                continue
            position = position_of(candidate)
            if position is None:
                continue
            distance = haversine_km(origin.lat, origin.lng, *position)
            if distance <= radius_km:
                scored.append((distance, candidate))

        scored.sort(key=lambda item: item[0])
        matches = [
            NearbyMatch(candidate=candidate, distance_km=round(distance, 2))
            for distance, candidate in scored
        ]

        logger.debug(
            "proximity.nearby",
            lat=origin.lat,
            lng=origin.lng,
            radius_km=radius_km,
            role=role,
            results_count=len(matches),
        )
        return matches

    def nearby_cities(
        self, lat: float, lng: float, radius_km: float
    ) -> list[NearbyMatch[City]]:
        return self.nearby(lat, lng, radius_km, self._gazetteer.cities)

    def nearest_city(
        self, lat: float, lng: float, max_km: float = MAX_RADIUS_KM
    ) -> City | None:
        """The closest gazetteer city within *max_km*, or ``None``."""
        matches = self.nearby_cities(lat, lng, max_km)
        return matches[0].candidate if matches else None
