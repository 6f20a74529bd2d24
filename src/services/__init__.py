"""Fixly location service layer -- gazetteer, search, proximity, geocoding and history."""

from __future__ import annotations

from src.services.cache import CacheManager, InMemoryCacheBackend, RedisCacheBackend
from src.services.gazetteer import Gazetteer
from src.services.location_history import (
    InMemoryLocationStore,
    LocationHistoryTracker,
    RedisLocationStore,
)
from src.services.proximity import NearbyMatch, ProximityMatcher, haversine_km
from src.services.regions import approximate_location, region_for_state
from src.services.search import DebouncedSearch, SearchRanker

__all__ = [
    "CacheManager",
    "DebouncedSearch",
    "Gazetteer",
    "InMemoryCacheBackend",
    "InMemoryLocationStore",
    "LocationHistoryTracker",
    "NearbyMatch",
    "ProximityMatcher",
    "RedisCacheBackend",
    "RedisLocationStore",
    "SearchRanker",
    "approximate_location",
    "haversine_km",
    "region_for_state",
]
