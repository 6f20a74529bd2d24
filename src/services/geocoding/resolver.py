"""Turns addresses, GPS fixes and place selections into :class:`LocationRecord`.

Every path ends in the same place: a provider payload is classified by
:mod:`src.services.geocoding.parser`, coordinates are checked against the
service-area box, and the address components are normalised into a
record.  When the provider gives coordinates but no usable city/state the
nearest gazetteer city stands in.

The resolver never retries.  Each provider call is bounded by a timeout
and failures surface as :class:`GeocodingError` with a reason the caller
can act on (offer manual search, ask again, give up).  Only successful
records are cached.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

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
from src.models.gazetteer import City
from src.models.location import Coordinates, LocationRecord, PlacePrediction, is_valid_pincode
from src.services.cache import stable_hash
from src.services.geocoding.device import DeviceLocationSource
from src.services.geocoding.parser import (
    ComponentsResult,
    GeocodeOutcome,
    ProviderFailure,
    derive_state_code,
    parse_autocomplete_response,
    parse_geocode_response,
    parse_place_details_response,
)

if TYPE_CHECKING:
    from src.services.cache import CacheManager
    from src.services.geocoding.client import GoogleMapsClient

logger = structlog.get_logger(__name__)

T = TypeVar("T")

NearestCity = Callable[[float, float], City | None]

MIN_AUTOCOMPLETE_CHARS = 3
SERVICE_COUNTRY = "IN"


class GeoResolver:
    """Geocoding facade used by the API and by device-location flows.

    Parameters
    ----------
    provider:
        Maps client.  ``None`` disables forward geocoding, autocomplete
        and place details; reverse geocoding then relies on the gazetteer.
    cache:
        Optional :class:`CacheManager` for successful records.
    nearest_city:
        Callable returning the closest gazetteer city to a point, e.g.
        :meth:`ProximityMatcher.nearest_city`.
    timeout:
        Upper bound in seconds on each provider or device call.
    cache_ttl:
        Lifetime of cached records in seconds.
    """

    __slots__ = ("_cache", "_cache_ttl", "_nearest_city", "_provider", "_timeout")

    def __init__(
        self,
        provider: GoogleMapsClient | None = None,
        *,
        cache: CacheManager | None = None,
        nearest_city: NearestCity | None = None,
        timeout: float = 10.0,
        cache_ttl: int = 86_400,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._nearest_city = nearest_city
        self._timeout = timeout
        self._cache_ttl = cache_ttl

    @property
    def has_provider(self) -> bool:
        return self._provider is not None

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def forward_geocode(self, address_text: str) -> LocationRecord:
        """Resolve free-text *address_text* to a ``manual`` record."""
        text = address_text.strip()
        if not text:
            raise LocationValidationError("Address text must not be empty")
        provider = self._require_provider()

        cache_key = f"fwd:{stable_hash(text.lower())}"
        cached = await self._cached_record(cache_key)
        if cached is not None:
            return cached

        payload = await self._bounded(provider.geocode(text))
        outcome = self._parse(parse_geocode_response, payload)
        record = self._to_record(outcome, LocationMethod.MANUAL, address_hint=text)

        await self._store(cache_key, record)
        logger.info("geo_resolver.forward_geocode", city=record.city, state=record.state)
        return record

    async def reverse_geocode(
        self, lat: float, lng: float, accuracy: float | None = None
    ) -> LocationRecord:
        """Resolve a GPS fix to a ``gps`` record.

        The point is validated before any network call, so an
        out-of-area fix raises :class:`OutOfServiceAreaError` immediately.
        The returned record keeps the caller's coordinates, but a match
        whose own point or country lies outside India is still rejected.
        """
        coordinates = Coordinates(lat=lat, lng=lng, accuracy=accuracy)

        if self._provider is None:
            record = self._from_nearest_city(coordinates, LocationMethod.GPS, address=None, pincode=None)
            logger.info("geo_resolver.reverse_geocode.gazetteer", city=record.city, state=record.state)
            return record

        cache_key = f"rev:{coordinates.lat:.5f},{coordinates.lng:.5f}"
        cached = await self._cached_record(cache_key)
        if cached is not None:
            return cached.model_copy(update={"coordinates": coordinates})

        payload = await self._bounded(self._provider.reverse_geocode(coordinates.lat, coordinates.lng))
        outcome = self._parse(parse_geocode_response, payload)
        record = self._to_record(outcome, LocationMethod.GPS, coordinates=coordinates)

        await self._store(cache_key, record)
        logger.info("geo_resolver.reverse_geocode", city=record.city, state=record.state)
        return record

    async def current_device_location(self, source: DeviceLocationSource) -> LocationRecord:
        """Read a position from *source* and reverse-geocode it.

        Raises
        ------
        DeviceLocationError
            Permission denied, position unavailable, or no position within
            the timeout.
        """
        try:
            position = await asyncio.wait_for(source.current_position(), timeout=self._timeout)
        except TimeoutError as exc:
            logger.warning("geo_resolver.device_timeout", timeout=self._timeout)
            raise DeviceLocationError(DeviceLocationFailure.TIMEOUT) from exc
        except DeviceLocationError as exc:
            logger.warning("geo_resolver.device_error", reason=exc.reason)
            raise

        record = await self.reverse_geocode(position.lat, position.lng, accuracy=position.accuracy)
        return record.model_copy(update={"verified": True})

    async def autocomplete(
        self, text: str, near: Coordinates | None = None
    ) -> list[PlacePrediction]:
        """City suggestions for partial *text*; fewer than 3 characters yields ``[]``."""
        query = text.strip()
        if len(query) < MIN_AUTOCOMPLETE_CHARS:
            return []
        provider = self._require_provider()

        bias = (near.lat, near.lng) if near is not None else None
        payload = await self._bounded(provider.autocomplete(query, bias))
        result = self._parse(parse_autocomplete_response, payload)
        if isinstance(result, ProviderFailure):
            raise GeocodingError(result.reason, result.message or result.status)

        logger.debug("geo_resolver.autocomplete", query=query, results_count=len(result))
        return result

    async def place_details(self, place_id: str) -> LocationRecord:
        """Resolve an autocomplete selection to a ``manual`` record."""
        provider = self._require_provider()

        cache_key = f"place:{place_id}"
        cached = await self._cached_record(cache_key)
        if cached is not None:
            return cached

        payload = await self._bounded(provider.place_details(place_id))
        outcome = self._parse(parse_place_details_response, payload)
        record = self._to_record(outcome, LocationMethod.MANUAL)

        await self._store(cache_key, record)
        logger.info("geo_resolver.place_details", place_id=place_id, city=record.city)
        return record

    # ------------------------------------------------------------------
    # Provider plumbing
    # ------------------------------------------------------------------

    def _require_provider(self) -> GoogleMapsClient:
        if self._provider is None:
            raise GeocodingError(
                GeocodingFailure.PROVIDER_ERROR,
                "No geocoding provider configured",
            )
        return self._provider

    async def _bounded(self, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except TimeoutError as exc:
            logger.warning("geo_resolver.timeout", timeout=self._timeout)
            raise GeocodingError(GeocodingFailure.TIMEOUT, "Geocoding request timed out") from exc

    @staticmethod
    def _parse(parser: Callable[[Any], T], payload: Any) -> T:
        try:
            return parser(payload)
        except ProviderParseError as exc:
            logger.warning("geo_resolver.unparseable_response", error=str(exc))
            raise

    # ------------------------------------------------------------------
    # Normalisation
    # ------------------------------------------------------------------

    def _to_record(
        self,
        outcome: GeocodeOutcome,
        method: LocationMethod,
        *,
        coordinates: Coordinates | None = None,
        address_hint: str | None = None,
    ) -> LocationRecord:
        if isinstance(outcome, ProviderFailure):
            logger.info("geo_resolver.provider_failure", status=outcome.status, reason=outcome.reason)
            raise GeocodingError(outcome.reason, outcome.message or outcome.status)

        # The provider's point is checked even when the caller's fix is kept.
        provider_point = Coordinates(lat=outcome.lat, lng=outcome.lng)
        if coordinates is None:
            coordinates = provider_point
        address = outcome.formatted_address or address_hint

        if isinstance(outcome, ComponentsResult):
            parts = outcome.components
            if parts.country_code is not None and parts.country_code.upper() != SERVICE_COUNTRY:
                logger.info("geo_resolver.foreign_result", country=parts.country_code)
                raise OutOfServiceAreaError(outcome.lat, outcome.lng)
            pincode = self._checked_pincode(parts.postal_code)
            if parts.city and parts.state:
                return LocationRecord(
                    coordinates=coordinates,
                    address=address,
                    city=parts.city,
                    state=parts.state,
                    state_code=derive_state_code(parts.state, parts.state_short),
                    pincode=pincode,
                    method=method,
                )
            return self._from_nearest_city(coordinates, method, address=address, pincode=pincode)

        return self._from_nearest_city(coordinates, method, address=address, pincode=None)

    def _from_nearest_city(
        self,
        coordinates: Coordinates,
        method: LocationMethod,
        *,
        address: str | None,
        pincode: str | None,
    ) -> LocationRecord:
        city = self._nearest_city(coordinates.lat, coordinates.lng) if self._nearest_city else None
        if city is None:
            raise GeocodingError(
                GeocodingFailure.NO_RESULT,
                f"No city found near ({coordinates.lat}, {coordinates.lng})",
            )
        return LocationRecord(
            coordinates=coordinates,
            address=address,
            city=city.name,
            state=city.state,
            state_code=city.state_code,
            pincode=pincode,
            method=method,
        )

    @staticmethod
    def _checked_pincode(postal_code: str | None) -> str | None:
        if postal_code is None:
            return None
        candidate = postal_code.replace(" ", "")
        if is_valid_pincode(candidate):
            return candidate
        logger.warning("geo_resolver.invalid_pincode_dropped", postal_code=postal_code)
        return None

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    async def _cached_record(self, key: str) -> LocationRecord | None:
        if self._cache is None:
            return None
        raw = await self._cache.get(key)
        if raw is None:
            return None
        logger.debug("geo_resolver.cache_hit", key=key)
        return LocationRecord.model_validate(raw).model_copy(
            update={"timestamp": datetime.now(UTC)}
        )

    async def _store(self, key: str, record: LocationRecord) -> None:
        if self._cache is not None:
            await self._cache.set(key, record.model_dump(mode="json"), ttl_seconds=self._cache_ttl)
