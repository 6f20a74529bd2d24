"""Location search, resolution and proximity endpoints.

Provides endpoints for:
    * City search over the gazetteer and state / city listings
    * Resolving an address, a GPS fix or a device report to a location
    * Place autocomplete and place details
    * Finding located users and cities within a radius
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from src.api.errors import http_error, service
from src.exceptions import LocationError
from src.models.gazetteer import City, State
from src.models.location import Coordinates, LocationRecord, PlacePrediction, SearchResult
from src.services.geocoding.device import DevicePosition, ReportedDeviceLocation

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/locations", tags=["locations"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------


class ResolveAddressRequest(BaseModel):
    address: str = Field(..., min_length=1, max_length=500)


class ResolveCoordinatesRequest(BaseModel):
    lat: float = Field(..., allow_inf_nan=False)
    lng: float = Field(..., allow_inf_nan=False)
    accuracy: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class DeviceReportRequest(BaseModel):
    """A browser geolocation result: either a fix or an error code (1/2/3)."""

    lat: float | None = Field(default=None, allow_inf_nan=False)
    lng: float | None = Field(default=None, allow_inf_nan=False)
    accuracy: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    error_code: int | None = None


class NearbyEntity(BaseModel):
    entity_id: str
    role: str | None = None
    city: str
    state: str
    distance_km: float


class NearbyCity(BaseModel):
    city: City
    distance_km: float


# ---------------------------------------------------------------------------
# Gazetteer
# ---------------------------------------------------------------------------


@router.get("/search", response_model=list[SearchResult])
async def search_cities(
    request: Request,
    q: str = "",
    state: str | None = None,
    limit: int | None = None,
) -> list[SearchResult]:
    """Rank gazetteer cities against *q*; a blank query returns ``[]``."""
    ranker = service(request, "search_ranker")
    if limit is None:
        limit = request.app.state.search_default_limit
    try:
        return ranker.search(q, state_filter=state, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/states", response_model=list[State])
async def list_states(request: Request) -> list[State]:
    return list(service(request, "gazetteer").states)


@router.get("/states/{code}/cities", response_model=list[City])
async def list_state_cities(code: str, request: Request) -> list[City]:
    gazetteer = service(request, "gazetteer")
    if gazetteer.state_by_code(code) is None:
        raise HTTPException(status_code=404, detail=f"Unknown state code: {code}")
    return gazetteer.cities_by_state(code)


@router.get("/cities/metro", response_model=list[City])
async def list_metro_cities(request: Request) -> list[City]:
    return service(request, "gazetteer").metro_cities()


@router.get("/cities/popular", response_model=list[City])
async def list_popular_cities(
    request: Request,
    limit: int = 20,
    min_population: int | None = None,
) -> list[City]:
    """Most populous cities, optionally only those above *min_population*."""
    gazetteer = service(request, "gazetteer")
    if min_population is not None:
        return gazetteer.cities_with_population(min_population)
    return gazetteer.popular_cities(limit=limit)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@router.post("/resolve/address", response_model=LocationRecord)
async def resolve_address(body: ResolveAddressRequest, request: Request) -> LocationRecord:
    resolver = service(request, "geo_resolver")
    try:
        return await resolver.forward_geocode(body.address)
    except LocationError as exc:
        raise http_error(exc) from exc


@router.post("/resolve/coordinates", response_model=LocationRecord)
async def resolve_coordinates(body: ResolveCoordinatesRequest, request: Request) -> LocationRecord:
    resolver = service(request, "geo_resolver")
    try:
        return await resolver.reverse_geocode(body.lat, body.lng, accuracy=body.accuracy)
    except LocationError as exc:
        raise http_error(exc) from exc


@router.post("/device", response_model=LocationRecord)
async def resolve_device_location(body: DeviceReportRequest, request: Request) -> LocationRecord:
    """Resolve a position reported by the browser's geolocation API.

    A report carrying ``error_code`` is answered with the matching
    permission / availability / timeout error.
    """
    resolver = service(request, "geo_resolver")

    position = None
    if body.lat is not None and body.lng is not None:
        position = DevicePosition(lat=body.lat, lng=body.lng, accuracy=body.accuracy)
    try:
        source = ReportedDeviceLocation(position=position, error_code=body.error_code)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        return await resolver.current_device_location(source)
    except LocationError as exc:
        raise http_error(exc) from exc


# ---------------------------------------------------------------------------
# Places
# ---------------------------------------------------------------------------


@router.get("/autocomplete", response_model=list[PlacePrediction])
async def autocomplete(
    request: Request,
    input: str = "",
    lat: float | None = Query(default=None, allow_inf_nan=False),
    lng: float | None = Query(default=None, allow_inf_nan=False),
) -> list[PlacePrediction]:
    """City suggestions for partial input, biased toward ``lat``/``lng`` when given."""
    resolver = service(request, "geo_resolver")
    try:
        near = Coordinates(lat=lat, lng=lng) if lat is not None and lng is not None else None
        return await resolver.autocomplete(input, near=near)
    except LocationError as exc:
        raise http_error(exc) from exc


@router.get("/places/{place_id}", response_model=LocationRecord)
async def place_details(place_id: str, request: Request) -> LocationRecord:
    resolver = service(request, "geo_resolver")
    try:
        return await resolver.place_details(place_id)
    except LocationError as exc:
        raise http_error(exc) from exc


# ---------------------------------------------------------------------------
# Proximity
# ---------------------------------------------------------------------------


@router.get("/nearby", response_model=list[NearbyEntity])
async def nearby_entities(
    request: Request,
    lat: float = Query(allow_inf_nan=False),
    lng: float = Query(allow_inf_nan=False),
    radius_km: float | None = Query(default=None, allow_inf_nan=False),
    role: str | None = None,
) -> list[NearbyEntity]:
    """Located users within ``radius_km`` of the point, nearest first."""
    matcher = service(request, "proximity")
    tracker = service(request, "location_tracker")
    radius = radius_km if radius_km is not None else request.app.state.default_radius_km

    try:
        snapshots = await tracker.located_entities()
        matches = matcher.nearby(lat, lng, radius, snapshots, role=role)
    except LocationError as exc:
        raise http_error(exc) from exc

    logger.info("locations.nearby", radius_km=radius, role=role, results_count=len(matches))
    return [
        NearbyEntity(
            entity_id=match.candidate.entity_id,
            role=match.candidate.role,
            city=match.candidate.current.city,
            state=match.candidate.current.state,
            distance_km=match.distance_km,
        )
        for match in matches
    ]


@router.get("/nearby/cities", response_model=list[NearbyCity])
async def nearby_cities(
    request: Request,
    lat: float = Query(allow_inf_nan=False),
    lng: float = Query(allow_inf_nan=False),
    radius_km: float = Query(default=50.0, allow_inf_nan=False),
) -> list[NearbyCity]:
    matcher = service(request, "proximity")
    try:
        matches = matcher.nearby_cities(lat, lng, radius_km)
    except LocationError as exc:
        raise http_error(exc) from exc
    return [NearbyCity(city=m.candidate, distance_km=m.distance_km) for m in matches]
