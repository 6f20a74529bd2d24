"""Per-user location endpoints.

A user's location is read and replaced as a whole snapshot: the current
record, the three most recent superseded records and the derived
approximate (region-level) location.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from src.api.errors import http_error, service
from src.exceptions import LocationError, LocationValidationError
from src.models.enums import LocationMethod, ProviderRole
from src.models.location import Coordinates, LocationRecord, LocationSnapshot, is_valid_pincode
from src.services.geocoding.parser import derive_state_code

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class UpdateLocationRequest(BaseModel):
    """New location for a user.

    When ``city`` and ``state`` are supplied the record is stored as given
    (manual entry or an autocomplete selection).  Otherwise the point is
    reverse-geocoded to find them.
    """

    lat: float = Field(..., allow_inf_nan=False)
    lng: float = Field(..., allow_inf_nan=False)
    accuracy: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, min_length=1, max_length=100)
    state: str | None = Field(default=None, min_length=1, max_length=100)
    state_code: str | None = Field(default=None, min_length=1, max_length=8)
    pincode: str | None = None
    method: LocationMethod = LocationMethod.GPS
    role: ProviderRole | None = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/{entity_id}/location", response_model=LocationSnapshot)
async def get_user_location(entity_id: str, request: Request) -> LocationSnapshot:
    tracker = service(request, "location_tracker")
    try:
        snapshot = await tracker.get_snapshot(entity_id)
    except LocationError as exc:
        raise http_error(exc) from exc
    if snapshot is None:
        raise HTTPException(status_code=404, detail=f"No location stored for '{entity_id}'")
    return snapshot


@router.put("/{entity_id}/location", response_model=LocationSnapshot)
async def update_user_location(
    entity_id: str, body: UpdateLocationRequest, request: Request
) -> LocationSnapshot:
    """Replace the user's location; history and region are recomputed."""
    tracker = service(request, "location_tracker")

    try:
        record = await _build_record(body, request)
        snapshot = await tracker.update_location(entity_id, record, role=body.role)
    except LocationError as exc:
        raise http_error(exc) from exc

    logger.info("users.location_updated", entity_id=entity_id, version=snapshot.version)
    return snapshot


async def _build_record(body: UpdateLocationRequest, request: Request) -> LocationRecord:
    coordinates = Coordinates(lat=body.lat, lng=body.lng, accuracy=body.accuracy)

    if body.city and body.state:
        gazetteer = service(request, "gazetteer")
        state_code = body.state_code
        if not state_code:
            known = gazetteer.state_by_name(body.state)
            state_code = known.code if known is not None else derive_state_code(body.state)
        return LocationRecord(
            coordinates=coordinates,
            address=body.address,
            city=body.city,
            state=body.state,
            state_code=state_code,
            pincode=body.pincode,
            method=body.method,
        )

    if body.pincode is not None and not is_valid_pincode(body.pincode):
        raise LocationValidationError(f"Invalid Indian pincode: {body.pincode!r}")
    resolver = service(request, "geo_resolver")
    resolved = await resolver.reverse_geocode(coordinates.lat, coordinates.lng, accuracy=body.accuracy)

    update: dict = {"method": body.method}
    if body.address:
        update["address"] = body.address
    if body.pincode:
        update["pincode"] = body.pincode
    return resolved.model_copy(update=update)
