"""Translation of location-core exceptions into HTTP errors.

Services raise the typed errors from :mod:`src.exceptions`; routes catch
them and re-raise the :class:`HTTPException` built here.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request

from src.exceptions import (
    DeviceLocationError,
    GeocodingError,
    GeocodingFailure,
    LocationError,
    LocationStoreError,
    OutOfServiceAreaError,
    SnapshotConflictError,
)

_GEOCODING_STATUS: dict[GeocodingFailure, int] = {
    GeocodingFailure.NO_RESULT: 404,
    GeocodingFailure.TIMEOUT: 504,
    GeocodingFailure.PROVIDER_ERROR: 502,
}


def http_error(exc: LocationError) -> HTTPException:
    """Map a location-core exception to the matching HTTP status."""
    if isinstance(exc, OutOfServiceAreaError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, GeocodingError):
        return HTTPException(
            status_code=_GEOCODING_STATUS[exc.reason],
            detail={"reason": exc.reason.value, "message": str(exc)},
        )
    if isinstance(exc, SnapshotConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, LocationStoreError):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, DeviceLocationError):
        return HTTPException(
            status_code=400,
            detail={"reason": exc.reason.value, "message": str(exc)},
        )
    return HTTPException(status_code=400, detail=str(exc))


def service(request: Request, name: str) -> Any:
    """Fetch a service from ``app.state`` or fail with 503."""
    svc = getattr(request.app.state, name, None)
    if svc is None:
        raise HTTPException(status_code=503, detail=f"Service '{name}' not available")
    return svc
