"""Device / browser geolocation as a pluggable source.

The server never talks to a GPS chip; a position (or a fault) is reported
by the client application and wrapped in a :class:`DeviceLocationSource`
so the resolver can treat it like any other asynchronous position feed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from src.exceptions import DeviceLocationError


@dataclass(frozen=True, slots=True)
class DevicePosition:
    lat: float
    lng: float
    accuracy: float | None = None


@runtime_checkable
class DeviceLocationSource(Protocol):
    """Produces the current device position or raises :class:`DeviceLocationError`."""

    async def current_position(self) -> DevicePosition: ...


class ReportedDeviceLocation:
    """Position (or geolocation error code) reported by the browser client.

    Exactly one of *position* or *error_code* must be given.  Error codes
    follow ``GeolocationPositionError``: 1 permission denied, 2 position
    unavailable, 3 timeout.
    """

    __slots__ = ("_error_code", "_position")

    def __init__(
        self,
        position: DevicePosition | None = None,
        error_code: int | None = None,
    ) -> None:
        if (position is None) == (error_code is None):
            raise ValueError("Provide exactly one of position or error_code")
        self._position = position
        self._error_code = error_code

    async def current_position(self) -> DevicePosition:
        if self._error_code is not None:
            raise DeviceLocationError.from_code(self._error_code)
        assert self._position is not None
        return self._position
