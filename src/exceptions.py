"""Error taxonomy for location resolution and geospatial matching.

Services raise these; the API layer translates them into HTTP responses.
Validation errors are raised synchronously at the boundary, before any
state is touched, so a failed call never leaves a partial write behind.
"""

from __future__ import annotations

from enum import StrEnum


class GeocodingFailure(StrEnum):
    __slots__ = ()

    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    NO_RESULT = "no_result"


class DeviceLocationFailure(StrEnum):
    __slots__ = ()

    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"


class LocationError(Exception):
    """Base class for every error raised by the location core."""


class LocationValidationError(LocationError):
    """Input failed a data-contract check (coordinates, pincode, radius).

    Deliberately not a ``ValueError``: pydantic validators let it propagate
    unwrapped instead of folding it into a ``pydantic.ValidationError``.
    """


class OutOfServiceAreaError(LocationValidationError):
    """Coordinates fall outside the supported country bounding box."""

    def __init__(self, lat: float, lng: float) -> None:
        self.lat = lat
        self.lng = lng
        super().__init__(
            f"Location ({lat}, {lng}) is outside the service area; "
            "it must be within India"
        )


class GeocodingError(LocationError):
    """The geocoding / places provider could not produce a result."""

    def __init__(self, reason: GeocodingFailure, message: str = "") -> None:
        self.reason = reason
        super().__init__(message or reason.value)


class ProviderParseError(GeocodingError):
    """The provider returned a payload shape we do not recognise."""

    def __init__(self, message: str) -> None:
        super().__init__(GeocodingFailure.PROVIDER_ERROR, message)


class DeviceLocationError(LocationError):
    """The device / browser geolocation API did not deliver a position."""

    # W3C GeolocationPositionError codes.
    _CODES: dict[int, DeviceLocationFailure] = {
        1: DeviceLocationFailure.PERMISSION_DENIED,
        2: DeviceLocationFailure.POSITION_UNAVAILABLE,
        3: DeviceLocationFailure.TIMEOUT,
    }

    _MESSAGES: dict[DeviceLocationFailure, str] = {
        DeviceLocationFailure.PERMISSION_DENIED: "Location access denied. Please enable location permissions.",
        DeviceLocationFailure.POSITION_UNAVAILABLE: "Location information is unavailable.",
        DeviceLocationFailure.TIMEOUT: "Location request timed out.",
    }

    def __init__(self, reason: DeviceLocationFailure, message: str = "") -> None:
        self.reason = reason
        super().__init__(message or self._MESSAGES[reason])

    @classmethod
    def from_code(cls, code: int) -> DeviceLocationError:
        """Build the error for a browser ``GeolocationPositionError.code``.

        Unknown codes are reported as ``POSITION_UNAVAILABLE``.
        """
        return cls(cls._CODES.get(code, DeviceLocationFailure.POSITION_UNAVAILABLE))


class LocationStoreError(LocationError):
    """The snapshot store could not be read or written."""


class SnapshotConflictError(LocationStoreError):
    """Another writer replaced the snapshot after it was read."""

    def __init__(self, entity_id: str, expected_version: int) -> None:
        self.entity_id = entity_id
        self.expected_version = expected_version
        super().__init__(
            f"Location of '{entity_id}' changed concurrently "
            f"(expected version {expected_version})"
        )
