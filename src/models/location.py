"""Location records, history and derived summaries.

A :class:`LocationRecord` is the normalised result of resolving free text,
a GPS fix or a place selection.  Every record carries validated
:class:`Coordinates`; the country bounding box and the pincode format are
enforced at construction time so an invalid value can never be stored.

Records are immutable.  An owning entity's location changes only by
replacing the whole :class:`LocationSnapshot` (current record, history and
approximate location together).
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Final

from pydantic import BaseModel, Field, field_validator, model_validator

from src.exceptions import LocationValidationError, OutOfServiceAreaError
from src.models.enums import LocationMethod, Region

# ---------------------------------------------------------------------------
# Data contracts
# ---------------------------------------------------------------------------

LAT_MIN: Final[float] = 6.0
LAT_MAX: Final[float] = 37.6
LNG_MIN: Final[float] = 68.0
LNG_MAX: Final[float] = 97.25

MAX_HISTORY: Final[int] = 3

_PINCODE_RE: Final[re.Pattern[str]] = re.compile(r"^[1-9][0-9]{5}$")


def is_within_india(lat: float, lng: float) -> bool:
    """Return *True* when the point lies inside India's bounding box."""
    return LAT_MIN <= lat <= LAT_MAX and LNG_MIN <= lng <= LNG_MAX


def is_valid_pincode(pincode: str) -> bool:
    """Return *True* for a six-digit Indian PIN code with leading digit 1-9."""
    return bool(_PINCODE_RE.match(pincode))


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Coordinates(BaseModel):
    """A point inside the service area, in decimal degrees."""

    model_config = {"frozen": True}

    lat: float = Field(..., allow_inf_nan=False)
    lng: float = Field(..., allow_inf_nan=False)
    accuracy: float | None = Field(default=None, ge=0, description="GPS accuracy in metres")

    @field_validator("lat", "lng")
    @classmethod
    def round_precision(cls, v: float) -> float:
        """Round to 6 decimal places (~11cm precision)."""
        return round(v, 6)

    @model_validator(mode="after")
    def check_service_area(self) -> Coordinates:
        if not is_within_india(self.lat, self.lng):
            raise OutOfServiceAreaError(self.lat, self.lng)
        return self


class LocationHistoryEntry(BaseModel):
    """Trimmed copy of a superseded :class:`LocationRecord`."""

    model_config = {"frozen": True}

    coordinates: Coordinates
    address: str | None = None
    city: str
    state: str
    timestamp: datetime
    method: LocationMethod


class LocationRecord(BaseModel):
    """Normalised location of an owning entity (user, fixer, job site)."""

    model_config = {"frozen": True}

    coordinates: Coordinates
    address: str | None = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    state_code: str = Field(..., min_length=1, max_length=8)
    pincode: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)
    verified: bool = False
    method: LocationMethod = LocationMethod.GPS

    @field_validator("pincode")
    @classmethod
    def check_pincode(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_pincode(v):
            raise LocationValidationError(f"Invalid Indian pincode: {v!r}")
        return v

    @property
    def formatted(self) -> str:
        """Human-readable "City, State" label."""
        parts = [part for part in (self.city, self.state) if part]
        return ", ".join(parts) or "Unknown Location"

    def to_history_entry(self) -> LocationHistoryEntry:
        return LocationHistoryEntry(
            coordinates=self.coordinates,
            address=self.address,
            city=self.city,
            state=self.state,
            timestamp=self.timestamp,
            method=self.method,
        )


class ApproximateLocation(BaseModel):
    """Privacy-reduced summary derived from the precise current location."""

    model_config = {"frozen": True}

    city: str
    state: str
    region: Region
    last_updated: datetime


class LocationSnapshot(BaseModel):
    """Everything an owning entity stores about its location.

    The three location fields are always written together; a reader sees
    one complete snapshot or another, never a mix.
    """

    model_config = {"frozen": True}

    entity_id: str
    role: str | None = None
    current: LocationRecord
    history: tuple[LocationHistoryEntry, ...] = Field(default=(), max_length=MAX_HISTORY)
    approximate: ApproximateLocation
    version: int = Field(default=1, ge=1)

    @property
    def coordinates(self) -> Coordinates:
        return self.current.coordinates


class SearchResult(BaseModel):
    """A gazetteer city matched by a text query."""

    model_config = {"frozen": True}

    city: str
    state: str
    state_code: str
    lat: float
    lng: float


class PlacePrediction(BaseModel):
    """A single autocomplete suggestion from the places provider."""

    place_id: str
    description: str
    main_text: str
    secondary_text: str | None = None
    types: list[str] = Field(default_factory=list)
