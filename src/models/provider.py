"""Service providers as candidates for proximity matching."""

from __future__ import annotations

from pydantic import BaseModel, Field

from src.models.location import Coordinates


class ServiceProvider(BaseModel):
    """A fixer (or any role) with a working location and service radius."""

    provider_id: str
    name: str
    role: str = "fixer"
    coordinates: Coordinates
    skills: list[str] = Field(default_factory=list)
    service_radius_km: float = Field(default=10.0, ge=1, le=100)
