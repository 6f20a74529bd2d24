"""Reference places: Indian states / union territories and cities."""

from __future__ import annotations

from pydantic import BaseModel, Field


class State(BaseModel):
    model_config = {"frozen": True}

    name: str
    code: str


class City(BaseModel):
    """A gazetteer city with its coordinates and size metadata."""

    model_config = {"frozen": True}

    id: str
    name: str
    state: str
    state_code: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    is_metro: bool = False
    population: int | None = Field(default=None, ge=0)
