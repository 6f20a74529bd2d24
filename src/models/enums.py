from __future__ import annotations

from enum import StrEnum


class LocationMethod(StrEnum):
    __slots__ = ()

    GPS = "gps"
    MANUAL = "manual"
    AUTO = "auto"


class Region(StrEnum):
    __slots__ = ()

    NORTH = "North India"
    SOUTH = "South India"
    EAST = "East India"
    WEST = "West India"
    NORTHEAST = "Northeast India"
    CENTRAL = "Central India"
    INDIA = "India"  # fallback for states outside the region table


class ProviderRole(StrEnum):
    """Roles an owning entity can hold in the marketplace."""

    __slots__ = ()

    FIXER = "fixer"
    HIRER = "hirer"
