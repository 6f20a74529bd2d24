"""Geocoding, reverse geocoding, place autocomplete and device location."""

from src.services.geocoding.client import GoogleMapsClient
from src.services.geocoding.device import DeviceLocationSource, DevicePosition, ReportedDeviceLocation
from src.services.geocoding.resolver import GeoResolver

__all__ = [
    "DeviceLocationSource",
    "DevicePosition",
    "GeoResolver",
    "GoogleMapsClient",
    "ReportedDeviceLocation",
]
