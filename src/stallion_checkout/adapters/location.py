"""Location providers for environments without a device geolocation API."""

from __future__ import annotations

from dataclasses import dataclass

from stallion_checkout.domain.errors import GeolocationError
from stallion_checkout.domain.model import GeoPoint


@dataclass(frozen=True, slots=True)
class FixedLocationProvider:
    """Reports coordinates supplied up front, e.g. from ``--lat/--lon``."""

    latitude: float
    longitude: float

    async def current_position(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True, slots=True)
class UnavailableLocationProvider:
    reason: str = "location permission denied"

    async def current_position(self) -> GeoPoint:
        raise GeolocationError(self.reason)


__all__ = ["FixedLocationProvider", "UnavailableLocationProvider"]
