"""Port for the device location capability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from stallion_checkout.domain.model import GeoPoint


@runtime_checkable
class LocationProvider(Protocol):
    """Return the current position or raise ``GeolocationError``."""

    async def current_position(self) -> GeoPoint: ...


__all__ = ["LocationProvider"]
