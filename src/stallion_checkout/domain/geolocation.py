"""Single-shot device location acquisition."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from stallion_checkout.config.checkout import DEFAULT_GEOLOCATION_TIMEOUT_SECONDS
from stallion_checkout.domain.errors import GeolocationError

if TYPE_CHECKING:
    from stallion_checkout.domain.model import GeoPoint
    from stallion_checkout.domain.ports.location import LocationProvider


async def acquire_location(
    provider: LocationProvider | None,
    *,
    timeout_seconds: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
) -> GeoPoint:
    """Ask the provider once for the current position.

    Nothing is cached: every checkout attempt asks again.
    """

    if provider is None:
        raise GeolocationError("location is not supported on this device")
    try:
        async with asyncio.timeout(timeout_seconds):
            point = await provider.current_position()
    except TimeoutError as exc:
        raise GeolocationError(f"location request timed out after {timeout_seconds:g}s") from exc
    if not point.is_valid:
        raise GeolocationError(
            f"location provider returned invalid coordinates ({point.latitude}, {point.longitude})"
        )
    return point


__all__ = ["acquire_location"]
