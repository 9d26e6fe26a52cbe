"""Domain model package exports."""

from __future__ import annotations

from .entities import Actor, Country, Distributor, Event, GeoPoint, Party, Selections
from .enums import SALESMAN_ORDER_TYPES, ActorRole, OrderProfile, OrderType

__all__ = [
    "SALESMAN_ORDER_TYPES",
    "Actor",
    "ActorRole",
    "Country",
    "Distributor",
    "Event",
    "GeoPoint",
    "OrderProfile",
    "OrderType",
    "Party",
    "Selections",
]
