"""Catalog entities and checkout inputs.

All records are read-only snapshots: the resolution engine never mutates them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class Actor:
    """The authenticated user placing the order."""

    id: str
    role: str | None
    phone: str | None = None
    party_id: str | None = None
    distributor_id: str | None = None
    zone_id: str | None = None
    salesman_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Party:
    id: str
    name: str | None = None
    phone: str | None = None
    country_id: str | None = None
    distributor_id: str | None = None
    zone_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Distributor:
    id: str
    name: str | None = None
    country_id: str | None = None
    zone_id: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Country:
    id: str
    name: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Event:
    id: str
    name: str | None = None
    event_date: str | None = None
    status: str | None = None


@dataclass(frozen=True, slots=True)
class GeoPoint:
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        return (
            _is_real(self.latitude)
            and _is_real(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )


def _is_real(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True, slots=True)
class Selections:
    """User choices made in the checkout UI.

    ``party`` and ``event`` accept either the record picked from a dropdown or a
    bare identifier.
    """

    party: Party | str | None = None
    event: Event | str | None = None

    @property
    def party_id(self) -> str | None:
        if isinstance(self.party, Party):
            return self.party.id
        return _blank_to_none(self.party)

    @property
    def party_record(self) -> Party | None:
        return self.party if isinstance(self.party, Party) else None

    @property
    def event_id(self) -> str | None:
        if isinstance(self.event, Event):
            return self.event.id
        return _blank_to_none(self.event)


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()
