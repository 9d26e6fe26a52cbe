"""Reusable fakes and helpers for checkout tests."""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING

from stallion_checkout.domain.errors import CatalogLookupError
from stallion_checkout.domain.model import Actor, Country, Distributor, Event, Party
from stallion_checkout.domain.ports.submission import OrderSubmissionResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence


def make_token(claims: Mapping[str, object]) -> str:
    """Build an unsigned JWT-shaped token carrying ``claims``."""

    def segment(data: Mapping[str, object]) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return f"{segment({'alg': 'HS256', 'typ': 'JWT'})}.{segment(claims)}.signature"


def party_actor(phone: str | None = "+919876543210", **overrides: str | None) -> Actor:
    return Actor(id=overrides.pop("id", "U1") or "U1", role="party", phone=phone, **overrides)


def distributor_actor(**overrides: str | None) -> Actor:
    fields: dict[str, str | None] = {"distributor_id": "D1", "zone_id": "Z9"}
    fields.update(overrides)
    return Actor(id="U2", role="distributor", **fields)


def salesman_actor(**overrides: str | None) -> Actor:
    fields: dict[str, str | None] = {"salesman_id": "S1"}
    fields.update(overrides)
    return Actor(id=fields.pop("id", "U3") or "U3", role="salesman", **fields)


class FakeCatalog:
    """In-memory implementation of the catalog lookup port.

    ``failing`` holds ``(operation, scope)`` pairs that raise ``CatalogLookupError``;
    use ``("get_countries", None)`` to fail the country list.
    """

    def __init__(
        self,
        *,
        countries: Sequence[str] = (),
        parties: Mapping[str | None, Sequence[Party]] | None = None,
        party_records: Mapping[str, Party] | None = None,
        distributors: Mapping[str | None, Sequence[Distributor]] | None = None,
        events: Sequence[Event] = (),
        zone_parties: Sequence[Party] = (),
        failing: Iterable[tuple[str, str | None]] = (),
    ) -> None:
        self._countries = [Country(id=country_id) for country_id in countries]
        self._parties = dict(parties or {})
        self._party_records = dict(party_records or {})
        self._distributors = dict(distributors or {})
        self._events = list(events)
        self._zone_parties = list(zone_parties)
        self._failing = set(failing)
        self.calls: list[tuple[str, str | None]] = []

    def _record(self, operation: str, scope: str | None) -> None:
        self.calls.append((operation, scope))
        if (operation, scope) in self._failing:
            raise CatalogLookupError(operation, f"simulated failure for {scope}")

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    async def get_countries(self) -> list[Country]:
        self._record("get_countries", None)
        return list(self._countries)

    async def get_parties(self, country_id: str | None = None) -> list[Party]:
        self._record("get_parties", country_id)
        if country_id is None and None not in self._parties:
            return [party for group in self._parties.values() for party in group]
        return list(self._parties.get(country_id, ()))

    async def get_party_by_id(self, party_id: str) -> Party | None:
        self._record("get_party_by_id", party_id)
        return self._party_records.get(party_id)

    async def get_distributors(self, country_id: str | None = None) -> list[Distributor]:
        self._record("get_distributors", country_id)
        if country_id is None and None not in self._distributors:
            return [item for group in self._distributors.values() for item in group]
        return list(self._distributors.get(country_id, ()))

    async def get_events(self) -> list[Event]:
        self._record("get_events", None)
        return list(self._events)

    async def get_parties_by_zone(self) -> list[Party]:
        self._record("get_parties_by_zone", None)
        return list(self._zone_parties)


class FakeSubmitter:
    """Order submitter that records payloads instead of posting them."""

    def __init__(self, order_id: str = "ORD-1") -> None:
        self._order_id = order_id
        self.payloads: list[dict[str, object]] = []

    async def submit_order(self, payload: Mapping[str, object]) -> OrderSubmissionResult:
        self.payloads.append(dict(payload))
        return OrderSubmissionResult(order_id=self._order_id, raw={"order_id": self._order_id})
