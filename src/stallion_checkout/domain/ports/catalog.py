"""Port for read-only catalog lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stallion_checkout.domain.model import Country, Distributor, Event, Party


@runtime_checkable
class CatalogLookup(Protocol):
    """Fetch catalog entities by simple filters.

    Every call may fail independently with ``CatalogLookupError``; callers decide
    whether a failure is fatal. Implementations that keep a connection may also be
    async context managers; the resolution engine holds them open per resolution.
    """

    async def get_countries(self) -> Sequence[Country]: ...

    async def get_parties(self, country_id: str | None = None) -> Sequence[Party]: ...

    async def get_party_by_id(self, party_id: str) -> Party | None: ...

    async def get_distributors(self, country_id: str | None = None) -> Sequence[Distributor]: ...

    async def get_events(self) -> Sequence[Event]: ...

    async def get_parties_by_zone(self) -> Sequence[Party]: ...


__all__ = ["CatalogLookup"]
