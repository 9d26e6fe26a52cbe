"""Translate storefront records into catalog entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stallion_checkout.domain.model import Country, Distributor, Event, Party

if TYPE_CHECKING:
    from .schema import CountryRecord, DistributorRecord, EventRecord, PartyRecord


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def parse_party(record: PartyRecord) -> Party:
    return Party(
        id=record.party_id,
        name=record.party_name,
        phone=_clean(record.phone),
        country_id=_clean(record.country_id),
        distributor_id=_clean(record.distributor_id),
        zone_id=_clean(record.zone_id),
    )


def parse_distributor(record: DistributorRecord) -> Distributor:
    return Distributor(
        id=record.distributor_id,
        name=record.distributor_name,
        country_id=_clean(record.country_id),
        zone_id=_clean(record.zone_id),
    )


def parse_country(record: CountryRecord) -> Country:
    return Country(id=record.country_id, name=record.country_name)


def parse_event(record: EventRecord) -> Event:
    return Event(
        id=record.event_id,
        name=record.event_name,
        event_date=record.event_date,
        status=record.event_status,
    )


__all__ = ["parse_country", "parse_distributor", "parse_event", "parse_party"]
