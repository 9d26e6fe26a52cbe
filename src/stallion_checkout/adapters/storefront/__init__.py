"""Public interface for the storefront REST adapter."""

from __future__ import annotations

from .client import ClientFactory, StorefrontCatalogClient
from .orders import StorefrontOrderSubmitter
from .schema import (
    CountryRecord,
    DistributorRecord,
    EventRecord,
    OrderCreatedBody,
    PartyRecord,
)
from .translator import parse_country, parse_distributor, parse_event, parse_party

__all__ = [
    "ClientFactory",
    "CountryRecord",
    "DistributorRecord",
    "EventRecord",
    "OrderCreatedBody",
    "PartyRecord",
    "StorefrontCatalogClient",
    "StorefrontOrderSubmitter",
    "parse_country",
    "parse_distributor",
    "parse_event",
    "parse_party",
]
