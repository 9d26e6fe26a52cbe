"""Storefront catalog lookup client."""

from __future__ import annotations

from http import HTTPStatus
from logging import getLogger
from typing import TYPE_CHECKING, Unpack

import httpx
from pydantic import ValidationError as PydanticValidationError

from stallion_checkout.adapters.http_resilience import ResilientClient
from stallion_checkout.domain.errors import CatalogLookupError

from .schema import (
    CountryRecord,
    DistributorRecord,
    ErrorBody,
    EventRecord,
    PartyRecord,
    StorefrontBaseModel,
    unwrap_collection,
    unwrap_record,
)
from .translator import parse_country, parse_distributor, parse_event, parse_party

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from stallion_checkout.adapters.http_resilience import RequestOptions
    from stallion_checkout.config.http_resilience import ResilienceConfig
    from stallion_checkout.config.storefront import StorefrontConfig
    from stallion_checkout.domain.model import Country, Distributor, Event, Party

log = getLogger(__name__)

type ClientFactory = Callable[[ResilienceConfig], ResilientClient]

_DECODE_ERRORS = (PydanticValidationError, TypeError, ValueError)


class StorefrontCatalogClient:
    """Catalog lookups against the storefront REST backend.

    The backend answers an empty collection with 404, so 404 maps to "nothing
    found" here. Every other failure becomes :class:`CatalogLookupError`.

    While the client is entered with ``async with`` all lookups go through one
    shared connection, so they share its rate limiter and response cache. Entering
    is re-entrant; the connection closes when the last holder exits. Lookups made
    outside that scope open a connection of their own.
    """

    def __init__(
        self,
        *,
        config: StorefrontConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._resilience = config.catalog
        self._client_factory = client_factory or ResilientClient
        self._connection: ResilientClient | None = None
        self._holders = 0

    async def __aenter__(self) -> StorefrontCatalogClient:
        if self._connection is None:
            self._connection = self._client_factory(self._resilience)
        self._holders += 1
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._holders -= 1
        if self._holders == 0 and self._connection is not None:
            connection, self._connection = self._connection, None
            await connection.aclose()

    async def get_countries(self) -> list[Country]:
        payload = await self._fetch("get_countries", "GET", "country")
        return self._decode_list("get_countries", payload, CountryRecord, parse_country)

    async def get_parties(self, country_id: str | None = None) -> list[Party]:
        operation = f"get_parties({country_id or '*'})"
        if country_id is None:
            payload = await self._fetch(operation, "POST", "party/get")
        else:
            payload = await self._fetch(
                operation, "POST", "party/get", json={"country_id": country_id}
            )
        return self._decode_list(operation, payload, PartyRecord, parse_party)

    async def get_party_by_id(self, party_id: str) -> Party | None:
        operation = f"get_party_by_id({party_id})"
        payload = await self._fetch(operation, "GET", f"party/{party_id}")
        if payload is None:
            return None
        try:
            return parse_party(PartyRecord.model_validate(unwrap_record(payload)))
        except _DECODE_ERRORS as exc:
            raise CatalogLookupError(operation, f"malformed payload: {exc}") from exc

    async def get_distributors(self, country_id: str | None = None) -> list[Distributor]:
        operation = f"get_distributors({country_id or '*'})"
        if country_id is None:
            payload = await self._fetch(operation, "GET", "distributor")
        else:
            payload = await self._fetch(
                operation, "GET", "distributor", params={"country_id": country_id}
            )
        return self._decode_list(operation, payload, DistributorRecord, parse_distributor)

    async def get_events(self) -> list[Event]:
        payload = await self._fetch("get_events", "GET", "event")
        return self._decode_list("get_events", payload, EventRecord, parse_event)

    async def get_parties_by_zone(self) -> list[Party]:
        payload = await self._fetch("get_parties_by_zone", "POST", "party/byZoneId")
        return self._decode_list("get_parties_by_zone", payload, PartyRecord, parse_party)

    async def _fetch(
        self,
        operation: str,
        method: str,
        path: str,
        **kwargs: Unpack[RequestOptions],
    ) -> object | None:
        """Return the decoded JSON body, or ``None`` when the backend says 404."""

        try:
            if self._connection is not None:
                response = await self._connection.request(method, path, **kwargs)
            else:
                async with self._client_factory(self._resilience) as client:
                    response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise CatalogLookupError(operation, f"transport failure: {exc}") from exc

        if response.status_code == HTTPStatus.NOT_FOUND:
            log.debug("%s: backend reported no records", operation)
            return None
        if response.is_error:
            raise CatalogLookupError(operation, _error_detail(response))
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogLookupError(operation, "response is not JSON") from exc

    def _decode_list[R: StorefrontBaseModel, E](
        self,
        operation: str,
        payload: object | None,
        model: type[R],
        parse: Callable[[R], E],
    ) -> list[E]:
        if payload is None:
            return []
        try:
            return [parse(model.model_validate(item)) for item in unwrap_collection(payload)]
        except _DECODE_ERRORS as exc:
            raise CatalogLookupError(operation, f"malformed payload: {exc}") from exc


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = ErrorBody.model_validate(response.json()).detail
    except ValueError:
        detail = None
    return f"HTTP {response.status_code}: {detail or response.reason_phrase}"


__all__ = ["ClientFactory", "StorefrontCatalogClient"]
