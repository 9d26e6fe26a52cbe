"""Order-context resolution engine.

Given the actor, the order type and the user's selections, derive the complete set
of foreign keys the order service needs. Users, parties, distributors and zones do
not reference each other reliably, so most fields are discovered by walking an
ordered chain of resolvers (first success wins):

- party actors: party by phone match, then distributor via
  party record -> party lookup -> same-country distributor -> any distributor,
  and zone via party record -> party lookup
- distributor actors: distributor and zone from the actor, party from selection
- salesman actors: salesman id via actor field -> actor id -> session token,
  plus party/zone/event/location depending on the order type

No resolver invents an id that was not observed in an actor snapshot, a catalog
record or the session token.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager, asynccontextmanager
from functools import partial
from logging import getLogger
from operator import attrgetter
from typing import TYPE_CHECKING

from stallion_checkout.config.checkout import CheckoutConfig
from stallion_checkout.domain.entity_index import EntityIndex, build_index
from stallion_checkout.domain.errors import (
    CatalogLookupError,
    DistributorUnresolved,
    GeolocationError,
    LocationRequired,
    MissingSelection,
    PartyNotFound,
    SalesmanIdUnresolved,
    UnsupportedRole,
    ValidationError,
)
from stallion_checkout.domain.geolocation import acquire_location
from stallion_checkout.domain.model import ActorRole, OrderType, Selections
from stallion_checkout.domain.phone import phone_match_key
from stallion_checkout.domain.roles import can_checkout, classify_role
from stallion_checkout.domain.session_token import claim_id, read_token_claims

from .contracts import DETACHED_ATTEMPT, OrderContext
from .resolvers import Resolved, Resolver, constant, first_success

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from stallion_checkout.domain.entity_index import IndexBuildReport
    from stallion_checkout.domain.model import Actor, Distributor, Event, GeoPoint, Party
    from stallion_checkout.domain.ports.catalog import CatalogLookup
    from stallion_checkout.domain.ports.location import LocationProvider

    from .contracts import AttemptToken

log = getLogger(__name__)

_entity_id = attrgetter("id")

GLOBAL_DISTRIBUTOR_SOURCE = "any_distributor"
SALESMAN_FIELD_SOURCE = "actor_salesman_id"


class ResolutionEngine:
    """Compute an :class:`OrderContext` from role, order type and selections."""

    def __init__(
        self,
        catalog: CatalogLookup,
        *,
        location_provider: LocationProvider | None = None,
        config: CheckoutConfig | None = None,
        session_token: str | None = None,
    ) -> None:
        self._catalog = catalog
        self._location_provider = location_provider
        self._config = config or CheckoutConfig()
        self._session_token = session_token

    async def resolve(
        self,
        actor: Actor,
        order_type: OrderType | None,
        selections: Selections | None = None,
        *,
        attempt: AttemptToken = DETACHED_ATTEMPT,
    ) -> OrderContext:
        """Resolve the order context or raise a :class:`CheckoutError` subclass.

        ``attempt`` is checked after every suspension point; a superseded attempt
        raises ``ResolutionCancelled`` instead of returning stale results.
        """

        chosen = selections or Selections()
        if order_type is not None:
            try:
                order_type = OrderType(order_type)
            except ValueError:
                raise ValidationError(
                    "order_type", f"{order_type!r} is not a known order type"
                ) from None
        role = classify_role(actor.role)
        if role is ActorRole.UNSUPPORTED:
            raise UnsupportedRole(actor.role)
        effective_type = _effective_order_type(role, order_type)
        log.info(
            "Resolving order context: actor=%s, role=%s, order_type=%s",
            actor.id,
            role,
            effective_type,
        )

        async with self._catalog_scope():
            match role:
                case ActorRole.DISTRIBUTOR:
                    context = self._resolve_for_distributor(actor, chosen)
                case ActorRole.PARTY:
                    context = await self._resolve_for_party(actor, attempt)
                case _:
                    context = await self._resolve_for_salesman(
                        actor, effective_type, chosen, attempt
                    )

        attempt.ensure_current()
        log.info(
            "Resolved order context: order_type=%s, fields=%s, degraded=%s",
            context.order_type,
            ", ".join(context.payload_fields()),
            context.degraded,
        )
        return context

    # -- selectable options ----------------------------------------------------

    async def available_parties(
        self,
        actor: Actor,
        order_type: OrderType | None,
        *,
        attempt: AttemptToken = DETACHED_ATTEMPT,
    ) -> tuple[Party, ...]:
        """Parties the actor may pick for ``order_type``.

        Event orders are not geographically restricted and draw from every
        country; other order types use the zone-scoped lookup.
        """

        if not can_checkout(actor.role):
            raise UnsupportedRole(actor.role)
        async with self._catalog_scope():
            if order_type is OrderType.EVENT:
                index, _ = await self.party_index(attempt)
                return index.values()
            parties = await self._catalog.get_parties_by_zone()
        attempt.ensure_current()
        zone_parties: EntityIndex[Party] = EntityIndex(_entity_id)
        zone_parties.extend(parties)
        return zone_parties.values()

    async def available_events(
        self,
        actor: Actor,
        *,
        attempt: AttemptToken = DETACHED_ATTEMPT,
    ) -> tuple[Event, ...]:
        if not can_checkout(actor.role):
            raise UnsupportedRole(actor.role)
        async with self._catalog_scope():
            events = await self._catalog.get_events()
        attempt.ensure_current()
        return tuple(events)

    # -- catalog helpers -------------------------------------------------------

    @asynccontextmanager
    async def _catalog_scope(self) -> AsyncIterator[None]:
        """Hold the catalog connection open when the catalog keeps one."""

        if isinstance(self._catalog, AbstractAsyncContextManager):
            async with self._catalog:
                yield
        else:
            yield

    async def country_scopes(self, attempt: AttemptToken = DETACHED_ATTEMPT) -> tuple[str | None, ...]:
        """Country ids to enumerate, or a single unfiltered scope (``None``)."""

        try:
            countries = await self._catalog.get_countries()
        except CatalogLookupError as exc:
            log.warning("Country lookup failed, using an unfiltered lookup instead: %s", exc)
            countries = ()
        attempt.ensure_current()
        scopes = tuple(dict.fromkeys(country.id for country in countries))
        return scopes or (None,)

    async def party_index(
        self,
        attempt: AttemptToken = DETACHED_ATTEMPT,
        *,
        scopes: Sequence[str | None] | None = None,
    ) -> tuple[EntityIndex[Party], IndexBuildReport]:
        effective_scopes = scopes if scopes is not None else await self.country_scopes(attempt)
        result = await build_index(
            [(scope, partial(self._catalog.get_parties, scope)) for scope in effective_scopes],
            key=_entity_id,
            label="party",
            parallel=self._config.parallel_country_lookups,
        )
        attempt.ensure_current()
        return result

    async def distributor_index(
        self,
        attempt: AttemptToken = DETACHED_ATTEMPT,
        *,
        scopes: Sequence[str | None] | None = None,
    ) -> tuple[EntityIndex[Distributor], IndexBuildReport]:
        effective_scopes = scopes if scopes is not None else await self.country_scopes(attempt)
        result = await build_index(
            [(scope, partial(self._catalog.get_distributors, scope)) for scope in effective_scopes],
            key=_entity_id,
            label="distributor",
            parallel=self._config.parallel_country_lookups,
        )
        attempt.ensure_current()
        return result

    async def lookup_party(
        self,
        party_id: str,
        attempt: AttemptToken = DETACHED_ATTEMPT,
    ) -> Party | None:
        """Fetch a party by id; a failed lookup counts as "not found"."""

        try:
            party = await self._catalog.get_party_by_id(party_id)
        except CatalogLookupError as exc:
            log.warning("Party lookup for %s failed: %s", party_id, exc)
            party = None
        attempt.ensure_current()
        return party

    # -- distributor actors ----------------------------------------------------

    def _resolve_for_distributor(self, actor: Actor, selections: Selections) -> OrderContext:
        party_id = _require_selection(selections.party_id, "party_id")
        context = OrderContext(
            order_type=OrderType.DISTRIBUTOR,
            actor_role=ActorRole.DISTRIBUTOR,
            party_id=party_id,
            distributor_id=actor.distributor_id,
            zone_id=actor.zone_id,
        )
        context.sources.update(party_id="selection", distributor_id="actor", zone_id="actor")
        return context

    # -- party actors ----------------------------------------------------------

    async def _resolve_for_party(self, actor: Actor, attempt: AttemptToken) -> OrderContext:
        scopes = await self.country_scopes(attempt)
        party = await self._find_party_by_phone(actor, attempt, scopes=scopes)
        links = _PartyLinks(party, engine=self, attempt=attempt, scopes=scopes)

        distributor_chain: list[tuple[str, Resolver[str]]] = [
            ("party_record", constant(party.distributor_id)),
            ("party_lookup", links.looked_up_distributor_id),
            ("country_distributor", links.country_distributor_id),
        ]
        if self._config.allow_global_distributor_fallback:
            distributor_chain.append((GLOBAL_DISTRIBUTOR_SOURCE, links.any_distributor_id))
        distributor = await first_success(distributor_chain)
        if distributor is None:
            raise DistributorUnresolved(party.id)

        degraded = distributor.source == GLOBAL_DISTRIBUTOR_SOURCE
        if degraded:
            log.warning(
                "Degraded distributor resolution for party %s: no distributor in country %s, "
                "falling back to first known distributor %s",
                party.id,
                party.country_id,
                distributor.value,
            )

        zone = await first_success(
            [
                ("party_record", constant(party.zone_id)),
                ("party_lookup", links.looked_up_zone_id),
            ]
        )

        context = OrderContext(
            order_type=OrderType.DIRECT,
            actor_role=ActorRole.PARTY,
            party_id=party.id,
            distributor_id=distributor.value,
            zone_id=zone.value if zone else None,
            degraded=degraded,
        )
        context.sources.update(party_id="phone_match", distributor_id=distributor.source)
        if zone is not None:
            context.sources["zone_id"] = zone.source
        return context

    async def _find_party_by_phone(
        self,
        actor: Actor,
        attempt: AttemptToken,
        *,
        scopes: Sequence[str | None],
    ) -> Party:
        digits = self._config.phone_match_digits
        actor_key = phone_match_key(actor.phone, national_digits=digits)
        if not actor_key:
            raise PartyNotFound(actor.phone)

        index, report = await self.party_index(attempt, scopes=scopes)
        party = index.first(
            lambda candidate: phone_match_key(candidate.phone, national_digits=digits) == actor_key
        )
        if party is None:
            if report.all_failed:
                log.warning("Every party lookup failed; no phone match was possible")
            raise PartyNotFound(actor.phone)
        return party

    # -- salesman actors -------------------------------------------------------

    async def _resolve_for_salesman(
        self,
        actor: Actor,
        order_type: OrderType,
        selections: Selections,
        attempt: AttemptToken,
    ) -> OrderContext:
        match order_type:
            case OrderType.VISIT | OrderType.WHATSAPP:
                party_id = _require_selection(selections.party_id, "party_id")
                salesman = await self._resolve_salesman_id(actor)
                zone = await self._zone_for_selection(actor, selections, attempt)
                context = OrderContext(
                    order_type=order_type,
                    actor_role=ActorRole.SALESMAN,
                    party_id=party_id,
                    salesman_id=salesman.value,
                    zone_id=zone.value if zone else None,
                )
                context.sources["party_id"] = "selection"
                if zone is not None:
                    context.sources["zone_id"] = zone.source
                if order_type is OrderType.VISIT:
                    point = await self._acquire_location()
                    attempt.ensure_current()
                    context.latitude = point.latitude
                    context.longitude = point.longitude
                    context.sources["location"] = "device"
            case OrderType.EVENT:
                event_id = _require_selection(selections.event_id, "event_id")
                salesman = await self._resolve_salesman_id(actor)
                zone = await self._zone_for_selection(actor, selections, attempt)
                context = OrderContext(
                    order_type=OrderType.EVENT,
                    actor_role=ActorRole.SALESMAN,
                    event_id=event_id,
                    party_id=selections.party_id,
                    salesman_id=salesman.value,
                    zone_id=zone.value if zone else None,
                )
                context.sources["event_id"] = "selection"
                if zone is not None:
                    context.sources["zone_id"] = zone.source
            case _:
                salesman = await self._resolve_salesman_id(actor)
                context = OrderContext(
                    order_type=OrderType.DIRECT,
                    actor_role=ActorRole.SALESMAN,
                    party_id=selections.party_id,
                    salesman_id=salesman.value,
                )

        context.sources["salesman_id"] = salesman.source
        return context

    async def _resolve_salesman_id(self, actor: Actor) -> Resolved[str]:
        salesman = await first_success(
            [
                (SALESMAN_FIELD_SOURCE, constant(actor.salesman_id)),
                ("actor_id", constant(actor.id.strip() or None)),
                ("session_token", self._token_salesman_id),
            ]
        )
        if salesman is None:
            raise SalesmanIdUnresolved
        if salesman.source != SALESMAN_FIELD_SOURCE:
            log.warning(
                "Low-confidence salesman id %s for actor %s (source=%s); "
                "the order service performs the final check",
                salesman.value,
                actor.id,
                salesman.source,
            )
        return salesman

    async def _token_salesman_id(self) -> str | None:
        return claim_id(read_token_claims(self._session_token))

    async def _zone_for_selection(
        self,
        actor: Actor,
        selections: Selections,
        attempt: AttemptToken,
    ) -> Resolved[str] | None:
        record = selections.party_record
        chain: list[tuple[str, Resolver[str]]] = [
            ("actor", constant(actor.zone_id)),
            ("selected_party", constant(record.zone_id if record else None)),
        ]
        party_id = selections.party_id
        if party_id is not None:

            async def looked_up_zone() -> str | None:
                party = await self.lookup_party(party_id, attempt)
                return party.zone_id if party else None

            chain.append(("party_lookup", looked_up_zone))
        return await first_success(chain)

    async def _acquire_location(self) -> GeoPoint:
        try:
            return await acquire_location(
                self._location_provider,
                timeout_seconds=self._config.geolocation_timeout_seconds,
            )
        except GeolocationError as exc:
            raise LocationRequired(exc.reason) from exc


class _PartyLinks:
    """Lazily fetched records shared by the distributor and zone chains of one party."""

    def __init__(
        self,
        party: Party,
        *,
        engine: ResolutionEngine,
        attempt: AttemptToken,
        scopes: Sequence[str | None],
    ) -> None:
        self._party = party
        self._engine = engine
        self._attempt = attempt
        self._scopes = scopes
        self._full_record: Party | None = None
        self._full_record_loaded = False
        self._distributors: EntityIndex[Distributor] | None = None

    async def full_record(self) -> Party | None:
        if not self._full_record_loaded:
            self._full_record = await self._engine.lookup_party(self._party.id, self._attempt)
            self._full_record_loaded = True
        return self._full_record

    async def distributors(self) -> EntityIndex[Distributor]:
        if self._distributors is None:
            self._distributors, _ = await self._engine.distributor_index(
                self._attempt, scopes=self._scopes
            )
        return self._distributors

    async def looked_up_distributor_id(self) -> str | None:
        record = await self.full_record()
        return record.distributor_id if record else None

    async def looked_up_zone_id(self) -> str | None:
        record = await self.full_record()
        return record.zone_id if record else None

    async def country_distributor_id(self) -> str | None:
        country_id = self._party.country_id
        if country_id is None:
            record = await self.full_record()
            country_id = record.country_id if record else None
        if country_id is None:
            return None
        index = await self.distributors()
        match = index.first(lambda distributor: distributor.country_id == country_id)
        return match.id if match else None

    async def any_distributor_id(self) -> str | None:
        index = await self.distributors()
        match = index.first()
        return match.id if match else None


def _effective_order_type(role: ActorRole, order_type: OrderType | None) -> OrderType:
    match role:
        case ActorRole.PARTY:
            expected = OrderType.DIRECT
        case ActorRole.DISTRIBUTOR:
            expected = OrderType.DISTRIBUTOR
        case _:
            if order_type is None:
                return OrderType.DIRECT
            if order_type is OrderType.DISTRIBUTOR:
                raise ValidationError("order_type", "is not available to salesmen")
            return order_type
    if order_type is not None and order_type is not expected:
        raise ValidationError("order_type", f"must be {expected} for {role} accounts")
    return expected


def _require_selection(value: str | None, field: str) -> str:
    if value is None:
        raise MissingSelection(field)
    return value


__all__ = ["ResolutionEngine"]
