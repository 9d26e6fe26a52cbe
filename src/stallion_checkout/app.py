"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stallion_checkout.adapters.storefront import StorefrontCatalogClient, StorefrontOrderSubmitter
from stallion_checkout.config import get_checkout_config, get_storefront_config
from stallion_checkout.domain.checkout import CheckoutResult, place_order
from stallion_checkout.domain.model import ActorRole
from stallion_checkout.domain.resolution import ResolutionEngine
from stallion_checkout.domain.session import CheckoutSession
from stallion_checkout.domain.session_token import actor_from_token

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stallion_checkout.config import CheckoutConfig, StorefrontConfig
    from stallion_checkout.domain.model import Event, OrderType, Party
    from stallion_checkout.domain.payload import CartItem
    from stallion_checkout.domain.ports.catalog import CatalogLookup
    from stallion_checkout.domain.ports.location import LocationProvider
    from stallion_checkout.domain.ports.submission import OrderSubmitter
    from stallion_checkout.domain.resolution import OrderContext

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CheckoutInputs:
    """What the user picked in the checkout UI."""

    order_type: OrderType | str | None = None
    party_id: str | None = None
    event_id: str | None = None


def build_checkout_session(
    session_token: str,
    *,
    storefront: StorefrontConfig | None = None,
    checkout: CheckoutConfig | None = None,
    location_provider: LocationProvider | None = None,
    catalog: CatalogLookup | None = None,
) -> CheckoutSession:
    """Wire a checkout session for the user identified by ``session_token``."""

    actor = actor_from_token(session_token)
    if catalog is None:
        effective_storefront = storefront or get_storefront_config(api_token=session_token)
        catalog = StorefrontCatalogClient(config=effective_storefront)
    engine = ResolutionEngine(
        catalog,
        location_provider=location_provider,
        config=checkout or get_checkout_config(),
        session_token=session_token,
    )
    return CheckoutSession(actor, engine)


def apply_inputs(session: CheckoutSession, inputs: CheckoutInputs) -> CheckoutSession:
    if inputs.order_type is not None and session.role is ActorRole.SALESMAN:
        session.select_order_type(inputs.order_type)
    elif inputs.order_type is not None and inputs.order_type != session.order_type:
        raise ValueError(f"Order type is fixed to {session.order_type} for role {session.role}")
    if inputs.party_id is not None:
        session.select_party(inputs.party_id)
    if inputs.event_id is not None:
        session.select_event(inputs.event_id)
    return session


def resolve_order_context(
    session: CheckoutSession,
    inputs: CheckoutInputs | None = None,
) -> OrderContext:
    apply_inputs(session, inputs or CheckoutInputs())
    return asyncio.run(session.resolve())


def submit_order(
    session: CheckoutSession,
    items: Sequence[CartItem],
    inputs: CheckoutInputs | None = None,
    *,
    notes: str = "",
    submitter: OrderSubmitter | None = None,
    storefront: StorefrontConfig | None = None,
) -> CheckoutResult:
    """Resolve, validate and submit one order for ``session``."""

    apply_inputs(session, inputs or CheckoutInputs())
    if submitter is None:
        effective_storefront = storefront or get_storefront_config()
        submitter = StorefrontOrderSubmitter(config=effective_storefront)
    log.info(
        "Starting checkout: actor=%s, order_type=%s, items=%s",
        session.actor.id,
        session.order_type,
        len(items),
    )
    result = asyncio.run(place_order(session, items, submitter=submitter, notes=notes))
    log.info(f"Finished checkout: order_id={result.order_id}, degraded={result.context.degraded}")
    return result


def list_parties(
    session: CheckoutSession,
    inputs: CheckoutInputs | None = None,
) -> tuple[Party, ...]:
    apply_inputs(session, inputs or CheckoutInputs())
    return asyncio.run(session.available_parties())


def list_events(session: CheckoutSession) -> tuple[Event, ...]:
    return asyncio.run(session.available_events())


__all__ = [
    "CheckoutInputs",
    "apply_inputs",
    "build_checkout_session",
    "list_events",
    "list_parties",
    "resolve_order_context",
    "submit_order",
]
