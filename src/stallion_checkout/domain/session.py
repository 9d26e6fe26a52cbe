"""Per-checkout interaction state: order type, selections and resolution attempts."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from stallion_checkout.domain.errors import UnsupportedRole
from stallion_checkout.domain.model import ActorRole, OrderType, Selections
from stallion_checkout.domain.order_type import OrderTypeSelector
from stallion_checkout.domain.resolution.contracts import AttemptToken
from stallion_checkout.domain.roles import classify_role

if TYPE_CHECKING:
    from stallion_checkout.domain.model import Actor, Event, Party
    from stallion_checkout.domain.resolution.contracts import OrderContext
    from stallion_checkout.domain.resolution.engine import ResolutionEngine

log = getLogger(__name__)

_FIXED_ORDER_TYPES: dict[ActorRole, OrderType] = {
    ActorRole.PARTY: OrderType.DIRECT,
    ActorRole.DISTRIBUTOR: OrderType.DISTRIBUTOR,
}


class CheckoutSession:
    """One actor's checkout.

    Every input change (order type, party, event) starts a new attempt; an
    in-flight resolution belonging to an older attempt is discarded rather
    than written back.
    """

    def __init__(self, actor: Actor, engine: ResolutionEngine) -> None:
        self._actor = actor
        self._engine = engine
        self._role = classify_role(actor.role)
        self._selector = OrderTypeSelector()
        self._selections = Selections()
        self._attempt_id = 0
        self._context: OrderContext | None = None

    @property
    def actor(self) -> Actor:
        return self._actor

    @property
    def role(self) -> ActorRole:
        return self._role

    @property
    def order_type(self) -> OrderType | None:
        if self._role is ActorRole.SALESMAN:
            return self._selector.state
        return _FIXED_ORDER_TYPES.get(self._role)

    @property
    def selections(self) -> Selections:
        return self._selections

    @property
    def context(self) -> OrderContext | None:
        """The last context resolved for the current inputs, if any."""

        return self._context

    @property
    def attempt_id(self) -> int:
        return self._attempt_id

    def requires(self, requirement: str) -> bool:
        """Whether the current order type needs ``party``, ``event`` or ``location``."""

        if self._role is ActorRole.DISTRIBUTOR:
            return requirement == "party"
        return self._selector.requires(requirement)

    def select_order_type(self, order_type: OrderType | str) -> None:
        if self._role is not ActorRole.SALESMAN:
            raise ValueError(f"Order type is fixed for role {self._role}")
        if self._selector.select(order_type):
            log.debug("Order type changed to %s; clearing selections", self._selector.state)
            self._selections = Selections()
        self._invalidate()

    def select_party(self, party: Party | str | None) -> None:
        self._selections = Selections(party=party, event=self._selections.event)
        self._invalidate()

    def select_event(self, event: Event | str | None) -> None:
        self._selections = Selections(party=self._selections.party, event=event)
        self._invalidate()

    async def resolve(self) -> OrderContext:
        """Resolve against the current inputs.

        Raises ``ResolutionCancelled`` when the inputs change before the
        resolution finishes.
        """

        if self._role is ActorRole.UNSUPPORTED:
            raise UnsupportedRole(self._actor.role)
        attempt = self._begin_attempt()
        context = await self._engine.resolve(
            self._actor,
            self.order_type,
            self._selections,
            attempt=attempt,
        )
        attempt.ensure_current()
        self._context = context
        return context

    async def available_parties(self) -> tuple[Party, ...]:
        return await self._engine.available_parties(
            self._actor,
            self.order_type,
            attempt=self._current_attempt(),
        )

    async def available_events(self) -> tuple[Event, ...]:
        return await self._engine.available_events(self._actor, attempt=self._current_attempt())

    def _invalidate(self) -> None:
        self._attempt_id += 1
        self._context = None

    def _begin_attempt(self) -> AttemptToken:
        self._attempt_id += 1
        return self._current_attempt()

    def _current_attempt(self) -> AttemptToken:
        return AttemptToken(attempt_id=self._attempt_id, is_current=self._is_current)

    def _is_current(self, attempt_id: int) -> bool:
        return attempt_id == self._attempt_id


__all__ = ["CheckoutSession"]
