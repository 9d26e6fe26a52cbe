"""Resolution engine contracts: the resolved context and the attempt guard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from stallion_checkout.domain.errors import ResolutionCancelled
from stallion_checkout.domain.model import ActorRole, OrderProfile, OrderType

if TYPE_CHECKING:
    from collections.abc import Callable

CONTEXT_FIELDS: Final[tuple[str, ...]] = (
    "party_id",
    "distributor_id",
    "zone_id",
    "salesman_id",
    "event_id",
    "latitude",
    "longitude",
)

_PROFILES: dict[tuple[ActorRole, OrderType], OrderProfile] = {
    (ActorRole.PARTY, OrderType.DIRECT): OrderProfile.PARTY_DIRECT,
    (ActorRole.DISTRIBUTOR, OrderType.DISTRIBUTOR): OrderProfile.DISTRIBUTOR,
    (ActorRole.SALESMAN, OrderType.DIRECT): OrderProfile.SALESMAN_DIRECT,
    (ActorRole.SALESMAN, OrderType.WHATSAPP): OrderProfile.WHATSAPP,
    (ActorRole.SALESMAN, OrderType.VISIT): OrderProfile.VISIT,
    (ActorRole.SALESMAN, OrderType.EVENT): OrderProfile.EVENT,
}


def profile_for(role: ActorRole, order_type: OrderType) -> OrderProfile:
    try:
        return _PROFILES[(role, order_type)]
    except KeyError:
        raise ValueError(f"Order type {order_type} is not available to {role} actors") from None


@dataclass(slots=True, kw_only=True)
class OrderContext:
    """Resolved foreign keys for one checkout attempt.

    ``degraded`` and ``sources`` are audit details; only the ``CONTEXT_FIELDS``
    travel in the order payload.
    """

    order_type: OrderType
    actor_role: ActorRole
    party_id: str | None = None
    distributor_id: str | None = None
    zone_id: str | None = None
    salesman_id: str | None = None
    event_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    degraded: bool = False
    sources: dict[str, str] = field(default_factory=dict[str, str])

    @property
    def profile(self) -> OrderProfile:
        return profile_for(self.actor_role, self.order_type)

    def payload_fields(self) -> dict[str, object]:
        """Return the present context fields in a stable order."""

        present: dict[str, object] = {}
        for name in CONTEXT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                present[name] = value
        return present


@dataclass(slots=True, frozen=True)
class AttemptToken:
    """Identifies one resolution attempt; stale attempts must not write results."""

    attempt_id: int
    is_current: Callable[[int], bool] = field(default=lambda _attempt_id: True)

    def ensure_current(self) -> None:
        if not self.is_current(self.attempt_id):
            raise ResolutionCancelled(self.attempt_id)


DETACHED_ATTEMPT = AttemptToken(attempt_id=0)


__all__ = [
    "CONTEXT_FIELDS",
    "DETACHED_ATTEMPT",
    "AttemptToken",
    "OrderContext",
    "profile_for",
]
