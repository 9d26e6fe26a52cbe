"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ActorRole(StrEnum):
    """Order-actor role derived from the authenticated user's role string."""

    PARTY = "party"
    DISTRIBUTOR = "distributor"
    SALESMAN = "salesman"
    UNSUPPORTED = "unsupported"


class OrderType(StrEnum):
    """Order types as understood by the order service."""

    DIRECT = "party_order"
    DISTRIBUTOR = "distributor_order"
    VISIT = "visit_order"
    WHATSAPP = "whatsapp_order"
    EVENT = "event_order"


SALESMAN_ORDER_TYPES = frozenset(
    {OrderType.DIRECT, OrderType.VISIT, OrderType.WHATSAPP, OrderType.EVENT}
)


class OrderProfile(StrEnum):
    """Required-field profile: one per (actor role, order type) combination."""

    PARTY_DIRECT = "party_direct"
    DISTRIBUTOR = "distributor"
    SALESMAN_DIRECT = "salesman_direct"
    WHATSAPP = "whatsapp"
    VISIT = "visit"
    EVENT = "event"
