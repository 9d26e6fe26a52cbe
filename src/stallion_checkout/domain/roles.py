"""Map upstream role strings onto order-actor roles."""

from __future__ import annotations

from stallion_checkout.domain.model import ActorRole

_ROLE_ALIASES: dict[str, ActorRole] = {
    "party": ActorRole.PARTY,
    "retailor": ActorRole.PARTY,
    "retailer": ActorRole.PARTY,
    "distributor": ActorRole.DISTRIBUTOR,
    "salesman": ActorRole.SALESMAN,
    "sales man": ActorRole.SALESMAN,
}


def normalize_role(role: str | None) -> str:
    if not role:
        return ""
    return " ".join(role.split()).lower()


def classify_role(role: str | None) -> ActorRole:
    """Classify a role string; anything unrecognised fails closed."""

    return _ROLE_ALIASES.get(normalize_role(role), ActorRole.UNSUPPORTED)


def can_checkout(role: str | None) -> bool:
    return classify_role(role) is not ActorRole.UNSUPPORTED


__all__ = ["can_checkout", "classify_role", "normalize_role"]
