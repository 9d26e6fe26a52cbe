"""Pre-submission checks of the resolved order context and cart items.

Pure functions: nothing here performs I/O, so a failed check guarantees that no
request reaches the order service.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Final

from stallion_checkout.domain.errors import ValidationError
from stallion_checkout.domain.model import OrderProfile
from stallion_checkout.domain.resolution.contracts import CONTEXT_FIELDS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stallion_checkout.domain.model import OrderType
    from stallion_checkout.domain.payload import CartItem
    from stallion_checkout.domain.resolution.contracts import OrderContext

_LOCATION: Final = frozenset({"latitude", "longitude"})

REQUIRED_FIELDS: Final[dict[OrderProfile, frozenset[str]]] = {
    OrderProfile.PARTY_DIRECT: frozenset({"party_id", "distributor_id"}),
    OrderProfile.DISTRIBUTOR: frozenset({"party_id", "distributor_id", "zone_id"}),
    OrderProfile.SALESMAN_DIRECT: frozenset({"salesman_id"}),
    OrderProfile.WHATSAPP: frozenset({"party_id", "salesman_id"}),
    OrderProfile.VISIT: frozenset({"party_id", "salesman_id"}) | _LOCATION,
    OrderProfile.EVENT: frozenset({"salesman_id", "event_id"}),
}

OPTIONAL_FIELDS: Final[dict[OrderProfile, frozenset[str]]] = {
    OrderProfile.PARTY_DIRECT: frozenset({"zone_id"}),
    OrderProfile.DISTRIBUTOR: frozenset(),
    OrderProfile.SALESMAN_DIRECT: frozenset({"party_id"}),
    OrderProfile.WHATSAPP: frozenset({"zone_id"}),
    OrderProfile.VISIT: frozenset({"zone_id"}),
    OrderProfile.EVENT: frozenset({"party_id", "zone_id"}),
}

_LATITUDE_LIMIT = 90.0
_LONGITUDE_LIMIT = 180.0


def validate_order_context(context: OrderContext, order_type: OrderType | None = None) -> None:
    """Check ``context`` against the required-field table of its order type.

    Raises :class:`ValidationError` naming the first offending field, in payload
    field order.
    """

    if order_type is not None and order_type is not context.order_type:
        raise ValidationError("order_type", f"does not match the resolved {context.order_type}")
    try:
        profile = context.profile
    except ValueError as exc:
        raise ValidationError("order_type", str(exc)) from None

    required = REQUIRED_FIELDS[profile]
    allowed = required | OPTIONAL_FIELDS[profile]
    for name in CONTEXT_FIELDS:
        value = getattr(context, name)
        if value is None:
            if name in required:
                raise ValidationError(name)
            continue
        if name not in allowed:
            raise ValidationError(name, f"is not part of a {context.order_type} order")
        if name in _LOCATION:
            _check_coordinate(name, value)
        else:
            _check_identifier(name, value)


def validate_order_items(items: Iterable[CartItem]) -> None:
    """Mirror the order service's item checks so bad carts fail locally."""

    materialized = list(items)
    if not materialized:
        raise ValidationError("order_items", "must contain at least one item")
    for position, item in enumerate(materialized):
        if not isinstance(item.product_id, str) or not item.product_id.strip():
            raise ValidationError("order_items", f"item {position} has no product_id")
        if not _is_number(item.quantity) or not float(item.quantity).is_integer():
            raise ValidationError("order_items", f"item {position} quantity must be a whole number")
        if item.quantity <= 0:
            raise ValidationError("order_items", f"item {position} quantity must be positive")
        if not _is_number(item.price) or item.price <= 0:
            raise ValidationError("order_items", f"item {position} price must be a positive number")


def _check_identifier(name: str, value: object) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(name, "must be a non-empty identifier")


def _check_coordinate(name: str, value: object) -> None:
    if not _is_number(value):
        raise ValidationError(name, "must be numeric")
    limit = _LATITUDE_LIMIT if name == "latitude" else _LONGITUDE_LIMIT
    if not -limit <= float(value) <= limit:  # type: ignore[arg-type]
        raise ValidationError(name, f"must be within +/-{limit:g}")


def _is_number(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


__all__ = [
    "OPTIONAL_FIELDS",
    "REQUIRED_FIELDS",
    "validate_order_context",
    "validate_order_items",
]
