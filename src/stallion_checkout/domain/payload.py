"""Order payload assembly."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from stallion_checkout.domain.resolution.contracts import OrderContext

ORDER_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True, slots=True)
class CartItem:
    product_id: str
    quantity: int
    price: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CartItem:
        """Build an item from cart JSON (``product_id``/``quantity``/``price``)."""

        try:
            return cls(
                product_id=data["product_id"],
                quantity=data["quantity"],
                price=data["price"],
            )
        except KeyError as exc:
            raise ValueError(f"Cart item is missing {exc.args[0]!r}") from None

    def as_payload(self) -> dict[str, object]:
        return {"product_id": self.product_id, "quantity": self.quantity, "price": self.price}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def format_order_date(value: datetime) -> str:
    """ISO-8601 in UTC, second precision, ``Z`` suffix."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(ORDER_DATE_FORMAT)


def build_order_payload(
    context: OrderContext,
    items: Iterable[CartItem],
    *,
    notes: str = "",
    clock: Callable[[], datetime] = _utcnow,
) -> dict[str, object]:
    return {
        "order_type": str(context.order_type),
        "order_date": format_order_date(clock()),
        "order_items": [item.as_payload() for item in items],
        "order_notes": notes,
        **context.payload_fields(),
    }


__all__ = ["ORDER_DATE_FORMAT", "CartItem", "build_order_payload", "format_order_date"]
