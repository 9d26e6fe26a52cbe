"""Order-type selection for salesman checkouts."""

from __future__ import annotations

from stallion_checkout.domain.model import SALESMAN_ORDER_TYPES, OrderType

_AUXILIARY_REQUIREMENTS: dict[OrderType, frozenset[str]] = {
    OrderType.DIRECT: frozenset(),
    OrderType.VISIT: frozenset({"party", "location"}),
    OrderType.WHATSAPP: frozenset({"party"}),
    OrderType.EVENT: frozenset({"event"}),
}


def auxiliary_requirements(order_type: OrderType | None) -> frozenset[str]:
    """Return the user inputs a salesman order type needs besides the cart."""

    if order_type is None:
        return frozenset()
    return _AUXILIARY_REQUIREMENTS.get(order_type, frozenset())


class OrderTypeSelector:
    """Unselected -> {Direct, Visit, WhatsApp, Event}; reselection is always allowed."""

    __slots__ = ("_state",)

    def __init__(self) -> None:
        self._state: OrderType | None = None

    @property
    def state(self) -> OrderType | None:
        return self._state

    def select(self, order_type: OrderType | str) -> bool:
        """Select an order type and report whether the selection changed."""

        selected = OrderType(order_type)
        if selected not in SALESMAN_ORDER_TYPES:
            raise ValueError(f"Order type {selected} is not available to salesmen")
        changed = selected is not self._state
        self._state = selected
        return changed

    def requires(self, requirement: str) -> bool:
        return requirement in auxiliary_requirements(self._state)


__all__ = ["OrderTypeSelector", "auxiliary_requirements"]
