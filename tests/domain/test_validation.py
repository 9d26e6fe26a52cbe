from __future__ import annotations

import math

import pytest

from stallion_checkout.domain.errors import ValidationError
from stallion_checkout.domain.model import ActorRole, OrderType
from stallion_checkout.domain.payload import CartItem
from stallion_checkout.domain.resolution import OrderContext
from stallion_checkout.domain.validation import validate_order_context, validate_order_items


def _visit(**overrides: object) -> OrderContext:
    fields: dict[str, object] = {
        "party_id": "P1",
        "salesman_id": "S1",
        "zone_id": "Z1",
        "latitude": 12.9,
        "longitude": 77.6,
    }
    fields.update(overrides)
    return OrderContext(order_type=OrderType.VISIT, actor_role=ActorRole.SALESMAN, **fields)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "context",
    [
        OrderContext(
            order_type=OrderType.DIRECT,
            actor_role=ActorRole.PARTY,
            party_id="P1",
            distributor_id="D1",
        ),
        OrderContext(
            order_type=OrderType.DISTRIBUTOR,
            actor_role=ActorRole.DISTRIBUTOR,
            party_id="P5",
            distributor_id="D1",
            zone_id="Z9",
        ),
        OrderContext(order_type=OrderType.DIRECT, actor_role=ActorRole.SALESMAN, salesman_id="S1"),
        OrderContext(
            order_type=OrderType.WHATSAPP,
            actor_role=ActorRole.SALESMAN,
            party_id="P1",
            salesman_id="S1",
        ),
        OrderContext(
            order_type=OrderType.EVENT,
            actor_role=ActorRole.SALESMAN,
            salesman_id="S1",
            event_id="E1",
        ),
    ],
    ids=["party-direct", "distributor", "salesman-direct", "whatsapp", "event"],
)
def test_complete_contexts_pass(context: OrderContext) -> None:
    validate_order_context(context)


def test_visit_context_passes_with_location() -> None:
    validate_order_context(_visit())


@pytest.mark.parametrize("missing", ["party_id", "salesman_id", "latitude", "longitude"])
def test_visit_requires_every_field(missing: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_order_context(_visit(**{missing: None}))

    assert excinfo.value.field == missing


def test_distributor_context_requires_zone() -> None:
    context = OrderContext(
        order_type=OrderType.DISTRIBUTOR,
        actor_role=ActorRole.DISTRIBUTOR,
        party_id="P5",
        distributor_id="D1",
    )

    with pytest.raises(ValidationError) as excinfo:
        validate_order_context(context)

    assert excinfo.value.field == "zone_id"


def test_salesman_id_is_not_permitted_on_distributor_orders() -> None:
    context = OrderContext(
        order_type=OrderType.DISTRIBUTOR,
        actor_role=ActorRole.DISTRIBUTOR,
        party_id="P5",
        distributor_id="D1",
        zone_id="Z9",
        salesman_id="S1",
    )

    with pytest.raises(ValidationError, match="not part of"):
        validate_order_context(context)


@pytest.mark.parametrize(
    ("latitude", "longitude"),
    [(math.nan, 1.0), (1.0, math.inf), (95.0, 1.0), (1.0, 181.0), ("12.9", 77.6)],
)
def test_visit_coordinates_must_be_numeric_and_in_range(latitude: object, longitude: object) -> None:
    with pytest.raises(ValidationError):
        validate_order_context(_visit(latitude=latitude, longitude=longitude))


def test_blank_identifiers_are_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_order_context(_visit(party_id="  "))

    assert excinfo.value.field == "party_id"


def test_order_type_mismatch_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_order_context(_visit(), OrderType.WHATSAPP)

    assert excinfo.value.field == "order_type"


def test_unsupported_role_order_type_combination_is_rejected() -> None:
    context = OrderContext(order_type=OrderType.VISIT, actor_role=ActorRole.PARTY, party_id="P1")

    with pytest.raises(ValidationError) as excinfo:
        validate_order_context(context)

    assert excinfo.value.field == "order_type"


def test_items_must_not_be_empty() -> None:
    with pytest.raises(ValidationError, match="at least one item"):
        validate_order_items([])


@pytest.mark.parametrize(
    "item",
    [
        CartItem(product_id="", quantity=1, price=10.0),
        CartItem(product_id="SKU1", quantity=0, price=10.0),
        CartItem(product_id="SKU1", quantity=1.5, price=10.0),  # type: ignore[arg-type]
        CartItem(product_id="SKU1", quantity=1, price=0),
        CartItem(product_id="SKU1", quantity=1, price=math.nan),
    ],
)
def test_malformed_items_are_rejected(item: CartItem) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_order_items([CartItem(product_id="SKU0", quantity=1, price=5.0), item])

    assert excinfo.value.field == "order_items"
    assert "item 1" in str(excinfo.value)


def test_well_formed_items_pass() -> None:
    validate_order_items([CartItem(product_id="SKU1", quantity=2, price=1499.0)])
