"""Checkout orchestration: resolve, validate, assemble and submit one order."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from stallion_checkout.domain.payload import build_order_payload
from stallion_checkout.domain.validation import validate_order_context, validate_order_items

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from stallion_checkout.domain.payload import CartItem
    from stallion_checkout.domain.ports.submission import OrderSubmissionResult, OrderSubmitter
    from stallion_checkout.domain.resolution.contracts import OrderContext
    from stallion_checkout.domain.session import CheckoutSession

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CheckoutResult:
    context: OrderContext
    payload: dict[str, object]
    submission: OrderSubmissionResult

    @property
    def order_id(self) -> str:
        return self.submission.order_id


async def place_order(
    session: CheckoutSession,
    items: Sequence[CartItem],
    *,
    submitter: OrderSubmitter,
    notes: str = "",
    clock: Callable[[], datetime] | None = None,
) -> CheckoutResult:
    """Run one checkout attempt end to end.

    Any failure before the submit call raises without contacting the order
    service. Cart contents are never modified.
    """

    validate_order_items(items)
    context = await session.resolve()
    validate_order_context(context, session.order_type)

    if clock is None:
        payload = build_order_payload(context, items, notes=notes)
    else:
        payload = build_order_payload(context, items, notes=notes, clock=clock)

    log.info(
        "Submitting %s order with %s item(s) for actor %s",
        context.order_type,
        len(items),
        session.actor.id,
    )
    submission = await submitter.submit_order(payload)
    log.info("Order %s accepted", submission.order_id)
    return CheckoutResult(context=context, payload=payload, submission=submission)


__all__ = ["CheckoutResult", "place_order"]
