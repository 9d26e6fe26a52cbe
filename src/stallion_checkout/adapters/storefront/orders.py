"""Storefront order submission client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx
from pydantic import ValidationError as PydanticValidationError

from stallion_checkout.adapters.http_resilience import ResilientClient
from stallion_checkout.domain.errors import SubmissionFailed
from stallion_checkout.domain.ports.submission import OrderSubmissionResult

from .schema import ErrorBody, OrderCreatedBody

if TYPE_CHECKING:
    from collections.abc import Mapping

    from stallion_checkout.config.storefront import StorefrontConfig

    from .client import ClientFactory

log = getLogger(__name__)

ORDER_PATH = "order"


class StorefrontOrderSubmitter:
    """Post order payloads to ``POST order``.

    Submission is not idempotent: the configured retry policy never replays it.
    """

    def __init__(
        self,
        *,
        config: StorefrontConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._resilience = config.orders
        self._client_factory = client_factory or ResilientClient

    async def submit_order(self, payload: Mapping[str, object]) -> OrderSubmissionResult:
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.post(ORDER_PATH, json=dict(payload))
        except httpx.HTTPError as exc:
            raise SubmissionFailed(f"Order service unreachable: {exc}") from exc

        body = _json_or_none(response)
        if response.is_error:
            detail = _error_message(body) or f"Order service responded with HTTP {response.status_code}"
            raise SubmissionFailed(detail, status_code=response.status_code)

        created = _created_body(body)
        identifier = created.identifier if created is not None else None
        if created is None or identifier is None:
            raise SubmissionFailed(
                "Order service returned no order identifier", status_code=response.status_code
            )
        log.debug("Order service created %s", identifier)
        return OrderSubmissionResult(
            order_id=identifier,
            order_number=created.order_number,
            raw=cast("dict[str, object]", body),
        )


def _json_or_none(response: httpx.Response) -> object | None:
    try:
        return response.json()
    except ValueError:
        return None


def _created_body(body: object | None) -> OrderCreatedBody | None:
    if not isinstance(body, dict):
        return None
    try:
        return OrderCreatedBody.model_validate(body)
    except PydanticValidationError:
        log.warning("Order service answered with an unreadable confirmation: %s", body)
        return None


def _error_message(body: object | None) -> str | None:
    if not isinstance(body, dict):
        return None
    try:
        return ErrorBody.model_validate(body).detail
    except PydanticValidationError:
        return None


__all__ = ["ORDER_PATH", "StorefrontOrderSubmitter"]
