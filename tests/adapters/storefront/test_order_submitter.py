from __future__ import annotations

import asyncio
import json
from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from stallion_checkout.adapters.http_resilience import ResilientClient
from stallion_checkout.adapters.storefront import StorefrontOrderSubmitter
from stallion_checkout.config import ResilienceConfig, build_storefront_config
from stallion_checkout.domain.errors import SubmissionFailed

PAYLOAD = {
    "order_type": "visit_order",
    "order_date": "2025-06-01T09:30:00Z",
    "order_items": [{"product_id": "SKU1", "quantity": 1, "price": 999.0}],
    "order_notes": "",
    "party_id": "P1",
    "salesman_id": "S1",
    "latitude": 12.97,
    "longitude": 77.59,
}


def _submitter(
    handler: Callable[[httpx.Request], httpx.Response],
) -> StorefrontOrderSubmitter:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    config = build_storefront_config(api_token="tok", base_url="http://backend.test/api/")
    return StorefrontOrderSubmitter(config=config, client_factory=factory)


def test_submit_order_posts_payload_and_returns_id() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"message": "Order created", "order_id": 501})

    result = asyncio.run(_submitter(handler).submit_order(PAYLOAD))

    assert result.order_id == "501"
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/order"
    assert json.loads(seen[0].content) == PAYLOAD


def test_order_number_is_used_when_no_id_is_returned() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"order_number": "SO-2025-0042"})

    result = asyncio.run(_submitter(handler).submit_order(PAYLOAD))

    assert result.order_id == "SO-2025-0042"
    assert result.order_number == "SO-2025-0042"


def test_backend_error_message_is_passed_through() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "Zone is required for distributor orders"})

    with pytest.raises(SubmissionFailed) as excinfo:
        asyncio.run(_submitter(handler).submit_order(PAYLOAD))

    assert str(excinfo.value) == "Zone is required for distributor orders"
    assert excinfo.value.status_code == 400


def test_unreadable_error_body_reports_status() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>bad gateway</html>")

    with pytest.raises(SubmissionFailed, match="HTTP 502"):
        asyncio.run(_submitter(handler).submit_order(PAYLOAD))


def test_unreachable_service_is_a_submission_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(SubmissionFailed, match="unreachable") as excinfo:
        asyncio.run(_submitter(handler).submit_order(PAYLOAD))

    assert excinfo.value.status_code is None


def test_missing_identifier_is_a_submission_failure() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"message": "ok"})

    with pytest.raises(SubmissionFailed, match="no order identifier"):
        asyncio.run(_submitter(handler).submit_order(PAYLOAD))


def test_unexpected_error_body_falls_back_to_status() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"code": "E1"}})

    with pytest.raises(SubmissionFailed, match="HTTP 500") as excinfo:
        asyncio.run(_submitter(handler).submit_order(PAYLOAD))

    assert excinfo.value.status_code == 500


def test_unreadable_confirmation_is_a_submission_failure() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"order_id": ["O1"]})

    with pytest.raises(SubmissionFailed, match="no order identifier") as excinfo:
        asyncio.run(_submitter(handler).submit_order(PAYLOAD))

    assert excinfo.value.status_code == 201
