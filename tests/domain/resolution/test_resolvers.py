from __future__ import annotations

import asyncio

from stallion_checkout.domain.resolution import Resolved, constant, first_success


def test_first_success_returns_first_present_value() -> None:
    calls: list[str] = []

    async def never() -> str | None:
        calls.append("never")
        return "late"

    result = asyncio.run(
        first_success(
            [
                ("missing", constant(None)),
                ("blank", constant("")),
                ("record", constant("D1")),
                ("lookup", never),
            ]
        )
    )

    assert result == Resolved(value="D1", source="record")
    assert calls == []


def test_first_success_returns_none_when_chain_is_exhausted() -> None:
    assert asyncio.run(first_success([("a", constant(None)), ("b", constant(None))])) is None
    assert asyncio.run(first_success([])) is None
