"""Port for submitting resolved orders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class OrderSubmissionResult:
    order_id: str
    order_number: str | None = None
    raw: Mapping[str, object] = field(default_factory=dict["str", "object"])


@runtime_checkable
class OrderSubmitter(Protocol):
    """Post a validated order payload; raises ``SubmissionFailed`` on rejection."""

    async def submit_order(self, payload: Mapping[str, object]) -> OrderSubmissionResult: ...


__all__ = ["OrderSubmissionResult", "OrderSubmitter"]
