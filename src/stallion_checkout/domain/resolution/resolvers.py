"""First-success composition of optional field resolvers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

type Resolver[T] = Callable[[], Awaitable[T | None]]


@dataclass(slots=True, frozen=True)
class Resolved[T]:
    value: T
    source: str


async def first_success[T](resolvers: Sequence[tuple[str, Resolver[T]]]) -> Resolved[T] | None:
    """Await each named resolver in order; return the first non-empty value."""

    for source, resolver in resolvers:
        value = await resolver()
        if value is None or value == "":
            continue
        return Resolved(value=value, source=source)
    return None


def constant[T](value: T | None) -> Resolver[T]:
    """Wrap an already-known (possibly absent) value as a resolver."""

    async def resolve() -> T | None:
        return value

    return resolve


__all__ = ["Resolved", "Resolver", "constant", "first_success"]
