"""Identity-keyed merge of overlapping per-country lookup results.

Responsibilities:
- merge the records returned by N independent lookups into one collection
- keep the first-seen record when the same id shows up again
- isolate per-lookup failures: a failed lookup is logged and skipped

Iteration order is first-insertion order, which in turn follows the order the
lookups were enumerated in. "First match wins" scans over ``values()`` rely on it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from stallion_checkout.domain.errors import CatalogLookupError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Iterator, Sequence

log = getLogger(__name__)

type Lookup[T] = Callable[[], Awaitable[Sequence[T]]]


class EntityIndex[T]:
    """Insertion-ordered map from entity id to the first record seen with it."""

    __slots__ = ("_key", "_records")

    def __init__(self, key: Callable[[T], str]) -> None:
        self._key = key
        self._records: dict[str, T] = {}

    def add(self, record: T) -> bool:
        """Insert ``record`` unless its id is already indexed."""

        record_id = self._key(record)
        if record_id in self._records:
            return False
        self._records[record_id] = record
        return True

    def extend(self, records: Iterable[T]) -> int:
        return sum(1 for record in records if self.add(record))

    def get(self, record_id: str) -> T | None:
        return self._records.get(record_id)

    def values(self) -> tuple[T, ...]:
        return tuple(self._records.values())

    def first(self, predicate: Callable[[T], bool] | None = None) -> T | None:
        for record in self._records.values():
            if predicate is None or predicate(record):
                return record
        return None

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __iter__(self) -> Iterator[T]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


@dataclass(slots=True)
class IndexBuildReport:
    """Which lookups contributed to an index."""

    attempted: int = 0
    succeeded: int = 0
    failed: list[str | None] = field(default_factory=list["str | None"])

    @property
    def all_failed(self) -> bool:
        return self.attempted > 0 and self.succeeded == 0


async def build_index[T](
    lookups: Sequence[tuple[str | None, Lookup[T]]],
    *,
    key: Callable[[T], str],
    label: str,
    parallel: bool = False,
) -> tuple[EntityIndex[T], IndexBuildReport]:
    """Run the labelled lookups and merge their results in enumeration order.

    With ``parallel=True`` the lookups are awaited concurrently but merged in the
    original order, so tie-breaks match a sequential run.
    """

    index: EntityIndex[T] = EntityIndex(key)
    report = IndexBuildReport(attempted=len(lookups))

    if parallel:
        outcomes = await asyncio.gather(
            *(lookup() for _, lookup in lookups),
            return_exceptions=True,
        )
    else:
        outcomes = [await _run_isolated(lookup) for _, lookup in lookups]

    for (scope, _), outcome in zip(lookups, outcomes, strict=True):
        if isinstance(outcome, CatalogLookupError):
            log.warning("Skipping %s lookup for scope %s: %s", label, scope, outcome)
            report.failed.append(scope)
            continue
        if isinstance(outcome, BaseException):
            raise outcome
        report.succeeded += 1
        index.extend(outcome)

    log.debug(
        "Built %s index: %s records from %s/%s lookups",
        label,
        len(index),
        report.succeeded,
        report.attempted,
    )
    return index, report


async def _run_isolated[T](lookup: Lookup[T]) -> Sequence[T] | CatalogLookupError:
    try:
        return await lookup()
    except CatalogLookupError as exc:
        return exc


__all__ = ["EntityIndex", "IndexBuildReport", "Lookup", "build_index"]
