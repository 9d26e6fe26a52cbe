from __future__ import annotations

import asyncio
from functools import partial

import pytest

from stallion_checkout.domain.entity_index import EntityIndex, build_index
from stallion_checkout.domain.errors import CatalogLookupError
from stallion_checkout.domain.model import Distributor


def _by_id(record: Distributor) -> str:
    return record.id


async def _returns(records: list[Distributor], *, delay: float = 0.0) -> list[Distributor]:
    await asyncio.sleep(delay)
    return records


async def _fails(scope: str) -> list[Distributor]:
    raise CatalogLookupError("get_distributors", f"boom in {scope}")


def test_first_seen_record_wins_on_duplicate_ids() -> None:
    index: EntityIndex[Distributor] = EntityIndex(_by_id)
    first = Distributor(id="D1", name="North", country_id="C1")
    later = Distributor(id="D1", name="Renamed", country_id="C2")

    assert index.add(first)
    assert not index.add(later)

    assert index.get("D1") is first
    assert len(index) == 1


def test_values_follow_insertion_order() -> None:
    index: EntityIndex[Distributor] = EntityIndex(_by_id)
    added = index.extend(
        [Distributor(id="D2"), Distributor(id="D1"), Distributor(id="D2"), Distributor(id="D3")]
    )

    assert added == 3
    assert [record.id for record in index.values()] == ["D2", "D1", "D3"]
    assert "D1" in index
    assert index.first(lambda record: record.id != "D2") == Distributor(id="D1")


def test_build_index_merges_lookups_in_enumeration_order() -> None:
    lookups = [
        ("C1", partial(_returns, [Distributor(id="D1", zone_id="Z1")])),
        ("C2", partial(_returns, [Distributor(id="D1", zone_id="Z2"), Distributor(id="D2")])),
    ]

    index, report = asyncio.run(build_index(lookups, key=_by_id, label="distributor"))

    assert [record.id for record in index] == ["D1", "D2"]
    assert index.get("D1") == Distributor(id="D1", zone_id="Z1")
    assert report.succeeded == 2
    assert not report.failed


def test_build_index_skips_failed_lookups() -> None:
    lookups = [
        ("C1", partial(_fails, "C1")),
        ("C2", partial(_returns, [Distributor(id="D2")])),
    ]

    index, report = asyncio.run(build_index(lookups, key=_by_id, label="distributor"))

    assert [record.id for record in index] == ["D2"]
    assert report.failed == ["C1"]
    assert not report.all_failed


def test_build_index_reports_when_every_lookup_failed() -> None:
    lookups = [("C1", partial(_fails, "C1")), ("C2", partial(_fails, "C2"))]

    index, report = asyncio.run(build_index(lookups, key=_by_id, label="distributor"))

    assert len(index) == 0
    assert report.all_failed


def test_parallel_build_keeps_sequential_tie_break() -> None:
    lookups = [
        ("C1", partial(_returns, [Distributor(id="D1", zone_id="Z1")], delay=0.02)),
        ("C2", partial(_returns, [Distributor(id="D1", zone_id="Z2")])),
        ("C3", partial(_fails, "C3")),
    ]

    index, report = asyncio.run(
        build_index(lookups, key=_by_id, label="distributor", parallel=True)
    )

    assert index.get("D1") == Distributor(id="D1", zone_id="Z1")
    assert report.failed == ["C3"]


def test_unexpected_errors_are_not_swallowed() -> None:
    async def broken() -> list[Distributor]:
        raise KeyError("unexpected")

    with pytest.raises(KeyError):
        asyncio.run(build_index([("C1", broken)], key=_by_id, label="distributor"))
