"""Storefront backend response schemas."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict

log = logging.getLogger(__name__)

type RecordId = str


class StorefrontBaseModel(BaseModel):
    # ids and phone numbers arrive as JSON numbers from some endpoints
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Storefront %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class PartyRecord(StorefrontBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    party_id: RecordId
    party_name: str | None = None
    phone: str | None = None
    country_id: RecordId | None = None
    distributor_id: RecordId | None = None
    zone_id: RecordId | None = None


class DistributorRecord(StorefrontBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    distributor_id: RecordId
    distributor_name: str | None = None
    country_id: RecordId | None = None
    zone_id: RecordId | None = None


class CountryRecord(StorefrontBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    country_id: RecordId
    country_name: str | None = None


class EventRecord(StorefrontBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    event_id: RecordId
    event_name: str | None = None
    event_date: str | None = None
    event_status: str | None = None


class ErrorBody(BaseModel):
    """``{"error": ...}`` or ``{"message": ...}`` failure bodies."""

    model_config = ConfigDict(extra="ignore")

    error: str | None = None
    message: str | None = None

    @property
    def detail(self) -> str | None:
        return self.error or self.message


class OrderCreatedBody(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    order_id: RecordId | None = None
    order_number: str | None = None
    id: RecordId | None = None

    @property
    def identifier(self) -> str | None:
        return self.order_id or self.order_number or self.id


def unwrap_collection(payload: object) -> list[object]:
    """Accept a bare JSON array or an object wrapping it under ``data``."""

    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, list):
        raise TypeError(f"Expected a JSON array, got {type(payload).__name__}")
    return payload


def unwrap_record(payload: object) -> dict[str, object]:
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    if not isinstance(payload, dict):
        raise TypeError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


__all__ = [
    "CountryRecord",
    "DistributorRecord",
    "ErrorBody",
    "EventRecord",
    "OrderCreatedBody",
    "PartyRecord",
    "StorefrontBaseModel",
    "unwrap_collection",
    "unwrap_record",
]
