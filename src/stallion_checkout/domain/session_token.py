"""Read claims from the backend-issued session token.

The token is never verified here; the backend owns the signing secret and checks
every request. Only the payload segment is decoded.
"""

from __future__ import annotations

import base64
import json
from logging import getLogger
from typing import TYPE_CHECKING

from stallion_checkout.domain.model import Actor

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

log = getLogger(__name__)

USER_ID_CLAIMS = ("userId", "user_id", "id", "sub")
SALESMAN_ID_CLAIMS = ("salesman_id", "salesmanId", *USER_ID_CLAIMS)


def read_token_claims(token: str | None) -> dict[str, object]:
    """Return the payload claims of a JWT, or ``{}`` when it cannot be read."""

    if not token:
        return {}
    parts = token.strip().removeprefix("Bearer ").split(".")
    if len(parts) < 2:  # noqa: PLR2004
        return {}
    segment = parts[1]
    padded = segment + "=" * (-len(segment) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))
    except ValueError:
        log.debug("Session token payload is not decodable")
        return {}
    if not isinstance(payload, dict):
        return {}
    return {str(key): value for key, value in payload.items()}


def claim_id(claims: Mapping[str, object], keys: Sequence[str] = SALESMAN_ID_CLAIMS) -> str | None:
    """Return the first non-blank id-shaped claim among ``keys``."""

    for key in keys:
        value = claims.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _optional_str(claims: Mapping[str, object], key: str) -> str | None:
    value = claims.get(key)
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def actor_from_token(token: str) -> Actor:
    """Build the checkout actor snapshot from the session token claims."""

    claims = read_token_claims(token)
    user_id = claim_id(claims, USER_ID_CLAIMS)
    if user_id is None:
        raise ValueError("Session token does not carry a user id")
    return Actor(
        id=user_id,
        role=_optional_str(claims, "role"),
        phone=_optional_str(claims, "phone"),
        party_id=_optional_str(claims, "party_id"),
        distributor_id=_optional_str(claims, "distributor_id"),
        zone_id=_optional_str(claims, "zone_id"),
        salesman_id=_optional_str(claims, "salesman_id"),
    )


__all__ = ["SALESMAN_ID_CLAIMS", "actor_from_token", "claim_id", "read_token_claims"]
