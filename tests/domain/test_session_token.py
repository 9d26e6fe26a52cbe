from __future__ import annotations

import pytest

from stallion_checkout.domain.session_token import actor_from_token, claim_id, read_token_claims
from tests.support.checkout import make_token


def test_read_token_claims_decodes_payload_segment() -> None:
    token = make_token({"userId": 42, "role": "salesman", "phone": "+919876543210"})

    claims = read_token_claims(token)

    assert claims == {"userId": 42, "role": "salesman", "phone": "+919876543210"}


def test_read_token_claims_accepts_bearer_prefix() -> None:
    token = make_token({"userId": "U7"})

    assert read_token_claims(f"Bearer {token}") == {"userId": "U7"}


@pytest.mark.parametrize("token", ["", None, "not-a-token", "a.%%%.c", "a.bnVsbA.c"])
def test_malformed_tokens_yield_no_claims(token: str | None) -> None:
    assert read_token_claims(token) == {}


def test_claim_id_prefers_salesman_specific_claims() -> None:
    claims = {"userId": "U1", "salesmanId": "S9"}

    assert claim_id(claims) == "S9"


def test_claim_id_skips_blank_and_boolean_values() -> None:
    claims = {"salesman_id": "  ", "salesmanId": True, "userId": 17}

    assert claim_id(claims) == "17"


def test_actor_from_token_builds_snapshot() -> None:
    token = make_token({"userId": 5, "role": "Retailor", "phone": " 9876543210 "})

    actor = actor_from_token(token)

    assert actor.id == "5"
    assert actor.role == "Retailor"
    assert actor.phone == "9876543210"
    assert actor.party_id is None


def test_actor_from_token_requires_user_id() -> None:
    with pytest.raises(ValueError, match="user id"):
        actor_from_token(make_token({"role": "party"}))
