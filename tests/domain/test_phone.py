from __future__ import annotations

import pytest

from stallion_checkout.domain.phone import normalize_phone, phone_match_key


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("+91 98765-43210", "919876543210"),
        ("(987) 654.3210", "9876543210"),
        ("9876543210", "9876543210"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_phone_keeps_digits_only(raw: str | None, expected: str) -> None:
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize("raw", ["+91 98765-43210", "  +1 (555) 010-9999 ", "12345"])
def test_normalize_phone_is_idempotent(raw: str) -> None:
    once = normalize_phone(raw)

    assert normalize_phone(once) == once


def test_dialing_prefix_does_not_prevent_a_match() -> None:
    assert phone_match_key("+919876543210") == phone_match_key("9876543210")
    assert phone_match_key("98765 43210") == phone_match_key("+91-98765-43210")


def test_short_numbers_compare_whole() -> None:
    assert phone_match_key("12345") == "12345"
    assert phone_match_key("912345") != phone_match_key("12345")


def test_empty_numbers_have_no_match_key() -> None:
    assert phone_match_key("") == ""
    assert phone_match_key(None) == ""


def test_match_key_honours_configured_digits() -> None:
    assert phone_match_key("+4915112345678", national_digits=11) == "15112345678"
