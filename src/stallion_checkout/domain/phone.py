"""Phone-number normalization and matching."""

from __future__ import annotations

import re

from stallion_checkout.config.checkout import DEFAULT_PHONE_MATCH_DIGITS

_NON_DIGITS = re.compile(r"\D+")


def normalize_phone(value: str | None) -> str:
    """Reduce a phone number to its digits.

    Leading ``+``, whitespace, dashes, dots and parentheses all disappear, so
    ``"+91 98765-43210"`` and ``"9198765 43210"`` normalize to the same string.
    """

    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def phone_match_key(value: str | None, *, national_digits: int = DEFAULT_PHONE_MATCH_DIGITS) -> str:
    """Return the trailing national digits used to compare two numbers."""

    digits = normalize_phone(value)
    if len(digits) > national_digits:
        return digits[-national_digits:]
    return digits


__all__ = ["normalize_phone", "phone_match_key"]
