"""Resolution engine tuning knobs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, env_float, env_int

DEFAULT_GEOLOCATION_TIMEOUT_SECONDS = 15.0
DEFAULT_PHONE_MATCH_DIGITS = 10


@dataclass(frozen=True, slots=True)
class CheckoutConfig:
    geolocation_timeout_seconds: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS
    phone_match_digits: int = DEFAULT_PHONE_MATCH_DIGITS
    allow_global_distributor_fallback: bool = True
    parallel_country_lookups: bool = False

    def __post_init__(self) -> None:
        if self.geolocation_timeout_seconds <= 0:
            raise ValueError("Geolocation timeout must be positive")
        if self.phone_match_digits < 1:
            raise ValueError("Phone match digits must be at least 1")


def get_checkout_config() -> CheckoutConfig:
    return CheckoutConfig(
        geolocation_timeout_seconds=env_float(
            "STALLION_CHECKOUT_GEOLOCATION_TIMEOUT",
            default=DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
        ),
        phone_match_digits=env_int(
            "STALLION_CHECKOUT_PHONE_MATCH_DIGITS", default=DEFAULT_PHONE_MATCH_DIGITS
        ),
        allow_global_distributor_fallback=env_flag(
            "STALLION_CHECKOUT_GLOBAL_DISTRIBUTOR_FALLBACK", default=True
        ),
        parallel_country_lookups=env_flag("STALLION_CHECKOUT_PARALLEL_LOOKUPS", default=False),
    )
