"""Storefront backend (catalog + order service) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env, require_env_vars
from .errors import InvalidConfigurationError
from .http_resilience import (
    IDEMPOTENT_METHODS,
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

DEFAULT_STOREFRONT_BASE_URL = "http://localhost:3000/api"
STOREFRONT_TIMEOUT_SECONDS = 10.0
CACHE_TTL_SECONDS = 300.0


@dataclass(frozen=True, slots=True)
class StorefrontConfig:
    """Endpoints and credentials for the storefront REST backend."""

    api_token: str
    catalog: ResilienceConfig
    orders: ResilienceConfig

    @property
    def base_url(self) -> str | None:
        return self.catalog.base_url


def _auth_headers(api_token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_token}",
        "Accept": "application/json",
    }


def _should_cache_catalog_payload(payload: object) -> bool:
    """Error bodies and empty collections are never replayed from the cache."""

    if isinstance(payload, dict):
        if "error" in payload:
            return False
        payload = payload.get("data", payload)
    return bool(payload)


def _cache_config(mode: str) -> CacheConfig | None:
    match mode.lower():
        case "off" | "none" | "":
            return None
        case "memory":
            return CacheConfig(
                backend="memory",
                default_ttl_seconds=CACHE_TTL_SECONDS,
                should_cache=_should_cache_catalog_payload,
            )
        case "sqlite":
            return CacheConfig(
                backend="sqlite",
                default_ttl_seconds=CACHE_TTL_SECONDS,
                should_cache=_should_cache_catalog_payload,
            )
        case _:
            raise InvalidConfigurationError("STOREFRONT_HTTP_CACHE", mode, "off, memory or sqlite")


def build_storefront_config(
    *,
    api_token: str,
    base_url: str = DEFAULT_STOREFRONT_BASE_URL,
    cache: CacheConfig | None = None,
) -> StorefrontConfig:
    base = base_url.rstrip("/") + "/"
    headers = _auth_headers(api_token)
    catalog = ResilienceConfig(
        name="storefront-catalog",
        base_url=base,
        timeout_seconds=STOREFRONT_TIMEOUT_SECONDS,
        # party listing is a read served over POST
        retry=RetryPolicy(allowed_methods=IDEMPOTENT_METHODS | {"POST"}),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        cache=cache,
        default_headers=headers,
    )
    orders = ResilienceConfig(
        name="storefront-orders",
        base_url=base,
        timeout_seconds=STOREFRONT_TIMEOUT_SECONDS,
        retry=RetryPolicy(allowed_methods=IDEMPOTENT_METHODS),
        default_headers=headers,
    )
    return StorefrontConfig(api_token=api_token, catalog=catalog, orders=orders)


def get_storefront_config(*, api_token: str | None = None) -> StorefrontConfig:
    """Read the backend settings from the environment.

    ``api_token`` overrides ``STOREFRONT_API_TOKEN``; the session token of the
    checking-out user is the bearer credential the backend expects.
    """

    if api_token is None:
        api_token = require_env_vars(("STOREFRONT_API_TOKEN",))["STOREFRONT_API_TOKEN"]
    return build_storefront_config(
        api_token=api_token,
        base_url=optional_env("STOREFRONT_API_BASE_URL", DEFAULT_STOREFRONT_BASE_URL),
        cache=_cache_config(optional_env("STOREFRONT_HTTP_CACHE", "off")),
    )
