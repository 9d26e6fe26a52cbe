"""Application configuration helpers."""

from __future__ import annotations

from .checkout import CheckoutConfig, get_checkout_config
from .env import env_flag, env_float, env_int, optional_env, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config
from .storefront import StorefrontConfig, build_storefront_config, get_storefront_config

__all__ = [
    "CacheConfig",
    "CheckoutConfig",
    "ConfigurationError",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "StorefrontConfig",
    "build_storefront_config",
    "configure_logging",
    "env_flag",
    "env_float",
    "env_int",
    "get_checkout_config",
    "get_storage_config",
    "get_storefront_config",
    "optional_env",
    "require_env_vars",
]
