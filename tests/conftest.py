from __future__ import annotations

import pytest

_CONFIG_ENV_VARS = (
    "STOREFRONT_API_TOKEN",
    "STOREFRONT_API_BASE_URL",
    "STOREFRONT_HTTP_CACHE",
    "STALLION_CHECKOUT_GEOLOCATION_TIMEOUT",
    "STALLION_CHECKOUT_PHONE_MATCH_DIGITS",
    "STALLION_CHECKOUT_GLOBAL_DISTRIBUTOR_FALLBACK",
    "STALLION_CHECKOUT_PARALLEL_LOOKUPS",
)


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> None:
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STALLION_CHECKOUT_DATA_DIR", str(tmp_path_factory.mktemp("data")))
