"""Order-context resolution for the Stallion storefront checkout."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("stallion-checkout")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"
