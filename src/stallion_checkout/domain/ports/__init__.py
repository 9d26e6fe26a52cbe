"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CatalogLookup
from .location import LocationProvider
from .submission import OrderSubmissionResult, OrderSubmitter

__all__ = [
    "CatalogLookup",
    "LocationProvider",
    "OrderSubmissionResult",
    "OrderSubmitter",
]
