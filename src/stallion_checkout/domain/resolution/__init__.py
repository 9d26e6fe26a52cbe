"""Order-context resolution package."""

from __future__ import annotations

from .contracts import CONTEXT_FIELDS, DETACHED_ATTEMPT, AttemptToken, OrderContext, profile_for
from .engine import ResolutionEngine
from .resolvers import Resolved, Resolver, constant, first_success

__all__ = [
    "CONTEXT_FIELDS",
    "DETACHED_ATTEMPT",
    "AttemptToken",
    "OrderContext",
    "Resolved",
    "ResolutionEngine",
    "Resolver",
    "constant",
    "first_success",
    "profile_for",
]
