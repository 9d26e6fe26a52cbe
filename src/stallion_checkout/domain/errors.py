"""Checkout error taxonomy.

Every :class:`CheckoutError` carries a message fit for showing to the user. None of
them is fatal to the process; each is recovered by a user action (reselect, retry,
grant location permission) or a catalog data fix.
"""

from __future__ import annotations


class CheckoutError(RuntimeError):
    """Base class for user-facing checkout failures."""

    retryable: bool = True


class UnsupportedRole(CheckoutError):
    """The actor's role cannot place orders; checkout stays disabled."""

    retryable = False

    def __init__(self, role: str | None) -> None:
        super().__init__(f"Your account role ({role or 'unknown'}) cannot place orders")
        self.role = role


class MissingSelection(CheckoutError):
    """The user must pick an option (party, event) before checkout."""

    def __init__(self, field: str) -> None:
        label = field.removesuffix("_id")
        super().__init__(f"Please select a {label} before placing the order")
        self.field = field


class PartyNotFound(CheckoutError):
    """No party record matches the actor's phone number in any country."""

    retryable = False

    def __init__(self, phone: str | None) -> None:
        super().__init__(
            "No party account is linked to your phone number. Please contact support."
        )
        self.phone = phone


class DistributorUnresolved(CheckoutError):
    """A party was found but no distributor could be derived for it."""

    retryable = False

    def __init__(self, party_id: str) -> None:
        super().__init__(
            "No distributor is assigned to your account. Please contact support."
        )
        self.party_id = party_id


class SalesmanIdUnresolved(CheckoutError):
    """No source yields a salesman id for the actor."""

    retryable = False

    def __init__(self) -> None:
        super().__init__("Your salesman profile could not be identified. Please sign in again.")


class LocationRequired(CheckoutError):
    """A visit order was attempted without a usable device location."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Visit orders need your current location: {reason}")
        self.reason = reason


class ValidationError(CheckoutError):
    """The order payload misses or malforms a field required by its order type."""

    def __init__(self, field: str, problem: str = "is required") -> None:
        super().__init__(f"Order field '{field}' {problem}")
        self.field = field
        self.problem = problem


class SubmissionFailed(CheckoutError):
    """The order service rejected the order or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResolutionCancelled(RuntimeError):
    """A resolution attempt was superseded; its results must be discarded."""

    def __init__(self, attempt_id: int) -> None:
        super().__init__(f"Resolution attempt {attempt_id} was superseded")
        self.attempt_id = attempt_id


class CatalogLookupError(RuntimeError):
    """A catalog lookup failed (transport, HTTP status or payload shape)."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class GeolocationError(RuntimeError):
    """The device location could not be acquired."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
