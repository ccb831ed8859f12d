"""
Result wrapper for gateway calls.

Every StripeGateway call returns a GatewayResult instead of raising, so
each call site handles the failure path explicitly.

Usage:
    result = gateway.create_charge(params)
    if result.success:
        snapshot = project(result.data)
    else:
        classification = classify(result.error)

    # Or, where a raw gateway error may propagate:
    response = gateway.retrieve_plan("gold").unwrap()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

import stripe

# Generic type for the response object
T = TypeVar("T")


@dataclass(frozen=True)
class GatewayResult(Generic[T]):
    """
    Outcome of a single gateway call.

    Attributes:
        success: Whether the call succeeded
        data: Raw gateway response if successful (None if failed)
        error: Raw gateway error if failed (None if successful)
        duration_ms: Wall time spent in the call
    """

    success: bool
    data: T | None = None
    error: stripe.StripeError | None = None
    duration_ms: float = 0.0

    @classmethod
    def ok(cls, data: T, duration_ms: float = 0.0) -> GatewayResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data, duration_ms=duration_ms)

    @classmethod
    def failed(
        cls, error: stripe.StripeError, duration_ms: float = 0.0
    ) -> GatewayResult[T]:
        """Create a failed result carrying the gateway error."""
        return cls(success=False, error=error, duration_ms=duration_ms)

    def unwrap(self) -> T:
        """
        Return the response or raise the stored gateway error.

        Raises:
            stripe.StripeError: The error the call failed with
        """
        if not self.success:
            assert self.error is not None
            raise self.error
        return self.data  # type: ignore[return-value]

    def __bool__(self) -> bool:
        return self.success
