"""
Stripe API gateway for plugin operations.

This module provides the StripeGateway class which encapsulates all
Stripe API interactions made by the Stripe plugin. All Stripe calls go
through this gateway so credentials, timeouts and observability are
handled the same way everywhere.

Features:
- Per-call credentials (no process-wide stripe.api_key)
- Configurable timeout on the shared HTTP client
- Structured logging with timing metrics
- Typed results instead of raised gateway errors

Authentication:
    Each request carries its own api_key. When an access token is given
    (a connected account acting through OAuth) the request is signed
    with it; otherwise the gateway's configured secret key is used.
    Because the credential never lives in module state, concurrent calls
    for different accounts cannot pick up each other's identity.

Configuration (via settings):
- STRIPE_SECRET_KEY: Stripe API secret key
- STRIPE_API_TIMEOUT_SECONDS: API call timeout (default: 10)

Usage:
    from payments.adapters import StripeGateway

    gateway = StripeGateway(api_key="sk_test_...")

    result = gateway.create_charge(
        {"amount": 100, "currency": "usd", "card": "tok_visa"},
        access_token=None,
    )
    if result.success:
        charge = result.data
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Any

import stripe
from django.conf import settings

from payments.adapters.results import GatewayResult

if TYPE_CHECKING:
    from collections.abc import Callable


# =============================================================================
# HTTP Client Configuration
# =============================================================================

_http_client_lock = threading.Lock()
_http_client_timeout: float | None = None


def configure_http_client(timeout: float) -> None:
    """
    Install a stripe HTTP client with the given timeout.

    The client is shared by the whole process, so installing it is
    serialized and skipped when the timeout is unchanged.
    """
    global _http_client_timeout

    with _http_client_lock:
        if _http_client_timeout == timeout:
            return
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)
        _http_client_timeout = timeout


# =============================================================================
# Stripe Gateway
# =============================================================================


class StripeGateway:
    """
    Facade over the Stripe charge, customer, plan and token resources.

    Holds only the configured API key, which is immutable after
    construction. Safe to share between threads.

    Every method returns a GatewayResult. Stripe errors are captured on
    the result untouched; interpreting them is the classifier's job.
    Errors that are not Stripe errors propagate.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            api_key: Secret key (defaults to settings.STRIPE_SECRET_KEY)
            timeout: HTTP timeout in seconds
                (defaults to settings.STRIPE_API_TIMEOUT_SECONDS)
        """
        self._api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self.timeout = (
            timeout
            if timeout is not None
            else getattr(settings, "STRIPE_API_TIMEOUT_SECONDS", 10)
        )

    @property
    def api_key(self) -> str:
        return self._api_key

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this gateway."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    def credential_for(self, access_token: str | None) -> str:
        """Return the credential a call should be signed with."""
        if access_token is not None:
            return access_token
        return self._api_key

    # =========================================================================
    # Resource Operations
    # =========================================================================

    def create_charge(
        self,
        params: dict[str, Any],
        access_token: str | None = None,
        idempotency_key: str | None = None,
        retry: bool = False,
    ) -> GatewayResult[Any]:
        """
        Create a charge.

        Args:
            params: Charge parameters (amount in minor units, currency, ...)
            access_token: Connected-account credential, if charging on behalf
            idempotency_key: Caller-issued key forwarded to Stripe
            retry: Whether the caller is retrying (logged only)
        """
        options: dict[str, Any] = {}
        if idempotency_key:
            options["idempotency_key"] = idempotency_key

        return self._call(
            "create_charge",
            lambda api_key: stripe.Charge.create(api_key=api_key, **options, **params),
            access_token=access_token,
            retry=retry,
            context={
                "amount_cents": params.get("amount"),
                "currency": params.get("currency"),
                "idempotency_key": idempotency_key,
            },
        )

    def create_customer(
        self,
        params: dict[str, Any],
        access_token: str | None = None,
        retry: bool = False,
    ) -> GatewayResult[Any]:
        """Create a customer bound to a card token and plan."""
        return self._call(
            "create_customer",
            lambda api_key: stripe.Customer.create(api_key=api_key, **params),
            access_token=access_token,
            retry=retry,
            context={"plan": params.get("plan")},
        )

    def create_plan(
        self,
        params: dict[str, Any],
        access_token: str | None = None,
        retry: bool = False,
    ) -> GatewayResult[Any]:
        """Create a plan."""
        return self._call(
            "create_plan",
            lambda api_key: stripe.Plan.create(api_key=api_key, **params),
            access_token=access_token,
            retry=retry,
            context={"plan_id": params.get("id")},
        )

    def retrieve_plan(
        self,
        plan_id: str,
        access_token: str | None = None,
        retry: bool = False,
    ) -> GatewayResult[Any]:
        """Retrieve a plan by id."""
        return self._call(
            "retrieve_plan",
            lambda api_key: stripe.Plan.retrieve(plan_id, api_key=api_key),
            access_token=access_token,
            retry=retry,
            context={"plan_id": plan_id},
            level=logging.DEBUG,
        )

    def delete_plan(
        self,
        plan_id: str,
        access_token: str | None = None,
        retry: bool = False,
    ) -> GatewayResult[Any]:
        """Delete a plan by id."""
        return self._call(
            "delete_plan",
            lambda api_key: stripe.Plan.delete(plan_id, api_key=api_key),
            access_token=access_token,
            retry=retry,
            context={"plan_id": plan_id},
        )

    def create_token(
        self,
        params: dict[str, Any],
        access_token: str | None = None,
        retry: bool = False,
    ) -> GatewayResult[Any]:
        """Tokenize card details. The card itself is never logged."""
        return self._call(
            "create_token",
            lambda api_key: stripe.Token.create(api_key=api_key, **params),
            access_token=access_token,
            retry=retry,
            context={"currency": params.get("currency")},
        )

    # =========================================================================
    # Call Execution
    # =========================================================================

    def _call(
        self,
        operation: str,
        request: Callable[[str], Any],
        access_token: str | None,
        retry: bool,
        context: dict[str, Any] | None = None,
        level: int = logging.INFO,
    ) -> GatewayResult[Any]:
        """
        Run one Stripe request with the right credential.

        Args:
            operation: Operation name for logging
            request: Callable issuing the request, given the credential
            access_token: Connected-account credential, if any
            retry: Whether the caller is retrying (logged only)
            context: Extra, non-sensitive log fields
            level: Log level for start/completion messages
        """
        configure_http_client(self.timeout)
        logger = self.get_logger()

        log_context = {
            "operation": operation,
            "connected_account": access_token is not None,
            "retry": retry,
            **(context or {}),
        }

        start_time = time.time()
        logger.log(level, "Starting Stripe operation", extra=log_context)

        try:
            response = request(self.credential_for(access_token))
        except stripe.StripeError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "Stripe operation failed",
                extra={
                    **log_context,
                    "error_class": type(e).__name__,
                    "duration_ms": duration_ms,
                },
            )
            return GatewayResult.failed(e, duration_ms=duration_ms)

        duration_ms = (time.time() - start_time) * 1000
        logger.log(
            level,
            "Stripe operation completed",
            extra={
                **log_context,
                "stripe_id": getattr(response, "id", None),
                "duration_ms": duration_ms,
            },
        )
        return GatewayResult.ok(response, duration_ms=duration_ms)
