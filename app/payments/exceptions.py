"""
Payment-specific exceptions for plugin operations.

This module provides the local error taxonomy the orchestration engine
acts on. Every gateway failure is translated into one of these before it
leaves a plugin.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PluginError - Base for errors raised by a plugin operation
    │   ├── FinancialError - Gateway rejected the request (do not resubmit as-is)
    │   │   ├── StripeCardDeclinedError - Card declined or card-level error
    │   │   ├── StripeInvalidRequestError - Malformed request
    │   │   ├── StripeAuthenticationError - Bad credentials
    │   │   └── StripeGenericError - Unclassified Stripe error
    │   ├── BlockedError - Gateway unreachable (pause, retry later)
    │   │   └── StripeAPIUnavailableError - Connection failure or timeout
    │   └── FunctionNotSupportedError - Operation not offered by the plugin
    └── PluginConfigurationError - Local mapping bug (fatal, never retry)

Usage:
    from payments.exceptions import BlockedError, FinancialError

    try:
        plugin.approve_and_deposit(transaction, retry=False)
    except BlockedError as e:
        schedule_later(e.financial_transaction)
    except FinancialError as e:
        notify_payer(e.reason_code)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

    from payments.protocols import FinancialTransaction


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all payment operations.

    All payment-specific exceptions inherit from this class,
    which itself inherits from BaseApplicationError.
    """

    default_error_code: str = "PAYMENT_ERROR"


class PluginError(PaymentError):
    """
    Base exception for errors raised by a payment plugin.

    The transaction the plugin was working on is attached so the caller
    can inspect its response and reason codes without re-fetching it.
    Operations that have no transaction (plans, recurring setup) attach
    None.

    Attributes:
        financial_transaction: Transaction being processed (or None)
        is_retryable: Whether the caller may retry later with the same input
    """

    default_error_code: str = "PLUGIN_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        financial_transaction: FinancialTransaction | None = None,
    ):
        super().__init__(message, error_code=error_code, details=details)
        self.financial_transaction = financial_transaction

    def set_financial_transaction(
        self, transaction: FinancialTransaction | None
    ) -> None:
        """Attach the transaction the error belongs to."""
        self.financial_transaction = transaction


class FinancialError(PluginError):
    """
    The gateway explicitly rejected the request.

    Not automatically retryable with the same input. The caller decides
    on user-facing messaging or a new attempt with corrected input.

    Attributes:
        response_code: Response code written onto the transaction
        reason_code: Reason code written onto the transaction
    """

    default_error_code: str = "FINANCIAL_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        response_code: str | None = None,
        reason_code: str | None = None,
        details: dict[str, Any] | None = None,
        financial_transaction: FinancialTransaction | None = None,
    ):
        details = details or {}
        if response_code:
            details["response_code"] = response_code
        if reason_code:
            details["reason_code"] = reason_code
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            financial_transaction=financial_transaction,
        )
        self.response_code = response_code
        self.reason_code = reason_code


class BlockedError(PluginError):
    """
    The gateway could not be reached.

    Signals the caller to pause automatic processing of the transaction
    and try again later. The transaction is not failed permanently.

    Note:
        The remote side may or may not have received the request. Retry
        with the same idempotency key where one was supplied.
    """

    default_error_code: str = "BLOCKED"
    is_retryable: bool = True

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        response_code: str | None = None,
        reason_code: str | None = None,
        details: dict[str, Any] | None = None,
        financial_transaction: FinancialTransaction | None = None,
    ):
        details = details or {}
        if response_code:
            details["response_code"] = response_code
        if reason_code:
            details["reason_code"] = reason_code
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            financial_transaction=financial_transaction,
        )
        self.response_code = response_code
        self.reason_code = reason_code


class FunctionNotSupportedError(PluginError):
    """Raised when a plugin does not offer the requested operation."""

    default_error_code: str = "FUNCTION_NOT_SUPPORTED"


class PluginConfigurationError(PaymentError):
    """
    A local mapping is broken.

    Raised for programmer or deployment errors such as a billing interval
    with no gateway token. Never caused by the gateway; do not catch and
    retry.
    """

    default_error_code: str = "PLUGIN_CONFIGURATION_ERROR"
    is_retryable: bool = False


# =============================================================================
# Stripe-Specific Exceptions
# =============================================================================


class StripeCardDeclinedError(FinancialError):
    """
    Card was declined or rejected at card level.

    The reason_code holds Stripe's specific code, e.g. "card_declined",
    "expired_card" or "incorrect_cvc".
    """

    default_error_code: str = "CARD_DECLINED"


class StripeInvalidRequestError(FinancialError):
    """
    Invalid request parameters sent to Stripe.

    The request is malformed and will never succeed with the same
    parameters. A missing card token on a charge ends up here.
    """

    default_error_code: str = "INVALID_STRIPE_REQUEST"


class StripeAuthenticationError(FinancialError):
    """
    Stripe rejected the credentials.

    Either the configured API key or the connected account's access
    token is invalid. Operational issue, not a payer issue.
    """

    default_error_code: str = "STRIPE_AUTHENTICATION_FAILED"


class StripeGenericError(FinancialError):
    """Stripe error that fits no other category."""

    default_error_code: str = "STRIPE_ERROR"


class StripeAPIUnavailableError(BlockedError):
    """
    Stripe API could not be reached.

    Covers network connectivity issues, DNS failures and transport
    timeouts.
    """

    default_error_code: str = "STRIPE_UNAVAILABLE"


def is_retryable_plugin_error(error: Exception) -> bool:
    """
    Check if an error allows a later retry.

    Args:
        error: The exception to check

    Returns:
        True for blocked errors, False for everything else
    """
    if isinstance(error, PaymentError):
        return getattr(error, "is_retryable", False)
    return False


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Payment domain
    "PaymentError",
    "PluginError",
    "FinancialError",
    "BlockedError",
    "FunctionNotSupportedError",
    "PluginConfigurationError",
    # Stripe-specific
    "StripeCardDeclinedError",
    "StripeInvalidRequestError",
    "StripeAuthenticationError",
    "StripeGenericError",
    "StripeAPIUnavailableError",
    # Helpers
    "is_retryable_plugin_error",
]
