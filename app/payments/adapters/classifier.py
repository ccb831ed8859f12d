"""
Classification of Stripe errors into the local error taxonomy.

Each Stripe error category maps to exactly one outcome:

    Stripe error          kind        response   reason
    --------------------  ----------  ---------  ----------------------
    CardError             financial   Failed     error code
    InvalidRequestError   financial   invalid    error type
    AuthenticationError   financial   Failed     error type
    APIConnectionError    blocked     timeout    error type
    any other StripeError financial   Failed     "stripe_error"

raise_classified() applies the outcome to the transaction, logs it and
raises the matching payments.exceptions error with the transaction
attached.

Usage:
    result = gateway.create_charge(params)
    if not result.success:
        raise_classified(classify(result.error), transaction)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import stripe
from django.db import models

from payments.constants import ReasonCode, ResponseCode
from payments.exceptions import (
    BlockedError,
    FinancialError,
    StripeAPIUnavailableError,
    StripeAuthenticationError,
    StripeCardDeclinedError,
    StripeGenericError,
    StripeInvalidRequestError,
)

if TYPE_CHECKING:
    from typing import NoReturn

    from payments.protocols import FinancialTransaction

logger = logging.getLogger(__name__)


class ErrorKind(models.TextChoices):
    """Local error kinds the orchestration engine acts on."""

    FINANCIAL = "financial", "Recoverable Financial Error"
    BLOCKED = "blocked", "Blocked"


# Error types Stripe would report for each class, used when the error
# carries no JSON body (typical for connection errors)
DEFAULT_ERROR_TYPES: dict[type[stripe.StripeError], str] = {
    stripe.CardError: "card_error",
    stripe.InvalidRequestError: "invalid_request_error",
    stripe.AuthenticationError: "authentication_error",
    stripe.APIConnectionError: "api_connection_error",
}


@dataclass(frozen=True)
class Classification:
    """
    Local view of a gateway failure.

    Attributes:
        kind: Financial or blocked
        response_code: Response code to write onto the transaction
        reason_code: Reason code to write onto the transaction
        message: Human-readable message (also logged)
        error_class: payments.exceptions class to raise
        cause: The original Stripe error
    """

    kind: ErrorKind
    response_code: str
    reason_code: str
    message: str
    error_class: type[FinancialError] | type[BlockedError]
    cause: stripe.StripeError | None = None

    @property
    def is_blocked(self) -> bool:
        return self.kind == ErrorKind.BLOCKED


def _error_body(error: stripe.StripeError) -> dict[str, Any]:
    """Return the "error" object of a Stripe error body, or {}."""
    body = getattr(error, "json_body", None)
    if not isinstance(body, dict):
        return {}
    err = body.get("error")
    return err if isinstance(err, dict) else {}


def _error_type(error: stripe.StripeError, err: dict[str, Any]) -> str:
    if err.get("type"):
        return str(err["type"])
    for error_cls, default in DEFAULT_ERROR_TYPES.items():
        if isinstance(error, error_cls):
            return default
    return ReasonCode.STRIPE_ERROR.value


def classify(error: stripe.StripeError) -> Classification:
    """
    Map a Stripe error to a Classification.

    Missing body fields never fail classification: the type falls back
    to the default for the error class, message and code to "".
    """
    err = _error_body(error)
    error_type = _error_type(error, err)

    if isinstance(error, stripe.CardError):
        code = str(err.get("code") or getattr(error, "code", None) or "")
        return Classification(
            kind=ErrorKind.FINANCIAL,
            response_code=ResponseCode.FAILED,
            reason_code=code,
            message=f'Stripe {error_type}: "{code}"',
            error_class=StripeCardDeclinedError,
            cause=error,
        )

    if isinstance(error, stripe.InvalidRequestError):
        message = str(err.get("message") or "")
        return Classification(
            kind=ErrorKind.FINANCIAL,
            response_code=ResponseCode.INVALID,
            reason_code=error_type,
            message=f'Stripe {error_type}: "{message}"',
            error_class=StripeInvalidRequestError,
            cause=error,
        )

    if isinstance(error, stripe.AuthenticationError):
        return Classification(
            kind=ErrorKind.FINANCIAL,
            response_code=ResponseCode.FAILED,
            reason_code=error_type,
            message=f"Stripe {error_type}",
            error_class=StripeAuthenticationError,
            cause=error,
        )

    if isinstance(error, stripe.APIConnectionError):
        return Classification(
            kind=ErrorKind.BLOCKED,
            response_code=ResponseCode.TIMEOUT,
            reason_code=error_type,
            message=f"Stripe {error_type}",
            error_class=StripeAPIUnavailableError,
            cause=error,
        )

    return Classification(
        kind=ErrorKind.FINANCIAL,
        response_code=ResponseCode.FAILED,
        reason_code=ReasonCode.STRIPE_ERROR,
        message=f"Stripe {ReasonCode.STRIPE_ERROR.value}",
        error_class=StripeGenericError,
        cause=error,
    )


def raise_classified(
    classification: Classification,
    transaction: FinancialTransaction | None = None,
    log_context: dict[str, Any] | None = None,
) -> NoReturn:
    """
    Apply a classification to the transaction and raise.

    Response and reason codes are written before the error is raised.
    Reference number and processed amount are left untouched.

    Raises:
        FinancialError: For financial classifications
        BlockedError: For blocked classifications
    """
    if transaction is not None:
        transaction.reason_code = str(classification.reason_code)
        transaction.response_code = str(classification.response_code)

    extra = {
        **(log_context or {}),
        "kind": str(classification.kind),
        "response_code": str(classification.response_code),
        "reason_code": str(classification.reason_code),
    }
    if classification.error_class is StripeAuthenticationError:
        logger.critical(classification.message, extra=extra)
    elif classification.is_blocked:
        logger.error(classification.message, extra=extra, exc_info=classification.cause)
    else:
        logger.error(classification.message, extra=extra)

    exc = classification.error_class(
        classification.message,
        response_code=str(classification.response_code),
        reason_code=str(classification.reason_code),
        financial_transaction=transaction,
    )
    raise exc from classification.cause
