"""
Tests for Stripe error classification.

Tests cover:
- One classification per Stripe error category
- Fallbacks when the error body is missing fields
- Transaction codes written before raising
- Logging of classified failures
"""

import logging

import pytest
import stripe

from payments.adapters.classifier import ErrorKind, classify, raise_classified
from payments.exceptions import (
    BlockedError,
    FinancialError,
    StripeAPIUnavailableError,
    StripeAuthenticationError,
    StripeCardDeclinedError,
    StripeGenericError,
    StripeInvalidRequestError,
)
from payments.tests.factories import FinancialTransactionFactory


# =============================================================================
# classify() Tests
# =============================================================================


class TestClassify:
    """Tests for classify()."""

    def test_card_error(self, card_error):
        """Card errors fail with the Stripe error code as reason."""
        classification = classify(card_error(code="card_declined"))

        assert classification.kind == ErrorKind.FINANCIAL
        assert classification.response_code == "Failed"
        assert classification.reason_code == "card_declined"
        assert classification.message == 'Stripe card_error: "card_declined"'
        assert classification.error_class is StripeCardDeclinedError

    def test_card_error_other_code(self, card_error):
        classification = classify(card_error(code="expired_card"))

        assert classification.reason_code == "expired_card"
        assert classification.message == 'Stripe card_error: "expired_card"'

    def test_invalid_request_error(self, invalid_request_error):
        """Invalid requests use the error type as reason."""
        classification = classify(
            invalid_request_error(message="Missing required param: amount.")
        )

        assert classification.kind == ErrorKind.FINANCIAL
        assert classification.response_code == "invalid"
        assert classification.reason_code == "invalid_request_error"
        assert (
            classification.message
            == 'Stripe invalid_request_error: "Missing required param: amount."'
        )
        assert classification.error_class is StripeInvalidRequestError

    def test_invalid_request_without_message(self, invalid_request_error):
        """A body without a message classifies with an empty message."""
        classification = classify(invalid_request_error(message=None))

        assert classification.message == 'Stripe invalid_request_error: ""'

    def test_authentication_error(self, authentication_error):
        """Authentication errors take the type reported in the body."""
        classification = classify(authentication_error)

        assert classification.kind == ErrorKind.FINANCIAL
        assert classification.response_code == "Failed"
        assert classification.reason_code == "invalid_request_error"
        assert classification.message == "Stripe invalid_request_error"
        assert classification.error_class is StripeAuthenticationError

    def test_authentication_error_without_body(self):
        """Without a body the type falls back to the error class default."""
        classification = classify(stripe.AuthenticationError(message="No API key"))

        assert classification.reason_code == "authentication_error"
        assert classification.message == "Stripe authentication_error"

    def test_api_connection_error(self, api_connection_error):
        """Connection errors block the transaction with a timeout."""
        classification = classify(api_connection_error)

        assert classification.kind == ErrorKind.BLOCKED
        assert classification.is_blocked is True
        assert classification.response_code == "timeout"
        assert classification.reason_code == "api_connection_error"
        assert classification.message == "Stripe api_connection_error"
        assert classification.error_class is StripeAPIUnavailableError

    @pytest.mark.parametrize("fixture", ["api_error", "rate_limit_error"])
    def test_unclassified_errors(self, fixture, request):
        """Every other Stripe error is a generic financial failure."""
        classification = classify(request.getfixturevalue(fixture))

        assert classification.kind == ErrorKind.FINANCIAL
        assert classification.response_code == "Failed"
        assert classification.reason_code == "stripe_error"
        assert classification.message == "Stripe stripe_error"
        assert classification.error_class is StripeGenericError

    def test_cause_is_kept(self, card_error):
        error = card_error()

        assert classify(error).cause is error


# =============================================================================
# raise_classified() Tests
# =============================================================================


class TestRaiseClassified:
    """Tests for raise_classified()."""

    def test_financial_error_updates_transaction(self, card_error):
        """Codes are written onto the transaction before raising."""
        transaction = FinancialTransactionFactory()
        error = card_error(code="card_declined")

        with pytest.raises(StripeCardDeclinedError) as exc_info:
            raise_classified(classify(error), transaction)

        assert transaction.response_code == "Failed"
        assert transaction.reason_code == "card_declined"
        assert transaction.reference_number is None
        assert transaction.processed_amount is None

        raised = exc_info.value
        assert isinstance(raised, FinancialError)
        assert raised.financial_transaction is transaction
        assert raised.response_code == "Failed"
        assert raised.reason_code == "card_declined"
        assert raised.__cause__ is error
        assert raised.message == 'Stripe card_error: "card_declined"'
        assert raised.error_code == "CARD_DECLINED"

    def test_blocked_error(self, api_connection_error):
        transaction = FinancialTransactionFactory()

        with pytest.raises(BlockedError) as exc_info:
            raise_classified(classify(api_connection_error), transaction)

        assert transaction.response_code == "timeout"
        assert transaction.reason_code == "api_connection_error"
        assert exc_info.value.is_retryable is True
        assert exc_info.value.financial_transaction is transaction

    def test_without_transaction(self, invalid_request_error):
        """Plan and recurring failures raise without a transaction."""
        with pytest.raises(StripeInvalidRequestError) as exc_info:
            raise_classified(classify(invalid_request_error()))

        assert exc_info.value.financial_transaction is None
        assert exc_info.value.response_code == "invalid"

    def test_codes_are_plain_strings(self, api_error):
        transaction = FinancialTransactionFactory()

        with pytest.raises(StripeGenericError):
            raise_classified(classify(api_error), transaction)

        assert type(transaction.response_code) is str
        assert type(transaction.reason_code) is str

    def test_failure_is_logged(self, card_error, caplog):
        with caplog.at_level(logging.ERROR, logger="payments.adapters.classifier"):
            with pytest.raises(StripeCardDeclinedError):
                raise_classified(
                    classify(card_error()),
                    log_context={"operation": "approve_and_deposit"},
                )

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == 'Stripe card_error: "card_declined"'
        assert record.operation == "approve_and_deposit"
        assert record.reason_code == "card_declined"

    def test_authentication_failure_is_critical(self, authentication_error, caplog):
        with caplog.at_level(logging.ERROR, logger="payments.adapters.classifier"):
            with pytest.raises(StripeAuthenticationError):
                raise_classified(classify(authentication_error))

        assert caplog.records[-1].levelno == logging.CRITICAL
