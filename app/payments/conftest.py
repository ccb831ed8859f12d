"""
Pytest fixtures shared by all payment test suites.

This module provides the Stripe mocks and domain objects shared by the
adapter and plugin test suites. Stripe is never contacted: resources are
patched with unittest.mock and errors are real stripe exception classes.

Sections:
    - Mock Stripe Objects
    - Domain Object Fixtures
    - Mock Stripe Error Fixtures
    - Mock Stripe Client Fixtures
"""

from dataclasses import dataclass
from typing import Any
from unittest.mock import patch

import pytest
import stripe

from payments.adapters import stripe_adapter
from payments.tests.factories import (
    CreditCardProfileFactory,
    FinancialTransactionFactory,
    PlanFactory,
    RecurringInstructionFactory,
)
from payments.types import ExtendedDataBag


# =============================================================================
# Mock Stripe Objects
# =============================================================================


@dataclass
class MockStripeObject:
    """Mock Stripe API object with to_dict support."""

    data: dict[str, Any]

    def __getattr__(self, name: str) -> Any:
        if name == "data":
            return self.__dict__["data"]
        return self.data.get(name)

    def to_dict(self) -> dict[str, Any]:
        return self.data


class FakeStripePlans:
    """
    In-memory stand-in for stripe.Plan.

    Keeps created plans by id so create, retrieve and delete behave like
    the real resource, including the error for unknown ids.
    """

    def __init__(self) -> None:
        self.plans: dict[str, dict[str, Any]] = {}
        self.calls: list[tuple[str, str | None]] = []

    def create(self, api_key: str | None = None, **params: Any) -> MockStripeObject:
        self.calls.append(("create", api_key))
        plan = {"object": "plan", "active": True, **params}
        self.plans[params["id"]] = plan
        return MockStripeObject(dict(plan))

    def retrieve(self, plan_id: str, api_key: str | None = None) -> MockStripeObject:
        self.calls.append(("retrieve", api_key))
        if plan_id not in self.plans:
            raise self._missing(plan_id)
        return MockStripeObject(dict(self.plans[plan_id]))

    def delete(self, plan_id: str, api_key: str | None = None) -> MockStripeObject:
        self.calls.append(("delete", api_key))
        if plan_id not in self.plans:
            raise self._missing(plan_id)
        del self.plans[plan_id]
        return MockStripeObject({"id": plan_id, "object": "plan", "deleted": True})

    @staticmethod
    def _missing(plan_id: str) -> stripe.InvalidRequestError:
        message = f"No such plan: '{plan_id}'"
        return stripe.InvalidRequestError(
            message=message,
            param="plan",
            code="resource_missing",
            json_body={
                "error": {
                    "type": "invalid_request_error",
                    "code": "resource_missing",
                    "message": message,
                    "param": "plan",
                }
            },
        )


@pytest.fixture
def mock_charge():
    """Create a mock Charge response."""

    def _create(
        id: str = "ch_1",
        amount: int = 100,
        currency: str = "usd",
        status: str = "succeeded",
        **extra: Any,
    ) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "charge",
                "amount": amount,
                "currency": currency,
                "status": status,
                "paid": True,
                "source": {"id": "card_1", "object": "card", "last4": "4242"},
                **extra,
            }
        )

    return _create


@pytest.fixture
def mock_token():
    """Create a mock Token response."""

    def _create(id: str = "tok_1") -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "token",
                "type": "card",
                "card": {"id": "card_1", "object": "card", "last4": "4242"},
            }
        )

    return _create


@pytest.fixture
def mock_customer():
    """Create a mock Customer response."""

    def _create(id: str = "cus_1", email: str | None = None) -> MockStripeObject:
        return MockStripeObject(
            {
                "id": id,
                "object": "customer",
                "email": email,
                "subscriptions": {
                    "object": "list",
                    "data": [{"id": "sub_1", "object": "subscription"}],
                },
            }
        )

    return _create


# =============================================================================
# Domain Object Fixtures
# =============================================================================


@pytest.fixture
def transaction():
    """Transaction charging 1.00 USD to Stripe's test Visa token."""
    return FinancialTransactionFactory(
        extended_data=ExtendedDataBag({"token": "tok_visa"}),
    )


@pytest.fixture
def credit_card():
    """Credit card profile with Stripe's test Visa number."""
    return CreditCardProfileFactory()


@pytest.fixture
def plan():
    """Monthly 2.00 USD plan."""
    return PlanFactory(id="plugin-test-create-plan")


@pytest.fixture
def recurring_instruction(credit_card):
    """Instruction subscribing the test card to the "gold" plan."""
    return RecurringInstructionFactory(credit_card_profile=credit_card)


# =============================================================================
# Mock Stripe Error Fixtures
# =============================================================================


@pytest.fixture
def card_error():
    """Create a Stripe CardError with a JSON body."""

    def _create(
        code: str = "card_declined",
        message: str = "Your card was declined.",
        decline_code: str | None = "generic_decline",
    ) -> stripe.CardError:
        return stripe.CardError(
            message=message,
            param=None,
            code=code,
            http_status=402,
            json_body={
                "error": {
                    "type": "card_error",
                    "code": code,
                    "decline_code": decline_code,
                    "message": message,
                }
            },
        )

    return _create


@pytest.fixture
def invalid_request_error():
    """Create a Stripe InvalidRequestError with a JSON body."""

    def _create(
        message: str | None = "You must supply either a card or a customer id.",
        param: str | None = "card",
    ) -> stripe.InvalidRequestError:
        error: dict[str, Any] = {"type": "invalid_request_error", "param": param}
        if message is not None:
            error["message"] = message
        return stripe.InvalidRequestError(
            message=message or "",
            param=param,
            http_status=400,
            json_body={"error": error},
        )

    return _create


@pytest.fixture
def authentication_error():
    """Create a Stripe AuthenticationError."""
    return stripe.AuthenticationError(
        message="Invalid API Key provided: sk_test_****",
        http_status=401,
        json_body={
            "error": {
                "type": "invalid_request_error",
                "message": "Invalid API Key provided: sk_test_****",
            }
        },
    )


@pytest.fixture
def api_connection_error():
    """Create a Stripe APIConnectionError (no JSON body, as in practice)."""
    return stripe.APIConnectionError(
        message="Could not connect to Stripe.",
    )


@pytest.fixture
def api_error():
    """Create a Stripe APIError."""
    return stripe.APIError(
        message="Something went wrong on Stripe's end.",
        http_status=500,
    )


@pytest.fixture
def rate_limit_error():
    """Create a Stripe RateLimitError."""
    return stripe.RateLimitError(
        message="Too many requests hit the API too quickly.",
        http_status=429,
    )


# =============================================================================
# Mock Stripe Client Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def mock_stripe_http_client(monkeypatch):
    """Mock the stripe HTTP client and reset the configured timeout."""
    monkeypatch.setattr(stripe, "default_http_client", None)
    monkeypatch.setattr(stripe_adapter, "_http_client_timeout", None)
    with patch("stripe.RequestsClient") as mock:
        yield mock


@pytest.fixture
def mock_stripe_charge(mock_charge):
    """Mock stripe.Charge API."""
    with patch("stripe.Charge") as mock:
        mock.create.return_value = mock_charge()
        yield mock


@pytest.fixture
def mock_stripe_token(mock_token):
    """Mock stripe.Token API."""
    with patch("stripe.Token") as mock:
        mock.create.return_value = mock_token()
        yield mock


@pytest.fixture
def mock_stripe_customer(mock_customer):
    """Mock stripe.Customer API."""
    with patch("stripe.Customer") as mock:
        mock.create.return_value = mock_customer()
        yield mock


@pytest.fixture
def mock_stripe_plan():
    """Mock stripe.Plan API."""
    with patch("stripe.Plan") as mock:
        yield mock


@pytest.fixture
def fake_stripe_plans():
    """Replace stripe.Plan with an in-memory plan store."""
    fake = FakeStripePlans()
    with patch("stripe.Plan", fake):
        yield fake
