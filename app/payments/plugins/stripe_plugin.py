"""
Stripe payment plugin.

Adapts the processor-agnostic transaction, plan and recurring models onto
Stripe. Each public operation maps its input, makes the gateway call(s)
through StripeGateway and writes the outcome back:

- success: a snapshot of the response is projected onto the domain object
- failure: the Stripe error is classified, applied to the transaction and
  raised as a FinancialError or BlockedError with the transaction attached

The plugin never retries. Multi-call operations (delete_plan,
initialize_recurring) are not compensated: if the second call fails, the
first call's effect on Stripe stands.

Configuration (via settings):
- STRIPE_SECRET_KEY: Default API key when none is passed to the constructor
- STRIPE_PROCESSOR_NAME: Payment system name handled (default: "stripe")

Usage:
    from payments.plugins import StripePlugin

    plugin = StripePlugin(api_key="sk_test_...")
    if plugin.processes("stripe"):
        plugin.approve_and_deposit(transaction, retry=False)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from django.conf import settings

from payments.adapters import (
    StripeGateway,
    classify,
    map_charge,
    map_customer,
    map_plan,
    map_token,
    project,
    raise_classified,
)
from payments.constants import ED_RESPONSE, ReasonCode, ResponseCode
from payments.plugins.base import PaymentPlugin
from payments.types import RecurringTransaction

if TYPE_CHECKING:
    from payments.adapters import GatewayResult
    from payments.protocols import FinancialTransaction, Plan, RecurringInstruction

logger = logging.getLogger(__name__)


class StripePlugin(PaymentPlugin):
    """
    Payment plugin for Stripe charges, plans and subscriptions.

    Stateless apart from the API key held by its gateway, so one instance
    may serve concurrent transactions.
    """

    def __init__(
        self,
        api_key: str | None = None,
        gateway: StripeGateway | None = None,
    ) -> None:
        """
        Initialize the plugin.

        Args:
            api_key: Secret key (defaults to settings.STRIPE_SECRET_KEY)
            gateway: Pre-built gateway; overrides api_key when given
        """
        self.gateway = gateway or StripeGateway(api_key=api_key)
        self.processor_name = getattr(settings, "STRIPE_PROCESSOR_NAME", "stripe")

    # =========================================================================
    # Charges
    # =========================================================================

    def approve_and_deposit(
        self, transaction: FinancialTransaction, retry: bool
    ) -> None:
        """
        Charge the transaction's requested amount in one step.

        On success sets reference number, processed amount, the stored
        response and success codes. On failure sets response and reason
        codes and raises.

        Raises:
            FinancialError: Stripe rejected the charge
            BlockedError: Stripe could not be reached
        """
        request = map_charge(transaction)
        log_context = {
            "operation": "approve_and_deposit",
            "retry": retry,
            "amount_cents": request.params["amount"],
            "currency": request.params["currency"],
        }
        logger.info("Charging transaction", extra=log_context)

        result = self.gateway.create_charge(
            request.params,
            access_token=request.access_token,
            idempotency_key=request.idempotency_key,
            retry=retry,
        )
        self._raise_for_failure(result, transaction, log_context)

        snapshot = project(result.data)
        transaction.reference_number = snapshot.id
        transaction.processed_amount = snapshot.processed_amount
        transaction.extended_data.set(ED_RESPONSE, snapshot.to_dict())
        transaction.response_code = ResponseCode.SUCCESS.value
        transaction.reason_code = ReasonCode.SUCCESS.value

        logger.info(
            "Transaction charged",
            extra={**log_context, "reference_number": snapshot.id},
        )

    # =========================================================================
    # Plans
    # =========================================================================

    def create_plan(self, plan: Plan, retry: bool) -> Any:
        """
        Create a plan on Stripe.

        Raises:
            PluginConfigurationError: Plan interval has no Stripe token
            FinancialError: Stripe rejected the plan
            BlockedError: Stripe could not be reached
        """
        params = map_plan(plan)
        result = self.gateway.create_plan(params, retry=retry)
        self._raise_for_failure(
            result, None, {"operation": "create_plan", "plan_id": plan.id, "retry": retry}
        )
        return result.data

    def retrieve_plan(self, plan_id: str, retry: bool) -> Any:
        """
        Fetch a plan from Stripe.

        Raises:
            FinancialError: Plan does not exist or request rejected
            BlockedError: Stripe could not be reached
        """
        result = self.gateway.retrieve_plan(plan_id, retry=retry)
        self._raise_for_failure(
            result, None, {"operation": "retrieve_plan", "plan_id": plan_id, "retry": retry}
        )
        return result.data

    def delete_plan(self, plan: Plan, retry: bool) -> Any:
        """
        Delete a plan on Stripe.

        Retrieves the plan first; if that fails its error propagates and
        no delete is attempted.
        """
        stripe_plan = self.retrieve_plan(plan.id, retry)
        plan_id = getattr(stripe_plan, "id", None) or plan.id

        result = self.gateway.delete_plan(plan_id, retry=retry)
        self._raise_for_failure(
            result, None, {"operation": "delete_plan", "plan_id": plan_id, "retry": retry}
        )
        return result.data

    # =========================================================================
    # Recurring Billing
    # =========================================================================

    def initialize_recurring(
        self, instruction: RecurringInstruction, retry: bool
    ) -> RecurringTransaction:
        """
        Subscribe the instruction's card to its plan.

        Tokenizes the card, creates a customer bound to the token and the
        plan, then returns a new RecurringTransaction for the caller to
        persist. Failures of either call are classified like charge
        failures, without a transaction attached.
        """
        profile = instruction.credit_card_profile
        log_context = {
            "operation": "initialize_recurring",
            "plan_id": instruction.provider_plan_id,
            "retry": retry,
        }

        token_result = self.gateway.create_token(
            map_token(profile, instruction.currency), retry=retry
        )
        self._raise_for_failure(token_result, None, log_context)
        token = project(token_result.data)

        customer_result = self.gateway.create_customer(
            map_customer(token.id, instruction), retry=retry
        )
        self._raise_for_failure(customer_result, None, log_context)
        customer = project(customer_result.data)

        recurring = RecurringTransaction(
            amount=instruction.amount,
            billing_frequency=instruction.billing_frequency,
            billing_interval=instruction.billing_interval,
            currency=instruction.currency,
            plan_id=instruction.provider_plan_id,
            processor=self.processor_name,
            processor_id=customer.id,
            credit_card_profile=profile,
        )
        recurring.add_response_data(customer.to_dict())

        logger.info(
            "Recurring billing initialized",
            extra={**log_context, "processor_id": customer.id},
        )
        return recurring

    # =========================================================================
    # Capabilities
    # =========================================================================

    def processes(self, payment_system_name: str) -> bool:
        return payment_system_name == self.processor_name

    def is_independent_credit_supported(self) -> bool:
        return False

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _raise_for_failure(
        result: GatewayResult[Any],
        transaction: FinancialTransaction | None,
        log_context: dict[str, Any],
    ) -> None:
        if result.success:
            return
        raise_classified(classify(result.error), transaction, log_context)
