"""
Abstract base class for payment plugins.

This module defines the contract between the orchestration engine and a
payment gateway plugin. The engine owns transaction state machines and
persistence; a plugin only talks to its gateway and writes the outcome
onto the objects it is handed.

Every operation takes a ``retry`` flag. It tells the plugin whether the
engine is retrying the same transaction; plugins use it for logging and
never loop on their own.

Operations a plugin does not offer raise FunctionNotSupportedError.

Usage:
    class MyGatewayPlugin(PaymentPlugin):
        def approve_and_deposit(self, transaction, retry):
            ...

        def processes(self, payment_system_name):
            return payment_system_name == "my_gateway"
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from payments.exceptions import FunctionNotSupportedError

if TYPE_CHECKING:
    from payments.protocols import FinancialTransaction, Plan, RecurringInstruction
    from payments.types import RecurringTransaction


class PaymentPlugin(ABC):
    """
    Base class for payment gateway plugins.

    Subclasses must implement processes(); everything else defaults to
    FunctionNotSupportedError.
    """

    def _not_supported(
        self, operation: str, transaction: FinancialTransaction | None = None
    ) -> FunctionNotSupportedError:
        return FunctionNotSupportedError(
            f"{type(self).__name__} does not support {operation}()",
            details={"operation": operation},
            financial_transaction=transaction,
        )

    # =========================================================================
    # Transaction Operations
    # =========================================================================

    def approve(self, transaction: FinancialTransaction, retry: bool) -> None:
        """Authorize funds without capturing them."""
        raise self._not_supported("approve", transaction)

    def deposit(self, transaction: FinancialTransaction, retry: bool) -> None:
        """Capture previously approved funds."""
        raise self._not_supported("deposit", transaction)

    def approve_and_deposit(
        self, transaction: FinancialTransaction, retry: bool
    ) -> None:
        """Authorize and capture in a single step."""
        raise self._not_supported("approve_and_deposit", transaction)

    def credit(self, transaction: FinancialTransaction, retry: bool) -> None:
        """Send funds back to the payer."""
        raise self._not_supported("credit", transaction)

    def reverse_approval(
        self, transaction: FinancialTransaction, retry: bool
    ) -> None:
        """Release an authorization."""
        raise self._not_supported("reverse_approval", transaction)

    def reverse_deposit(
        self, transaction: FinancialTransaction, retry: bool
    ) -> None:
        """Reverse a capture."""
        raise self._not_supported("reverse_deposit", transaction)

    # =========================================================================
    # Recurring Billing
    # =========================================================================

    def create_plan(self, plan: Plan, retry: bool) -> Any:
        """Create a billing plan on the gateway."""
        raise self._not_supported("create_plan")

    def retrieve_plan(self, plan_id: str, retry: bool) -> Any:
        """Fetch a billing plan from the gateway."""
        raise self._not_supported("retrieve_plan")

    def delete_plan(self, plan: Plan, retry: bool) -> Any:
        """Delete a billing plan on the gateway."""
        raise self._not_supported("delete_plan")

    def initialize_recurring(
        self, instruction: RecurringInstruction, retry: bool
    ) -> RecurringTransaction:
        """Subscribe a card to a plan and return the new recurring record."""
        raise self._not_supported("initialize_recurring")

    # =========================================================================
    # Capabilities
    # =========================================================================

    @abstractmethod
    def processes(self, payment_system_name: str) -> bool:
        """Return True if this plugin handles the named payment system."""

    def is_independent_credit_supported(self) -> bool:
        """Return True if credits without a prior deposit are supported."""
        return False
