"""
Protocol definitions for the objects a payment plugin works on.

The orchestration engine owns transactions, plans and credit card
profiles; plugins only read and mutate them through these interfaces.
Any object with the right attributes satisfies a protocol, so callers can
pass ORM models, documents or the plain dataclasses in payments.types.

Available Protocols:
    ExtendedData: Key/value bag attached to a transaction
    PaymentInstruction: Carries the currency of a payment
    FinancialTransaction: Transaction a plugin processes
    CreditCardProfile: Read-only card details
    Plan: Recurring billing plan snapshot
    RecurringInstruction: Request to subscribe a card to a plan

Usage:
    from payments.protocols import FinancialTransaction

    def charge(transaction: FinancialTransaction) -> None:
        ed = transaction.extended_data
        if ed.has("token"):
            ...

Note:
    - Protocols are primarily for type checking
    - @runtime_checkable allows isinstance() checks
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable
    from decimal import Decimal
    from typing import Any


@runtime_checkable
class ExtendedData(Protocol):
    """
    Extensible key/value bag.

    Used both as plugin input (card token, description, access token,
    application fee) and output (stored gateway response). Absence of a
    key is not an error; check with has() before get().
    """

    def has(self, key: str) -> bool:
        """Return True if the key is present."""
        ...

    def get(self, key: str) -> Any:
        """
        Return the value stored under key.

        Raises:
            KeyError: If the key is not present
        """
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a value under key, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Remove a key if present."""
        ...

    def items(self) -> Iterable[tuple[str, Any]]:
        """Iterate over stored key/value pairs."""
        ...


@runtime_checkable
class PaymentInstruction(Protocol):
    """What the payer agreed to pay in, shared by all payments of an order."""

    currency: str


@runtime_checkable
class FinancialTransaction(Protocol):
    """
    A single financial transaction processed by a plugin.

    Created by the caller before the plugin runs. The plugin sets the
    reference number and processed amount only on success, and always
    sets the response and reason codes.
    """

    requested_amount: Decimal
    processed_amount: Decimal | None
    reference_number: str | None
    response_code: str | None
    reason_code: str | None

    @property
    def payment_instruction(self) -> PaymentInstruction: ...

    @property
    def extended_data(self) -> ExtendedData: ...


@runtime_checkable
class CreditCardProfile(Protocol):
    """
    Read-only card details.

    The card number is access-scoped: read it through card_number() with
    a usage scope such as "active". Scope semantics belong to the
    implementation and are not validated by plugins.
    """

    cvv: str | None
    name: str | None
    email: str | None
    street1: str | None
    street2: str | None
    postcode: str | None
    state: str | None
    country: str | None

    def card_number(self, scope: str) -> str | None:
        """Return the card number for the given usage scope."""
        ...

    @property
    def expiration(self) -> dict[str, Any]:
        """Return the expiration as {"month": ..., "year": ...}."""
        ...


@runtime_checkable
class Plan(Protocol):
    """Immutable snapshot of a recurring billing plan."""

    id: str
    amount: Decimal
    currency: str
    interval: str
    name: str
    trial_period_days: int | None


@runtime_checkable
class RecurringInstruction(Protocol):
    """Request to subscribe a credit card to a provider plan."""

    credit_card_profile: CreditCardProfile
    provider_plan_id: str
    amount: Decimal
    currency: str
    billing_frequency: int
    billing_interval: str
