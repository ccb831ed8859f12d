"""
Plain data types for plugin inputs and outputs.

These dataclasses satisfy the protocols in payments.protocols. They are
what callers without their own persistence layer pass to a plugin, and
what the tests build through factories.

Types:
    ExtendedDataBag: In-memory extended data
    PaymentInstructionData: Payment instruction with a currency
    FinancialTransactionData: Transaction processed by a plugin
    CreditCardProfileData: Card details with a scoped number accessor
    PlanData: Recurring billing plan snapshot
    RecurringInstructionData: Subscribe-a-card request
    RecurringTransaction: Created by initialize_recurring(), persisted by the caller

Usage:
    from decimal import Decimal
    from payments.types import (
        ExtendedDataBag,
        FinancialTransactionData,
        PaymentInstructionData,
    )

    ed = ExtendedDataBag()
    ed.set("token", "tok_visa")
    transaction = FinancialTransactionData(
        requested_amount=Decimal("1.00"),
        payment_instruction=PaymentInstructionData(currency="usd"),
        extended_data=ed,
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator


class ExtendedDataBag:
    """
    Mapping-backed extended data.

    Example:
        ed = ExtendedDataBag({"description": "Order #42"})
        ed.has("description")  # True
        ed.get("token")        # KeyError
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def has(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str) -> Any:
        try:
            return self._values[key]
        except KeyError:
            raise KeyError(f"There is no data with key '{key}'.") from None

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def items(self) -> Iterator[tuple[str, Any]]:
        return iter(list(self._values.items()))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ExtendedDataBag(keys={sorted(self._values)!r})"


@dataclass
class PaymentInstructionData:
    """Payment instruction carrying the currency (ISO 4217, lowercase)."""

    currency: str = "usd"


@dataclass
class FinancialTransactionData:
    """
    Financial transaction processed by a plugin.

    Attributes:
        requested_amount: Amount to charge in major units (e.g. dollars)
        payment_instruction: Instruction the transaction belongs to
        extended_data: Input/output key-value bag
        processed_amount: Set by the plugin on success only
        reference_number: Gateway-assigned id, set on success only
        response_code: Set by the plugin on every outcome
        reason_code: Set by the plugin on every outcome
    """

    requested_amount: Decimal
    payment_instruction: PaymentInstructionData = field(
        default_factory=PaymentInstructionData
    )
    extended_data: ExtendedDataBag = field(default_factory=ExtendedDataBag)
    processed_amount: Decimal | None = None
    reference_number: str | None = None
    response_code: str | None = None
    reason_code: str | None = None

    def __post_init__(self) -> None:
        """Normalize the requested amount to Decimal."""
        if not isinstance(self.requested_amount, Decimal):
            self.requested_amount = Decimal(str(self.requested_amount))


@dataclass
class CreditCardProfileData:
    """
    Credit card profile.

    The raw number is only handed out for known usage scopes. Never log
    instances of this class; the repr hides number and CVV.
    """

    number: str | None = field(default=None, repr=False)
    exp_month: int | str | None = None
    exp_year: int | str | None = None
    cvv: str | None = field(default=None, repr=False)
    name: str | None = None
    email: str | None = None
    street1: str | None = None
    street2: str | None = None
    postcode: str | None = None
    state: str | None = None
    country: str | None = None
    scopes: tuple[str, ...] = ("active",)

    def card_number(self, scope: str) -> str | None:
        """Return the number if the scope is allowed, else None."""
        if scope not in self.scopes:
            return None
        return self.number

    @property
    def expiration(self) -> dict[str, Any]:
        return {"month": self.exp_month, "year": self.exp_year}


@dataclass(frozen=True)
class PlanData:
    """
    Recurring billing plan.

    Attributes:
        id: Plan identifier, also used as the gateway plan id
        amount: Price per interval in major units
        currency: ISO 4217 currency code
        interval: A payments.constants.BillingInterval value
        name: Display name
        trial_period_days: Optional free trial length
    """

    id: str
    amount: Decimal
    currency: str
    interval: str
    name: str
    trial_period_days: int | None = None


@dataclass
class RecurringInstructionData:
    """Request to subscribe a credit card to a provider plan."""

    credit_card_profile: CreditCardProfileData
    provider_plan_id: str
    amount: Decimal
    currency: str = "usd"
    billing_frequency: int = 1
    billing_interval: str = "monthly"


@dataclass
class RecurringTransaction:
    """
    Recurring billing record created after a successful subscription.

    Built by a plugin's initialize_recurring(); persisting it is the
    caller's job.
    """

    amount: Decimal
    billing_frequency: int
    billing_interval: str
    currency: str
    plan_id: str
    processor: str
    processor_id: str
    credit_card_profile: Any = None
    response_data: list[dict[str, Any]] = field(default_factory=list)

    def add_response_data(self, data: dict[str, Any]) -> None:
        """Append a gateway response snapshot."""
        self.response_data.append(data)
