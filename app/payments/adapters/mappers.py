"""
Request mapping from domain objects to Stripe parameters.

Pure functions, no network access. Amount conversion to the gateway's
minor currency unit happens here and nowhere else.

Usage:
    from payments.adapters.mappers import map_charge

    request = map_charge(transaction)
    request.params        # {"amount": 100, "currency": "usd", "card": "tok_visa"}
    request.access_token  # None unless charging for a connected account
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from payments.constants import (
    CARD_SCOPE_ACTIVE,
    ED_ACCESS_TOKEN,
    ED_APPLICATION_FEE,
    ED_CARD_TOKEN,
    ED_DESCRIPTION,
    ED_IDEMPOTENCY_KEY,
    STRIPE_INTERVALS,
)
from payments.exceptions import PluginConfigurationError

if TYPE_CHECKING:
    from payments.protocols import (
        CreditCardProfile,
        FinancialTransaction,
        Plan,
        RecurringInstruction,
    )

MINOR_UNITS_PER_MAJOR = 100


@dataclass(frozen=True)
class ChargeRequest:
    """
    Mapped charge-create call.

    Attributes:
        params: Wire parameters for stripe.Charge.create
        access_token: Connected-account credential for this call, if any
        idempotency_key: Caller-supplied idempotency key, if any
    """

    params: dict[str, Any]
    access_token: str | None = None
    idempotency_key: str | None = None


def to_minor_units(amount: Decimal | int | float | str) -> int:
    """
    Convert a major-unit amount to the gateway's minor unit.

    Example:
        to_minor_units(Decimal("1.00"))  # 100
        to_minor_units("19.99")          # 1999
    """
    value = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major_units(amount: int) -> Decimal:
    """Convert a minor-unit amount back to major units (100 -> 1.00)."""
    return (Decimal(amount) / MINOR_UNITS_PER_MAJOR).quantize(Decimal("0.01"))


def map_charge(transaction: FinancialTransaction) -> ChargeRequest:
    """
    Build charge parameters from a transaction.

    Optional extended data keys are copied only when present. A missing
    card token is not checked here; Stripe rejects the charge instead.
    """
    params: dict[str, Any] = {
        "amount": to_minor_units(transaction.requested_amount),
        "currency": transaction.payment_instruction.currency,
    }

    ed = transaction.extended_data
    if ed.has(ED_CARD_TOKEN):
        params["card"] = ed.get(ED_CARD_TOKEN)
    if ed.has(ED_DESCRIPTION):
        params["description"] = ed.get(ED_DESCRIPTION)
    if ed.has(ED_APPLICATION_FEE):
        params["application_fee"] = ed.get(ED_APPLICATION_FEE)

    access_token = ed.get(ED_ACCESS_TOKEN) if ed.has(ED_ACCESS_TOKEN) else None
    idempotency_key = (
        ed.get(ED_IDEMPOTENCY_KEY) if ed.has(ED_IDEMPOTENCY_KEY) else None
    )

    return ChargeRequest(
        params=params,
        access_token=access_token,
        idempotency_key=idempotency_key,
    )


def map_credit_card(profile: CreditCardProfile) -> dict[str, Any]:
    """
    Build Stripe card details from a credit card profile.

    Fields the profile does not have are left out rather than defaulted.
    """
    expiration = profile.expiration or {}
    month = expiration.get("month")
    year = expiration.get("year")

    card: dict[str, Any] = {
        "number": profile.card_number(CARD_SCOPE_ACTIVE),
        "exp_month": f"{int(month):02d}" if month not in (None, "") else None,
        "exp_year": f"{int(year):04d}" if year not in (None, "") else None,
        "cvc": profile.cvv,
        "name": profile.name,
        "address_line1": profile.street1,
        "address_line2": profile.street2,
        "address_zip": profile.postcode,
        "address_state": profile.state,
        "address_country": profile.country,
    }
    return {key: value for key, value in card.items() if value is not None}


def map_token(profile: CreditCardProfile, currency: str) -> dict[str, Any]:
    """Build token-create parameters for a card."""
    return {
        "card": map_credit_card(profile),
        "currency": currency,
    }


def map_plan(plan: Plan) -> dict[str, Any]:
    """
    Build plan-create parameters.

    Raises:
        PluginConfigurationError: If the plan interval has no Stripe token
    """
    try:
        interval = STRIPE_INTERVALS[str(plan.interval)]
    except KeyError:
        raise PluginConfigurationError(
            f"No Stripe interval for billing interval {plan.interval!r}",
            details={"interval": plan.interval, "plan_id": plan.id},
        ) from None

    params: dict[str, Any] = {
        "id": plan.id,
        "amount": to_minor_units(plan.amount),
        "currency": plan.currency,
        "interval": interval,
        "product": {"name": plan.name},
    }
    if plan.trial_period_days is not None:
        params["trial_period_days"] = plan.trial_period_days
    return params


def map_customer(
    token_id: str,
    instruction: RecurringInstruction,
) -> dict[str, Any]:
    """Build customer-create parameters binding a card token to a plan."""
    params: dict[str, Any] = {
        "card": token_id,
        "plan": instruction.provider_plan_id,
    }
    email = instruction.credit_card_profile.email
    if email:
        params["email"] = email
    return params
