"""
Codes and lookup tables shared by the payment plugins.

Response and reason codes are the values written onto a financial
transaction after a plugin call. The orchestration engine reads them to
decide what to do next, so the literal values are part of the contract:

    success  -> reason "none", reference number and processed amount set
    Failed   -> gateway declined or rejected the request
    invalid  -> request was malformed
    timeout  -> gateway could not be reached (transaction is blocked)

Billing intervals are the processor-agnostic plan intervals. Each gateway
maps them onto its own tokens through a fixed table.
"""

from django.db import models


class ResponseCode(models.TextChoices):
    """Response codes written onto a financial transaction."""

    SUCCESS = "success", "Success"
    FAILED = "Failed", "Failed"
    INVALID = "invalid", "Invalid Request"
    TIMEOUT = "timeout", "Timeout"


class ReasonCode(models.TextChoices):
    """
    Local reason codes.

    Gateway-supplied reason codes (e.g. "card_declined") are stored
    verbatim; these are the values the plugin itself chooses.
    """

    SUCCESS = "none", "None"
    INVALID = "invalid", "Invalid"
    TIMEOUT = "timeout", "Timeout"
    BLOCKED = "blocked", "Blocked"
    STRIPE_ERROR = "stripe_error", "Unclassified Stripe Error"


class BillingInterval(models.TextChoices):
    """Processor-agnostic billing intervals for plans."""

    DAILY = "daily", "Daily"
    WEEKLY = "weekly", "Weekly"
    MONTHLY = "monthly", "Monthly"
    YEARLY = "yearly", "Yearly"


# Stripe's accepted plan interval tokens
STRIPE_INTERVALS: dict[str, str] = {
    BillingInterval.DAILY.value: "day",
    BillingInterval.WEEKLY.value: "week",
    BillingInterval.MONTHLY.value: "month",
    BillingInterval.YEARLY.value: "year",
}


# =============================================================================
# Extended Data Keys
# =============================================================================

# Previously tokenized card reference
ED_CARD_TOKEN = "token"
ED_DESCRIPTION = "description"
# Snapshot of the gateway response, written by the plugin
ED_RESPONSE = "response"
# OAuth access token of a connected account; replaces the plugin's API key
ED_ACCESS_TOKEN = "access_token"
# Fee collected when charging on behalf of a connected account
ED_APPLICATION_FEE = "application_fee"
# Caller-issued idempotency key, forwarded to the gateway as-is
ED_IDEMPOTENCY_KEY = "idempotency_key"

# Usage scope passed to CreditCardProfile.card_number()
CARD_SCOPE_ACTIVE = "active"
