"""
Projection of Stripe responses onto plain snapshots.

A snapshot holds a known set of top-level fields plus the full response
converted to plain Python values, so the response can be stored on a
transaction and audited without querying Stripe again.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from payments.adapters.mappers import to_major_units

SNAPSHOT_VERSION = 1


def to_plain(value: Any) -> Any:
    """
    Recursively convert a Stripe object into dicts, lists and primitives.

    Stripe objects are dict subclasses whose values may themselves be
    Stripe objects; anything exposing to_dict() is treated the same way.
    """
    if isinstance(value, Mapping):
        return {str(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return to_plain(value.to_dict())
    if isinstance(value, Decimal):
        return str(value)
    return value


@dataclass(frozen=True)
class ResponseSnapshot:
    """
    Serializable view of a Stripe response.

    Attributes:
        id: Stripe object id (ch_xxx, cus_xxx, plan id)
        object: Stripe object type ("charge", "customer", ...)
        amount: Amount in minor units, when the object has one
        currency: Currency code, when the object has one
        status: Object status, when the object has one
        raw: Full response as plain values
        version: Snapshot layout version
    """

    id: str | None
    object: str | None = None
    amount: int | None = None
    currency: str | None = None
    status: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)
    version: int = SNAPSHOT_VERSION

    @property
    def processed_amount(self) -> Decimal | None:
        """Amount in major units, or None if the response has no amount."""
        if self.amount is None:
            return None
        return to_major_units(self.amount)

    def to_dict(self) -> dict[str, Any]:
        """Return the full response for storage."""
        return dict(self.raw)


def project(response: Any) -> ResponseSnapshot:
    """
    Build a snapshot from a Stripe response.

    Example:
        snapshot = project(stripe.Charge.create(...))
        snapshot.id                # "ch_1"
        snapshot.processed_amount  # Decimal("1.00")
    """
    raw = to_plain(response)
    if not isinstance(raw, dict):
        raise TypeError(f"Cannot project {type(response).__name__} response")

    amount = raw.get("amount")
    return ResponseSnapshot(
        id=raw.get("id"),
        object=raw.get("object"),
        amount=int(amount) if amount is not None else None,
        currency=raw.get("currency"),
        status=raw.get("status"),
        raw=raw,
    )
