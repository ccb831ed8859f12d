"""
Gateway adapters for external payment services.

This module provides the pieces the Stripe plugin is built from:
request mapping, the gateway facade, response projection and error
classification. All Stripe calls go through StripeGateway to ensure
consistent credentials, timeouts and observability.

Usage:
    from payments.adapters import StripeGateway, classify, map_charge, project

    request = map_charge(transaction)
    result = StripeGateway().create_charge(
        request.params,
        access_token=request.access_token,
    )
    if result.success:
        snapshot = project(result.data)
    else:
        classification = classify(result.error)
"""

from payments.adapters.classifier import (
    Classification,
    ErrorKind,
    classify,
    raise_classified,
)
from payments.adapters.mappers import (
    ChargeRequest,
    map_charge,
    map_credit_card,
    map_customer,
    map_plan,
    map_token,
    to_major_units,
    to_minor_units,
)
from payments.adapters.projection import ResponseSnapshot, project, to_plain
from payments.adapters.results import GatewayResult
from payments.adapters.stripe_adapter import StripeGateway, configure_http_client

__all__ = [
    "ChargeRequest",
    "Classification",
    "ErrorKind",
    "GatewayResult",
    "ResponseSnapshot",
    "StripeGateway",
    "classify",
    "configure_http_client",
    "map_charge",
    "map_credit_card",
    "map_customer",
    "map_plan",
    "map_token",
    "project",
    "raise_classified",
    "to_major_units",
    "to_minor_units",
    "to_plain",
]
