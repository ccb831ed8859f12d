"""
Payment plugins.

Usage:
    from payments.plugins import StripePlugin

    plugin = StripePlugin()
    plugin.approve_and_deposit(transaction, retry=False)
"""

from payments.plugins.base import PaymentPlugin
from payments.plugins.stripe_plugin import StripePlugin

__all__ = [
    "PaymentPlugin",
    "StripePlugin",
]
