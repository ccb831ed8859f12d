"""
Payments app for gateway plugins.

This app handles:
- The plugin contract the orchestration engine drives
- The Stripe plugin (charges, plans, recurring billing)
- Translation of gateway failures into local error kinds

Related modules:
    - payments.adapters: Stripe gateway facade, mapping, projection, classification
    - payments.plugins: PaymentPlugin base class and StripePlugin
    - payments.exceptions: FinancialError / BlockedError taxonomy

Usage:
    from payments.plugins import StripePlugin

    plugin = StripePlugin()
    plugin.approve_and_deposit(transaction, retry=False)
"""
