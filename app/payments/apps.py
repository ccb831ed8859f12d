"""
Payments app configuration.

This app provides payment gateway plugins:
- Stripe charge, plan and recurring billing operations
- Error classification for the orchestration engine
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
