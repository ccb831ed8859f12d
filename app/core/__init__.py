"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps:

- Generic, reusable base classes (no gateway-specific logic)
- Clear extension points for domain apps

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes

Usage:
    from core.exceptions import BaseApplicationError

    class PaymentError(BaseApplicationError):
        default_error_code = "PAYMENT_ERROR"

Note:
    - Business logic should NOT go here. Extend core classes in your domain apps.
"""

# Exceptions (no Django dependencies)
from .exceptions import BaseApplicationError

__all__ = [
    "BaseApplicationError",
]
