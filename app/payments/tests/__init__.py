"""
Tests for payments app.

This package contains:
- factories.py: Factory Boy factories for the plain domain types
- test_types.py: ExtendedDataBag, domain dataclass and exception tests

Adapter and plugin tests live in payments/adapters/tests and
payments/plugins/tests; shared fixtures are in payments/conftest.py.

Usage:
    pytest app/payments/
    pytest app/payments/plugins/tests/test_stripe_plugin.py
"""
