# =============================================================================
# Django Project Configuration Package
# =============================================================================
# This package contains the Django settings the payment plugins read their
# Stripe credentials, timeouts and logging configuration from.
# =============================================================================
