"""
Domain constants used across services/routers.
"""

# Provider intent states that count as a completed checkout
SETTLED_INTENT_STATUSES = frozenset({"succeeded", "requires_capture"})

# Payments still open for an intent refresh on re-checkout
OPEN_PAYMENT_STATUSES = ("pending", "requires_action")

# Upper bound on slug/insert attempts when a concurrent writer takes the same name or slug
STATUS_WRITE_ATTEMPTS = 3

DEFAULT_STATUS_MESSAGE = "You must designate another default status before deleting this one."
BULK_DEFAULT_STATUS_MESSAGE = "Cannot delete the default status. Please assign another default first."
UNSET_DEFAULT_STATUS_MESSAGE = "Cannot unset the default status. Please assign another default first."

FAKE_PUBLISHABLE_KEY = "pk_test_fake"
FAKE_CURRENCY = "INR"
