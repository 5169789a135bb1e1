"""
Domain enums (minimal set used for clarity in services).
"""

from enum import Enum


class GatewayKind(str, Enum):
    STRIPE = "stripe"
    FAKE = "fake"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    REQUIRES_ACTION = "requires_action"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class OrderState(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    PENDING = "pending"
    PAYMENT_FAILED = "payment_failed"
