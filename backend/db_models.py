"""
SQLAlchemy ORM models for the payment-gateway and order-status core.

Tables:
    payment_gateways  — configured providers (credentials, active/default flags)
    order_statuses    — fulfilment workflow stages (single-default invariant)
    orders            — checkout orders (read by the drivers, owned elsewhere)
    payments          — payment attempts carrying the provider intent reference
"""
from datetime import datetime

from sqlalchemy import (
    Column, Integer, BigInteger, String, Boolean, DateTime, Numeric, JSON, ForeignKey,
    Index,
)
from sqlalchemy.orm import relationship

from database import Base

# 64-bit ids; SQLite only autoincrements INTEGER PRIMARY KEY
Id = BigInteger().with_variant(Integer, "sqlite")


class PaymentGateway(Base):
    """A configured payment provider instance."""
    __tablename__ = "payment_gateways"

    id = Column(Id, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(50), unique=True, nullable=False, index=True)  # "stripe" | "fake"
    driver = Column(String(50), nullable=True)  # declared GatewayKind value
    is_active = Column(Boolean, nullable=False, default=False)
    is_default = Column(Boolean, nullable=False, default=False)
    # {publishable_key, secret_key, webhook_secret}
    config = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    payments = relationship("Payment", back_populates="gateway", lazy="select")

    __table_args__ = (
        Index("ix_payment_gateways_active_default", "is_active", "is_default"),
    )


class OrderStatus(Base):
    """
    A named stage in the fulfilment workflow.

    At most one row has is_default = True; order_status_service is the only
    writer and keeps it that way.
    """
    __tablename__ = "order_statuses"

    id = Column(Id, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    color = Column(String(20), nullable=False, default="#64748b")
    is_default = Column(Boolean, nullable=False, default=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_order_statuses_position_name", "position", "name"),
    )


class Order(Base):
    """Checkout order. Pricing fills total_amount before payment starts."""
    __tablename__ = "orders"

    id = Column(Id, primary_key=True, autoincrement=True)
    reference = Column(String(40), unique=True, nullable=False, index=True)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=True)
    status = Column(String(40), nullable=False, default="pending_payment")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    payments = relationship("Payment", back_populates="order", lazy="select")


class Payment(Base):
    """One payment attempt for an order through one gateway."""
    __tablename__ = "payments"

    id = Column(Id, primary_key=True, autoincrement=True)
    order_id = Column(Id, ForeignKey("orders.id"), nullable=False, index=True)
    payment_gateway_id = Column(Id, ForeignKey("payment_gateways.id"), nullable=False, index=True)
    provider_reference = Column(String(255), nullable=True, index=True)  # provider intent id
    status = Column(String(30), nullable=False, default="pending")
    amount = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="INR")
    meta = Column(JSON, nullable=True)  # {client_secret, intent}
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    order = relationship("Order", back_populates="payments")
    gateway = relationship("PaymentGateway", back_populates="payments")

    __table_args__ = (
        Index("ix_payments_order_gateway_status", "order_id", "payment_gateway_id", "status"),
    )
