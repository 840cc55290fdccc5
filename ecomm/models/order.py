"""
Order-related models: orders, per-tenant order statuses and carts
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, JSON, Index, UniqueConstraint
from sqlalchemy.sql import func

from ecomm.core.database import Base


class Order(Base):
    """
    Orders keep a denormalized snapshot of customer, addresses and items
    """
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True)
    tenant_id = Column(String(64), nullable=False)
    market_id = Column(String(64), nullable=False)
    order_number = Column(String(100), nullable=False, index=True)
    status = Column(String(50), nullable=False, default="pending", index=True)

    # Amounts
    subtotal = Column(Numeric(18, 2), nullable=False, default=0)
    tax = Column(Numeric(18, 2), nullable=False, default=0)
    shipping_cost = Column(Numeric(18, 2), nullable=False, default=0)
    total = Column(Numeric(18, 2), nullable=False, default=0)

    # Snapshots
    customer = Column(JSON, nullable=False, default=dict)
    shipping_address = Column(JSON, nullable=False, default=dict)
    billing_address = Column(JSON)
    items = Column(JSON, nullable=False, default=list)

    tracking_number = Column(String(100))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_orders_scope", "tenant_id", "market_id"),
    )


class OrderStatus(Base):
    """
    Custom order status defined by a tenant
    """
    __tablename__ = "order_statuses"

    id = Column(String(64), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    code = Column(String(100), nullable=False)  # URL-safe, e.g. "ready-to-ship"
    color = Column(String(20), nullable=False, default="#6B7280")
    sort_order = Column(Integer, nullable=False, default=0)
    is_system_default = Column(Boolean, nullable=False, default=False)  # cannot be deleted
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_order_statuses_tenant_code"),
    )


class Cart(Base):
    __tablename__ = "carts"

    id = Column(String(64), primary_key=True)
    session_id = Column(String(128), nullable=False, unique=True)
    tenant_id = Column(String(64), nullable=False)
    market_id = Column(String(64), nullable=False)
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(18, 2), nullable=False, default=0)
    tax = Column(Numeric(18, 2), nullable=False, default=0)
    total = Column(Numeric(18, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
