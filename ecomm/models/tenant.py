"""
Tenant and market models
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON, Index, UniqueConstraint
from sqlalchemy.sql import func

from ecomm.core.database import Base


class Tenant(Base):
    """
    A business owning markets, products and orders
    """
    __tablename__ = "tenants"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    display_name = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default="active", index=True)

    contact_email = Column(String(255), nullable=False)
    contact_phone = Column(String(50))

    # Value objects stored as JSON
    address = Column(JSON)
    settings = Column(JSON)  # {max_markets, max_users, features}

    market_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Market(Base):
    """
    A sales channel of a tenant with its own currency and tax settings
    """
    __tablename__ = "markets"

    id = Column(String(64), primary_key=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    type = Column(String(20), nullable=False, default="physical")  # physical, online, hybrid
    status = Column(String(20), nullable=False, default="active")
    currency = Column(String(3), nullable=False, default="USD")
    timezone = Column(String(64), nullable=False, default="")

    address = Column(JSON)
    settings = Column(JSON)  # {order_prefix, tax_rate, shipping_zones, custom_property_templates}

    api_key_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_markets_tenant_code"),
    )
