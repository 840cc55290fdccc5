"""
Catalog models: versioned products and categories
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Numeric, JSON, Index
from sqlalchemy.sql import func

from ecomm.core.database import Base


class Product(Base):
    """
    One row per product version

    (id, version) is the key. Every edit appends a row and moves the
    is_current_version flag; exactly one row per id carries it.
    """
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    version = Column(Integer, primary_key=True, default=1)

    # Scoping
    tenant_id = Column(String(64), nullable=False)
    market_id = Column(String(64), nullable=False)

    # Details
    name = Column(String(255), nullable=False)
    description = Column(Text)
    sku = Column(String(100))  # Optional when product has variants
    price = Column(Numeric(18, 2))
    sale_price = Column(Numeric(18, 2))
    status = Column(String(20), nullable=False, default="active", index=True)
    stock_quantity = Column(Integer)
    low_stock_threshold = Column(Integer)
    currency = Column(String(3), nullable=False, default="USD")

    # JSON columns
    images = Column(JSON, nullable=False, default=list)
    category_ids = Column(JSON, nullable=False, default=list)
    extra_metadata = Column("metadata", JSON)
    has_variants = Column(Boolean, nullable=False, default=False)
    variant_options = Column(JSON)
    variants = Column(JSON)
    custom_properties = Column(JSON)

    # Versioning
    is_current_version = Column(Boolean, nullable=False, default=True)
    version_created_at = Column(DateTime(timezone=True), server_default=func.now())
    version_created_by = Column(String(64), nullable=False, default="system")
    change_notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_products_scope_current", "tenant_id", "market_id", "is_current_version"),
    )


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(64), primary_key=True)
    tenant_id = Column(String(64), nullable=False)
    market_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    parent_id = Column(String(64), index=True)
    display_order = Column(Integer, nullable=False, default=0)
    product_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("ix_categories_scope", "tenant_id", "market_id"),
    )
