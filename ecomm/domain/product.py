"""
Product Domain Models

Products are versioned: every edit produces a new immutable snapshot and
exactly one snapshot per product id is the current version. Products may
carry variants (size/color combinations) with their own price and stock.

Date: 2025-11-04
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, computed_field, field_validator

from .common import CamelModel, Money

PRODUCT_STATUSES = ("active", "inactive", "draft")


class VariantOption(CamelModel):
    """An option axis, e.g. name="Size", values=["S", "M", "L"]"""
    name: str
    values: List[str] = []


class ProductVariant(CamelModel):
    """
    One purchasable combination of option values

    Fields:
        options: option name -> chosen value, e.g. {"Size": "M"}
        is_default: variant preselected by storefronts
    """
    id: str = ""
    sku: str = ""
    price: Money = Field(..., ge=0)
    sale_price: Optional[Money] = Field(None, ge=0)
    stock_quantity: int = Field(0, ge=0)
    low_stock_threshold: int = Field(0, ge=0)
    images: Optional[List[str]] = None
    options: Dict[str, str] = {}
    status: str = "active"
    is_default: bool = False


class CustomProperty(CamelModel):
    name: str
    value: str = ""
    sort_order: int = 0


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, description="Product name")
    description: Optional[str] = None
    sku: Optional[str] = Field(None, description="Optional when the product has variants")
    price: Optional[Money] = Field(None, ge=0)
    sale_price: Optional[Money] = Field(None, ge=0)
    status: str = "active"
    stock_quantity: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    currency: str = "USD"
    images: List[str] = []
    category_ids: List[str] = []
    metadata: Optional[Dict[str, Any]] = None
    has_variants: bool = False
    variant_options: Optional[List[VariantOption]] = None
    variants: Optional[List[ProductVariant]] = None
    custom_properties: Optional[List[CustomProperty]] = None
    change_notes: Optional[str] = None


class ProductInput(ProductBase):
    """
    Body of create and update requests

    ``categoryId`` is accepted for older clients and merged into
    ``categoryIds``.
    """
    id: Optional[str] = None
    tenant_id: Optional[str] = None
    market_id: Optional[str] = None
    category_id: Optional[str] = None
    version_created_by: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v.lower() not in PRODUCT_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(PRODUCT_STATUSES)}")
        return v.lower()

    def all_category_ids(self) -> List[str]:
        ids = list(self.category_ids)
        if self.category_id and self.category_id not in ids:
            ids.append(self.category_id)
        return ids


class Product(ProductBase):
    """A product version as returned by the API"""
    id: str
    tenant_id: str
    market_id: str

    version: int = 1
    is_current_version: bool = True
    version_created_at: Optional[datetime] = None
    version_created_by: str = "system"

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field(alias="categoryId")
    @property
    def category_id(self) -> str:
        """Legacy single category: the first of category_ids"""
        return self.category_ids[0] if self.category_ids else ""


class StockUpdate(CamelModel):
    stock_quantity: int = Field(..., ge=0)
