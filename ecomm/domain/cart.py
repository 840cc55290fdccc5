"""
Cart Domain Models
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import CamelModel, Money


class CartItem(CamelModel):
    id: str
    product_id: str
    variant_id: Optional[str] = None
    product_name: str
    product_image_url: Optional[str] = None
    unit_price: Money
    quantity: int
    subtotal: Money
    available_stock: Optional[int] = None  # filled in on read


class Cart(CamelModel):
    id: str
    session_id: str
    tenant_id: str
    market_id: str
    items: List[CartItem] = []
    subtotal: Money
    tax: Money
    total: Money
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AddCartItemRequest(CamelModel):
    product_id: str = Field(..., min_length=1)
    variant_id: Optional[str] = None
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(..., ge=1)
