"""
Order Domain Models

Orders hold a snapshot of the customer, addresses and line items taken
at checkout; later catalog edits do not change them.

Date: 2025-11-04
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import Address, CamelModel, Money


class CustomerInfo(CamelModel):
    customer_id: Optional[str] = None
    full_name: str = ""
    email: str = ""
    phone: Optional[str] = None


class OrderItem(CamelModel):
    id: str
    product_id: str
    variant_id: Optional[str] = None
    product_name: str
    sku: str = ""
    product_image_url: Optional[str] = None
    unit_price: Money
    quantity: int
    line_total: Money
    currency: str = "USD"


class Order(CamelModel):
    id: str
    tenant_id: str
    market_id: str
    order_number: str
    status: str
    subtotal: Money
    tax: Money
    shipping: Money
    total: Money
    customer: CustomerInfo
    shipping_address: Address
    billing_address: Optional[Address] = None
    line_items: List[OrderItem] = []
    tracking_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateOrderRequest(CamelModel):
    session_id: str = Field(..., min_length=1)
    customer: CustomerInfo
    shipping_address: Address
    billing_address: Optional[Address] = None


class UpdateOrderStatusRequest(CamelModel):
    status: str = Field(..., min_length=1)
