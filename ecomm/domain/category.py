"""
Category Domain Models

Categories form a tree per tenant/market through parent_id.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class Category(CamelModel):
    id: str
    tenant_id: str
    market_id: str
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    display_order: int = 0
    product_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryInput(CamelModel):
    id: Optional[str] = None
    tenant_id: Optional[str] = None
    market_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    display_order: int = 0
