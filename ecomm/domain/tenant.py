"""
Tenant Domain Models

A tenant is a business owning markets, products and orders.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from .common import Address, CamelModel


class TenantSettings(CamelModel):
    max_markets: int = Field(10, ge=0)
    max_users: int = Field(50, ge=0)
    features: List[str] = []


class Tenant(CamelModel):
    id: str
    name: str = Field(..., description="Unique slug, e.g. demo-retail-group")
    display_name: str
    status: str = "active"
    contact_email: str
    contact_phone: Optional[str] = None
    address: Optional[Address] = None
    settings: Optional[TenantSettings] = None
    market_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TenantCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1)
    contact_email: EmailStr
    contact_phone: Optional[str] = None
    address: Optional[Address] = None
    settings: Optional[TenantSettings] = None


class TenantUpdate(CamelModel):
    """Only display details are editable"""
    display_name: Optional[str] = Field(None, min_length=1)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None


class TenantInfoMarket(CamelModel):
    id: str
    name: str
    code: str
    currency: str


class TenantInfo(CamelModel):
    """Tenant as seen by one of its principals, with the markets it may use"""
    tenant_id: str
    tenant_name: str
    markets: List[TenantInfoMarket] = []
