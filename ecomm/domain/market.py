"""
Market Domain Models

A market is a sales channel (physical, online or hybrid) of a tenant with
its own currency and tax settings.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from .common import Address, CamelModel, Money

MARKET_TYPES = ("physical", "online", "hybrid")


class CustomPropertyTemplate(CamelModel):
    name: str = Field(..., min_length=1)
    default_value: Optional[str] = None
    sort_order: int = 0


class MarketSettings(CamelModel):
    order_prefix: Optional[str] = None
    tax_rate: Money = Field(Decimal("0"), ge=0)
    shipping_zones: List[str] = []
    custom_property_templates: List[CustomPropertyTemplate] = []


class Market(CamelModel):
    id: str
    tenant_id: str
    name: str
    code: str
    type: str = "physical"
    status: str = "active"
    currency: str = "USD"
    timezone: str = ""
    address: Optional[Address] = None
    settings: Optional[MarketSettings] = None
    api_key_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _check_type(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in MARKET_TYPES:
        raise ValueError(f"type must be one of: {', '.join(MARKET_TYPES)}")
    return value


class MarketCreate(CamelModel):
    tenant_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, max_length=50)
    type: str = "physical"
    currency: str = Field("USD", min_length=3, max_length=3)
    timezone: str = ""
    address: Optional[Address] = None
    settings: Optional[MarketSettings] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)


class MarketUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    type: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)


class PropertyTemplatesUpdate(CamelModel):
    templates: List[CustomPropertyTemplate] = []
