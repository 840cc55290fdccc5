"""
Order Status Domain Models

Each tenant defines its own order statuses. Eight defaults are seeded per
tenant and cannot be deleted.
"""
import re
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel

_CODE_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _check_code(value: Optional[str]) -> Optional[str]:
    if value is not None and not _CODE_PATTERN.match(value):
        raise ValueError("code must be lowercase letters, digits and hyphens")
    return value


def _check_color(value: Optional[str]) -> Optional[str]:
    if value is not None and not _COLOR_PATTERN.match(value):
        raise ValueError("color must be a hex color like #6B7280")
    return value


class OrderStatus(CamelModel):
    id: str
    tenant_id: str
    name: str
    code: str
    color: str = "#6B7280"
    sort_order: int = 0
    is_system_default: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderStatusCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=100)
    color: str = "#6B7280"
    sort_order: int = 0
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def validate_code(cls, v):
        return _check_code(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return _check_color(v)


class OrderStatusUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return _check_color(v)
