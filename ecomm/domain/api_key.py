"""
API Key Domain Models

The plaintext key is only ever returned by the create endpoint.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class ApiKeyListItem(CamelModel):
    id: str
    name: str
    last_four_chars: str
    status: str
    created_at: Optional[datetime] = None
    last_used_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class ApiKeyCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    expires_at: Optional[datetime] = None


class ApiKeyCreated(CamelModel):
    id: str
    key: str  # full key, shown once
    name: str
    market_id: str
    created_at: Optional[datetime] = None
