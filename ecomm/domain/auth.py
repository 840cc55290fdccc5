"""
Authentication Domain Models
"""
from datetime import datetime
from typing import List, Optional

from .common import CamelModel


class LoginRequest(CamelModel):
    # Optional so missing fields produce a 400 from the endpoint rather than a 422
    email: Optional[str] = None
    password: Optional[str] = None


class UserInfo(CamelModel):
    id: str
    email: str
    display_name: str
    role: str
    tenant_id: Optional[str] = None
    assigned_market_ids: List[str] = []
    is_active: bool = True
    last_login_at: Optional[datetime] = None


class LoginResponse(CamelModel):
    user: UserInfo
    token: str
