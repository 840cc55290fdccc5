"""
Admin users
"""
from sqlalchemy import Column, String, Boolean, DateTime, JSON
from sqlalchemy.sql import func

from ecomm.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)  # bcrypt
    role = Column(String(20), nullable=False)  # SUPERADMIN, TENANT_ADMIN, TENANT_USER
    tenant_id = Column(String(64), index=True)  # None for superadmin
    assigned_market_ids = Column(JSON)  # None/empty means all markets of the tenant
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login_at = Column(DateTime(timezone=True))
    created_by = Column(String(64))
