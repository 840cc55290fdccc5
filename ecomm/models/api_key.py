"""
Per-market API keys for external integrations
"""
from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func

from ecomm.core.database import Base


class ApiKey(Base):
    __tablename__ = "api_keys"

    id = Column(String(64), primary_key=True)
    tenant_id = Column(String(64), nullable=False)
    market_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    key_hash = Column(String(255), nullable=False, index=True)
    last_four_chars = Column(String(4), nullable=False, default="")
    status = Column(String(20), nullable=False, default="active", index=True)  # active, revoked

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_used_at = Column(DateTime(timezone=True))
    expires_at = Column(DateTime(timezone=True))
    created_by = Column(String(64))
    revoked_at = Column(DateTime(timezone=True))
    revoked_by = Column(String(64))

    __table_args__ = (
        Index("ix_api_keys_scope", "tenant_id", "market_id"),
    )
