"""
API Key Repository - Data Access Layer for per-market API keys
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ecomm.core.utils import short_id, utcnow
from ecomm.models import ApiKey

LEGACY_HASH_PATTERN = "hash_of_%"


class ApiKeyRepository:
    """
    Repository for ApiKey rows

    Returns ORM rows; the authentication layer needs the stored hash.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, key_id: str) -> Optional[ApiKey]:
        return self.db.get(ApiKey, key_id)

    def find_by_market(self, market_id: str) -> List[ApiKey]:
        return (
            self.db.query(ApiKey)
            .filter(ApiKey.market_id == market_id)
            .order_by(ApiKey.created_at.desc())
            .all()
        )

    def find_active_by_hash(self, key_hash: str) -> List[ApiKey]:
        return (
            self.db.query(ApiKey)
            .filter(ApiKey.status == "active", ApiKey.key_hash == key_hash)
            .all()
        )

    def find_active_legacy(self) -> List[ApiKey]:
        """Active keys still stored in the ``hash_of_<key>`` format"""
        return (
            self.db.query(ApiKey)
            .filter(ApiKey.status == "active", ApiKey.key_hash.like(LEGACY_HASH_PATTERN))
            .all()
        )

    def count_active(self, market_id: str) -> int:
        return (
            self.db.query(ApiKey)
            .filter(ApiKey.market_id == market_id, ApiKey.status == "active")
            .count()
        )

    def touch(self, api_key: ApiKey) -> None:
        """Record a successful authentication"""
        api_key.last_used_at = utcnow()
        self.db.commit()

    def create(
        self,
        tenant_id: str,
        market_id: str,
        name: str,
        key_hash: str,
        last_four_chars: str,
        created_by: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        commit: bool = True,
    ) -> ApiKey:
        row = ApiKey(
            id=short_id("key"),
            tenant_id=tenant_id,
            market_id=market_id,
            name=name,
            key_hash=key_hash,
            last_four_chars=last_four_chars,
            status="active",
            created_at=utcnow(),
            created_by=created_by,
            expires_at=expires_at,
        )
        self.db.add(row)
        if commit:
            self.db.commit()
            self.db.refresh(row)
        return row

    def revoke(self, api_key: ApiKey, revoked_by: Optional[str] = None) -> ApiKey:
        """Does not commit; the service updates the market counter in the same transaction"""
        api_key.status = "revoked"
        api_key.revoked_at = utcnow()
        api_key.revoked_by = revoked_by
        return api_key
