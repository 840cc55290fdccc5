"""
API Key Service
Issue, list and revoke per-market API keys

Only the SHA-256 hash and the last four characters of a key are stored;
the plaintext key is returned once, on creation.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ecomm.core.auth import generate_api_key, hash_api_key, last_four_chars
from ecomm.core.exceptions import BadRequestError, NotFoundError
from ecomm.core.utils import as_utc, utcnow
from ecomm.domain.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeyListItem
from ecomm.repositories import ApiKeyRepository, MarketRepository

logger = logging.getLogger(__name__)


class ApiKeyService:

    def __init__(self, db: Session):
        self.db = db
        self.keys = ApiKeyRepository(db)
        self.markets = MarketRepository(db)

    def _get_market(self, market_id: str):
        market = self.markets.find_row(market_id)
        if market is None:
            raise NotFoundError("Market not found")
        return market

    def list_keys(self, market_id: str) -> List[ApiKeyListItem]:
        self._get_market(market_id)
        return [ApiKeyListItem.model_validate(k) for k in self.keys.find_by_market(market_id)]

    def create_key(self, market_id: str, data: ApiKeyCreate, created_by: Optional[str] = None) -> ApiKeyCreated:
        """
        Raises:
            NotFoundError: Unknown market
            BadRequestError: Blank name or expiry not in the future
        """
        market = self._get_market(market_id)

        name = data.name.strip()
        if not name:
            raise BadRequestError("Name is required")

        expires_at = as_utc(data.expires_at)
        if expires_at is not None and expires_at <= utcnow():
            raise BadRequestError("Expiration date must be in the future")

        raw_key = generate_api_key()
        row = self.keys.create(
            tenant_id=market.tenant_id,
            market_id=market.id,
            name=name,
            key_hash=hash_api_key(raw_key),
            last_four_chars=last_four_chars(raw_key),
            created_by=created_by,
            expires_at=expires_at,
            commit=False,
        )
        market.api_key_count = (market.api_key_count or 0) + 1

        self.db.commit()
        self.db.refresh(row)

        logger.info(f"API key {row.id} created for market {market_id} by {created_by}")
        return ApiKeyCreated(
            id=row.id,
            key=raw_key,
            name=row.name,
            market_id=row.market_id,
            created_at=row.created_at,
        )

    def revoke_key(self, market_id: str, key_id: str, revoked_by: Optional[str] = None) -> None:
        """
        Raises:
            NotFoundError: Unknown key, or key of another market
            BadRequestError: Already revoked
        """
        key = self.keys.find_by_id(key_id)
        if key is None or key.market_id != market_id:
            raise NotFoundError("API key not found")

        if key.status == "revoked":
            raise BadRequestError("API key is already revoked")

        self.keys.revoke(key, revoked_by=revoked_by)

        market = self.markets.find_row(market_id)
        if market is not None:
            market.api_key_count = max(0, (market.api_key_count or 0) - 1)

        self.db.commit()
        logger.info(f"API key {key_id} revoked for market {market_id} by {revoked_by}")
