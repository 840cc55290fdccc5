"""
Market Service
Market administration and custom property templates
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from ecomm.core.exceptions import BadRequestError, ConflictError, NotFoundError
from ecomm.core.utils import short_id
from ecomm.domain.market import CustomPropertyTemplate, Market, MarketCreate, MarketSettings, MarketUpdate
from ecomm.models import Market as MarketRow
from ecomm.repositories import MarketRepository, TenantRepository

logger = logging.getLogger(__name__)


class MarketService:

    def __init__(self, db: Session):
        self.db = db
        self.markets = MarketRepository(db)
        self.tenants = TenantRepository(db)

    def list_markets(
        self,
        tenant_id: Optional[str] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        market_type: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Market], int]:
        return self.markets.find_all(
            tenant_id=tenant_id,
            search=search,
            status=status,
            market_type=market_type,
            page=page,
            limit=limit,
        )

    def _get_row(self, market_id: str) -> MarketRow:
        row = self.markets.find_row(market_id)
        if row is None:
            raise NotFoundError("Market not found")
        return row

    def get_market(self, market_id: str) -> Market:
        return Market.model_validate(self._get_row(market_id))

    def create_market(self, data: MarketCreate) -> Market:
        """
        Raises:
            NotFoundError: Unknown tenant
            ConflictError: Code already used by the tenant
            BadRequestError: Tenant reached its max_markets
        """
        tenant = self.tenants.find_row(data.tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found")

        if self.markets.code_exists(data.tenant_id, data.code):
            raise ConflictError(f"Market code '{data.code}' already exists for this tenant")

        max_markets = (tenant.settings or {}).get("max_markets")
        if max_markets is not None and tenant.market_count >= max_markets:
            raise BadRequestError(
                f"Tenant has reached its limit of {max_markets} markets",
                suggestion="Deactivate an unused market or raise the tenant's max_markets",
            )

        settings = data.settings or MarketSettings()
        row = MarketRow(
            id=short_id("market"),
            tenant_id=data.tenant_id,
            name=data.name,
            code=data.code,
            type=data.type,
            status="active",
            currency=data.currency.upper(),
            timezone=data.timezone,
            address=data.address.model_dump(mode="json") if data.address else None,
            settings=settings.model_dump(mode="json"),
            api_key_count=0,
        )
        self.markets.add(row, commit=False)
        tenant.market_count = (tenant.market_count or 0) + 1

        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Market {row.id} ({row.code}) created for tenant {row.tenant_id}")
        return Market.model_validate(row)

    def update_market(self, market_id: str, data: MarketUpdate) -> Market:
        """
        Raises:
            ConflictError: New code already used by another market of the tenant
        """
        row = self._get_row(market_id)

        if data.code and data.code != row.code:
            if self.markets.code_exists(row.tenant_id, data.code, exclude_id=row.id):
                raise ConflictError(f"Market code '{data.code}' already exists for this tenant")
            row.code = data.code
        if data.name:
            row.name = data.name
        if data.type:
            row.type = data.type
        if data.currency:
            row.currency = data.currency.upper()
        if data.timezone:
            row.timezone = data.timezone

        return self.markets.save(row)

    def set_status(self, market_id: str, status: str) -> Market:
        row = self._get_row(market_id)
        row.status = status
        market = self.markets.save(row)
        logger.info(f"Market {market_id} is now {status}")
        return market

    def get_property_templates(self, market_id: str) -> List[CustomPropertyTemplate]:
        row = self._get_row(market_id)
        templates = (row.settings or {}).get("custom_property_templates") or []
        return [CustomPropertyTemplate.model_validate(t) for t in templates]

    def replace_property_templates(
        self, market_id: str, templates: List[CustomPropertyTemplate]
    ) -> List[CustomPropertyTemplate]:
        row = self._get_row(market_id)

        current = dict(row.settings) if row.settings else MarketSettings().model_dump(mode="json")
        current["custom_property_templates"] = [t.model_dump(mode="json") for t in templates]
        row.settings = current
        flag_modified(row, "settings")

        self.markets.save(row)
        return self.get_property_templates(market_id)
