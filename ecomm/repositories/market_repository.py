"""
Market Repository - Data Access Layer for Markets
"""
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ecomm.core.utils import utcnow
from ecomm.domain.market import Market
from ecomm.models import Market as MarketRow


class MarketRepository:
    """Repository for Market data access"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _map_row_to_market(row: MarketRow) -> Market:
        return Market.model_validate(row)

    def find_row(self, market_id: str) -> Optional[MarketRow]:
        return self.db.get(MarketRow, market_id)

    def find_by_id(self, market_id: str) -> Optional[Market]:
        row = self.find_row(market_id)
        return self._map_row_to_market(row) if row else None

    def find_by_tenant(self, tenant_id: str, active_only: bool = False) -> List[Market]:
        query = self.db.query(MarketRow).filter(MarketRow.tenant_id == tenant_id)
        if active_only:
            query = query.filter(MarketRow.status == "active")
        return [self._map_row_to_market(r) for r in query.order_by(MarketRow.name).all()]

    def code_exists(self, tenant_id: str, code: str, exclude_id: Optional[str] = None) -> bool:
        """Market codes are unique per tenant (case-insensitive)"""
        query = self.db.query(MarketRow.id).filter(
            MarketRow.tenant_id == tenant_id,
            func.lower(MarketRow.code) == code.lower(),
        )
        if exclude_id:
            query = query.filter(MarketRow.id != exclude_id)
        return query.first() is not None

    def find_all(
        self,
        tenant_id: Optional[str] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        market_type: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Market], int]:
        """
        Find markets with filters

        Args:
            tenant_id: Filter by tenant
            search: Case-insensitive match on name or code
            status: Case-insensitive status
            market_type: Case-insensitive type (physical, online, hybrid)
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (list of markets, total count)
        """
        query = self.db.query(MarketRow)

        if tenant_id:
            query = query.filter(MarketRow.tenant_id == tenant_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(MarketRow.name.ilike(pattern), MarketRow.code.ilike(pattern)))
        if status:
            query = query.filter(func.lower(MarketRow.status) == status.lower())
        if market_type:
            query = query.filter(func.lower(MarketRow.type) == market_type.lower())

        total = query.count()
        rows = (
            query.order_by(MarketRow.tenant_id, MarketRow.name)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [self._map_row_to_market(r) for r in rows], total

    def add(self, row: MarketRow, commit: bool = True) -> MarketRow:
        now = utcnow()
        row.created_at = row.created_at or now
        row.updated_at = row.updated_at or now
        self.db.add(row)
        if commit:
            self.db.commit()
            self.db.refresh(row)
        return row

    def save(self, row: MarketRow) -> Market:
        row.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(row)
        return self._map_row_to_market(row)
