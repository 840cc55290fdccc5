"""
Tenant Repository - Data Access Layer for Tenants
"""
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ecomm.core.utils import utcnow
from ecomm.domain.tenant import Tenant
from ecomm.models import Tenant as TenantRow


class TenantRepository:
    """Repository for Tenant data access"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _map_row_to_tenant(row: TenantRow) -> Tenant:
        return Tenant.model_validate(row)

    def find_row(self, tenant_id: str) -> Optional[TenantRow]:
        return self.db.get(TenantRow, tenant_id)

    def find_by_id(self, tenant_id: str) -> Optional[Tenant]:
        row = self.find_row(tenant_id)
        return self._map_row_to_tenant(row) if row else None

    def exists_by_name(self, name: str) -> bool:
        return self.db.query(TenantRow.id).filter(TenantRow.name == name).first() is not None

    def count(self) -> int:
        return self.db.query(TenantRow).count()

    def find_all(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Tenant], int]:
        """
        Find tenants with filters, ordered by display name

        Args:
            search: Case-insensitive match on display name, slug or contact email
            status: Exact status; None or "all" disables the filter
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (list of tenants, total count)
        """
        query = self.db.query(TenantRow)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                TenantRow.display_name.ilike(pattern),
                TenantRow.name.ilike(pattern),
                TenantRow.contact_email.ilike(pattern),
            ))

        if status and status != "all":
            query = query.filter(TenantRow.status == status)

        total = query.count()
        rows = (
            query.order_by(TenantRow.display_name)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [self._map_row_to_tenant(r) for r in rows], total

    def add(self, row: TenantRow, commit: bool = True) -> TenantRow:
        now = utcnow()
        row.created_at = row.created_at or now
        row.updated_at = row.updated_at or now
        self.db.add(row)
        if commit:
            self.db.commit()
            self.db.refresh(row)
        return row

    def save(self, row: TenantRow) -> Tenant:
        row.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(row)
        return self._map_row_to_tenant(row)
