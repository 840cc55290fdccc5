"""
Tenant Service
Tenant administration and the tenant info view used by integrations
"""
import logging
import re
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ecomm.core.auth import Principal
from ecomm.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from ecomm.domain.tenant import Tenant, TenantCreate, TenantInfo, TenantInfoMarket, TenantSettings, TenantUpdate
from ecomm.models import Tenant as TenantRow
from ecomm.repositories import MarketRepository, OrderStatusRepository, TenantRepository
from ecomm.services.order_status_service import build_default_statuses

logger = logging.getLogger(__name__)


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


class TenantService:

    def __init__(self, db: Session):
        self.db = db
        self.tenants = TenantRepository(db)
        self.markets = MarketRepository(db)
        self.statuses = OrderStatusRepository(db)

    def list_tenants(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Tenant], int]:
        return self.tenants.find_all(search=search, status=status, page=page, limit=limit)

    def get_tenant(self, tenant_id: str) -> Tenant:
        tenant = self.tenants.find_by_id(tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        return tenant

    def _get_row(self, tenant_id: str) -> TenantRow:
        row = self.tenants.find_row(tenant_id)
        if row is None:
            raise NotFoundError("Tenant not found")
        return row

    def create_tenant(self, data: TenantCreate) -> Tenant:
        """
        Create a tenant and seed its default order statuses

        Raises:
            ConflictError: Name already taken
        """
        name = slugify(data.name)
        if self.tenants.exists_by_name(name):
            raise ConflictError(f"Tenant '{name}' already exists")

        settings = data.settings or TenantSettings()
        row = TenantRow(
            id=f"tenant-{name}",
            name=name,
            display_name=data.display_name,
            status="active",
            contact_email=str(data.contact_email),
            contact_phone=data.contact_phone,
            address=data.address.model_dump(mode="json") if data.address else None,
            settings=settings.model_dump(mode="json"),
            market_count=0,
        )
        self.tenants.add(row, commit=False)
        for status in build_default_statuses(row.id):
            self.statuses.add(status, commit=False)

        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Tenant {row.id} created")
        return Tenant.model_validate(row)

    def update_tenant(self, tenant_id: str, data: TenantUpdate) -> Tenant:
        """Only display name, contact email and phone can change"""
        row = self._get_row(tenant_id)

        if data.display_name:
            row.display_name = data.display_name
        if data.contact_email:
            row.contact_email = str(data.contact_email)
        if data.contact_phone is not None:
            row.contact_phone = data.contact_phone

        return self.tenants.save(row)

    def set_status(self, tenant_id: str, status: str) -> Tenant:
        row = self._get_row(tenant_id)
        row.status = status
        tenant = self.tenants.save(row)
        logger.info(f"Tenant {tenant_id} is now {status}")
        return tenant

    def get_tenant_info(self, tenant_id: str, principal: Principal) -> TenantInfo:
        """
        Tenant summary with the active markets the principal can use

        API keys see their own market. Users see their assigned markets, or
        every active market of the tenant when none are assigned.

        Raises:
            NotFoundError: Unknown tenant
            ForbiddenError: Principal belongs to another tenant
        """
        tenant = self.tenants.find_by_id(tenant_id)
        if tenant is None:
            raise NotFoundError("Tenant not found")

        if principal.tenant_id != tenant_id:
            raise ForbiddenError("Access to this tenant is not allowed")

        markets = self.markets.find_by_tenant(tenant_id, active_only=True)
        if principal.is_api_key or principal.market_ids:
            allowed = set(principal.market_ids)
            markets = [m for m in markets if m.id in allowed]

        return TenantInfo(
            tenant_id=tenant.id,
            tenant_name=tenant.display_name,
            markets=[
                TenantInfoMarket(id=m.id, name=m.name, code=m.code, currency=m.currency)
                for m in markets
            ],
        )
