"""
Tenant API Endpoints

- /api/v1/admin/tenants: tenant administration (JWT only)
- /api/v1/tenants/{tenant_id}: tenant info for the caller's own tenant
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, get_current_principal, require_admin, require_role
from ecomm.core.database import get_db
from ecomm.domain.common import PagedResponse
from ecomm.domain.tenant import Tenant, TenantCreate, TenantInfo, TenantUpdate
from ecomm.services.tenant_service import TenantService

admin_router = APIRouter()
router = APIRouter()


# =============================================================================
# Admin
# =============================================================================

@admin_router.get("", response_model=PagedResponse[Tenant])
def list_tenants(
    search: Optional[str] = Query(None, description="Match display name, slug or contact email"),
    status_filter: Optional[str] = Query(None, alias="status", description="active, inactive or all"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    tenants, total = TenantService(db).list_tenants(
        search=search, status=status_filter, page=page, limit=limit
    )
    return PagedResponse[Tenant](data=tenants, total=total, page=page, limit=limit)


@admin_router.post("", response_model=Tenant, status_code=status.HTTP_201_CREATED)
def create_tenant(
    data: TenantCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_role("SUPERADMIN")),
):
    """Create a tenant with the default order statuses"""
    return TenantService(db).create_tenant(data)


@admin_router.get("/{tenant_id}", response_model=Tenant)
def get_tenant(
    tenant_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return TenantService(db).get_tenant(tenant_id)


@admin_router.put("/{tenant_id}", response_model=Tenant)
def update_tenant(
    tenant_id: str,
    data: TenantUpdate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return TenantService(db).update_tenant(tenant_id, data)


@admin_router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_tenant(
    tenant_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """Soft delete: the tenant is marked inactive"""
    TenantService(db).set_status(tenant_id, "inactive")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@admin_router.post("/{tenant_id}/reactivate", response_model=Tenant)
def reactivate_tenant(
    tenant_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return TenantService(db).set_status(tenant_id, "active")


# =============================================================================
# Tenant info
# =============================================================================

@router.get("/{tenant_id}", response_model=TenantInfo)
def get_tenant_info(
    tenant_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Tenant name and the active markets the caller may use"""
    return TenantService(db).get_tenant_info(tenant_id, principal)
