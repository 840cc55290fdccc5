"""
Order Status API Endpoints
Per-tenant status definitions, scoped by the X-Tenant-ID header (JWT only)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, require_admin
from ecomm.core.database import get_db
from ecomm.domain.order_status import OrderStatus, OrderStatusCreate, OrderStatusUpdate
from ecomm.services.order_status_service import OrderStatusService

router = APIRouter()


def get_tenant_id(x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID")) -> str:
    if not x_tenant_id:
        raise HTTPException(status_code=400, detail="X-Tenant-ID header is required")
    return x_tenant_id


@router.get("", response_model=List[OrderStatus])
def list_order_statuses(
    tenant_id: str = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return OrderStatusService(db).list_statuses(tenant_id)


@router.get("/active", response_model=List[OrderStatus])
def list_active_order_statuses(
    tenant_id: str = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return OrderStatusService(db).list_statuses(tenant_id, active_only=True)


@router.post("/reset-defaults", response_model=List[OrderStatus])
def reset_default_order_statuses(
    tenant_id: str = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """Drop unused custom statuses and reactivate the eight defaults"""
    return OrderStatusService(db).reset_defaults(tenant_id)


@router.get("/{status_id}", response_model=OrderStatus)
def get_order_status(
    status_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return OrderStatusService(db).get_status(tenant_id, status_id)


@router.post("", response_model=OrderStatus, status_code=status.HTTP_201_CREATED)
def create_order_status(
    data: OrderStatusCreate,
    tenant_id: str = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return OrderStatusService(db).create_status(tenant_id, data)


@router.put("/{status_id}", response_model=OrderStatus)
def update_order_status(
    status_id: str,
    data: OrderStatusUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return OrderStatusService(db).update_status(tenant_id, status_id, data)


@router.delete("/{status_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order_status(
    status_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    OrderStatusService(db).delete_status(tenant_id, status_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
