"""
Admin Orders API Endpoints
Back-office listing and status overrides (JWT only)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, require_admin
from ecomm.core.database import get_db
from ecomm.domain.order import Order, UpdateOrderStatusRequest
from ecomm.services.order_service import OrderService

router = APIRouter()


@router.get("", response_model=List[Order])
def list_orders(
    status: Optional[str] = Query(None, description="Filter by status code"),
    tenant_id: Optional[str] = Query(None, alias="tenantId"),
    market_id: Optional[str] = Query(None, alias="marketId"),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """All orders, newest first"""
    return OrderService(db).find_all(status=status, tenant_id=tenant_id, market_id=market_id)


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return OrderService(db).get_order(order_id)


@router.put("/{order_id}/status", response_model=Order)
def set_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """Relabel an order's status without stock side effects"""
    return OrderService(db).update_status(order_id, request.status, apply_stock_rules=False)
