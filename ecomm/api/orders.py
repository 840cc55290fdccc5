"""
Orders API Endpoints
Checkout and status transitions for storefront clients

Storefronts must send their market API key (X-API-Key) or a JWT;
unauthenticated checkout is rejected with 401.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, get_current_principal
from ecomm.core.config import settings
from ecomm.core.database import get_db
from ecomm.domain.order import CreateOrderRequest, Order, UpdateOrderStatusRequest
from ecomm.services.order_service import OrderService

router = APIRouter()


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
def create_order(
    request: CreateOrderRequest,
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    x_market_id: Optional[str] = Header(None, alias="X-Market-ID"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Place an order from the items in the session's cart"""
    return OrderService(db).create_order(
        request,
        tenant_id=x_tenant_id or settings.DEFAULT_TENANT_ID,
        market_id=x_market_id or settings.DEFAULT_MARKET_ID,
    )


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return OrderService(db).get_order(order_id)


@router.put("/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Move an order to a new status

    Paying validates and decrements stock; cancelling a paid order restores it.
    """
    return OrderService(db).update_status(order_id, request.status)
