"""
Cart API Endpoints
Session carts identified by the X-Session-ID header

Every route requires a JWT or a market API key (X-API-Key); anonymous
storefront calls get 401.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, get_current_principal
from ecomm.core.config import settings
from ecomm.core.database import get_db
from ecomm.domain.cart import AddCartItemRequest, Cart, CartItem, UpdateCartItemRequest
from ecomm.services.cart_service import CartService

router = APIRouter()


class CartContext:
    """Session, tenant and market of a cart request"""

    def __init__(
        self,
        x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
        x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
        x_market_id: Optional[str] = Header(None, alias="X-Market-ID"),
    ):
        if not x_session_id:
            raise HTTPException(status_code=400, detail="Session ID is required")
        self.session_id = x_session_id
        self.tenant_id = x_tenant_id or settings.DEFAULT_TENANT_ID
        self.market_id = x_market_id or settings.DEFAULT_MARKET_ID


@router.get("", response_model=Cart)
def get_cart(
    ctx: CartContext = Depends(),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Get (or start) the session cart with available stock per line"""
    return CartService(db).get_cart(ctx.session_id, ctx.tenant_id, ctx.market_id)


@router.post("/items", response_model=CartItem)
def add_cart_item(
    request: AddCartItemRequest,
    ctx: CartContext = Depends(),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return CartService(db).add_item(ctx.session_id, ctx.tenant_id, ctx.market_id, request)


@router.put("/items/{item_id}", response_model=CartItem)
def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    ctx: CartContext = Depends(),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return CartService(db).update_item(ctx.session_id, ctx.tenant_id, ctx.market_id, item_id, request.quantity)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cart_item(
    item_id: str,
    ctx: CartContext = Depends(),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    CartService(db).remove_item(ctx.session_id, ctx.tenant_id, ctx.market_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_cart(
    ctx: CartContext = Depends(),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    CartService(db).clear(ctx.session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
