"""
Market API Endpoints
Market administration (JWT only) and custom property templates
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, get_current_principal, require_admin, require_role
from ecomm.core.database import get_db
from ecomm.domain.common import PagedResponse
from ecomm.domain.market import Market, MarketCreate, MarketUpdate, PropertyTemplatesUpdate
from ecomm.services.market_service import MarketService

router = APIRouter()


@router.get("", response_model=PagedResponse[Market])
def list_markets(
    tenant_id: Optional[str] = Query(None, alias="tenantId"),
    search: Optional[str] = Query(None, description="Match name or code"),
    status_filter: Optional[str] = Query(None, alias="status"),
    market_type: Optional[str] = Query(None, alias="type", description="physical, online or hybrid"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    if status_filter == "all":
        status_filter = None

    markets, total = MarketService(db).list_markets(
        tenant_id=tenant_id,
        search=search,
        status=status_filter,
        market_type=market_type,
        page=page,
        limit=limit,
    )
    return PagedResponse[Market](data=markets, total=total, page=page, limit=limit)


@router.post("", response_model=Market, status_code=status.HTTP_201_CREATED)
def create_market(
    data: MarketCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_role("TENANT_ADMIN")),
):
    return MarketService(db).create_market(data)


@router.get("/{market_id}", response_model=Market)
def get_market(
    market_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return MarketService(db).get_market(market_id)


@router.put("/{market_id}", response_model=Market)
def update_market(
    market_id: str,
    data: MarketUpdate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return MarketService(db).update_market(market_id, data)


@router.delete("/{market_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_market(
    market_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    MarketService(db).set_status(market_id, "inactive")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{market_id}/reactivate", response_model=Market)
def reactivate_market(
    market_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    return MarketService(db).set_status(market_id, "active")


@router.get("/{market_id}/property-templates", response_model=PropertyTemplatesUpdate)
def get_property_templates(
    market_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Templates the product editor offers as custom properties"""
    templates = MarketService(db).get_property_templates(market_id)
    return PropertyTemplatesUpdate(templates=templates)


@router.put("/{market_id}/property-templates", response_model=PropertyTemplatesUpdate)
def replace_property_templates(
    market_id: str,
    data: PropertyTemplatesUpdate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    templates = MarketService(db).replace_property_templates(market_id, data.templates)
    return PropertyTemplatesUpdate(templates=templates)
