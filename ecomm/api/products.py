"""
Products API Endpoints
Versioned product catalog

Every update creates a new version; reads return the current version
unless a specific version is requested.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, get_current_principal
from ecomm.core.database import get_db
from ecomm.domain.product import Product, ProductInput, StockUpdate
from ecomm.repositories import CategoryRepository, ProductRepository

router = APIRouter()


@router.get("", response_model=List[Product])
def get_products(
    status_filter: Optional[str] = Query(None, alias="status", description="Status, default active; 'all' for every status"),
    category_id: Optional[str] = Query(None, alias="categoryId", description="Category, subcategories included"),
    search: Optional[str] = Query(None, description="Search name, SKU or description"),
    tenant_id: Optional[str] = Query(None, alias="tenantId"),
    market_id: Optional[str] = Query(None, alias="marketId"),
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    x_market_id: Optional[str] = Header(None, alias="X-Market-ID"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    List current product versions ordered by name

    Tenant and market come from the query string, falling back to the
    X-Tenant-ID / X-Market-ID headers.
    """
    category_ids = None
    if category_id:
        category_ids = CategoryRepository(db).find_with_descendants(category_id)

    return ProductRepository(db).find_all_current(
        tenant_id=tenant_id or x_tenant_id,
        market_id=market_id or x_market_id,
        status=status_filter,
        category_ids=category_ids,
        search=search,
    )


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    product = ProductRepository(db).find_current(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductInput,
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    x_market_id: Optional[str] = Header(None, alias="X-Market-ID"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Create version 1 of a product; the id is generated when omitted"""
    tenant_id = data.tenant_id or x_tenant_id
    market_id = data.market_id or x_market_id
    if not tenant_id or not market_id:
        raise HTTPException(status_code=400, detail="TenantId and MarketId are required")

    repo = ProductRepository(db)
    if data.id and repo.find_versions(data.id):
        raise HTTPException(status_code=409, detail=f"Product '{data.id}' already exists")

    return repo.create(data, tenant_id=tenant_id, market_id=market_id)


@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    data: ProductInput,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Append a new version authored by X-User-ID (default 'system')"""
    product = ProductRepository(db).update(product_id, data, user_id=x_user_id or "system")
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a product with all of its versions"""
    if not ProductRepository(db).delete(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Version history
# =============================================================================

@router.get("/{product_id}/versions", response_model=List[Product])
def get_product_versions(
    product_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """All versions, newest first"""
    versions = ProductRepository(db).find_versions(product_id)
    if not versions:
        raise HTTPException(status_code=404, detail="Product not found")
    return versions


@router.get("/{product_id}/versions/{version}", response_model=Product)
def get_product_version(
    product_id: str,
    version: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    product = ProductRepository(db).find_version(product_id, version)
    if product is None:
        raise HTTPException(status_code=404, detail="Product version not found")
    return product


@router.post("/{product_id}/versions/{version}/restore", response_model=Product)
def restore_product_version(
    product_id: str,
    version: int,
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Make an older version current again"""
    product = ProductRepository(db).restore_version(product_id, version, user_id=x_user_id or "system")
    if product is None:
        raise HTTPException(status_code=404, detail="Product version not found")
    return product


# Stock changes do not create versions
@router.patch("/{product_id}/stock", status_code=status.HTTP_204_NO_CONTENT)
def update_product_stock(
    product_id: str,
    data: StockUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    if not ProductRepository(db).set_stock(product_id, data.stock_quantity):
        raise HTTPException(status_code=404, detail="Product not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
