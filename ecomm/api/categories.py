"""
Categories API Endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, get_current_principal
from ecomm.core.database import get_db
from ecomm.domain.category import Category, CategoryInput
from ecomm.repositories import CategoryRepository, ProductRepository

router = APIRouter()


@router.get("", response_model=List[Category])
def get_categories(
    tenant_id: Optional[str] = Query(None, alias="tenantId"),
    market_id: Optional[str] = Query(None, alias="marketId"),
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    x_market_id: Optional[str] = Header(None, alias="X-Market-ID"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return CategoryRepository(db).find_all(
        tenant_id=tenant_id or x_tenant_id,
        market_id=market_id or x_market_id,
    )


@router.get("/{category_id}", response_model=Category)
def get_category(
    category_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    category = CategoryRepository(db).find_by_id(category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryInput,
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    x_market_id: Optional[str] = Header(None, alias="X-Market-ID"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    tenant_id = data.tenant_id or x_tenant_id
    market_id = data.market_id or x_market_id
    if not tenant_id or not market_id:
        raise HTTPException(status_code=400, detail="TenantId and MarketId are required")

    repo = CategoryRepository(db)
    if data.id and repo.find_by_id(data.id) is not None:
        raise HTTPException(status_code=409, detail=f"Category '{data.id}' already exists")
    if data.parent_id and repo.find_by_id(data.parent_id) is None:
        raise HTTPException(status_code=400, detail="Parent category not found")

    return repo.create(data, tenant_id=tenant_id, market_id=market_id)


@router.put("/{category_id}", response_model=Category)
def update_category(
    category_id: str,
    data: CategoryInput,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Tenant, market and created date are preserved"""
    repo = CategoryRepository(db)

    if data.parent_id:
        if data.parent_id in repo.find_with_descendants(category_id):
            raise HTTPException(status_code=400, detail="A category cannot be moved under itself")

    category = repo.update(category_id, data)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Only empty leaf categories can be deleted"""
    repo = CategoryRepository(db)
    if repo.find_by_id(category_id) is None:
        raise HTTPException(status_code=404, detail="Category not found")

    if repo.find_children_ids(category_id):
        raise HTTPException(status_code=400, detail="Cannot delete category with subcategories")

    if ProductRepository(db).count_in_category(category_id) > 0:
        raise HTTPException(status_code=400, detail="Cannot delete category with products")

    repo.delete(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
