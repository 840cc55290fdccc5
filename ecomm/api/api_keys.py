"""
API Key Management Endpoints
Per-market keys for external integrations (JWT only)
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ecomm.core.auth import Principal, require_admin
from ecomm.core.database import get_db
from ecomm.domain.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeyListItem
from ecomm.services.api_key_service import ApiKeyService

router = APIRouter()


@router.get("", response_model=List[ApiKeyListItem])
def list_api_keys(
    market_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """List a market's API keys (hashes are never returned)"""
    return ApiKeyService(db).list_keys(market_id)


@router.post("", response_model=ApiKeyCreated, status_code=status.HTTP_201_CREATED)
def create_api_key(
    market_id: str,
    data: ApiKeyCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    """
    Create a new API key

    The full key is only shown once. Store it securely.
    """
    return ApiKeyService(db).create_key(market_id, data, created_by=admin.id)


@router.delete("/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_api_key(
    market_id: str,
    key_id: str,
    db: Session = Depends(get_db),
    admin: Principal = Depends(require_admin),
):
    ApiKeyService(db).revoke_key(market_id, key_id, revoked_by=admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
