"""
File upload endpoints
Product images stored on local disk and served from /uploads
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Header, HTTPException, Request, Response, UploadFile, status

from ecomm.core.auth import Principal, get_current_principal
from ecomm.domain.common import UploadResponse
from ecomm.services.file_storage_service import FileStorageService, UploadRejected

logger = logging.getLogger(__name__)

router = APIRouter()


def get_storage() -> FileStorageService:
    return FileStorageService()


def _require_scope(tenant_id: Optional[str], market_id: Optional[str]):
    if not tenant_id or not market_id:
        raise HTTPException(status_code=400, detail="X-Tenant-ID and X-Market-ID headers are required")
    return tenant_id, market_id


@router.post("/upload", response_model=UploadResponse, response_model_exclude_none=True)
def upload_files(
    request: Request,
    files: List[UploadFile] = File(...),
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    x_market_id: Optional[str] = Header(None, alias="X-Market-ID"),
    storage: FileStorageService = Depends(get_storage),
    principal: Principal = Depends(get_current_principal),
):
    """
    Upload one or more images

    Each file is validated on its own; rejected files are listed in
    ``errors`` and do not fail the request.
    """
    tenant_id, market_id = _require_scope(x_tenant_id, x_market_id)

    urls = []
    errors = []
    for upload in files:
        # One byte past the limit is enough to reject an oversized file
        content = upload.file.read(storage.max_bytes + 1)
        try:
            relative_path = storage.save(tenant_id, market_id, upload.filename, content)
        except UploadRejected as e:
            logger.info(f"Upload rejected: {e}")
            errors.append(str(e))
            continue
        urls.append(f"{request.base_url}uploads/{relative_path}")

    return UploadResponse(urls=urls, errors=errors or None)


@router.delete("/{file_name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    file_name: str,
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    x_market_id: Optional[str] = Header(None, alias="X-Market-ID"),
    storage: FileStorageService = Depends(get_storage),
    principal: Principal = Depends(get_current_principal),
):
    tenant_id, market_id = _require_scope(x_tenant_id, x_market_id)
    storage.delete(tenant_id, market_id, file_name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
