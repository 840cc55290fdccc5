"""
File Storage Service
Stores uploaded product images on local disk under
``<UPLOADS_DIR>/<tenant>/<market>/<uuid><ext>``
"""
import logging
import os
import re
import uuid
from pathlib import Path
from typing import Optional

from ecomm.core.config import settings
from ecomm.core.exceptions import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")

# Tenant, market and stored file names are single path segments
_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9._-]+$")


class UploadRejected(Exception):
    """A single file failed validation; reported per file, not per request"""


def _check_segment(value: str, label: str) -> str:
    if not value or value in (".", "..") or not _SAFE_SEGMENT.match(value):
        raise BadRequestError(f"Invalid {label}")
    return value


class FileStorageService:

    def __init__(self, root: Optional[str] = None, max_bytes: Optional[int] = None):
        self.root = Path(root or settings.UPLOADS_DIR)
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES

    def directory_for(self, tenant_id: str, market_id: str) -> Path:
        return self.root / _check_segment(tenant_id, "tenant id") / _check_segment(market_id, "market id")

    def validate(self, filename: str, size: int) -> str:
        """
        Check one upload and return its normalized extension

        Raises:
            UploadRejected: Empty, too large or not an allowed image type
        """
        if size == 0:
            raise UploadRejected(f"{filename}: File is empty")
        if size > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise UploadRejected(f"{filename}: File size exceeds {limit_mb}MB limit")

        extension = os.path.splitext(filename or "")[1].lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise UploadRejected(
                f"{filename}: Invalid file type. Allowed types: jpg, jpeg, png, gif, webp"
            )
        return extension

    def save(self, tenant_id: str, market_id: str, filename: str, content: bytes) -> str:
        """
        Validate and write one file

        Returns:
            Path relative to the uploads root, e.g. ``tenant-a/market-1/<uuid>.png``
        """
        extension = self.validate(filename, len(content))

        directory = self.directory_for(tenant_id, market_id)
        directory.mkdir(parents=True, exist_ok=True)

        stored_name = f"{uuid.uuid4()}{extension}"
        (directory / stored_name).write_bytes(content)

        logger.info(f"Stored upload {tenant_id}/{market_id}/{stored_name} ({len(content)} bytes)")
        return f"{tenant_id}/{market_id}/{stored_name}"

    def delete(self, tenant_id: str, market_id: str, filename: str) -> None:
        """
        Raises:
            NotFoundError: File does not exist
        """
        path = self.directory_for(tenant_id, market_id) / _check_segment(filename, "file name")
        if not path.is_file():
            raise NotFoundError("File not found")

        path.unlink()
        logger.info(f"Deleted upload {tenant_id}/{market_id}/{filename}")
