"""
Authentication for the eCommerce API

Two schemes are accepted:
- JWT issued by ``POST /api/v1/auth/login``, read from the ``auth-token``
  cookie or an ``Authorization: Bearer`` header (admin users)
- Per-market API keys sent in the ``X-API-Key`` header (integrations)

Endpoints depend on ``get_current_principal`` (either scheme) or
``require_admin`` (JWT only).
"""
import hashlib
import hmac
import logging
import secrets
from datetime import timedelta
from typing import List, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ecomm.repositories.api_key_repository import ApiKeyRepository

from .config import settings
from .database import get_db
from .utils import as_utc, utcnow

logger = logging.getLogger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

API_KEY_HEADER = "X-API-Key"
LEGACY_HASH_PREFIX = "hash_of_"

AUTH_TYPE_JWT = "jwt"
AUTH_TYPE_API_KEY = "api_key"

# Role hierarchy: SUPERADMIN > TENANT_ADMIN > TENANT_USER
ROLE_HIERARCHY = {
    "SUPERADMIN": 3,
    "TENANT_ADMIN": 2,
    "TENANT_USER": 1,
}


class Principal(BaseModel):
    """Caller identity resolved from a JWT or an API key"""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    auth_type: str = AUTH_TYPE_JWT
    tenant_id: Optional[str] = None
    market_ids: List[str] = []
    api_key_id: Optional[str] = None

    @property
    def is_api_key(self) -> bool:
        return self.auth_type == AUTH_TYPE_API_KEY


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


# =============================================================================
# JWT
# =============================================================================

def create_access_token(user, expires_minutes: Optional[int] = None) -> str:
    """
    Issue an HS256 token for an admin user

    Args:
        user: ``ecomm.models.User`` row
        expires_minutes: Lifetime override (defaults to JWT_EXPIRY_MINUTES)

    Returns:
        Encoded JWT
    """
    now = utcnow()
    lifetime = expires_minutes if expires_minutes is not None else settings.JWT_EXPIRY_MINUTES
    claims = {
        "sub": user.id,
        "email": user.email,
        "name": user.display_name,
        "role": user.role,
        "market_ids": list(user.assigned_market_ids or []),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=lifetime)).timestamp()),
    }
    if user.tenant_id:
        claims["tenant_id"] = user.tenant_id
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a token (signature, issuer, audience, expiry)

    Raises:
        HTTPException: 401 when the token is expired or invalid
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )


def _principal_from_token(token: str) -> Principal:
    payload = decode_access_token(token)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Principal(
        id=user_id,
        email=payload.get("email"),
        name=payload.get("name"),
        role=payload.get("role"),
        auth_type=AUTH_TYPE_JWT,
        tenant_id=payload.get("tenant_id"),
        market_ids=payload.get("market_ids") or [],
    )


def _read_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Cookie first, then bearer header"""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


# =============================================================================
# API keys
# =============================================================================

def hash_api_key(key: str) -> str:
    """Hash an API key using SHA-256"""
    return hashlib.sha256(key.encode()).hexdigest()


def generate_api_key() -> str:
    """``sk_live_`` followed by 64 hex characters"""
    return f"{settings.API_KEY_PREFIX}{secrets.token_hex(32)}"


def last_four_chars(key: str) -> str:
    return key[-4:] if len(key) >= 4 else key


def is_legacy_hash(stored_hash: str) -> bool:
    return stored_hash.startswith(LEGACY_HASH_PREFIX)


def validate_api_key(provided_key: str, stored_hash: str) -> bool:
    """
    Check a plaintext key against a stored hash

    Stored hashes are SHA-256 hex digests. ``hash_of_<key>`` values from
    older seed data are accepted while ALLOW_LEGACY_API_KEY_HASHES is on.
    """
    if not provided_key or not stored_hash:
        return False

    if is_legacy_hash(stored_hash):
        if not settings.ALLOW_LEGACY_API_KEY_HASHES:
            return False
        return hmac.compare_digest(stored_hash[len(LEGACY_HASH_PREFIX):].encode(), provided_key.encode())

    return hmac.compare_digest(hash_api_key(provided_key).encode(), stored_hash.encode())


def authenticate_api_key(db: Session, provided_key: str):
    """
    Resolve an active, unexpired API key row for a plaintext key

    Updates ``last_used_at``. A key matched through a legacy hash is
    rewritten to its SHA-256 form.

    Returns:
        ``ecomm.models.ApiKey`` or None
    """
    if not provided_key:
        return None

    repo = ApiKeyRepository(db)
    digest = hash_api_key(provided_key)

    match = None
    for candidate in repo.find_active_by_hash(digest):
        if validate_api_key(provided_key, candidate.key_hash):
            match = candidate
            break

    if match is None and settings.ALLOW_LEGACY_API_KEY_HASHES:
        for candidate in repo.find_active_legacy():
            if validate_api_key(provided_key, candidate.key_hash):
                logger.warning(
                    f"API key {candidate.id} authenticated with a legacy hash; upgrading to SHA-256"
                )
                candidate.key_hash = digest
                match = candidate
                break

    if match is None:
        return None

    if match.expires_at is not None and as_utc(match.expires_at) <= utcnow():
        logger.info(f"Rejected expired API key {match.id}")
        return None

    repo.touch(match)
    return match


def _principal_from_api_key(api_key) -> Principal:
    return Principal(
        id=api_key.id,
        name=api_key.name,
        auth_type=AUTH_TYPE_API_KEY,
        tenant_id=api_key.tenant_id,
        market_ids=[api_key.market_id],
        api_key_id=api_key.id,
    )


# =============================================================================
# Dependencies
# =============================================================================

def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Default policy: a valid JWT or a valid API key

    Usage:
        @router.get("/protected")
        def protected_route(principal: Principal = Depends(get_current_principal)):
            return {"tenant": principal.tenant_id}
    """
    token = _read_token(request, credentials)
    api_key = request.headers.get(API_KEY_HEADER)

    if token:
        try:
            return _principal_from_token(token)
        except HTTPException:
            if not api_key:
                raise

    if api_key:
        key = authenticate_api_key(db, api_key)
        if key is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid API key",
            )
        return _principal_from_api_key(key)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    """AdminOnly policy: JWT only, API keys are rejected"""
    token = _read_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _principal_from_token(token)


def require_role(required_role: str):
    """
    Dependency factory for role-based access control on admin endpoints

    Usage:
        @router.post("/tenants")
        def create_tenant(user: Principal = Depends(require_role("SUPERADMIN"))):
            ...
    """
    def role_checker(user: Principal = Depends(require_admin)) -> Principal:
        user_level = ROLE_HIERARCHY.get(user.role or "", 0)
        required_level = ROLE_HIERARCHY.get(required_role, 0)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {required_role}, your role: {user.role}",
            )

        return user

    return role_checker
