"""
Authentication API endpoints
- Login issues a JWT in an httpOnly cookie and in the body
- Logout clears the cookie
- Me returns the signed-in admin user
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ecomm.core.auth import (
    Principal,
    create_access_token,
    get_current_principal,
    require_admin,
    verify_password,
)
from ecomm.core.config import settings
from ecomm.core.database import get_db
from ecomm.domain.auth import LoginRequest, LoginResponse, UserInfo
from ecomm.repositories import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Invalid email or password"


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """Authenticate an admin user with email and password"""
    if not credentials.email or not credentials.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    repo = UserRepository(db)
    user = repo.find_by_email(credentials.email)

    if user is None or not user.is_active:
        logger.info(f"Failed login for {credentials.email}: unknown or inactive user")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    if not verify_password(credentials.password, user.password_hash):
        logger.info(f"Failed login for {credentials.email}: bad password")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    repo.record_login(user)
    token = create_access_token(user)

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRY_MINUTES * 60,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="strict",
    )

    logger.info(f"User {user.id} logged in")
    return LoginResponse(user=repo.to_domain(user), token=token)


@router.post("/logout")
def logout(
    response: Response,
    principal: Principal = Depends(get_current_principal),
):
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="strict",
    )
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserInfo)
def me(
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    repo = UserRepository(db)
    user = repo.find_active_by_id(principal.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return repo.to_domain(user)
