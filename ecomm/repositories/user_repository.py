"""
User Repository - Data Access Layer for admin users
"""
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ecomm.core.utils import utcnow
from ecomm.domain.auth import UserInfo
from ecomm.models import User


class UserRepository:

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _map_row_to_user(row: User) -> UserInfo:
        return UserInfo(
            id=row.id,
            email=row.email,
            display_name=row.display_name,
            role=row.role,
            tenant_id=row.tenant_id,
            assigned_market_ids=row.assigned_market_ids or [],
            is_active=row.is_active,
            last_login_at=row.last_login_at,
        )

    def find_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup"""
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def find_active_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()

    def record_login(self, user: User) -> None:
        user.last_login_at = utcnow()
        self.db.commit()
        self.db.refresh(user)

    def to_domain(self, row: User) -> UserInfo:
        return self._map_row_to_user(row)
