"""
Order Status Repository - Data Access Layer for per-tenant order statuses
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from ecomm.models import OrderStatus


class OrderStatusRepository:
    """Returns ORM rows; the domain schema validates them with from_attributes"""

    def __init__(self, db: Session):
        self.db = db

    def find_all(self, tenant_id: str, active_only: bool = False) -> List[OrderStatus]:
        query = self.db.query(OrderStatus).filter(OrderStatus.tenant_id == tenant_id)
        if active_only:
            query = query.filter(OrderStatus.is_active.is_(True))
        return query.order_by(OrderStatus.sort_order).all()

    def find_by_id(self, tenant_id: str, status_id: str) -> Optional[OrderStatus]:
        return (
            self.db.query(OrderStatus)
            .filter(OrderStatus.id == status_id, OrderStatus.tenant_id == tenant_id)
            .first()
        )

    def code_exists(self, tenant_id: str, code: str) -> bool:
        return (
            self.db.query(OrderStatus.id)
            .filter(OrderStatus.tenant_id == tenant_id, OrderStatus.code == code)
            .first()
            is not None
        )

    def add(self, row: OrderStatus, commit: bool = True) -> OrderStatus:
        self.db.add(row)
        if commit:
            self.db.commit()
            self.db.refresh(row)
        return row

    def delete(self, row: OrderStatus, commit: bool = True) -> None:
        self.db.delete(row)
        if commit:
            self.db.commit()
