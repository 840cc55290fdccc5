"""
Order Status Service
Per-tenant order status definitions and their system defaults
"""
import logging
import uuid
from typing import List

from sqlalchemy.orm import Session

from ecomm.core.exceptions import BadRequestError, ConflictError, NotFoundError
from ecomm.core.utils import utcnow
from ecomm.domain.order_status import OrderStatusCreate, OrderStatusUpdate
from ecomm.models import OrderStatus
from ecomm.repositories import OrderRepository, OrderStatusRepository

logger = logging.getLogger(__name__)

# (name, code, color, sort_order)
DEFAULT_ORDER_STATUSES = [
    ("New", "new", "#6B7280", 1),
    ("Submitted", "submitted", "#3B82F6", 2),
    ("Paid", "paid", "#10B981", 3),
    ("Processing", "processing", "#F59E0B", 4),
    ("Completed", "completed", "#059669", 5),
    ("Cancelled", "cancelled", "#EF4444", 6),
    ("On Hold", "on-hold", "#F59E0B", 7),
    ("Refunded", "refunded", "#8B5CF6", 8),
]


def build_default_statuses(tenant_id: str) -> List[OrderStatus]:
    """Unsaved rows for the eight system default statuses of a tenant"""
    now = utcnow()
    return [
        OrderStatus(
            id=f"status-{tenant_id}-{code}",
            tenant_id=tenant_id,
            name=name,
            code=code,
            color=color,
            sort_order=sort_order,
            is_system_default=True,
            is_active=True,
            created_at=now,
        )
        for name, code, color, sort_order in DEFAULT_ORDER_STATUSES
    ]


class OrderStatusService:

    def __init__(self, db: Session):
        self.db = db
        self.statuses = OrderStatusRepository(db)
        self.orders = OrderRepository(db)

    def list_statuses(self, tenant_id: str, active_only: bool = False) -> List[OrderStatus]:
        return self.statuses.find_all(tenant_id, active_only=active_only)

    def get_status(self, tenant_id: str, status_id: str) -> OrderStatus:
        row = self.statuses.find_by_id(tenant_id, status_id)
        if row is None:
            raise NotFoundError("Order status not found")
        return row

    def create_status(self, tenant_id: str, data: OrderStatusCreate) -> OrderStatus:
        """
        Raises:
            ConflictError: The tenant already has a status with this code
        """
        if self.statuses.code_exists(tenant_id, data.code):
            raise ConflictError("A status with this code already exists")

        row = OrderStatus(
            id=f"status-{uuid.uuid4()}",
            tenant_id=tenant_id,
            name=data.name,
            code=data.code,
            color=data.color,
            sort_order=data.sort_order,
            is_system_default=False,
            is_active=data.is_active,
            created_at=utcnow(),
        )
        self.statuses.add(row)
        logger.info(f"Order status '{row.code}' created for tenant {tenant_id}")
        return row

    def update_status(self, tenant_id: str, status_id: str, data: OrderStatusUpdate) -> OrderStatus:
        """Partial update; the code of a status never changes"""
        row = self.get_status(tenant_id, status_id)

        if data.name is not None:
            row.name = data.name
        if data.color is not None:
            row.color = data.color
        if data.sort_order is not None:
            row.sort_order = data.sort_order
        if data.is_active is not None:
            row.is_active = data.is_active
        row.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(row)
        return row

    def delete_status(self, tenant_id: str, status_id: str) -> None:
        """
        Raises:
            NotFoundError: Unknown status
            BadRequestError: System default, or still used by orders
        """
        row = self.get_status(tenant_id, status_id)

        if row.is_system_default:
            raise BadRequestError("Cannot delete system default statuses")

        if self.orders.status_in_use(tenant_id, row.code):
            raise BadRequestError(
                "Cannot delete status that is currently in use by orders",
                suggestion="You can deactivate the status instead",
            )

        self.statuses.delete(row)
        logger.info(f"Order status '{row.code}' deleted for tenant {tenant_id}")

    def reset_defaults(self, tenant_id: str) -> List[OrderStatus]:
        """
        Remove unused custom statuses and reactivate the system defaults

        Defaults missing for the tenant are recreated.
        """
        existing = self.statuses.find_all(tenant_id)
        now = utcnow()

        for row in existing:
            if row.is_system_default:
                row.is_active = True
                row.updated_at = now
            elif not self.orders.status_in_use(tenant_id, row.code):
                self.statuses.delete(row, commit=False)

        present = {row.code for row in existing if row.is_system_default}
        for row in build_default_statuses(tenant_id):
            if row.code not in present and not self.statuses.code_exists(tenant_id, row.code):
                self.statuses.add(row, commit=False)

        self.db.commit()
        logger.info(f"Order statuses reset to defaults for tenant {tenant_id}")
        return self.statuses.find_all(tenant_id)
