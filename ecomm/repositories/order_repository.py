"""
Order Repository - Data Access Layer for Orders

Handles all queries for orders and returns Order domain models.
"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ecomm.core.utils import utcnow
from ecomm.domain.order import Order
from ecomm.models import Order as OrderRow


class OrderRepository:
    """
    Repository for Order data access

    Line items, customer and addresses are JSON snapshots on the row.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _map_row_to_order(row: OrderRow) -> Order:
        """
        Map an ORM row to the Order domain model.

        The row stores ``shipping_cost`` and ``items``; the API exposes
        them as ``shipping`` and ``lineItems``.
        """
        return Order(
            id=row.id,
            tenant_id=row.tenant_id,
            market_id=row.market_id,
            order_number=row.order_number,
            status=row.status,
            subtotal=row.subtotal,
            tax=row.tax,
            shipping=row.shipping_cost,
            total=row.total,
            customer=row.customer or {},
            shipping_address=row.shipping_address or {},
            billing_address=row.billing_address,
            line_items=row.items or [],
            tracking_number=row.tracking_number,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def to_domain(self, row: OrderRow) -> Order:
        return self._map_row_to_order(row)

    def find_row(self, order_id: str) -> Optional[OrderRow]:
        return self.db.get(OrderRow, order_id)

    def find_by_id(self, order_id: str) -> Optional[Order]:
        """
        Find order by ID

        Returns:
            Order or None if not found
        """
        row = self.find_row(order_id)
        return self._map_row_to_order(row) if row else None

    def find_all(
        self,
        status: Optional[str] = None,
        tenant_id: Optional[str] = None,
        market_id: Optional[str] = None,
    ) -> List[Order]:
        """
        Find orders with filters, newest first

        Args:
            status: Case-insensitive status code
            tenant_id: Filter by tenant
            market_id: Filter by market
        """
        query = self.db.query(OrderRow)

        if status:
            query = query.filter(func.lower(OrderRow.status) == status.lower())
        if tenant_id:
            query = query.filter(OrderRow.tenant_id == tenant_id)
        if market_id:
            query = query.filter(OrderRow.market_id == market_id)

        rows = query.order_by(OrderRow.created_at.desc()).all()
        return [self._map_row_to_order(r) for r in rows]

    def order_number_exists(self, order_number: str) -> bool:
        return self.db.query(OrderRow.id).filter(OrderRow.order_number == order_number).first() is not None

    def status_in_use(self, tenant_id: str, status_code: str) -> bool:
        """True when any order of the tenant currently has the status"""
        return (
            self.db.query(OrderRow.id)
            .filter(OrderRow.tenant_id == tenant_id, OrderRow.status == status_code)
            .first()
            is not None
        )

    def add(self, row: OrderRow, commit: bool = True) -> OrderRow:
        now = utcnow()
        row.created_at = row.created_at or now
        row.updated_at = row.updated_at or now
        self.db.add(row)
        if commit:
            self.db.commit()
            self.db.refresh(row)
        return row

    def save(self, row: OrderRow, commit: bool = True) -> OrderRow:
        row.updated_at = utcnow()
        if commit:
            self.db.commit()
            self.db.refresh(row)
        return row

    def delete(self, row: OrderRow, commit: bool = True) -> None:
        self.db.delete(row)
        if commit:
            self.db.commit()
