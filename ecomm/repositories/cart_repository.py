"""
Cart Repository - Data Access Layer for shopping carts

Carts are keyed by the storefront session id.
"""
import uuid
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from ecomm.core.utils import utcnow
from ecomm.models import Cart


class CartRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_by_session(self, session_id: str) -> Optional[Cart]:
        return self.db.query(Cart).filter(Cart.session_id == session_id).first()

    def get_or_create(self, session_id: str, tenant_id: str, market_id: str) -> Cart:
        """Existing carts keep the tenant/market they were created with"""
        cart = self.find_by_session(session_id)
        if cart is not None:
            return cart

        now = utcnow()
        cart = Cart(
            id=str(uuid.uuid4()),
            session_id=session_id,
            tenant_id=tenant_id,
            market_id=market_id,
            items=[],
            subtotal=0,
            tax=0,
            total=0,
            created_at=now,
            updated_at=now,
        )
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def save(self, cart: Cart, commit: bool = True) -> Cart:
        cart.updated_at = utcnow()
        flag_modified(cart, "items")
        if commit:
            self.db.commit()
            self.db.refresh(cart)
        return cart
