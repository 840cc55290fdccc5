"""
Order Service
Checkout from a cart and order status transitions with stock side effects

Stock rules:
- Moving to ``paid`` validates stock for every line, then decrements it
  (floored at 0) and assigns a tracking number
- Moving from ``paid`` to ``cancelled`` puts the stock back
- ``refunded`` never restores stock
"""
import logging
import random
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from ecomm.core.exceptions import BadRequestError, InsufficientStockError, NotFoundError
from ecomm.core.utils import utcnow
from ecomm.domain.order import CreateOrderRequest, Order
from ecomm.models import Order as OrderRow
from ecomm.repositories import CartRepository, MarketRepository, OrderRepository, ProductRepository
from ecomm.services.cart_service import CART_ORDER_STATUS, cart_order_id, find_variant, resolve_sku

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_PAID = "paid"
STATUS_CANCELLED = "cancelled"

DEFAULT_ORDER_PREFIX = "ORD"


class OrderService:
    """
    Service for placing orders and moving them through statuses

    Handles:
    - Order creation from a session cart (line item snapshot, sku resolution)
    - Order numbers ``<prefix>-<yyyymmdd>-<4 digits>``
    - Stock validation, decrement and restore on status changes
    """

    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.carts = CartRepository(db)
        self.products = ProductRepository(db)
        self.markets = MarketRepository(db)

    def generate_order_number(self, market_id: str) -> str:
        """
        Order number using the market's ``order_prefix`` when set

        Returns:
            e.g. ORD-20251104-4821
        """
        prefix = DEFAULT_ORDER_PREFIX
        market = self.markets.find_row(market_id)
        if market is not None and market.settings and market.settings.get("order_prefix"):
            prefix = market.settings["order_prefix"]

        date_part = utcnow().strftime("%Y%m%d")
        for _ in range(10):
            number = f"{prefix}-{date_part}-{random.randint(1000, 9999)}"
            if not self.orders.order_number_exists(number):
                return number
        # Crowded day; fall back to a longer suffix
        return f"{prefix}-{date_part}-{uuid.uuid4().hex[:8].upper()}"

    def create_order(self, request: CreateOrderRequest, tenant_id: str, market_id: str) -> Order:
        """
        Place an order from the session's cart

        The cart is kept (payment may still fail on stock); its mirrored
        ``new`` order is removed.

        Raises:
            BadRequestError: Cart is empty
        """
        cart = self.carts.get_or_create(request.session_id, tenant_id, market_id)
        if not cart.items:
            raise BadRequestError("Cart is empty")

        items = []
        for item in cart.items:
            product = self.products.find_current_row(item["product_id"])
            items.append({
                "id": str(uuid.uuid4()),
                "product_id": item["product_id"],
                "variant_id": item.get("variant_id"),
                "product_name": item["product_name"],
                "sku": resolve_sku(product, item.get("variant_id")),
                "product_image_url": item.get("product_image_url"),
                "unit_price": item["unit_price"],
                "quantity": item["quantity"],
                "line_total": item["subtotal"],
                "currency": "USD",
            })

        now = utcnow()
        row = OrderRow(
            id=str(uuid.uuid4()),
            tenant_id=cart.tenant_id,
            market_id=cart.market_id,
            order_number=self.generate_order_number(cart.market_id),
            status=STATUS_PENDING,
            customer=request.customer.model_dump(mode="json"),
            shipping_address=request.shipping_address.model_dump(mode="json"),
            billing_address=request.billing_address.model_dump(mode="json") if request.billing_address else None,
            items=items,
            subtotal=cart.subtotal,
            tax=cart.tax,
            shipping_cost=0,
            total=cart.total,
            created_at=now,
            updated_at=now,
        )
        self.orders.add(row, commit=False)

        mirrored = self.orders.find_row(cart_order_id(request.session_id))
        if mirrored is not None and mirrored.status == CART_ORDER_STATUS:
            self.orders.delete(mirrored, commit=False)

        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Order {row.order_number} created from session {request.session_id}")
        return self.orders.to_domain(row)

    def get_order(self, order_id: str) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def _validate_stock(self, row: OrderRow) -> None:
        """
        Raises:
            BadRequestError: A product or variant is gone, or stock is short
        """
        for item in row.items or []:
            product = self.products.find_current_row(item["product_id"])
            if product is None:
                raise BadRequestError(f"Product '{item['product_name']}' not found")

            variant_id = item.get("variant_id")
            if variant_id:
                variant = find_variant(product, variant_id)
                if variant is None:
                    raise BadRequestError(f"Variant for product '{item['product_name']}' not found")
                available = int(variant.get("stock_quantity") or 0)
                label = f"{item['product_name']} (SKU: {variant.get('sku') or ''})"
            else:
                if product.stock_quantity is None:
                    raise BadRequestError(f"Product '{item['product_name']}' has no stock information")
                available = product.stock_quantity
                label = f"{item['product_name']} (SKU: {product.sku or ''})"

            if item["quantity"] > available:
                raise InsufficientStockError(
                    label,
                    item["quantity"],
                    available,
                    suffix="Please return to cart to adjust quantities.",
                )

    def _adjust_stock(self, row: OrderRow, direction: int) -> None:
        for item in row.items or []:
            self.products.adjust_stock(item["product_id"], item.get("variant_id"), direction * item["quantity"])

    def update_status(self, order_id: str, status: str, apply_stock_rules: bool = True) -> Order:
        """
        Move an order to a new status

        Args:
            order_id: Order ID
            status: New status code (stored as given, compared lower-case)
            apply_stock_rules: False for admin overrides that only relabel

        Raises:
            NotFoundError: Order does not exist
            BadRequestError: Stock validation failed when moving to paid
        """
        row = self.orders.find_row(order_id)
        if row is None:
            raise NotFoundError("Order not found")

        old_status = (row.status or "").lower()
        new_status = status.lower()

        if apply_stock_rules and new_status == STATUS_PAID and old_status != STATUS_PAID:
            self._validate_stock(row)

        row.status = status

        if apply_stock_rules:
            if new_status == STATUS_PAID and not row.tracking_number:
                row.tracking_number = f"TRACK-{row.id[:8].upper()}"

            if new_status == STATUS_PAID and old_status != STATUS_PAID:
                self._adjust_stock(row, -1)
            elif new_status == STATUS_CANCELLED and old_status == STATUS_PAID:
                self._adjust_stock(row, +1)

        self.orders.save(row, commit=False)
        self.db.commit()
        self.db.refresh(row)

        logger.info(f"Order {row.order_number}: {old_status} -> {new_status}")
        return self.orders.to_domain(row)

    def find_all(
        self,
        status: Optional[str] = None,
        tenant_id: Optional[str] = None,
        market_id: Optional[str] = None,
    ):
        return self.orders.find_all(status=status, tenant_id=tenant_id, market_id=market_id)
