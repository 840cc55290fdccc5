"""
Cart Service
Session carts with stock validation, totals and the mirrored "new" order

Every mutation recomputes the totals and mirrors the cart into an order
with id ``cart-<session>`` and status ``new`` so admins can see open carts.
The mirror is removed once the cart is empty.
"""
import logging
import uuid
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ecomm.core.config import settings
from ecomm.core.exceptions import BadRequestError, InsufficientStockError, NotFoundError
from ecomm.core.utils import to_money
from ecomm.domain.cart import AddCartItemRequest, Cart, CartItem
from ecomm.models import Cart as CartRow
from ecomm.models import Order as OrderRow
from ecomm.repositories import CartRepository, MarketRepository, OrderRepository, ProductRepository

logger = logging.getLogger(__name__)

CART_ORDER_STATUS = "new"
GUEST_CUSTOMER = {"customer_id": None, "full_name": "Guest", "email": "", "phone": None}


def cart_order_id(session_id: str) -> str:
    return f"cart-{session_id}"


def resolve_sku(product_row, variant_id: Optional[str]) -> str:
    """Variant sku when a variant is given, product sku otherwise"""
    if product_row is None:
        return ""
    if variant_id:
        variant = find_variant(product_row, variant_id)
        return (variant or {}).get("sku") or ""
    return product_row.sku or ""


def find_variant(product_row, variant_id: str) -> Optional[dict]:
    for variant in product_row.variants or []:
        if variant.get("id") == variant_id:
            return variant
    return None


class CartService:
    """
    Service for session carts

    Handles:
    - Get-or-create by session id
    - Adding, updating and removing lines with stock validation
    - Subtotal, tax (market tax rate) and total
    - Mirroring the cart into a ``new`` order
    """

    def __init__(self, db: Session):
        self.db = db
        self.carts = CartRepository(db)
        self.products = ProductRepository(db)
        self.markets = MarketRepository(db)
        self.orders = OrderRepository(db)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def tax_rate(self, market_id: str) -> Decimal:
        """Market tax rate, or DEFAULT_TAX_RATE when the market has no settings"""
        market = self.markets.find_row(market_id)
        if market is not None and market.settings and market.settings.get("tax_rate") is not None:
            return Decimal(str(market.settings["tax_rate"]))
        return Decimal(str(settings.DEFAULT_TAX_RATE))

    def _available_stock(self, product_row, variant_id: Optional[str], label: str) -> int:
        """
        Raises:
            NotFoundError: Variant does not exist
            BadRequestError: Product tracks no stock
        """
        if variant_id:
            variant = find_variant(product_row, variant_id)
            if variant is None:
                raise NotFoundError("Variant not found")
            return int(variant.get("stock_quantity") or 0)

        if product_row.stock_quantity is None:
            raise BadRequestError(f"Product '{label}' has no stock information")
        return product_row.stock_quantity

    def _recalculate(self, cart: CartRow) -> None:
        subtotal = Decimal("0")
        for item in cart.items:
            line = to_money(item["unit_price"]) * item["quantity"]
            item["subtotal"] = float(to_money(line))
            subtotal += line

        cart.subtotal = to_money(subtotal)
        cart.tax = to_money(subtotal * self.tax_rate(cart.market_id))
        cart.total = to_money(cart.subtotal + cart.tax)

    def _sync_to_order(self, cart: CartRow) -> None:
        """Create, refresh or delete the ``cart-<session>`` order. Does not commit"""
        order_id = cart_order_id(cart.session_id)
        existing = self.orders.find_row(order_id)
        if existing is not None and existing.status != CART_ORDER_STATUS:
            # The id now belongs to a placed order
            return

        if not cart.items:
            if existing is not None:
                self.orders.delete(existing, commit=False)
            return

        items = []
        for item in cart.items:
            product = self.products.find_current_row(item["product_id"])
            items.append({
                "id": item["id"],
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

        if existing is None:
            existing = OrderRow(
                id=order_id,
                tenant_id=cart.tenant_id,
                market_id=cart.market_id,
                order_number=f"CART-{cart.session_id[:8].upper()}",
                status=CART_ORDER_STATUS,
                shipping_address={},
                created_at=cart.created_at,
            )
            self.orders.add(existing, commit=False)

        existing.subtotal = cart.subtotal
        existing.tax = cart.tax
        existing.shipping_cost = Decimal("0")
        existing.total = cart.total
        existing.items = items
        existing.customer = dict(GUEST_CUSTOMER)
        self.orders.save(existing, commit=False)

    def _persist(self, cart: CartRow) -> None:
        self._recalculate(cart)
        self.carts.save(cart, commit=False)
        self._sync_to_order(cart)
        self.db.commit()
        self.db.refresh(cart)

    def _find_item(self, cart: CartRow, item_id: str) -> dict:
        for item in cart.items:
            if item["id"] == item_id:
                return item
        raise NotFoundError("Cart item not found")

    @staticmethod
    def _to_item(item: dict, available_stock: Optional[int] = None) -> CartItem:
        data = dict(item)
        if available_stock is not None:
            data["available_stock"] = available_stock
        return CartItem.model_validate(data)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get_cart(self, session_id: str, tenant_id: str, market_id: str) -> Cart:
        """Cart with ``available_stock`` filled in for every line"""
        cart = self.carts.get_or_create(session_id, tenant_id, market_id)

        items = []
        for item in cart.items:
            stock = None
            product = self.products.find_current_row(item["product_id"])
            if product is not None:
                if item.get("variant_id"):
                    variant = find_variant(product, item["variant_id"])
                    stock = int(variant["stock_quantity"]) if variant else None
                else:
                    stock = product.stock_quantity
            items.append(self._to_item(item, stock))

        return Cart(
            id=cart.id,
            session_id=cart.session_id,
            tenant_id=cart.tenant_id,
            market_id=cart.market_id,
            items=items,
            subtotal=cart.subtotal,
            tax=cart.tax,
            total=cart.total,
            created_at=cart.created_at,
            updated_at=cart.updated_at,
        )

    def add_item(self, session_id: str, tenant_id: str, market_id: str, request: AddCartItemRequest) -> CartItem:
        """
        Add a product (or one of its variants) to the cart

        An existing line for the same product and variant is incremented.

        Raises:
            NotFoundError: Product or variant does not exist
            BadRequestError: No stock information, or not enough stock
        """
        product = self.products.find_current_row(request.product_id)
        if product is None:
            raise NotFoundError("Product not found")

        cart = self.carts.get_or_create(session_id, tenant_id, market_id)
        items: List[dict] = [dict(i) for i in cart.items]

        existing = next(
            (i for i in items
             if i["product_id"] == request.product_id and i.get("variant_id") == request.variant_id),
            None,
        )
        requested_total = request.quantity + (existing["quantity"] if existing else 0)

        available = self._available_stock(product, request.variant_id, product.name)
        if requested_total > available:
            raise InsufficientStockError(f"'{product.name}'", requested_total, available)

        if existing is not None:
            existing["quantity"] = requested_total
            line = existing
        else:
            unit_price, name = self._price_and_name(product, request.variant_id)
            line = {
                "id": str(uuid.uuid4()),
                "product_id": product.id,
                "variant_id": request.variant_id,
                "product_name": name,
                "product_image_url": (product.images or [None])[0],
                "unit_price": float(unit_price),
                "quantity": request.quantity,
                "subtotal": 0.0,
            }
            items.append(line)

        cart.items = items
        self._persist(cart)

        logger.info(f"Cart {session_id}: {product.id} x{line['quantity']}")
        return self._to_item(self._find_item(cart, line["id"]), available)

    @staticmethod
    def _price_and_name(product, variant_id: Optional[str]) -> Tuple[Decimal, str]:
        """Sale price wins over price; variant values are appended to the name"""
        if variant_id:
            variant = find_variant(product, variant_id) or {}
            price = variant.get("sale_price")
            if price is None:
                price = variant.get("price")
            options = variant.get("options") or {}
            name = product.name
            if options:
                name = f"{product.name} - {', '.join(str(v) for v in options.values())}"
            return to_money(price), name

        price = product.sale_price if product.sale_price is not None else product.price
        return to_money(price), product.name

    def update_item(self, session_id: str, tenant_id: str, market_id: str, item_id: str, quantity: int) -> CartItem:
        """
        Set a line's quantity

        Raises:
            NotFoundError: Line, product or variant does not exist
            BadRequestError: Not enough stock
        """
        cart = self.carts.get_or_create(session_id, tenant_id, market_id)
        items: List[dict] = [dict(i) for i in cart.items]
        item = next((i for i in items if i["id"] == item_id), None)
        if item is None:
            raise NotFoundError("Cart item not found")

        product = self.products.find_current_row(item["product_id"])
        if product is None:
            raise NotFoundError("Product not found")

        available = self._available_stock(product, item.get("variant_id"), item["product_name"])
        if quantity > available:
            raise InsufficientStockError(f"'{item['product_name']}'", quantity, available)

        item["quantity"] = quantity
        cart.items = items
        self._persist(cart)

        return self._to_item(self._find_item(cart, item_id), available)

    def remove_item(self, session_id: str, tenant_id: str, market_id: str, item_id: str) -> None:
        cart = self.carts.get_or_create(session_id, tenant_id, market_id)
        items = [dict(i) for i in cart.items]
        remaining = [i for i in items if i["id"] != item_id]
        if len(remaining) == len(items):
            raise NotFoundError("Cart item not found")

        cart.items = remaining
        self._persist(cart)

    def clear(self, session_id: str) -> None:
        """Empty the cart; also drops its mirrored order"""
        cart = self.carts.find_by_session(session_id)
        if cart is None:
            return
        cart.items = []
        self._persist(cart)
        logger.info(f"Cart {session_id} cleared")
