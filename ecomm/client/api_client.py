"""
eCommerce API Client
Typed client used by storefront sites to browse the catalog, manage the
session cart and place orders

Every request carries the X-API-Key, X-Tenant-ID and X-Market-ID headers;
cart calls add X-Session-ID.

ERROR POLICY:
- Transient failures (network errors, 5xx, 408) are retried up to
  ``max_retries`` times, waiting ``backoff_base * 2**retry`` seconds
- Reads log the failure and return an empty result ([] or None)
- Writes log the failure and re-raise it

Date: 2025-11-04
"""
import logging
import os
import time
from typing import Any, Dict, List, Optional

import httpx

from ecomm.domain.cart import AddCartItemRequest, Cart, CartItem, UpdateCartItemRequest
from ecomm.domain.category import Category
from ecomm.domain.order import CreateOrderRequest, Order, UpdateOrderStatusRequest
from ecomm.domain.product import Product
from ecomm.domain.tenant import TenantInfo

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {408}


def is_transient(response: httpx.Response) -> bool:
    return response.status_code >= 500 or response.status_code in RETRYABLE_STATUS_CODES


class ECommApiClient:
    """
    Client for the eCommerce REST API

    Usage:
        client = ECommApiClient(
            base_url="http://localhost:8000/api/v1",
            api_key="sk_live_...",
            tenant_id="tenant-a",
            market_id="market-1",
        )
        products = client.get_products(search="shirt")
    """

    def __init__(
        self,
        base_url: str = None,
        api_key: str = None,
        tenant_id: str = None,
        market_id: str = None,
        timeout: float = None,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client

        Args:
            base_url: API root including /api/v1 (env ECOMM_API_BASE_URL)
            api_key: Market API key (env ECOMM_API_KEY)
            tenant_id: Tenant sent in X-Tenant-ID (env ECOMM_TENANT_ID)
            market_id: Market sent in X-Market-ID (env ECOMM_MARKET_ID)
            timeout: Request timeout in seconds (env ECOMM_API_TIMEOUT, default 30)
            max_retries: Retries after the first attempt for transient failures
            backoff_base: Seconds multiplied by 2**retry between attempts
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url or os.getenv("ECOMM_API_BASE_URL", "http://localhost:8000/api/v1")
        self.api_key = api_key or os.getenv("ECOMM_API_KEY", "")
        self.tenant_id = tenant_id or os.getenv("ECOMM_TENANT_ID", "")
        self.market_id = market_id or os.getenv("ECOMM_MARKET_ID", "")
        self.timeout = timeout if timeout is not None else float(os.getenv("ECOMM_API_TIMEOUT", "30"))
        self.max_retries = max_retries
        self.backoff_base = backoff_base

        self._client = httpx.Client(
            base_url=self.base_url,
            headers=self._headers,
            timeout=self.timeout,
            transport=transport,
        )

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "X-API-Key": self.api_key,
            "X-Tenant-ID": self.tenant_id,
            "X-Market-ID": self.market_id,
        }

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _sleep(self, retry: int):
        delay = self.backoff_base * (2 ** retry)
        if delay > 0:
            logger.info(f"Retrying in {delay:.2f} seconds...")
            time.sleep(delay)

    def _request(self, method: str, path: str, session_id: Optional[str] = None, **kwargs) -> httpx.Response:
        """
        Send a request, retrying transient failures

        Raises:
            httpx.HTTPStatusError: Non-success response after retries
            httpx.TransportError: Network failure after retries
        """
        headers = kwargs.pop("headers", {})
        if session_id:
            headers["X-Session-ID"] = session_id

        for retry in range(self.max_retries + 1):
            try:
                response = self._client.request(method, path, headers=headers, **kwargs)
            except httpx.TransportError as e:
                if retry >= self.max_retries:
                    raise
                logger.warning(f"{method} {path} failed ({e}); attempt {retry + 1}/{self.max_retries + 1}")
                self._sleep(retry + 1)
                continue

            if is_transient(response) and retry < self.max_retries:
                logger.warning(
                    f"{method} {path} returned {response.status_code}; attempt {retry + 1}/{self.max_retries + 1}"
                )
                self._sleep(retry + 1)
                continue

            response.raise_for_status()
            return response

    @staticmethod
    def _body(model) -> Dict[str, Any]:
        return model.model_dump(mode="json", by_alias=True, exclude_none=True)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def get_products(self, category_id: Optional[str] = None, search: Optional[str] = None) -> List[Product]:
        params = {}
        if category_id:
            params["categoryId"] = category_id
        if search:
            params["search"] = search

        try:
            response = self._request("GET", "/products", params=params)
            return [Product.model_validate(p) for p in response.json()]
        except Exception as e:
            logger.error(f"Error fetching products: {e}")
            return []

    def get_product(self, product_id: str) -> Optional[Product]:
        try:
            response = self._request("GET", f"/products/{product_id}")
            return Product.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            return None

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def get_categories(self) -> List[Category]:
        try:
            response = self._request("GET", "/categories")
            return [Category.model_validate(c) for c in response.json()]
        except Exception as e:
            logger.error(f"Error fetching categories: {e}")
            return []

    def get_category(self, category_id: str) -> Optional[Category]:
        try:
            response = self._request("GET", f"/categories/{category_id}")
            return Category.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error fetching category {category_id}: {e}")
            return None

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    def get_cart(self, session_id: str) -> Optional[Cart]:
        try:
            response = self._request("GET", "/cart", session_id=session_id)
            return Cart.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error fetching cart for session {session_id}: {e}")
            return None

    def add_cart_item(self, session_id: str, request: AddCartItemRequest) -> CartItem:
        try:
            response = self._request("POST", "/cart/items", session_id=session_id, json=self._body(request))
            return CartItem.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error adding item to cart: {e}")
            raise

    def update_cart_item(self, session_id: str, item_id: str, quantity: int) -> CartItem:
        try:
            body = self._body(UpdateCartItemRequest(quantity=quantity))
            response = self._request("PUT", f"/cart/items/{item_id}", session_id=session_id, json=body)
            return CartItem.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error updating cart item {item_id}: {e}")
            raise

    def delete_cart_item(self, session_id: str, item_id: str) -> None:
        try:
            self._request("DELETE", f"/cart/items/{item_id}", session_id=session_id)
        except Exception as e:
            logger.error(f"Error deleting cart item {item_id}: {e}")
            raise

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def create_order(self, request: CreateOrderRequest) -> Order:
        try:
            response = self._request("POST", "/orders", json=self._body(request))
            return Order.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error creating order: {e}")
            raise

    def update_order_status(self, order_id: str, status: str) -> Order:
        try:
            body = self._body(UpdateOrderStatusRequest(status=status))
            response = self._request("PUT", f"/orders/{order_id}/status", json=body)
            return Order.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error updating order status for {order_id}: {e}")
            raise

    def get_order(self, order_id: str) -> Optional[Order]:
        try:
            response = self._request("GET", f"/orders/{order_id}")
            return Order.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error fetching order {order_id}: {e}")
            return None

    # ------------------------------------------------------------------
    # Tenant
    # ------------------------------------------------------------------

    def get_tenant_info(self) -> Optional[TenantInfo]:
        try:
            response = self._request("GET", f"/tenants/{self.tenant_id}")
            return TenantInfo.model_validate(response.json())
        except Exception as e:
            logger.error(f"Error fetching tenant {self.tenant_id}: {e}")
            return None
