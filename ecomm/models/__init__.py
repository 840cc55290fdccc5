"""
Database models
"""
from .tenant import Tenant, Market
from .product import Product, Category
from .order import Order, OrderStatus, Cart
from .api_key import ApiKey
from .user import User

__all__ = [
    "Tenant",
    "Market",
    "Product",
    "Category",
    "Order",
    "OrderStatus",
    "Cart",
    "ApiKey",
    "User",
]
