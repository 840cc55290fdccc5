"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models (or ORM
rows where a service needs to modify them in place). Repositories keep
SQLAlchemy details out of business logic.
"""
from ecomm.repositories.product_repository import ProductRepository
from ecomm.repositories.category_repository import CategoryRepository
from ecomm.repositories.cart_repository import CartRepository
from ecomm.repositories.order_repository import OrderRepository
from ecomm.repositories.order_status_repository import OrderStatusRepository
from ecomm.repositories.tenant_repository import TenantRepository
from ecomm.repositories.market_repository import MarketRepository
from ecomm.repositories.api_key_repository import ApiKeyRepository
from ecomm.repositories.user_repository import UserRepository

__all__ = [
    'ProductRepository',
    'CategoryRepository',
    'CartRepository',
    'OrderRepository',
    'OrderStatusRepository',
    'TenantRepository',
    'MarketRepository',
    'ApiKeyRepository',
    'UserRepository',
]
