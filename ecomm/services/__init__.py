"""
Service Layer - Business Logic

Services compose repositories and enforce the business rules of carts,
orders, order statuses, tenants, markets and API keys.
"""
