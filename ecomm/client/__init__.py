"""
HTTP client for storefronts built on the eCommerce API
"""
from ecomm.client.api_client import ECommApiClient

__all__ = ["ECommApiClient"]
