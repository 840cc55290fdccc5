"""
Domain models (request/response schemas) for the eCommerce API
"""
