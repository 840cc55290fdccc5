"""
EComm Platform - multi-tenant commerce API
"""
__version__ = "1.0.0"
