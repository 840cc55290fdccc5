"""
Centralized application configuration

Values are read from the environment (and a local .env file).
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_TITLE: str = "eCommerce API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = (
        "API server for eCommerce SaaS Platform. Provides endpoints for products, categories, "
        "cart, orders, tenants, markets, and admin operations."
    )
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./ecomm.db"
    SEED_DATABASE: bool = True

    # JWT
    JWT_SECRET_KEY: str = "change-me-development-secret-key-32chars"
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "ecomm-api"
    JWT_AUDIENCE: str = "ecomm-admin"
    JWT_EXPIRY_MINUTES: int = 60

    # Auth cookie
    AUTH_COOKIE_NAME: str = "auth-token"
    AUTH_COOKIE_SECURE: bool = True

    # API keys
    API_KEY_PREFIX: str = "sk_live_"
    # Seeded keys use the "hash_of_<key>" format; accepted until migrated to SHA-256
    ALLOW_LEGACY_API_KEY_HASHES: bool = True

    # CORS - Can be string (comma-separated) or JSON array
    ALLOWED_ORIGINS: Optional[str] = (
        "http://localhost:5173,http://localhost:5174,http://localhost:5175,"
        "http://localhost:5176,http://localhost:5025"
    )

    # Uploads
    UPLOADS_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    UPLOAD_CACHE_SECONDS: int = 604800

    # Commerce defaults
    DEFAULT_TAX_RATE: float = 0.08
    DEFAULT_TENANT_ID: str = "tenant-a"
    DEFAULT_MARKET_ID: str = "market-1"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return []

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


settings = Settings()
