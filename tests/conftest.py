"""
Pytest fixtures and configuration for the eCommerce API tests

Every test gets a fresh in-memory SQLite database loaded with the demo
seed data, and a FastAPI TestClient wired to it through the get_db
dependency.

Date: 2025-11-04
"""
import os
import tempfile

# Settings are read on import; point uploads at a scratch directory first
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="ecomm-uploads-"))
os.environ.setdefault("SEED_DATABASE", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ecomm.core.auth import create_access_token
from ecomm.core.database import Base, get_db, init_db
from ecomm.main import app
from ecomm.models import User
from ecomm.services.seed_service import SeedService

# Seeded legacy-format key for tenant-a / market-1
DEMO_API_KEY = "sk_live_demo_key_12345"


@pytest.fixture(scope="function")
def engine():
    """
    In-memory SQLite engine shared by every session of a test

    StaticPool keeps a single connection so the database survives
    across sessions.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine):
    """Empty database session"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def seeded_db(db_session):
    """Session over a database holding the demo seed data"""
    SeedService(db_session).seed()
    return db_session


@pytest.fixture(scope="function")
def client(seeded_db):
    """TestClient whose requests share the seeded session"""
    def override_get_db():
        yield seeded_db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _bearer_for(db, email):
    user = db.query(User).filter(User.email == email).one()
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def superadmin_headers(seeded_db):
    """Bearer token for the seeded SUPERADMIN (no tenant)"""
    return _bearer_for(seeded_db, "admin@platform.com")


@pytest.fixture
def admin_headers(seeded_db):
    """Bearer token for the seeded TENANT_ADMIN of tenant-a"""
    return _bearer_for(seeded_db, "admin@demostore.com")


@pytest.fixture
def tenant_user_headers(seeded_db):
    """Bearer token for the seeded TENANT_USER limited to market-1"""
    return _bearer_for(seeded_db, "catalog@demostore.com")


@pytest.fixture
def api_key_headers():
    """Integration headers for tenant-a / market-1"""
    return {
        "X-API-Key": DEMO_API_KEY,
        "X-Tenant-ID": "tenant-a",
        "X-Market-ID": "market-1",
    }


@pytest.fixture
def cart_headers(api_key_headers):
    return {**api_key_headers, "X-Session-ID": "session-abc12345"}


@pytest.fixture
def sample_product_data():
    """
    Provides sample product data for tests
    """
    return {
        "name": "Trail Running Shoes",
        "sku": "TRS-100",
        "price": 120.0,
        "stockQuantity": 15,
        "categoryIds": ["cat-4"],
        "tenantId": "tenant-a",
        "marketId": "market-1",
    }


@pytest.fixture
def sample_order_data():
    """
    Provides sample checkout data for tests
    """
    return {
        "sessionId": "session-abc12345",
        "customer": {
            "fullName": "Jane Doe",
            "email": "jane@example.com",
            "phone": "+1-555-0199",
        },
        "shippingAddress": {
            "street": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "postalCode": "62701",
            "country": "USA",
        },
    }
