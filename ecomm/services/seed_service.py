"""
Seed Service
Loads demo data into an empty database on startup

Three tenants with their markets, default order statuses, admin users,
a category tree, sample products and integration API keys. API keys are
seeded in the legacy ``hash_of_<key>`` format and get upgraded to SHA-256
the first time they authenticate.
"""
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from ecomm.core.auth import hash_password
from ecomm.core.utils import utcnow
from ecomm.models import ApiKey, Category, Market, Product, Tenant, User
from ecomm.services.order_status_service import build_default_statuses

logger = logging.getLogger(__name__)

SEED_PASSWORD = "password123"


def _dt(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


def _address(street, city, state, postal_code, country="USA"):
    return {
        "street": street,
        "city": city,
        "state": state,
        "postal_code": postal_code,
        "country": country,
    }


# (id, email, display_name, role, tenant_id, market_ids)
USERS = [
    ("user-1", "admin@platform.com", "Super Admin", "SUPERADMIN", None, None),
    ("user-2", "admin@demostore.com", "Admin (Demo Store)", "TENANT_ADMIN", "tenant-a", None),
    ("user-3", "catalog@demostore.com", "Catalog Manager (Demo Store)", "TENANT_USER", "tenant-a", ["market-1"]),
]

TENANTS = [
    dict(
        id="tenant-a", name="demo-retail-group", display_name="Demo Retail Group",
        contact_email="admin@demoretail.com", contact_phone="+1-555-0100",
        address=_address("123 Business Ave", "New York", "NY", "10001"),
        settings={"max_markets": 10, "max_users": 50, "features": ["inventory", "analytics", "api_access"]},
        market_count=3, created_at=_dt(2024, 1, 1),
    ),
    dict(
        id="tenant-b", name="test-retail-chain", display_name="Test Retail Chain",
        contact_email="contact@testretail.com", contact_phone="+1-555-0200",
        address=_address("456 Commerce St", "Chicago", "IL", "60601"),
        settings={"max_markets": 5, "max_users": 25, "features": ["inventory", "api_access"]},
        market_count=2, created_at=_dt(2024, 2, 15),
    ),
    dict(
        id="tenant-c", name="sample-corp", display_name="Sample Corp",
        contact_email="info@samplecorp.com", contact_phone=None, address=None,
        settings={"max_markets": 3, "max_users": 10, "features": ["api_access"]},
        market_count=2, created_at=_dt(2024, 3, 20),
    ),
]

# (id, tenant_id, name, code, type, timezone, order_prefix, tax_rate, api_key_count)
MARKETS = [
    ("market-1", "tenant-a", "Downtown Store", "DT-001", "physical", "America/New_York", "DT", 0.0875, 2),
    ("market-2", "tenant-a", "Airport Location", "AP-001", "physical", "America/New_York", "AP", 0.0875, 1),
    ("market-3", "tenant-a", "Online Store", "ONL-001", "online", "America/New_York", "WEB", 0, 2),
    ("market-4", "tenant-b", "Mall Store", "MALL-001", "physical", "America/Chicago", "ML", 0.1025, 1),
    ("market-5", "tenant-b", "Outlet Store", "OUT-001", "physical", "America/Chicago", "OT", 0.0625, 0),
    ("market-6", "tenant-c", "Online Store", "WEB-001", "online", "America/Los_Angeles", "SC", 0, 2),
    ("market-7", "tenant-c", "Pop-up Store", "POP-001", "physical", "America/Los_Angeles", "POP", 0.095, 0),
]

# (id, name, parent_id, display_order)
CATEGORIES = [
    ("cat-1", "Electronics", None, 1),
    ("cat-1-1", "Small Electronics", "cat-1", 1),
    ("cat-1-1-1", "Watches", "cat-1-1", 1),
    ("cat-1-1-2", "Headphones", "cat-1-1", 2),
    ("cat-1-2", "Computer Accessories", "cat-1", 2),
    ("cat-2", "Clothing", None, 2),
    ("cat-2-1", "Men's Clothing", "cat-2", 1),
    ("cat-2-2", "Women's Clothing", "cat-2", 2),
    ("cat-3", "Home & Garden", None, 3),
    ("cat-4", "Sports & Outdoors", None, 4),
    ("cat-5", "Books", None, 5),
]

# (id, name, sku, price, stock, category_id)
SIMPLE_PRODUCTS = [
    ("prod-1", "Wireless Bluetooth Headphones", "WBH-001", 79.99, 50, "cat-1-1-2"),
    ("prod-2", "Smart Watch Pro", "SWP-002", 199.99, 30, "cat-1-1-1"),
    ("prod-3", "4K Webcam", "WEB-003", 89.99, 25, "cat-1-2"),
    ("prod-5", "Denim Jeans - Slim Fit", "JNS-005", 59.99, 75, "cat-2"),
    ("prod-6", "Winter Jacket", "JKT-006", 129.99, 40, "cat-2"),
]

# (size, color, sku suffix, stock)
TSHIRT_VARIANTS = [
    ("Small", "White", "WH-S", 25),
    ("Medium", "White", "WH-M", 30),
    ("Large", "White", "WH-L", 28),
    ("XL", "White", "WH-XL", 20),
    ("Small", "Black", "BK-S", 22),
    ("Medium", "Black", "BK-M", 35),
    ("Large", "Black", "BK-L", 32),
    ("XL", "Black", "BK-XL", 18),
]

# (id, tenant_id, market_id, name, legacy key, status, created_by)
API_KEYS = [
    ("key-1", "tenant-a", "market-1", "Production API Key", "sk_live_demo_key_12345", "active", "admin@demoretail.com"),
    ("key-2", "tenant-a", "market-1", "Development API Key", "sk_dev_test_67890", "active", "admin@demoretail.com"),
    ("key-3", "tenant-a", "market-2", "Airport Store Key", "sk_live_airport_11111", "active", "admin@demoretail.com"),
    ("key-4", "tenant-a", "market-3", "Online Store - Main", "sk_live_online_22222", "active", "admin@demoretail.com"),
    ("key-5", "tenant-a", "market-3", "Online Store - Backup", "sk_live_online_backup_33333", "active", "admin@demoretail.com"),
    ("key-6", "tenant-a", "market-3", "Online Store - Testing", "sk_test_online_44444", "revoked", "admin@demoretail.com"),
    ("key-7", "tenant-b", "market-4", "Mall Store API", "sk_live_mall_55555", "active", "contact@testretail.com"),
    ("key-8", "tenant-c", "market-6", "Sample Corp - Production", "sk_live_sample_66666", "active", "info@samplecorp.com"),
    ("key-9", "tenant-c", "market-6", "Sample Corp - Development", "sk_dev_sample_77777", "active", "info@samplecorp.com"),
]


class SeedService:

    def __init__(self, db: Session):
        self.db = db

    def is_empty(self) -> bool:
        return self.db.query(Tenant).count() == 0

    def seed_if_empty(self) -> bool:
        """
        Seed demo data when no tenant exists yet

        Returns:
            True if data was written
        """
        if not self.is_empty():
            logger.info("Database already contains data, skipping seed")
            return False

        self.seed()
        return True

    def seed(self) -> None:
        now = utcnow()
        password_hash = hash_password(SEED_PASSWORD)

        for user_id, email, name, role, tenant_id, market_ids in USERS:
            self.db.add(User(
                id=user_id, email=email, display_name=name, password_hash=password_hash,
                role=role, tenant_id=tenant_id, assigned_market_ids=market_ids,
                is_active=True, created_at=now,
            ))

        for data in TENANTS:
            self.db.add(Tenant(status="active", updated_at=now, **data))
            for status in build_default_statuses(data["id"]):
                status.created_at = data["created_at"]
                self.db.add(status)

        for market_id, tenant_id, name, code, market_type, tz, prefix, tax_rate, key_count in MARKETS:
            self.db.add(Market(
                id=market_id, tenant_id=tenant_id, name=name, code=code, type=market_type,
                status="active", currency="USD", timezone=tz,
                settings={
                    "order_prefix": prefix,
                    "tax_rate": tax_rate,
                    "shipping_zones": [],
                    "custom_property_templates": [],
                },
                api_key_count=key_count, created_at=now, updated_at=now,
            ))

        for category_id, name, parent_id, order in CATEGORIES:
            self.db.add(Category(
                id=category_id, tenant_id="tenant-a", market_id="market-1", name=name,
                parent_id=parent_id, display_order=order, created_at=now, updated_at=now,
            ))

        for product_id, name, sku, price, stock, category_id in SIMPLE_PRODUCTS:
            self.db.add(self._product(
                product_id, name, sku=sku, price=Decimal(str(price)), stock_quantity=stock,
                low_stock_threshold=10, category_ids=[category_id], now=now,
            ))

        variants = [
            {
                "id": f"var-{i}",
                "sku": f"TSH-004-{suffix}",
                "price": 19.99,
                "sale_price": None,
                "stock_quantity": stock,
                "low_stock_threshold": 5,
                "images": None,
                "options": {"Size": size, "Color": color},
                "status": "active",
                "is_default": i == 1,
            }
            for i, (size, color, suffix, stock) in enumerate(TSHIRT_VARIANTS, start=1)
        ]
        self.db.add(self._product(
            "prod-4", "Classic Cotton T-Shirt", category_ids=["cat-2"], now=now,
            has_variants=True,
            variant_options=[
                {"name": "Size", "values": ["Small", "Medium", "Large", "XL"]},
                {"name": "Color", "values": ["White", "Black"]},
            ],
            variants=variants,
        ))

        for key_id, tenant_id, market_id, name, key, status, created_by in API_KEYS:
            self.db.add(ApiKey(
                id=key_id, tenant_id=tenant_id, market_id=market_id, name=name,
                key_hash=f"hash_of_{key}", last_four_chars=key[-4:], status=status,
                created_at=now - timedelta(days=30), created_by=created_by,
                revoked_at=now if status == "revoked" else None,
                revoked_by=created_by if status == "revoked" else None,
            ))

        self.db.commit()
        logger.info(
            f"Seeded {len(TENANTS)} tenants, {len(MARKETS)} markets, {len(USERS)} users, "
            f"{len(SIMPLE_PRODUCTS) + 1} products and {len(API_KEYS)} API keys"
        )

    @staticmethod
    def _product(product_id, name, now, **fields) -> Product:
        return Product(
            id=product_id, version=1, tenant_id="tenant-a", market_id="market-1",
            name=name, description=f"{name} from the demo catalog", status="active",
            currency="USD", images=[], is_current_version=True,
            version_created_at=now, version_created_by="system",
            created_at=now, updated_at=now, **fields,
        )
