"""
Tests for tenant, market, API key, order status and file storage services

Date: 2025-11-04
"""
from datetime import timedelta

import pytest

from ecomm.core.auth import Principal, hash_api_key
from ecomm.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from ecomm.core.utils import utcnow
from ecomm.domain.api_key import ApiKeyCreate
from ecomm.domain.market import CustomPropertyTemplate
from ecomm.domain.order_status import OrderStatusCreate
from ecomm.models import ApiKey, Order
from ecomm.services.api_key_service import ApiKeyService
from ecomm.services.file_storage_service import FileStorageService, UploadRejected
from ecomm.services.market_service import MarketService
from ecomm.services.order_status_service import OrderStatusService
from ecomm.services.tenant_service import TenantService, slugify


class TestTenantService:

    def test_slugify(self):
        assert slugify("  Demo Retail  Group! ") == "demo-retail-group"

    def test_user_with_assigned_markets_sees_only_those(self, seeded_db):
        principal = Principal(id="user-3", tenant_id="tenant-a", market_ids=["market-1", "market-9"])

        info = TenantService(seeded_db).get_tenant_info("tenant-a", principal)

        assert [m.id for m in info.markets] == ["market-1"]

    def test_superadmin_without_tenant_is_forbidden(self, seeded_db):
        with pytest.raises(ForbiddenError):
            TenantService(seeded_db).get_tenant_info("tenant-a", Principal(id="user-1", role="SUPERADMIN"))


class TestMarketService:

    def test_unknown_tenant(self, seeded_db):
        from ecomm.domain.market import MarketCreate

        with pytest.raises(NotFoundError):
            MarketService(seeded_db).create_market(MarketCreate(tenant_id="tenant-x", name="X", code="X-1"))

    def test_templates_replace_previous_ones(self, seeded_db):
        service = MarketService(seeded_db)
        service.replace_property_templates("market-2", [CustomPropertyTemplate(name="Brand")])

        templates = service.replace_property_templates(
            "market-2", [CustomPropertyTemplate(name="Origin", sort_order=2)]
        )

        assert [t.name for t in templates] == ["Origin"]
        assert float(service.get_market("market-2").settings.tax_rate) == 0.0875


class TestApiKeyService:

    def test_created_key_is_stored_hashed(self, seeded_db):
        created = ApiKeyService(seeded_db).create_key("market-5", ApiKeyCreate(name="Outlet POS"), created_by="user-2")

        row = seeded_db.get(ApiKey, created.id)
        assert row.key_hash == hash_api_key(created.key)
        assert row.last_four_chars == created.key[-4:]
        assert row.created_by == "user-2"

    def test_blank_name_is_rejected(self, seeded_db):
        with pytest.raises(BadRequestError):
            ApiKeyService(seeded_db).create_key("market-5", ApiKeyCreate(name="   "))

    def test_future_expiry_is_accepted(self, seeded_db):
        data = ApiKeyCreate(name="Temp", expires_at=utcnow() + timedelta(days=1))
        created = ApiKeyService(seeded_db).create_key("market-5", data)
        assert created.key

    def test_unknown_market(self, seeded_db):
        with pytest.raises(NotFoundError):
            ApiKeyService(seeded_db).list_keys("market-404")


class TestOrderStatusService:

    def test_status_in_use_cannot_be_deleted(self, seeded_db):
        service = OrderStatusService(seeded_db)
        custom = service.create_status("tenant-a", OrderStatusCreate(name="Packed", code="packed"))
        seeded_db.add(Order(
            id="order-1", tenant_id="tenant-a", market_id="market-1", order_number="DT-1",
            status="packed", customer={}, shipping_address={}, items=[],
        ))
        seeded_db.commit()

        with pytest.raises(BadRequestError) as exc_info:
            service.delete_status("tenant-a", custom.id)

        assert exc_info.value.suggestion == "You can deactivate the status instead"

    def test_duplicate_code_conflicts(self, seeded_db):
        with pytest.raises(ConflictError):
            OrderStatusService(seeded_db).create_status("tenant-a", OrderStatusCreate(name="Paid again", code="paid"))

    def test_statuses_are_tenant_scoped(self, seeded_db):
        with pytest.raises(NotFoundError):
            OrderStatusService(seeded_db).get_status("tenant-b", "status-tenant-a-paid")


class TestFileStorageService:

    def test_rejects_unsafe_segments(self, tmp_path):
        storage = FileStorageService(root=str(tmp_path))

        with pytest.raises(BadRequestError):
            storage.save("../etc", "market-1", "a.png", b"abc")

    def test_validate_normalizes_extension(self, tmp_path):
        storage = FileStorageService(root=str(tmp_path))
        assert storage.validate("Photo.JPEG", 10) == ".jpeg"

    def test_validate_rejects_unknown_type(self, tmp_path):
        with pytest.raises(UploadRejected):
            FileStorageService(root=str(tmp_path)).validate("archive.zip", 10)

    def test_delete_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            FileStorageService(root=str(tmp_path)).delete("tenant-a", "market-1", "nope.png")
