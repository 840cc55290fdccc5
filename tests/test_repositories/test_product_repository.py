"""
Tests for ProductRepository against an in-memory database

Date: 2025-11-04
"""
from decimal import Decimal

import pytest

from ecomm.domain.product import ProductInput, ProductVariant
from ecomm.models import Product as ProductRow
from ecomm.repositories import CategoryRepository, ProductRepository


@pytest.fixture
def repo(db_session):
    return ProductRepository(db_session)


def _input(**overrides):
    data = dict(name="Desk Lamp", sku="LMP-001", price=Decimal("24.50"), stock_quantity=10)
    data.update(overrides)
    return ProductInput(**data)


class TestProductRepository:
    """Test ProductRepository methods"""

    def test_create_assigns_id_and_version(self, repo):
        product = repo.create(_input(), tenant_id="tenant-a", market_id="market-1")

        assert product.id.startswith("prod-")
        assert product.version == 1
        assert product.is_current_version is True
        assert product.price == Decimal("24.50")

    def test_legacy_category_id_is_merged(self, repo):
        product = repo.create(
            _input(category_ids=["cat-1"], category_id="cat-2"), tenant_id="tenant-a", market_id="market-1"
        )

        assert product.category_ids == ["cat-1", "cat-2"]
        assert product.category_id == "cat-1"

    def test_variants_without_id_get_one(self, repo):
        variant = ProductVariant(sku="LMP-001-BLK", price=Decimal("26.00"), stock_quantity=3)

        product = repo.create(
            _input(has_variants=True, variants=[variant]), tenant_id="tenant-a", market_id="market-1"
        )

        assert product.variants[0].id.startswith("var-")

    def test_update_keeps_exactly_one_current_row(self, repo, db_session):
        created = repo.create(_input(), tenant_id="tenant-a", market_id="market-1")

        repo.update(created.id, _input(name="Desk Lamp II"), user_id="user-2")
        third = repo.update(created.id, _input(name="Desk Lamp III"), user_id="user-2")

        assert third.version == 3
        assert third.created_at == created.created_at
        current = db_session.query(ProductRow).filter(
            ProductRow.id == created.id, ProductRow.is_current_version.is_(True)
        ).all()
        assert [row.version for row in current] == [3]

    def test_update_ignores_scope_in_body(self, repo):
        created = repo.create(_input(), tenant_id="tenant-a", market_id="market-1")

        updated = repo.update(created.id, _input(tenant_id="tenant-b", market_id="market-4"))

        assert updated.tenant_id == "tenant-a"
        assert updated.market_id == "market-1"

    def test_restore_appends_note(self, repo):
        created = repo.create(_input(change_notes="Initial import"), tenant_id="tenant-a", market_id="market-1")
        repo.update(created.id, _input(name="Renamed"))

        restored = repo.restore_version(created.id, 1, user_id="user-3")

        assert restored.is_current_version is True
        assert restored.change_notes.startswith("Initial import | Restored by user-3 at ")
        assert repo.find_current(created.id).version == 1

    def test_restore_unknown_version_returns_none(self, repo):
        created = repo.create(_input(), tenant_id="tenant-a", market_id="market-1")
        assert repo.restore_version(created.id, 9) is None

    def test_adjust_stock_floors_at_zero(self, repo, db_session):
        created = repo.create(_input(stock_quantity=2), tenant_id="tenant-a", market_id="market-1")

        assert repo.adjust_stock(created.id, None, -5)
        db_session.commit()

        assert repo.find_current(created.id).stock_quantity == 0

    def test_adjust_variant_stock(self, repo, db_session):
        variant = ProductVariant(id="var-a", sku="V-A", price=Decimal("5"), stock_quantity=4)
        created = repo.create(
            _input(has_variants=True, variants=[variant]), tenant_id="tenant-a", market_id="market-1"
        )

        repo.adjust_stock(created.id, "var-a", -3)
        db_session.commit()

        assert repo.find_current(created.id).variants[0].stock_quantity == 1
        assert repo.adjust_stock(created.id, "var-missing", 1) is False

    def test_find_all_current_filters(self, repo):
        repo.create(_input(name="Blue Mug", sku="MUG-1"), tenant_id="tenant-a", market_id="market-1")
        repo.create(_input(name="Red Mug", sku="MUG-2", status="draft"), tenant_id="tenant-a", market_id="market-1")
        repo.create(_input(name="Green Mug", sku="MUG-3"), tenant_id="tenant-b", market_id="market-4")

        active = repo.find_all_current(tenant_id="tenant-a", search="mug")
        everything = repo.find_all_current(tenant_id="tenant-a", status="ALL")

        assert [p.name for p in active] == ["Blue Mug"]
        assert len(everything) == 2


class TestCategoryRepository:

    def test_descendants_are_found_recursively(self, seeded_db):
        ids = CategoryRepository(seeded_db).find_with_descendants("cat-1")

        assert ids[0] == "cat-1"
        assert set(ids) == {"cat-1", "cat-1-1", "cat-1-2", "cat-1-1-1", "cat-1-1-2"}

    def test_unknown_root_returns_itself(self, seeded_db):
        assert CategoryRepository(seeded_db).find_with_descendants("cat-404") == ["cat-404"]
