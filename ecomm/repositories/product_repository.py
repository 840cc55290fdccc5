"""
Product Repository - Data Access Layer for Products

Handles all queries for versioned products and returns Product domain
models. A product id has one row per version; exactly one of them has
is_current_version set.

Date: 2025-11-04
"""
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from ecomm.core.utils import short_id, to_money, utcnow
from ecomm.domain.product import Product, ProductInput
from ecomm.models import Product as ProductRow


def _dump_list(items) -> Optional[list]:
    if items is None:
        return None
    return [item.model_dump(mode="json") for item in items]


class ProductRepository:
    """
    Repository for Product data access

    All queries for products are centralized here.
    Returns Product domain models, except the ``*_row`` helpers used by
    services that adjust stock in place.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _map_row_to_product(row: ProductRow) -> Product:
        """
        Map an ORM row to the Product domain model.

        The ORM attribute for the ``metadata`` column is ``extra_metadata``,
        so mapping is explicit rather than ``from_attributes``.
        """
        return Product(
            id=row.id,
            tenant_id=row.tenant_id,
            market_id=row.market_id,
            name=row.name,
            description=row.description,
            sku=row.sku,
            price=row.price,
            sale_price=row.sale_price,
            status=row.status,
            stock_quantity=row.stock_quantity,
            low_stock_threshold=row.low_stock_threshold,
            currency=row.currency,
            images=row.images or [],
            category_ids=row.category_ids or [],
            metadata=row.extra_metadata,
            has_variants=row.has_variants,
            variant_options=row.variant_options,
            variants=row.variants,
            custom_properties=row.custom_properties,
            change_notes=row.change_notes,
            version=row.version,
            is_current_version=row.is_current_version,
            version_created_at=row.version_created_at,
            version_created_by=row.version_created_by,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _apply_input(row: ProductRow, data: ProductInput) -> None:
        """Copy editable fields from a request body onto a row"""
        variants = _dump_list(data.variants)
        if variants:
            for variant in variants:
                if not variant.get("id"):
                    variant["id"] = short_id("var")

        row.name = data.name
        row.description = data.description
        row.sku = data.sku
        row.price = to_money(data.price) if data.price is not None else None
        row.sale_price = to_money(data.sale_price) if data.sale_price is not None else None
        row.status = data.status
        row.stock_quantity = data.stock_quantity
        row.low_stock_threshold = data.low_stock_threshold
        row.currency = data.currency
        row.images = list(data.images)
        row.category_ids = data.all_category_ids()
        row.extra_metadata = data.metadata
        row.has_variants = data.has_variants
        row.variant_options = _dump_list(data.variant_options)
        row.variants = variants
        row.custom_properties = _dump_list(data.custom_properties)
        row.change_notes = data.change_notes

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_current_row(self, product_id: str) -> Optional[ProductRow]:
        return (
            self.db.query(ProductRow)
            .filter(ProductRow.id == product_id, ProductRow.is_current_version.is_(True))
            .first()
        )

    def find_current(self, product_id: str) -> Optional[Product]:
        """
        Find the current version of a product

        Returns:
            Product or None if not found
        """
        row = self.find_current_row(product_id)
        return self._map_row_to_product(row) if row else None

    def find_all_current(
        self,
        tenant_id: Optional[str] = None,
        market_id: Optional[str] = None,
        status: Optional[str] = None,
        category_ids: Optional[Iterable[str]] = None,
        search: Optional[str] = None,
    ) -> List[Product]:
        """
        Find current product versions with filters

        Args:
            tenant_id: Filter by tenant
            market_id: Filter by market
            status: Case-insensitive status; None defaults to "active", "all" disables
            category_ids: Keep products in any of these categories
            search: Case-insensitive match on name, sku or description

        Returns:
            Products ordered by name
        """
        query = self.db.query(ProductRow).filter(ProductRow.is_current_version.is_(True))

        if tenant_id:
            query = query.filter(ProductRow.tenant_id == tenant_id)
        if market_id:
            query = query.filter(ProductRow.market_id == market_id)

        effective_status = status or "active"
        if effective_status.lower() != "all":
            query = query.filter(func.lower(ProductRow.status) == effective_status.lower())

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                ProductRow.name.ilike(pattern)
                | ProductRow.sku.ilike(pattern)
                | ProductRow.description.ilike(pattern)
            )

        rows = query.order_by(ProductRow.name).all()

        # Category membership lives in a JSON array; filter portably in Python
        if category_ids is not None:
            wanted = set(category_ids)
            rows = [r for r in rows if wanted.intersection(r.category_ids or [])]

        return [self._map_row_to_product(r) for r in rows]

    def find_versions(self, product_id: str) -> List[Product]:
        """All versions, newest first"""
        rows = (
            self.db.query(ProductRow)
            .filter(ProductRow.id == product_id)
            .order_by(ProductRow.version.desc())
            .all()
        )
        return [self._map_row_to_product(r) for r in rows]

    def find_version(self, product_id: str, version: int) -> Optional[Product]:
        row = self.db.get(ProductRow, (product_id, version))
        return self._map_row_to_product(row) if row else None

    def count_in_category(self, category_id: str) -> int:
        """Current versions that reference the category"""
        rows = (
            self.db.query(ProductRow.category_ids)
            .filter(ProductRow.is_current_version.is_(True))
            .all()
        )
        return sum(1 for (ids,) in rows if category_id in (ids or []))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, data: ProductInput, tenant_id: str, market_id: str) -> Product:
        """
        Insert version 1 of a new product

        Args:
            data: Request body
            tenant_id: Owning tenant (already resolved from body or headers)
            market_id: Owning market

        Returns:
            Created product
        """
        now = utcnow()
        row = ProductRow(
            id=data.id or short_id("prod"),
            version=1,
            tenant_id=tenant_id,
            market_id=market_id,
            is_current_version=True,
            version_created_at=now,
            version_created_by=data.version_created_by or "system",
            created_at=now,
            updated_at=now,
        )
        self._apply_input(row, data)

        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return self._map_row_to_product(row)

    def update(self, product_id: str, data: ProductInput, user_id: str = "system") -> Optional[Product]:
        """
        Append a new version and make it current

        Tenant, market and created_at are carried over from the current
        version regardless of the body.

        Returns:
            The new current version, or None if the product does not exist
        """
        current = self.find_current_row(product_id)
        if current is None:
            return None

        max_version = (
            self.db.query(func.max(ProductRow.version))
            .filter(ProductRow.id == product_id)
            .scalar()
        )

        current.is_current_version = False
        self.db.flush()

        now = utcnow()
        row = ProductRow(
            id=product_id,
            version=max_version + 1,
            tenant_id=current.tenant_id,
            market_id=current.market_id,
            is_current_version=True,
            version_created_at=now,
            version_created_by=user_id,
            created_at=current.created_at,
            updated_at=now,
        )
        self._apply_input(row, data)

        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return self._map_row_to_product(row)

    def delete(self, product_id: str) -> bool:
        """Delete every version. Returns False when the id is unknown"""
        deleted = (
            self.db.query(ProductRow)
            .filter(ProductRow.id == product_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0

    def restore_version(self, product_id: str, version: int, user_id: str = "system") -> Optional[Product]:
        """
        Make an older version current again by swapping the current flag

        A note ``Restored by <user> at <timestamp>`` is appended to the
        restored version's change notes.
        """
        target = self.db.get(ProductRow, (product_id, version))
        if target is None:
            return None

        current = self.find_current_row(product_id)
        if current is None:
            return None

        current.is_current_version = False
        target.is_current_version = True

        note = f"Restored by {user_id} at {utcnow():%Y-%m-%d %H:%M:%S}"
        target.change_notes = f"{target.change_notes} | {note}" if target.change_notes else note

        self.db.commit()
        self.db.refresh(target)
        return self._map_row_to_product(target)

    def set_stock(self, product_id: str, stock_quantity: int) -> bool:
        """Overwrite stock on the current version without creating a version"""
        row = self.find_current_row(product_id)
        if row is None:
            return False

        row.stock_quantity = stock_quantity
        row.updated_at = utcnow()
        self.db.commit()
        return True

    def adjust_stock(self, product_id: str, variant_id: Optional[str], delta: int) -> bool:
        """
        Add ``delta`` to the stock of a product or one of its variants

        Negative results are floored at 0. Does not commit; callers commit
        once per order transition.
        """
        row = self.find_current_row(product_id)
        if row is None:
            return False

        if variant_id:
            variants = [dict(v) for v in (row.variants or [])]
            for variant in variants:
                if variant.get("id") == variant_id:
                    variant["stock_quantity"] = max(0, int(variant.get("stock_quantity") or 0) + delta)
                    break
            else:
                return False
            row.variants = variants
            flag_modified(row, "variants")
        else:
            if row.stock_quantity is None:
                return False
            row.stock_quantity = max(0, row.stock_quantity + delta)

        row.updated_at = utcnow()
        return True
