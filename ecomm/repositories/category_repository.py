"""
Category Repository - Data Access Layer for Categories
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from ecomm.core.utils import short_id, utcnow
from ecomm.domain.category import Category, CategoryInput
from ecomm.models import Category as CategoryRow


class CategoryRepository:
    """Repository for Category data access"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _map_row_to_category(row: CategoryRow) -> Category:
        return Category.model_validate(row)

    def find_by_id(self, category_id: str) -> Optional[Category]:
        row = self.db.get(CategoryRow, category_id)
        return self._map_row_to_category(row) if row else None

    def find_all(self, tenant_id: Optional[str] = None, market_id: Optional[str] = None) -> List[Category]:
        query = self.db.query(CategoryRow)
        if tenant_id:
            query = query.filter(CategoryRow.tenant_id == tenant_id)
        if market_id:
            query = query.filter(CategoryRow.market_id == market_id)
        rows = query.order_by(CategoryRow.display_order, CategoryRow.name).all()
        return [self._map_row_to_category(r) for r in rows]

    def find_children_ids(self, category_id: str) -> List[str]:
        rows = self.db.query(CategoryRow.id).filter(CategoryRow.parent_id == category_id).all()
        return [r.id for r in rows]

    def find_with_descendants(self, category_id: str) -> List[str]:
        """
        The category id followed by the ids of all its subcategories, recursively

        Args:
            category_id: Root of the subtree (need not exist)

        Returns:
            List of category ids, root first
        """
        result = [category_id]
        seen = {category_id}
        pending = [category_id]

        while pending:
            parent = pending.pop(0)
            for child_id in self.find_children_ids(parent):
                # Guard against cycles in hand-edited data
                if child_id in seen:
                    continue
                seen.add(child_id)
                result.append(child_id)
                pending.append(child_id)

        return result

    def create(self, data: CategoryInput, tenant_id: str, market_id: str) -> Category:
        now = utcnow()
        row = CategoryRow(
            id=data.id or short_id("cat"),
            tenant_id=tenant_id,
            market_id=market_id,
            name=data.name,
            description=data.description,
            parent_id=data.parent_id,
            display_order=data.display_order,
            product_count=0,
            created_at=now,
            updated_at=now,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return self._map_row_to_category(row)

    def update(self, category_id: str, data: CategoryInput) -> Optional[Category]:
        """Tenant, market and created_at are never changed by an update"""
        row = self.db.get(CategoryRow, category_id)
        if row is None:
            return None

        row.name = data.name
        row.description = data.description
        row.parent_id = data.parent_id
        row.display_order = data.display_order
        row.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(row)
        return self._map_row_to_category(row)

    def delete(self, category_id: str) -> bool:
        row = self.db.get(CategoryRow, category_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True
