# products_api/repository.py

"""
Data access for products.

Mutations run as single conditional statements keyed by id; an affected-row
count of zero means the product does not exist. There is no separate
existence check that a concurrent request could invalidate.
"""
from typing import List, Optional

from sqlalchemy import not_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import MAX_PRODUCT_ID, Product


def _storable(product_id: int) -> bool:
    """Ids outside the column range cannot exist; binding them would fail in the driver."""
    return 0 < product_id <= MAX_PRODUCT_ID


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Product]:
        """All products, newest id first."""
        return self.db.query(Product).order_by(Product.id.desc()).all()

    def get(self, product_id: int) -> Optional[Product]:
        if not _storable(product_id):
            return None
        return self.db.query(Product).filter(Product.id == product_id).first()

    def create(self, values: dict) -> Product:
        product = Product(**values)
        self.db.add(product)
        self._commit()
        self.db.refresh(product)
        return product

    def update(self, product_id: int, values: dict) -> Optional[Product]:
        """Replaces the editable fields of a product. Returns None when it does not exist."""
        changes = {getattr(Product, field): value for field, value in values.items()}
        return self._update_where_id(product_id, changes)

    def toggle_availability(self, product_id: int) -> Optional[Product]:
        """Negates availability in the database. Returns None when the product does not exist."""
        return self._update_where_id(
            product_id, {Product.availability: not_(Product.availability)}
        )

    def delete(self, product_id: int) -> bool:
        if not _storable(product_id):
            return False
        deleted = (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            return False
        self._commit()
        return True

    def _update_where_id(self, product_id: int, changes: dict) -> Optional[Product]:
        if not _storable(product_id):
            return None
        updated = (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .update(changes, synchronize_session=False)
        )
        if not updated:
            return None
        # Commit expires loaded instances, so the read below sees the new row.
        self._commit()
        return self.get(product_id)

    def _commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
