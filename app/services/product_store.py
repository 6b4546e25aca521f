from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Sequence
import logging

from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

# Rows the database refuses, or values its column types cannot hold
REJECTED_WRITES = (IntegrityError, OverflowError)


class ConstraintViolation(Exception):
    """Exception raised when a write breaks a record constraint (e.g. duplicate id)."""
    pass


class PartialBulkFailure(ConstraintViolation):
    """Exception raised when any record of a bulk import fails. Nothing is committed."""
    pass


def _reason(error: Exception) -> Exception:
    return getattr(error, "orig", None) or error


class ProductStore:
    """
    Persistence operations on the products table.

    The session is injected by the caller; the store never opens its own.
    Conflict policy differs by entry point:
    - insert rejects an existing id
    - bulk_upsert replaces an existing id
    - update and delete of a missing id are silent no-ops
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, product_data: ProductCreate) -> Product:
        """
        Insert a new product.

        Raises:
            ConstraintViolation: If the id exists or the row is rejected
        """
        if self.db.get(Product, product_data.id) is not None:
            logger.warning(f"Rejected insert of duplicate product {product_data.id}")
            raise ConstraintViolation(f"Product with ID {product_data.id} already exists")

        product = Product(**product_data.model_dump())
        self.db.add(product)
        try:
            self.db.commit()
        except REJECTED_WRITES as e:
            self.db.rollback()
            logger.warning(f"Rejected insert of product {product_data.id}: {_reason(e)}")
            raise ConstraintViolation(str(_reason(e))) from e
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Product {product.id} created")
        return product

    def bulk_upsert(self, records: Sequence[ProductCreate]) -> int:
        """
        Insert or replace every record in one transaction.

        Each record is flushed as it is merged so a repeated id within the
        batch replaces the earlier row instead of colliding with it.

        Returns:
            Number of records applied

        Raises:
            PartialBulkFailure: If any record fails; the batch is rolled back
        """
        try:
            for record in records:
                self.db.merge(Product(**record.model_dump()))
                self.db.flush()
            self.db.commit()
        except REJECTED_WRITES as e:
            self.db.rollback()
            logger.warning(f"Bulk import of {len(records)} products rolled back: {_reason(e)}")
            raise PartialBulkFailure(str(_reason(e))) from e
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Bulk import applied {len(records)} products")
        return len(records)

    def update(self, product_id: str, product_data: ProductUpdate) -> bool:
        """
        Replace all mutable fields of a product.

        Returns:
            True if a row was updated, False if the id does not exist
        """
        product = self.db.get(Product, product_id)

        if product is None:
            logger.info(f"Update of missing product {product_id} ignored")
            return False

        for field, value in product_data.model_dump().items():
            setattr(product, field, value)

        try:
            self.db.commit()
        except REJECTED_WRITES as e:
            self.db.rollback()
            logger.warning(f"Rejected update of product {product_id}: {_reason(e)}")
            raise ConstraintViolation(str(_reason(e))) from e
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Product {product_id} updated")
        return True

    def delete(self, product_id: str) -> bool:
        """
        Delete a product if it exists.

        Returns:
            True if deleted, False if there was nothing to delete
        """
        product = self.db.get(Product, product_id)

        if product is None:
            return False

        self.db.delete(product)
        self.db.commit()

        logger.info(f"Product {product_id} deleted")
        return True

    def scan_all(self) -> List[Product]:
        """Every product in storage order."""
        return self.db.query(Product).all()

    def scan_by_category(self, category: str) -> List[Product]:
        """Products whose category matches exactly."""
        return self.db.query(Product).filter(Product.category == category).all()

    def scan_with_expiry(self) -> List[Product]:
        """Products that have an expiry date."""
        return self.db.query(Product).filter(Product.expiry_date.isnot(None)).all()

    def count(self) -> int:
        return self.db.query(Product).count()
