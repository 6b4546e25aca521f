from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import Optional, List, Dict, Sequence

from app.config import get_settings
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductView,
    InventoryStats,
)
from app.services.derivation import derive_view
from app.services.product_store import ProductStore
from app.services import reports


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductService:
    """
    Service class for Product operations.

    Reads go through the store and are derived with a single `now`, fixed
    when the service is created, so one response never mixes evaluation
    times. Writes are passed straight to the store.
    """

    def __init__(self, db: Session, now: Optional[datetime] = None, window_days: Optional[int] = None):
        self.store = ProductStore(db)
        self.now = now or utcnow()
        self.window_days = window_days or get_settings().EXPIRY_WINDOW_DAYS

    def _derive(self, records) -> List[ProductView]:
        return [derive_view(record, self.now, self.window_days) for record in records]

    # Writes

    def create(self, product_data: ProductCreate) -> None:
        self.store.insert(product_data)

    def bulk_import(self, records: Sequence[ProductCreate]) -> int:
        return self.store.bulk_upsert(records)

    def update(self, product_id: str, product_data: ProductUpdate) -> bool:
        return self.store.update(product_id, product_data)

    def delete(self, product_id: str) -> bool:
        return self.store.delete(product_id)

    # Reads

    def list_views(self, search: Optional[str] = None) -> List[ProductView]:
        """
        All products as views.

        Args:
            search: Optional case-insensitive term matched on name, id or category
        """
        views = self._derive(self.store.scan_all())
        if search:
            views = reports.search(views, search)
        return views

    def expiring(self, window_days: Optional[int] = None) -> List[ProductView]:
        """Products expiring within the window (defaults to the configured window)."""
        views = self._derive(self.store.scan_with_expiry())
        return reports.expiring_within(views, self.now, window_days or self.window_days)

    def value_report(self) -> Dict[str, float]:
        return reports.value_by_category(self._derive(self.store.scan_all()))

    def category_report(self, category: str) -> List[ProductView]:
        views = self._derive(self.store.scan_by_category(category))
        return reports.by_category(views, category)

    def stats(self) -> InventoryStats:
        views = self._derive(self.store.scan_all())
        return reports.dashboard_stats(views, self.now, self.window_days)
