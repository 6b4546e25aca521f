from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal, localcontext
from typing import Iterable, List, Dict

from app.config import DEFAULT_EXPIRY_WINDOW_DAYS
from app.schemas.product import ProductView, InventoryStats
from app.services.derivation import (
    MONEY_CONTEXT,
    ensure_aware,
    expiry_instant,
    round_money,
    to_decimal,
)


def expiring_within(
    views: Iterable[ProductView],
    now: datetime,
    window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS
) -> List[ProductView]:
    """
    Select views that expire between now and now + window_days, both inclusive.

    Already-expired stock and stock without an expiry date are excluded.
    """
    start = ensure_aware(now)
    end = start + timedelta(days=window_days)
    return [
        view for view in views
        if view.expiry_date is not None
        and start <= expiry_instant(view.expiry_date) <= end
    ]


def _stock_value(view: ProductView) -> Decimal:
    return to_decimal(view.discounted_price) * view.quantity


def value_by_category(views: Iterable[ProductView]) -> Dict[str, float]:
    """
    Total stock value (discountedPrice * quantity) per category.

    Sums are exact and each category total is rounded once, after summation.
    """
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    with localcontext(MONEY_CONTEXT):
        for view in views:
            totals[view.category] += _stock_value(view)
    return {category: round_money(total) for category, total in totals.items()}


def by_category(views: Iterable[ProductView], category: str) -> List[ProductView]:
    """Exact, case-sensitive category match."""
    return [view for view in views if view.category == category]


def search(views: Iterable[ProductView], term: str) -> List[ProductView]:
    """Case-insensitive substring match on name, id or category."""
    needle = term.lower()
    return [
        view for view in views
        if needle in view.name.lower()
        or needle in view.id.lower()
        or needle in view.category.lower()
    ]


def dashboard_stats(
    views: Iterable[ProductView],
    now: datetime,
    window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS
) -> InventoryStats:
    """Headline numbers for the dashboard."""
    views = list(views)
    with localcontext(MONEY_CONTEXT):
        total_value = sum((_stock_value(view) for view in views), Decimal(0))
    return InventoryStats(
        total=len(views),
        available=sum(1 for view in views if view.available),
        total_value=round_money(total_value),
        expiring_soon=len(expiring_within(views, now, window_days)),
    )
