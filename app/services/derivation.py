from datetime import date, datetime, time, timedelta, timezone
from decimal import Context, Decimal, ROUND_HALF_UP, localcontext
from typing import Optional
import math

from app.config import DEFAULT_EXPIRY_WINDOW_DAYS
from app.schemas.product import ProductView, StockStatus

TWO_PLACES = Decimal("0.01")

# Wide enough for any float price times any stored quantity, to the cent
MONEY_CONTEXT = Context(prec=700, rounding=ROUND_HALF_UP)


def to_decimal(value) -> Decimal:
    """Convert a stored float to Decimal without binary noise."""
    return Decimal(str(value))


def round_money(value: Decimal) -> float:
    """Round half-up to 2 decimal places."""
    with localcontext(MONEY_CONTEXT):
        return float(value.quantize(TWO_PLACES))


def ensure_aware(now: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def expiry_instant(expiry_date: date) -> datetime:
    """A product expires at the start of its expiry date, UTC."""
    return datetime.combine(expiry_date, time.min, tzinfo=timezone.utc)


def discounted_price(price: float, discount: float) -> float:
    with localcontext(MONEY_CONTEXT):
        return round_money(to_decimal(price) * (1 - to_decimal(discount) / 100))


def is_available(expiry_date: Optional[date], now: datetime) -> bool:
    if expiry_date is None:
        return True
    return expiry_instant(expiry_date) > ensure_aware(now)


def days_remaining(expiry_date: Optional[date], now: datetime) -> Optional[int]:
    """Whole days until expiry, rounded up. Negative once expired."""
    if expiry_date is None:
        return None
    delta = expiry_instant(expiry_date) - ensure_aware(now)
    return math.ceil(delta / timedelta(days=1))


def stock_status(
    expiry_date: Optional[date],
    now: datetime,
    window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS
) -> StockStatus:
    if not is_available(expiry_date, now):
        return StockStatus.UNAVAILABLE
    if expiry_date is not None:
        if expiry_instant(expiry_date) <= ensure_aware(now) + timedelta(days=window_days):
            return StockStatus.EXPIRING_SOON
    return StockStatus.AVAILABLE


def derive_view(record, now: datetime, window_days: int = DEFAULT_EXPIRY_WINDOW_DAYS) -> ProductView:
    """
    Build the view of a product record at time `now`.

    Args:
        record: Anything with the product attributes (ORM row or schema)
        now: Evaluation time, shared by every row of one response
        window_days: Size of the expiring-soon window used for `status`

    Returns:
        ProductView with available, discountedPrice, status and daysRemaining
    """
    discount = record.discount if record.discount is not None else 0
    return ProductView(
        id=record.id,
        name=record.name,
        category=record.category,
        price=record.price,
        quantity=record.quantity,
        expiry_date=record.expiry_date,
        discount=discount,
        available=is_available(record.expiry_date, now),
        discounted_price=discounted_price(record.price, discount),
        status=stock_status(record.expiry_date, now, window_days),
        days_remaining=days_remaining(record.expiry_date, now),
    )
