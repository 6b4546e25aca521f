from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import date
from typing import Optional
import enum

# Storage and arithmetic limits, not business rules
MAX_PRICE = 1_000_000_000_000
MAX_QUANTITY = 2**63 - 1
MAX_DISCOUNT = 1_000_000


class StockStatus(str, enum.Enum):
    """Enum for the display status of a product."""
    AVAILABLE = "available"
    EXPIRING_SOON = "expiring_soon"
    UNAVAILABLE = "unavailable"


class ProductBase(BaseModel):
    """Base schema for Product with the fields every write must supply."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    category: str = Field(..., min_length=1, max_length=255, description="Product category")
    price: float = Field(
        ..., ge=0, le=MAX_PRICE, allow_inf_nan=False,
        description="Original unit price (must be non-negative)"
    )
    quantity: int = Field(
        ..., ge=0, le=MAX_QUANTITY, description="Units in stock (must be non-negative)"
    )
    expiry_date: Optional[date] = Field(
        None, alias="expiryDate", description="Expiry date, omitted or null if it never expires"
    )
    discount: float = Field(
        0, ge=-MAX_DISCOUNT, le=MAX_DISCOUNT, allow_inf_nan=False,
        description="Discount percentage, expected in [0, 100]"
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("expiry_date", mode="before")
    @classmethod
    def blank_expiry_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("discount", mode="before")
    @classmethod
    def missing_discount_is_zero(cls, value):
        return 0 if value is None else value


class ProductCreate(ProductBase):
    """Schema for creating a product, single or in a bulk import."""
    id: str = Field(..., min_length=1, max_length=64, description="Unique product code")


class ProductUpdate(ProductBase):
    """
    Schema for a full-field update. All fields must be resupplied;
    an `id` in the body is ignored in favour of the path parameter.
    """
    pass


class ProductView(BaseModel):
    """Product with server-derived fields. Never persisted."""
    id: str
    name: str
    category: str
    price: float
    quantity: int
    expiry_date: Optional[date] = Field(None, alias="expiryDate")
    discount: float = 0
    available: bool
    discounted_price: float = Field(..., alias="discountedPrice")
    status: StockStatus
    days_remaining: Optional[int] = Field(None, alias="daysRemaining")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class SuccessResponse(BaseModel):
    """Acknowledgement for a write."""
    success: bool = True


class BulkImportResponse(SuccessResponse):
    """Acknowledgement for a bulk import."""
    count: int


class ErrorResponse(BaseModel):
    """Body returned with every 400 response."""
    error: str


class InventoryStats(BaseModel):
    """Dashboard summary over all products."""
    total: int
    available: int
    total_value: float = Field(..., alias="totalValue")
    expiring_soon: int = Field(..., alias="expiringSoon")

    model_config = ConfigDict(populate_by_name=True)
