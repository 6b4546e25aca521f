from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Dict, List, Optional

from app.database import get_db
from app.services.product_service import ProductService, utcnow
from app.services.sample_data import sample_products
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductView,
    SuccessResponse,
    BulkImportResponse,
    ErrorResponse,
    InventoryStats,
)

router = APIRouter(prefix="/products", tags=["Products"])

BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


def get_now() -> datetime:
    """Dependency fixing the evaluation time of one request."""
    return utcnow()


@router.get(
    "",
    response_model=List[ProductView],
    summary="List all products",
    description="Get every product with its derived availability and discounted price."
)
def list_products(
    search: Optional[str] = Query(None, description="Search by name, id or category"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now)
):
    """Get all products as views."""
    service = ProductService(db, now)
    return service.list_views(search)


@router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
    summary="Create a new product",
    description="Create a product. Fails if the id already exists."
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **id**: Unique product code (required)
    - **name**, **category**: Non-empty strings (required)
    - **price**, **quantity**: Non-negative numbers (required)
    - **expiryDate**: ISO date, omit or null if the product never expires
    - **discount**: Percentage off the price, default 0
    """
    service = ProductService(db)
    service.create(product_data)
    return SuccessResponse()


@router.post(
    "/bulk",
    response_model=BulkImportResponse,
    responses=BAD_REQUEST,
    summary="Bulk import products",
    description="Insert or replace a list of products. Either every row is applied or none is."
)
def bulk_import_products(
    products: List[ProductCreate] = Body(..., description="Products to insert or replace"),
    db: Session = Depends(get_db)
):
    """Existing ids are overwritten; a single bad row rejects the whole batch."""
    service = ProductService(db)
    count = service.bulk_import(products)
    return BulkImportResponse(count=count)


@router.get(
    "/sample",
    response_model=List[ProductCreate],
    summary="Sample products",
    description="Demo products ready to send to the bulk import endpoint."
)
def get_sample_products():
    return sample_products()


@router.get(
    "/expiring",
    response_model=List[ProductView],
    summary="Products expiring soon",
    description="Products whose expiry date falls between now and the end of the window (7 days by default)."
)
def list_expiring_products(
    days: Optional[int] = Query(None, ge=1, le=365, description="Window size in days"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now)
):
    """Already-expired products are not included."""
    service = ProductService(db, now)
    return service.expiring(days)


@router.get(
    "/stats",
    response_model=InventoryStats,
    summary="Dashboard statistics",
    description="Product count, available count, total stock value and expiring-soon count."
)
def get_inventory_stats(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now)
):
    service = ProductService(db, now)
    return service.stats()


@router.get(
    "/report/value",
    response_model=Dict[str, float],
    summary="Stock value by category",
    description="Sum of discountedPrice * quantity per category, rounded to 2 decimal places."
)
def get_value_report(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now)
):
    service = ProductService(db, now)
    return service.value_report()


@router.get(
    "/report/category/{category}",
    response_model=List[ProductView],
    summary="Products in a category",
    description="Products whose category matches exactly (case-sensitive)."
)
def get_category_report(
    category: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now)
):
    service = ProductService(db, now)
    return service.category_report(category)


@router.put(
    "/{product_id}",
    response_model=SuccessResponse,
    responses=BAD_REQUEST,
    summary="Update a product",
    description="Replace every field of a product. All fields must be supplied."
)
def update_product(
    product_id: str,
    product_data: ProductUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a product.

    Updating an id that does not exist changes nothing and still succeeds.
    """
    service = ProductService(db)
    service.update(product_id, product_data)
    return SuccessResponse()


@router.delete(
    "/{product_id}",
    response_model=SuccessResponse,
    summary="Delete a product",
    description="Delete a product by id. Deleting a missing id succeeds."
)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db)
):
    """Delete a product."""
    service = ProductService(db)
    service.delete(product_id)
    return SuccessResponse()
