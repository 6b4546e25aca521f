from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.product_store import ProductStore

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check that the database is reachable and the products table exists."
)
def readiness_check(db: Session = Depends(get_db)):
    """
    Readiness check for the database.

    Returns the database status and the number of stored products.
    """
    checks = {"database": False}

    try:
        db.execute(text("SELECT 1"))
        checks["products"] = ProductStore(db).count()
        checks["database"] = True
    except SQLAlchemyError as e:
        checks["database_error"] = str(e)

    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }
